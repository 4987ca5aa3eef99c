"""
Content Deck: JSON content loader.

Each content type lives in its own file named after the type:
    vocab.json    {"greetings": [{"korean": "안녕하세요", "english": "hello"}, ...]}
    grammar.json  {"endings": [{"pattern": "-아요/어요", "meaning": "polite present"}, ...]}

Entries are passed through untouched; validation happens when a pool is built
(or on demand via check()).
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from loguru import logger

from korean_drill.core.errors import ContentValidationError
from korean_drill.core.kinds import get_kind
from korean_drill.core.pool import validate_content

PACKAGED_CONTENT_DIR = Path(__file__).resolve().parent.parent / "data"


class ContentDeck:
    """
    Content source backed by a directory of JSON files.

    Features:
    - Auto-discovery of <type>.json files
    - Per-type category listing and entry counts
    - Eager validation of every loaded type via check()
    """

    def __init__(self, content_dir: Path | None = None):
        """
        Initialize the deck.

        Args:
            content_dir: Directory containing JSON files (default: packaged sample content)
        """
        self.content_dir = content_dir or PACKAGED_CONTENT_DIR
        self._content: dict[str, dict[str, list[Any]]] = {}
        self._files_loaded: list[Path] = []

    @property
    def content_types(self) -> list[str]:
        return sorted(self._content.keys())

    def load(self) -> int:
        """
        Load every known content type found in the directory.

        Returns:
            Number of entries loaded
        """
        self._content.clear()
        self._files_loaded.clear()

        json_files = sorted(self.content_dir.glob("*.json"))
        if not json_files:
            logger.warning(f"No JSON files found in {self.content_dir}")
            return 0

        for json_path in json_files:
            self._load_file(json_path)

        total = self.total_entries
        logger.info(f"ContentDeck loaded: {total} entries from {len(self._files_loaded)} files")
        return total

    def _load_file(self, path: Path) -> None:
        content_type = path.stem
        if get_kind(content_type) is None:
            logger.warning(f"Skipping {path.name}: unknown content type {content_type!r}")
            return

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load {path}: {e}")
            return

        if not isinstance(data, dict):
            logger.error(f"Failed to load {path}: top level must be an object of categories")
            return

        self._content[content_type] = data
        self._files_loaded.append(path)
        logger.debug(f"Loaded {content_type} from {path.name}")

    @property
    def total_entries(self) -> int:
        return sum(
            len(entries)
            for data in self._content.values()
            for entries in data.values()
            if isinstance(entries, list)
        )

    def get(self, content_type: str) -> Mapping[str, Sequence[Any]]:
        """Categories of one content type (empty if not loaded)."""
        return self._content.get(content_type, {})

    def categories(self, content_type: str) -> list[str]:
        return list(self.get(content_type).keys())

    def check(self) -> dict[str, str]:
        """
        Validate every loaded content type.

        Returns:
            Mapping of content type -> error message for the types that failed
        """
        errors: dict[str, str] = {}
        for content_type, data in self._content.items():
            try:
                validate_content(content_type, data)
            except ContentValidationError as e:
                errors[content_type] = str(e)
        return errors

    def get_stats(self) -> dict[str, dict[str, int]]:
        """Entry counts per type and category."""
        return {
            content_type: {
                category: len(entries) if isinstance(entries, list) else 0
                for category, entries in data.items()
            }
            for content_type, data in self._content.items()
        }
