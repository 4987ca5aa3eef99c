"""
Drill kinds: per-content-type entry rules.

Each content type (vocab, grammar, ...) registers a kind that knows:
- which entry fields are required (validate)
- how to show an entry in a mistakes list (display -> primary/secondary)

Entries themselves stay opaque mappings; only the kind looks inside them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class DrillKind(str, Enum):
    """Supported content types."""
    VOCAB = "vocab"
    GRAMMAR = "grammar"
    CORRECTION = "correction"
    TRANSFORM = "transform"


@dataclass(frozen=True)
class MistakeDisplay:
    """Uniform two-line projection of an entry."""

    primary: str
    secondary: str


@dataclass(frozen=True)
class EntryKind:
    """Field layout of one drill kind."""

    kind: DrillKind
    prompt_field: str
    answer_field: str
    typed_answer: bool = False  # graded by comparing typed input to answer_field

    @property
    def required_fields(self) -> tuple[str, str]:
        return (self.prompt_field, self.answer_field)

    def missing_fields(self, entry: Any) -> list[str]:
        if not isinstance(entry, Mapping):
            return list(self.required_fields)
        return [f for f in self.required_fields if not entry.get(f)]

    def validate(self, entry: Any) -> bool:
        """Check if an entry has the required fields for this kind."""
        return not self.missing_fields(entry)

    def display(self, entry: Mapping) -> MistakeDisplay:
        return MistakeDisplay(
            primary=str(entry.get(self.prompt_field, "")),
            secondary=str(entry.get(self.answer_field, "")),
        )


# Kind registry - populated by register()
KINDS: dict[DrillKind, EntryKind] = {}


def register(entry_kind: EntryKind) -> EntryKind:
    """Register an entry kind, replacing any previous one for the same type."""
    KINDS[entry_kind.kind] = entry_kind
    return entry_kind


def get_kind(kind: str | DrillKind) -> EntryKind | None:
    """Get the entry kind for a content type."""
    if isinstance(kind, str):
        try:
            kind = DrillKind(kind.lower())
        except ValueError:
            return None
    return KINDS.get(kind)


register(EntryKind(DrillKind.VOCAB, prompt_field="korean", answer_field="english"))
register(EntryKind(DrillKind.GRAMMAR, prompt_field="pattern", answer_field="meaning"))
register(EntryKind(DrillKind.CORRECTION, "incorrect", "correct", typed_answer=True))
register(EntryKind(DrillKind.TRANSFORM, "given", "correct", typed_answer=True))
