"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from korean_drill.core.clock import SECONDS_PER_DAY  # noqa: E402
from korean_drill.core.context import StudyContext  # noqa: E402
from korean_drill.core.pool import DictContentSource  # noqa: E402
from korean_drill.delivery.state_store import MemoryStore  # noqa: E402

# Monday 2026-03-02 12:00 UTC
START_TIME = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc).timestamp()


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = START_TIME):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float = 0.0, days: float = 0.0) -> None:
        self.current += seconds + days * SECONDS_PER_DAY


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """Provide a manual clock starting Monday 2026-03-02 12:00 UTC."""
    return ManualClock()


@pytest.fixture
def memory_store():
    """Provide an empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def sample_content():
    """Provide a small content collection covering every drill kind."""
    return {
        "vocab": {
            "greetings": [
                {"korean": "안녕하세요", "english": "hello"},
                {"korean": "감사합니다", "english": "thank you"},
                {"korean": "죄송합니다", "english": "sorry"},
            ],
            "food": [
                {"korean": "밥", "english": "rice"},
                {"korean": "물", "english": "water"},
            ],
        },
        "grammar": {
            "particles": [
                {"pattern": "은/는", "meaning": "topic marker"},
                {"pattern": "이/가", "meaning": "subject marker"},
            ],
        },
        "correction": {
            "particles": [
                {"incorrect": "저가 학생이에요", "correct": "제가 학생이에요"},
            ],
        },
    }


@pytest.fixture
def context(memory_store, clock, sample_content):
    """Provide a study context wired to in-memory collaborators."""
    return StudyContext.create(memory_store, clock, DictContentSource(sample_content))
