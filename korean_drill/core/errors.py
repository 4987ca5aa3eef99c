"""
Exception types for the drill engine.

Soft failures (storage, malformed stored data) are caught and logged by the
scheduler; the rest signal caller mistakes and are meant to propagate.
"""

from __future__ import annotations


class DrillError(Exception):
    """Base class for all drill engine errors."""
    pass


class StorageError(DrillError):
    """Raised by a key-value store when a write cannot be completed."""
    pass


class MalformedDataError(DrillError):
    """Raised when a stored record cannot be decoded."""
    pass


class ContentValidationError(DrillError, ValueError):
    """Raised when content entries are missing required fields."""
    pass


class InvalidQualityError(DrillError, ValueError):
    """Raised for a rating outside AGAIN/HARD/GOOD/EASY."""
    pass


class DrillStateError(DrillError, RuntimeError):
    """Raised when a drill session is driven through an invalid transition."""
    pass
