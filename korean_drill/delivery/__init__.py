"""
korean-drill delivery layer.

Terminal adapters around the scheduling engine.

Components:
- StateStore / MemoryStore: key-value persistence
- ContentDeck: JSON content loading and validation
- DebouncedSync / JsonMirror: downstream mirroring of saved state
- drill_cli: Rich terminal interface
"""

from .content_deck import ContentDeck
from .state_store import MemoryStore, StateStore
from .sync import DebouncedSync, JsonMirror, merge_card_maps, pull_into

__all__ = [
    # Persistence
    "StateStore",
    "MemoryStore",
    # Content
    "ContentDeck",
    # Sync
    "DebouncedSync",
    "JsonMirror",
    "merge_card_maps",
    "pull_into",
]
