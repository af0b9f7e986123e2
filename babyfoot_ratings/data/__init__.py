"""Records and record stores for the rating engine."""

from .store import InMemoryRecordStore, RecordStore
from .types import Game, Player

__all__ = ["Game", "Player", "RecordStore", "InMemoryRecordStore"]
