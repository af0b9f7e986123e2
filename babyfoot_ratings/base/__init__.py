"""Rating snapshot model."""

from .snapshots import GameRating, RatingSnapshot, SnapshotArena

__all__ = ["RatingSnapshot", "GameRating", "SnapshotArena"]
