"""Collector contracts."""

from .base import CollectionBatch, CollectionStats, Collector, LoopState
from .timeline import HarvestBounds, ListCollector

__all__ = [
    "CollectionBatch",
    "CollectionStats",
    "Collector",
    "HarvestBounds",
    "ListCollector",
    "LoopState",
]
