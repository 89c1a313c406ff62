"""Collection interfaces for list harvesting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from xlist_scraper.browser.session import ListSession
from xlist_scraper.models import StopReason, Tweet


class LoopState(str, Enum):
    INITIALIZING = "initializing"
    WAITING_FOR_CONTENT = "waiting_for_content"
    HARVESTING = "harvesting"
    SCROLLING = "scrolling"
    DONE = "done"


@dataclass(frozen=True)
class CollectionStats:
    target_url: str
    rounds: int
    observed_items: int
    unique_items: int
    stall_rounds: int
    stop_reason: StopReason


@dataclass(frozen=True)
class CollectionBatch:
    items: tuple[Tweet, ...]
    stats: CollectionStats


class Collector(Protocol):
    def collect(self, session: ListSession, *, target_url: str, max_tweets: int) -> CollectionBatch:
        """Harvest records from an already-navigated session."""
