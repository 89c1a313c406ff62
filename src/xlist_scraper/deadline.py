"""Whole-session deadline shared by every suspension point of one target."""

from __future__ import annotations

from collections.abc import Callable
import threading
import time

from xlist_scraper.errors import ScrapeCancelledError, ScrapeTimeoutError

ClockFn = Callable[[], float]


class Deadline:
    """Absolute deadline derived from a timeout; never reset once created."""

    def __init__(
        self,
        timeout_ms: int,
        *,
        cancel_event: threading.Event | None = None,
        clock: ClockFn = time.monotonic,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0.")
        self.timeout_ms = timeout_ms
        self._cancel_event = cancel_event
        self._clock = clock
        self._expires_at = clock() + timeout_ms / 1000.0

    @property
    def cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def remaining_ms(self) -> int:
        return max(0, int((self._expires_at - self._clock()) * 1000))

    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def check(self, stage: str) -> None:
        if self.cancelled:
            raise ScrapeCancelledError(f"Scrape cancelled during {stage}.")
        if self.expired():
            raise ScrapeTimeoutError(
                f"Scrape exceeded its {self.timeout_ms}ms deadline during {stage}."
            )

    def bounded(self, ms: int, stage: str) -> int:
        """Clamp a wait to the remaining budget, raising if none is left."""
        self.check(stage)
        return max(1, min(ms, self.remaining_ms()))
