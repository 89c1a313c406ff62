"""List timeline harvesting with dedupe, cap and stall bounds."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
import logging

from xlist_scraper.browser.blockers import detect_blocker, is_end_of_feed, raise_for_blocker
from xlist_scraper.browser.session import ListSession
from xlist_scraper.collectors.base import CollectionBatch, CollectionStats, LoopState
from xlist_scraper.errors import EmptyOrPrivateError, InternalError, XListScraperError
from xlist_scraper.extract.selectors import DEFAULT_SELECTOR_PACK, SelectorPack
from xlist_scraper.extract.tweets import parse_tweet_element
from xlist_scraper.models import StopReason, Tweet

logger = logging.getLogger(__name__)

NowFn = Callable[[], datetime]


@dataclass(frozen=True)
class HarvestBounds:
    initial_wait_ms: int = 12_000
    retry_wait_ms: int = 8_000
    stall_rounds: int = 5
    scroll_settle_ms: int = 1_500
    round_delay_ms: int = 500
    recheck_blockers: bool = False


class ListCollector:
    """Drive wait -> harvest -> scroll rounds until cap, end of feed or stall."""

    def __init__(
        self,
        *,
        selectors: SelectorPack = DEFAULT_SELECTOR_PACK,
        bounds: HarvestBounds = HarvestBounds(),
        now: NowFn | None = None,
    ) -> None:
        self._selectors = selectors
        self._bounds = _validate_bounds(bounds)
        self._now = now
        self.state = LoopState.INITIALIZING

    def collect(self, session: ListSession, *, target_url: str, max_tweets: int) -> CollectionBatch:
        if max_tweets <= 0:
            raise ValueError("max_tweets must be > 0.")

        self.state = LoopState.WAITING_FOR_CONTENT
        self._wait_for_content(session, target_url)

        seen_ids: set[str] = set()
        items: list[Tweet] = []
        observed = 0
        rounds = 0
        stall_rounds = 0

        while True:
            self.state = LoopState.HARVESTING
            new_count, seen_this_round = self._harvest_round(session, seen_ids, items, max_tweets)
            observed += seen_this_round
            rounds += 1

            if len(items) >= max_tweets:
                stop_reason = StopReason.CAP_REACHED
                break
            if is_end_of_feed(session.page, selectors=self._selectors):
                stop_reason = StopReason.END_OF_FEED
                break
            if new_count == 0:
                stall_rounds += 1
                if stall_rounds >= self._bounds.stall_rounds:
                    stop_reason = StopReason.STALLED
                    break
            else:
                stall_rounds = 0

            self.state = LoopState.SCROLLING
            session.scroll_to_bottom()
            session.pause(self._bounds.scroll_settle_ms, "scroll settle")
            session.pause(self._bounds.round_delay_ms, "round delay")
            if self._bounds.recheck_blockers:
                raise_for_blocker(detect_blocker(session.page, selectors=self._selectors), target_url)

        self.state = LoopState.DONE
        logger.info(
            "Harvested %d tweet(s) from %s in %d round(s): %s",
            len(items),
            target_url,
            rounds,
            stop_reason.value,
        )
        stats = CollectionStats(
            target_url=target_url,
            rounds=rounds,
            observed_items=observed,
            unique_items=len(items),
            stall_rounds=stall_rounds,
            stop_reason=stop_reason,
        )
        return CollectionBatch(items=tuple(items), stats=stats)

    def _wait_for_content(self, session: ListSession, target_url: str) -> None:
        if session.wait_for_items(self._bounds.initial_wait_ms):
            return
        logger.debug("No items on %s after initial wait; scrolling once and retrying.", target_url)
        session.scroll_to_bottom()
        if session.wait_for_items(self._bounds.retry_wait_ms):
            return
        raise EmptyOrPrivateError(
            f"No tweets found on '{target_url}'. The list may be empty or private."
        )

    def _harvest_round(
        self,
        session: ListSession,
        seen_ids: set[str],
        items: list[Tweet],
        max_tweets: int,
    ) -> tuple[int, int]:
        try:
            elements = session.current_items()
            now = self._now() if self._now is not None else None
            new_count = 0
            observed = 0
            for element in elements:
                observed += 1
                tweet = parse_tweet_element(element, selectors=self._selectors, now=now)
                if tweet is None or tweet.id in seen_ids:
                    continue
                seen_ids.add(tweet.id)
                items.append(tweet)
                new_count += 1
                if len(items) >= max_tweets:
                    break
            return new_count, observed
        except XListScraperError:
            raise
        except Exception as exc:
            raise InternalError(f"Unexpected failure while harvesting: {exc}") from exc


def _validate_bounds(bounds: HarvestBounds) -> HarvestBounds:
    if bounds.stall_rounds <= 0:
        raise ValueError("stall_rounds must be > 0.")
    for name in ("initial_wait_ms", "retry_wait_ms", "scroll_settle_ms", "round_delay_ms"):
        if getattr(bounds, name) < 0:
            raise ValueError(f"{name} must be >= 0.")
    return bounds
