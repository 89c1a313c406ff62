"""Per-list scraping and multi-list orchestration."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
import logging
import threading
import time

from xlist_scraper.browser.blockers import detect_blocker, raise_for_blocker
from xlist_scraper.browser.session import SessionFactory, open_playwright_session
from xlist_scraper.collectors.timeline import ListCollector
from xlist_scraper.config import ScrapeOptions
from xlist_scraper.deadline import ClockFn, Deadline
from xlist_scraper.errors import (
    ErrorKind,
    FieldIssue,
    InternalError,
    ScrapeCancelledError,
    ValidationError,
    XListScraperError,
    classify_exception,
)
from xlist_scraper.extract.urls import is_valid_list_url, normalize_list_url
from xlist_scraper.models import AggregatedResult, ErrorDescriptor, TargetOutcome, Tweet
from xlist_scraper.scheduler.merge import merge_tweets

logger = logging.getLogger(__name__)

ScrapeFn = Callable[..., Sequence[Tweet]]

_LIST_URL_CONSTRAINT = "expected https URL on x.com or twitter.com containing /i/lists/"


def validate_list_urls(urls: Iterable[str], *, field: str = "listURL") -> tuple[str, ...]:
    """Validate every target up front and return them normalized to x.com."""
    targets = list(urls)
    if not targets:
        raise ValidationError.for_field(field, "expected at least one list URL")

    issues = [
        FieldIssue(f"{field}[{index}]", _LIST_URL_CONSTRAINT)
        for index, url in enumerate(targets)
        if not is_valid_list_url(url)
    ]
    if issues:
        raise ValidationError(
            "Invalid list URL(s): " + "; ".join(str(issue) for issue in issues),
            issues,
        )
    return tuple(normalize_list_url(url.strip()) for url in targets)


def scrape_list(
    url: str,
    options: ScrapeOptions,
    *,
    session_factory: SessionFactory = open_playwright_session,
    collector: ListCollector | None = None,
    cancel_event: threading.Event | None = None,
    clock: ClockFn = time.monotonic,
) -> tuple[Tweet, ...]:
    """Scrape one list within a single session deadline; the session is always closed."""
    (target,) = validate_list_urls([url])
    deadline = Deadline(options.timeout_ms, cancel_event=cancel_event, clock=clock)
    session = None
    try:
        session = session_factory(options, deadline)
        session.navigate(target)
        raise_for_blocker(detect_blocker(session.page), target)
        batch = (collector or ListCollector()).collect(
            session,
            target_url=target,
            max_tweets=options.max_tweets,
        )
        return batch.items
    except (ValidationError, ScrapeCancelledError):
        raise
    except XListScraperError as exc:
        if options.partial_ok:
            logger.warning("Returning no tweets for %s (partial_ok): %s", target, exc)
            return ()
        raise
    except Exception as exc:
        if options.partial_ok:
            logger.warning("Returning no tweets for %s (partial_ok): %s", target, exc)
            return ()
        raise InternalError(f"Unexpected failure while scraping '{target}': {exc}") from exc
    finally:
        if session is not None:
            _close_quietly(session, target)


class ListScrapeOrchestrator:
    """Fan list targets out under a concurrency gate and merge their outcomes."""

    def __init__(self, options: ScrapeOptions, *, scrape_fn: ScrapeFn = scrape_list) -> None:
        self._options = options.validate()
        self._scrape_fn = scrape_fn

    @property
    def options(self) -> ScrapeOptions:
        return self._options

    def run(
        self,
        urls: Iterable[str],
        *,
        cancel_event: threading.Event | None = None,
    ) -> AggregatedResult:
        targets = validate_list_urls(urls)
        cancel = cancel_event if cancel_event is not None else threading.Event()
        outcomes: list[TargetOutcome | None] = [None] * len(targets)
        max_workers = min(self._options.concurrency, len(targets))

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="xlist") as executor:
            futures = {
                executor.submit(self._run_target, target, cancel): index
                for index, target in enumerate(targets)
            }
            try:
                for future in as_completed(futures):
                    outcomes[futures[future]] = future.result()
            except KeyboardInterrupt:
                logger.warning("Interrupted; cancelling pending lists and closing open sessions.")
                cancel.set()
                for future in futures:
                    future.cancel()

        if cancel.is_set():
            raise ScrapeCancelledError("Scrape run was cancelled before all lists completed.")

        completed = tuple(outcome for outcome in outcomes if outcome is not None)
        result = AggregatedResult(items=merge_tweets(completed), outcomes=completed)
        logger.info(
            "Scrape run finished: %d list(s) ok, %d failed, %d tweet(s)",
            result.succeeded,
            result.failed,
            len(result.items),
        )
        return result

    def _run_target(self, target: str, cancel: threading.Event) -> TargetOutcome:
        if cancel.is_set():
            return TargetOutcome(
                target_url=target,
                error=ErrorDescriptor(ErrorKind.CANCELLED, "Cancelled before start."),
            )
        try:
            tweets = self._scrape_fn(target, self._options, cancel_event=cancel)
        except Exception as exc:
            kind = classify_exception(exc)
            logger.warning("List %s failed (%s): %s", target, kind.value, exc)
            return TargetOutcome(target_url=target, error=ErrorDescriptor(kind, str(exc)))
        return TargetOutcome(target_url=target, tweets=tuple(tweets))


def run_list_scrape(
    urls: Iterable[str],
    options: ScrapeOptions,
    *,
    scrape_fn: ScrapeFn = scrape_list,
    cancel_event: threading.Event | None = None,
) -> AggregatedResult:
    return ListScrapeOrchestrator(options, scrape_fn=scrape_fn).run(urls, cancel_event=cancel_event)


def _close_quietly(session: object, target: str) -> None:
    try:
        session.close()  # type: ignore[attr-defined]
    except Exception as exc:
        logger.warning("Session teardown for %s failed: %s", target, exc)
