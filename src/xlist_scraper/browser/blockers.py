"""Login-wall, rate-limit and end-of-feed classification for list pages."""

from __future__ import annotations

import logging
from typing import Any, Protocol
from urllib.parse import urlparse

from xlist_scraper.errors import LoginRequiredError, RateLimitedError
from xlist_scraper.extract.selectors import DEFAULT_SELECTOR_PACK, LOGIN_URL_PATHS, SelectorPack
from xlist_scraper.models import BlockerState

logger = logging.getLogger(__name__)


class ProbePage(Protocol):
    @property
    def url(self) -> str:
        """Current page URL."""

    def query_selector(self, selector: str) -> Any:
        """Return first matching element for selector."""


def detect_blocker(page: ProbePage, *, selectors: SelectorPack = DEFAULT_SELECTOR_PACK) -> BlockerState:
    """Classify the current page; login wins over rate limit, first match wins."""
    if _is_login_url(page) or _any_present(page, selectors["blocker.login"]):
        return BlockerState.LOGIN_REQUIRED
    if _any_present(page, selectors["blocker.rate_limit"]):
        return BlockerState.RATE_LIMITED
    return BlockerState.CLEAR


def raise_for_blocker(state: BlockerState, url: str) -> None:
    if state is BlockerState.LOGIN_REQUIRED:
        raise LoginRequiredError(
            f"Login required to view '{url}'. Provide a cookies file from a signed-in session."
        )
    if state is BlockerState.RATE_LIMITED:
        raise RateLimitedError(f"Rate limited while loading '{url}'. Try again later.")


def is_end_of_feed(page: ProbePage, *, selectors: SelectorPack = DEFAULT_SELECTOR_PACK) -> bool:
    return _any_present(page, selectors["feed.end"])


def _is_login_url(page: ProbePage) -> bool:
    try:
        path = urlparse(str(page.url)).path.rstrip("/")
    except Exception:
        return False
    return path in LOGIN_URL_PATHS


def _any_present(page: ProbePage, selectors: tuple[str, ...]) -> bool:
    for selector in selectors:
        try:
            if page.query_selector(selector) is not None:
                return True
        except Exception as exc:
            logger.debug("Selector probe %r failed: %s", selector, exc)
    return False
