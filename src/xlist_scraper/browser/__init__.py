"""Browser contracts."""

from .blockers import detect_blocker, is_end_of_feed, raise_for_blocker
from .session import (
    BrowserSessionOptions,
    ListSession,
    PlaywrightBrowserSession,
    SessionFactory,
    open_playwright_session,
)

__all__ = [
    "BrowserSessionOptions",
    "ListSession",
    "PlaywrightBrowserSession",
    "SessionFactory",
    "detect_blocker",
    "is_end_of_feed",
    "open_playwright_session",
    "raise_for_blocker",
]
