"""Selector-pack defaults for list pages."""

from __future__ import annotations

from collections.abc import Mapping

SelectorPack = Mapping[str, tuple[str, ...]]

DEFAULT_SELECTOR_PACK: dict[str, tuple[str, ...]] = {
    "tweet.article": (
        'article[data-testid="tweet"]',
        'article:has([data-testid="tweetText"])',
    ),
    "tweet.status_link": ('a[href*="/status/"]',),
    # Preference order: content marker, language attribute, auto-direction container.
    "tweet.text": ('[data-testid="tweetText"]', "[lang]", 'div[dir="auto"]'),
    "tweet.social_context": ('[data-testid="socialContext"]',),
    # Embedded quote cards only; thread and media anchors are plain links.
    "tweet.quote_link": ('[role="link"][href*="/status/"]',),
    "tweet.reply_button": ('[data-testid="reply"]',),
    "tweet.retweet_button": ('[data-testid="retweet"]', '[data-testid="unretweet"]'),
    "tweet.like_button": ('[data-testid="like"]', '[data-testid="unlike"]'),
    "tweet.count": ('[data-testid$="count"]', "span:not([data-testid])"),
    "tweet.time": ("time[datetime]",),
    "tweet.relative_time": ("time",),
    "blocker.login": (
        'text="Sign in to X"',
        'text="Log in to X"',
        'text="Sign in"',
        'text="Log in"',
        '[aria-label="Sign in"]',
        '[data-testid="login"]',
    ),
    "blocker.rate_limit": (
        'text="Rate limit exceeded"',
        'text="Too many requests"',
        "text=/rate limit/i",
        "text=/too many/i",
    ),
    "feed.end": (
        "text=\"You're all caught up\"",
        'text="Nothing to see here"',
        "text=\"That's all for now\"",
    ),
}

LOGIN_URL_PATHS = ("/i/flow/login", "/login")
REPOST_MARKERS = ("reposted", "retweeted")


def default_selector_pack() -> dict[str, tuple[str, ...]]:
    """Return a mutable copy of built-in selector defaults."""
    return {key: tuple(value) for key, value in DEFAULT_SELECTOR_PACK.items()}


def joined(selectors: SelectorPack, key: str) -> str:
    """Join a selector group into one comma-separated CSS selector list."""
    return ", ".join(selectors[key])
