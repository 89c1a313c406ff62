"""List URL validation and id parsing."""

from __future__ import annotations

import re
from urllib.parse import urlparse, urlunparse

ALLOWED_HOSTS = frozenset({"x.com", "twitter.com", "www.x.com", "www.twitter.com"})
LIST_PATH_MARKER = "/i/lists/"

_LIST_ID_RE = re.compile(r"^\d{1,32}$")
_TWEET_STATUS_RE = re.compile(r"/status/(\d+)")


def is_valid_list_url(url: str | None) -> bool:
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return (
        parsed.scheme == "https"
        and (parsed.hostname or "") in ALLOWED_HOSTS
        and LIST_PATH_MARKER in parsed.path
    )


def normalize_list_url(url: str) -> str:
    """Rewrite any accepted host to ``x.com``; invalid URLs are returned unchanged."""
    if not is_valid_list_url(url):
        return url
    parsed = urlparse(url.strip())
    return urlunparse(parsed._replace(netloc="x.com"))


def extract_list_id(url: str) -> str | None:
    if not is_valid_list_url(url):
        return None
    path = urlparse(url.strip()).path
    segments = [segment for segment in path.split("/") if segment]
    for index, segment in enumerate(segments):
        if segment == "lists" and index + 1 < len(segments):
            candidate = segments[index + 1]
            if _LIST_ID_RE.fullmatch(candidate):
                return candidate
    return None


def extract_tweet_id(href: str | None) -> str | None:
    if not href:
        return None
    match = _TWEET_STATUS_RE.search(href)
    return match.group(1) if match else None
