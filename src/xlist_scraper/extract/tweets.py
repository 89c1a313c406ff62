"""Per-article tweet extraction from rendered list items."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
import logging
from typing import Any, Protocol

from xlist_scraper.extract.counts import parse_count
from xlist_scraper.extract.selectors import (
    DEFAULT_SELECTOR_PACK,
    REPOST_MARKERS,
    SelectorPack,
    joined,
)
from xlist_scraper.extract.timestamps import (
    format_twitter_timestamp,
    parse_relative_time,
    parse_twitter_date,
)
from xlist_scraper.extract.urls import extract_tweet_id
from xlist_scraper.models import Tweet

logger = logging.getLogger(__name__)


class ElementLike(Protocol):
    def query_selector(self, selector: str) -> Any:
        """Return first matching descendant or None."""

    def query_selector_all(self, selector: str) -> list[Any]:
        """Return all matching descendants."""

    def get_attribute(self, name: str) -> str | None:
        """Return attribute value or None."""

    def text_content(self) -> str | None:
        """Return the element's text content."""


def parse_tweet_element(
    element: ElementLike,
    *,
    selectors: SelectorPack = DEFAULT_SELECTOR_PACK,
    now: datetime | None = None,
) -> Tweet | None:
    """Parse one rendered article, returning None for anything unparseable."""
    try:
        return _parse(element, selectors, now)
    except Exception as exc:
        logger.debug("Skipping unparseable list item: %s", exc)
        return None


def parse_tweet_elements(
    elements: Iterable[ElementLike],
    *,
    selectors: SelectorPack = DEFAULT_SELECTOR_PACK,
    now: datetime | None = None,
) -> Iterator[Tweet]:
    for element in elements:
        tweet = parse_tweet_element(element, selectors=selectors, now=now)
        if tweet is not None:
            yield tweet


def _parse(element: ElementLike, selectors: SelectorPack, now: datetime | None) -> Tweet | None:
    status_link = element.query_selector(joined(selectors, "tweet.status_link"))
    if status_link is None:
        return None
    tweet_id = extract_tweet_id(status_link.get_attribute("href"))
    if not tweet_id:
        return None

    return Tweet(
        id=tweet_id,
        text=_extract_text(element, selectors),
        retweet_count=_extract_count(element, selectors, "tweet.retweet_button"),
        reply_count=_extract_count(element, selectors, "tweet.reply_button"),
        like_count=_extract_count(element, selectors, "tweet.like_button"),
        # Not exposed by the list UI.
        quote_count=0,
        created_at=_extract_created_at(element, selectors, now),
        bookmark_count=0,
        is_retweet=_is_retweet(element, selectors),
        is_quote=_is_quote(element, selectors, tweet_id),
    )


def _extract_text(element: ElementLike, selectors: SelectorPack) -> str:
    for selector in selectors["tweet.text"]:
        node = element.query_selector(selector)
        if node is not None:
            return (node.text_content() or "").strip()
    return ""


def _is_retweet(element: ElementLike, selectors: SelectorPack) -> bool:
    node = element.query_selector(joined(selectors, "tweet.social_context"))
    if node is None:
        return False
    text = (node.text_content() or "").lower()
    return any(marker in text for marker in REPOST_MARKERS)


def _is_quote(element: ElementLike, selectors: SelectorPack, tweet_id: str) -> bool:
    for link in element.query_selector_all(joined(selectors, "tweet.quote_link")):
        linked_id = extract_tweet_id(link.get_attribute("href"))
        if linked_id and linked_id != tweet_id:
            return True
    return False


def _extract_count(element: ElementLike, selectors: SelectorPack, key: str) -> int:
    button = None
    for selector in selectors[key]:
        button = element.query_selector(selector)
        if button is not None:
            break
    if button is None:
        return 0
    count_node = button.query_selector(joined(selectors, "tweet.count"))
    if count_node is None:
        return 0
    return parse_count(count_node.text_content())


def _extract_created_at(element: ElementLike, selectors: SelectorPack, now: datetime | None) -> str:
    time_node = element.query_selector(joined(selectors, "tweet.time"))
    if time_node is not None:
        parsed = parse_twitter_date(time_node.get_attribute("datetime"))
        if parsed is not None:
            return format_twitter_timestamp(parsed)

    label_node = time_node or element.query_selector(joined(selectors, "tweet.relative_time"))
    label = label_node.text_content() if label_node is not None else None
    return format_twitter_timestamp(parse_relative_time(label, now))
