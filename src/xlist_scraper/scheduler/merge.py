"""Deterministic merge helpers for multi-list output."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from xlist_scraper.extract.timestamps import parse_twitter_date
from xlist_scraper.models import AggregatedTweet, TargetOutcome

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def merge_tweets(outcomes: Iterable[TargetOutcome]) -> tuple[AggregatedTweet, ...]:
    """Union successful outcomes and sort newest first.

    Ids repeated across different lists are kept; each copy carries its own source URL.
    """
    merged: list[AggregatedTweet] = []
    for outcome in outcomes:
        if not outcome.ok:
            continue
        merged.extend(
            AggregatedTweet(tweet=tweet, source_list_url=outcome.target_url)
            for tweet in outcome.tweets
        )

    return tuple(
        sorted(
            merged,
            key=lambda item: (
                parse_twitter_date(item.created_at) or _OLDEST,
                _tweet_id_sort_key(item.id),
                item.source_list_url,
            ),
            reverse=True,
        )
    )


def _tweet_id_sort_key(tweet_id: str) -> tuple[int, int | str]:
    if tweet_id.isdigit():
        return (1, int(tweet_id))
    return (0, tweet_id)
