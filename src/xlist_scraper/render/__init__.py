"""Output formatters."""

from __future__ import annotations

from xlist_scraper.errors import ValidationError
from xlist_scraper.models import AggregatedTweet
from xlist_scraper.render.jsonout import (
    aggregated_tweet_to_dict,
    render_json,
    render_jsonl,
    tweet_to_dict,
)

OUTPUT_FORMATS = ("json", "jsonl")


def render_items(items: tuple[AggregatedTweet, ...], output_format: str) -> str:
    if output_format == "json":
        return render_json(items)
    if output_format == "jsonl":
        return render_jsonl(items)
    raise ValidationError.for_field("format", f"expected one of [{', '.join(OUTPUT_FORMATS)}]")


__all__ = [
    "OUTPUT_FORMATS",
    "aggregated_tweet_to_dict",
    "render_items",
    "render_json",
    "render_jsonl",
    "tweet_to_dict",
]
