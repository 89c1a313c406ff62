"""Field-level extraction helpers."""

from .counts import parse_count
from .selectors import DEFAULT_SELECTOR_PACK, SelectorPack, default_selector_pack
from .timestamps import (
    format_twitter_timestamp,
    normalize_timestamp,
    parse_relative_time,
    parse_twitter_date,
)
from .tweets import parse_tweet_element, parse_tweet_elements
from .urls import extract_list_id, extract_tweet_id, is_valid_list_url, normalize_list_url

__all__ = [
    "DEFAULT_SELECTOR_PACK",
    "SelectorPack",
    "default_selector_pack",
    "extract_list_id",
    "extract_tweet_id",
    "format_twitter_timestamp",
    "is_valid_list_url",
    "normalize_list_url",
    "normalize_timestamp",
    "parse_count",
    "parse_relative_time",
    "parse_tweet_element",
    "parse_tweet_elements",
    "parse_twitter_date",
]
