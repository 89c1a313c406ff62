"""JSON and JSONL tweet rendering."""

from __future__ import annotations

from collections.abc import Sequence
import json

from xlist_scraper.models import AggregatedTweet, Tweet


def render_json(items: Sequence[AggregatedTweet]) -> str:
    return json.dumps([aggregated_tweet_to_dict(item) for item in items], indent=2, sort_keys=True)


def render_jsonl(items: Sequence[AggregatedTweet]) -> str:
    return "\n".join(json.dumps(aggregated_tweet_to_dict(item), sort_keys=True) for item in items)


def tweet_to_dict(tweet: Tweet) -> dict[str, object]:
    return {
        "id": tweet.id,
        "text": tweet.text,
        "retweetCount": tweet.retweet_count,
        "replyCount": tweet.reply_count,
        "likeCount": tweet.like_count,
        "quoteCount": tweet.quote_count,
        "createdAt": tweet.created_at,
        "bookmarkCount": tweet.bookmark_count,
        "isRetweet": tweet.is_retweet,
        "isQuote": tweet.is_quote,
    }


def aggregated_tweet_to_dict(item: AggregatedTweet) -> dict[str, object]:
    payload = tweet_to_dict(item.tweet)
    payload["sourceListURL"] = item.source_list_url
    return payload

