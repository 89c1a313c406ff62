"""Request and error schemas for the scrape API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from xlist_scraper.config import MAX_TWEETS_RANGE, TIMEOUT_MS_RANGE

# Internal field name -> accepted body keys, highest precedence first.
REQUEST_KEY_ALIASES: Dict[str, tuple] = {
    "list_urls": ("listURL", "listUrl"),
    "max_tweets": ("max-tweets", "maxTweets"),
    "timeout_ms": ("timeout-ms", "timeoutMs"),
    "partial_ok": ("partial-ok", "partialOk"),
}


class ScrapeListRequest(BaseModel):
    """Body of POST /scrape/list.

    ``listURL`` may be a single URL or a list; hyphenated option keys win over
    their camelCase spellings when both are sent.
    """

    model_config = ConfigDict(extra="ignore")

    list_urls: List[str] = Field(..., min_length=1)
    max_tweets: Optional[int] = Field(default=None, ge=MAX_TWEETS_RANGE[0], le=MAX_TWEETS_RANGE[1])
    timeout_ms: Optional[int] = Field(default=None, ge=TIMEOUT_MS_RANGE[0], le=TIMEOUT_MS_RANGE[1])
    partial_ok: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def resolve_key_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        resolved: Dict[str, Any] = {}
        for field_name, keys in REQUEST_KEY_ALIASES.items():
            for key in keys:
                if key in data:
                    resolved[field_name] = data[key]
                    break
        urls = resolved.get("list_urls")
        if isinstance(urls, str):
            resolved["list_urls"] = [urls]
        return resolved


class FieldIssueOut(BaseModel):
    field: str
    constraint: str


def public_field_name(loc: tuple) -> str:
    """Render a pydantic error location using the body key a client would send."""
    parts = [str(part) for part in loc if part != "body"]
    if not parts:
        return "body"
    head = parts[0]
    keys = REQUEST_KEY_ALIASES.get(head)
    if keys:
        head = keys[0]
    if len(parts) > 1:
        return head + "".join(f"[{part}]" for part in parts[1:])
    return head
