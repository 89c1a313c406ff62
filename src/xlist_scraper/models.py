"""Data model contracts for cross-module use."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from xlist_scraper.errors import ErrorKind


class BlockerState(str, Enum):
    CLEAR = "clear"
    LOGIN_REQUIRED = "login_required"
    RATE_LIMITED = "rate_limited"


class StopReason(str, Enum):
    CAP_REACHED = "cap_reached"
    END_OF_FEED = "end_of_feed"
    STALLED = "stalled"


class RunStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class Tweet:
    id: str
    text: str
    retweet_count: int
    reply_count: int
    like_count: int
    quote_count: int
    created_at: str
    bookmark_count: int = 0
    is_retweet: bool = False
    is_quote: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Tweet id must be a non-empty string.")


@dataclass(frozen=True)
class AggregatedTweet:
    tweet: Tweet
    source_list_url: str

    @property
    def id(self) -> str:
        return self.tweet.id

    @property
    def created_at(self) -> str:
        return self.tweet.created_at


@dataclass(frozen=True)
class ErrorDescriptor:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class TargetOutcome:
    target_url: str
    tweets: tuple[Tweet, ...] = ()
    error: ErrorDescriptor | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AggregatedResult:
    items: tuple[AggregatedTweet, ...]
    outcomes: tuple[TargetOutcome, ...]

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(
            f"{outcome.target_url}: {outcome.error.message}"
            for outcome in self.outcomes
            if outcome.error is not None
        )

    @property
    def status(self) -> RunStatus:
        if self.failed == 0:
            return RunStatus.SUCCESS
        if self.succeeded == 0:
            return RunStatus.FAILED
        return RunStatus.PARTIAL

    @property
    def uniform_error_kind(self) -> ErrorKind | None:
        """Return the single kind shared by every failure, if there is one."""
        kinds = {outcome.error.kind for outcome in self.outcomes if outcome.error is not None}
        if len(kinds) == 1:
            return next(iter(kinds))
        return None
