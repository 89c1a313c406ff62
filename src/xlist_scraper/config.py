"""Scrape option contracts and validation helpers for xlist-scraper."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
import os
from pathlib import Path
import tomllib
from typing import Any

from .errors import ConfigError, FieldIssue, ValidationError

CONFIG_ENV_VAR = "XLIST_SCRAPER_CONFIG"

MAX_TWEETS_RANGE = (1, 2000)
TIMEOUT_MS_RANGE = (10_000, 300_000)
CONCURRENCY_RANGE = (1, 16)

DEFAULT_MAX_TWEETS = 200
DEFAULT_TIMEOUT_MS = 60_000


@dataclass(frozen=True)
class ScrapeOptions:
    max_tweets: int = DEFAULT_MAX_TWEETS
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    headless: bool = True
    cookies_path: str | None = None
    proxy: str | None = None
    partial_ok: bool = False
    concurrency: int = 1

    @classmethod
    def create(cls, **values: Any) -> ScrapeOptions:
        """Build options from loose values, skipping ``None`` so defaults apply."""
        unknown = sorted(set(values) - {item.name for item in fields(cls)})
        if unknown:
            raise ValidationError(
                f"Unknown scrape option(s): {', '.join(unknown)}.",
                [FieldIssue(name, "unknown option") for name in unknown],
            )
        options = cls(**{key: value for key, value in values.items() if value is not None})
        return options.validate()

    def validate(self) -> ScrapeOptions:
        issues: list[FieldIssue] = []
        _expect_int_in_range(issues, "max_tweets", self.max_tweets, MAX_TWEETS_RANGE)
        _expect_int_in_range(issues, "timeout_ms", self.timeout_ms, TIMEOUT_MS_RANGE)
        _expect_int_in_range(issues, "concurrency", self.concurrency, CONCURRENCY_RANGE)
        _expect_bool(issues, "headless", self.headless)
        _expect_bool(issues, "partial_ok", self.partial_ok)
        _expect_optional_string(issues, "cookies_path", self.cookies_path)
        _expect_optional_string(issues, "proxy", self.proxy)
        if issues:
            raise ValidationError(
                "Invalid scrape options: " + "; ".join(str(issue) for issue in issues),
                issues,
            )
        return self

    def merged(self, **overrides: Any) -> ScrapeOptions:
        """Return a validated copy with non-``None`` overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes).validate()


def options_to_dict(options: ScrapeOptions) -> dict[str, Any]:
    return asdict(options)


def resolve_config_path(config_path: str | Path | None = None) -> Path | None:
    if config_path:
        return Path(config_path).expanduser()
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return None


def load_scrape_options(config_path: str | Path | None = None) -> ScrapeOptions:
    """Load the ``[scrape]`` table from a TOML file, or defaults when no file is configured."""
    path = resolve_config_path(config_path)
    if path is None:
        return ScrapeOptions()
    if not path.exists():
        raise ConfigError.for_field("config", f"file not found at '{path}'")
    if path.is_dir():
        raise ConfigError.for_field("config", f"'{path}' is a directory, expected a TOML file")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError.for_field("config", f"could not read '{path}': {exc}") from exc

    data = _load_toml(text, path)
    table = data.get("scrape", {})
    if not isinstance(table, dict):
        raise ConfigError.for_field("scrape", f"expected table, got {type(table).__name__}")

    try:
        return ScrapeOptions.create(**table)
    except ValidationError as exc:
        raise ConfigError(f"Config file '{path}': {exc}", exc.details) from exc


def _load_toml(text: str, path: Path) -> dict[str, Any]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError.for_field("config", f"'{path}' contains invalid TOML: {exc}") from exc
    return data


def _expect_int_in_range(
    issues: list[FieldIssue],
    key: str,
    value: Any,
    bounds: tuple[int, int],
) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        issues.append(FieldIssue(key, f"expected integer in [{low}, {high}]"))


def _expect_bool(issues: list[FieldIssue], key: str, value: Any) -> None:
    if not isinstance(value, bool):
        issues.append(FieldIssue(key, "expected boolean true/false"))


def _expect_optional_string(issues: list[FieldIssue], key: str, value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, str) or not value.strip():
        issues.append(FieldIssue(key, "expected non-empty string"))
