"""CLI entrypoint behavior and exit codes."""

from __future__ import annotations

import json
from pathlib import Path
import threading

import pytest

from xlist_scraper import __version__
from xlist_scraper.config import ScrapeOptions
from xlist_scraper.errors import ErrorKind, ScrapeCancelledError
from xlist_scraper.models import (
    AggregatedResult,
    AggregatedTweet,
    ErrorDescriptor,
    TargetOutcome,
    Tweet,
)
from xlist_scraper.scheduler.read import validate_list_urls

pytest.importorskip("typer")

from typer.testing import CliRunner

from xlist_scraper.cli import ScrapeExitCode, app

runner = CliRunner()

LIST_A = "https://x.com/i/lists/111"
LIST_B = "https://x.com/i/lists/222"


class FakeOrchestrator:
    last: "FakeOrchestrator | None" = None
    result: AggregatedResult | None = None
    error: Exception | None = None

    def __init__(self, options: ScrapeOptions) -> None:
        self.options = options
        FakeOrchestrator.last = self

    def run(self, urls: list[str], *, cancel_event: threading.Event | None = None) -> AggregatedResult:
        validate_list_urls(urls)
        if FakeOrchestrator.error is not None:
            raise FakeOrchestrator.error
        assert FakeOrchestrator.result is not None
        return FakeOrchestrator.result


@pytest.fixture
def fake_orchestrator(monkeypatch: pytest.MonkeyPatch) -> type[FakeOrchestrator]:
    FakeOrchestrator.last = None
    FakeOrchestrator.result = _result()
    FakeOrchestrator.error = None
    monkeypatch.setattr("xlist_scraper.cli.ListScrapeOrchestrator", FakeOrchestrator)
    monkeypatch.delenv("XLIST_SCRAPER_CONFIG", raising=False)
    return FakeOrchestrator


def test_cli_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "scrape" in result.output
    assert "serve" in result.output
    assert "list-id" in result.output
    assert "--debug" in result.output


def test_cli_version_flag_prints_package_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_scrape_prints_json_records(fake_orchestrator: type[FakeOrchestrator]) -> None:
    result = runner.invoke(
        app,
        ["scrape", LIST_A, "--max-tweets", "10", "--timeout-ms", "20000", "--headful", "--partial-ok"],
    )

    assert result.exit_code == 0
    records = json.loads(result.stdout)
    assert records[0]["id"] == "1"
    assert records[0]["sourceListURL"] == LIST_A
    options = fake_orchestrator.last.options
    assert (options.max_tweets, options.timeout_ms, options.headless, options.partial_ok) == (
        10,
        20_000,
        False,
        True,
    )


def test_scrape_accepts_short_timeout_flag(fake_orchestrator: type[FakeOrchestrator]) -> None:
    result = runner.invoke(app, ["scrape", LIST_A, "--timeout", "30000"])

    assert result.exit_code == 0
    assert fake_orchestrator.last.options.timeout_ms == 30_000


def test_scrape_jsonl_format(fake_orchestrator: type[FakeOrchestrator]) -> None:
    result = runner.invoke(app, ["scrape", LIST_A, "--format", "jsonl"])

    assert result.exit_code == 0
    lines = [line for line in result.stdout.splitlines() if line.strip()]
    assert [json.loads(line)["id"] for line in lines] == ["1"]


def test_scrape_flags_override_config_file(fake_orchestrator: type[FakeOrchestrator], tmp_path: Path) -> None:
    config_path = tmp_path / "xlist.toml"
    config_path.write_text("[scrape]\nmax_tweets = 30\nconcurrency = 2\n", encoding="utf-8")

    result = runner.invoke(app, ["scrape", LIST_A, "--config", str(config_path), "--max-tweets", "5"])

    assert result.exit_code == 0
    options = fake_orchestrator.last.options
    assert (options.max_tweets, options.concurrency) == (5, 2)


@pytest.mark.parametrize(
    "args",
    [
        ["scrape", "https://example.com/i/lists/1"],
        ["scrape", LIST_A, "--max-tweets", "0"],
        ["scrape", LIST_A, "--format", "xml"],
    ],
)
def test_scrape_validation_errors_exit_2(fake_orchestrator: type[FakeOrchestrator], args: list[str]) -> None:
    result = runner.invoke(app, args)
    assert result.exit_code == ScrapeExitCode.VALIDATION_ERROR


def test_partial_success_exits_3_and_reports_failures(fake_orchestrator: type[FakeOrchestrator]) -> None:
    fake_orchestrator.result = _result(failed={LIST_B: ErrorKind.RATE_LIMITED})

    result = runner.invoke(app, ["scrape", LIST_A, LIST_B])

    assert result.exit_code == ScrapeExitCode.PARTIAL
    assert f"List failed: {LIST_B}: failed" in result.output
    assert '"id": "1"' in result.output


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        (ErrorKind.RATE_LIMITED, ScrapeExitCode.RATE_LIMITED),
        (ErrorKind.LOGIN_REQUIRED, ScrapeExitCode.AUTH_FAIL),
        (ErrorKind.EMPTY_OR_PRIVATE, ScrapeExitCode.TOTAL_FAILURE),
    ],
)
def test_total_failure_exit_codes(
    fake_orchestrator: type[FakeOrchestrator],
    kind: ErrorKind,
    code: ScrapeExitCode,
) -> None:
    fake_orchestrator.result = AggregatedResult(
        items=(),
        outcomes=(TargetOutcome(target_url=LIST_A, error=ErrorDescriptor(kind, "failed")),),
    )

    result = runner.invoke(app, ["scrape", LIST_A])

    assert result.exit_code == code
    assert '"id"' not in result.output


def test_cancelled_run_exits_130(fake_orchestrator: type[FakeOrchestrator]) -> None:
    fake_orchestrator.error = ScrapeCancelledError("cancelled")

    result = runner.invoke(app, ["scrape", LIST_A])

    assert result.exit_code == ScrapeExitCode.INTERRUPTED


def test_list_id_command() -> None:
    ok = runner.invoke(app, ["list-id", "https://twitter.com/i/lists/1585430245762441216"])
    assert ok.exit_code == 0
    assert ok.stdout.strip() == "1585430245762441216"

    bad = runner.invoke(app, ["list-id", "https://x.com/elonmusk"])
    assert bad.exit_code == ScrapeExitCode.VALIDATION_ERROR


def test_serve_builds_settings_from_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    pytest.importorskip("fastapi")
    served: list[object] = []
    monkeypatch.setattr("xlist_scraper.api.app.serve", served.append)

    result = runner.invoke(app, ["serve", "--port", "9001"])

    assert result.exit_code == 0
    assert served[0].port == 9001


def _result(*, failed: dict[str, ErrorKind] | None = None) -> AggregatedResult:
    tweet = Tweet(
        id="1",
        text="hello",
        retweet_count=0,
        reply_count=0,
        like_count=0,
        quote_count=0,
        created_at="Tue Nov 04 19:06:32 +0000 2025",
    )
    outcomes = [TargetOutcome(target_url=LIST_A, tweets=(tweet,))]
    for url, kind in (failed or {}).items():
        outcomes.append(TargetOutcome(target_url=url, error=ErrorDescriptor(kind, "failed")))
    return AggregatedResult(
        items=(AggregatedTweet(tweet=tweet, source_list_url=LIST_A),),
        outcomes=tuple(outcomes),
    )
