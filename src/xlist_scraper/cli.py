"""Typer CLI for xlist-scraper."""

from __future__ import annotations

from enum import IntEnum
import threading

import typer

from . import __version__
from .config import load_scrape_options
from .errors import ErrorKind, ScrapeCancelledError, ValidationError
from .extract.urls import extract_list_id, is_valid_list_url
from .logging import configure_logging
from .models import AggregatedResult, RunStatus
from .render import OUTPUT_FORMATS, render_items
from .scheduler.read import ListScrapeOrchestrator

app = typer.Typer(help="Scrape tweets from X lists.")


class ScrapeExitCode(IntEnum):
    """Stable exit code matrix for automation wrappers."""

    SUCCESS = 0
    TOTAL_FAILURE = 1
    VALIDATION_ERROR = 2
    PARTIAL = 3
    RATE_LIMITED = 4
    AUTH_FAIL = 5
    INTERRUPTED = 130


def determine_exit_code(result: AggregatedResult) -> ScrapeExitCode:
    if result.status is RunStatus.SUCCESS:
        return ScrapeExitCode.SUCCESS
    if result.status is RunStatus.PARTIAL:
        return ScrapeExitCode.PARTIAL
    kind = result.uniform_error_kind
    if kind is ErrorKind.RATE_LIMITED:
        return ScrapeExitCode.RATE_LIMITED
    if kind is ErrorKind.LOGIN_REQUIRED:
        return ScrapeExitCode.AUTH_FAIL
    return ScrapeExitCode.TOTAL_FAILURE


@app.command("scrape")
def scrape(
    urls: list[str] = typer.Argument(..., help="One or more https://x.com/i/lists/<id> URLs."),
    max_tweets: int | None = typer.Option(
        None, "--max-tweets", help="Maximum tweets per list (1-2000, default 200)."
    ),
    timeout_ms: int | None = typer.Option(
        None,
        "--timeout-ms",
        "--timeout",
        help="Whole-session deadline per list in ms (10000-300000, default 60000).",
    ),
    headful: bool = typer.Option(False, "--headful", help="Show the browser window (default headless)."),
    cookies: str | None = typer.Option(
        None, "--cookies", help="Cookie JSON file loaded before navigation and saved after."
    ),
    proxy: str | None = typer.Option(None, "--proxy", help="Proxy server URL for the browser."),
    partial_ok: bool = typer.Option(
        False, "--partial-ok", help="Return an empty result for a failed list instead of an error."
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", help="Lists scraped at the same time (default 1, sequential)."
    ),
    output_format: str = typer.Option("json", "--format", help="Output format: json|jsonl."),
    path: str | None = typer.Option(
        None, "--config", help="Optional TOML file with a [scrape] table (or XLIST_SCRAPER_CONFIG)."
    ),
) -> None:
    if output_format not in OUTPUT_FORMATS:
        typer.secho(
            f"Scrape failed: unsupported --format '{output_format}'. Use one of: json, jsonl.",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(ScrapeExitCode.VALIDATION_ERROR)

    cancel_event = threading.Event()
    try:
        options = load_scrape_options(path).merged(
            max_tweets=max_tweets,
            timeout_ms=timeout_ms,
            headless=False if headful else None,
            cookies_path=cookies,
            proxy=proxy,
            partial_ok=partial_ok or None,
            concurrency=concurrency,
        )
        result = ListScrapeOrchestrator(options).run(urls, cancel_event=cancel_event)
    except ValidationError as exc:
        typer.secho(f"Scrape failed: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(ScrapeExitCode.VALIDATION_ERROR) from exc
    except (ScrapeCancelledError, KeyboardInterrupt) as exc:
        typer.secho("Scrape interrupted.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(ScrapeExitCode.INTERRUPTED) from exc

    if result.items or result.status is RunStatus.SUCCESS:
        typer.echo(render_items(result.items, output_format))
    for message in result.errors:
        typer.secho(f"List failed: {message}", err=True, fg=typer.colors.RED)

    code = determine_exit_code(result)
    if code is not ScrapeExitCode.SUCCESS:
        raise typer.Exit(code)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind host (default HOST or 0.0.0.0)."),
    port: int | None = typer.Option(None, "--port", help="Bind port (default PORT or 8080)."),
) -> None:
    from .api.app import serve as serve_api
    from .settings import ServerSettings

    overrides = {key: value for key, value in {"host": host, "port": port}.items() if value is not None}
    settings = ServerSettings(**overrides)
    configure_logging(level=settings.log_level)
    serve_api(settings)


@app.command("list-id")
def list_id(url: str = typer.Argument(..., help="List URL to inspect.")) -> None:
    if not is_valid_list_url(url):
        typer.secho(
            f"Invalid list URL '{url}'. Expected https://x.com/i/lists/<id>.",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(ScrapeExitCode.VALIDATION_ERROR)
    parsed = extract_list_id(url)
    if parsed is None:
        typer.secho(f"No numeric list id in '{url}'.", err=True, fg=typer.colors.RED)
        raise typer.Exit(ScrapeExitCode.VALIDATION_ERROR)
    typer.echo(parsed)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show xlist-scraper version and exit."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    ctx.obj = {"debug": debug}
    if version:
        typer.echo(__version__)
        raise typer.Exit()
    configure_logging(debug)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
