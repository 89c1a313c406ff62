"""Read-only X list scraper."""

__version__ = "0.1.0"

from .config import ScrapeOptions, load_scrape_options
from .errors import ErrorKind, XListScraperError
from .models import AggregatedResult, AggregatedTweet, RunStatus, TargetOutcome, Tweet
from .scheduler.read import ListScrapeOrchestrator, run_list_scrape, scrape_list

__all__ = [
    "AggregatedResult",
    "AggregatedTweet",
    "ErrorKind",
    "ListScrapeOrchestrator",
    "RunStatus",
    "ScrapeOptions",
    "TargetOutcome",
    "Tweet",
    "XListScraperError",
    "load_scrape_options",
    "run_list_scrape",
    "scrape_list",
]
