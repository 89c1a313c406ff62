"""Per-list scraping and multi-list orchestration."""

from .merge import merge_tweets
from .read import (
    ListScrapeOrchestrator,
    run_list_scrape,
    scrape_list,
    validate_list_urls,
)

__all__ = [
    "ListScrapeOrchestrator",
    "merge_tweets",
    "run_list_scrape",
    "scrape_list",
    "validate_list_urls",
]
