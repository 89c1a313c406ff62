"""Browser session lifecycle manager and protocols."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from xlist_scraper.config import ScrapeOptions
from xlist_scraper.deadline import Deadline
from xlist_scraper.errors import ScrapeTimeoutError, SessionError, XListScraperError
from xlist_scraper.extract.selectors import DEFAULT_SELECTOR_PACK, SelectorPack, joined

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_SCROLL_TO_BOTTOM = "window.scrollTo(0, document.body.scrollHeight);"


class ListSession(Protocol):
    """Capabilities the extraction loop consumes from a rendering backend."""

    @property
    def page(self) -> Any:
        """Current page for blocker probing."""

    def navigate(self, url: str) -> None:
        """Load the target within the session deadline."""

    def current_items(self) -> list[Any]:
        """Return currently rendered feed items."""

    def wait_for_items(self, timeout_ms: int) -> bool:
        """Wait for at least one item; False when none appeared in time."""

    def scroll_to_bottom(self) -> None:
        """Scroll the feed to its current end."""

    def pause(self, ms: int, stage: str) -> None:
        """Idle for a bounded settle interval."""

    def close(self) -> None:
        """Persist credentials and release resources; never raises."""


SessionFactory = Callable[[ScrapeOptions, Deadline], ListSession]


@dataclass(frozen=True)
class BrowserSessionOptions:
    engine: str
    headless: bool
    locale: str
    viewport_width: int
    viewport_height: int
    user_agent: str
    proxy: str | None = None
    cookies_path: str | None = None


class PlaywrightBrowserSession:
    """Manage one browser/context/page lifecycle with deterministic teardown."""

    def __init__(
        self,
        options: ScrapeOptions,
        deadline: Deadline,
        *,
        selectors: SelectorPack = DEFAULT_SELECTOR_PACK,
        engine: str = "chromium",
        locale: str = "en-US",
        viewport_width: int = 1280,
        viewport_height: int = 720,
        user_agent: str = DEFAULT_USER_AGENT,
        playwright_factory: Callable[[], AbstractContextManager[Any]] | None = None,
    ) -> None:
        self.options = BrowserSessionOptions(
            engine=engine,
            headless=options.headless,
            locale=locale,
            viewport_width=viewport_width,
            viewport_height=viewport_height,
            user_agent=user_agent,
            proxy=options.proxy,
            cookies_path=options.cookies_path,
        )
        self.deadline = deadline
        self._selectors = selectors
        self._playwright_factory = playwright_factory or _default_playwright_factory
        self._playwright_cm: AbstractContextManager[Any] | None = None
        self._browser: Any | None = None
        self._context: Any | None = None
        self._page: Any | None = None

    @property
    def page(self) -> Any:
        if self._page is None:
            raise SessionError("Browser session is not open.")
        return self._page

    def open(self) -> None:
        if self._page is not None:
            return

        try:
            self.deadline.check("session open")
            self._playwright_cm = self._playwright_factory()
            playwright = self._playwright_cm.__enter__()

            launcher = getattr(playwright, self.options.engine, None)
            if launcher is None:
                raise SessionError(
                    f"Unsupported browser engine '{self.options.engine}' for Playwright session."
                )

            launch_kwargs: dict[str, Any] = {"headless": self.options.headless}
            if self.options.proxy:
                launch_kwargs["proxy"] = {"server": self.options.proxy}
            self._browser = launcher.launch(**launch_kwargs)

            self._context = self._browser.new_context(
                locale=self.options.locale,
                viewport={
                    "width": self.options.viewport_width,
                    "height": self.options.viewport_height,
                },
                user_agent=self.options.user_agent,
            )
            self._load_cookies()
            self._context.set_default_timeout(self.deadline.remaining_ms())
            self._page = self._context.new_page()
        except XListScraperError:
            self._teardown()
            raise
        except Exception as exc:
            self._teardown()
            raise SessionError(f"Failed to open browser session: {exc}") from exc

    def navigate(self, url: str) -> None:
        timeout_ms = self.deadline.bounded(self.deadline.remaining_ms(), "navigation")
        try:
            self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except Exception as exc:
            if _is_timeout(exc) or self.deadline.expired():
                raise ScrapeTimeoutError(
                    f"Navigation to '{url}' did not settle within the {self.deadline.timeout_ms}ms deadline."
                ) from exc
            raise SessionError(f"Could not navigate to '{url}': {exc}") from exc

    def current_items(self) -> list[Any]:
        try:
            return list(self.page.query_selector_all(joined(self._selectors, "tweet.article")))
        except Exception as exc:
            raise SessionError(f"Could not query list items: {exc}") from exc

    def wait_for_items(self, timeout_ms: int) -> bool:
        bounded_ms = self.deadline.bounded(timeout_ms, "content wait")
        try:
            self.page.wait_for_selector(
                joined(self._selectors, "tweet.article"),
                state="attached",
                timeout=bounded_ms,
            )
        except Exception as exc:
            if not _is_timeout(exc):
                raise SessionError(f"Waiting for list items failed: {exc}") from exc
            self.deadline.check("content wait")
            return False
        return True

    def scroll_to_bottom(self) -> None:
        self.deadline.check("scroll")
        try:
            self.page.evaluate(_SCROLL_TO_BOTTOM)
        except Exception as exc:
            raise SessionError(f"Scroll operation failed: {exc}") from exc

    def pause(self, ms: int, stage: str) -> None:
        self.page.wait_for_timeout(self.deadline.bounded(ms, stage))
        self.deadline.check(stage)

    def close(self) -> None:
        self._save_cookies()
        self._teardown()

    def __enter__(self) -> PlaywrightBrowserSession:
        self.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> bool:
        self.close()
        return False

    def _load_cookies(self) -> None:
        path = self.options.cookies_path
        if not path:
            return
        cookies_file = Path(path).expanduser()
        if not cookies_file.exists():
            logger.info("Cookies file %s does not exist yet; continuing without credentials.", cookies_file)
            return
        try:
            cookies = read_cookies_file(cookies_file)
            if cookies:
                self._context.add_cookies(cookies)
            logger.debug("Loaded %d cookie(s) from %s", len(cookies), cookies_file)
        except Exception as exc:
            logger.warning("Could not load cookies from %s: %s", cookies_file, exc)

    def _save_cookies(self) -> None:
        path = self.options.cookies_path
        if not path or self._context is None:
            return
        cookies_file = Path(path).expanduser()
        try:
            write_cookies_secure(cookies_file, list(self._context.cookies()))
            logger.debug("Saved cookies to %s", cookies_file)
        except Exception as exc:
            logger.warning("Could not save cookies to %s: %s", cookies_file, exc)

    def _teardown(self) -> None:
        for label, attribute in (("page", "_page"), ("context", "_context"), ("browser", "_browser")):
            resource = getattr(self, attribute)
            if resource is None:
                continue
            try:
                resource.close()
            except Exception as exc:
                logger.warning("Browser %s close failed: %s", label, exc)
            finally:
                setattr(self, attribute, None)

        if self._playwright_cm is not None:
            try:
                self._playwright_cm.__exit__(None, None, None)
            except Exception as exc:
                logger.warning("Playwright teardown failed: %s", exc)
            finally:
                self._playwright_cm = None


def read_cookies_file(path: Path) -> list[dict[str, Any]]:
    """Read a JSON cookie list, accepting a Playwright storage_state payload as well."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("cookies", [])
    if not isinstance(payload, list) or not all(isinstance(entry, dict) for entry in payload):
        raise ValueError(f"Cookies file '{path}' must contain a JSON list of cookie objects.")
    return payload


def write_cookies_secure(path: Path, cookies: list[dict[str, Any]]) -> None:
    serialized = json.dumps(cookies, indent=2, sort_keys=True)
    temp_path = path.with_name(f"{path.name}.tmp")
    fd: int | None = None
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as stream:
            fd = None
            stream.write(serialized)
            stream.write("\n")
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(temp_path, path)
        os.chmod(path, 0o600)
    finally:
        if fd is not None:
            os.close(fd)
        if temp_path.exists():
            temp_path.unlink()


def _is_timeout(exc: BaseException) -> bool:
    from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

    return isinstance(exc, (TimeoutError, PlaywrightTimeoutError))


def _default_playwright_factory() -> AbstractContextManager[Any]:
    try:
        from playwright.sync_api import sync_playwright
    except ModuleNotFoundError as exc:
        raise SessionError(
            "Playwright is not available. Install dependencies and run "
            "`python -m playwright install chromium`."
        ) from exc
    return sync_playwright()


def open_playwright_session(options: ScrapeOptions, deadline: Deadline) -> PlaywrightBrowserSession:
    """Default session factory used by the scraper."""
    session = PlaywrightBrowserSession(options, deadline)
    session.open()
    return session
