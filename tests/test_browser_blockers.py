"""Login-wall, rate-limit and end-of-feed classification."""

from __future__ import annotations

import pytest

from xlist_scraper.browser.blockers import detect_blocker, is_end_of_feed, raise_for_blocker
from xlist_scraper.errors import ErrorKind, LoginRequiredError, RateLimitedError
from xlist_scraper.models import BlockerState


class FakePage:
    def __init__(
        self,
        *,
        url: str = "https://x.com/i/lists/123",
        present: set[str] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.url = url
        self._present = present or set()
        self._failing = failing or set()
        self.queries: list[str] = []

    def query_selector(self, selector: str) -> object | None:
        self.queries.append(selector)
        if selector in self._failing:
            raise RuntimeError("selector engine error")
        return object() if selector in self._present else None


def test_clear_page() -> None:
    assert detect_blocker(FakePage()) is BlockerState.CLEAR


def test_sign_in_affordance_means_login_required() -> None:
    page = FakePage(present={'[data-testid="login"]'})
    assert detect_blocker(page) is BlockerState.LOGIN_REQUIRED


def test_login_redirect_url_means_login_required() -> None:
    page = FakePage(url="https://x.com/i/flow/login?redirect_after_login=%2Fi%2Flists%2F123")
    assert detect_blocker(page) is BlockerState.LOGIN_REQUIRED
    assert page.queries == []


def test_rate_limit_text_means_rate_limited() -> None:
    page = FakePage(present={"text=/too many/i"})
    assert detect_blocker(page) is BlockerState.RATE_LIMITED


def test_login_check_wins_over_rate_limit() -> None:
    page = FakePage(present={'text="Log in"', 'text="Rate limit exceeded"'})
    assert detect_blocker(page) is BlockerState.LOGIN_REQUIRED


def test_selector_errors_count_as_no_match() -> None:
    page = FakePage(failing={'text="Sign in to X"'}, present={'text="Too many requests"'})
    assert detect_blocker(page) is BlockerState.RATE_LIMITED


def test_end_of_feed_markers() -> None:
    assert is_end_of_feed(FakePage(present={"text=\"You're all caught up\""})) is True
    assert is_end_of_feed(FakePage()) is False


def test_raise_for_blocker_uses_typed_errors() -> None:
    raise_for_blocker(BlockerState.CLEAR, "https://x.com/i/lists/1")

    with pytest.raises(LoginRequiredError) as login_exc:
        raise_for_blocker(BlockerState.LOGIN_REQUIRED, "https://x.com/i/lists/1")
    with pytest.raises(RateLimitedError) as rate_exc:
        raise_for_blocker(BlockerState.RATE_LIMITED, "https://x.com/i/lists/1")

    assert login_exc.value.kind is ErrorKind.LOGIN_REQUIRED
    assert rate_exc.value.kind is ErrorKind.RATE_LIMITED
