"""Per-article tweet parsing against rendered element fakes."""

from __future__ import annotations

from datetime import datetime, timezone

from xlist_scraper.extract.selectors import DEFAULT_SELECTOR_PACK, joined
from xlist_scraper.extract.tweets import parse_tweet_element, parse_tweet_elements

NOW = datetime(2025, 11, 4, 19, 6, 32, tzinfo=timezone.utc)
COUNT = joined(DEFAULT_SELECTOR_PACK, "tweet.count")


class FakeNode:
    def __init__(
        self,
        *,
        text: str | None = None,
        attrs: dict[str, str] | None = None,
        children: dict[str, "FakeNode"] | None = None,
        many: dict[str, list["FakeNode"]] | None = None,
    ) -> None:
        self._text = text
        self._attrs = attrs or {}
        self._children = children or {}
        self._many = many or {}

    def query_selector(self, selector: str) -> "FakeNode | None":
        return self._children.get(selector)

    def query_selector_all(self, selector: str) -> list["FakeNode"]:
        if selector in self._many:
            return list(self._many[selector])
        found: list[FakeNode] = []
        for part in selector.split(", "):
            found.extend(self._many.get(part, []))
        return found

    def get_attribute(self, name: str) -> str | None:
        return self._attrs.get(name)

    def text_content(self) -> str | None:
        return self._text


class ExplodingNode(FakeNode):
    def query_selector(self, selector: str) -> FakeNode | None:
        raise RuntimeError("element detached from DOM")


def test_parses_full_article() -> None:
    article = _article(
        "1985000000000000001",
        text="  Shipping the new release today  ",
        replies="12",
        retweets="1.2K",
        likes="2.5M",
        datetime_attr="2025-11-04T19:06:32.000Z",
    )

    tweet = parse_tweet_element(article, now=NOW)

    assert tweet is not None
    assert tweet.id == "1985000000000000001"
    assert tweet.text == "Shipping the new release today"
    assert tweet.reply_count == 12
    assert tweet.retweet_count == 1_200
    assert tweet.like_count == 2_500_000
    assert tweet.quote_count == 0
    assert tweet.bookmark_count == 0
    assert tweet.created_at == "Tue Nov 04 19:06:32 +0000 2025"
    assert tweet.is_retweet is False
    assert tweet.is_quote is False


def test_missing_status_link_is_skipped() -> None:
    assert parse_tweet_element(FakeNode(), now=NOW) is None


def test_status_link_without_numeric_id_is_skipped() -> None:
    link_selector = joined(DEFAULT_SELECTOR_PACK, "tweet.status_link")
    article = FakeNode(children={link_selector: FakeNode(attrs={"href": "/promoted/status/ad"})})
    assert parse_tweet_element(article, now=NOW) is None


def test_parse_errors_yield_none() -> None:
    assert parse_tweet_element(ExplodingNode(), now=NOW) is None


def test_text_falls_back_to_lang_container_and_allows_empty_text() -> None:
    with_lang = _article("10", text=None, lang_text="hola")
    media_only = _article("11", text=None)

    assert parse_tweet_element(with_lang, now=NOW).text == "hola"
    assert parse_tweet_element(media_only, now=NOW).text == ""


def test_repost_marker_in_social_context_sets_is_retweet() -> None:
    reposted = _article("12", social_context="Alice reposted")
    pinned = _article("13", social_context="Pinned")

    assert parse_tweet_element(reposted, now=NOW).is_retweet is True
    assert parse_tweet_element(pinned, now=NOW).is_retweet is False


def test_quote_detected_only_when_another_status_is_linked() -> None:
    quoting = _article("20", extra_status_links=["/alice/status/20/photo/1", "/bob/status/99"])
    own_links_only = _article("21", extra_status_links=["/alice/status/21/analytics"])
    no_second_link = _article("22")

    assert parse_tweet_element(quoting, now=NOW).is_quote is True
    assert parse_tweet_element(own_links_only, now=NOW).is_quote is False
    assert parse_tweet_element(no_second_link, now=NOW).is_quote is False


def test_plain_thread_links_do_not_mark_a_quote() -> None:
    article = _article("23", plain_status_links=["/alice/status/24"])

    assert parse_tweet_element(article, now=NOW).is_quote is False


def test_liked_and_reposted_buttons_still_report_counts() -> None:
    article = _article("30", retweets="4", likes="1,234", toggled=True)

    tweet = parse_tweet_element(article, now=NOW)

    assert tweet.retweet_count == 4
    assert tweet.like_count == 1_234


def test_unparseable_counts_default_to_zero() -> None:
    tweet = parse_tweet_element(_article("31", replies="", retweets="-", likes="abc"), now=NOW)

    assert (tweet.reply_count, tweet.retweet_count, tweet.like_count) == (0, 0, 0)


def test_relative_time_label_is_used_when_datetime_missing() -> None:
    tweet = parse_tweet_element(_article("40", relative_label="2h"), now=NOW)

    assert tweet.created_at == "Tue Nov 04 17:06:32 +0000 2025"


def test_parse_tweet_elements_skips_unparseable_items() -> None:
    elements = [_article("50"), FakeNode(), _article("51")]

    assert [tweet.id for tweet in parse_tweet_elements(elements, now=NOW)] == ["50", "51"]


def _article(
    tweet_id: str,
    *,
    text: str | None = "hello",
    lang_text: str | None = None,
    social_context: str | None = None,
    extra_status_links: list[str] | None = None,
    plain_status_links: list[str] | None = None,
    replies: str | None = None,
    retweets: str | None = None,
    likes: str | None = None,
    toggled: bool = False,
    datetime_attr: str | None = None,
    relative_label: str | None = None,
) -> FakeNode:
    own_link = FakeNode(attrs={"href": f"/alice/status/{tweet_id}"})
    children: dict[str, FakeNode] = {
        joined(DEFAULT_SELECTOR_PACK, "tweet.status_link"): own_link,
    }
    if text is not None:
        children['[data-testid="tweetText"]'] = FakeNode(text=text)
    if lang_text is not None:
        children["[lang]"] = FakeNode(text=lang_text)
    if social_context is not None:
        children[joined(DEFAULT_SELECTOR_PACK, "tweet.social_context")] = FakeNode(text=social_context)

    for label, testid in ((replies, "reply"), (retweets, "retweet"), (likes, "like")):
        if label is None:
            continue
        if toggled and testid != "reply":
            testid = f"un{testid}"
        children[f'[data-testid="{testid}"]'] = FakeNode(children={COUNT: FakeNode(text=label)})

    if datetime_attr is not None:
        children[joined(DEFAULT_SELECTOR_PACK, "tweet.time")] = FakeNode(
            text="Nov 4", attrs={"datetime": datetime_attr}
        )
    elif relative_label is not None:
        children[joined(DEFAULT_SELECTOR_PACK, "tweet.relative_time")] = FakeNode(text=relative_label)

    links = [own_link] + [FakeNode(attrs={"href": href}) for href in extra_status_links or []]
    many = {joined(DEFAULT_SELECTOR_PACK, "tweet.quote_link"): links}
    if plain_status_links:
        many['a[href*="/status/"]'] = [FakeNode(attrs={"href": href}) for href in plain_status_links]
    return FakeNode(children=children, many=many)
