"""Source fetcher: RSS feed first, listing page scrape as a fallback."""

import logging
from urllib.parse import urljoin

import feedparser
import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from news_rewrite.config import DEFAULT_FEED_URL, DEFAULT_LISTING_URL
from news_rewrite.models import ArticleStub

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0"
FEED_TIMEOUT = 10.0
LISTING_TIMEOUT = 15.0

SCRAPE_LIMIT = 5
MIN_TITLE_LENGTH = 10

# Story containers on the listing page, most specific first.
LISTING_SELECTORS = (
    ".new_storylising_content",
    ".storylist_container",
    ".story_list",
    ".lstng_pg_stry",
    ".news_Itm",
    "article",
)

# Where to find the headline anchor inside a container.
HEADLINE_SELECTORS = ("h2 a", "h3 a", ".story_title a", "a")


class SourceFetcher:
    """Fetch candidate article stubs for a run."""

    def __init__(
        self,
        feed_url: str = DEFAULT_FEED_URL,
        listing_url: str = DEFAULT_LISTING_URL,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            feed_url: RSS feed to read first.
            listing_url: HTML listing page scraped when the feed is unusable.
            http_client: Optional shared client; one is created if omitted.

        Raises:
            ValueError: If either URL is empty or whitespace-only.
        """
        if not feed_url or not feed_url.strip():
            raise ValueError("feed URL must not be empty")
        if not listing_url or not listing_url.strip():
            raise ValueError("listing URL must not be empty")
        self.feed_url = feed_url
        self.listing_url = listing_url
        self._http = http_client or httpx.Client(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    def fetch(self, count: int) -> list[ArticleStub]:
        """Return up to ``count`` stubs, trying the feed before the listing page.

        An empty list means both strategies came back empty.
        """
        stubs = self.fetch_feed(count)
        if stubs:
            return stubs

        logger.warning("Feed returned no articles, falling back to listing page scrape")
        return self.scrape_listing()[:count]

    def fetch_feed(self, count: int) -> list[ArticleStub]:
        """Read the RSS feed and return the first ``count`` usable entries."""
        logger.info("Fetching RSS feed %s", self.feed_url)
        try:
            response = self._http.get(self.feed_url, timeout=FEED_TIMEOUT)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.error("RSS fetch timed out after %.0fs", FEED_TIMEOUT)
            return []
        except httpx.HTTPStatusError as e:
            logger.error("RSS fetch failed with HTTP %s", e.response.status_code)
            return []
        except httpx.HTTPError as e:
            logger.error("RSS fetch failed: %s", e)
            return []
        except httpx.InvalidURL as e:
            logger.error("Invalid RSS feed URL: %s", e)
            return []

        if not response.content:
            logger.error("Empty response from RSS feed")
            return []

        feed = feedparser.parse(response.content)
        if not feed.entries:
            if feed.bozo:
                logger.error("Invalid RSS feed: %s", feed.bozo_exception)
            else:
                logger.error("RSS feed has no items")
            return []

        stubs: list[ArticleStub] = []
        for entry in feed.entries[:count]:
            title = entry.get("title")
            link = entry.get("link")
            if not title or not link:
                continue
            try:
                stubs.append(ArticleStub(title=title, link=link))
            except ValidationError:
                logger.warning("Skipping malformed RSS item: %r", title)

        logger.info("Fetched %d articles from RSS", len(stubs))
        return stubs

    def scrape_listing(self) -> list[ArticleStub]:
        """Scrape the listing page using the first container selector that matches."""
        logger.info("Scraping listing page %s", self.listing_url)
        try:
            response = self._http.get(self.listing_url, timeout=LISTING_TIMEOUT)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Listing page unreachable: timed out after %.0fs", LISTING_TIMEOUT)
            return []
        except httpx.HTTPError as e:
            logger.warning("Listing page unreachable: %s", e)
            return []
        except httpx.InvalidURL as e:
            logger.warning("Invalid listing page URL: %s", e)
            return []

        if not response.text:
            logger.warning("Listing page unreachable: empty response")
            return []

        stubs = parse_listing(response.text, base_url=str(response.url))
        if not stubs:
            logger.warning("Listing page reachable but no selector matched any stories")
            return []

        logger.info("Scraped %d articles from listing page", len(stubs))
        return stubs

    def close(self) -> None:
        self._http.close()


def parse_listing(html: str, base_url: str) -> list[ArticleStub]:
    """Extract stubs from listing HTML.

    Selectors are tried in priority order and the first one producing any
    stubs wins. Titles must be longer than ``MIN_TITLE_LENGTH`` characters
    and links are resolved against ``base_url``.
    """
    soup = BeautifulSoup(html, "html.parser")

    for selector in LISTING_SELECTORS:
        stubs: list[ArticleStub] = []
        for container in soup.select(selector):
            title, href = _headline(container)
            if not title or not href or len(title) <= MIN_TITLE_LENGTH:
                continue
            link = urljoin(base_url, href)
            try:
                stubs.append(ArticleStub(title=title, link=link))
            except ValidationError:
                continue

        if stubs:
            logger.debug("Selector %r matched %d stories", selector, len(stubs))
            return stubs[:SCRAPE_LIMIT]

    return []


def _headline(container) -> tuple[str, str | None]:
    title = ""
    href = None
    for selector in HEADLINE_SELECTORS:
        anchor = container.select_one(selector)
        if anchor is None:
            continue
        if not title:
            title = anchor.get_text().strip()
        if href is None:
            href = anchor.get("href") or None
        if title and href:
            break
    return title, href
