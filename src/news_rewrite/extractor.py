"""Article body extraction from news pages."""

import logging

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0"
ARTICLE_TIMEOUT = 12.0

MIN_CONTENT_LENGTH = 100
MIN_PARAGRAPH_LENGTH = 50
MIN_ACCEPTED_PARAGRAPHS = 4
MAX_PARAGRAPHS = 8

CONTENT_SELECTORS = (
    ".sp-cn.ins_storybody > p",
    ".ins_storybody p",
    ".story_content p",
    ".article-content p",
    ".content p",
    "p",
)

BOILERPLATE_MARKERS = ("©", "All rights reserved")


class ContentExtractor:
    """Fetch an article page and pull out its body paragraphs."""

    def __init__(self, http_client: httpx.Client | None = None) -> None:
        self._http = http_client or httpx.Client(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    def extract(self, url: str) -> str:
        """Return the article body, or an empty string when it cannot be used.

        Failures here are never raised: a timeout, a network error or a body
        shorter than ``MIN_CONTENT_LENGTH`` all produce ``""`` so the caller
        can skip the article.
        """
        if not url or not isinstance(url, str) or not url.strip():
            logger.warning("Invalid article link: %r", url)
            return ""

        logger.info("Fetching article %s", url[:80])
        try:
            response = self._http.get(url, timeout=ARTICLE_TIMEOUT)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Article fetch timed out: %s", url)
            return ""
        except httpx.HTTPStatusError as e:
            logger.warning("Article fetch failed with HTTP %s: %s", e.response.status_code, url)
            return ""
        except httpx.HTTPError as e:
            logger.warning("Article fetch network error for %s: %s", url, e)
            return ""
        except httpx.InvalidURL as e:
            logger.warning("Invalid article link %r: %s", url[:80], e)
            return ""

        content = extract_paragraphs(response.text)
        if len(content) < MIN_CONTENT_LENGTH:
            logger.warning("Article content too short (%d chars): %s", len(content), url)
            return ""

        logger.info("Article content extracted (%d chars)", len(content))
        return content

    def close(self) -> None:
        self._http.close()


def extract_paragraphs(html: str) -> str:
    """Join the body paragraphs of an article page.

    The first selector with at least ``MIN_ACCEPTED_PARAGRAPHS`` usable
    paragraphs wins; if none gets there, the selector with the most usable
    paragraphs is used instead.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    best: list[str] = []

    for selector in CONTENT_SELECTORS:
        paragraphs = [
            text
            for text in (el.get_text().strip() for el in soup.select(selector))
            if _is_body_text(text)
        ]
        if len(paragraphs) >= MIN_ACCEPTED_PARAGRAPHS:
            best = paragraphs
            break
        if len(paragraphs) > len(best):
            best = paragraphs

    return "\n\n".join(best[:MAX_PARAGRAPHS])


def _is_body_text(text: str) -> bool:
    if len(text) <= MIN_PARAGRAPH_LENGTH:
        return False
    return not any(marker in text for marker in BOILERPLATE_MARKERS)
