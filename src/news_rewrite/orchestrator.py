"""Orchestrator for the fetch, rewrite, image and publish pipeline."""

import logging
import time
from typing import Any, Callable

from news_rewrite.exceptions import ExtractionError, PipelineError, SourceFetchError
from news_rewrite.extractor import MIN_CONTENT_LENGTH, ContentExtractor
from news_rewrite.images import ImageGenerator
from news_rewrite.models import (
    ArticleOutcome,
    ArticleStage,
    ArticleStub,
    RewrittenArticle,
    RunSummary,
)
from news_rewrite.publisher import ArticlePublisher
from news_rewrite.rewriter import Rewriter
from news_rewrite.slug import slugify
from news_rewrite.sources import SourceFetcher

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.5


def process_article(
    stub: ArticleStub,
    extractor: ContentExtractor | Any,
    rewriter: Rewriter | Any,
    image_generator: ImageGenerator | Any,
    publisher: ArticlePublisher | Any,
) -> ArticleOutcome:
    """Run one article through every stage.

    Stages run strictly in order and the article is only published once all
    of them succeed. A ``PipelineError`` stops the article at the stage being
    attempted; any other exception propagates.

    Returns:
        The outcome, with ``failed_stage`` set when a stage failed.
    """
    outcome = ArticleOutcome(stub=stub)
    attempting = ArticleStage.EXTRACTED

    try:
        content = extractor.extract(stub.link)
        if not content or len(content) < MIN_CONTENT_LENGTH:
            raise ExtractionError("Content too short or unavailable")
        outcome.stage = ArticleStage.EXTRACTED

        attempting = ArticleStage.REWRITTEN
        body = rewriter.rewrite_body(content)
        outcome.stage = ArticleStage.REWRITTEN

        attempting = ArticleStage.TITLED
        title = rewriter.rewrite_title(stub.title)
        outcome.stage = ArticleStage.TITLED

        attempting = ArticleStage.IMAGED
        image_url = image_generator.generate(body, slugify(title))
        outcome.stage = ArticleStage.IMAGED

        attempting = ArticleStage.PUBLISHED
        outcome.record = publisher.publish(
            RewrittenArticle(title=title, body=body, image_url=image_url)
        )
        outcome.stage = ArticleStage.PUBLISHED

    except PipelineError as e:
        outcome.failed_stage = attempting
        outcome.stage = ArticleStage.FAILED
        outcome.error = str(e)

    return outcome


def run(
    count: int,
    fetcher: SourceFetcher | Any,
    extractor: ContentExtractor | Any,
    rewriter: Rewriter | Any,
    image_generator: ImageGenerator | Any,
    publisher: ArticlePublisher | Any,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """Execute the news rewrite pipeline for one batch.

    Args:
        count: Maximum number of articles to take from the sources.
        fetcher: SourceFetcher instance (or mock for testing).
        extractor: ContentExtractor instance (or mock for testing).
        rewriter: Rewriter instance (or mock for testing).
        image_generator: ImageGenerator instance (or mock for testing).
        publisher: ArticlePublisher instance (or mock for testing).
        delay_seconds: Pause between articles to stay under rate limits.
        sleep: Sleep function, replaceable in tests.

    Returns:
        Summary with processed, succeeded and failed counts.

    Raises:
        SourceFetchError: If neither the feed nor the listing page yields articles.
    """
    stubs: list[ArticleStub] = fetcher.fetch(count)
    if not stubs:
        raise SourceFetchError("No articles found from any source")

    logger.info("Found %d articles to process", len(stubs))
    summary = RunSummary()

    for index, stub in enumerate(stubs, start=1):
        logger.info("[%d/%d] Processing: %s", index, len(stubs), stub.title[:50])

        outcome = process_article(stub, extractor, rewriter, image_generator, publisher)
        summary.add(outcome)

        if outcome.succeeded:
            logger.info("Article %d published", index)
        else:
            logger.error(
                "Article %d failed at %s: %s",
                index,
                outcome.failed_stage.value,
                outcome.error,
            )

        if index < len(stubs) and delay_seconds > 0:
            sleep(delay_seconds)

    logger.info(
        "Run complete: %d processed, %d succeeded, %d failed (%d%%)",
        summary.processed,
        summary.succeeded,
        summary.failed,
        summary.success_rate,
    )
    return summary
