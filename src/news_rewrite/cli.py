"""Command-line interface for the news rewrite pipeline."""

import signal
import sys

import click

from news_rewrite.config import Config
from news_rewrite.exceptions import SourceFetchError
from news_rewrite.extractor import ContentExtractor
from news_rewrite.gemini_client import GeminiClient
from news_rewrite.images import ImageGenerator
from news_rewrite.logging_utils import setup_logging
from news_rewrite.orchestrator import run
from news_rewrite.publisher import ArticlePublisher
from news_rewrite.rewriter import Rewriter
from news_rewrite.sources import SourceFetcher
from news_rewrite.storage import ImageStore


@click.command()
@click.option(
    "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of articles to process (default: ARTICLE_COUNT or 15).",
)
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait between articles (default: ARTICLE_DELAY_SECONDS or 1.5).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging verbosity (default: LOG_LEVEL or INFO).",
)
def main(count: int | None, delay: float | None, log_level: str | None) -> None:
    """Fetch the latest news, rewrite each article with Gemini and publish it."""
    try:
        config = Config()
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    setup_logging(log_level or config.log_level)
    # SIGTERM stops the run the same way Ctrl-C does.
    signal.signal(signal.SIGTERM, signal.default_int_handler)

    components = []
    try:
        gemini = GeminiClient(api_key=config.gemini_api_key, base_url=config.gemini_base_url)
        components.append(gemini)
        store = ImageStore(
            bucket=config.storage_bucket,
            endpoint_url=config.storage_endpoint_url,
            access_key_id=config.storage_access_key_id,
            secret_access_key=config.storage_secret_access_key,
            region_name=config.storage_region,
        )
        fetcher = SourceFetcher(feed_url=config.feed_url, listing_url=config.listing_url)
        components.append(fetcher)
        extractor = ContentExtractor()
        components.append(extractor)
        publisher = ArticlePublisher(publish_url=config.publish_url, token=config.publish_token)
        components.append(publisher)

        summary = run(
            count=count or config.article_count,
            fetcher=fetcher,
            extractor=extractor,
            rewriter=Rewriter(gemini, model=config.gemini_text_model),
            image_generator=ImageGenerator(
                gemini,
                store,
                model=config.gemini_image_model,
                signed_url_expiry=config.signed_url_expiry,
                backup_dir=config.image_backup_dir,
            ),
            publisher=publisher,
            delay_seconds=config.article_delay_seconds if delay is None else delay,
        )

    except SourceFetchError as e:
        click.echo(f"Source error: {e}", err=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("Interrupted, shutting down.", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)

    finally:
        for component in components:
            component.close()

    click.echo("Processing complete")
    click.echo(f"  Total articles processed: {summary.processed}")
    click.echo(f"  Successful: {summary.succeeded}")
    click.echo(f"  Failed: {summary.failed}")
    click.echo(f"  Success rate: {summary.success_rate}%")

    if summary.succeeded == 0:
        click.echo(
            "No articles were published. Check your configuration and network connection.",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
