"""AWS Lambda handler for scheduled news rewrite runs.

This module is the entry point when the pipeline runs on a schedule
(e.g. an EventBridge rule invoking the function every hour). It reads
an optional article count from the event, runs one batch, and returns
an API Gateway-style response with the run summary.

Module-level initialization is used for cold start optimization:
configuration and API clients are built once when the Lambda container
starts, not on every invocation.
"""

import json
import logging
import os
from typing import Any

import boto3

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

logger = logging.getLogger(__name__)

MAX_COUNT = 50

_config: Config | None = None
_fetcher: SourceFetcher | None = None
_extractor: ContentExtractor | None = None
_rewriter: Rewriter | None = None
_image_generator: ImageGenerator | None = None
_publisher: ArticlePublisher | None = None
_init_error: Exception | None = None


def _get_secret(secret_name: str) -> str:
    """Retrieve secret value from AWS Secrets Manager.

    Args:
        secret_name: The name or ARN of the secret to retrieve.

    Returns:
        The secret string value.

    Raises:
        ClientError: If the secret cannot be retrieved.
    """
    client = boto3.client("secretsmanager")
    response = client.get_secret_value(SecretId=secret_name)
    return response["SecretString"]


def _load_config() -> Config:
    """Build the config, taking the Gemini key from Secrets Manager when configured."""
    secret_name = os.environ.get("GEMINI_API_KEY_SECRET_NAME")
    if secret_name:
        return Config(gemini_api_key=_get_secret(secret_name))
    return Config()


def _initialize() -> None:
    """Initialize module-level resources at container startup.

    This function runs once when the Lambda container starts (cold start).
    Errors are captured rather than raised so the handler can return
    proper error responses instead of crashing.
    """
    global _config, _fetcher, _extractor, _rewriter, _image_generator, _publisher, _init_error

    try:
        _config = _load_config()
        setup_logging(_config.log_level)

        gemini = GeminiClient(api_key=_config.gemini_api_key, base_url=_config.gemini_base_url)
        store = ImageStore(
            bucket=_config.storage_bucket,
            endpoint_url=_config.storage_endpoint_url,
            access_key_id=_config.storage_access_key_id,
            secret_access_key=_config.storage_secret_access_key,
            region_name=_config.storage_region,
        )

        _fetcher = SourceFetcher(feed_url=_config.feed_url, listing_url=_config.listing_url)
        _extractor = ContentExtractor()
        _rewriter = Rewriter(gemini, model=_config.gemini_text_model)
        _image_generator = ImageGenerator(
            gemini,
            store,
            model=_config.gemini_image_model,
            signed_url_expiry=_config.signed_url_expiry,
            backup_dir=_config.image_backup_dir,
        )
        _publisher = ArticlePublisher(
            publish_url=_config.publish_url,
            token=_config.publish_token,
        )

    except Exception as e:
        _init_error = e


_initialize()


def _parse_count(value: Any) -> int | None | bool:
    """Parse the optional article count from the event.

    Returns:
        - int if the value is a whole number between 1 and MAX_COUNT
        - None if value is None
        - False if the value is invalid (sentinel for error handling)
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return False
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return False
    if isinstance(value, float) and count != value:
        return False
    if not 1 <= count <= MAX_COUNT:
        return False
    return count


def _success_response(result: dict[str, int]) -> dict[str, Any]:
    """Build a successful Lambda response.

    Args:
        result: The run summary counts.

    Returns:
        API Gateway-style response with statusCode 200.
    """
    return {
        "statusCode": 200,
        "body": json.dumps(result),
    }


def _error_response(
    status_code: int,
    message: str,
    result: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Build an error Lambda response.

    Error messages are generic to avoid leaking sensitive information
    like API keys, internal paths, or stack traces.

    Args:
        status_code: HTTP status code (400, 500, 503, etc.)
        message: User-safe error message.
        result: Optional run summary counts to include.

    Returns:
        API Gateway-style error response.
    """
    body: dict[str, Any] = {"error": message}
    if result is not None:
        body.update(result)
    return {
        "statusCode": status_code,
        "body": json.dumps(body),
    }


def handler(event: dict[str, Any] | None, context: Any) -> dict[str, Any]:
    """AWS Lambda entry point.

    Args:
        event: Lambda event, optionally containing:
            - count: Maximum number of articles to process (1-50)
        context: Lambda context (unused but required by AWS).

    Returns:
        API Gateway-style response with statusCode and JSON body.

    Response codes:
        200: Success - body contains the run summary
        400: Bad request - invalid count
        500: Configuration error, internal failure, or nothing published
        503: No articles available from any source
    """
    if _init_error is not None:
        return _error_response(500, "Service configuration error")

    event = event or {}
    count = _parse_count(event.get("count"))
    if count is False:
        return _error_response(400, f"count must be a whole number between 1 and {MAX_COUNT}")

    try:
        summary = run(
            count=count or _config.article_count,
            fetcher=_fetcher,
            extractor=_extractor,
            rewriter=_rewriter,
            image_generator=_image_generator,
            publisher=_publisher,
            delay_seconds=_config.article_delay_seconds,
        )

    except SourceFetchError:
        return _error_response(503, "No articles available from any source")

    except Exception:
        logger.exception("Unhandled error during run")
        return _error_response(500, "Internal server error")

    result = summary.as_dict()
    if summary.succeeded == 0:
        return _error_response(500, "No articles were published", result)
    return _success_response(result)
