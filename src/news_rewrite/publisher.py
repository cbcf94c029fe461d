"""Publisher that posts rewritten articles to the publish endpoint."""

import logging

import httpx
from pydantic import ValidationError

from news_rewrite.exceptions import PublisherError
from news_rewrite.models import ContentRecord, RewrittenArticle

logger = logging.getLogger(__name__)

PUBLISH_TIMEOUT = 10.0


class ArticlePublisher:
    """Publishes rewritten articles to the remote publish endpoint."""

    def __init__(
        self,
        publish_url: str,
        token: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the publisher with the endpoint URL.

        Args:
            publish_url: Endpoint accepting ``{title, text, image_link}``.
            token: Optional bearer token sent in the Authorization header.
            http_client: Optional shared client; one is created if omitted.

        Raises:
            ValueError: If publish_url is empty or whitespace.
        """
        if not publish_url or not publish_url.strip():
            raise ValueError("Publish URL must not be empty or whitespace")

        self.publish_url = publish_url
        self._token = token
        self._http = http_client or httpx.Client()

    def publish(self, article: RewrittenArticle) -> ContentRecord | None:
        """Publish one article.

        Args:
            article: The rewritten article to publish.

        Returns:
            The stored record when the endpoint echoes it back, else None.

        Raises:
            PublisherError: If a required field is missing, the endpoint
                returns a non-2xx status, or success is not confirmed.
        """
        if not article.title or not article.body:
            raise PublisherError("Missing required fields for publishing")

        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        payload = {
            "title": article.title,
            "text": article.body,
            "image_link": article.image_url or None,
        }

        logger.info("Publishing %r", article.title[:30])
        try:
            response = self._http.post(
                self.publish_url,
                json=payload,
                headers=headers,
                timeout=PUBLISH_TIMEOUT,
            )
        except httpx.TimeoutException as e:
            raise PublisherError("Publish request timed out", original_error=e) from e
        except httpx.HTTPError as e:
            raise PublisherError(f"Publish request failed: {e}", original_error=e) from e

        if not response.is_success:
            raise PublisherError(
                f"Publish endpoint returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PublisherError(
                "Publish endpoint returned a non-JSON response",
                status_code=response.status_code,
                original_error=e,
            ) from e

        if not isinstance(data, dict) or not data.get("success"):
            raise PublisherError(
                "Publishing failed - no success confirmation",
                status_code=response.status_code,
            )

        record_data = data.get("article")
        if not record_data:
            logger.info("Published without a record in the response")
            return None

        try:
            record = ContentRecord.model_validate(record_data)
        except ValidationError as e:
            # The article is already stored at this point; only the echo is unusable.
            logger.warning("Published, but the returned record is malformed: %s", e)
            return None

        logger.info("Published as %s", record.slug)
        return record

    def close(self) -> None:
        self._http.close()


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or "no body"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return "no error message"
