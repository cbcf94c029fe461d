"""Gemini API client for the generateContent endpoint."""

import logging
from typing import Any

import httpx

from news_rewrite.exceptions import GeminiAPIError, RateLimitError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT = 30.0


class GeminiClient:
    """Thin client for Gemini's ``generateContent`` REST endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = GEMINI_BASE_URL,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize client with API key.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter.
            base_url: API root, overridable for proxies and tests.
            http_client: Optional shared client; one is created if omitted.

        Raises:
            ValueError: If api_key is empty or whitespace-only.
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key must not be empty")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client()

    def generate_content(
        self,
        model: str,
        payload: dict[str, Any],
        timeout: float = DEFAULT_TIMEOUT,
    ) -> dict[str, Any]:
        """POST a generateContent request and return the decoded JSON body.

        Raises:
            RateLimitError: If the API returns 429.
            GeminiAPIError: On timeouts, transport errors, authentication
                failures, any other error status, or a non-JSON body.
        """
        url = f"{self.base_url}/v1beta/models/{model}:generateContent"
        logger.debug("Calling Gemini generateContent with model %s", model)

        try:
            response = self._http.post(
                url,
                params={"key": self._api_key},
                json=payload,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise GeminiAPIError(f"Gemini API timeout after {timeout:.0f}s") from e
        except httpx.HTTPError as e:
            raise GeminiAPIError(f"Gemini API request failed: {e.__class__.__name__}") from e

        if response.status_code == 429:
            raise RateLimitError()

        if response.status_code in (401, 403):
            raise GeminiAPIError(
                "Gemini API authentication failed",
                status_code=response.status_code,
            )

        if response.status_code >= 400:
            raise GeminiAPIError(
                f"Gemini API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GeminiAPIError("Gemini API returned a non-JSON response") from e

    def close(self) -> None:
        self._http.close()


def extract_text(data: dict[str, Any]) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or None if absent."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def response_parts(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the parts of the first candidate, or an empty list."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return []
    return parts if isinstance(parts, list) else []
