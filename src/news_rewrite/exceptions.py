"""Custom exceptions for the news rewrite pipeline."""


class SourceFetchError(Exception):
    """Raised when neither the feed nor the listing page produced any articles."""


class PipelineError(Exception):
    """Base class for failures that abort a single article but not the run."""


class ExtractionError(PipelineError):
    """Raised when an article body could not be extracted."""


class GeminiAPIError(PipelineError):
    """Raised when the Gemini API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(GeminiAPIError):
    """Raised when the Gemini API returns a 429 rate limit response."""

    def __init__(self, message: str = "Gemini API rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class RewriteError(PipelineError):
    """Raised when a rewrite request is invalid or the rewritten text is unusable."""


class ImageGenerationError(PipelineError):
    """Raised when the Gemini image endpoint does not yield an image."""


class StorageError(PipelineError):
    """Raised when uploading to or signing from object storage fails."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        self.original_error = original_error
        super().__init__(message)


class PublisherError(PipelineError):
    """Raised when the publish endpoint rejects or fails to confirm an article."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message)
