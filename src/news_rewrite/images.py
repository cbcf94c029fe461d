"""Generate a news image for a rewritten article and store it."""

import base64
import binascii
import logging
from pathlib import Path

from news_rewrite.config import MAX_SIGNED_URL_EXPIRY
from news_rewrite.exceptions import ImageGenerationError
from news_rewrite.gemini_client import GeminiClient, response_parts
from news_rewrite.storage import ImageStore

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MODEL = "gemini-2.0-flash-preview-image-generation"
IMAGE_TIMEOUT = 60.0
MIN_SUMMARY_LENGTH = 50
CONTENT_TYPE = "image/png"

IMAGE_PROMPT = (
    "Create a high-quality, realistic news graphic image for the following article "
    "summary. The image should be visually appealing and contextually relevant, using "
    "realistic textures, natural lighting, and news-style visuals (not cartoons or "
    "abstract). Avoid text in the image.\n\n{summary}"
)


class ImageGenerator:
    """Turn a rewritten summary into a stored image and a signed URL."""

    def __init__(
        self,
        client: GeminiClient,
        store: ImageStore,
        model: str = DEFAULT_IMAGE_MODEL,
        signed_url_expiry: int = MAX_SIGNED_URL_EXPIRY,
        backup_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._store = store
        self.model = model
        self.signed_url_expiry = signed_url_expiry
        self.backup_dir = backup_dir

    def generate(self, summary: str, image_name: str) -> str:
        """Generate, upload and sign an image for ``summary``.

        Args:
            summary: The rewritten article body.
            image_name: Slug used for the object key (``<image_name>.png``).

        Returns:
            A signed URL for the uploaded image.

        Raises:
            ImageGenerationError: If inputs are invalid or no image comes back.
            GeminiAPIError: If the API call fails.
            StorageError: If the upload or URL signing fails.
        """
        if not summary or len(summary) < MIN_SUMMARY_LENGTH:
            raise ImageGenerationError("Summary too short for image generation")
        if not image_name or not image_name.strip():
            raise ImageGenerationError("Image name is required")

        logger.info("Generating image for %s", image_name)
        payload = {
            "contents": [{"parts": [{"text": IMAGE_PROMPT.format(summary=summary)}]}],
            "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
        }
        data = self._client.generate_content(self.model, payload, timeout=IMAGE_TIMEOUT)

        parts = response_parts(data)
        if not parts:
            raise ImageGenerationError("Invalid image generation response")

        image = _first_image(parts)
        if image is None:
            raise ImageGenerationError("No image was generated in the response")

        if self.backup_dir is not None:
            self._write_backup(image, image_name)

        key = f"{image_name}.png"
        self._store.upload(key, image, CONTENT_TYPE)
        url = self._store.signed_url(key, expires_in=self.signed_url_expiry)
        logger.info("Image uploaded: %s...", url[:50])
        return url

    def _write_backup(self, image: bytes, image_name: str) -> None:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        path = self.backup_dir / f"{image_name}.png"
        path.write_bytes(image)
        logger.debug("Image backup written to %s", path)


def _first_image(parts: list[dict]) -> bytes | None:
    for part in parts:
        if not isinstance(part, dict):
            continue
        if part.get("text"):
            logger.debug("Image generation context: %s...", part["text"][:100])
            continue
        inline = part.get("inlineData") or part.get("inline_data")
        if not inline:
            continue
        encoded = inline.get("data")
        if not encoded:
            raise ImageGenerationError("No image data received")
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageGenerationError("Image data is not valid base64") from e
    return None
