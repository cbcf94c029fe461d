"""Unit tests for image generation.

The Gemini client and the image store are MagicMocks; storage itself is
covered in test_storage.py.
"""

import base64
from unittest.mock import MagicMock

import pytest

from news_rewrite.exceptions import GeminiAPIError, ImageGenerationError, StorageError
from news_rewrite.images import CONTENT_TYPE, ImageGenerator

SUMMARY = " ".join(["Heavy rain flooded the city and officials opened relief camps."] * 5)
IMAGE_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
SIGNED_URL = "https://storage.example.com/images/downpour.png?X-Amz-Signature=abc"


def _image_response(*parts: dict) -> dict:
    return {"candidates": [{"content": {"parts": list(parts)}}]}


def _inline(data: bytes) -> dict:
    return {"inlineData": {"mimeType": "image/png", "data": base64.b64encode(data).decode()}}


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.generate_content.return_value = _image_response(
        {"text": "Here is a realistic image of a flooded street."},
        _inline(IMAGE_BYTES),
    )
    return client


@pytest.fixture
def store() -> MagicMock:
    store = MagicMock()
    store.signed_url.return_value = SIGNED_URL
    return store


@pytest.fixture
def generator(client: MagicMock, store: MagicMock) -> ImageGenerator:
    return ImageGenerator(client, store, model="image-model", signed_url_expiry=3600)


class TestGenerate:
    """Tests for ImageGenerator.generate()."""

    def test_returns_signed_url(self, generator: ImageGenerator):
        assert generator.generate(SUMMARY, "downpour-swamps-city") == SIGNED_URL

    def test_uploads_decoded_image_under_slug_key(self, generator: ImageGenerator, store: MagicMock):
        generator.generate(SUMMARY, "downpour-swamps-city")

        store.upload.assert_called_once_with("downpour-swamps-city.png", IMAGE_BYTES, CONTENT_TYPE)
        store.signed_url.assert_called_once_with("downpour-swamps-city.png", expires_in=3600)

    def test_requests_text_and_image_modalities(self, generator: ImageGenerator, client: MagicMock):
        generator.generate(SUMMARY, "downpour-swamps-city")

        model, payload = client.generate_content.call_args.args
        assert model == "image-model"
        assert payload["generationConfig"]["responseModalities"] == ["TEXT", "IMAGE"]
        assert SUMMARY in payload["contents"][0]["parts"][0]["text"]

    def test_writes_local_backup_when_configured(self, client, store, tmp_path):
        generator = ImageGenerator(client, store, backup_dir=tmp_path / "backups")

        generator.generate(SUMMARY, "downpour-swamps-city")

        assert (tmp_path / "backups" / "downpour-swamps-city.png").read_bytes() == IMAGE_BYTES

    def test_rejects_short_summary(self, generator: ImageGenerator, client: MagicMock):
        with pytest.raises(ImageGenerationError, match="Summary too short"):
            generator.generate("short", "slug")

        client.generate_content.assert_not_called()

    @pytest.mark.parametrize("name", ["", "  "])
    def test_requires_image_name(self, generator: ImageGenerator, name: str):
        with pytest.raises(ImageGenerationError, match="Image name"):
            generator.generate(SUMMARY, name)

    def test_fails_without_candidates(self, generator: ImageGenerator, client: MagicMock):
        client.generate_content.return_value = {"candidates": []}

        with pytest.raises(ImageGenerationError, match="Invalid image generation response"):
            generator.generate(SUMMARY, "slug")

    def test_fails_when_only_text_returned(
        self, generator: ImageGenerator, client: MagicMock, store: MagicMock
    ):
        client.generate_content.return_value = _image_response({"text": "I cannot draw that."})

        with pytest.raises(ImageGenerationError, match="No image was generated"):
            generator.generate(SUMMARY, "slug")

        store.upload.assert_not_called()

    def test_fails_on_empty_inline_data(self, generator: ImageGenerator, client: MagicMock):
        client.generate_content.return_value = _image_response({"inlineData": {"data": ""}})

        with pytest.raises(ImageGenerationError, match="No image data"):
            generator.generate(SUMMARY, "slug")

    def test_fails_on_invalid_base64(self, generator: ImageGenerator, client: MagicMock):
        client.generate_content.return_value = _image_response({"inlineData": {"data": "not base64!"}})

        with pytest.raises(ImageGenerationError, match="base64"):
            generator.generate(SUMMARY, "slug")

    def test_storage_failure_propagates(self, generator: ImageGenerator, store: MagicMock):
        store.upload.side_effect = StorageError("Upload failed")

        with pytest.raises(StorageError):
            generator.generate(SUMMARY, "slug")

        store.signed_url.assert_not_called()

    def test_api_failure_propagates(self, generator: ImageGenerator, client: MagicMock):
        client.generate_content.side_effect = GeminiAPIError("Gemini API error: 503", status_code=503)

        with pytest.raises(GeminiAPIError):
            generator.generate(SUMMARY, "slug")
