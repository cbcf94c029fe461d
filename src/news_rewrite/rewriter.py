"""Rewrite article bodies and titles with Gemini."""

import logging

from news_rewrite.exceptions import RewriteError
from news_rewrite.gemini_client import GeminiClient, extract_text

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.0-flash"

BODY_TIMEOUT = 30.0
TITLE_TIMEOUT = 15.0

MIN_BODY_INPUT_LENGTH = 50
MIN_BODY_OUTPUT_LENGTH = 100
MIN_TITLE_LENGTH = 5

BODY_PROMPT = """**Role:** You are a neutral and objective news editor.
**Task:** Rewrite the following news article into a factual report of a new news agency in 400 words.
**Audience:** A general reader who wants to understand the key facts quickly.
**Instructions:**
1. Focus exclusively on the core facts: who, what, when, where, and why.
2. Remove all opinion, speculation, promotional language, and irrelevant details.
3. Write in a clear, professional, and objective tone.
4. Do not copy sentences verbatim from the original article. Paraphrase everything.
5. Begin with a single sentence that summarizes the most important information.
6. The input is an existing news report; turn it into original, non-copyrightable content.
7. Most important: the report must be 400-500 words long.

**Article to process:**
"{content}\""""

TITLE_PROMPT = """**Task:** Rewrite the title below so it does not copy the original wording \
and carries no copyright risk. Give only one title, under 10 words.
**Title to process:**
"{title}\""""


class Rewriter:
    """Produce paraphrased article bodies and short rewritten titles."""

    def __init__(self, client: GeminiClient, model: str = DEFAULT_TEXT_MODEL) -> None:
        self._client = client
        self.model = model

    def rewrite_body(self, content: str) -> str:
        """Rewrite extracted article text into a 400-500 word report.

        Args:
            content: Extracted article body.

        Returns:
            The rewritten report.

        Raises:
            RewriteError: If the input is too short, or the response has no
                text or the text is too short.
            GeminiAPIError: If the API call fails.
        """
        if not content or len(content) < MIN_BODY_INPUT_LENGTH:
            raise RewriteError("Content too short for rewriting")

        logger.info("Rewriting content with Gemini")
        data = self._client.generate_content(
            self.model,
            _text_payload(BODY_PROMPT.format(content=content)),
            timeout=BODY_TIMEOUT,
        )

        text = extract_text(data)
        if text is None:
            raise RewriteError("Invalid response structure from Gemini API")

        text = text.strip()
        if len(text) < MIN_BODY_OUTPUT_LENGTH:
            raise RewriteError("Generated content too short")

        logger.info("Content rewritten (%d chars, %d words)", len(text), len(text.split()))
        return text

    def rewrite_title(self, title: str) -> str:
        """Rewrite a headline into a single title of under 10 words.

        Raises:
            RewriteError: If the title or the generated title is too short,
                or the response has no text.
            GeminiAPIError: If the API call fails.
        """
        if not title or len(title.strip()) < MIN_TITLE_LENGTH:
            raise RewriteError("Title content too short")

        logger.info("Rewriting title with Gemini")
        data = self._client.generate_content(
            self.model,
            _text_payload(TITLE_PROMPT.format(title=title)),
            timeout=TITLE_TIMEOUT,
        )

        text = extract_text(data)
        if text is None:
            raise RewriteError("Invalid title rewrite response")

        new_title = _clean_title(text)
        if len(new_title) < MIN_TITLE_LENGTH:
            raise RewriteError("Generated title too short")

        logger.info("Title rewritten: %r", new_title)
        return new_title


def _text_payload(prompt: str) -> dict:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def _clean_title(text: str) -> str:
    # Models tend to answer with a quoted or bolded title on the first line.
    first_line = text.strip().splitlines()[0] if text.strip() else ""
    return first_line.strip().strip("*").strip().strip("\"'").strip()
