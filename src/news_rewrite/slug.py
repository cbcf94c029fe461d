"""Slug helpers for image keys and published article URLs."""

import re
import time

DEFAULT_SLUG = "default-slug"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify(text: str) -> str:
    """Turn text into a lowercase dash-separated key.

    Used for object storage keys. Falls back to ``DEFAULT_SLUG`` when the
    input is not a string or reduces to nothing.
    """
    if not isinstance(text, str):
        return DEFAULT_SLUG
    slug = _NON_ALNUM.sub("-", text.lower()).strip("-")
    return slug or DEFAULT_SLUG


def build_slug(title: str, disambiguator: str) -> str:
    """Build the unique slug stored with a published article.

    Args:
        title: Article title.
        disambiguator: Suffix that makes the slug unique, usually a
            millisecond timestamp or the first 8 characters of the record id.

    Returns:
        ``<title-slug>-<disambiguator>``.

    Raises:
        ValueError: If disambiguator is empty.
    """
    if not disambiguator or not disambiguator.strip():
        raise ValueError("disambiguator must not be empty")

    base = _DISALLOWED.sub("", title.lower())
    base = _WHITESPACE.sub("-", base)
    base = _DASHES.sub("-", base).strip()
    return f"{base}-{disambiguator}"


def timestamp_disambiguator() -> str:
    return str(time.time_ns() // 1_000_000)
