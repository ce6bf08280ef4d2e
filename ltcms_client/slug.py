"""Slug helpers for page, post, and tutorial identifiers.

``sanitize_slug`` turns arbitrary titles into URL-safe slugs, ``is_valid_slug``
checks editor input against the strict slug pattern, and ``normalize_slug``
produces the lookup key used by the published-page cache.

Examples
--------
>>> sanitize_slug("Linux Grundlagen für Anfänger")
'linux-grundlagen-fur-anfanger'
>>> sanitize_slug("Multiple   spaces___and---separators")
'multiple-spaces-and-separators'
>>> is_valid_slug("double--dash")
False
"""

from __future__ import annotations

import re
import unicodedata

MAX_SLUG_LENGTH = 100
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_SEPARATOR_RUNS = re.compile(r"[^a-z0-9]+")


class InvalidSlugError(ValueError):
    """Raised when a slug is missing or empty after normalisation."""


def sanitize_slug(value: object) -> str:
    """Return a lowercase, hyphen-separated slug derived from ``value``.

    Diacritics are folded to their base letters, every run of characters
    outside ``[a-z0-9]`` becomes a single hyphen, and leading or trailing
    hyphens are dropped. The result is capped at ``MAX_SLUG_LENGTH``
    characters and is empty when nothing usable remains. Applying the
    function to its own output returns the output unchanged.
    """
    if not isinstance(value, str) or not value:
        return ""
    folded = _COMBINING_MARKS.sub("", unicodedata.normalize("NFKD", value))
    cleaned = _SEPARATOR_RUNS.sub("-", folded.lower().strip()).strip("-")
    return cleaned[:MAX_SLUG_LENGTH].rstrip("-")


def is_valid_slug(value: object) -> bool:
    """Return whether ``value`` already is a well-formed slug."""
    return isinstance(value, str) and SLUG_PATTERN.fullmatch(value) is not None


def normalize_slug(value: object) -> str:
    """Return the trimmed, lowercased form of ``value`` used as a cache key."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def require_slug(value: object) -> str:
    """Return ``normalize_slug(value)`` or raise when it is empty."""
    normalized = normalize_slug(value)
    if not normalized:
        msg = "Slug is required"
        raise InvalidSlugError(msg)
    return normalized


__all__ = [
    "MAX_SLUG_LENGTH",
    "SLUG_PATTERN",
    "InvalidSlugError",
    "is_valid_slug",
    "normalize_slug",
    "require_slug",
    "sanitize_slug",
]
