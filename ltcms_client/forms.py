"""Validators applied to editor form input before it reaches the API."""

from __future__ import annotations

import collections.abc as cabc
import json
import typing as typ


class JsonFieldError(ValueError):
    """Raised when a JSON form field does not parse."""

    def __init__(self, field: str, detail: str) -> None:
        super().__init__(f'Invalid JSON in field "{field}": {detail}')
        self.field = field


def parse_json_field(value: str | None, field: str) -> typ.Any:
    """Parse the JSON text of form field ``field``.

    Blank input yields an empty mapping, matching how the page form treats
    untouched hero and layout fields.
    """
    trimmed = (value or "").strip()
    if not trimmed:
        return {}
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError as exc:
        raise JsonFieldError(field, exc.msg) from exc


def sanitize_integer(value: object, fallback: int = 0) -> int:
    """Coerce form input to an integer, returning ``fallback`` when unusable."""
    match value:
        case None | "":
            return fallback
        case bool():
            return int(value)
        case int():
            return value
        case float() if value.is_integer():
            return int(value)
        case str() as text:
            try:
                return int(text.strip())
            except ValueError:
                return fallback
        case _:
            return fallback


def optional_text(value: object) -> str | None:
    """Return ``value`` as stripped text, or ``None`` when missing or blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def sanitize_topics(topics: object) -> list[str] | None:
    """Return the non-blank string topics, or ``None`` when no list was given."""
    if not isinstance(topics, cabc.Sequence) or isinstance(topics, str):
        return None
    return [topic for topic in topics if isinstance(topic, str) and topic.strip()]


__all__ = [
    "JsonFieldError",
    "optional_text",
    "parse_json_field",
    "sanitize_integer",
    "sanitize_topics",
]
