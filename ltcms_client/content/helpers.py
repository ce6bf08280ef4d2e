"""Utility helpers shared by the content section builders."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from .models import ContentValidationError


def _text(
    payload: cabc.Mapping[str, typ.Any],
    key: str,
    fallback: str | None,
    *,
    where: str,
) -> str:
    """Return ``payload[key]`` as text, or ``fallback`` when it is absent."""
    match payload.get(key):
        case None:
            if fallback is None:
                msg = f"{where} is missing '{key}'."
                raise ContentValidationError(msg)
            return fallback
        case str() as value:
            return value
        case bool():
            pass
        case int() | float() as number:
            return str(number)
    msg = f"{where} field '{key}' must be a string."
    raise ContentValidationError(msg)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _mapping(
    payload: cabc.Mapping[str, typ.Any], key: str, *, where: str
) -> cabc.Mapping[str, typ.Any]:
    """Return the nested mapping at ``key``; absent keys yield an empty one."""
    match payload.get(key):
        case None:
            return {}
        case cabc.Mapping() as nested:
            return nested
    msg = f"{where} field '{key}' must be a mapping."
    raise ContentValidationError(msg)


def _entries(
    payload: cabc.Mapping[str, typ.Any], key: str, *, where: str
) -> list[typ.Any] | None:
    """Return the list at ``key`` or None when the key is absent."""
    match payload.get(key):
        case None:
            return None
        case list() | tuple() as items:
            return list(items)
    msg = f"{where} field '{key}' must be a list."
    raise ContentValidationError(msg)


def _strings(
    payload: cabc.Mapping[str, typ.Any],
    key: str,
    fallback: list[str] | None,
    *,
    where: str,
) -> list[str]:
    """Return a list of non-blank strings, or a copy of ``fallback``."""
    entries = _entries(payload, key, where=where)
    if entries is None:
        return list(fallback or [])
    return [str(entry).strip() for entry in entries if _optional_str(entry)]


def _require_mapping(payload: object, *, where: str) -> cabc.Mapping[str, typ.Any]:
    """Return ``payload`` when it is a mapping, raising otherwise."""
    if isinstance(payload, cabc.Mapping):
        return payload
    msg = f"{where} must be a mapping."
    raise ContentValidationError(msg)


def _attr(model: object | None, name: str) -> typ.Any:
    """Return ``model.name`` or None when there is no fallback model."""
    return None if model is None else getattr(model, name)


__all__ = [
    "_attr",
    "_entries",
    "_mapping",
    "_optional_str",
    "_require_mapping",
    "_strings",
    "_text",
]
