"""Client settings loaded from ``config.toml`` and the environment.

Settings live in ``~/.config/ltcms/config.toml`` by default (override with
``LTCMS_CONFIG_FILE``)::

    [api]
    base_url = "https://tutorials.example/api"
    timeout = 15.0
    cache_bust = false

    [retry]
    max_attempts = 3
    base_delay = 0.3

``LTCMS_API_BASE_URL`` and ``LTCMS_API_CACHE_BUST`` take precedence over the
file so deployments can point the client elsewhere without editing it.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

import tomlkit

from ._constants import (
    DEFAULT_API_BASE,
    DEFAULT_TIMEOUT,
    MAX_LOAD_ATTEMPTS,
    RETRY_BASE_DELAY,
)

DEFAULT_CONFIG_PATH = Path(
    os.getenv(
        "LTCMS_CONFIG_FILE",
        Path.home() / ".config" / "ltcms" / "config.toml",
    )
)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


class SettingsError(ValueError):
    """Raised when the settings file or environment holds invalid values."""


@dc.dataclass(slots=True, frozen=True)
class ClientSettings:
    """Resolved configuration for the API client and the tutorial loader."""

    base_url: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    cache_bust: bool = False
    max_attempts: int = MAX_LOAD_ATTEMPTS
    base_delay: float = RETRY_BASE_DELAY


def load_settings(
    path: Path | None = None, *, environ: typ.Mapping[str, str] | None = None
) -> ClientSettings:
    """Load settings from ``path`` and apply environment overrides.

    Parameters
    ----------
    path : Path, optional
        TOML file to read. A missing file is not an error; defaults apply.
        Defaults to ``DEFAULT_CONFIG_PATH``.
    environ : Mapping, optional
        Environment to read overrides from. Defaults to ``os.environ``.

    Returns
    -------
    ClientSettings
        The merged settings.

    Raises
    ------
    SettingsError
        If the TOML cannot be parsed or a value has the wrong type.
    """
    config_path = path or DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ
    api_table, retry_table = _read_tables(config_path)

    base_url = env.get("LTCMS_API_BASE_URL") or api_table.get(
        "base_url", DEFAULT_API_BASE
    )
    cache_bust_raw = env.get("LTCMS_API_CACHE_BUST")
    cache_bust = (
        _parse_bool("LTCMS_API_CACHE_BUST", cache_bust_raw)
        if cache_bust_raw is not None
        else api_table.get("cache_bust", False)
    )

    if not isinstance(base_url, str) or not base_url.strip():
        msg = "api.base_url must be a non-empty string"
        raise SettingsError(msg)
    if not isinstance(cache_bust, bool):
        msg = "api.cache_bust must be a boolean"
        raise SettingsError(msg)

    return ClientSettings(
        base_url=base_url.strip().rstrip("/"),
        timeout=_positive_number(
            "api.timeout", api_table.get("timeout", DEFAULT_TIMEOUT)
        ),
        cache_bust=cache_bust,
        max_attempts=int(
            _positive_number(
                "retry.max_attempts", retry_table.get("max_attempts", MAX_LOAD_ATTEMPTS)
            )
        ),
        base_delay=_non_negative_number(
            "retry.base_delay", retry_table.get("base_delay", RETRY_BASE_DELAY)
        ),
    )


def _read_tables(path: Path) -> tuple[dict[str, typ.Any], dict[str, typ.Any]]:
    if not path.exists():
        return {}, {}
    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse settings TOML at {path}"
        raise SettingsError(msg) from exc

    def _as_dict(table: typ.Any) -> dict[str, typ.Any]:
        return {k: _unwrap(v) for k, v in table.items()} if table else {}

    return _as_dict(doc.get("api")), _as_dict(doc.get("retry"))


def _unwrap(value: typ.Any) -> typ.Any:
    """Return the plain Python value behind a tomlkit item."""
    return value.unwrap() if hasattr(value, "unwrap") else value


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    msg = f"{name} must be a boolean flag, got {raw!r}"
    raise SettingsError(msg)


def _positive_number(name: str, value: object) -> float:
    number = _non_negative_number(name, value)
    if number == 0:
        msg = f"{name} must be greater than zero"
        raise SettingsError(msg)
    return number


def _non_negative_number(name: str, value: object) -> float:
    match value:
        case bool():
            pass
        case int() | float() if value >= 0:
            return float(value)
    msg = f"{name} must be a non-negative number, got {value!r}"
    raise SettingsError(msg)


__all__ = ["DEFAULT_CONFIG_PATH", "ClientSettings", "SettingsError", "load_settings"]
