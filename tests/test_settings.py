"""Unit tests for loading client settings."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from ltcms_client._constants import DEFAULT_API_BASE
from ltcms_client.settings import ClientSettings, SettingsError, load_settings

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
    return path


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    """Without a config file every setting takes its default."""
    settings = load_settings(tmp_path / "absent.toml", environ={})

    assert settings == ClientSettings(), f"unexpected settings {settings!r}"
    assert settings.base_url == DEFAULT_API_BASE


def test_file_values_are_read(tmp_path: Path) -> None:
    """API and retry tables populate the settings."""
    path = _write(
        tmp_path,
        """
        [api]
        base_url = "https://tutorials.example.invalid/api/"
        timeout = 5
        cache_bust = true

        [retry]
        max_attempts = 5
        base_delay = 0.1
        """,
    )

    settings = load_settings(path, environ={})

    assert settings.base_url == "https://tutorials.example.invalid/api", (
        "trailing slash should be stripped"
    )
    assert settings.timeout == 5.0
    assert settings.cache_bust is True
    assert settings.max_attempts == 5
    assert settings.base_delay == pytest.approx(0.1)


def test_environment_overrides_file(tmp_path: Path) -> None:
    """Environment variables win over the config file."""
    path = _write(
        tmp_path,
        """
        [api]
        base_url = "https://file.example.invalid/api"
        cache_bust = true
        """,
    )

    settings = load_settings(
        path,
        environ={
            "LTCMS_API_BASE_URL": "http://localhost:9000/api/",
            "LTCMS_API_CACHE_BUST": "off",
        },
    )

    assert settings.base_url == "http://localhost:9000/api"
    assert settings.cache_bust is False


@pytest.mark.parametrize(
    ("text", "environ", "message"),
    [
        ("[api]\ntimeout = 0\n", {}, "api.timeout"),
        ("[api]\ntimeout = \"fast\"\n", {}, "api.timeout"),
        ("[api]\nbase_url = 3\n", {}, "api.base_url"),
        ("[api]\ncache_bust = \"yes\"\n", {}, "api.cache_bust"),
        ("[retry]\nbase_delay = -1\n", {}, "retry.base_delay"),
        ("", {"LTCMS_API_CACHE_BUST": "maybe"}, "LTCMS_API_CACHE_BUST"),
        ("[api\n", {}, "Unable to parse"),
    ],
)
def test_invalid_values_raise(
    tmp_path: Path, text: str, environ: dict[str, str], message: str
) -> None:
    """Malformed settings raise SettingsError naming the offending key."""
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(SettingsError, match=message):
        load_settings(path, environ=environ)
