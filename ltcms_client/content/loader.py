"""Load the compiled-in default content shipped with the package."""

from __future__ import annotations

import copy
import functools
import typing as typ
from importlib import resources

from ruamel.yaml import YAML

from .builders import SECTION_BUILDERS, build_section
from .models import ContentValidationError, SectionModel

DEFAULTS_RESOURCE = "defaults.yaml"
CONTENT_SECTIONS: tuple[str, ...] = tuple(SECTION_BUILDERS)


@functools.cache
def _read_defaults() -> dict[str, typ.Any]:
    """Parse ``defaults.yaml`` once per process."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    source = resources.files(__package__).joinpath(DEFAULTS_RESOURCE)
    with source.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - packaging error guard
        msg = "Default content must be a mapping of sections."
        raise ContentValidationError(msg)
    missing = [key for key in CONTENT_SECTIONS if key not in loaded]
    if missing:  # pragma: no cover - packaging error guard
        msg = f"Default content is missing sections: {', '.join(missing)}"
        raise ContentValidationError(msg)
    return loaded


def default_content() -> dict[str, typ.Any]:
    """Return a fresh deep copy of the raw default content.

    Examples
    --------
    >>> sorted(default_content())[:2]
    ['footer', 'grundlagen_page']
    """
    return copy.deepcopy(_read_defaults())


@functools.cache
def default_sections() -> dict[str, SectionModel]:
    """Return the typed default model for every section."""
    raw = _read_defaults()
    return {key: build_section(key, raw[key]) for key in CONTENT_SECTIONS}


__all__ = ["CONTENT_SECTIONS", "default_content", "default_sections"]
