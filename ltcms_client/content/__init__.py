"""Editable site content: typed section models, defaults, and the store."""

from __future__ import annotations

from .builders import build_section
from .loader import CONTENT_SECTIONS, default_content, default_sections
from .models import ContentValidationError
from .store import ContentStore

__all__ = [
    "CONTENT_SECTIONS",
    "ContentStore",
    "ContentValidationError",
    "build_section",
    "default_content",
    "default_sections",
]
