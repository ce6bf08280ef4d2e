"""Client library for the Linux tutorial CMS.

The package talks to the CMS REST API and keeps the state a front end needs:
merged site content with compiled-in defaults, the header navigation, a
per-slug cache of published pages, and the tutorial list with bounded retry.

Exports
-------
- ``AppState``: composition root wiring the API client to every store.
- ``ApiClient`` / ``ApiError``: HTTP transport and its error type.
- ``CancellationToken``: cooperative cancellation for request-issuing calls.
- ``app`` / ``main``: the ``ltcms`` Cyclopts CLI.

Examples
--------
>>> from ltcms_client import sanitize_slug
>>> sanitize_slug("  Über Linux!  ")
'uber-linux'
"""

from __future__ import annotations

from .cancellation import CancellationToken
from .cli import app, main
from .client import ApiClient, ApiError, RequestAbortedError
from .settings import ClientSettings, load_settings
from .slug import InvalidSlugError, sanitize_slug
from .state import AppState
from .urls import sanitize_external_url

__all__ = [
    "ApiClient",
    "ApiError",
    "AppState",
    "CancellationToken",
    "ClientSettings",
    "InvalidSlugError",
    "RequestAbortedError",
    "app",
    "load_settings",
    "main",
    "sanitize_external_url",
    "sanitize_slug",
]
