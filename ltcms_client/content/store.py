"""In-memory site content merged from defaults and the CMS API.

:class:`ContentStore` owns the editable content sections, the dynamic
navigation entries, and the published page cache for one application state.
It loads every section once at startup, falls back to the compiled-in
default for any section the server omits or sends malformed, and replaces a
section only after the server accepted an update.

Example
-------
>>> from ltcms_client.client import ApiClient
>>> from ltcms_client.content import ContentStore
>>> store = ContentStore(ApiClient())  # doctest: +SKIP
>>> store.load_content()  # doctest: +SKIP
>>> store.site_meta.title  # doctest: +SKIP
'Linux Tutorial - Lerne Linux Schritt für Schritt'
>>> [item.label for item in store.navigation.items]  # doctest: +SKIP
['Home', 'Grundlagen']
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import types
import typing as typ

from ..client import ApiError, RequestAbortedError
from ..navigation import NavigationData, merge_navigation
from ..pages import PublishedPageCache
from .builders import build_section
from .loader import CONTENT_SECTIONS, default_content, default_sections
from .models import ContentValidationError, HeaderContent, SectionModel, SiteMeta

if typ.TYPE_CHECKING:
    from ..cancellation import CancellationToken
    from ..client import ApiClient

logger = logging.getLogger(__name__)

_LOAD_FAILED_MESSAGE = "Content could not be loaded."


class ContentStore:
    """Site content, navigation, and published pages for one session."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self._raw: dict[str, typ.Any] = default_content()
        self._sections: dict[str, SectionModel] = dict(default_sections())
        self.loading = False
        self.error: ApiError | None = None
        self._saving: set[str] = set()

        self._dynamic_nav_entries: list[typ.Any] = []
        self._navigation: NavigationData | None = None
        self.navigation_loading = False
        self.navigation_error: ApiError | None = None

        self.pages = PublishedPageCache(client)

    # Content sections

    @property
    def content(self) -> cabc.Mapping[str, typ.Any]:
        """Read-only view of the raw JSON content keyed by section."""
        return types.MappingProxyType(self._raw)

    @property
    def saving_sections(self) -> frozenset[str]:
        """Sections with an update request in flight."""
        return frozenset(self._saving)

    def load_content(self, *, cancel_token: CancellationToken | None = None) -> None:
        """Fetch every section and merge it over the defaults.

        Failures are recorded in :attr:`error` and leave the current content
        in place; a cancelled load changes nothing.
        """
        self.loading = True
        self.error = None
        try:
            data = self._client.get_site_content(cancel_token=cancel_token)
        except RequestAbortedError:
            return
        except ApiError as exc:
            logger.error("Failed to load site content: %s", exc)
            self.error = exc if exc.status else ApiError(_LOAD_FAILED_MESSAGE, 500)
        else:
            self._apply_content(data)
        self.loading = False

    def _apply_content(self, data: object) -> None:
        raw = default_content()
        sections = dict(default_sections())
        items = data.get("items") if isinstance(data, cabc.Mapping) else None
        for item in items if isinstance(items, list) else []:
            match item:
                case {"section": str() as key, "content": payload}:
                    pass
                case _:
                    continue
            if key not in CONTENT_SECTIONS:
                raw[key] = payload
                continue
            try:
                sections[key] = build_section(key, payload, sections[key])
            except ContentValidationError as exc:
                logger.warning("Using default for content section '%s': %s", key, exc)
                continue
            raw[key] = payload
        self._raw = raw
        self._sections = sections
        self._navigation = None

    def get_section(self, key: str) -> SectionModel:
        """Return the typed model of section ``key``."""
        try:
            return self._sections[key]
        except KeyError as exc:
            msg = f"Unknown content section '{key}'."
            raise ContentValidationError(msg) from exc

    def get_raw_section(self, key: str) -> typ.Any:
        """Return the raw JSON of section ``key``, falling back to its default."""
        if key in self._raw:
            return self._raw[key]
        return default_content().get(key)

    @staticmethod
    def get_default_section(key: str) -> SectionModel:
        """Return the compiled-in model of section ``key``."""
        try:
            return default_sections()[key]
        except KeyError as exc:
            msg = f"Unknown content section '{key}'."
            raise ContentValidationError(msg) from exc

    @property
    def site_meta(self) -> SiteMeta:
        """Return the document title and description."""
        return typ.cast("SiteMeta", self._sections["site_meta"])

    def update_section(self, section: str, content: typ.Any) -> typ.Any:
        """Persist ``content`` for ``section`` and apply the server's copy.

        The section is validated locally first for modelled sections. While
        the request runs the section is listed in :attr:`saving_sections`.

        Returns
        -------
        object
            The server response.

        Raises
        ------
        ContentValidationError
            If ``section`` is empty or ``content`` is malformed.
        ApiError
            If the server rejects the update; local content is unchanged.
        """
        if not section:
            msg = "Section is required"
            raise ContentValidationError(msg)
        fallback = default_sections().get(section)
        model = build_section(section, content, fallback) if fallback else None

        self._saving.add(section)
        try:
            response = self._client.update_site_content_section(section, content)
        finally:
            self._saving.discard(section)

        updated = content
        if isinstance(response, cabc.Mapping) and response.get("content") is not None:
            updated = response["content"]
        if fallback is not None and updated is not content:
            try:
                model = build_section(section, updated, fallback)
            except ContentValidationError as exc:
                logger.warning("Server echoed malformed '%s' content: %s", section, exc)
                updated = content

        self._raw = {**self._raw, section: updated}
        if model is not None:
            self._sections = {**self._sections, section: model}
        if section == "header":
            self._navigation = None
        return response

    # Navigation

    @property
    def navigation(self) -> NavigationData:
        """Return the merged navigation, recomputed only after input changes."""
        if self._navigation is None:
            header = typ.cast("HeaderContent", self._sections["header"])
            self._navigation = merge_navigation(
                header.nav_items, self._dynamic_nav_entries
            )
        return self._navigation

    def set_dynamic_navigation(self, entries: object) -> None:
        """Replace the dynamic navigation entries."""
        self._dynamic_nav_entries = list(entries) if isinstance(entries, list) else []
        self._navigation = None

    def load_navigation(self, *, cancel_token: CancellationToken | None = None) -> None:
        """Fetch the dynamic navigation entries.

        Failures are recorded in :attr:`navigation_error` and keep the
        previous entries.
        """
        self.navigation_loading = True
        self.navigation_error = None
        try:
            data = self._client.get_navigation(cancel_token=cancel_token)
        except RequestAbortedError:
            return
        except ApiError as exc:
            logger.error("Failed to load dynamic navigation: %s", exc)
            self.navigation_error = exc
        else:
            items = data.get("items") if isinstance(data, cabc.Mapping) else None
            self.set_dynamic_navigation(items)
        self.navigation_loading = False


__all__ = ["ContentStore"]
