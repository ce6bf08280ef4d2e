"""Published page records and the per-slug page cache.

:class:`PublishedPageCache` serves ``/public/pages/<slug>`` responses. Each
slug is fetched at most once per cache lifetime unless the caller forces a
refetch or the editing layer invalidates the entry after creating, updating,
or deleting the page or one of its posts. When a refresh fails the last
cached copy is served instead of the error (stale-but-available).

Example
-------
>>> from ltcms_client.client import ApiClient
>>> from ltcms_client.pages import PublishedPageCache
>>> cache = PublishedPageCache(ApiClient())  # doctest: +SKIP
>>> page = cache.fetch_published_page(" Grundlagen ")  # doctest: +SKIP
>>> page is cache.fetch_published_page("grundlagen")  # doctest: +SKIP
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import types
import typing as typ

from .cancellation import is_cancelled
from .client import ApiError, RequestAbortedError
from .forms import optional_text, sanitize_integer
from .slug import normalize_slug, require_slug

if typ.TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .client import ApiClient

logger = logging.getLogger(__name__)


class PageFormatError(ValueError):
    """Raised when a published page response does not have the expected shape."""


@dc.dataclass(slots=True, frozen=True)
class PageRecord:
    """A CMS page as returned by the public page endpoint."""

    id: str
    slug: str
    title: str
    description: str = ""
    nav_label: str | None = None
    show_in_nav: bool = False
    order_index: int = 0
    is_published: bool = True
    hero: dict[str, typ.Any] = dc.field(default_factory=dict)
    layout: dict[str, typ.Any] = dc.field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_mapping(cls, payload: object) -> PageRecord:
        """Build a record from the API's JSON object."""
        if not isinstance(payload, cabc.Mapping):
            msg = "Published page response is missing the 'page' object"
            raise PageFormatError(msg)
        slug = normalize_slug(payload.get("slug"))
        if not slug:
            msg = "Published page record has no slug"
            raise PageFormatError(msg)
        return cls(
            id=str(payload.get("id", "")),
            slug=slug,
            title=str(payload.get("title") or slug),
            description=str(payload.get("description") or ""),
            nav_label=optional_text(payload.get("nav_label")),
            show_in_nav=bool(payload.get("show_in_nav", False)),
            order_index=sanitize_integer(payload.get("order_index"), 0),
            is_published=bool(payload.get("is_published", True)),
            hero=_as_dict(payload.get("hero")),
            layout=_as_dict(payload.get("layout")),
            created_at=optional_text(payload.get("created_at")),
            updated_at=optional_text(payload.get("updated_at")),
        )


@dc.dataclass(slots=True, frozen=True)
class PostRecord:
    """A post listed on a published page."""

    id: str
    title: str
    slug: str
    page_id: str | None = None
    excerpt: str = ""
    content_markdown: str = ""
    is_published: bool = True
    published_at: str | None = None
    order_index: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> PostRecord:
        """Build a record from the API's JSON object."""
        return cls(
            id=str(payload.get("id", "")),
            title=str(payload.get("title") or ""),
            slug=normalize_slug(payload.get("slug")),
            page_id=optional_text(payload.get("page_id")),
            excerpt=str(payload.get("excerpt") or ""),
            content_markdown=str(payload.get("content_markdown") or ""),
            is_published=bool(payload.get("is_published", True)),
            published_at=optional_text(payload.get("published_at")),
            order_index=sanitize_integer(payload.get("order_index"), 0),
            created_at=optional_text(payload.get("created_at")),
            updated_at=optional_text(payload.get("updated_at")),
        )


@dc.dataclass(slots=True, frozen=True)
class PublishedPage:
    """A published page together with its ordered posts."""

    page: PageRecord
    posts: tuple[PostRecord, ...] = ()

    @classmethod
    def from_mapping(cls, payload: object) -> PublishedPage:
        """Build a page from ``{"page": {...}, "posts": [...]}``."""
        if not isinstance(payload, cabc.Mapping):
            msg = "Published page response must be a JSON object"
            raise PageFormatError(msg)
        raw_posts = payload.get("posts") or []
        if not isinstance(raw_posts, list):
            msg = "Published page 'posts' must be a list"
            raise PageFormatError(msg)
        return cls(
            page=PageRecord.from_mapping(payload.get("page")),
            posts=tuple(
                PostRecord.from_mapping(post)
                for post in raw_posts
                if isinstance(post, cabc.Mapping)
            ),
        )

    def find_post(self, slug: str) -> PostRecord | None:
        """Return the post with ``slug`` or None."""
        wanted = normalize_slug(slug)
        return next((post for post in self.posts if post.slug == wanted), None)


class PublishedPageCache:
    """Per-slug cache in front of the public page endpoint."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self._cache: dict[str, PublishedPage] = {}
        self.published_slugs: list[str] = []
        self.published_slugs_loading = False
        self.published_slugs_error: ApiError | None = None

    @property
    def entries(self) -> cabc.Mapping[str, PublishedPage]:
        """Read-only view of the cached pages keyed by slug."""
        return types.MappingProxyType(self._cache)

    def fetch_published_page(
        self,
        slug: str,
        *,
        force: bool = False,
        cancel_token: CancellationToken | None = None,
    ) -> PublishedPage | None:
        """Return the published page for ``slug``.

        Parameters
        ----------
        slug : str
            Page slug; surrounding whitespace and case are ignored.
        force : bool, optional
            Bypass a cached entry and always ask the server.
        cancel_token : CancellationToken, optional
            Cancelling the token turns the call into a no-op returning
            ``None``; the cache is left untouched.

        Returns
        -------
        PublishedPage | None
            The cached or freshly fetched page, or ``None`` when cancelled.

        Raises
        ------
        InvalidSlugError
            If ``slug`` is empty after normalisation.
        ApiError
            If the request fails and no cached copy exists.
        PageFormatError
            If the response is malformed and no cached copy exists.
        """
        normalized = require_slug(slug)
        if not force and normalized in self._cache:
            return self._cache[normalized]

        try:
            data = self._client.get_published_page(
                normalized, cancel_token=cancel_token
            )
            page = PublishedPage.from_mapping(data)
        except RequestAbortedError:
            logger.debug("Fetch of page '%s' was cancelled", normalized)
            return None
        except (ApiError, PageFormatError) as exc:
            cached = self._cache.get(normalized)
            if cached is not None:
                logger.warning(
                    "Serving cached page '%s' after refresh failed: %s", normalized, exc
                )
                return cached
            raise

        if is_cancelled(cancel_token):
            return None
        self._cache = {**self._cache, normalized: page}
        return page

    def invalidate_page_cache(self, slug: str | None = None) -> None:
        """Drop the entry for ``slug``, or every entry when ``slug`` is None.

        Blank slugs are ignored. Nothing is refetched; the next
        :meth:`fetch_published_page` call repopulates the entry.
        """
        if slug is None:
            self._cache = {}
            return
        normalized = normalize_slug(slug)
        if not normalized or normalized not in self._cache:
            return
        self._cache = {
            key: page for key, page in self._cache.items() if key != normalized
        }

    def fetch_published_post(
        self,
        slug: str,
        post_slug: str,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> tuple[PageRecord, PostRecord] | None:
        """Return the page and post for ``/pages/<slug>/posts/<post_slug>``.

        Posts are not cached; ``None`` is returned when cancelled.
        """
        normalized = require_slug(slug)
        post_key = require_slug(post_slug)
        try:
            data = self._client.get_published_post(
                normalized, post_key, cancel_token=cancel_token
            )
        except RequestAbortedError:
            return None
        if not isinstance(data, cabc.Mapping) or not isinstance(
            data.get("post"), cabc.Mapping
        ):
            msg = "Published post response must contain 'page' and 'post'"
            raise PageFormatError(msg)
        page = PageRecord.from_mapping(data.get("page"))
        return page, PostRecord.from_mapping(data["post"])

    def load_published_slugs(
        self, *, cancel_token: CancellationToken | None = None
    ) -> None:
        """Refresh :attr:`published_slugs`; failures land in the error attribute."""
        self.published_slugs_loading = True
        self.published_slugs_error = None
        try:
            data = self._client.list_published_pages(cancel_token=cancel_token)
        except RequestAbortedError:
            return
        except ApiError as exc:
            logger.error("Failed to load published pages: %s", exc)
            self.published_slugs_error = exc
        else:
            entries = data if isinstance(data, list) else []
            self.published_slugs = [
                slug for slug in (normalize_slug(entry) for entry in entries) if slug
            ]
        self.published_slugs_loading = False


def _as_dict(value: object) -> dict[str, typ.Any]:
    return dict(value) if isinstance(value, cabc.Mapping) else {}


__all__ = [
    "PageFormatError",
    "PageRecord",
    "PostRecord",
    "PublishedPage",
    "PublishedPageCache",
]
