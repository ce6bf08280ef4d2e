"""Navigation targets and the static/dynamic navigation merge.

The site header combines two groups of entries:

* static items authored in the ``header`` content section, kept in
  declaration order;
* dynamic items discovered from published pages flagged to appear in the
  navigation, ordered by their ``order_index``.

:func:`merge_navigation` appends the sorted dynamic group after the static
group without interleaving. It performs no I/O; the content store memoises
its result until either input changes.

Example
-------
>>> static = normalize_static_items([{"id": "home", "label": "Home", "type": "section"}])
>>> merged = merge_navigation(static, [{"slug": "kurse", "label": "Kurse", "order_index": 1}])
>>> [item.id for item in merged.items]
['home', 'page-kurse-0']
>>> merged.items[1].target.value
'/pages/kurse'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum

from .forms import sanitize_integer
from .urls import sanitize_external_url

DYNAMIC_PAGE_ROUTE = "/pages/{slug}"
DEFAULT_DYNAMIC_LABEL = "Seite"


class TargetKind(enum.StrEnum):
    """Kinds of navigation targets understood by the site."""

    SECTION = "section"
    ROUTE = "route"
    EXTERNAL = "external"
    HREF = "href"


@dc.dataclass(slots=True, frozen=True)
class NavigationTarget:
    """Where a navigation entry or call-to-action points.

    Attributes
    ----------
    kind : TargetKind
        ``section`` anchors scroll within the home page, ``route`` targets
        are internal paths, ``external``/``href`` targets are full links.
    value : str
        Anchor id, route path, or sanitised link.
    """

    kind: TargetKind
    value: str

    @classmethod
    def from_mapping(
        cls, payload: object, *, default_value: str | None = None
    ) -> NavigationTarget | None:
        """Parse ``{"type": ..., "value"|"path"|"href": ...}`` into a target.

        Returns ``None`` for unknown kinds, missing values, and links that
        fail URL sanitisation.
        """
        if not isinstance(payload, cabc.Mapping):
            return None
        try:
            kind = TargetKind(payload.get("type"))
        except ValueError:
            return None
        value = payload.get("value") or payload.get("path") or payload.get("href")
        if value is None:
            value = default_value
        if not isinstance(value, str) or not value.strip():
            return None
        if kind in (TargetKind.EXTERNAL, TargetKind.HREF):
            value = sanitize_external_url(value)
            if value is None:
                return None
        return cls(kind=kind, value=value.strip())


@dc.dataclass(slots=True, frozen=True)
class NavigationItem:
    """A single header navigation entry."""

    id: str
    label: str
    target: NavigationTarget | None
    source: str = "static"
    slug: str | None = None
    order_index: int | None = None


@dc.dataclass(slots=True, frozen=True)
class NavigationData:
    """Result of a navigation merge."""

    static: tuple[NavigationItem, ...]
    dynamic: tuple[NavigationItem, ...]

    @property
    def items(self) -> tuple[NavigationItem, ...]:
        """Return static items followed by the ordered dynamic items."""
        return self.static + self.dynamic


def normalize_static_items(
    entries: cabc.Iterable[object],
) -> list[NavigationItem]:
    """Assign ids and targets to author-configured navigation entries.

    Entries keep their declaration order. Missing ids fall back to the
    entry's slug, then its path, then ``static-<index>``. A ``section``
    entry without an explicit value scrolls to the anchor named by its id.
    Non-mapping entries are skipped.
    """
    items: list[NavigationItem] = []
    for index, entry in enumerate(entries):
        match entry:
            case cabc.Mapping():
                pass
            case _:
                continue
        item_id = _first_text(
            entry.get("id"), entry.get("slug"), entry.get("path")
        ) or f"static-{index}"
        items.append(
            NavigationItem(
                id=item_id,
                label=_first_text(entry.get("label")) or item_id,
                target=NavigationTarget.from_mapping(entry, default_value=item_id),
                source=_first_text(entry.get("source")) or "static",
                slug=_first_text(entry.get("slug")),
            )
        )
    return items


def build_dynamic_items(entries: object) -> list[NavigationItem]:
    """Turn published-page navigation entries into ordered route items.

    Entries without a slug are dropped. The remainder is sorted by
    ``order_index`` ascending (missing counts as ``0``) with a stable sort,
    so entries sharing an index keep the order the API listed them in.
    """
    if not isinstance(entries, cabc.Sequence) or isinstance(entries, str):
        return []
    candidates = [
        entry
        for entry in entries
        if isinstance(entry, cabc.Mapping) and _first_text(entry.get("slug"))
    ]
    ordered = sorted(
        candidates, key=lambda entry: sanitize_integer(entry.get("order_index"), 0)
    )

    items: list[NavigationItem] = []
    for index, entry in enumerate(ordered):
        slug = str(entry["slug"]).strip()
        raw_order = entry.get("order_index")
        items.append(
            NavigationItem(
                id=_first_text(entry.get("id")) or f"page-{slug}-{index}",
                label=_first_text(entry.get("label"), slug) or DEFAULT_DYNAMIC_LABEL,
                target=NavigationTarget(
                    kind=TargetKind.ROUTE, value=DYNAMIC_PAGE_ROUTE.format(slug=slug)
                ),
                source="dynamic",
                slug=slug,
                order_index=(
                    index if raw_order is None else sanitize_integer(raw_order, index)
                ),
            )
        )
    return items


def merge_navigation(
    static_items: cabc.Iterable[NavigationItem], dynamic_entries: object
) -> NavigationData:
    """Combine static items with the ordered dynamic items."""
    return NavigationData(
        static=tuple(static_items), dynamic=tuple(build_dynamic_items(dynamic_entries))
    )


def _first_text(*values: object) -> str | None:
    """Return the first value that is a non-blank string or a number."""
    for value in values:
        match value:
            case bool() | None:
                continue
            case str() if value.strip():
                return value.strip()
            case int() | float():
                return str(value)
    return None


__all__ = [
    "NavigationData",
    "NavigationItem",
    "NavigationTarget",
    "TargetKind",
    "build_dynamic_items",
    "merge_navigation",
    "normalize_static_items",
]

