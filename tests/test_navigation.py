"""Unit tests for navigation targets and the static/dynamic merge."""

from __future__ import annotations

import pytest

from ltcms_client.navigation import (
    DEFAULT_DYNAMIC_LABEL,
    NavigationTarget,
    TargetKind,
    build_dynamic_items,
    merge_navigation,
    normalize_static_items,
)


def test_merge_appends_sorted_dynamic_items_after_static() -> None:
    """Static items keep their order; dynamic items follow sorted by index."""
    static = normalize_static_items(
        [
            {"id": "a", "label": "A", "type": "section"},
            {"id": "b", "label": "B", "type": "route", "path": "/b"},
        ]
    )
    merged = merge_navigation(
        static,
        [
            {"slug": "z", "label": "Z", "order_index": 2},
            {"slug": "y", "label": "Y", "order_index": 1},
        ],
    )

    labels = [item.label for item in merged.items]
    assert labels == ["A", "B", "Y", "Z"], f"unexpected merge order {labels!r}"
    assert [item.source for item in merged.items] == [
        "static",
        "static",
        "dynamic",
        "dynamic",
    ]


def test_dynamic_items_use_stable_sort_and_fallbacks() -> None:
    """Equal order indices keep API order; missing fields get defaults."""
    items = build_dynamic_items(
        [
            {"slug": "second", "order_index": 1},
            {"label": "no slug", "order_index": 0},
            {"slug": "first"},
            {"slug": "third", "order_index": 1, "id": "custom", "label": "Drei"},
            "garbage",
        ]
    )

    assert [item.slug for item in items] == ["first", "second", "third"]
    first, second, third = items
    assert first.id == "page-first-0", f"unexpected fallback id {first.id!r}"
    assert first.label == "first", "label falls back to the slug"
    assert first.order_index == 0
    assert second.id == "page-second-1"
    assert third.id == "custom"
    assert third.label == "Drei"
    assert first.target == NavigationTarget(TargetKind.ROUTE, "/pages/first")


def test_dynamic_label_skips_blank_labels() -> None:
    """Whitespace-only labels fall back to the slug."""
    items = build_dynamic_items([{"slug": "kurse", "label": "   "}])
    assert items[0].label == "kurse"
    assert DEFAULT_DYNAMIC_LABEL == "Seite"


@pytest.mark.parametrize("payload", [None, "items", {"items": []}, 3])
def test_dynamic_items_ignore_non_list_payloads(payload: object) -> None:
    """Anything other than a list of entries yields no dynamic items."""
    assert build_dynamic_items(payload) == []


def test_static_items_receive_fallback_ids_and_targets() -> None:
    """Missing ids fall back to slug, then path, then the index."""
    items = normalize_static_items(
        [
            {"slug": "kurse", "label": "Kurse", "type": "route", "path": "/kurse"},
            {"label": "Docs", "type": "route", "path": "/docs"},
            {"label": "Extern", "type": "external", "href": "https://Example.com"},
            {"label": "Böse", "type": "external", "href": "javascript:alert(1)"},
            "skipped",
            {"id": "home", "label": "Home", "type": "section"},
        ]
    )

    ids = [item.id for item in items]
    assert ids == ["kurse", "/docs", "static-2", "static-3", "home"], (
        f"unexpected fallback ids {ids!r}"
    )
    assert items[2].target == NavigationTarget(TargetKind.EXTERNAL, "https://example.com/")
    assert items[3].target is None, "unsafe external targets are dropped"
    assert items[4].target == NavigationTarget(TargetKind.SECTION, "home")


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"type": "section", "value": "tutorials"}, NavigationTarget(TargetKind.SECTION, "tutorials")),
        ({"type": "route", "path": "/grundlagen"}, NavigationTarget(TargetKind.ROUTE, "/grundlagen")),
        ({"type": "href", "href": "mailto:a@b.de"}, NavigationTarget(TargetKind.HREF, "mailto:a@b.de")),
        ({"type": "unknown", "value": "x"}, None),
        ({"type": "route"}, None),
        ({"type": "route", "value": "   "}, None),
        ("section", None),
    ],
)
def test_navigation_target_from_mapping(
    payload: object, expected: NavigationTarget | None
) -> None:
    """Targets parse the author-facing shape and reject malformed input."""
    assert NavigationTarget.from_mapping(payload) == expected
