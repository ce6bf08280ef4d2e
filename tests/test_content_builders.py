"""Unit tests for the typed content section builders and defaults."""

from __future__ import annotations

import pytest

from ltcms_client.content import (
    CONTENT_SECTIONS,
    ContentValidationError,
    build_section,
    default_content,
    default_sections,
)
from ltcms_client.content.models import (
    CoursePageContent,
    FooterContent,
    HeaderContent,
    HeroContent,
)
from ltcms_client.navigation import NavigationTarget, TargetKind


def test_every_section_has_a_typed_default() -> None:
    """The packaged defaults cover and build every modelled section."""
    sections = default_sections()

    assert tuple(sections) == CONTENT_SECTIONS
    assert set(CONTENT_SECTIONS) == {
        "hero",
        "site_meta",
        "tutorial_section",
        "header",
        "footer",
        "grundlagen_page",
    }
    hero = sections["hero"]
    assert isinstance(hero, HeroContent)
    assert [card.icon for card in hero.features] == ["Book", "Code", "Zap"]
    assert hero.primary_cta.target == NavigationTarget(TargetKind.SECTION, "tutorials")


def test_default_content_returns_independent_copies() -> None:
    """Callers can mutate the raw defaults without affecting later calls."""
    first = default_content()
    first["site_meta"]["title"] = "changed"

    assert default_content()["site_meta"]["title"] != "changed"


def test_hero_payload_falls_back_per_key() -> None:
    """Only the keys present in the payload replace the fallback values."""
    fallback = default_sections()["hero"]
    hero = build_section(
        "hero",
        {
            "badgeText": "Neu",
            "title": {"line1": "Linux"},
            "primaryCta": {"label": "Start"},
            "features": [{"title": "Eins", "icon": "Book"}, {"icon": "NoTitle"}],
        },
        fallback,
    )

    assert isinstance(hero, HeroContent)
    assert hero.badge_text == "Neu"
    assert hero.title_line1 == "Linux"
    assert hero.title_line2 == "von Grund auf"
    assert hero.primary_cta.label == "Start"
    assert hero.primary_cta.target == NavigationTarget(TargetKind.SECTION, "tutorials"), (
        "a CTA without a target keeps the fallback target"
    )
    assert [card.title for card in hero.features] == ["Eins"]


def test_header_nav_items_are_normalised() -> None:
    """Header navigation entries become navigation items with fallback ids."""
    header = build_section(
        "header",
        {"navItems": [{"label": "Kurse", "type": "route", "path": "/kurse"}]},
        default_sections()["header"],
    )

    assert isinstance(header, HeaderContent)
    assert [item.id for item in header.nav_items] == ["/kurse"]
    assert header.brand.name == "Linux Tutorial"


def test_footer_drops_unsafe_links() -> None:
    """Contact links with disallowed schemes are removed."""
    footer = build_section(
        "footer",
        {
            "contactLinks": [
                {"label": "GitHub", "href": "https://github.com/example"},
                {"label": "Evil", "href": "javascript:alert(1)"},
                {"label": "", "href": "https://example.com"},
            ]
        },
        default_sections()["footer"],
    )

    assert isinstance(footer, FooterContent)
    assert [link.label for link in footer.contact_links] == ["GitHub"]
    assert len(footer.quick_links) == 4, "absent groups keep the defaults"


def test_course_page_rejects_unsafe_button_href() -> None:
    """Link buttons must carry a safe href."""
    with pytest.raises(ContentValidationError, match="unsafe 'href'"):
        build_section(
            "grundlagen_page",
            {"cta": {"primary": {"label": "Los", "href": "javascript:void(0)"}}},
            default_sections()["grundlagen_page"],
        )

    page = build_section(
        "grundlagen_page",
        {"modules": {"items": ["Shell", "  ", "Rechte"]}},
        default_sections()["grundlagen_page"],
    )
    assert isinstance(page, CoursePageContent)
    assert page.modules.items == ["Shell", "Rechte"]


@pytest.mark.parametrize(
    ("key", "payload"),
    [
        ("hero", None),
        ("site_meta", {"title": ["list"]}),
        ("header", {"navItems": "home"}),
        ("footer", {"brand": "Linux"}),
        ("unknown", {}),
    ],
)
def test_malformed_payloads_raise(key: str, payload: object) -> None:
    """Wrong shapes raise ContentValidationError instead of building."""
    fallback = default_sections().get(key)
    with pytest.raises(ContentValidationError):
        build_section(key, payload, fallback)
