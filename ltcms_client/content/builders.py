"""Section builders turning raw JSON content into typed models.

Every builder accepts the raw payload plus an optional fallback model. Keys
missing from the payload take the fallback's value; keys present with the
wrong shape raise :class:`ContentValidationError` so the store can fall back
to the compiled-in default for the whole section.
"""

from __future__ import annotations

import typing as typ

from ..navigation import NavigationTarget, normalize_static_items
from ..urls import sanitize_external_url
from .helpers import (
    _attr,
    _entries,
    _mapping,
    _optional_str,
    _require_mapping,
    _strings,
    _text,
)
from .models import (
    CallToAction,
    ContentValidationError,
    CourseCta,
    CourseHero,
    CourseModules,
    CoursePageContent,
    FeatureCard,
    FooterBottom,
    FooterBrand,
    FooterContent,
    FooterLink,
    HeaderBrand,
    HeaderContent,
    HeaderCta,
    HeroContent,
    LinkButton,
    SectionModel,
    SiteMeta,
    TutorialSectionContent,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def build_section(
    key: str, payload: object, fallback: SectionModel | None = None
) -> SectionModel:
    """Build the typed model for content section ``key``.

    Raises
    ------
    ContentValidationError
        If ``key`` is not a known section or ``payload`` is malformed.
    """
    try:
        builder = SECTION_BUILDERS[key]
    except KeyError as exc:
        msg = f"Unknown content section '{key}'."
        raise ContentValidationError(msg) from exc
    return builder(payload, fallback)


def _build_hero(payload: object, fallback: typ.Any) -> HeroContent:
    """Build the landing page hero section."""
    data = _require_mapping(payload, where="hero")
    title = _mapping(data, "title", where="hero")
    return HeroContent(
        badge_text=_text(
            data, "badgeText", _attr(fallback, "badge_text"), where="hero"
        ),
        icon=_text(data, "icon", _attr(fallback, "icon"), where="hero"),
        title_line1=_text(
            title, "line1", _attr(fallback, "title_line1"), where="hero title"
        ),
        title_line2=_text(
            title, "line2", _attr(fallback, "title_line2"), where="hero title"
        ),
        subtitle=_text(data, "subtitle", _attr(fallback, "subtitle"), where="hero"),
        subline=_text(data, "subline", _attr(fallback, "subline"), where="hero"),
        primary_cta=_build_cta(
            data.get("primaryCta"),
            _attr(fallback, "primary_cta"),
            where="hero primaryCta",
        ),
        secondary_cta=_build_cta(
            data.get("secondaryCta"),
            _attr(fallback, "secondary_cta"),
            where="hero secondaryCta",
        ),
        features=_build_cards(
            data, "features", _attr(fallback, "features"), where="hero"
        ),
    )


def _build_site_meta(payload: object, fallback: typ.Any) -> SiteMeta:
    """Build the document metadata section."""
    data = _require_mapping(payload, where="site_meta")
    return SiteMeta(
        title=_text(data, "title", _attr(fallback, "title"), where="site_meta"),
        description=_text(
            data, "description", _attr(fallback, "description"), where="site_meta"
        ),
    )


def _build_tutorial_section(
    payload: object, fallback: typ.Any
) -> TutorialSectionContent:
    """Build the copy surrounding the tutorial grid."""
    where = "tutorial_section"
    data = _require_mapping(payload, where=where)
    return TutorialSectionContent(
        title=_text(data, "title", _attr(fallback, "title"), where=where),
        description=_text(
            data, "description", _attr(fallback, "description"), where=where
        ),
        heading=_text(data, "heading", _attr(fallback, "heading"), where=where),
        cta_description=_text(
            data, "ctaDescription", _attr(fallback, "cta_description"), where=where
        ),
        cta_primary=_build_cta(
            data.get("ctaPrimary"),
            _attr(fallback, "cta_primary"),
            where=f"{where} ctaPrimary",
        ),
        cta_secondary=_build_cta(
            data.get("ctaSecondary"),
            _attr(fallback, "cta_secondary"),
            where=f"{where} ctaSecondary",
        ),
        tutorial_card_button=_text(
            data,
            "tutorialCardButton",
            _attr(fallback, "tutorial_card_button"),
            where=where,
        ),
    )


def _build_header(payload: object, fallback: typ.Any) -> HeaderContent:
    """Build the header brand, static navigation, and CTA."""
    data = _require_mapping(payload, where="header")
    brand = _mapping(data, "brand", where="header")
    cta = _mapping(data, "cta", where="header")
    fb_brand = _attr(fallback, "brand")
    fb_cta = _attr(fallback, "cta")

    nav_entries = _entries(data, "navItems", where="header")
    if nav_entries is None:
        nav_items = list(_attr(fallback, "nav_items") or [])
    else:
        nav_items = normalize_static_items(nav_entries)

    return HeaderContent(
        brand=HeaderBrand(
            name=_text(brand, "name", _attr(fb_brand, "name"), where="header brand"),
            tagline=_text(
                brand,
                "tagline",
                _attr(fb_brand, "tagline") or "",
                where="header brand",
            ),
            icon=_text(brand, "icon", _attr(fb_brand, "icon"), where="header brand"),
        ),
        nav_items=nav_items,
        cta=HeaderCta(
            guest_label=_text(
                cta, "guestLabel", _attr(fb_cta, "guest_label"), where="header cta"
            ),
            auth_label=_text(
                cta, "authLabel", _attr(fb_cta, "auth_label"), where="header cta"
            ),
            icon=_text(cta, "icon", _attr(fb_cta, "icon"), where="header cta"),
        ),
    )


def _build_footer(payload: object, fallback: typ.Any) -> FooterContent:
    """Build the footer brand, link groups, and bottom line."""
    data = _require_mapping(payload, where="footer")
    brand = _mapping(data, "brand", where="footer")
    bottom = _mapping(data, "bottom", where="footer")
    fb_brand = _attr(fallback, "brand")
    fb_bottom = _attr(fallback, "bottom")
    return FooterContent(
        brand=FooterBrand(
            title=_text(
                brand, "title", _attr(fb_brand, "title"), where="footer brand"
            ),
            description=_text(
                brand,
                "description",
                _attr(fb_brand, "description"),
                where="footer brand",
            ),
            icon=_text(brand, "icon", _attr(fb_brand, "icon"), where="footer brand"),
        ),
        quick_links=_build_footer_links(
            data, "quickLinks", _attr(fallback, "quick_links")
        ),
        contact_links=_build_footer_links(
            data, "contactLinks", _attr(fallback, "contact_links")
        ),
        bottom=FooterBottom(
            copyright=_text(
                bottom,
                "copyright",
                _attr(fb_bottom, "copyright"),
                where="footer bottom",
            ),
            signature=_text(
                bottom,
                "signature",
                _attr(fb_bottom, "signature") or "",
                where="footer bottom",
            ),
        ),
    )


def _build_course_page(payload: object, fallback: typ.Any) -> CoursePageContent:
    """Build the fundamentals course page section."""
    where = "grundlagen_page"
    data = _require_mapping(payload, where=where)
    hero = _mapping(data, "hero", where=where)
    modules = _mapping(data, "modules", where=where)
    cta = _mapping(data, "cta", where=where)
    fb_hero = _attr(fallback, "hero")
    fb_modules = _attr(fallback, "modules")
    fb_cta = _attr(fallback, "cta")
    at_hero = f"{where} hero"
    at_modules = f"{where} modules"
    at_cta = f"{where} cta"
    return CoursePageContent(
        hero=CourseHero(
            badge=_text(hero, "badge", _attr(fb_hero, "badge"), where=at_hero),
            title=_text(hero, "title", _attr(fb_hero, "title"), where=at_hero),
            description=_text(
                hero, "description", _attr(fb_hero, "description"), where=at_hero
            ),
            icon=_text(hero, "icon", _attr(fb_hero, "icon"), where=at_hero),
        ),
        highlights=_build_cards(
            data, "highlights", _attr(fallback, "highlights"), where=where
        ),
        modules=CourseModules(
            title=_text(
                modules, "title", _attr(fb_modules, "title"), where=at_modules
            ),
            description=_text(
                modules,
                "description",
                _attr(fb_modules, "description"),
                where=at_modules,
            ),
            items=_strings(
                modules, "items", _attr(fb_modules, "items"), where=at_modules
            ),
            summary=_strings(
                modules, "summary", _attr(fb_modules, "summary"), where=at_modules
            ),
        ),
        cta=CourseCta(
            title=_text(cta, "title", _attr(fb_cta, "title"), where=at_cta),
            description=_text(
                cta, "description", _attr(fb_cta, "description"), where=at_cta
            ),
            primary=_build_link_button(
                cta.get("primary"),
                _attr(fb_cta, "primary"),
                where=f"{at_cta} primary",
            ),
            secondary=_build_link_button(
                cta.get("secondary"),
                _attr(fb_cta, "secondary"),
                where=f"{at_cta} secondary",
            ),
        ),
    )


def _build_cta(
    payload: object, fallback: CallToAction | None, *, where: str
) -> CallToAction:
    """Build a call-to-action, keeping the fallback target when none is given."""
    if payload is None and fallback is not None:
        return fallback
    data = _require_mapping(payload, where=where)
    target = NavigationTarget.from_mapping(data.get("target"))
    if target is None and "target" not in data:
        target = _attr(fallback, "target")
    return CallToAction(
        label=_text(data, "label", _attr(fallback, "label"), where=where),
        target=target,
    )


def _build_link_button(
    payload: object, fallback: LinkButton | None, *, where: str
) -> LinkButton:
    """Build a plain link button whose href passes URL sanitisation."""
    if payload is None and fallback is not None:
        return fallback
    data = _require_mapping(payload, where=where)
    raw_href = _text(data, "href", _attr(fallback, "href"), where=where)
    href = sanitize_external_url(raw_href)
    if href is None:
        msg = f"{where} has an unsafe 'href'."
        raise ContentValidationError(msg)
    label = _text(data, "label", _attr(fallback, "label"), where=where)
    return LinkButton(label=label, href=href)


def _build_cards(
    data: cabc.Mapping[str, typ.Any],
    key: str,
    fallback: list[FeatureCard] | None,
    *,
    where: str,
) -> list[FeatureCard]:
    """Build icon cards; entries without a title are skipped."""
    entries = _entries(data, key, where=where)
    if entries is None:
        return list(fallback or [])
    cards: list[FeatureCard] = []
    for entry in entries:
        match entry:
            case {"title": str() as title, **rest} if title.strip():
                pass
            case _:
                continue
        cards.append(
            FeatureCard(
                icon=_optional_str(rest.get("icon")) or "",
                title=title,
                description=_optional_str(rest.get("description")) or "",
                color=_optional_str(rest.get("color")),
            )
        )
    return cards


def _build_footer_links(
    data: cabc.Mapping[str, typ.Any], key: str, fallback: list[FooterLink] | None
) -> list[FooterLink]:
    """Build footer links, dropping entries whose link is unsafe or missing."""
    entries = _entries(data, key, where="footer")
    if entries is None:
        return list(fallback or [])
    links: list[FooterLink] = []
    for entry in entries:
        match entry:
            case {"label": str() as label, **rest} if label.strip():
                pass
            case _:
                continue
        target = NavigationTarget.from_mapping(rest.get("target"))
        href = sanitize_external_url(rest.get("href"))
        if target is None and href is None:
            continue
        links.append(
            FooterLink(
                label=label,
                target=target,
                href=href,
                icon=_optional_str(rest.get("icon")),
            )
        )
    return links


SECTION_BUILDERS: dict[str, typ.Callable[[object, typ.Any], SectionModel]] = {
    "hero": _build_hero,
    "site_meta": _build_site_meta,
    "tutorial_section": _build_tutorial_section,
    "header": _build_header,
    "footer": _build_footer,
    "grundlagen_page": _build_course_page,
}


__all__ = ["SECTION_BUILDERS", "build_section"]
