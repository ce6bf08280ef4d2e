"""Typed dataclasses describing the editable site content sections."""

from __future__ import annotations

import dataclasses as dc

from ..navigation import NavigationItem, NavigationTarget  # noqa: TC001 - runtime dataclass fields


class ContentValidationError(ValueError):
    """Raised when a content section payload is missing or malformed."""


@dc.dataclass(slots=True)
class CallToAction:
    """Button label plus where it leads."""

    label: str
    target: NavigationTarget | None = None


@dc.dataclass(slots=True)
class LinkButton:
    """Button rendered as a plain link."""

    label: str
    href: str


@dc.dataclass(slots=True)
class FeatureCard:
    """Icon card used by the hero features and the course highlights."""

    icon: str
    title: str
    description: str
    color: str | None = None


@dc.dataclass(slots=True)
class HeroContent:
    """Landing page hero copy."""

    badge_text: str
    icon: str
    title_line1: str
    title_line2: str
    subtitle: str
    subline: str
    primary_cta: CallToAction
    secondary_cta: CallToAction
    features: list[FeatureCard]


@dc.dataclass(slots=True)
class SiteMeta:
    """Document title and meta description."""

    title: str
    description: str


@dc.dataclass(slots=True)
class TutorialSectionContent:
    """Copy around the tutorial card grid."""

    title: str
    description: str
    heading: str
    cta_description: str
    cta_primary: CallToAction
    cta_secondary: CallToAction
    tutorial_card_button: str


@dc.dataclass(slots=True)
class HeaderBrand:
    """Brand block shown at the left of the header."""

    name: str
    tagline: str
    icon: str


@dc.dataclass(slots=True)
class HeaderCta:
    """Login/admin button labels."""

    guest_label: str
    auth_label: str
    icon: str


@dc.dataclass(slots=True)
class HeaderContent:
    """Header brand, static navigation, and call-to-action."""

    brand: HeaderBrand
    nav_items: list[NavigationItem]
    cta: HeaderCta


@dc.dataclass(slots=True)
class FooterBrand:
    """Brand block in the footer."""

    title: str
    description: str
    icon: str


@dc.dataclass(slots=True)
class FooterLink:
    """Footer quick link or contact link."""

    label: str
    target: NavigationTarget | None = None
    href: str | None = None
    icon: str | None = None


@dc.dataclass(slots=True)
class FooterBottom:
    """Copyright line and signature."""

    copyright: str
    signature: str

    def copyright_text(self, year: int) -> str:
        """Return the copyright line with ``{year}`` substituted."""
        return self.copyright.replace("{year}", str(year))


@dc.dataclass(slots=True)
class FooterContent:
    """Footer brand, link groups, and bottom line."""

    brand: FooterBrand
    quick_links: list[FooterLink]
    contact_links: list[FooterLink]
    bottom: FooterBottom


@dc.dataclass(slots=True)
class CourseHero:
    """Hero of the fundamentals course page."""

    badge: str
    title: str
    description: str
    icon: str


@dc.dataclass(slots=True)
class CourseModules:
    """Module listing of the fundamentals course page."""

    title: str
    description: str
    items: list[str]
    summary: list[str]


@dc.dataclass(slots=True)
class CourseCta:
    """Closing call-to-action of the fundamentals course page."""

    title: str
    description: str
    primary: LinkButton
    secondary: LinkButton


@dc.dataclass(slots=True)
class CoursePageContent:
    """The ``grundlagen_page`` section."""

    hero: CourseHero
    highlights: list[FeatureCard]
    modules: CourseModules
    cta: CourseCta


SectionModel = (
    HeroContent
    | SiteMeta
    | TutorialSectionContent
    | HeaderContent
    | FooterContent
    | CoursePageContent
)


__all__ = [
    "CallToAction",
    "ContentValidationError",
    "CoursePageContent",
    "CourseCta",
    "CourseHero",
    "CourseModules",
    "FeatureCard",
    "FooterBottom",
    "FooterBrand",
    "FooterContent",
    "FooterLink",
    "HeaderBrand",
    "HeaderContent",
    "HeaderCta",
    "HeroContent",
    "LinkButton",
    "SectionModel",
    "SiteMeta",
    "TutorialSectionContent",
]
