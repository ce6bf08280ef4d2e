"""Unit tests for the site content store."""

from __future__ import annotations

import typing as typ

import pytest

from ltcms_client.cancellation import CancellationToken
from ltcms_client.client import ApiClient, ApiError, RequestAbortedError
from ltcms_client.content import ContentStore, ContentValidationError, default_content
from ltcms_client.content.models import FooterContent, HeroContent, SiteMeta

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.fixture
def api(mocker: MockerFixture) -> typ.Any:
    """Return an ApiClient double."""
    return mocker.Mock(spec=ApiClient)


def test_defaults_are_available_before_loading(api: typ.Any) -> None:
    """A fresh store serves the compiled-in content and navigation."""
    store = ContentStore(api)

    assert store.site_meta.title == "Linux Tutorial - Lerne Linux Schritt für Schritt"
    labels = [item.label for item in store.navigation.items]
    assert labels == ["Home", "Grundlagen"], f"unexpected default nav {labels!r}"
    footer = store.get_section("footer")
    assert isinstance(footer, FooterContent)
    assert footer.bottom.copyright_text(2025).startswith("© 2025")
    api.get_site_content.assert_not_called()


def test_load_content_merges_sections_over_defaults(api: typ.Any) -> None:
    """Valid sections replace defaults; malformed ones fall back per section."""
    api.get_site_content.return_value = {
        "items": [
            {"section": "site_meta", "content": {"title": "Neu"}},
            {"section": "hero", "content": "broken"},
            {"section": "custom_block", "content": {"enabled": True}},
            {"content": {"missing": "section"}},
        ]
    }
    store = ContentStore(api)

    store.load_content()

    meta = store.get_section("site_meta")
    assert isinstance(meta, SiteMeta)
    assert meta.title == "Neu"
    assert meta.description == store.get_default_section("site_meta").description, (
        "missing keys should fall back to the default"
    )
    hero = store.get_section("hero")
    assert isinstance(hero, HeroContent)
    assert hero.badge_text == "Professionelles Linux Training"
    assert store.get_raw_section("hero") == default_content()["hero"]
    assert store.content["custom_block"] == {"enabled": True}
    assert store.error is None
    assert not store.loading


def test_load_failure_records_error_and_keeps_defaults(api: typ.Any) -> None:
    """Failures without a status are reported as 500 and keep the defaults."""
    api.get_site_content.side_effect = ApiError("Failed to reach /content")
    store = ContentStore(api)

    store.load_content()

    assert store.error is not None
    assert store.error.status == 500
    assert store.site_meta == store.get_default_section("site_meta")
    assert not store.loading


def test_cancelled_load_changes_nothing(api: typ.Any) -> None:
    """An aborted load records no error and keeps current content."""
    api.get_site_content.side_effect = RequestAbortedError()
    store = ContentStore(api)
    before = dict(store.content)

    store.load_content()

    assert store.error is None
    assert dict(store.content) == before


def test_unknown_section_lookup_raises(api: typ.Any) -> None:
    """Only modelled sections can be looked up as typed models."""
    store = ContentStore(api)

    with pytest.raises(ContentValidationError, match="Unknown content section"):
        store.get_section("sidebar")
    with pytest.raises(ContentValidationError):
        ContentStore.get_default_section("sidebar")


def test_update_section_applies_server_echo(api: typ.Any) -> None:
    """The server's stored copy replaces the section after a successful save."""
    store = ContentStore(api)
    seen_saving: list[frozenset[str]] = []

    def respond(section: str, content: object) -> object:
        seen_saving.append(store.saving_sections)
        return {"section": section, "content": {"title": "Gespeichert", "description": "D"}}

    api.update_site_content_section.side_effect = respond

    store.update_section("site_meta", {"title": "Entwurf", "description": "D"})

    assert seen_saving == [frozenset({"site_meta"})], "section is flagged while saving"
    assert store.saving_sections == frozenset()
    assert store.site_meta.title == "Gespeichert"
    assert store.get_raw_section("site_meta")["title"] == "Gespeichert"


def test_update_section_without_echo_uses_submitted_content(api: typ.Any) -> None:
    """When the server echoes nothing the submitted content is applied."""
    api.update_site_content_section.return_value = None
    store = ContentStore(api)

    store.update_section("site_meta", {"title": "Lokal", "description": "D"})

    assert store.site_meta.title == "Lokal"


def test_update_section_failure_keeps_content(api: typ.Any) -> None:
    """Rejected updates propagate, clear the saving flag and keep the section."""
    api.update_site_content_section.side_effect = ApiError("Forbidden", 403)
    store = ContentStore(api)
    original = store.site_meta

    with pytest.raises(ApiError):
        store.update_section("site_meta", {"title": "Neu", "description": "D"})

    assert store.saving_sections == frozenset()
    assert store.site_meta is original


@pytest.mark.parametrize(
    ("section", "content"),
    [("", {"title": "x"}), ("site_meta", "not-a-mapping"), ("site_meta", {"title": []})],
)
def test_update_section_validates_before_sending(
    api: typ.Any, section: str, content: object
) -> None:
    """Empty section names and malformed content never reach the API."""
    store = ContentStore(api)

    with pytest.raises(ContentValidationError):
        store.update_section(section, content)

    api.update_site_content_section.assert_not_called()


def test_navigation_is_memoised_until_inputs_change(api: typ.Any) -> None:
    """The merged navigation is recomputed only after header or dynamic changes."""
    store = ContentStore(api)
    first = store.navigation
    assert store.navigation is first, "unchanged inputs reuse the merge result"

    store.set_dynamic_navigation([{"slug": "kurse", "label": "Kurse", "order_index": 1}])
    second = store.navigation
    assert second is not first
    assert [item.id for item in second.items] == ["home", "grundlagen", "page-kurse-0"]

    api.update_site_content_section.return_value = None
    store.update_section(
        "header",
        {"navItems": [{"id": "start", "label": "Start", "type": "section"}]},
    )
    third = store.navigation
    assert third is not second
    assert [item.label for item in third.items] == ["Start", "Kurse"]


def test_load_navigation_handles_payloads_and_errors(api: typ.Any) -> None:
    """Dynamic entries load from ``items``; failures keep the previous entries."""
    api.get_navigation.return_value = {"items": [{"slug": "kurse", "label": "Kurse"}]}
    store = ContentStore(api)

    store.load_navigation()
    assert [item.slug for item in store.navigation.dynamic] == ["kurse"]
    assert store.navigation_error is None

    api.get_navigation.side_effect = ApiError("Server error", 500)
    store.load_navigation()
    assert store.navigation_error is not None
    assert [item.slug for item in store.navigation.dynamic] == ["kurse"]
    assert not store.navigation_loading

    api.get_navigation.side_effect = None
    api.get_navigation.return_value = {"items": "nope"}
    store.load_navigation()
    assert store.navigation.dynamic == ()


def test_cancel_during_failing_request_records_no_error(
    client: ApiClient, cancelled_in_flight: CancellationToken
) -> None:
    """A transport failure after cancellation leaves content and navigation alone."""
    store = ContentStore(client)
    before = dict(store.content)
    nav_before = store.navigation.items

    store.load_content(cancel_token=cancelled_in_flight)
    store.load_navigation(cancel_token=cancelled_in_flight)

    assert store.error is None, f"unexpected content error {store.error!r}"
    assert store.navigation_error is None
    assert dict(store.content) == before
    assert store.navigation.items == nav_before
