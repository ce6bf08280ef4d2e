"""Unit tests for the application state composition root."""

from __future__ import annotations

import typing as typ

from ltcms_client.settings import ClientSettings
from ltcms_client.state import AppState


def test_create_wires_one_client_into_every_store(session: typ.Any) -> None:
    """All stores share the client configured from the settings."""
    settings = ClientSettings(
        base_url="https://cms.example.invalid/api",
        timeout=3.0,
        cache_bust=True,
        max_attempts=4,
        base_delay=0.5,
    )

    state = AppState.create(settings, session=session)

    assert state.client.base_url == "https://cms.example.invalid/api"
    assert state.client.timeout == 3.0
    assert state.client.cache_bust is True
    assert state.tutorials.max_attempts == 4
    assert state.tutorials.base_delay == 0.5
    assert state.pages is state.content.pages


def test_context_manager_closes_the_session(session: typ.Any) -> None:
    """Leaving the context releases the HTTP session."""
    with AppState.create(session=session) as state:
        assert state.auth.user is None

    session.close.assert_called_once()
