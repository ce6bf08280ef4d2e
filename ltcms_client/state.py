"""Application state wiring the API client to every store.

One :class:`AppState` replaces the nested context providers of the web
front end: it owns a single :class:`~ltcms_client.client.ApiClient` and
hands it to the auth session, the content store (which owns the published
page cache) and the tutorial store.

Example
-------
>>> from ltcms_client.settings import ClientSettings
>>> from ltcms_client.state import AppState
>>> with AppState.create(ClientSettings()) as state:  # doctest: +SKIP
...     state.content.load_content()
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .auth import AuthSession
from .client import ApiClient
from .content import ContentStore
from .settings import ClientSettings
from .tutorials import TutorialStore

if typ.TYPE_CHECKING:
    import requests

    from .pages import PublishedPageCache


@dc.dataclass(slots=True)
class AppState:
    """Composition root holding the client and its stores."""

    client: ApiClient
    auth: AuthSession
    content: ContentStore
    tutorials: TutorialStore

    @classmethod
    def create(
        cls,
        settings: ClientSettings | None = None,
        *,
        session: requests.Session | None = None,
    ) -> AppState:
        """Build the client and stores from ``settings``."""
        resolved = settings or ClientSettings()
        client = ApiClient(
            base_url=resolved.base_url,
            session=session,
            timeout=resolved.timeout,
            cache_bust=resolved.cache_bust,
        )
        return cls(
            client=client,
            auth=AuthSession(client),
            content=ContentStore(client),
            tutorials=TutorialStore(
                client,
                max_attempts=resolved.max_attempts,
                base_delay=resolved.base_delay,
            ),
        )

    @property
    def pages(self) -> PublishedPageCache:
        """Return the published page cache owned by the content store."""
        return self.content.pages

    def close(self) -> None:
        """Release the client's pooled connections."""
        self.client.close()

    def __enter__(self) -> AppState:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["AppState"]
