"""Tutorial list loading with bounded retry, plus local list maintenance.

:meth:`TutorialStore.load_tutorials` fetches ``/tutorials`` and retries
transient failures (no HTTP status, or a 5xx status) with a linear backoff of
``base_delay * attempt`` seconds for at most ``max_attempts`` attempts.
Client errors (4xx) fail immediately. The loader records the outcome in
:attr:`TutorialStore.state`, :attr:`TutorialStore.tutorials` and
:attr:`TutorialStore.error` and never raises.

Create, update and delete calls patch the in-memory list after the server
accepts them, so the list stays usable without a full reload.

Example
-------
>>> from ltcms_client.client import ApiClient
>>> from ltcms_client.tutorials import LoadState, TutorialStore
>>> store = TutorialStore(ApiClient())  # doctest: +SKIP
>>> store.load_tutorials() is LoadState.SUCCESS  # doctest: +SKIP
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import enum
import logging
import time
import typing as typ

from ._constants import MAX_LOAD_ATTEMPTS, RETRY_BASE_DELAY
from .cancellation import is_cancelled
from .client import ApiError, RequestAbortedError
from .forms import optional_text, sanitize_integer, sanitize_topics

if typ.TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .client import ApiClient

logger = logging.getLogger(__name__)

TOPICS_REQUIRED_MESSAGE = "Mindestens ein Thema muss angegeben werden."


class TutorialValidationError(ValueError):
    """Raised when tutorial input is rejected before reaching the API."""


class LoadState(enum.StrEnum):
    """Lifecycle of a tutorial list load."""

    IDLE = "idle"
    LOADING = "loading"
    RETRYING = "retrying"
    SUCCESS = "success"
    FAILED = "failed"


@dc.dataclass(slots=True, frozen=True)
class Tutorial:
    """A tutorial as listed by the API."""

    id: str
    title: str
    description: str = ""
    topics: tuple[str, ...] = ()
    icon: str = ""
    color: str = ""
    content: str = ""
    version: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> Tutorial:
        """Build a tutorial from the API's JSON object."""
        return cls(
            id=str(payload.get("id", "")),
            title=str(payload.get("title") or ""),
            description=str(payload.get("description") or ""),
            topics=tuple(sanitize_topics(payload.get("topics")) or ()),
            icon=str(payload.get("icon") or ""),
            color=str(payload.get("color") or ""),
            content=str(payload.get("content") or ""),
            version=sanitize_integer(payload.get("version"), 0),
            created_at=optional_text(payload.get("created_at")),
            updated_at=optional_text(payload.get("updated_at")),
        )


@dc.dataclass(slots=True, frozen=True)
class Comment:
    """A reader comment attached to a tutorial."""

    id: str
    author: str
    content: str
    tutorial_id: str | None = None
    created_at: str | None = None
    votes: int = 0
    is_admin: bool = False

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> Comment:
        """Build a comment from the API's JSON object."""
        return cls(
            id=str(payload.get("id", "")),
            author=str(payload.get("author") or ""),
            content=str(payload.get("content") or ""),
            tutorial_id=optional_text(payload.get("tutorial_id")),
            created_at=optional_text(payload.get("created_at")),
            votes=sanitize_integer(payload.get("votes"), 0),
            is_admin=bool(payload.get("is_admin", False)),
        )


class TutorialStore:
    """In-memory tutorial list backed by the tutorials endpoint.

    Parameters
    ----------
    client : ApiClient
        Transport used for every request.
    max_attempts : int, optional
        Upper bound on list requests per :meth:`load_tutorials` call.
    base_delay : float, optional
        Seconds to wait before the second attempt; later waits grow linearly.
    sleep : callable, optional
        Wait function used when no cancellation token is supplied.
    """

    def __init__(
        self,
        client: ApiClient,
        *,
        max_attempts: int = MAX_LOAD_ATTEMPTS,
        base_delay: float = RETRY_BASE_DELAY,
        sleep: cabc.Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        self._client = client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep
        self._tutorials: list[Tutorial] = []
        self.state = LoadState.IDLE
        self.error: ApiError | None = None

    @property
    def tutorials(self) -> list[Tutorial]:
        """Return a copy of the current tutorial list."""
        return list(self._tutorials)

    @property
    def loading(self) -> bool:
        """Return ``True`` while a load is in progress or waiting to retry."""
        return self.state in (LoadState.LOADING, LoadState.RETRYING)

    def load_tutorials(
        self, *, cancel_token: CancellationToken | None = None
    ) -> LoadState:
        """Fetch the tutorial list, retrying transient failures.

        Parameters
        ----------
        cancel_token : CancellationToken, optional
            Cancelling stops the current attempt and any pending backoff.
            Once cancelled, the list and error are left as they were and no
            further attempt is made.

        Returns
        -------
        LoadState
            The state after the call; ``SUCCESS`` or ``FAILED`` unless the
            load was cancelled.
        """
        self.state = LoadState.LOADING
        self.error = None
        attempt = 1
        while True:
            try:
                data = self._client.list_tutorials(cancel_token=cancel_token)
            except RequestAbortedError:
                return self.state
            except ApiError as exc:
                if is_cancelled(cancel_token):
                    return self.state
                if attempt < self.max_attempts and exc.is_transient:
                    delay = self.base_delay * attempt
                    logger.warning(
                        "Loading tutorials failed (attempt %d/%d), retrying in %.1fs: %s",
                        attempt,
                        self.max_attempts,
                        delay,
                        exc,
                    )
                    self.state = LoadState.RETRYING
                    if self._wait(delay, cancel_token):
                        return self.state
                    self.state = LoadState.LOADING
                    attempt += 1
                    continue
                logger.error("Failed to load tutorials: %s", exc)
                self._tutorials = []
                self.error = exc
                self.state = LoadState.FAILED
                return self.state

            if is_cancelled(cancel_token):
                return self.state
            self._tutorials = _parse_tutorials(data)
            self.state = LoadState.SUCCESS
            return self.state

    def _wait(self, delay: float, cancel_token: CancellationToken | None) -> bool:
        """Wait ``delay`` seconds; return ``True`` if cancelled meanwhile."""
        if cancel_token is not None:
            return cancel_token.wait(delay)
        self._sleep(delay)
        return False

    def get_tutorial(self, tutorial_id: str) -> Tutorial | None:
        """Return the loaded tutorial with ``tutorial_id`` or None."""
        return next((item for item in self._tutorials if item.id == tutorial_id), None)

    def add_tutorial(self, tutorial: cabc.Mapping[str, typ.Any]) -> Tutorial:
        """Create a tutorial and insert it ordered by creation time.

        Raises
        ------
        TutorialValidationError
            If no non-blank topic is given.
        ApiError
            If the server rejects the tutorial.
        """
        topics = sanitize_topics(tutorial.get("topics")) or []
        if not topics:
            raise TutorialValidationError(TOPICS_REQUIRED_MESSAGE)
        try:
            created = self._client.create_tutorial({**tutorial, "topics": topics})
        except ApiError as exc:
            logger.error("Failed to create tutorial: %s", exc)
            raise
        record = Tutorial.from_mapping(created)
        self._tutorials = sorted([*self._tutorials, record], key=_created_key)
        return record

    def update_tutorial(
        self, tutorial_id: str, changes: cabc.Mapping[str, typ.Any]
    ) -> Tutorial:
        """Update a tutorial and replace it in the local list.

        ``topics`` is optional; when given it must keep at least one
        non-blank entry.
        """
        payload = dict(changes)
        topics = sanitize_topics(changes.get("topics"))
        if topics is not None:
            if not topics:
                raise TutorialValidationError(TOPICS_REQUIRED_MESSAGE)
            payload["topics"] = topics
        try:
            updated = self._client.update_tutorial(tutorial_id, payload)
        except ApiError as exc:
            logger.error("Failed to update tutorial %s: %s", tutorial_id, exc)
            raise
        record = Tutorial.from_mapping(updated)
        self._tutorials = [
            record if item.id == tutorial_id else item for item in self._tutorials
        ]
        return record

    def delete_tutorial(self, tutorial_id: str) -> None:
        """Delete a tutorial and drop it from the local list."""
        try:
            self._client.delete_tutorial(tutorial_id)
        except ApiError as exc:
            logger.error("Failed to delete tutorial %s: %s", tutorial_id, exc)
            raise
        self._tutorials = [item for item in self._tutorials if item.id != tutorial_id]

    def load_comments(self, tutorial_id: str) -> list[Comment]:
        """Return the comments of ``tutorial_id`` in API order."""
        data = self._client.list_tutorial_comments(tutorial_id)
        entries = data if isinstance(data, list) else []
        return [
            Comment.from_mapping(entry)
            for entry in entries
            if isinstance(entry, cabc.Mapping)
        ]

    def search(
        self,
        query: str,
        *,
        topic: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[Tutorial]:
        """Search tutorials server-side; a cancelled search returns ``[]``."""
        try:
            data = self._client.search_tutorials(
                query, topic=topic, cancel_token=cancel_token
            )
        except RequestAbortedError:
            return []
        return _parse_tutorials(data)


def _parse_tutorials(data: object) -> list[Tutorial]:
    entries = data if isinstance(data, list) else []
    return [
        Tutorial.from_mapping(entry)
        for entry in entries
        if isinstance(entry, cabc.Mapping)
    ]


_LATEST = dt.datetime.max.replace(tzinfo=dt.UTC)


def _created_key(tutorial: Tutorial) -> dt.datetime:
    """Sort key placing tutorials without a readable timestamp last."""
    match tutorial.created_at:
        case str() as text if text.strip():
            try:
                stamp = dt.datetime.fromisoformat(text.strip())
            except ValueError:
                return _LATEST
        case _:
            return _LATEST
    return stamp if stamp.tzinfo else stamp.replace(tzinfo=dt.UTC)


__all__ = [
    "Comment",
    "LoadState",
    "TOPICS_REQUIRED_MESSAGE",
    "Tutorial",
    "TutorialStore",
    "TutorialValidationError",
]
