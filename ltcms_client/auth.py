"""Session state for the signed-in editor."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ
from http import HTTPStatus

from .client import ApiError, InvalidResponseError, RequestAbortedError

if typ.TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .client import ApiClient

logger = logging.getLogger(__name__)

INVALID_RESPONSE_MESSAGE = "Ungueltige Antwort vom Server"
INVALID_CREDENTIALS_MESSAGE = "Ungueltige Anmeldedaten"


@dc.dataclass(slots=True, frozen=True)
class User:
    """An authenticated CMS user."""

    username: str
    role: str = "user"

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> User:
        """Build a user from ``/auth/me`` or the login response."""
        return cls(
            username=str(payload.get("username") or ""),
            role=str(payload.get("role") or "user"),
        )


@dc.dataclass(slots=True, frozen=True)
class LoginResult:
    """Outcome of :meth:`AuthSession.login`."""

    success: bool
    error: str | None = None


class AuthSession:
    """Track whether the client holds an authenticated session."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self.user: User | None = None
        self.error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Return ``True`` when a user is signed in."""
        return self.user is not None

    def check(self, *, cancel_token: CancellationToken | None = None) -> bool:
        """Ask the server who is signed in and update :attr:`user`.

        A cancelled check leaves the session untouched. A 401 answer is the
        normal signed-out case and is not logged.
        """
        try:
            data = self._client.me(cancel_token=cancel_token)
        except RequestAbortedError:
            return self.is_authenticated
        except ApiError as exc:
            if exc.status != HTTPStatus.UNAUTHORIZED:
                logger.error("Auth check failed: %s", exc)
            self.user = None
            return False
        self.user = User.from_mapping(data) if isinstance(data, cabc.Mapping) else None
        self.error = None
        return self.is_authenticated

    def login(self, username: str, password: str) -> LoginResult:
        """Sign in; failures are reported in the result rather than raised."""
        self.error = None
        try:
            response = self._client.login(username.strip(), password)
            user = response.get("user") if isinstance(response, cabc.Mapping) else None
            if not isinstance(user, cabc.Mapping):
                raise InvalidResponseError(INVALID_RESPONSE_MESSAGE)
        except ApiError as exc:
            self._client.set_token(None)
            self.user = None
            self.error = str(exc) or INVALID_CREDENTIALS_MESSAGE
            return LoginResult(success=False, error=self.error)
        self._client.set_token(response.get("token"))
        self.user = User.from_mapping(user)
        return LoginResult(success=True)

    def logout(self) -> None:
        """Sign out; server errors are logged and the local session is cleared."""
        try:
            self._client.logout()
        except ApiError as exc:
            logger.error("Logout failed: %s", exc)
        finally:
            self._client.set_token(None)
            self.user = None
            self.error = None


__all__ = ["AuthSession", "LoginResult", "User"]
