r"""HTTP client for the tutorial CMS REST API.

This module wraps every endpoint the content, page, tutorial, and auth layers
need. :class:`ApiClient` centralises the base URL, timeouts, CSRF headers,
session-token handling, and the mapping of error responses onto
:class:`ApiError` so callers can make retry decisions from the HTTP status.

Example
-------
>>> from ltcms_client.client import ApiClient
>>> client = ApiClient(base_url="https://tutorials.example/api")  # doctest: +SKIP
>>> page = client.get_published_page("grundlagen")  # doctest: +SKIP
>>> sorted(page)  # doctest: +SKIP
['page', 'posts']
"""

from __future__ import annotations

import logging
import time
import typing as typ
from http import HTTPStatus
from urllib.parse import quote

import requests

from ._constants import (
    AUTH_LOGIN_PATH,
    AUTH_LOGOUT_PATH,
    AUTH_ME_PATH,
    COMMENT_PATH,
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    DEFAULT_API_BASE,
    DEFAULT_TIMEOUT,
    NAVIGATION_PATH,
    PAGE_PATH,
    PAGE_POSTS_PATH,
    PAGES_PATH,
    POST_PATH,
    PUBLISHED_PAGE_PATH,
    PUBLISHED_PAGES_PATH,
    PUBLISHED_POST_PATH,
    SAFE_METHODS,
    SEARCH_TOPICS_PATH,
    SEARCH_TUTORIALS_PATH,
    SITE_CONTENT_PATH,
    SITE_CONTENT_SECTION_PATH,
    TUTORIAL_COMMENTS_PATH,
    TUTORIAL_PATH,
    TUTORIALS_PATH,
    UPLOAD_PATH,
    USER_AGENT,
)
from .cancellation import is_cancelled

if typ.TYPE_CHECKING:
    from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

_EMPTY_BODY_STATUSES = (HTTPStatus.NO_CONTENT, HTTPStatus.RESET_CONTENT)
_AUTH_STATUSES = (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN)


class ApiError(RuntimeError):
    """Raised when the API cannot be reached or answers with an error status.

    Attributes
    ----------
    status : int | None
        HTTP status of the failed response, or ``None`` for network-level
        failures (connection errors, timeouts).
    """

    aborted = False

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def is_transient(self) -> bool:
        """Return whether retrying the request could change the outcome."""
        return self.status is None or self.status >= HTTPStatus.INTERNAL_SERVER_ERROR

    @property
    def is_auth_error(self) -> bool:
        """Return whether the server rejected the session (401/403)."""
        return self.status in _AUTH_STATUSES


class RequestAbortedError(ApiError):
    """Raised when a request is abandoned because its token was cancelled."""

    aborted = True

    def __init__(self, message: str = "Request aborted") -> None:
        super().__init__(message, status=None)


class InvalidResponseError(ApiError):
    """Raised when a successful response lacks the fields the caller needs.

    The request itself succeeded, so repeating it is not expected to help.
    """

    @property
    def is_transient(self) -> bool:
        """Malformed success responses are never retried."""
        return False


class ApiClient:
    """Thin wrapper around the tutorial CMS endpoints.

    The client is safe to share between the stores of one application state.
    It does not retry failed requests; the tutorial loader layers a bounded
    retry on top for list loads only.
    """

    default_api_base = DEFAULT_API_BASE

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        cache_bust: bool = False,
        token: str | None = None,
    ) -> None:
        """Initialise the client with the API location and transport.

        Parameters
        ----------
        base_url : str, optional
            API root including the ``/api`` prefix. A trailing slash is
            stripped. Defaults to ``DEFAULT_API_BASE``.
        session : requests.Session, optional
            Preconfigured session; carries the auth and CSRF cookies set by
            the server. Defaults to a new session per client.
        timeout : float, optional
            Per-request timeout in seconds. Timeouts surface as an
            :class:`ApiError` without status, which the tutorial loader
            treats as retryable. Defaults to ``15.0``.
        cache_bust : bool, optional
            Append a ``_ts`` query parameter to GET requests so intermediate
            caches never answer. Defaults to ``False``.
        token : str | None, optional
            Bearer token sent in the ``Authorization`` header. Cookie-based
            sessions do not need one.
        """
        self.base_url = base_url.rstrip("/") or DEFAULT_API_BASE
        self._session = session or requests.Session()
        self.timeout = timeout
        self.cache_bust = cache_bust
        self._token: str | None = None
        self.set_token(token)

    @property
    def token(self) -> str | None:
        """Return the bearer token currently attached to requests."""
        return self._token

    def set_token(self, token: object) -> None:
        """Attach ``token`` to subsequent requests, or clear it with ``None``."""
        if token is not None and not isinstance(token, str):
            logger.warning("Ignoring non-string session token of type %s", type(token))
            token = None
        self._token = token or None

    def close(self) -> None:
        """Release pooled connections held by the underlying session."""
        self._session.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: typ.Mapping[str, typ.Any] | None = None,
        json: typ.Any = None,
        files: typ.Mapping[str, typ.Any] | None = None,
        cancel_token: CancellationToken | None = None,
        cache_bust: bool | None = None,
    ) -> typ.Any:
        """Send a request to ``path`` and return the decoded payload.

        Parameters
        ----------
        method : str
            HTTP verb, case-insensitive.
        path : str
            Endpoint path relative to :attr:`base_url`.
        params : Mapping, optional
            Query parameters.
        json : object, optional
            JSON-serialisable request body.
        files : Mapping, optional
            Multipart file fields, forwarded to ``requests``.
        cancel_token : CancellationToken, optional
            When cancelled before sending or before the response is handed
            back, :class:`RequestAbortedError` is raised instead.
        cache_bust : bool, optional
            Per-call override of :attr:`cache_bust`.

        Returns
        -------
        object
            Decoded JSON payload, ``{"message": text}`` for plain-text bodies,
            or ``None`` for empty responses.

        Raises
        ------
        RequestAbortedError
            If ``cancel_token`` was cancelled.
        ApiError
            For network failures (``status is None``) and error responses.
        """
        verb = method.upper()
        if is_cancelled(cancel_token):
            raise RequestAbortedError

        query = dict(params or {})
        bust = self.cache_bust if cache_bust is None else cache_bust
        if bust and verb == "GET":
            query["_ts"] = int(time.time() * 1000)

        url = f"{self.base_url}{path}"
        logger.debug("%s %s", verb, url)
        try:
            response = self._session.request(
                verb,
                url,
                headers=self._build_headers(verb),
                params=query or None,
                json=json,
                files=files,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            if is_cancelled(cancel_token):
                raise RequestAbortedError from exc
            msg = f"Request to {path} timed out"
            raise ApiError(msg) from exc
        except requests.RequestException as exc:
            if is_cancelled(cancel_token):
                raise RequestAbortedError from exc
            msg = f"Failed to reach {path}: {exc}"
            raise ApiError(msg) from exc

        if is_cancelled(cancel_token):
            raise RequestAbortedError
        return self._decode_response(response)

    def _build_headers(self, method: str) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if method not in SAFE_METHODS:
            csrf_token = self._session.cookies.get(CSRF_COOKIE_NAME)
            if csrf_token:
                headers[CSRF_HEADER_NAME] = csrf_token
        return headers

    def _decode_response(self, response: requests.Response) -> typ.Any:
        status = response.status_code
        ok = status < HTTPStatus.BAD_REQUEST
        if status in _EMPTY_BODY_STATUSES or response.headers.get("Content-Length") == "0":
            if not ok:
                self._raise_for_status(status, None, response.reason)
            return None

        content_type = response.headers.get("Content-Type", "") or ""
        payload: typ.Any
        if "application/json" in content_type:
            try:
                payload = response.json()
            except ValueError as exc:
                msg = "Invalid JSON response from server"
                raise ApiError(msg, status) from exc
        else:
            text = response.text
            if "text/html" in content_type and not ok:
                payload = {"message": "Server error"}
            else:
                payload = {"message": text} if text else None

        if not ok:
            self._raise_for_status(status, payload, response.reason)
        return payload

    def _raise_for_status(
        self, status: int, payload: typ.Any, reason: str | None
    ) -> typ.NoReturn:
        if status in _AUTH_STATUSES:
            self.set_token(None)
        message = None
        if isinstance(payload, dict):
            message = payload.get("error") or payload.get("message")
        raise ApiError(str(message or reason or "Request failed"), status)

    # Authentication

    def me(self, *, cancel_token: CancellationToken | None = None) -> typ.Any:
        """Return the currently authenticated user."""
        return self.request("GET", AUTH_ME_PATH, cancel_token=cancel_token)

    def login(self, username: str, password: str) -> typ.Any:
        """Authenticate and remember the returned token, if any."""
        data = self.request(
            "POST", AUTH_LOGIN_PATH, json={"username": username, "password": password}
        )
        if isinstance(data, dict) and data.get("token"):
            self.set_token(data["token"])
        return data

    def logout(self) -> None:
        """End the server session; the local token is cleared regardless."""
        try:
            self.request("POST", AUTH_LOGOUT_PATH)
        finally:
            self.set_token(None)

    # Tutorials and comments

    def list_tutorials(
        self, *, cancel_token: CancellationToken | None = None
    ) -> typ.Any:
        """Return every tutorial."""
        return self.request("GET", TUTORIALS_PATH, cancel_token=cancel_token)

    def get_tutorial(self, tutorial_id: str) -> typ.Any:
        """Return a single tutorial."""
        path = TUTORIAL_PATH.format(tutorial_id=_segment(tutorial_id))
        return self.request("GET", path)

    def create_tutorial(self, payload: typ.Mapping[str, typ.Any]) -> typ.Any:
        """Create a tutorial and return the stored record."""
        return self.request("POST", TUTORIALS_PATH, json=dict(payload))

    def update_tutorial(
        self, tutorial_id: str, payload: typ.Mapping[str, typ.Any]
    ) -> typ.Any:
        """Update a tutorial and return the stored record."""
        return self.request(
            "PUT",
            TUTORIAL_PATH.format(tutorial_id=_segment(tutorial_id)),
            json=dict(payload),
        )

    def delete_tutorial(self, tutorial_id: str) -> typ.Any:
        """Delete a tutorial."""
        return self.request(
            "DELETE", TUTORIAL_PATH.format(tutorial_id=_segment(tutorial_id))
        )

    def list_tutorial_comments(self, tutorial_id: str) -> typ.Any:
        """Return the comments attached to a tutorial."""
        _require("tutorial_id", tutorial_id)
        return self.request(
            "GET", TUTORIAL_COMMENTS_PATH.format(tutorial_id=_segment(tutorial_id))
        )

    def create_comment(self, tutorial_id: str, content: str) -> typ.Any:
        """Post a comment on a tutorial."""
        _require("tutorial_id", tutorial_id)
        return self.request(
            "POST",
            TUTORIAL_COMMENTS_PATH.format(tutorial_id=_segment(tutorial_id)),
            json={"content": content},
        )

    def delete_comment(self, comment_id: str) -> typ.Any:
        """Delete a comment."""
        _require("comment_id", comment_id)
        return self.request(
            "DELETE", COMMENT_PATH.format(comment_id=_segment(comment_id))
        )

    # Site content

    def get_site_content(
        self, *, cancel_token: CancellationToken | None = None
    ) -> typ.Any:
        """Return every stored content section as ``{"items": [...]}``."""
        return self.request("GET", SITE_CONTENT_PATH, cancel_token=cancel_token)

    def get_site_content_section(self, section: str) -> typ.Any:
        """Return one content section."""
        return self.request(
            "GET", SITE_CONTENT_SECTION_PATH.format(section=_segment(section))
        )

    def update_site_content_section(self, section: str, content: typ.Any) -> typ.Any:
        """Replace one content section and return the stored record."""
        return self.request(
            "PUT",
            SITE_CONTENT_SECTION_PATH.format(section=_segment(section)),
            json={"content": content},
        )

    # Pages and posts (editor endpoints)

    def list_pages(self) -> typ.Any:
        """Return every page, published or not."""
        return self.request("GET", PAGES_PATH)

    def create_page(self, payload: typ.Mapping[str, typ.Any]) -> typ.Any:
        """Create a page."""
        return self.request("POST", PAGES_PATH, json=dict(payload))

    def get_page(self, page_id: str) -> typ.Any:
        """Return a page by id."""
        return self.request("GET", PAGE_PATH.format(page_id=_segment(page_id)))

    def update_page(self, page_id: str, payload: typ.Mapping[str, typ.Any]) -> typ.Any:
        """Update a page."""
        return self.request(
            "PUT", PAGE_PATH.format(page_id=_segment(page_id)), json=dict(payload)
        )

    def delete_page(self, page_id: str) -> typ.Any:
        """Delete a page."""
        return self.request("DELETE", PAGE_PATH.format(page_id=_segment(page_id)))

    def list_posts(self, page_id: str) -> typ.Any:
        """Return the posts of a page."""
        return self.request("GET", PAGE_POSTS_PATH.format(page_id=_segment(page_id)))

    def create_post(self, page_id: str, payload: typ.Mapping[str, typ.Any]) -> typ.Any:
        """Create a post below a page."""
        return self.request(
            "POST", PAGE_POSTS_PATH.format(page_id=_segment(page_id)), json=dict(payload)
        )

    def get_post(self, post_id: str) -> typ.Any:
        """Return a post by id."""
        return self.request("GET", POST_PATH.format(post_id=_segment(post_id)))

    def update_post(self, post_id: str, payload: typ.Mapping[str, typ.Any]) -> typ.Any:
        """Update a post."""
        return self.request(
            "PUT", POST_PATH.format(post_id=_segment(post_id)), json=dict(payload)
        )

    def delete_post(self, post_id: str) -> typ.Any:
        """Delete a post."""
        return self.request("DELETE", POST_PATH.format(post_id=_segment(post_id)))

    # Public endpoints

    def get_published_page(
        self, slug: str, *, cancel_token: CancellationToken | None = None
    ) -> typ.Any:
        """Return ``{"page": ..., "posts": [...]}`` for a published slug."""
        return self.request(
            "GET",
            PUBLISHED_PAGE_PATH.format(slug=_segment(slug)),
            cancel_token=cancel_token,
        )

    def get_published_post(
        self,
        slug: str,
        post_slug: str,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> typ.Any:
        """Return ``{"page": ..., "post": ...}`` for a published post."""
        return self.request(
            "GET",
            PUBLISHED_POST_PATH.format(slug=_segment(slug), post_slug=_segment(post_slug)),
            cancel_token=cancel_token,
        )

    def get_navigation(
        self, *, cancel_token: CancellationToken | None = None
    ) -> typ.Any:
        """Return the dynamic navigation entries as ``{"items": [...]}``."""
        return self.request("GET", NAVIGATION_PATH, cancel_token=cancel_token)

    def list_published_pages(
        self, *, cancel_token: CancellationToken | None = None
    ) -> typ.Any:
        """Return the slugs of every published page."""
        return self.request("GET", PUBLISHED_PAGES_PATH, cancel_token=cancel_token)

    # Search and uploads

    def search_tutorials(
        self,
        query: str,
        *,
        topic: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> typ.Any:
        """Search tutorials by free text, optionally narrowed to a topic."""
        params = {"q": query.strip()}
        if topic:
            params["topic"] = topic
        return self.request(
            "GET", SEARCH_TUTORIALS_PATH, params=params, cancel_token=cancel_token
        )

    def list_topics(self) -> typ.Any:
        """Return every topic used by at least one tutorial."""
        return self.request("GET", SEARCH_TOPICS_PATH, cache_bust=False)

    def upload_image(
        self,
        filename: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
    ) -> str:
        """Upload an image and return the URL the server stored it under."""
        payload = self.request(
            "POST", UPLOAD_PATH, files={"file": (filename, data, content_type)}
        )
        url = payload.get("url") if isinstance(payload, dict) else None
        if not url:
            msg = "Upload response did not contain a URL"
            raise InvalidResponseError(msg)
        return str(url)


def _segment(value: object) -> str:
    """Percent-encode ``value`` for use as a single path segment."""
    return quote(str(value), safe="")


def _require(name: str, value: object) -> None:
    if not value:
        msg = f"{name} is required"
        raise ValueError(msg)


__all__ = ["ApiClient", "ApiError", "InvalidResponseError", "RequestAbortedError"]
