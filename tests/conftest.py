"""Shared fixtures providing mocked HTTP transports for the client tests."""

from __future__ import annotations

import typing as typ

import pytest
import requests
from requests.cookies import RequestsCookieJar

from ltcms_client.cancellation import CancellationToken
from ltcms_client.client import ApiClient

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

API_BASE = "https://cms.example.invalid/api"

ResponseFactory = typ.Callable[..., typ.Any]


@pytest.fixture
def make_response(mocker: MockerFixture) -> ResponseFactory:
    """Return a factory for mocked ``requests.Response`` objects.

    Parameters
    ----------
    mocker : MockerFixture
        pytest-mock fixture used to create the response doubles.

    Returns
    -------
    ResponseFactory
        Callable accepting ``status``, ``payload``, ``content_type`` and
        ``text`` keyword arguments.
    """

    def factory(
        status: int = 200,
        payload: typ.Any = None,
        *,
        content_type: str = "application/json",
        text: str = "",
        reason: str = "",
    ) -> typ.Any:
        response = mocker.Mock()
        response.status_code = status
        response.headers = {"Content-Type": content_type}
        response.json.return_value = payload
        response.text = text
        response.reason = reason
        return response

    return factory


@pytest.fixture
def session(mocker: MockerFixture) -> typ.Any:
    """Return a ``requests.Session`` double with a real cookie jar."""
    double = mocker.Mock(spec=requests.Session)
    double.cookies = RequestsCookieJar()
    return double


@pytest.fixture
def client(session: typ.Any) -> ApiClient:
    """Return an API client wired to the mocked session."""
    return ApiClient(base_url=API_BASE, session=session)


@pytest.fixture
def cancelled_in_flight(session: typ.Any) -> CancellationToken:
    """Return a token that is cancelled while the request is in flight.

    The mocked session cancels the token and then fails with a connection
    error, mimicking a transport torn down by the abort.
    """
    token = CancellationToken()

    def fail(*_args: object, **_kwargs: object) -> typ.NoReturn:
        token.cancel()
        msg = "connection reset"
        raise requests.ConnectionError(msg)

    session.request.side_effect = fail
    return token
