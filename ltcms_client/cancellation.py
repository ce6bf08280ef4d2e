"""Cancellation tokens shared by every request-issuing operation.

A :class:`CancellationToken` is handed to store methods (page fetches,
tutorial loads, navigation loads). Callers cancel the previous token before
starting a new request for the same resource so a late response cannot
overwrite fresher state. Stores check the token at each suspension point:
before sending, after receiving, and while waiting between retries.

Example
-------
>>> from ltcms_client.cancellation import CancellationToken
>>> token = CancellationToken()
>>> token.cancelled
False
>>> token.cancel()
>>> token.wait(10)
True
"""

from __future__ import annotations

import threading


class CancellationToken:
    """Thread-safe flag signalling that an operation should stop."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once :meth:`cancel` has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Mark the token as cancelled and wake any pending :meth:`wait`."""
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """Sleep for up to ``timeout`` seconds.

        Returns ``True`` when the token was cancelled before or during the
        wait, ``False`` when the full delay elapsed.
        """
        if timeout <= 0:
            return self._event.is_set()
        return self._event.wait(timeout)


def is_cancelled(token: CancellationToken | None) -> bool:
    """Return whether ``token`` exists and has been cancelled."""
    return token is not None and token.cancelled


__all__ = ["CancellationToken", "is_cancelled"]
