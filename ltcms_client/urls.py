"""Allow-list validation for user-supplied link targets.

Editors paste links into hero CTAs, footer contact links, and posts. Before
such a value is stored or rendered it passes through
:func:`sanitize_external_url`, which only lets ``http``, ``https``,
``mailto`` and ``tel`` URLs through and keeps relative paths, anchors and
query strings as they are. Everything else, including protocol-relative
``//host`` links, is rejected.

Examples
--------
>>> sanitize_external_url("  https://Example.com  ")
'https://example.com/'
>>> sanitize_external_url("#section")
'#section'
>>> sanitize_external_url("javascript:alert(1)") is None
True
"""

from __future__ import annotations

import ipaddress
import logging
import re
from urllib.parse import quote, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https", "mailto", "tel"})
_HIERARCHICAL_SCHEMES = frozenset({"http", "https"})
_DEFAULT_PORTS = {"http": 80, "https": 443}
_SCHEME_PREFIX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
# Host code points a browser URL parser refuses, plus ``%`` which would need
# decoding first.
_FORBIDDEN_HOST = re.compile(r"[\x00-\x20\x7f#%/:<>?@\[\\\]^|\"{}`]")
_PATH_SAFE = "!$%&'()*+,-./:;=@[\\]^_|~"
_QUERY_SAFE = "!$%&()*+,-./:;=?@[\\]^_`{|}~"
_FRAGMENT_SAFE = "!#$%&'()*+,-./:;=?@[\\]^_{|}~"


def has_scheme(value: str) -> bool:
    """Return whether ``value`` starts with a ``scheme:`` prefix."""
    return _SCHEME_PREFIX.match(value) is not None


def _normalise_host(hostname: str, *, bracketed: bool) -> str:
    """Return the serialised host or raise ``ValueError`` when it is malformed."""
    if bracketed:
        return f"[{ipaddress.IPv6Address(hostname).compressed}]"
    if _FORBIDDEN_HOST.search(hostname):
        msg = f"forbidden character in host {hostname!r}"
        raise ValueError(msg)
    ascii_host = hostname.encode("idna").decode("ascii")
    last_label = ascii_host.rstrip(".").rpartition(".")[2]
    if last_label.isdigit():
        return str(ipaddress.IPv4Address(ascii_host.rstrip(".")))
    return ascii_host


def sanitize_external_url(value: object) -> str | None:
    """Return a safe form of ``value`` or ``None`` when it must not be used.

    Parameters
    ----------
    value : object
        Candidate link target. Non-string values are rejected.

    Returns
    -------
    str | None
        The trimmed input for scheme-less values (relative paths, anchors,
        query strings); the normalised URL for allowed schemes; ``None`` for
        blank, protocol-relative, disallowed, or unparsable input.

    Notes
    -----
    ``http`` and ``https`` hosts must be a valid domain name (IDNA encoded
    on output), a dotted IPv4 address, or a bracketed IPv6 address. Spaces
    and other unsafe characters in the path, query and fragment are
    percent-encoded.
    """
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or trimmed.startswith("//"):
        return None
    if not has_scheme(trimmed):
        return trimmed

    try:
        parts = urlsplit(trimmed)
        scheme = parts.scheme.lower()
        if scheme not in ALLOWED_SCHEMES:
            return None
        if scheme not in _HIERARCHICAL_SCHEMES:
            return urlunsplit(
                (scheme, parts.netloc, parts.path, parts.query, parts.fragment)
            )
        if not parts.hostname:
            return None
        userinfo, at, hostport = parts.netloc.rpartition("@")
        host = _normalise_host(parts.hostname, bracketed=hostport.startswith("["))
        port = parts.port
    except ValueError as exc:
        logger.warning("Failed to parse external URL %r: %s", trimmed, exc)
        return None

    if port is not None and port != _DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"
    return urlunsplit(
        (
            scheme,
            f"{userinfo}{at}{host}",
            quote(parts.path or "/", safe=_PATH_SAFE),
            quote(parts.query, safe=_QUERY_SAFE),
            quote(parts.fragment, safe=_FRAGMENT_SAFE),
        )
    )


def is_safe_external_url(value: object) -> bool:
    """Return whether :func:`sanitize_external_url` accepts ``value``."""
    return sanitize_external_url(value) is not None


__all__ = [
    "ALLOWED_SCHEMES",
    "has_scheme",
    "is_safe_external_url",
    "sanitize_external_url",
]
