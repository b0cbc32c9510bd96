"""Helpers for rewriting anchors found in document exports.

Editor exports wrap every outbound link in a ``https://www.google.com/url``
redirect that carries the real target in its ``q`` parameter. :func:`unwrap`
removes that wrapper and :func:`is_external` decides whether the resulting
target should open in a new tab.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

REDIRECT_HOSTS = frozenset({"www.google.com", "google.com"})
REDIRECT_PATH = "/url"
_EXTERNAL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def unwrap(href: str) -> str:
    """Return the redirect target wrapped by ``href``, or ``href`` unchanged.

    Parameters
    ----------
    href : str
        Raw ``href`` attribute value taken from the exported document.

    Returns
    -------
    str
        The decoded ``q`` parameter when ``href`` points at the redirect
        endpoint; otherwise the original value. Malformed URLs are returned
        untouched.
    """
    if not href:
        return href
    try:
        parsed = urlsplit(href)
        hostname = parsed.hostname
    except ValueError:
        return href
    if (
        parsed.scheme in {"http", "https"}
        and hostname in REDIRECT_HOSTS
        and parsed.path == REDIRECT_PATH
    ):
        targets = parse_qs(parsed.query, keep_blank_values=True).get("q")
        if targets:
            return targets[0]
    return href


def is_external(href: str | None) -> bool:
    """Return ``True`` when ``href`` is an absolute ``http(s)`` URL."""
    if not href:
        return False
    if href.startswith(("#", "/", "./", "../")):
        return False
    return bool(_EXTERNAL_PATTERN.match(href))


__all__ = ["REDIRECT_HOSTS", "REDIRECT_PATH", "is_external", "unwrap"]
