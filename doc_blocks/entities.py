"""Decode the handful of HTML entities that break structured parsing.

Document editors routinely rewrite straight quotes as typographic ones and
export them as entities (or as the literal characters). Shortcode attributes
and embedded JSON both rely on plain ``"`` and ``'`` characters, so the text
is passed through
:func:`normalize` before it is parsed.

Example
-------
>>> from doc_blocks.entities import normalize
>>> normalize("&ldquo;hi&rdquo; &amp; bye")
'"hi" & bye'
"""

from __future__ import annotations

import re

# ``&amp;`` stays last so an encoded entity such as ``&amp;quot;`` is only
# unescaped once.
_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"&ldquo;|&#8220;|&#x201C;|\u201c", re.IGNORECASE), '"'),
    (re.compile(r"&rdquo;|&#8221;|&#x201D;|\u201d", re.IGNORECASE), '"'),
    (re.compile(r"&lsquo;|&#8216;|&#x2018;|\u2018", re.IGNORECASE), "'"),
    (re.compile(r"&rsquo;|&#8217;|&#x2019;|\u2019", re.IGNORECASE), "'"),
    (re.compile(r"&quot;|&#34;", re.IGNORECASE), '"'),
    (re.compile(r"&apos;|&#39;", re.IGNORECASE), "'"),
    (re.compile(r"&lt;", re.IGNORECASE), "<"),
    (re.compile(r"&gt;", re.IGNORECASE), ">"),
    (re.compile(r"&amp;", re.IGNORECASE), "&"),
)


def normalize(text: str) -> str:
    """Return ``text`` with quote, bracket, and ampersand entities decoded."""
    if not text:
        return text
    for pattern, replacement in _SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


__all__ = ["normalize"]
