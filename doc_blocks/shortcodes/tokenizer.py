r"""Split sanitized HTML into HTML and shortcode blocks.

Authors embed components in the document with a bracket notation::

    [[ImageEmbed src="hero.png" alt='Harbour at dawn' size=large wide]]
    [[Scrolly]] ...body... [[/Scrolly]]

:func:`tokenize` scans the text for ``[[...]]`` tokens left to right. Each open
token is paired with the first later ``[[/Name]]`` in the remaining text, even
when that close sits inside a malformed token, and scanning resumes after it.
Pairing does not nest: an inner open token with the same name is part of the
body. An open token without a close is a self-closing shortcode.

Example
-------
>>> from doc_blocks.shortcodes import tokenize
>>> [type(block).__name__ for block in tokenize('a [[Foo x="1"]]mid[[/Foo]] b')]
['HtmlBlock', 'ShortcodeBlock', 'HtmlBlock']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from doc_blocks.entities import normalize

from .models import Attrs, Block, HtmlBlock, ShortcodeBlock

logger = logging.getLogger(__name__)

NAME_PATTERN = r"[A-Za-z_][A-Za-z0-9_-]*"
TOKEN_PATTERN = re.compile(r"\[\[[\s\S]*?\]\]")
CLOSE_PATTERN = re.compile(rf"^/\s*({NAME_PATTERN})\s*$")
OPEN_PATTERN = re.compile(rf"^({NAME_PATTERN})([\s\S]*)$")
ATTR_PATTERN = re.compile(
    rf"({NAME_PATTERN})(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"']+)))?"
)

TokenKind = typ.Literal["open", "close"]


@dc.dataclass(slots=True, frozen=True)
class Token:
    """Parsed contents of one bracket token."""

    kind: TokenKind
    name: str
    attrs: Attrs = dc.field(default_factory=dict)


@dc.dataclass(slots=True, frozen=True)
class Lexeme:
    """A bracket token located in the source string.

    Attributes
    ----------
    start : int
        Offset of the opening ``[[``.
    end : int
        Offset just past the closing ``]]``.
    text : str
        The raw token text, brackets included.
    token : Token or None
        Parsed token, or ``None`` when the contents are not a valid token.
    blank : bool
        ``True`` for tokens with nothing between the brackets.
    """

    start: int
    end: int
    text: str
    token: Token | None
    blank: bool = False


def parse_attrs(raw: str) -> Attrs:
    """Parse ``name="v" name='v' name=v flag`` attribute text.

    Names without a value become ``True``. When a name repeats, the last
    occurrence wins. ``raw`` is expected to be entity-normalized already.
    """
    attrs: Attrs = {}
    for match in ATTR_PATTERN.finditer(raw):
        name, double_quoted, single_quoted, bare = match.groups()
        value = next(
            (v for v in (double_quoted, single_quoted, bare) if v is not None), None
        )
        attrs[name] = True if value is None else value
    return attrs


def _token_inner(text: str) -> str:
    return normalize(text[2:-2]).strip()


def parse_token(text: str) -> Token | None:
    """Parse a ``[[...]]`` token into an open or close :class:`Token`.

    Returns ``None`` for blank tokens and for contents that do not start with
    a valid component name.
    """
    inner = _token_inner(text)
    if not inner:
        return None
    close_match = CLOSE_PATTERN.match(inner)
    if close_match:
        return Token(kind="close", name=close_match.group(1))
    open_match = OPEN_PATTERN.match(inner)
    if not open_match:
        return None
    return Token(
        kind="open",
        name=open_match.group(1),
        attrs=parse_attrs(open_match.group(2).strip()),
    )


def _lexeme(match: re.Match[str]) -> Lexeme:
    text = match.group(0)
    return Lexeme(
        start=match.start(),
        end=match.end(),
        text=text,
        token=parse_token(text),
        blank=not _token_inner(text),
    )


def lex(html: str) -> list[Lexeme]:
    """Return every bracket token in ``html`` in source order."""
    return [_lexeme(match) for match in TOKEN_PATTERN.finditer(html)]


def _close_pattern(name: str) -> re.Pattern[str]:
    """Return a pattern matching ``[[/name]]`` with optional inner spaces."""
    return re.compile(rf"\[\[\s*/\s*{re.escape(name)}\s*\]\]")


def _append_html(blocks: list[Block], html: str) -> None:
    if html.strip():
        blocks.append(HtmlBlock(html=html))


def tokenize(html: str) -> list[Block]:
    """Split sanitized ``html`` into ordered HTML and shortcode blocks.

    Parameters
    ----------
    html : str
        Output of :func:`doc_blocks.sanitizer.clean`.

    Returns
    -------
    list[Block]
        Blocks in document order. Whitespace-only HTML between tokens is
        dropped; blank tokens produce nothing; stray close tokens and
        unparseable tokens are kept as literal HTML blocks.
    """
    blocks: list[Block] = []
    cursor = 0
    while True:
        match = TOKEN_PATTERN.search(html, cursor)
        if match is None:
            break
        lexeme = _lexeme(match)
        _append_html(blocks, html[cursor : lexeme.start])
        cursor = lexeme.end

        if lexeme.blank:
            continue
        token = lexeme.token
        if token is None or token.kind == "close":
            logger.debug("Keeping unmatched token %r as HTML", lexeme.text)
            blocks.append(HtmlBlock(html=lexeme.text))
            continue

        close = _close_pattern(token.name).search(html, lexeme.end)
        if close is None:
            blocks.append(ShortcodeBlock(name=token.name, attrs=dict(token.attrs)))
            continue

        body = html[lexeme.end : close.start()]
        blocks.append(
            ShortcodeBlock(
                name=token.name, attrs=dict(token.attrs), body_html=body or None
            )
        )
        cursor = close.end()

    _append_html(blocks, html[cursor:])
    return blocks


__all__ = [
    "Lexeme",
    "Token",
    "lex",
    "parse_attrs",
    "parse_token",
    "tokenize",
]
