"""Recover emphasis that the editor expressed only through CSS classes.

Exports rarely use ``<strong>`` or ``<em>``; instead each run of text sits in a
``<span class="c3">`` whose meaning lives in the document's ``<style>`` block.
This module reads those rules into a :data:`ClassStyleMap` that the cleaner
consults when it rewrites spans.

Example
-------
>>> from doc_blocks.sanitizer.style_map import parse_class_styles
>>> parse_class_styles(".c1{font-weight:700}")["c1"].bold
True
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

if typ.TYPE_CHECKING:
    from bs4 import BeautifulSoup

RULE_PATTERN = re.compile(r"([^{]+)\{([^}]+)\}")
CLASS_SELECTOR_PATTERN = re.compile(r"^\.(-?[_a-zA-Z][\w-]*)$")
BOLD_PATTERN = re.compile(r"font-weight:(bold|[6-9]00)")
ITALIC_PATTERN = re.compile(r"font-style:italic")
UNDERLINE_PATTERN = re.compile(r"text-decoration:underline")
_WHITESPACE = re.compile(r"\s+")


@dc.dataclass(slots=True, frozen=True)
class StyleFlags:
    """Emphasis recovered from CSS declarations.

    Attributes
    ----------
    bold : bool
        ``font-weight`` is ``bold`` or a numeric weight from 600 to 900.
    italic : bool
        ``font-style`` is ``italic``.
    underline : bool
        ``text-decoration`` is ``underline``.
    """

    bold: bool = False
    italic: bool = False
    underline: bool = False

    def __or__(self, other: StyleFlags) -> StyleFlags:
        return StyleFlags(
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            underline=self.underline or other.underline,
        )

    def __bool__(self) -> bool:
        return self.bold or self.italic or self.underline


ClassStyleMap = dict[str, StyleFlags]


def flags_from_declarations(declarations: str) -> StyleFlags:
    """Return the emphasis flags set by a CSS declaration block or style attribute."""
    compact = _WHITESPACE.sub("", declarations.lower())
    return StyleFlags(
        bold=bool(BOLD_PATTERN.search(compact)),
        italic=bool(ITALIC_PATTERN.search(compact)),
        underline=bool(UNDERLINE_PATTERN.search(compact)),
    )


def parse_class_styles(css: str) -> ClassStyleMap:
    """Map bare class selectors in ``css`` to the emphasis their rules declare.

    Only selectors of the form ``.name`` are recorded; compound, descendant,
    id, and pseudo-class selectors are skipped. Flags from several rules
    targeting the same class are OR-combined and never cleared.
    """
    styles: ClassStyleMap = {}
    for match in RULE_PATTERN.finditer(css):
        flags = flags_from_declarations(match.group(2))
        if not flags:
            continue
        for selector in match.group(1).split(","):
            class_match = CLASS_SELECTOR_PATTERN.match(selector.strip())
            if not class_match:
                continue
            name = class_match.group(1)
            styles[name] = styles.get(name, StyleFlags()) | flags
    return styles


def build_class_style_map(soup: BeautifulSoup) -> ClassStyleMap:
    """Collect every ``<style>`` element in ``soup`` and parse its rules."""
    css = "\n".join(style.get_text() for style in soup.find_all("style"))
    return parse_class_styles(css)


__all__ = [
    "ClassStyleMap",
    "StyleFlags",
    "build_class_style_map",
    "flags_from_declarations",
    "parse_class_styles",
]
