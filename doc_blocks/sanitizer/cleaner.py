"""Rewrite exported document HTML into a small semantic vocabulary.

The editor's HTML export nests every run of text in class-styled ``<span>``
elements, wraps links in redirects, and leaves empty paragraphs behind.
:class:`DocumentCleaner` walks the parsed tree bottom-up and emits only an
allow-listed set of tags without attributes, restoring emphasis from the
document stylesheet and dropping wrappers that carry no visible content.

Example
-------
>>> from doc_blocks.sanitizer import clean
>>> clean('<body><p><span class="x">Hi</span></p><p> </p></body>')
'<p>Hi</p>'
"""

from __future__ import annotations

import logging
import re
import typing as typ
from html import escape

from bs4 import BeautifulSoup
from bs4.element import (
    NavigableString,
    PreformattedString,
    Script,
    Stylesheet,
    Tag,
    TemplateString,
)

from .link_rewriter import is_external, unwrap
from .style_map import (
    ClassStyleMap,
    StyleFlags,
    build_class_style_map,
    flags_from_declarations,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bs4.element import PageElement

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset(
    {
        "p",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "img",
        "figure",
        "table",
        "thead",
        "tbody",
        "tr",
        "td",
        "th",
        "a",
        "strong",
        "em",
        "u",
        "b",
        "i",
        "code",
        "span",
    }
)
CANONICAL_EMPHASIS = {"strong": "strong", "em": "em", "u": "u", "b": "strong", "i": "em"}

TABLE_WRAPPER_CLASS = "table-responsive"
TABLE_CLASS = "table table-striped"
FIGURE_CLASS = "docs-image figure"
IMAGE_CLASS = "figure-image img-fluid border"

_EMBED_PATTERN = re.compile(r"<(img|table|figure)\b", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]+>")
_NBSP_PATTERN = re.compile(r"&nbsp;", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_SINGLE_FIGURE = re.compile(
    r"<figure\b[^>]*>(?:(?!<figure\b).)*</figure>", re.IGNORECASE | re.DOTALL
)


def is_meaningful(fragment: str) -> bool:
    """Return ``True`` when ``fragment`` renders something visible.

    Images, tables, and figures always count. Otherwise the fragment must
    still contain a non-whitespace character once tags and ``&nbsp;`` are
    removed, so ``<span>&nbsp;</span>`` is not meaningful.
    """
    if not fragment:
        return False
    if _EMBED_PATTERN.search(fragment):
        return True
    text = _TAG_PATTERN.sub("", fragment)
    text = _NBSP_PATTERN.sub("", text)
    return bool(_WHITESPACE.sub("", text))


class DocumentCleaner:
    """Sanitize one parsed document using its own stylesheet.

    The cleaner is built per document: the class style map is read from the
    document's ``<style>`` elements when the cleaner is created and consulted
    while spans are rewritten.
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        """Initialize the cleaner for ``soup``.

        Parameters
        ----------
        soup : BeautifulSoup
            Parsed export. Only its ``<body>`` (or the whole tree when no body
            exists) is rewritten.
        """
        self.soup = soup
        self.class_styles: ClassStyleMap = build_class_style_map(soup)
        self._handlers: dict[str, cabc.Callable[[Tag], str]] = {
            "a": self._clean_anchor,
            "table": self._clean_table,
            "tr": self._clean_row,
            "th": self._clean_header_cell,
            "td": self._clean_cell,
            "img": self._clean_image,
            "span": self._clean_span,
            "figure": self._clean_figure,
        }
        for tag_name in CANONICAL_EMPHASIS:
            self._handlers[tag_name] = self._clean_emphasis

    def run(self) -> str:
        """Return the sanitized HTML for the document body.

        Each top-level node is cleaned and trimmed independently; empty results
        are discarded and the remainder joined with newlines.
        """
        root = self.soup.body or self.soup
        blocks = (self.clean_node(child).strip() for child in root.children)
        return "\n".join(block for block in blocks if block)

    def clean_node(self, node: PageElement) -> str:
        """Return the sanitized HTML for ``node`` and its descendants."""
        if isinstance(node, (PreformattedString, Stylesheet, Script, TemplateString)):
            return ""
        if isinstance(node, NavigableString):
            return node.output_ready(formatter="minimal")
        if not isinstance(node, Tag):
            return ""
        tag_name = node.name.lower()
        if tag_name not in ALLOWED_TAGS:
            return self._clean_children(node)
        handler = self._handlers.get(tag_name, self._clean_block)
        return handler(node)

    def _clean_children(self, node: Tag) -> str:
        return "".join(self.clean_node(child) for child in node.children)

    def _clean_block(self, node: Tag) -> str:
        """Re-emit an allow-listed tag without attributes when it has content."""
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        tag_name = node.name.lower()
        return f"<{tag_name}>{inner}</{tag_name}>"

    def _clean_emphasis(self, node: Tag) -> str:
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        tag_name = CANONICAL_EMPHASIS[node.name.lower()]
        return f"<{tag_name}>{inner}</{tag_name}>"

    def _clean_anchor(self, node: Tag) -> str:
        """Drop empty anchors and unwrap redirect hrefs on the rest."""
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        href = unwrap(_attr(node, "href") or "#")
        if is_external(href):
            return (
                f'<a href="{escape(href)}" target="_blank" '
                f'rel="noopener noreferrer">{inner}</a>'
            )
        return f'<a href="{escape(href)}">{inner}</a>'

    def _clean_table(self, node: Tag) -> str:
        """Rebuild a table with its first row as the header.

        Rows are collected from the whole subtree, so rows of a nested table
        are hoisted into the outer table.
        """
        rows = node.find_all("tr")
        if not rows:
            logger.debug("Dropping table without rows")
            return ""
        head = f"<thead>{self.clean_node(rows[0])}</thead>"
        body = ""
        if len(rows) > 1:
            body = "<tbody>" + "".join(self.clean_node(row) for row in rows[1:]) + "</tbody>"
        return (
            f'<div class="{TABLE_WRAPPER_CLASS}">'
            f'<table class="{TABLE_CLASS}">{head}{body}</table>'
            "</div>"
        )

    def _clean_row(self, node: Tag) -> str:
        return f"<tr>{self._clean_children(node)}</tr>"

    def _clean_header_cell(self, node: Tag) -> str:
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        return f'<th scope="col">{inner}</th>'

    def _clean_cell(self, node: Tag) -> str:
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        return f"<td>{inner}</td>"

    def _clean_image(self, node: Tag) -> str:
        """Wrap an image in a lazily loaded, responsive figure."""
        src = _attr(node, "src")
        if not src:
            return ""
        attributes = [f'src="{escape(src)}"', f'alt="{escape(_attr(node, "alt") or "")}"']
        for name in ("width", "height"):
            value = _attr(node, name)
            if value:
                attributes.append(f'{name}="{escape(value)}"')
        attributes.extend(['loading="lazy"', f'class="{IMAGE_CLASS}"'])
        return f'<figure class="{FIGURE_CLASS}"><img {" ".join(attributes)} /></figure>'

    def _clean_figure(self, node: Tag) -> str:
        """Keep a figure, collapsing it into the figure its image already produced."""
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        stripped = inner.strip()
        if _SINGLE_FIGURE.fullmatch(stripped):
            return stripped
        return f"<figure>{inner}</figure>"

    def _clean_span(self, node: Tag) -> str:
        """Translate class and inline-style emphasis into semantic tags."""
        inner = self._clean_children(node)
        if not is_meaningful(inner):
            return ""
        flags = StyleFlags()
        for class_name in node.get("class") or []:
            flags = flags | self.class_styles.get(class_name, StyleFlags())
        flags = flags | flags_from_declarations(_attr(node, "style") or "")
        if flags.underline:
            inner = f"<u>{inner}</u>"
        if flags.italic:
            inner = f"<em>{inner}</em>"
        if flags.bold:
            inner = f"<strong>{inner}</strong>"
        return inner


def _attr(node: Tag, name: str) -> str | None:
    """Return a single-valued attribute as a string, or ``None`` when absent."""
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def clean(raw_html: str) -> str:
    """Sanitize ``raw_html`` into the allow-listed tag vocabulary.

    Parameters
    ----------
    raw_html : str
        Full HTML export of the source document.

    Returns
    -------
    str
        Newline-joined top-level blocks of sanitized HTML. Returns an empty
        string when nothing meaningful survives.
    """
    soup = BeautifulSoup(raw_html, "html.parser")
    return DocumentCleaner(soup).run()


__all__ = [
    "ALLOWED_TAGS",
    "DocumentCleaner",
    "clean",
    "is_meaningful",
]
