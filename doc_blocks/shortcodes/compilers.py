"""Turn the bodies of known shortcodes into structured attributes.

Paired shortcodes carry raw HTML between their tokens. For the components the
site understands, that body is an authoring convenience: an ``ImageEmbed``
body holds a pasted image and a ``Scrolly`` body holds a JSON array of steps.
The compilers here read those bodies into ``attrs`` and drop the HTML.

Every compiler is an extractor returning the new attributes, or ``None`` when
the body cannot be understood. ``None`` falls back to the attributes written
on the open token, so one malformed block never stops the rest of the
document from compiling.
"""

from __future__ import annotations

import json
import logging
import re
import typing as typ

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from doc_blocks.entities import normalize

from .models import (
    DEFAULT_STEP_POSITION,
    STEP_POSITIONS,
    Attrs,
    Block,
    ScrollyStep,
    ShortcodeBlock,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

Extractor = typ.Callable[[str, Attrs], "Attrs | None"]

_BREAK_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PARAGRAPH_BOUNDARY = re.compile(r"</p>\s*<p\b[^>]*>", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]+>")
_NBSP_PATTERN = re.compile(r"&nbsp;|\xa0", re.IGNORECASE)


def html_to_text(html: str) -> str:
    """Flatten ``html`` to plain text, keeping line and paragraph breaks."""
    text = _BREAK_PATTERN.sub("\n", html)
    text = _PARAGRAPH_BOUNDARY.sub("\n", text)
    text = _TAG_PATTERN.sub("", text)
    text = _NBSP_PATTERN.sub(" ", text)
    return normalize(text).strip()


def extract_image_attrs(body_html: str, attrs: Attrs) -> Attrs | None:
    """Fill ``src`` and ``alt`` from the first ``<img>`` in an ImageEmbed body.

    Values already written on the open token take precedence.
    """
    try:
        soup = BeautifulSoup(body_html, "html.parser")
    except ParserRejectedMarkup:
        return None
    updated = dict(attrs)
    image = soup.find("img")
    if image is None:
        return updated
    for name in ("src", "alt"):
        embedded = image.get(name) or ""
        if not updated.get(name) and embedded:
            updated[name] = str(embedded)
    return updated


def _coerce_step(item: object) -> ScrollyStep | None:
    """Return a valid step built from a decoded JSON value, or ``None``."""
    if not isinstance(item, dict):
        return None
    img = item.get("img")
    alt = item.get("alt")
    pos = item.get("pos")
    text = item.get("text")
    step = ScrollyStep(
        img=img if isinstance(img, str) else "",
        alt=alt if isinstance(alt, str) else None,
        pos=pos if pos in STEP_POSITIONS else DEFAULT_STEP_POSITION,
        text=text if isinstance(text, str) else "",
    )
    if not step.img or not step.text:
        return None
    return step


def extract_scrolly_steps(body_html: str, attrs: Attrs) -> Attrs | None:
    """Parse the JSON step array embedded in a Scrolly body into ``steps``.

    The array is taken from the first ``[`` to the last ``]`` of the body's
    plain text. Steps without an image or text are dropped; the resulting
    list may be empty.
    """
    text = html_to_text(body_html)
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end <= start:
        return None
    try:
        payload = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, list):
        return None
    steps = [step for step in map(_coerce_step, payload) if step is not None]
    updated = dict(attrs)
    updated["steps"] = steps
    return updated


COMPILERS: dict[str, Extractor] = {
    "ImageEmbed": extract_image_attrs,
    "Scrolly": extract_scrolly_steps,
}


def compile_block(
    block: Block, compilers: cabc.Mapping[str, Extractor] = COMPILERS
) -> Block:
    """Apply the compiler registered for ``block``'s name, if any."""
    if not isinstance(block, ShortcodeBlock):
        return block
    extractor = compilers.get(block.name)
    if extractor is None:
        return block
    body = block.body_html
    if not body or not body.strip():
        return ShortcodeBlock(name=block.name, attrs=dict(block.attrs))
    attrs = extractor(body, block.attrs)
    if attrs is None:
        logger.debug("Could not compile %s body; keeping token attributes", block.name)
        attrs = dict(block.attrs)
    return ShortcodeBlock(name=block.name, attrs=attrs)


def compile_blocks(
    blocks: cabc.Iterable[Block], compilers: cabc.Mapping[str, Extractor] = COMPILERS
) -> list[Block]:
    """Compile every block in ``blocks``, preserving order.

    Parameters
    ----------
    blocks : Iterable[Block]
        Output of :func:`doc_blocks.shortcodes.tokenize`.
    compilers : Mapping[str, Extractor], optional
        Extractors keyed by shortcode name. Defaults to :data:`COMPILERS`.

    Returns
    -------
    list[Block]
        New block list. Compiled shortcodes never carry ``body_html``; blocks
        without a registered compiler are returned as-is.
    """
    return [compile_block(block, compilers) for block in blocks]


__all__ = [
    "COMPILERS",
    "Extractor",
    "compile_block",
    "compile_blocks",
    "extract_image_attrs",
    "extract_scrolly_steps",
    "html_to_text",
]
