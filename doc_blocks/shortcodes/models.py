"""Block structures produced by the shortcode tokenizer and compilers.

Blocks are msgspec structs tagged by a ``type`` field so the compiled list
serialises to the JSON shape the site renderer reads::

    {"type": "html", "html": "<p>Intro</p>"}
    {"type": "shortcode", "name": "ImageEmbed", "attrs": {"src": "a.png"}}
"""

from __future__ import annotations

import typing as typ

import msgspec

StepPosition = typ.Literal["start", "center", "end"]
STEP_POSITIONS: frozenset[str] = frozenset(typ.get_args(StepPosition))
DEFAULT_STEP_POSITION: StepPosition = "center"


class ScrollyStep(msgspec.Struct, kw_only=True, omit_defaults=True):
    """One frame of a scrolling narrative.

    Attributes
    ----------
    img : str
        Image shown while the step is active; never empty.
    alt : str or None
        Optional alternative text for ``img``.
    pos : {"start", "center", "end"}
        Where the text card sits relative to the image.
    text : str
        Step caption; never empty.
    """

    img: str
    alt: str | None = None
    pos: StepPosition
    text: str


AttrValue = str | bool | list[ScrollyStep]
Attrs = dict[str, AttrValue]


class HtmlBlock(msgspec.Struct, tag="html", tag_field="type"):
    """Sanitized HTML passed through to the renderer unchanged."""

    html: str


class ShortcodeBlock(
    msgspec.Struct, tag="shortcode", tag_field="type", omit_defaults=True
):
    """A component invocation written as ``[[Name ...]]`` in the document.

    Attributes
    ----------
    name : str
        Component name exactly as written in the open token.
    attrs : dict
        Attribute values from the open token. Bare flags map to ``True``;
        compilers may add structured values such as ``steps``.
    body_html : str or None
        Raw HTML between a paired open and close token. Compilers consume and
        drop it for the components they understand.
    """

    name: str
    attrs: Attrs
    body_html: str | None = msgspec.field(default=None, name="bodyHtml")


Block = HtmlBlock | ShortcodeBlock

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder(list[Block])


def encode_blocks(blocks: typ.Sequence[Block]) -> bytes:
    """Serialise ``blocks`` as indented JSON."""
    return msgspec.json.format(_encoder.encode(list(blocks)), indent=2)


def decode_blocks(data: bytes | str) -> list[Block]:
    """Parse JSON produced by :func:`encode_blocks` back into blocks."""
    return _decoder.decode(data)


__all__ = [
    "DEFAULT_STEP_POSITION",
    "STEP_POSITIONS",
    "AttrValue",
    "Attrs",
    "Block",
    "HtmlBlock",
    "ScrollyStep",
    "ShortcodeBlock",
    "StepPosition",
    "decode_blocks",
    "encode_blocks",
]
