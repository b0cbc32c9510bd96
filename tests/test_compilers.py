"""Unit tests for the ImageEmbed and Scrolly block compilers.

Usage
-----
Run ``pytest tests/test_compilers.py -v``.
"""

from __future__ import annotations

import pytest

from doc_blocks.sanitizer import clean
from doc_blocks.shortcodes import (
    HtmlBlock,
    ScrollyStep,
    ShortcodeBlock,
    compile_block,
    compile_blocks,
    tokenize,
)
from doc_blocks.shortcodes.compilers import html_to_text

SCROLLY_BODY = (
    "<p>[{&quot;img&quot;:&quot;a.png&quot;,&quot;text&quot;:&quot;hi&quot;},"
    "{&quot;img&quot;:&quot;&quot;,&quot;text&quot;:&quot;skip&quot;}]</p>"
)


def _scrolly(body: str | None, **attrs: str | bool) -> ShortcodeBlock:
    return ShortcodeBlock(name="Scrolly", attrs=dict(attrs), body_html=body)


def test_scrolly_drops_invalid_steps() -> None:
    """Steps without an image are dropped and positions default to center."""
    compiled = compile_block(_scrolly(SCROLLY_BODY))
    assert compiled == ShortcodeBlock(
        name="Scrolly",
        attrs={"steps": [ScrollyStep(img="a.png", pos="center", text="hi")]},
    )


def test_scrolly_across_paragraphs_with_smart_quotes() -> None:
    """JSON split over paragraphs and typed with smart quotes still parses."""
    body = (
        "</p>\n<p>[{&ldquo;img&rdquo;: &ldquo;one.png&rdquo;,</p>\n"
        "<p>&ldquo;alt&rdquo;: &ldquo;Harbour&rdquo;, &ldquo;pos&rdquo;: &ldquo;end&rdquo;,"
        "<br>&ldquo;text&rdquo;: &ldquo;First&nbsp;step&rdquo;}]</p>\n<p>"
    )
    compiled = compile_block(_scrolly(body, theme="dark"))
    assert compiled.attrs == {
        "theme": "dark",
        "steps": [
            ScrollyStep(img="one.png", alt="Harbour", pos="end", text="First step")
        ],
    }
    assert compiled.body_html is None


def test_scrolly_coerces_field_types() -> None:
    """Non-string fields are coerced and bad positions fall back to center."""
    body = (
        '[{"img": "a.png", "alt": 5, "pos": "left", "text": "t"},'
        ' {"img": 3, "text": "t"}, "junk", null, {"img": "b.png", "text": ""}]'
    )
    compiled = compile_block(_scrolly(body))
    assert compiled.attrs["steps"] == [
        ScrollyStep(img="a.png", alt=None, pos="center", text="t")
    ]


def test_scrolly_with_no_valid_steps_has_empty_list() -> None:
    """An array of invalid steps yields an empty step list."""
    compiled = compile_block(_scrolly('[{"img": "", "text": ""}]'))
    assert compiled.attrs == {"steps": []}


@pytest.mark.parametrize(
    "body",
    [
        "<p>no json here</p>",
        "<p>] backwards [</p>",
        "<p>[not json]</p>",
        '<p>[{"img": "a.png",}]</p>',
    ],
)
def test_scrolly_falls_back_to_token_attrs(body: str) -> None:
    """Unusable bodies keep the token attributes and drop the body."""
    compiled = compile_block(_scrolly(body, height="tall"))
    assert compiled == ShortcodeBlock(name="Scrolly", attrs={"height": "tall"})


@pytest.mark.parametrize("body", [None, "", "  \n "])
def test_empty_bodies_are_cleared(body: str | None) -> None:
    """Missing or blank bodies pass through without a body."""
    compiled = compile_block(_scrolly(body, flag=True))
    assert compiled == ShortcodeBlock(name="Scrolly", attrs={"flag": True})


def test_image_embed_takes_src_and_alt_from_body() -> None:
    """The first image in the body supplies missing src and alt."""
    block = ShortcodeBlock(
        name="ImageEmbed",
        attrs={"size": "wide"},
        body_html=(
            '</p>\n<p><figure class="docs-image figure"><img src="a.png" alt="A" />'
            '</figure><img src="b.png"></p>\n<p>'
        ),
    )
    assert compile_block(block) == ShortcodeBlock(
        name="ImageEmbed", attrs={"size": "wide", "src": "a.png", "alt": "A"}
    )


def test_image_embed_keeps_token_values() -> None:
    """Attributes written on the token win over the embedded image."""
    block = ShortcodeBlock(
        name="ImageEmbed",
        attrs={"src": "token.png"},
        body_html='<img src="body.png" alt="">',
    )
    assert compile_block(block).attrs == {"src": "token.png"}


def test_image_embed_without_image() -> None:
    """A body without an image leaves the attributes unchanged."""
    block = ShortcodeBlock(name="ImageEmbed", attrs={"alt": "x"}, body_html="<p>t</p>")
    assert compile_block(block) == ShortcodeBlock(name="ImageEmbed", attrs={"alt": "x"})


def test_unknown_shortcodes_and_html_pass_through() -> None:
    """Blocks without a compiler are returned unchanged, body included."""
    blocks = [
        HtmlBlock(html="<p>a</p>"),
        ShortcodeBlock(name="Callout", attrs={"tone": "warm"}, body_html="<p>b</p>"),
    ]
    assert compile_blocks(blocks) == blocks


def test_compile_blocks_isolates_failures() -> None:
    """A failing block does not affect its siblings."""
    blocks = [
        _scrolly("<p>[broken</p>]"),
        _scrolly('[{"img": "a.png", "text": "ok"}]'),
    ]
    compiled = compile_blocks(blocks)
    assert compiled[0] == ShortcodeBlock(name="Scrolly", attrs={})
    assert compiled[1].attrs["steps"] == [
        ScrollyStep(img="a.png", pos="center", text="ok")
    ]


def test_html_to_text() -> None:
    """Line breaks and paragraph boundaries become newlines."""
    assert html_to_text("<p>a<br/>b</p><p class='x'>c&nbsp;&amp;&nbsp;d</p>") == (
        "a\nb\nc & d"
    )


def test_html_to_text_treats_literal_nbsp_as_space() -> None:
    """A literal non-breaking space is flattened like ``&nbsp;``."""
    assert html_to_text("<p>[1,\xa02]</p>") == "[1, 2]"


def _compiled_shortcodes(body: str) -> list[ShortcodeBlock]:
    blocks = compile_blocks(tokenize(clean(f"<body>{body}</body>")))
    return [block for block in blocks if isinstance(block, ShortcodeBlock)]


def test_sanitized_scrolly_keeps_non_ascii_text() -> None:
    """Step text from a sanitized export keeps accented letters and dashes."""
    (scrolly,) = _compiled_shortcodes(
        "<p>[[Scrolly]]</p>"
        '<p>[{"img":"a.png","text":"Café — naïve"},&nbsp;</p>'
        '<p>{"img":"b.png","text":"5°"}]</p>'
        "<p>[[/Scrolly]]</p>"
    )
    assert scrolly.attrs == {
        "steps": [
            ScrollyStep(img="a.png", pos="center", text="Café — naïve"),
            ScrollyStep(img="b.png", pos="center", text="5°"),
        ]
    }


def test_sanitized_token_attrs_keep_non_ascii_text() -> None:
    """Attribute values on a sanitized token are not entity-encoded."""
    (embed,) = _compiled_shortcodes('<p>[[ImageEmbed alt="Café" src=a.png]]</p>')
    assert embed.attrs == {"alt": "Café", "src": "a.png"}
