"""Compile rich-text document exports into sanitized content blocks.

The pipeline has three stages, each usable on its own:

- :func:`clean` rewrites exported HTML into a small tag vocabulary.
- :func:`tokenize` splits the result into HTML and ``[[Shortcode]]`` blocks.
- :func:`compile_blocks` turns known shortcode bodies into structured data.

Examples
--------
>>> from doc_blocks import clean, compile_blocks, tokenize
>>> blocks = compile_blocks(tokenize(clean("<body><p>Hello</p></body>")))
>>> blocks[0].html
'<p>Hello</p>'
"""

from __future__ import annotations

from .cli import app, main
from .entities import normalize
from .sanitizer import clean
from .shortcodes import compile_blocks, tokenize

__all__ = ["app", "clean", "compile_blocks", "main", "normalize", "tokenize"]
