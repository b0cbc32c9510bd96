"""Tokenize bracket shortcodes and compile them into structured blocks."""

from .compilers import COMPILERS, compile_block, compile_blocks
from .models import (
    Block,
    HtmlBlock,
    ScrollyStep,
    ShortcodeBlock,
    decode_blocks,
    encode_blocks,
)
from .tokenizer import Token, lex, parse_attrs, parse_token, tokenize

__all__ = [
    "COMPILERS",
    "Block",
    "HtmlBlock",
    "ScrollyStep",
    "ShortcodeBlock",
    "Token",
    "compile_block",
    "compile_blocks",
    "decode_blocks",
    "encode_blocks",
    "lex",
    "parse_attrs",
    "parse_token",
    "tokenize",
]
