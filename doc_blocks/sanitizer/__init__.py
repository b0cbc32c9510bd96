"""Sanitize exported document HTML into a minimal semantic vocabulary."""

from .cleaner import DocumentCleaner, clean, is_meaningful
from .link_rewriter import is_external, unwrap
from .style_map import StyleFlags, build_class_style_map, parse_class_styles

__all__ = [
    "DocumentCleaner",
    "StyleFlags",
    "build_class_style_map",
    "clean",
    "is_external",
    "is_meaningful",
    "parse_class_styles",
    "unwrap",
]
