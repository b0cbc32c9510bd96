"""Common literal values used across doc_blocks.

Filenames and URL templates live here so the builder, the configuration
loader, and tests share the same values.

Examples
--------
>>> from doc_blocks import _constants
>>> _constants.EXPORT_URL_TEMPLATE.format(doc_id="abc")
'https://docs.google.com/document/d/abc/export?output=html'
"""

from pathlib import Path

EXPORT_URL_TEMPLATE = "https://docs.google.com/document/d/{doc_id}/export?output=html"
DEFAULT_CONFIG_PATH = Path("config/blocks.yaml")
DEFAULT_OUTPUT_DIR = Path("src/lib")
CLEANED_FILENAME = "doc.cleaned.html"
BLOCKS_FILENAME = "doc.blocks.json"
DEFAULT_TIMEOUT = 30.0
