"""Typed dataclasses describing the block build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from doc_blocks._constants import (
    BLOCKS_FILENAME,
    CLEANED_FILENAME,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_TIMEOUT,
)


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class BuildConfig:
    """Where the source document lives and where compiled artifacts go.

    Attributes
    ----------
    doc_url : str or None
        Editor URL of the source document (``.../document/d/<id>/edit``).
    output_dir : Path
        Directory receiving the cleaned HTML and block JSON.
    cleaned_filename : str
        Filename of the sanitized HTML written for debugging.
    blocks_filename : str
        Filename of the compiled block list.
    timeout : float
        Per-request timeout in seconds for the export download.
    """

    doc_url: str | None = None
    output_dir: Path = DEFAULT_OUTPUT_DIR
    cleaned_filename: str = CLEANED_FILENAME
    blocks_filename: str = BLOCKS_FILENAME
    timeout: float = DEFAULT_TIMEOUT

    @property
    def cleaned_path(self) -> Path:
        """Return the output path for the sanitized HTML."""
        return self.output_dir / self.cleaned_filename

    @property
    def blocks_path(self) -> Path:
        """Return the output path for the compiled block JSON."""
        return self.output_dir / self.blocks_filename

    def require_doc_url(self) -> str:
        """Return ``doc_url`` or raise when it has not been configured."""
        if not self.doc_url:
            msg = "No document URL configured; set DOC_URL or pass --doc-url."
            raise BuildConfigError(msg)
        return self.doc_url


__all__ = ["BuildConfig", "BuildConfigError"]
