"""High-level orchestration for compiling a document into content blocks.

:class:`DocBlocksBuilder` runs the whole pipeline for one document: download
the HTML export, sanitize it, split it into HTML and shortcode blocks, compile
the shortcodes it understands, and write ``doc.cleaned.html`` and
``doc.blocks.json`` for the site renderer.

Example
-------
>>> from doc_blocks.builder import DocBlocksBuilder
>>> from doc_blocks.config import BuildConfig
>>> config = BuildConfig(doc_url="https://docs.google.com/document/d/abc/edit")
>>> builder = DocBlocksBuilder(config)
>>> builder.run().paths  # doctest: +SKIP
[PosixPath('src/lib/doc.cleaned.html'), PosixPath('src/lib/doc.blocks.json')]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from .fetch import DocumentFetcher
from .sanitizer import clean
from .shortcodes import ShortcodeBlock, compile_blocks, encode_blocks, tokenize

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import BuildConfig
    from .shortcodes import Block

logger = logging.getLogger(__name__)

IMG_TAG_PATTERN = re.compile(r"<img\b", re.IGNORECASE)


@dc.dataclass(slots=True)
class BuildResult:
    """Output of one pipeline run.

    Attributes
    ----------
    cleaned_html : str
        Sanitized HTML the blocks were split from.
    blocks : list[Block]
        Compiled blocks in document order.
    source_images : int
        Number of ``<img>`` tags in the raw export.
    paths : list[Path]
        Artifacts written for this result; empty until it is written.
    """

    cleaned_html: str
    blocks: list[Block]
    source_images: int = 0
    paths: list[Path] = dc.field(default_factory=list)

    @property
    def shortcode_count(self) -> int:
        """Return how many blocks are shortcodes."""
        return sum(isinstance(block, ShortcodeBlock) for block in self.blocks)


class DocBlocksBuilder:
    """Fetch a document export and emit its compiled block list."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        fetcher: DocumentFetcher | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : BuildConfig
            Source document and output settings.
        fetcher : DocumentFetcher, optional
            Transport used to download the export; defaults to a
            :class:`DocumentFetcher` using ``config.timeout``.
        output_dir : Path, optional
            Override for ``config.output_dir``.
        """
        if output_dir is not None:
            config = dc.replace(config, output_dir=output_dir)
        self.config = config
        self.fetcher = fetcher or DocumentFetcher(timeout=config.timeout)

    @staticmethod
    def build(raw_html: str) -> BuildResult:
        """Sanitize, tokenize, and compile ``raw_html`` without touching disk."""
        cleaned = clean(raw_html)
        blocks = compile_blocks(tokenize(cleaned))
        return BuildResult(
            cleaned_html=cleaned,
            blocks=blocks,
            source_images=len(IMG_TAG_PATTERN.findall(raw_html)),
        )

    def compile_export(self, raw_html: str) -> BuildResult:
        """Build ``raw_html`` and write its artifacts into the output directory."""
        result = self.build(raw_html)
        result.paths = self.write(result)
        return result

    def run(self, doc_url: str | None = None) -> BuildResult:
        """Fetch the configured document and write its artifacts.

        Parameters
        ----------
        doc_url : str, optional
            Override for ``config.doc_url``.

        Returns
        -------
        BuildResult
            The compiled document; ``paths`` lists the cleaned HTML and the
            block JSON, in that order.

        Raises
        ------
        BuildConfigError
            If no document URL is configured.
        DocumentSourceError, DocumentFetchError
            If the export cannot be downloaded.
        """
        url = doc_url or self.config.require_doc_url()
        return self.compile_export(self.fetcher.fetch(url))

    def write(self, result: BuildResult) -> list[Path]:
        """Persist ``result`` into the output directory."""
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        cleaned_path = self.config.cleaned_path
        blocks_path = self.config.blocks_path
        cleaned_path.write_text(result.cleaned_html, encoding="utf-8")
        blocks_path.write_bytes(encode_blocks(result.blocks))
        logger.info(
            "Wrote %d blocks (%d shortcodes) to %s",
            len(result.blocks),
            result.shortcode_count,
            blocks_path,
        )
        return [cleaned_path, blocks_path]


__all__ = ["BuildResult", "DocBlocksBuilder"]
