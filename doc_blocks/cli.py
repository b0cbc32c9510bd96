"""Cyclopts CLI entrypoint for compiling a document into content blocks.

The ``blocks`` console script defined here downloads the HTML export of the
configured document, sanitizes it, and writes ``doc.cleaned.html`` and
``doc.blocks.json`` for the site renderer. ``blocks compile`` runs the same
pipeline against an export already saved to disk.

Examples
--------
Build from the document named by ``DOC_URL``:

>>> from doc_blocks.cli import main
>>> main()  # doctest: +SKIP

Compile a saved export into a custom directory:

>>> from doc_blocks.cli import app
>>> app(["compile", "export.html", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_PATH
from .builder import BuildResult, DocBlocksBuilder
from .config import load_build_config

app = App(name="blocks", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _report(result: BuildResult) -> None:
    print(f"images found in document: {result.source_images}")
    print(f"shortcodes found in document: {result.shortcode_count}")
    for path in result.paths:
        print(f"wrote {_format_path(path)}")


@app.command(help="Fetch the configured document and write its compiled blocks.")
def build(
    *,
    doc_url: typ.Annotated[
        str | None, Parameter(help="Document editor URL", env_var="DOC_URL")
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to build config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG_PATH,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log pipeline details")] = False,
) -> None:
    """Fetch, compile, and write the blocks for one document.

    Parameters
    ----------
    doc_url : str or None, optional
        Editor URL of the source document; falls back to ``doc_url`` in the
        config file. Read from ``DOC_URL`` when unset.
    config : Path, optional
        Path to ``blocks.yaml``. A missing file at the default location is
        treated as an empty configuration.
    output_dir : Path or None, optional
        Override for the configured output directory.
    verbose : bool, optional
        Emit debug logging for recovered authoring mistakes.

    Raises
    ------
    BuildConfigError
        If no document URL is available.
    """
    _configure_logging(verbose)
    build_config = load_build_config(config, required=config != DEFAULT_CONFIG_PATH)
    builder = DocBlocksBuilder(build_config, output_dir=output_dir)
    _report(builder.run(doc_url))


@app.command(name="compile", help="Compile a saved HTML export without fetching.")
def compile_export(
    source: typ.Annotated[Path, Parameter(help="Path to the saved HTML export")],
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to build config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG_PATH,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log pipeline details")] = False,
) -> None:
    """Compile an HTML export already on disk into blocks."""
    _configure_logging(verbose)
    build_config = load_build_config(config, required=config != DEFAULT_CONFIG_PATH)
    builder = DocBlocksBuilder(build_config, output_dir=output_dir)
    _report(builder.compile_export(source.read_text(encoding="utf-8")))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``blocks`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
