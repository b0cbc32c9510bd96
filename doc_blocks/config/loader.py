"""Load the block build configuration YAML into a :class:`BuildConfig`."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import BuildConfig, BuildConfigError


def load_build_config(path: Path, *, required: bool = True) -> BuildConfig:
    """Load the YAML configuration describing the document and output paths.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``config/blocks.yaml``).
    required : bool, optional
        When ``False`` a missing file yields the default configuration instead
        of an error. Defaults to ``True``.

    Returns
    -------
    BuildConfig
        Parsed configuration with defaults applied for absent keys.

    Raises
    ------
    FileNotFoundError
        If ``required`` is set and the file does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    BuildConfigError
        If a value has the wrong type or is empty.

    Examples
    --------
    >>> from pathlib import Path
    >>> from doc_blocks.config import load_build_config
    >>> config = load_build_config(Path("config/blocks.yaml"))  # doctest: +SKIP
    >>> config.blocks_path  # doctest: +SKIP
    PosixPath('src/lib/doc.blocks.json')
    """
    if not path.exists():
        if required:
            msg = f"Configuration file '{path}' not found."
            raise FileNotFoundError(msg)
        return BuildConfig()

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    defaults = BuildConfig()
    return BuildConfig(
        doc_url=_optional_str(raw.get("doc_url"), "doc_url"),
        output_dir=Path(_required_str(raw, "output_dir", str(defaults.output_dir))),
        cleaned_filename=_required_str(
            raw, "cleaned_filename", defaults.cleaned_filename
        ),
        blocks_filename=_required_str(
            raw, "blocks_filename", defaults.blocks_filename
        ),
        timeout=_positive_float(raw.get("timeout", defaults.timeout), "timeout"),
    )


def _optional_str(value: object, key: str) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"'{key}' must be a string."
        raise BuildConfigError(msg)
    return value.strip() or None


def _required_str(raw: typ.Mapping[str, typ.Any], key: str, default: str) -> str:
    """Return ``raw[key]`` as a non-empty string, falling back to ``default``."""
    value = _optional_str(raw.get(key, default), key)
    if value is None:
        msg = f"'{key}' cannot be empty."
        raise BuildConfigError(msg)
    return value


def _positive_float(value: object, key: str) -> float:
    match value:
        case bool():
            pass
        case int() | float() if value > 0:
            return float(value)
    msg = f"'{key}' must be a positive number."
    raise BuildConfigError(msg)


__all__ = ["load_build_config"]
