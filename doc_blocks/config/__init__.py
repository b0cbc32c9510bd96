"""Load and validate the build configuration for document compilation.

The configuration names the source document and where compiled artifacts are
written. :func:`load_build_config` reads ``config/blocks.yaml`` and returns a
:class:`BuildConfig`; command-line flags and the ``DOC_URL`` environment
variable override individual values.

Examples
--------
>>> from pathlib import Path
>>> from doc_blocks.config import load_build_config
>>> config = load_build_config(Path("config/blocks.yaml"), required=False)
>>> config.cleaned_filename
'doc.cleaned.html'
"""

from .loader import load_build_config
from .models import BuildConfig, BuildConfigError

__all__ = ["BuildConfig", "BuildConfigError", "load_build_config"]
