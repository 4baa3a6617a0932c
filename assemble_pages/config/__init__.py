"""Load and validate assembly options.

This subpackage parses an ``assemble.yaml`` file (or a plain mapping), accepts
camelCase keys (``layoutIncludes``) alongside snake_case ones,
applies defaults, and produces an :class:`AssemblyOptions` dataclass that the
engine consumes.

Examples
--------
>>> from assemble_pages.config import build_options
>>> options = build_options({"layout": "page", "dest": "public"})
>>> options.layout, options.dest.as_posix()
('page', 'public')
"""

from .loader import build_options, load_options
from .models import AssemblyOptions, BeautifierConfig, ContextKeys

__all__ = [
    "AssemblyOptions",
    "BeautifierConfig",
    "ContextKeys",
    "build_options",
    "load_options",
]
