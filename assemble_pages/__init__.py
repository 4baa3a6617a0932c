"""Assemble static HTML pages from layouts, materials, views, and data.

This package exposes the engine used by the ``assemble`` console script and by
host build pipelines that want to assemble a site in-process.

Exports
-------
- ``assemble``: One-call setup and assembly from options or a mapping.
- ``Assembler``: The two-phase orchestrator behind ``assemble``.
- ``AssemblyOptions``: Typed options with the conventional ``src/`` defaults.
- ``app`` / ``main``: Cyclopts application entry points.

Examples
--------
>>> from assemble_pages import assemble
>>> assemble({"dest": "dist"})  # doctest: +SKIP
[PosixPath('dist/index.html')]
"""

from __future__ import annotations

from .cli import app, main
from .config import AssemblyOptions
from .engine import Assembler, assemble

__all__ = ["Assembler", "AssemblyOptions", "app", "assemble", "main"]
