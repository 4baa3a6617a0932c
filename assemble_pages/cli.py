"""Cyclopts CLI entrypoint for assembling static pages.

The ``assemble`` console script defined here reads an options file, runs the
assembly engine once, and reports every file it wrote. Typical usage is
``assemble build`` from the project root, locally or in CI.

Examples
--------
Assemble with the default ``assemble.yaml`` (or built-in defaults):

>>> from assemble_pages.cli import main
>>> main()  # doctest: +SKIP

Assemble into a custom directory:

>>> from assemble_pages.cli import app
>>> app(["build", "--dest", "public"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import build_options, load_options
from .engine import Assembler

DEFAULT_CONFIG = Path("assemble.yaml")

app = App(name="assemble", config=cyclopts.config.Env("ASSEMBLE_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Assemble layouts, materials, and views into static HTML.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to the options file", env_var="ASSEMBLE_CONFIG")
    ] = DEFAULT_CONFIG,
    dest: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="ASSEMBLE_DEST"),
    ] = None,
    layout: typ.Annotated[
        str | None,
        Parameter(help="Override the default layout id", env_var="ASSEMBLE_LAYOUT"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log each setup step to stderr")
    ] = False,
) -> None:
    """Assemble every view and print the paths that were written.

    Parameters
    ----------
    config : Path, optional
        Options file; when the default ``assemble.yaml`` is absent the
        built-in defaults are used instead.
    dest : Path or None, optional
        Output root overriding the configured ``dest``.
    layout : str or None, optional
        Default layout id overriding the configured ``layout``.
    verbose : bool, optional
        Enable DEBUG logging.

    Raises
    ------
    FileNotFoundError
        If a non-default ``config`` path does not exist.
    AssemblyError
        If the run fails; the first failure aborts assembly.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    overrides = {"dest": dest, "layout": layout}
    if config == DEFAULT_CONFIG and not config.exists():
        options = build_options({k: v for k, v in overrides.items() if v is not None})
    else:
        options = load_options(config, overrides)

    for path in Assembler(options).run():
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``assemble`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
