"""Load assembly options from YAML or plain mappings into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from assemble_pages.errors import ConfigError

from .helpers import (
    _build_beautifier,
    _build_helpers,
    _build_keys,
    _pattern_value,
    _snake_key,
)
from .models import AssemblyOptions

PATTERN_OPTIONS = ("layouts", "layout_includes", "materials", "views", "data", "docs")
KNOWN_OPTIONS = frozenset(
    {*PATTERN_OPTIONS, "layout", "dest", "beautifier", "helpers", "keys"}
)


def load_options(
    path: Path, overrides: typ.Mapping[str, typ.Any] | None = None
) -> AssemblyOptions:
    """Load the YAML file describing where sources live and where pages go.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML options file (for example,
        ``assemble.yaml``).
    overrides : Mapping[str, Any], optional
        Values that replace those read from the file, such as CLI flags.

    Returns
    -------
    AssemblyOptions
        Parsed options with defaults applied for every absent key.

    Raises
    ------
    FileNotFoundError
        If the options file does not exist at ``path``.
    ConfigError
        If the top-level YAML structure is not a mapping or an option is
        invalid.

    Examples
    --------
    >>> from pathlib import Path
    >>> from assemble_pages.config import load_options
    >>> options = load_options(Path("assemble.yaml"))  # doctest: +SKIP
    >>> options.layout  # doctest: +SKIP
    'default'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    if overrides:
        raw.update({key: value for key, value in overrides.items() if value is not None})
    return build_options(raw)


def build_options(payload: typ.Mapping[str, typ.Any] | None = None) -> AssemblyOptions:
    """Build AssemblyOptions from a mapping with camelCase or snake_case keys.

    >>> build_options({"layoutIncludes": "includes/*", "dest": "out"}).layout_includes
    'includes/*'
    """
    normalized = {_snake_key(str(key)): value for key, value in (payload or {}).items()}
    unknown = sorted(set(normalized) - KNOWN_OPTIONS)
    if unknown:
        msg = f"Unknown option(s): {', '.join(unknown)}."
        raise ConfigError(msg)

    kwargs: dict[str, typ.Any] = {
        name: _pattern_value(name, normalized[name])
        for name in PATTERN_OPTIONS
        if name in normalized
    }
    if "layout" in normalized:
        kwargs["layout"] = str(normalized["layout"])
    if "dest" in normalized:
        kwargs["dest"] = Path(normalized["dest"])
    kwargs["beautifier"] = _build_beautifier(normalized.get("beautifier"))
    kwargs["helpers"] = _build_helpers(normalized.get("helpers"))
    kwargs["keys"] = _build_keys(normalized.get("keys"))
    return AssemblyOptions(**kwargs)


__all__ = ["KNOWN_OPTIONS", "PATTERN_OPTIONS", "build_options", "load_options"]
