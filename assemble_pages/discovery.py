"""Resolve glob-style include/exclude patterns into ordered file lists.

Patterns follow common glob conventions:
``**`` spans directories, ``{a,b}`` expands to alternatives, and a leading
``!`` turns a pattern into an exclusion. Matches for each include pattern are
sorted so the result does not depend on filesystem enumeration order.

Example
-------
>>> from assemble_pages.discovery import discover
>>> discover(["src/views/**/*", "!src/views/layouts/**"])  # doctest: +SKIP
[PosixPath('src/views/index.html'), PosixPath('src/views/pages/home.html')]
"""

from __future__ import annotations

import glob
import logging
import re
import typing as typ
from pathlib import Path

from .errors import DiscoveryError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

_BRACE_PATTERN = re.compile(r"\{([^{}]*,[^{}]*)\}")
_MAGIC_CHARS = frozenset("*?[{")

PatternSet = str | list[str] | tuple[str, ...]


def as_pattern_list(patterns: PatternSet | None) -> list[str]:
    """Normalize a single pattern or a sequence of patterns into a list."""
    if patterns is None:
        return []
    if isinstance(patterns, str):
        return [patterns]
    return [str(pattern) for pattern in patterns]


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate patterns, left to right.

    >>> expand_braces("data/**/*.{json,yml}")
    ['data/**/*.json', 'data/**/*.yml']
    """
    match = _BRACE_PATTERN.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def pattern_base(pattern: str) -> Path:
    """Return the static directory prefix of ``pattern`` (before any glob magic).

    >>> pattern_base("src/views/**/*").as_posix()
    'src/views'
    """
    parts: list[str] = []
    for part in Path(pattern).parts:
        if _MAGIC_CHARS.intersection(part):
            break
        parts.append(part)
    else:
        # A literal file path; its directory is the base.
        parts = parts[:-1]
    return Path(*parts) if parts else Path()


def pattern_bases(patterns: PatternSet | None) -> list[Path]:
    """Return the static bases of every include pattern, without duplicates."""
    bases: list[Path] = []
    for pattern in as_pattern_list(patterns):
        if pattern.startswith("!"):
            continue
        base = pattern_base(pattern)
        if base not in bases:
            bases.append(base)
    return bases


def discover(patterns: PatternSet | None) -> list[Path]:
    """Return the files matched by ``patterns`` in a deterministic order.

    Parameters
    ----------
    patterns : str or sequence of str
        Include patterns, optionally mixed with ``!``-prefixed exclusions.

    Returns
    -------
    list[Path]
        Matching files (directories are skipped). Each include pattern's
        matches are sorted; patterns contribute in the order given and
        duplicates keep their first position. An empty list is a valid result.

    Raises
    ------
    DiscoveryError
        If ``patterns`` holds exclusions only, which can never select a file.
    """
    entries = as_pattern_list(patterns)
    if not entries:
        return []
    includes = [entry for entry in entries if not entry.startswith("!")]
    excludes = [entry[1:] for entry in entries if entry.startswith("!")]
    if not includes:
        msg = f"Pattern set {entries!r} contains no include patterns."
        raise DiscoveryError(msg)

    excluded = {Path(entry) for entry in _expand_matches(excludes)}
    found: list[Path] = []
    seen: set[Path] = set()
    for pattern in includes:
        for match in _expand_matches([pattern]):
            path = Path(match)
            if path in seen or not path.is_file():
                continue
            if _is_excluded(path, excluded):
                continue
            seen.add(path)
            found.append(path)
    if not found:
        logger.debug("No files matched %s", entries)
    return found


def _expand_matches(patterns: cabc.Iterable[str]) -> list[str]:
    matches: list[str] = []
    for pattern in patterns:
        for expanded in expand_braces(pattern):
            matches.extend(sorted(glob.glob(expanded, recursive=True)))
    return matches


def _is_excluded(path: Path, excluded: set[Path]) -> bool:
    """Return True when ``path`` or one of its parents was matched by an exclusion."""
    if not excluded:
        return False
    return path in excluded or any(parent in excluded for parent in path.parents)


__all__ = [
    "PatternSet",
    "as_pattern_list",
    "discover",
    "expand_braces",
    "pattern_base",
    "pattern_bases",
]
