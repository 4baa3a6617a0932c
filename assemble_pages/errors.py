"""Exception hierarchy raised by the assembly engine.

Every failure surfaced by a run derives from :class:`AssemblyError`, so hosts
can catch one type and report the first problem. Id collisions are not errors;
later files silently replace earlier ones.
"""

from __future__ import annotations

from pathlib import Path


class AssemblyError(Exception):
    """Base class for failures raised while assembling pages."""


class ConfigError(AssemblyError, ValueError):
    """Raised when assembly options are invalid or incomplete."""


class DiscoveryError(AssemblyError):
    """Raised when a pattern set cannot select any files at all."""


class ParseError(AssemblyError):
    """Raised when front matter, data, or a template cannot be parsed."""

    def __init__(self, source: Path | str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to parse '{source}': {reason}")


class MissingLayoutError(AssemblyError):
    """Raised when a page references a layout id that was never discovered."""

    def __init__(self, layout_id: str, page: Path | str) -> None:
        self.layout_id = layout_id
        self.page = page
        super().__init__(f"Layout '{layout_id}' requested by '{page}' was not found.")


class WriteError(AssemblyError):
    """Raised when a rendered page cannot be written to its destination."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Unable to write '{path}': {reason}")


class RegistryError(AssemblyError):
    """Raised when the partial registry is used outside its allowed phase."""


__all__ = [
    "AssemblyError",
    "ConfigError",
    "DiscoveryError",
    "MissingLayoutError",
    "ParseError",
    "RegistryError",
    "WriteError",
]
