"""Per-run store of named partials shared by setup and assembly.

The registry is written only while setup runs and read only once it has been
sealed, so every partial is in place before the first page renders. Entries
start as :class:`RawPartial` source and become :class:`CompiledPartial` the
first time they are looked up.

Example
-------
>>> from jinja2 import Environment
>>> registry = TemplateRegistry()
>>> env = Environment(loader=RegistryLoader(registry))
>>> registry.bind(env)
>>> registry.register("greeting", "Hello {{ name }}")
>>> registry.seal()
>>> registry.lookup("greeting").render(name="World")
'Hello World'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from jinja2 import BaseLoader, TemplateNotFound

from assemble_pages.errors import RegistryError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment, Template

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class RawPartial:
    """Partial source that has not been compiled yet."""

    source: str


@dc.dataclass(slots=True, frozen=True)
class CompiledPartial:
    """Partial source together with its compiled template."""

    source: str
    template: Template


Partial = RawPartial | CompiledPartial


class TemplateRegistry:
    """Named partials for one assembly run."""

    def __init__(self) -> None:
        self._entries: dict[str, Partial] = {}
        self._sealed = False
        self._environment: Environment | None = None

    def bind(self, environment: Environment) -> None:
        """Attach the Jinja environment used to compile entries on lookup."""
        self._environment = environment

    @property
    def sealed(self) -> bool:
        """Return True once setup has finished writing partials."""
        return self._sealed

    def register(self, name: str, source: str) -> None:
        """Store ``source`` under ``name``; a repeated name replaces the earlier entry.

        Raises
        ------
        RegistryError
            If the registry has already been sealed.
        """
        if self._sealed:
            msg = f"Cannot register partial '{name}' after setup has finished."
            raise RegistryError(msg)
        if name in self._entries:
            logger.debug("Partial '%s' replaced by a later file", name)
        self._entries[name] = RawPartial(source)

    def seal(self) -> None:
        """Close the registry to writes and open it to reads."""
        self._sealed = True

    def source(self, name: str) -> str:
        """Return the registered source for ``name``.

        Raises
        ------
        RegistryError
            If setup has not finished yet.
        TemplateNotFound
            If no partial is registered under ``name``.
        """
        self._require_sealed(name)
        entry = self._entries.get(name)
        if entry is None:
            raise TemplateNotFound(name)
        return entry.source

    def lookup(self, name: str) -> Template:
        """Return the compiled template for ``name``, compiling it on first use."""
        self._require_sealed(name)
        match self._entries.get(name):
            case CompiledPartial(template=template):
                return template
            case RawPartial(source=source):
                if self._environment is None:
                    msg = "Registry is not bound to a template environment."
                    raise RegistryError(msg)
                template = self._environment.get_template(name)
                self._entries[name] = CompiledPartial(source, template)
                return template
            case _:
                raise TemplateNotFound(name)

    def names(self) -> list[str]:
        """Return registered partial names in registration order."""
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _require_sealed(self, name: str) -> None:
        if not self._sealed:
            msg = f"Partial '{name}' requested before setup finished."
            raise RegistryError(msg)


class RegistryLoader(BaseLoader):
    """Jinja loader that serves ``{% include %}`` targets from a registry."""

    def __init__(self, registry: TemplateRegistry) -> None:
        self.registry = registry

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, cabc.Callable[[], bool] | None]:
        """Return the partial source for ``template``; sources never go stale."""
        return self.registry.source(template), None, lambda: True

    def list_templates(self) -> list[str]:
        """Return every registered partial name, sorted."""
        return sorted(self.registry.names())


__all__ = [
    "CompiledPartial",
    "Partial",
    "RawPartial",
    "RegistryLoader",
    "TemplateRegistry",
]
