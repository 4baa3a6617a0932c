"""Utility helpers shared by the options loader."""

from __future__ import annotations

import importlib
import re
import typing as typ

from assemble_pages.errors import ConfigError

from .models import BeautifierConfig, ContextKeys

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake_key(key: str) -> str:
    """Return ``key`` in snake case so ``layoutIncludes`` matches ``layout_includes``."""
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def _pattern_value(name: str, value: object) -> str | list[str]:
    """Validate a glob pattern option, which must be a string or list of strings."""
    match value:
        case str():
            return value
        case list() | tuple() if all(isinstance(item, str) for item in value):
            return list(value)
        case _:
            msg = f"Option '{name}' must be a glob pattern or a list of patterns."
            raise ConfigError(msg)


def _build_beautifier(payload: object) -> BeautifierConfig:
    """Build a BeautifierConfig from a mapping, keeping defaults for absent keys."""
    if payload is None:
        return BeautifierConfig()
    if isinstance(payload, BeautifierConfig):
        return payload
    if not isinstance(payload, dict):
        msg = "Option 'beautifier' must be a mapping."
        raise ConfigError(msg)
    base = BeautifierConfig()
    return BeautifierConfig(
        indent=payload.get("indent", base.indent),
        formatter=payload.get("formatter", base.formatter),
    )


def _build_keys(payload: object) -> ContextKeys:
    """Build ContextKeys from a mapping of ``materials``/``views``/``docs`` names."""
    if payload is None:
        return ContextKeys()
    if isinstance(payload, ContextKeys):
        return payload
    if not isinstance(payload, dict):
        msg = "Option 'keys' must be a mapping."
        raise ConfigError(msg)
    base = ContextKeys()
    return ContextKeys(
        materials=str(payload.get("materials", base.materials)),
        views=str(payload.get("views", base.views)),
        docs=str(payload.get("docs", base.docs)),
    )


def _resolve_helper(name: str, target: object) -> typ.Callable[..., typ.Any]:
    """Return a callable helper, importing ``"module:attr"`` references."""
    if callable(target):
        return target
    if not isinstance(target, str) or ":" not in target:
        msg = f"Helper '{name}' must be a callable or a 'module:attr' reference."
        raise ConfigError(msg)
    module_name, _, attr = target.partition(":")
    try:
        resolved = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        msg = f"Helper '{name}' could not be imported from '{target}'."
        raise ConfigError(msg) from exc
    if not callable(resolved):
        msg = f"Helper '{name}' ('{target}') is not callable."
        raise ConfigError(msg)
    return resolved


def _build_helpers(payload: object) -> dict[str, typ.Callable[..., typ.Any]]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        msg = "Option 'helpers' must be a mapping of names to helpers."
        raise ConfigError(msg)
    return {str(name): _resolve_helper(str(name), target) for name, target in payload.items()}


__all__ = [
    "_build_beautifier",
    "_build_helpers",
    "_build_keys",
    "_pattern_value",
    "_resolve_helper",
    "_snake_key",
]
