r"""Rewrite a material's own field references into a private namespace.

A material's front-matter fields live in the render context under the
material's safe id, so two materials can both define ``title`` without either
seeing the other's value. This module rewrites the body registered as a
partial so each local field reference goes through that namespace::

    <button>{{ label }}</button>
    <button>{{ _fields("button")["label"] }}</button>

Jinja identifiers cannot contain ``-``, which safe ids such as
``forms-toggle`` may, so the namespace is reached through the ``_fields``
template global rather than a bare name.

The rewrite is a preprocessing pass over a small token grammar, independent of
the template evaluator:

* tags are ``{{ ... }}`` value references and ``{% ... %}`` markers, each
  allowing ``-``/``+`` whitespace control;
* ``{# ... #}`` comments and ``{% raw %}`` regions are copied untouched;
* inside a tag, string literals are opaque and identifiers are whole tokens,
  so ``title`` never matches inside ``subtitle``;
* names bound by the template itself (``for`` targets, ``set`` and ``with``
  assignments, ``macro`` and ``call`` parameters, imports) shadow a field of
  the same name until the tag that closes their scope.

Example
-------
>>> from assemble_pages.engine.namespacer import namespace_body
>>> namespace_body("<b>{{ label }}</b>", {"label": "Go"}, "button")
'<b>{{ _fields("button")["label"] }}</b>'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from assemble_pages._constants import FIELD_LOOKUP, MATERIAL_HELPER
from assemble_pages.identifiers import safe_id

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import MaterialRecord
    from .registry import TemplateRegistry

SEGMENT_PATTERN = re.compile(
    r"(?P<raw>\{%[-+]?\s*raw\s*[-+]?%\}.*?\{%[-+]?\s*endraw\s*[-+]?%\})"
    r"|(?P<comment>\{#.*?#\})"
    r"|(?P<vopen>\{\{[-+]?)(?P<vexpr>.*?)(?P<vclose>[-+]?\}\})"
    r"|(?P<bopen>\{%[-+]?)(?P<bexpr>.*?)(?P<bclose>[-+]?%\})",
    re.DOTALL,
)
TOKEN_PATTERN = re.compile(
    r"""(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")"""
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<number>[0-9][0-9_.eE]*)"
    r"|(?P<space>\s+)"
    r"|(?P<op>.)",
    re.DOTALL,
)

# Tags whose names are declarations rather than references.
OPAQUE_TAGS = frozenset(
    {"macro", "endmacro", "block", "endblock", "import", "from", "filter", "endfilter"}
)
RESERVED_NAMES = frozenset(
    {
        "and", "or", "not", "in", "is", "if", "else", "elif", "recursive",
        "true", "false", "none", "True", "False", "None",
        "loop", "self", "super", "caller", "varargs", "kwargs",
        FIELD_LOOKUP, MATERIAL_HELPER,
    }
)  # fmt: skip
# Tags that open a variable scope, mapped to the tag that closes it.
SCOPE_TAGS = {
    "for": "endfor",
    "with": "endwith",
    "macro": "endmacro",
    "call": "endcall",
    "block": "endblock",
}
_IMPORT_WORDS = frozenset({"as", "with", "without", "context"})


@dc.dataclass(slots=True, frozen=True)
class Token:
    """A lexical token inside a template tag."""

    kind: str
    text: str


@dc.dataclass(slots=True)
class Scope:
    """Names bound by the template between a tag and its closing tag."""

    end_tag: str | None
    names: set[str] = dc.field(default_factory=set)


class ScopeStack:
    """Track which names the template has bound at the current position."""

    def __init__(self) -> None:
        self._scopes = [Scope(None)]

    def bound(self) -> frozenset[str]:
        """Return every name currently bound by an enclosing scope."""
        return frozenset().union(*(scope.names for scope in self._scopes))

    def update(self, keyword: str | None, tokens: cabc.Sequence[Token]) -> None:
        """Apply the bindings and scope changes made by one ``{% ... %}`` tag."""
        if keyword is None:
            return
        if keyword in SCOPE_TAGS:
            self._scopes.append(Scope(SCOPE_TAGS[keyword], _declared_names(keyword, tokens)))
        elif keyword == "set":
            self._scopes[-1].names.update(_set_targets(tokens))
            if not any(token.text == "=" for token in tokens):
                self._scopes.append(Scope("endset"))
        elif keyword in {"import", "from"}:
            self._scopes[-1].names.update(_imported_names(tokens))
        elif keyword.startswith("end"):
            self._close(keyword)

    def _close(self, end_tag: str) -> None:
        for index in range(len(self._scopes) - 1, 0, -1):
            if self._scopes[index].end_tag == end_tag:
                del self._scopes[index:]
                return


def tokenize(expression: str) -> list[Token]:
    """Split the inside of a template tag into tokens.

    >>> [t.text for t in tokenize("title|upper") if t.kind != "space"]
    ['title', '|', 'upper']
    """
    return [
        Token(match.lastgroup or "op", match.group())
        for match in TOKEN_PATTERN.finditer(expression)
    ]


def namespace_body(body: str, fields: cabc.Iterable[str], namespace: str) -> str:
    """Return ``body`` with references to ``fields`` routed through ``namespace``.

    Parameters
    ----------
    body : str
        Template source of the material.
    fields : Iterable[str]
        Local field names to qualify.
    namespace : str
        Safe id of the material (``forms-toggle`` rather than ``forms.toggle``).

    Returns
    -------
    str
        A new string; ``body`` itself is left unchanged.
    """
    names = frozenset(fields) - RESERVED_NAMES
    if not names:
        return body
    scopes = ScopeStack()

    def _repl(match: re.Match[str]) -> str:
        if match.group("vopen") is not None:
            expression = rewrite_expression(
                match.group("vexpr"), names - scopes.bound(), namespace
            )
            return f"{match.group('vopen')}{expression}{match.group('vclose')}"
        if match.group("bopen") is not None:
            source = match.group("bexpr")
            # The tag itself is evaluated before its own bindings take effect.
            expression = rewrite_expression(
                source, names - scopes.bound(), namespace, block=True
            )
            tokens = tokenize(source)
            scopes.update(_tag_keyword(tokens), tokens)
            return f"{match.group('bopen')}{expression}{match.group('bclose')}"
        return match.group()

    return SEGMENT_PATTERN.sub(_repl, body)


def rewrite_expression(
    expression: str,
    fields: frozenset[str],
    namespace: str,
    *,
    block: bool = False,
) -> str:
    """Qualify field references in the inside of a single tag.

    Parameters
    ----------
    expression : str
        Text between the tag delimiters.
    fields : frozenset[str]
        Field names eligible for rewriting.
    namespace : str
        Safe id used as the namespace key.
    block : bool, optional
        True for ``{% ... %}`` markers, whose first name is the tag keyword.

    Returns
    -------
    str
        The rewritten expression with original spacing preserved.
    """
    tokens = tokenize(expression)
    keyword = _tag_keyword(tokens) if block else None
    if keyword in OPAQUE_TAGS:
        return expression

    # ``for`` targets run until ``in``; ``set`` targets run until ``=``.
    in_target = keyword in {"for", "set"}
    declared = (
        frozenset(_parameter_indices(tokens, leading=True))
        if keyword == "call"
        else frozenset()
    )
    # A loop filter (``for x in xs if x``) already sees the loop targets.
    loop_targets = _declared_names("for", tokens) if keyword == "for" else set()
    eligible = fields
    seen_keyword = keyword is None
    previous: Token | None = None
    before_previous: Token | None = None
    pieces: list[str] = []
    for index, token in enumerate(tokens):
        text = token.text
        if token.kind == "name":
            if not seen_keyword:
                seen_keyword = True
            elif index in declared:
                pass
            elif in_target:
                in_target = not (keyword == "for" and text == "in")
            elif keyword == "for" and text == "if":
                eligible = fields - loop_targets
            elif _is_reference(tokens, index, previous, before_previous, eligible):
                text = f'{FIELD_LOOKUP}("{namespace}")["{text}"]'
        elif in_target and keyword == "set" and text == "=":
            in_target = False
        pieces.append(text)
        if token.kind != "space":
            before_previous, previous = previous, token
    return "".join(pieces)


def _tag_keyword(tokens: cabc.Sequence[Token]) -> str | None:
    for token in tokens:
        if token.kind == "space":
            continue
        return token.text if token.kind == "name" else None
    return None


def _is_reference(
    tokens: cabc.Sequence[Token],
    index: int,
    previous: Token | None,
    before_previous: Token | None,
    fields: frozenset[str],
) -> bool:
    """Return True when the name at ``index`` reads a local field."""
    name = tokens[index].text
    if name not in fields:
        return False
    if previous is not None:
        if previous.kind == "op" and previous.text in {".", "|"}:
            return False
        if previous.text == "is":
            return False
        if previous.text == "not" and before_previous is not None:
            if before_previous.text == "is":
                return False
    return not _is_assignment_target(tokens, index)


def _is_assignment_target(tokens: cabc.Sequence[Token], index: int) -> bool:
    """Return True when ``name =`` (not ``==``) follows, as in keyword arguments."""
    position = index + 1
    while position < len(tokens) and tokens[position].kind == "space":
        position += 1
    if position >= len(tokens) or tokens[position].text != "=":
        return False
    following = tokens[position + 1] if position + 1 < len(tokens) else None
    return following is None or following.text != "="


def _significant(tokens: cabc.Sequence[Token]) -> list[int]:
    return [index for index, token in enumerate(tokens) if token.kind != "space"]


def _parameter_indices(tokens: cabc.Sequence[Token], *, leading: bool) -> list[int]:
    """Return the indices of parameter names in the first parenthesised group.

    With ``leading`` the group must directly follow the tag keyword, as in
    ``{% call(user) render_list() %}``; otherwise it is the first group in the
    tag, as in ``{% macro show(label, size=2) %}``. Default values are not
    parameters.
    """
    significant = _significant(tokens)[1:]
    start = next(
        (pos for pos, index in enumerate(significant) if tokens[index].text == "("),
        None,
    )
    if start is None or (leading and start != 0):
        return []
    indices: list[int] = []
    depth = 0
    previous = ""
    for index in significant[start:]:
        token = tokens[index]
        if token.kind == "op" and token.text in "([{":
            depth += 1
        elif token.kind == "op" and token.text in ")]}":
            depth -= 1
            if depth == 0:
                break
        elif token.kind == "name" and depth == 1 and previous in {"(", ","}:
            indices.append(index)
        previous = token.text
    return indices


def _declared_names(keyword: str, tokens: cabc.Sequence[Token]) -> set[str]:
    """Return the names a scope-opening tag binds for its body."""
    if keyword == "for":
        names: set[str] = set()
        for index in _significant(tokens)[1:]:
            token = tokens[index]
            if token.text == "in":
                break
            if token.kind == "name":
                names.add(token.text)
        return names
    if keyword == "with":
        return {
            tokens[index].text
            for index in _significant(tokens)[1:]
            if tokens[index].kind == "name" and _is_assignment_target(tokens, index)
        }
    if keyword in {"macro", "call"}:
        indices = _parameter_indices(tokens, leading=keyword == "call")
        return {tokens[index].text for index in indices}
    return set()


def _set_targets(tokens: cabc.Sequence[Token]) -> set[str]:
    """Return the names assigned by a ``set`` tag; ``ns.attr`` targets bind nothing."""
    significant = _significant(tokens)[1:]
    names: set[str] = set()
    previous = ""
    for position, index in enumerate(significant):
        token = tokens[index]
        if token.text == "=":
            break
        following = (
            tokens[significant[position + 1]].text
            if position + 1 < len(significant)
            else ""
        )
        if token.kind == "name" and "." not in {previous, following}:
            names.add(token.text)
        previous = token.text
    return names


def _imported_names(tokens: cabc.Sequence[Token]) -> set[str]:
    """Return the names bound by ``import ... as x`` or ``from ... import a as b``."""
    words = [token.text for token in tokens if token.kind == "name"]
    if words[0] == "from":
        if "import" not in words[1:]:
            return set()
        words = words[words.index("import", 1) + 1 :]
    else:
        words = words[1:]
    names: set[str] = set()
    for position, word in enumerate(words):
        if word in _IMPORT_WORDS:
            continue
        if position + 1 < len(words) and words[position + 1] == "as":
            continue
        names.add(word)
    return names


def register_material(
    record: MaterialRecord,
    registry: TemplateRegistry,
    field_store: cabc.MutableMapping[str, dict[str, typ.Any]],
) -> str:
    """Register a namespaced copy of ``record`` and store its local fields.

    Returns
    -------
    str
        The safe id used as both the partial name and the field-store key.
    """
    key = safe_id(record.qualified_id)
    registry.register(key, namespace_body(record.raw_body, record.local_fields, key))
    field_store[key] = record.local_fields
    return key


__all__ = [
    "OPAQUE_TAGS",
    "RESERVED_NAMES",
    "SCOPE_TAGS",
    "SEGMENT_PATTERN",
    "TOKEN_PATTERN",
    "Scope",
    "ScopeStack",
    "Token",
    "namespace_body",
    "register_material",
    "rewrite_expression",
    "tokenize",
]
