"""High-level orchestration for assembling pages.

Assembly runs in two phases that never overlap. :meth:`Assembler.setup` loads
layouts, layout includes, data, materials, views, and docs, registers every
partial, then seals the registry. :meth:`Assembler.assemble` renders each view
inside its layout and writes it beneath ``dest``, mirroring the view's
collection directory. A fresh registry is built on every setup, so nothing
leaks between runs.

Example
-------
>>> from assemble_pages.config import build_options
>>> from assemble_pages.engine import Assembler
>>> options = build_options({"dest": "dist"})
>>> Assembler(options).run()  # doctest: +SKIP
[PosixPath('dist/index.html'), PosixPath('dist/pages/home.html')]
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from jinja2 import Environment, TemplateSyntaxError, pass_context
from jinja2.utils import missing
from markupsafe import Markup

from assemble_pages._constants import FIELD_LOOKUP, MATERIAL_HELPER, NOTES_KEY
from assemble_pages.config import AssemblyOptions, build_options
from assemble_pages.discovery import discover, pattern_bases
from assemble_pages.errors import ParseError, RegistryError, WriteError
from assemble_pages.frontmatter import load_data_file, read_front_matter
from assemble_pages.identifiers import file_id, qualify, safe_id, title_case

from .catalog import (
    Catalog,
    Placement,
    add_material,
    ensure_collection,
    place_materials,
    sort_catalog,
    view_collection,
)
from .context import ContextBuilder
from .layout import compose_page, resolve_layout
from .models import (
    DataRecord,
    DocEntry,
    LayoutTemplate,
    MaterialRecord,
    PageDocument,
    ViewEntry,
)
from .namespacer import register_material
from .registry import RegistryLoader, TemplateRegistry
from .renderer import HtmlBeautifier, MarkdownRenderer

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Template
    from jinja2.runtime import Context

logger = logging.getLogger(__name__)


@pass_context
def _lookup_fields(context: Context, key: str) -> typ.Any:  # noqa: ANN401
    """Resolve a namespaced field store whose key is not a valid identifier."""
    value = context.resolve_or_missing(key)
    if value is missing:
        return context.environment.undefined(name=key)
    return value


class Assembler:
    """Assemble layouts, materials, and views into static HTML pages."""

    def __init__(self, options: AssemblyOptions | None = None) -> None:
        """Initialize the assembler with options and shared renderers.

        Parameters
        ----------
        options : AssemblyOptions, optional
            Source patterns, destination, and helper settings; defaults mirror
            the conventional ``src/`` layout.
        """
        self.options = options or AssemblyOptions()
        self.markdown = MarkdownRenderer()
        self.beautifier = HtmlBeautifier(self.options.beautifier)
        self._reset()

    def run(self) -> list[Path]:
        """Run setup then assembly, returning the written paths in view order."""
        self.setup()
        return self.assemble()

    def setup(self) -> None:
        """Load every source category and seal the partial registry.

        Raises
        ------
        ParseError
            If any front matter, data file, or Markdown document is malformed.
        """
        self._reset()
        self._load_layouts()
        self._register_layout_includes()
        self._load_data()
        self._load_materials()
        self._load_views()
        self._load_docs()
        self.registry.seal()
        self.context_builder = ContextBuilder(
            data=self.data,
            material_fields=self.material_fields,
            materials=self.materials,
            views=self.views,
            docs=self.docs,
            keys=self.options.keys,
        )
        logger.debug(
            "Setup complete: %d layouts, %d partials, %d data records, %d docs",
            len(self.layouts),
            len(self.registry),
            len(self.data),
            len(self.docs),
        )

    def assemble(self) -> list[Path]:
        """Render and write every view discovered during setup.

        Returns
        -------
        list[Path]
            Output paths in view discovery order.

        Raises
        ------
        RegistryError
            If :meth:`setup` has not run.
        MissingLayoutError
            If a page asks for a layout id that was never discovered.
        WriteError
            If the destination cannot be written.
        """
        if not self.registry.sealed:
            msg = "setup() must complete before pages are assembled."
            raise RegistryError(msg)
        _make_dirs(self.options.dest)
        written: list[Path] = []
        for path in self._view_files:
            page = self._read_page(path)
            output_path = self._output_path(path)
            html = self.render_page(page)
            if not html.endswith("\n"):
                html += "\n"
            _make_dirs(output_path.parent)
            try:
                output_path.write_text(html, encoding="utf-8")
            except OSError as exc:
                raise WriteError(output_path, str(exc)) from exc
            written.append(output_path)
        return written

    def render_page(self, page: PageDocument) -> str:
        """Compose ``page`` with its layout and render it against its context."""
        layout = resolve_layout(
            self.layouts, page.front_matter, self.options.layout, page=page.source_path
        )
        source = compose_page(page.body_template, layout)
        context = self._builder().build(page.front_matter)
        try:
            return self._compile(source).render(context)
        except TemplateSyntaxError as exc:
            raise ParseError(page.source_path, str(exc)) from exc

    def render_material(
        self,
        name: str,
        context: cabc.Mapping[str, typ.Any] | None = None,
        **kwargs: typ.Any,
    ) -> Markup:
        """Render the partial ``name`` with fresh arguments and pretty-print it.

        ``name`` may be a qualified id (``forms.toggle``) or its safe form
        (``forms-toggle``). The arguments are merged through the context
        builder, so they take precedence over global data.

        Raises
        ------
        ParseError
            If ``context`` is given but is not a mapping.
        """
        if context is not None and not isinstance(context, cabc.Mapping):
            reason = f"context must be a mapping, not {type(context).__name__}"
            raise ParseError(f"material({name!r})", reason)
        template = self.registry.lookup(safe_id(name))
        output = template.render(self._builder().build(context, **kwargs)).lstrip()
        return Markup(self.beautifier.prettify(output))

    def _reset(self) -> None:
        self.registry = TemplateRegistry()
        self.env = self._build_environment(self.registry)
        self.layouts: dict[str, LayoutTemplate] = {}
        self.data: dict[str, DataRecord] = {}
        self.material_fields: dict[str, dict[str, typ.Any]] = {}
        self.materials: Catalog = {}
        self.views: Catalog = {}
        self.docs: dict[str, DocEntry] = {}
        self.context_builder: ContextBuilder | None = None
        self._view_files: list[Path] = []
        self._view_roots: list[Path] = []

    def _build_environment(self, registry: TemplateRegistry) -> Environment:
        env = Environment(
            loader=RegistryLoader(registry),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.globals.update(self.options.helpers)
        env.globals[FIELD_LOOKUP] = _lookup_fields
        env.globals[MATERIAL_HELPER] = self.render_material
        registry.bind(env)
        return env

    def _builder(self) -> ContextBuilder:
        if self.context_builder is None:
            msg = "setup() must complete before templates are rendered."
            raise RegistryError(msg)
        return self.context_builder

    def _compile(self, source: str) -> Template:
        return self.env.from_string(source)

    def _load_layouts(self) -> None:
        for path in discover(self.options.layouts):
            layout_id = file_id(path)
            self.layouts[layout_id] = LayoutTemplate(
                layout_id, path.read_text(encoding="utf-8")
            )

    def _register_layout_includes(self) -> None:
        for path in discover(self.options.layout_includes):
            self.registry.register(file_id(path), path.read_text(encoding="utf-8"))

    def _load_data(self) -> None:
        for path in discover(self.options.data):
            record_id = file_id(path)
            self.data[record_id] = DataRecord(record_id, load_data_file(path))

    def _load_materials(self) -> None:
        files = discover(self.options.materials)
        roots = pattern_bases(self.options.materials)
        for path, placement in place_materials(files, roots):
            metadata, body = read_front_matter(path)
            record = self._build_material(path, placement, metadata, body)
            register_material(record, self.registry, self.material_fields)
            add_material(self.materials, placement, record.id, record)
        self.materials = sort_catalog(self.materials)
        logger.debug(
            "Registered %d materials from %d files", len(self.material_fields), len(files)
        )

    def _build_material(
        self,
        path: Path,
        placement: Placement,
        metadata: dict[str, typ.Any],
        body: str,
    ) -> MaterialRecord:
        material_id = file_id(path)
        notes = metadata.get(NOTES_KEY)
        return MaterialRecord(
            id=material_id,
            qualified_id=qualify(material_id, placement.sub_collection),
            name=title_case(material_id),
            raw_body=body,
            local_fields={k: v for k, v in metadata.items() if k != NOTES_KEY},
            notes=Markup(self.markdown.render(str(notes))) if notes else Markup(""),
        )

    def _load_views(self) -> None:
        self._view_files = discover(self.options.views)
        self._view_roots = pattern_bases(self.options.views)
        for path in self._view_files:
            collection_id = view_collection(path, self._view_roots)
            if collection_id is None:
                continue
            metadata, _body = read_front_matter(path)
            view_id = file_id(path)
            ensure_collection(self.views, collection_id).items[view_id] = ViewEntry(
                id=view_id,
                name=title_case(view_id),
                front_matter={k: v for k, v in metadata.items() if k != NOTES_KEY},
            )
        self.views = sort_catalog(self.views)

    def _load_docs(self) -> None:
        for path in discover(self.options.docs):
            doc_id = file_id(path)
            html = self.markdown.render(path.read_text(encoding="utf-8"))
            self.docs[doc_id] = DocEntry(doc_id, title_case(doc_id), Markup(html))

    def _read_page(self, path: Path) -> PageDocument:
        front_matter, body = read_front_matter(path)
        return PageDocument(file_id(path), path, front_matter, body)

    def _output_path(self, path: Path) -> Path:
        collection_id = view_collection(path, self._view_roots)
        if collection_id is None:
            return self.options.dest / path.name
        return self.options.dest / collection_id / path.name


def assemble(
    options: AssemblyOptions | cabc.Mapping[str, typ.Any] | None = None,
) -> list[Path]:
    """Assemble a site in one call, accepting options or a plain mapping.

    >>> from assemble_pages import assemble
    >>> assemble({"dest": "public"})  # doctest: +SKIP
    [PosixPath('public/index.html')]
    """
    if options is None or isinstance(options, AssemblyOptions):
        resolved = options
    else:
        resolved = build_options(options)
    return Assembler(resolved).run()


def _make_dirs(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc


__all__ = ["Assembler", "assemble"]
