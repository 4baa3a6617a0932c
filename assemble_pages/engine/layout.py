"""Select a page's layout and substitute the page body into it."""

from __future__ import annotations

import logging
import typing as typ

from assemble_pages._constants import BODY_PLACEHOLDER, LAYOUT_KEY
from assemble_pages.errors import MissingLayoutError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .models import LayoutTemplate

logger = logging.getLogger(__name__)


def resolve_layout(
    layouts: cabc.Mapping[str, LayoutTemplate],
    front_matter: cabc.Mapping[str, typ.Any],
    default_id: str,
    *,
    page: Path | str = "<page>",
) -> LayoutTemplate:
    """Return the layout named by the page's ``layout`` field or ``default_id``.

    Raises
    ------
    MissingLayoutError
        If the chosen id was never discovered.
    """
    layout_id = str(front_matter.get(LAYOUT_KEY) or default_id)
    layout = layouts.get(layout_id)
    if layout is None:
        raise MissingLayoutError(layout_id, page)
    return layout


def compose_page(body: str, layout: LayoutTemplate) -> str:
    """Insert ``body`` verbatim at the layout's single ``{% body %}`` placeholder.

    Only the first placeholder is replaced. A layout without one is returned
    unchanged, dropping the body, and a warning is logged.

    >>> from assemble_pages.engine.models import LayoutTemplate
    >>> compose_page("<p>Hi</p>", LayoutTemplate("default", "<main>{%body%}</main>"))
    '<main><p>Hi</p></main>'
    """
    composed, count = BODY_PLACEHOLDER.subn(lambda _match: body, layout.raw_template, 1)
    if not count:
        logger.warning("Layout '%s' has no {%% body %%} placeholder", layout.id)
    return composed


__all__ = ["compose_page", "resolve_layout"]
