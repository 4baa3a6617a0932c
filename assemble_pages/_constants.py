"""Common literal values used across assemble_pages.

These constants keep front-matter keys, template globals, and placeholder
syntax centralized so the engine, adapters, and tests import the same values
without drifting. Intended for internal use within the assemble_pages package.

Examples
--------
>>> from assemble_pages import _constants
>>> _constants.BODY_PLACEHOLDER.search("<main>{% body %}</main>") is not None
True
>>> _constants.FIELD_LOOKUP
'_fields'
"""

import re

BODY_PLACEHOLDER = re.compile(r"\{%\s*body\s*%\}")
LAYOUT_KEY = "layout"
NOTES_KEY = "notes"
FIELD_LOOKUP = "_fields"
MATERIAL_HELPER = "material"
