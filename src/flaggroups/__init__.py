"""flaggroups — grouped, column-aligned help text for command-line flags.

Flags are organized into named sections; a Program lays the sections out
with their usage text aligned and parses all of them in one pass.
"""

from flaggroups._version import __version__, __app_name__
from flaggroups.core import (
    AlignmentScope,
    DEFAULT_ALIGNMENT,
    DEFAULT_INDENTATION,
    DEFAULT_PADDING,
    DEFAULT_SORT_FLAGS,
    ParseError,
    Program,
    Section,
)
from flaggroups.flags import Flag
from flaggroups.formatters import ValueKind

__all__ = [
    "__version__", "__app_name__",
    "AlignmentScope", "DEFAULT_ALIGNMENT", "DEFAULT_INDENTATION",
    "DEFAULT_PADDING", "DEFAULT_SORT_FLAGS",
    "Flag", "ParseError", "Program", "Section", "ValueKind",
]
