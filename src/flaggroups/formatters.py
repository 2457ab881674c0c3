"""
Value-kind policy and text helpers for help output.

Every flag carries a ValueKind tag. The tag decides two things when the
help text is rendered: whether the default value is worth printing, and
whether it is shown in double quotes. Both rules live in lookup tables
below so the policy can be tested and extended in one place.
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List


class ValueKind(str, Enum):
    """Closed set of flag value types."""

    BOOL = 'bool'
    STRING = 'string'
    INT = 'int'
    UINT = 'uint'
    FLOAT = 'float'
    STRING_LIST = 'string_list'
    INT_LIST = 'int_list'
    UINT_LIST = 'uint_list'
    BOOL_LIST = 'bool_list'

    @property
    def is_list(self) -> bool:
        return self in LIST_KINDS


LIST_KINDS = frozenset({
    ValueKind.STRING_LIST,
    ValueKind.INT_LIST,
    ValueKind.UINT_LIST,
    ValueKind.BOOL_LIST,
})

# Item kind for each list kind, used to stringify list defaults
ITEM_KINDS: Dict[ValueKind, ValueKind] = {
    ValueKind.STRING_LIST: ValueKind.STRING,
    ValueKind.INT_LIST: ValueKind.INT,
    ValueKind.UINT_LIST: ValueKind.UINT,
    ValueKind.BOOL_LIST: ValueKind.BOOL,
}

EMPTY_LIST_TEXT = '[]'


def _non_empty(text: str) -> bool:
    return text != ''


def _is_true(text: str) -> bool:
    return text == 'true'


def _non_empty_list(text: str) -> bool:
    return text != EMPTY_LIST_TEXT


# kind -> predicate over the default text; kinds not listed use _non_empty
DEFAULT_VISIBLE: Dict[ValueKind, Callable[[str], bool]] = {
    ValueKind.BOOL: _is_true,
    ValueKind.STRING_LIST: _non_empty_list,
    ValueKind.INT_LIST: _non_empty_list,
    ValueKind.UINT_LIST: _non_empty_list,
    ValueKind.BOOL_LIST: _non_empty_list,
}

# Kinds whose default is wrapped in double quotes
QUOTED_KINDS = frozenset({ValueKind.STRING})


def format_value(kind: ValueKind, value) -> str:
    """
    Stringify a flag value the way it appears in help output.

    Args:
        kind: The flag's value kind
        value: A Python value of that kind

    Returns:
        Text like "true", "5432", "1.5" or "[a,b]"
    """
    if kind in ITEM_KINDS:
        item_kind = ITEM_KINDS[kind]
        items = value or []
        return '[' + ','.join(format_value(item_kind, item) for item in items) + ']'
    if kind is ValueKind.BOOL:
        return 'true' if value else 'false'
    if kind is ValueKind.FLOAT:
        return format_float(value)
    if value is None:
        return ''
    return str(value)


def format_float(value) -> str:
    """
    Format a float with the fewest digits that read back exactly.

    Exponents below -4 or of 6 and above switch to exponent notation with
    at least two exponent digits, so 1000000.0 is "1e+06" and 2.0 is "2".
    """
    value = float(value)
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '+Inf' if value > 0 else '-Inf'

    digits = Decimal(repr(value)).normalize().as_tuple()
    ndigits = len(digits.digits)
    exponent = digits.exponent + ndigits - 1
    if exponent < -4 or exponent >= 6:
        return f"{value:.{ndigits - 1}e}"
    return f"{value:.{max(ndigits - 1 - exponent, 0)}f}"


def should_print_default(kind: ValueKind, usage: str, def_value: str) -> bool:
    """
    Decide whether a flag's default belongs in its help line.

    Args:
        kind: The flag's value kind
        usage: The flag's usage text; an empty usage never shows a default
        def_value: The stringified default

    Returns:
        True if " (default: ...)" should be appended
    """
    if not usage:
        return False
    visible = DEFAULT_VISIBLE.get(kind, _non_empty)
    return visible(def_value)


def format_default(kind: ValueKind, def_value: str) -> str:
    """Format the default annotation, quoting only the quoted kinds."""
    if kind in QUOTED_KINDS:
        return f' (default: "{def_value}")'
    return f' (default: {def_value})'


def prefix_lines(text: str, prefix: str) -> List[str]:
    """
    Prefix every line of a text block.

    Each returned line ends with a newline, including the last one.
    """
    return [f"{prefix}{line}\n" for line in text.split('\n')]
