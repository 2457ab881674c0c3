"""
Flag descriptors and the argparse adapters behind them.

A Flag is the read-only view the layout engine works from: name,
shorthand, usage, stringified default, value kind and the hidden toggle.
Parsing itself stays with argparse; this module only supplies the
per-kind converters and actions argparse needs.
"""

import argparse
import csv
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from flaggroups.formatters import ITEM_KINDS, ValueKind, format_value


@dataclass
class Flag:
    """
    A single registered flag.

    `value` and `changed` reflect the most recent Program.parse(); before
    any parse, `value` is the default.
    """
    name: str
    kind: ValueKind
    default: Any
    usage: str = ''
    shorthand: str = ''
    hidden: bool = False
    value: Any = None
    changed: bool = False
    def_value: str = field(init=False)

    def __post_init__(self):
        self.def_value = format_value(self.kind, self.default)
        if self.value is None:
            self.value = _copy(self.default)

    @property
    def dest(self) -> str:
        """Attribute name on the parsed namespace."""
        return self.name.replace('-', '_')

    @property
    def option_strings(self) -> List[str]:
        """Option strings handed to argparse, shorthand first."""
        options = []
        if self.shorthand:
            options.append(f"-{self.shorthand}")
        options.append(f"--{self.name}")
        return options


def _copy(value):
    return list(value) if isinstance(value, list) else value


# ---------------------------------------------------------------------------
# Scalar converters
# ---------------------------------------------------------------------------
_TRUE_WORDS = {'1', 't', 'T', 'TRUE', 'true', 'True'}
_FALSE_WORDS = {'0', 'f', 'F', 'FALSE', 'false', 'False'}


def parse_bool(text: str) -> bool:
    """Parse a boolean word (1/0, t/f, true/false in the usual casings)."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def parse_uint(text: str) -> int:
    """Parse a non-negative integer."""
    try:
        number = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer value: {text!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer value: {text!r}")
    return number


def parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: {text!r}") from None


def parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid float value: {text!r}") from None


SCALAR_CONVERTERS: Dict[ValueKind, Callable[[str], Any]] = {
    ValueKind.BOOL: parse_bool,
    ValueKind.STRING: str,
    ValueKind.INT: parse_int,
    ValueKind.UINT: parse_uint,
    ValueKind.FLOAT: parse_float,
}


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------
# Namespace attribute collecting the dests set from the command line
CHANGED_ATTR = '_changed_flags'


def _mark_changed(namespace, dest):
    changed = getattr(namespace, CHANGED_ATTR, None)
    if changed is None:
        changed = set()
        setattr(namespace, CHANGED_ATTR, changed)
    changed.add(dest)


class StoreAction(argparse.Action):
    """Store a single converted value."""

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        _mark_changed(namespace, self.dest)


class SwitchAction(argparse.Action):
    """
    Boolean switch: present means True.

    argparse gives zero-argument options no `--name=word` form, so
    `--name=false` goes through a companion option built by
    bool_value_kwargs() instead.
    """

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, True)
        _mark_changed(namespace, self.dest)


class ListAction(argparse.Action):
    """
    Collect comma-separated values into a list.

    The first occurrence on the command line replaces the default;
    later occurrences append to it.
    """

    def __init__(self, option_strings, dest, item_type=str, **kwargs):
        self.item_type = item_type
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        changed = getattr(namespace, CHANGED_ATTR, None) or set()
        items = list(getattr(namespace, self.dest)) if self.dest in changed else []
        for raw in next(csv.reader([values]), []):
            try:
                items.append(self.item_type(raw))
            except argparse.ArgumentTypeError as e:
                raise argparse.ArgumentError(self, str(e)) from None
        setattr(namespace, self.dest, items)
        _mark_changed(namespace, self.dest)


def argparse_kwargs(flag: Flag) -> Dict[str, Any]:
    """Build the add_argument() keyword arguments for a flag."""
    kwargs: Dict[str, Any] = {
        'dest': flag.dest,
        'default': _copy(flag.default),
        'help': argparse.SUPPRESS if flag.hidden else flag.usage,
    }
    if flag.kind is ValueKind.BOOL:
        kwargs.update(action=SwitchAction)
    elif flag.kind in ITEM_KINDS:
        kwargs.update(action=ListAction,
                      item_type=SCALAR_CONVERTERS[ITEM_KINDS[flag.kind]],
                      metavar=flag.kind.value)
    else:
        kwargs.update(action=StoreAction, type=SCALAR_CONVERTERS[flag.kind],
                      metavar=flag.kind.value)
    return kwargs


def bool_value_option(flag: Flag) -> str:
    """Option string that takes an explicit boolean word (`--name=word`)."""
    return f"--{flag.name}="


def bool_value_kwargs(flag: Flag) -> Dict[str, Any]:
    """add_argument() keyword arguments for a boolean flag's `--name=word` form."""
    return {
        'dest': flag.dest,
        'default': argparse.SUPPRESS,
        'help': argparse.SUPPRESS,
        'action': StoreAction,
        'type': parse_bool,
        'metavar': flag.kind.value,
    }
