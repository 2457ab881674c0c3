"""
Core help system components.

A Program owns an ordered list of Sections. Each Section groups related
flags under a title and renders them with their usage text aligned to a
shared column. The Program decides that column (across the whole help
document or per Section), assembles the help text, and runs a single
argparse pass over the flags of every Section.
"""

import argparse
import sys
from enum import Enum
from typing import Iterator, List, Optional, TextIO

from flaggroups.flags import (
    CHANGED_ATTR, Flag, argparse_kwargs, bool_value_kwargs, bool_value_option,
)
from flaggroups.formatters import (
    ValueKind, format_default, prefix_lines, should_print_default,
)
from flaggroups.lib.log_lib import get_output, trace
from flaggroups.lib.log_lib.levels import DEBUG, LAYOUT, SUMMARY


# Width of the "-x, " shorthand slot, reserved even when a flag has none
SHORTHAND_WIDTH = 4
# Width of the "--" long-flag prefix
LONG_PREFIX_WIDTH = 2


class AlignmentScope(Enum):
    """Where the usage column is computed."""

    GLOBAL = 'global'
    PER_SECTION = 'per-section'


DEFAULT_INDENTATION = 2
DEFAULT_PADDING = 4
DEFAULT_SORT_FLAGS = False
DEFAULT_ALIGNMENT = AlignmentScope.GLOBAL


class ParseError(Exception):
    """Command-line arguments could not be parsed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class HelpRequested(Exception):
    """Raised by the built-in help flag."""


def _dest_clash(first: Flag, second: Flag) -> argparse.ArgumentError:
    return argparse.ArgumentError(
        None, f"--{second.name} and --{first.name} both parse into {first.dest!r}")


class Section:
    """
    A named group of flags rendered as one help block.

    Flags are registered through the add_* methods. Each registration is
    mirrored onto the Section's own argparse parser, so argparse enforces
    its usual rules (for example, duplicate option strings raise
    argparse.ArgumentError).
    """

    def __init__(self, name: str = '',
                 indentation: int = DEFAULT_INDENTATION,
                 padding: int = DEFAULT_PADDING,
                 sort_flags: bool = DEFAULT_SORT_FLAGS):
        """
        Initialize a section.

        Args:
            name: Title line; empty omits the title
            indentation: Spaces in front of every flag, description and footer line
            padding: Minimum spaces between the longest flag name and its usage
            sort_flags: Render flags in name order instead of insertion order
        """
        self.name = name
        self.description = ''
        self.footer = ''
        self.indentation = indentation
        self.padding = padding
        self.sort_flags = sort_flags
        self.column_width: Optional[int] = None
        self.parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
        self._flags: List[Flag] = []

    def __repr__(self):
        return f"Section({self.name!r}, flags={len(self._flags)})"

    def __len__(self):
        return len(self._flags)

    # -- registration -------------------------------------------------------

    def add_flag(self, flag: Flag) -> Flag:
        """
        Register a flag descriptor and its argparse argument.

        Raises:
            argparse.ArgumentError: The name is taken, or another flag
                already maps to the same namespace attribute
        """
        for other in self._flags:
            if other.dest == flag.dest and other.name != flag.name:
                raise _dest_clash(other, flag)
        self.parser.add_argument(*flag.option_strings, **argparse_kwargs(flag))
        if flag.kind is ValueKind.BOOL:
            self.parser.add_argument(bool_value_option(flag), **bool_value_kwargs(flag))
        self._flags.append(flag)
        return flag

    def _add(self, kind, name, default, usage, shorthand):
        return self.add_flag(Flag(name=name, kind=kind, default=default,
                                  usage=usage, shorthand=shorthand))

    def add_bool(self, name: str, default: bool = False, usage: str = '',
                 shorthand: str = '') -> Flag:
        return self._add(ValueKind.BOOL, name, default, usage, shorthand)

    def add_string(self, name: str, default: str = '', usage: str = '',
                   shorthand: str = '') -> Flag:
        return self._add(ValueKind.STRING, name, default, usage, shorthand)

    def add_int(self, name: str, default: int = 0, usage: str = '',
                shorthand: str = '') -> Flag:
        return self._add(ValueKind.INT, name, default, usage, shorthand)

    def add_uint(self, name: str, default: int = 0, usage: str = '',
                 shorthand: str = '') -> Flag:
        return self._add(ValueKind.UINT, name, default, usage, shorthand)

    def add_float(self, name: str, default: float = 0.0, usage: str = '',
                  shorthand: str = '') -> Flag:
        return self._add(ValueKind.FLOAT, name, default, usage, shorthand)

    def add_string_list(self, name: str, default=None, usage: str = '',
                        shorthand: str = '') -> Flag:
        return self._add(ValueKind.STRING_LIST, name, list(default or []), usage, shorthand)

    def add_int_list(self, name: str, default=None, usage: str = '',
                     shorthand: str = '') -> Flag:
        return self._add(ValueKind.INT_LIST, name, list(default or []), usage, shorthand)

    def add_uint_list(self, name: str, default=None, usage: str = '',
                      shorthand: str = '') -> Flag:
        return self._add(ValueKind.UINT_LIST, name, list(default or []), usage, shorthand)

    def add_bool_list(self, name: str, default=None, usage: str = '',
                      shorthand: str = '') -> Flag:
        return self._add(ValueKind.BOOL_LIST, name, list(default or []), usage, shorthand)

    # -- lookup -------------------------------------------------------------

    def lookup(self, name: str) -> Optional[Flag]:
        """Return the flag with this name, or None."""
        for flag in self._flags:
            if flag.name == name:
                return flag
        return None

    def mark_hidden(self, name: str):
        """Hide a flag from help output. It still parses."""
        flag = self.lookup(name)
        if flag is None:
            raise KeyError(f"no such flag: {name!r}")
        flag.hidden = True

    def flags(self, visible_only: bool = True) -> Iterator[Flag]:
        """Iterate over flags in render order."""
        flags = self._flags
        if self.sort_flags:
            flags = sorted(flags, key=lambda f: f.name)
        for flag in flags:
            if visible_only and flag.hidden:
                continue
            yield flag

    # -- layout -------------------------------------------------------------

    def max_name_length(self) -> int:
        """Length of the longest visible flag name, 0 if there is none."""
        return max((len(f.name) for f in self.flags()), default=0)

    def has_content(self) -> bool:
        """True when the Section has visible flags, a description or a footer."""
        return bool(self.max_name_length() or self.description or self.footer)

    def compute_column_width(self, max_name_length: int) -> int:
        """
        Set the column where usage text starts.

        The shorthand slot is always reserved so that flags with and without
        a shorthand line up.
        """
        self.column_width = (self.indentation + SHORTHAND_WIDTH + LONG_PREFIX_WIDTH
                             + max_name_length + self.padding)
        return self.column_width

    def format_flag(self, flag: Flag) -> str:
        """Render a single flag line (no trailing newline)."""
        if self.column_width is None:
            self.compute_column_width(self.max_name_length())
        width = self.column_width
        parts = [' ' * self.indentation]
        if flag.shorthand:
            parts.append(f"-{flag.shorthand}, ")
        else:
            parts.append(' ' * SHORTHAND_WIDTH)
        parts.append(f"--{flag.name}")

        # Names longer than the column are not re-aligned
        used = sum(len(p) for p in parts)
        parts.append(' ' * max(width - used, 0))

        if flag.usage:
            parts.append(flag.usage.replace('\n', '\n' + ' ' * width))
            if should_print_default(flag.kind, flag.usage, flag.def_value):
                parts.append(format_default(flag.kind, flag.def_value))

        return ''.join(parts)

    def render(self) -> str:
        """
        Render the Section as text.

        Returns:
            The title, description, flag lines and footer, every line
            terminated by a newline; empty when the Section has no visible
            flags, no description and no footer
        """
        if not self.has_content():
            return ''
        if self.column_width is None:
            self.compute_column_width(self.max_name_length())

        indent = ' ' * self.indentation
        out = []

        if self.name:
            out.append(f"{self.name}:\n")

        if self.description:
            out.extend(prefix_lines(self.description, indent))

        for flag in self.flags():
            out.append(self.format_flag(flag))
            out.append('\n')

        if self.footer:
            out.extend(prefix_lines(self.footer, indent))

        return ''.join(out)


class _HelpAction(argparse.Action):
    def __init__(self, option_strings, dest=argparse.SUPPRESS,
                 default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest,
                         default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        raise HelpRequested()


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises ParseError instead of exiting."""

    def error(self, message):
        raise ParseError(message)


class Program:
    """
    Builds complete help output from Sections and parses arguments.

    Layout defaults set on the Program are copied into each Section when
    it is created; changing them later does not touch existing Sections.
    """

    def __init__(self, name: str = '', version: str = '', description: str = '',
                 output: TextIO = None):
        """
        Initialize the program.

        Args:
            name: Program name shown on the first help line
            version: Version shown after the name
            description: Free-form text shown under the first line
            output: Where help is written (default: stderr)
        """
        self.name = name
        self.version = version
        self.description = description
        self.alignment = DEFAULT_ALIGNMENT
        self.indentation = DEFAULT_INDENTATION
        self.padding = DEFAULT_PADDING
        self.sort_flags = DEFAULT_SORT_FLAGS
        self._output = output
        self.sections: List[Section] = []
        self._args: List[str] = []

    @property
    def output(self) -> TextIO:
        # None means sys.stderr as it is at write time
        return self._output if self._output is not None else sys.stderr

    @output.setter
    def output(self, stream: TextIO):
        self._output = stream

    @property
    def align_per_section(self) -> bool:
        return self.alignment is AlignmentScope.PER_SECTION

    @align_per_section.setter
    def align_per_section(self, value: bool):
        self.alignment = AlignmentScope.PER_SECTION if value else AlignmentScope.GLOBAL

    def new_section(self, name: str) -> Section:
        """Create a Section with the current defaults and append it."""
        section = Section(name,
                          indentation=self.indentation,
                          padding=self.padding,
                          sort_flags=self.sort_flags)
        self.sections.append(section)
        return section

    def lookup(self, name: str) -> Optional[Flag]:
        """Find a flag by name in any Section."""
        for section in self.sections:
            flag = section.lookup(name)
            if flag is not None:
                return flag
        return None

    # -- help ---------------------------------------------------------------

    def _header(self) -> str:
        text = self.name
        if self.version:
            text = f"{text} {self.version}" if text else self.version
        if self.description:
            if text:
                text += '\n'
            text += self.description + '\n'
        return text

    def render_help(self) -> str:
        """
        Build the full help document.

        Returns:
            Header, description and every non-empty Section, with one
            newline between blocks
        """
        out = get_output()
        text = self._header()

        global_max = max((s.max_name_length() for s in self.sections), default=0)

        for section in self.sections:
            section_max = section.max_name_length()
            if not section.has_content():
                out.emit(DEBUG, "skipping empty section {name!r}",
                         channel='layout', name=section.name)
                continue

            scope_max = section_max if self.align_per_section else global_max
            width = section.compute_column_width(scope_max)
            out.emit(LAYOUT, "section {name!r}: column width {width}",
                     channel='layout', name=section.name, width=width)

            if text:
                text += '\n'
            text += section.render()

        return text

    def print_help(self, file: TextIO = None):
        """Write the help document to `file` (default: the Program output)."""
        stream = file if file is not None else self.output
        stream.write(self.render_help())
        stream.flush()

    # -- parsing ------------------------------------------------------------

    def _build_parser(self) -> argparse.ArgumentParser:
        # Option strings differ, so argparse would let these share a dest
        seen = {}
        for section in self.sections:
            for flag in section.flags(visible_only=False):
                other = seen.setdefault(flag.dest, flag)
                if other.name != flag.name:
                    raise _dest_clash(other, flag)

        parents = [section.parser for section in self.sections]
        parser = _FlagParser(prog=self.name or None, add_help=False,
                             allow_abbrev=False, parents=parents)

        if self.lookup('help') is None:
            shorthands = {f.shorthand for s in self.sections for f in s.flags(visible_only=False)}
            help_options = ['--help'] if 'h' in shorthands else ['-h', '--help']
            parser.add_argument(*help_options, action=_HelpAction)

        parser.add_argument('_args', nargs='*', metavar='ARGS')
        return parser

    def _split_bool_values(self, argv: List[str]) -> List[str]:
        """Turn `--name=word` for boolean flags into the companion option and its word."""
        result = []
        for i, token in enumerate(argv):
            if token == '--':
                result.extend(argv[i:])
                break
            name, sep, word = token[2:].partition('=')
            flag = self.lookup(name) if token.startswith('--') and sep else None
            if flag is not None and flag.kind is ValueKind.BOOL:
                result.extend([bool_value_option(flag), word])
            else:
                result.append(token)
        return result

    @trace
    def parse(self, argv: List[str] = None) -> argparse.Namespace:
        """
        Parse arguments against the flags of every Section.

        A help request prints the help and exits with status 0.

        Args:
            argv: Arguments to parse (default: sys.argv[1:])

        Returns:
            The parsed namespace; positional arguments are in `args`

        Raises:
            ParseError: Unknown flag, bad value or missing value
        """
        out = get_output()
        if argv is None:
            argv = sys.argv[1:]

        parser = self._build_parser()
        out.emit(LAYOUT, "parser assembled from {count} section(s)",
                 channel='parse', count=len(self.sections))

        try:
            namespace = parser.parse_intermixed_args(self._split_bool_values(argv))
        except HelpRequested:
            self.print_help()
            sys.exit(0)

        self._args = list(namespace._args)
        del namespace._args
        changed = vars(namespace).pop(CHANGED_ATTR, set())

        for section in self.sections:
            for flag in section.flags(visible_only=False):
                value = getattr(namespace, flag.dest)
                flag.value = list(value) if isinstance(value, list) else value
                flag.changed = flag.dest in changed
                if flag.changed:
                    out.emit(DEBUG, "--{name} = {value!r}", channel='parse',
                             name=flag.name, value=flag.value)

        out.emit(SUMMARY, "parsed {count} argument(s), {npos} positional",
                 channel='parse', count=len(argv), npos=len(self._args))
        return namespace

    @property
    def args(self) -> List[str]:
        """Positional arguments left over from the last parse."""
        return list(self._args)

    def narg(self) -> int:
        return len(self._args)

    def arg(self, n: int) -> str:
        """The nth positional argument, or an empty string if out of range."""
        if 0 <= n < len(self._args):
            return self._args[n]
        return ''
