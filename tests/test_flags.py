"""Tests for flaggroups.flags — Flag descriptors and argparse adapters."""

import argparse

import pytest

from flaggroups.flags import (
    Flag, ListAction, argparse_kwargs, parse_bool, parse_uint,
)
from flaggroups.formatters import ValueKind


class TestFlag:
    """Flag descriptor fields derived at construction."""

    def test_def_value_stringified(self):
        flag = Flag(name="db-port", kind=ValueKind.INT, default=5432, usage="Port")
        assert flag.def_value == "5432"

    def test_value_starts_at_default(self):
        flag = Flag(name="tags", kind=ValueKind.STRING_LIST, default=["a"])
        assert flag.value == ["a"]
        assert flag.value is not flag.default
        assert flag.changed is False

    def test_dest_replaces_dashes(self):
        flag = Flag(name="dry-run", kind=ValueKind.BOOL, default=False)
        assert flag.dest == "dry_run"

    def test_option_strings(self):
        with_short = Flag(name="verbose", kind=ValueKind.BOOL, default=False, shorthand="v")
        without = Flag(name="verbose", kind=ValueKind.BOOL, default=False)
        assert with_short.option_strings == ["-v", "--verbose"]
        assert without.option_strings == ["--verbose"]


class TestConverters:
    """Scalar converters raise ArgumentTypeError on bad input."""

    @pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true_words(self, text):
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false_words(self, text):
        assert parse_bool(text) is False

    def test_bad_bool(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_bool("yes")

    def test_uint(self):
        assert parse_uint("7") == 7
        with pytest.raises(argparse.ArgumentTypeError):
            parse_uint("-1")
        with pytest.raises(argparse.ArgumentTypeError):
            parse_uint("seven")


class TestArgparseKwargs:
    """Each kind maps to the right argparse action."""

    def _parser(self, flag):
        parser = argparse.ArgumentParser(add_help=False)
        parser.add_argument(*flag.option_strings, **argparse_kwargs(flag))
        return parser

    def test_bool_is_a_switch(self):
        parser = self._parser(Flag(name="ssl", kind=ValueKind.BOOL, default=False))
        assert parser.parse_args(["--ssl"]).ssl is True
        assert parser.parse_args([]).ssl is False

    def test_int_converted(self):
        parser = self._parser(Flag(name="port", kind=ValueKind.INT, default=1))
        assert parser.parse_args(["--port", "80"]).port == 80

    def test_list_action_used(self):
        flag = Flag(name="ids", kind=ValueKind.INT_LIST, default=[])
        kwargs = argparse_kwargs(flag)
        assert kwargs["action"] is ListAction
        parser = self._parser(flag)
        assert parser.parse_args(["--ids", "1,2", "--ids", "3"]).ids == [1, 2, 3]

    def test_list_first_use_replaces_default(self):
        parser = self._parser(Flag(name="tags", kind=ValueKind.STRING_LIST, default=["x"]))
        assert parser.parse_args(["--tags", "a"]).tags == ["a"]
        assert parser.parse_args([]).tags == ["x"]

    def test_quoted_list_items(self):
        parser = self._parser(Flag(name="tags", kind=ValueKind.STRING_LIST, default=[]))
        assert parser.parse_args(["--tags", 'a,"b,c"']).tags == ["a", "b,c"]
