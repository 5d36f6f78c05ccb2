"""Tests for the S-expression reader and writer."""

from __future__ import annotations

import math

import pytest

from kicad_e2k.sexp import atom, format_number, node, parse, parse_all, string


class TestParseAtoms:
    def test_unquoted_atom(self) -> None:
        n = parse("hello")
        assert n.is_atom
        assert n.value == "hello"

    def test_quoted_string(self) -> None:
        n = parse('"hello world"')
        assert n.is_atom
        assert n.value == "hello world"

    def test_quoted_with_escapes(self) -> None:
        n = parse(r'"say \"hi\""')
        assert n.value == 'say "hi"'

    def test_newline_escape(self) -> None:
        assert parse(r'"a\nb"').value == "a\nb"

    def test_number_atom(self) -> None:
        n = parse("42")
        assert n.is_atom
        assert n.value == "42"


class TestParseExpressions:
    def test_simple_pair(self) -> None:
        n = parse("(version 20211014)")
        assert n.is_list
        assert n.name == "version"
        assert n.first_value == "20211014"

    def test_nested_expression(self) -> None:
        n = parse("(a (b c) (d e))")
        assert n.name == "a"
        assert [c.name for c in n.children] == ["b", "d"]
        assert n.children[1].first_value == "e"

    def test_atom_values(self) -> None:
        n = parse('(pad "1" smd rect (at 0 0))')
        assert n.atom_values == ["1", "smd", "rect"]

    def test_unclosed_list_raises(self) -> None:
        with pytest.raises(ValueError, match="unclosed"):
            parse("(a (b c)")

    def test_stray_close_raises(self) -> None:
        with pytest.raises(ValueError, match="Unexpected"):
            parse(")")

    def test_unterminated_string_raises(self) -> None:
        with pytest.raises(ValueError, match="Unterminated"):
            parse('(a "b)')

    def test_list_must_start_with_atom(self) -> None:
        with pytest.raises(ValueError, match="name atom"):
            parse("((a) b)")


class TestQueryAPI:
    def test_getitem_found(self) -> None:
        n = parse("(symbol (in_bom yes) (on_board no))")
        assert n["on_board"].first_value == "no"

    def test_getitem_not_found(self) -> None:
        with pytest.raises(KeyError):
            _ = parse("(a (b c))")["z"]

    def test_get_default(self) -> None:
        assert parse("(a (b c))").get("z") is None

    def test_find_all(self) -> None:
        n = parse("(lib (symbol x) (symbol y) (version 1))")
        assert [c.first_value for c in n.find_all("symbol")] == ["x", "y"]


class TestFormatNumber:
    def test_integer(self) -> None:
        assert format_number(100) == "100"

    def test_trailing_zeros_stripped(self) -> None:
        assert format_number(12.5) == "12.5"

    def test_rounded_to_precision(self) -> None:
        assert format_number(1.23456789) == "1.2346"

    def test_negative_zero(self) -> None:
        assert format_number(-0.00001) == "0"

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(ValueError):
            format_number(math.nan)


class TestWriter:
    def test_flat_stays_single_line(self) -> None:
        assert node("at", 1.5, -2, 90).to_string() == "(at 1.5 -2 90)"

    def test_string_quoted_and_escaped(self) -> None:
        assert node("name", string('say "hi"')).to_string() == r'(name "say \"hi\"")'

    def test_block_nodes_always_indented(self) -> None:
        tree = node("symbol", string("R"), node("in_bom", "yes"))
        assert tree.to_string() == '(symbol "R"\n  (in_bom yes)\n)'

    def test_long_list_breaks(self) -> None:
        tree = node("property", string("Datasheet"), string("x" * 80), node("id", 3))
        text = tree.to_string()
        assert text.splitlines()[0] == f'(property "Datasheet" "{"x" * 80}"'
        assert "  (id 3)" in text

    def test_atom_helper_unquoted(self) -> None:
        assert node("layer", atom("F.Cu")).to_string() == "(layer F.Cu)"


class TestRoundTrip:
    def test_render_parse_render_is_stable(self) -> None:
        tree = node(
            "kicad_symbol_lib",
            node("version", "20211014"),
            node("symbol", string("A B"), node("property", string("Value"), string("x\\y"))),
        )
        text = tree.to_string()
        assert parse(text).to_string() == text

    def test_parse_all(self) -> None:
        results = parse_all("(a 1) (b 2)\n(c 3)")
        assert [r.name for r in results] == ["a", "b", "c"]
