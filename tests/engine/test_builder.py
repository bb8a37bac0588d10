"""Unit tests for engine.builder: build_query, skip and conditional blocks."""

import pytest

from markersql import (
    ArgumentsExhaustedError,
    InvalidArgumentTypeError,
    QueryBuilder,
    UnexpectedSkipError,
    UnknownMarkerError,
    build_query,
    skip,
)
from markersql.core.escape import escape_mysql, escape_standard


def _unescape_standard(s: str) -> str:
    return s.replace("''", "'")


class TestBuildQueryPlain:
    def test_no_markers_returned_unchanged(self):
        sql = "SELECT name FROM users WHERE user_id = 1"
        assert build_query(sql) == sql
        assert build_query(sql, [1, "x", None]) == sql

    def test_empty_template(self):
        assert build_query("") == ""

    def test_question_mark_not_after_separator_is_literal(self):
        assert build_query("SELECT 'why?' AS q") == "SELECT 'why?' AS q"
        assert build_query("SELECT a,?d FROM t", [1]) == "SELECT a,?d FROM t"

    def test_empty_braces_are_literal(self):
        assert build_query("SELECT '{}'") == "SELECT '{}'"


class TestBuildQueryMarkers:
    def test_generic_string_quoted_and_escaped(self):
        assert (
            build_query("SELECT * FROM users WHERE name = ? AND block = 0", ["Jack"])
            == "SELECT * FROM users WHERE name = 'Jack' AND block = 0"
        )

    def test_identifier_list_and_generic_values(self):
        sql = build_query(
            "SELECT ?# FROM users WHERE user_id = ?d AND block = ?d",
            [["name", "email"], 2, True],
        )
        assert sql == "SELECT `name`, `email` FROM users WHERE user_id = 2 AND block = 1"

    def test_array_mapping_with_null(self):
        sql = build_query(
            "UPDATE users SET ?a WHERE user_id = -1",
            [{"name": "Jack", "email": None}],
        )
        assert sql == "UPDATE users SET `name` = 'Jack', `email` = NULL WHERE user_id = -1"

    def test_array_list_inside_parens(self):
        assert build_query("WHERE id IN (?a)", [[1, 2, 3]]) == "WHERE id IN (1, 2, 3)"

    def test_marker_after_equals_without_space(self):
        assert build_query("WHERE id=?d", [7]) == "WHERE id=7"

    def test_marker_at_start_and_end(self):
        assert build_query("?d", [42]) == "42"
        assert build_query("?f", ["1.5"]) == "1.500000"

    def test_suffix_is_case_insensitive(self):
        assert build_query("?D ?F ?A", [1, 2, [3]]) == "1 2.000000 3"

    def test_marker_followed_by_newline(self):
        assert build_query("SELECT ?d\nFROM t", [1]) == "SELECT 1\nFROM t"

    def test_null_for_scalar_markers(self):
        assert build_query("?", [None]) == "NULL"
        assert build_query("?d", [None]) == "NULL"
        assert build_query("?f", [None]) == "NULL"

    def test_array_and_identifier_examples(self):
        assert build_query("?a", [[1, 2, 3]]) == "1, 2, 3"
        assert build_query("?a", [{"a": 1, "b": "x"}]) == "`a` = 1, `b` = 'x'"
        assert build_query("?#", ["name"]) == "`name`"
        assert build_query("?#", [["a", "b"]]) == "`a`, `b`"

    def test_trailing_arguments_ignored(self):
        assert build_query("?d", [1, 2, 3]) == "1"

    def test_substituted_text_not_rescanned(self):
        assert build_query("SELECT ? , ?d", ["= ?d", 4]) == "SELECT '= ?d' , 4"


class TestBuildQueryEscaping:
    @pytest.mark.parametrize("value", ["O'Brien", "''", "a'b'c", "plain"])
    def test_standard_round_trip(self, value):
        out = build_query("?", [value], escape=escape_standard)
        assert out.startswith("'") and out.endswith("'")
        assert _unescape_standard(out[1:-1]) == value

    def test_injection_neutralised(self):
        out = build_query("WHERE name = ?", ["'; DROP TABLE users; --"])
        assert out == "WHERE name = '\\'; DROP TABLE users; --'"

    def test_backslash_quote_stays_inside_literal_by_default(self):
        out = build_query("WHERE name = ?", ["\\' OR 1=1 -- "])
        assert out == "WHERE name = '\\\\\\' OR 1=1 -- '"

    def test_mysql_escaper(self):
        out = build_query("WHERE name = ?", ["O'Brien\\"], escape=escape_mysql)
        assert out == "WHERE name = 'O\\'Brien\\\\'"

    def test_custom_escaper_is_called(self):
        calls = []

        def esc(raw: str) -> str:
            calls.append(raw)
            return raw.upper()

        qb = QueryBuilder(esc)
        assert qb.build_query("? ?a", ["x", ["y", 1]]) == "'X' 'Y', 1"
        assert calls == ["x", "y"]


class TestConditionalBlocks:
    def test_block_with_value_substituted(self):
        t = "SELECT * FROM t WHERE {id = ?d}"
        assert build_query(t, [5]) == "SELECT * FROM t WHERE id = 5"

    def test_block_with_skip_collapses(self):
        t = "SELECT * FROM t WHERE {id = ?d}"
        assert build_query(t, [skip()]) == "SELECT * FROM t WHERE "

    def test_block_in_full_query(self):
        t = "SELECT name FROM users WHERE ?# IN (?a){ AND block = ?d}"
        assert (
            build_query(t, ["user_id", [1, 2, 3], skip()])
            == "SELECT name FROM users WHERE `user_id` IN (1, 2, 3)"
        )
        assert (
            build_query(t, ["user_id", [1, 2, 3], True])
            == "SELECT name FROM users WHERE `user_id` IN (1, 2, 3) AND block = 1"
        )

    def test_arguments_consumed_in_discovery_order(self):
        t = "SELECT ?d {AND a = ?d} AND b = ?d {AND c = ?}"
        assert build_query(t, [1, 2, 3, "x"]) == "SELECT 1 AND a = 2 AND b = 3 AND c = 'x'"
        assert build_query(t, [1, skip(), 3, "x"]) == "SELECT 1  AND b = 3 AND c = 'x'"

    def test_skip_mid_block_keeps_earlier_consumption(self):
        t = "{a = ?d AND b = ?d AND c = ?d} ?d"
        # a consumes 1, b hits skip; c is never reached, so 9 goes to the top-level marker
        assert build_query(t, [1, skip(), 9]) == " 9"

    def test_block_without_markers_kept(self):
        assert build_query("SELECT 1 {LIMIT 10}") == "SELECT 1 LIMIT 10"

    def test_multiline_block(self):
        t = "SELECT *\nFROM t\n{WHERE a = ?d\n  AND b = ?d}"
        assert build_query(t, [1, 2]) == "SELECT *\nFROM t\nWHERE a = 1\n  AND b = 2"
        assert build_query(t, [skip(), 2]) == "SELECT *\nFROM t\n"

    def test_marker_at_block_start(self):
        assert build_query("SELECT {?d}", [3]) == "SELECT 3"

    def test_nested_open_brace_pairs_with_first_close(self):
        assert build_query("{a {b} c}") == "a {b c}"

    def test_skip_factory_returns_same_sentinel(self):
        qb = QueryBuilder()
        assert qb.skip() is skip()


class TestBuildQueryErrors:
    def test_arguments_exhausted(self):
        with pytest.raises(ArgumentsExhaustedError):
            build_query("?d", [])

    def test_arguments_exhausted_inside_block(self):
        with pytest.raises(ArgumentsExhaustedError):
            build_query("?d {AND a = ?d}", [1])

    def test_unknown_marker(self):
        with pytest.raises(UnknownMarkerError) as exc:
            build_query("?z", [1])
        assert exc.value.token == "?z"

    def test_unknown_marker_glued_comma(self):
        with pytest.raises(UnknownMarkerError):
            build_query("IN (?d, ?d)", [1, 2])

    def test_arguments_taken_before_marker_is_resolved(self):
        with pytest.raises(ArgumentsExhaustedError):
            build_query("?z", [])

    def test_unknown_marker_after_valid_ones(self):
        with pytest.raises(UnknownMarkerError) as exc:
            build_query("?d ?x", [1, 2])
        assert exc.value.position == 3

    def test_unknown_marker_in_skipped_block_collapses(self):
        assert build_query("SELECT ?d {AND x = ?z}", [1, skip()]) == "SELECT 1 "

    def test_unknown_marker_in_used_block(self):
        with pytest.raises(UnknownMarkerError):
            build_query("SELECT ?d {AND x = ?z}", [1, 2])

    def test_top_level_skip_fails(self):
        with pytest.raises(UnexpectedSkipError):
            build_query("WHERE id = ?d", [skip()])

    def test_invalid_argument_type_no_partial_output(self):
        with pytest.raises(InvalidArgumentTypeError):
            build_query("?d {AND a = ?d}", [1, 1.5])

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            build_query("?a", ["not a list"])

    def test_fractional_int_fails(self):
        with pytest.raises(InvalidArgumentTypeError):
            build_query("?d", [2.5])
