"""Tests for the template Cursor."""

import io

import pytest

from stencil.errors import ParseError
from stencil.template.cursor import EOF, Cursor


def make_cursor(text: str, name=None) -> Cursor:
    return Cursor(io.StringIO(text), name)


class TestCursor:

    def test_initial_state(self):
        cursor = make_cursor("ab")
        assert cursor.current == "a"
        assert cursor.line == 1
        assert not cursor.at_eof

    def test_empty_input_is_eof(self):
        cursor = make_cursor("")
        assert cursor.at_eof
        assert cursor.current == EOF

    def test_advance_and_idempotent_eof(self):
        cursor = make_cursor("a")
        cursor.advance()
        assert cursor.at_eof
        cursor.advance()
        cursor.advance()
        assert cursor.at_eof
        assert cursor.line == 1

    def test_line_counts_consumed_newlines(self):
        cursor = make_cursor("a\nb\n\nc")
        lines = []
        while not cursor.at_eof:
            lines.append((cursor.current, cursor.line))
            cursor.advance()
        assert lines == [("a", 1), ("\n", 1), ("b", 2), ("\n", 2), ("\n", 3), ("c", 4)]

    def test_skip_space(self):
        cursor = make_cursor("  \t\n x")
        cursor.skip_space()
        assert cursor.current == "x"
        assert cursor.line == 2

    def test_advance_skip_space(self):
        cursor = make_cursor("(   1")
        cursor.advance_skip_space()
        assert cursor.current == "1"

    def test_expect_skips_space_then_consumes(self):
        cursor = make_cursor("  }z")
        cursor.expect("}")
        assert cursor.current == "z"

    def test_expect_mismatch_raises(self):
        cursor = make_cursor("x")
        with pytest.raises(ParseError, match="Expected }") as exc:
            cursor.expect("}")
        assert exc.value.line == 1
        assert exc.value.context == "x"

    def test_expect_at_eof_reports_eof_context(self):
        cursor = make_cursor("")
        with pytest.raises(ParseError) as exc:
            cursor.expect(")")
        assert exc.value.context == "EOF"

    def test_snippet_truncates_at_twenty_characters(self):
        cursor = make_cursor("abcdefghijklmnopqrstuvwxyz")
        assert cursor.snippet() == "abcdefghijklmnopqrst..."

    def test_snippet_without_truncation(self):
        cursor = make_cursor("short")
        assert cursor.snippet() == "short"

    def test_error_carries_source_name(self):
        cursor = make_cursor("oops", name="greeting.tpl")
        err = cursor.error("Something failed")
        assert err.source_name == "greeting.tpl"
        assert str(err) == "greeting.tpl: Something failed, on line 1, at text starting: oops"

    def test_stream_is_not_closed(self):
        stream = io.StringIO("abc")
        cursor = Cursor(stream)
        while not cursor.at_eof:
            cursor.advance()
        assert not stream.closed
