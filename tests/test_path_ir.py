"""Tests for the path IR, its text form and the path-command parser."""

import logging

import pytest

from jigcut.errors import MalformedPathCommand
from jigcut.path_ir import (
    ArcTo,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    PathBuilder,
    PathIR,
    QuadTo,
    TokenKind,
    format_number,
    parse_path,
    tokenize,
)


class TestFormatNumber:
    """Tests for coordinate formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (10.0, "10"),
            (0.5, "0.5"),
            (1.23456, "1.2346"),
            (-0.00001, "0"),
            (0.0, "0"),
            (-3.25, "-3.25"),
        ],
    )
    def test_format(self, value: float, expected: str) -> None:
        """Numbers keep at most four decimals without trailing zeros."""
        assert format_number(value) == expected


class TestTokenize:
    """Tests for the path lexer."""

    def test_commands_and_numbers(self) -> None:
        """Commands and numbers are split on whitespace and commas."""
        tokens = list(tokenize("M 10,20 L30 40"))
        assert [t.kind for t in tokens] == [
            TokenKind.COMMAND,
            TokenKind.NUMBER,
            TokenKind.NUMBER,
            TokenKind.COMMAND,
            TokenKind.NUMBER,
            TokenKind.NUMBER,
        ]
        assert [t.value for t in tokens if t.kind is TokenKind.NUMBER] == [10, 20, 30, 40]

    def test_signs_decimals_and_exponents(self) -> None:
        """Signed, fractional and exponent literals are single numbers."""
        tokens = list(tokenize("-1.5 .25 +3 2e2 1.5e-1"))
        assert [t.value for t in tokens] == [-1.5, 0.25, 3.0, 200.0, 0.15]

    def test_adjacent_numbers(self) -> None:
        """A sign or second decimal point starts a new number."""
        tokens = list(tokenize("1-2.5.5"))
        assert [t.value for t in tokens] == [1.0, -2.5, 0.5]

    def test_positions(self) -> None:
        """Tokens record their offset in the source text."""
        tokens = list(tokenize("M 1 2"))
        assert [t.position for t in tokens] == [0, 2, 4]

    def test_invalid_characters(self) -> None:
        """Characters that are neither commands nor numbers are flagged."""
        tokens = list(tokenize("M 1 # 2"))
        assert tokens[2].kind is TokenKind.INVALID
        assert tokens[2].text == "#"


class TestParsePath:
    """Tests for parse_path."""

    def test_all_commands(self) -> None:
        """Every command letter parses to its command type."""
        path = parse_path("M 0 0 L 10 0 C 1 2 3 4 5 6 Q 7 8 9 10 A 5 5 0 1 0 20 20 Z")
        assert path.commands == (
            MoveTo((0.0, 0.0)),
            LineTo((10.0, 0.0)),
            CubicTo((1.0, 2.0), (3.0, 4.0), (5.0, 6.0)),
            QuadTo((7.0, 8.0), (9.0, 10.0)),
            ArcTo(5.0, 5.0, 0.0, True, False, (20.0, 20.0)),
            ClosePath(),
        )
        assert path.is_closed

    def test_compact_syntax(self) -> None:
        """Commas and missing spaces are accepted."""
        path = parse_path("M0,0L10,5Z")
        assert path.commands == (MoveTo((0.0, 0.0)), LineTo((10.0, 5.0)), ClosePath())

    def test_wrong_argument_count_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """A command with the wrong number of arguments is dropped with its arguments."""
        with caplog.at_level(logging.WARNING, logger="jigcut.path_ir"):
            path = parse_path("M 0 0 L 10 L 5 5 Z")
        assert path.commands == (MoveTo((0.0, 0.0)), LineTo((5.0, 5.0)), ClosePath())
        assert "takes 2 arguments, got 1" in caplog.text

    def test_unknown_command_is_skipped(self) -> None:
        """Unknown letters (including lowercase commands) are dropped."""
        path = parse_path("M 0 0 H 10 l 1 1 L 2 2")
        assert path.commands == (MoveTo((0.0, 0.0)), LineTo((2.0, 2.0)))

    def test_leading_numbers_are_skipped(self) -> None:
        """Numbers with no command are dropped."""
        path = parse_path("5 5 M 1 1")
        assert path.commands == (MoveTo((1.0, 1.0)),)

    def test_strict_raises(self) -> None:
        """Strict mode raises on the first malformed command."""
        with pytest.raises(MalformedPathCommand) as exc_info:
            parse_path("M 0 0 C 1 2 3", strict=True)
        assert exc_info.value.command == "C"
        assert exc_info.value.position == 6

    def test_strict_unknown_command(self) -> None:
        """Strict mode rejects unknown letters."""
        with pytest.raises(MalformedPathCommand, match="unknown command"):
            parse_path("M 0 0 X 1 1", strict=True)

    def test_malformed_is_value_error(self) -> None:
        """MalformedPathCommand can be caught as ValueError."""
        with pytest.raises(ValueError):
            PathIR.parse("Z 1", strict=True)

    def test_empty(self) -> None:
        """Empty text gives an empty path."""
        path = parse_path("   ")
        assert len(path) == 0
        assert not path.is_closed


class TestPathSerialization:
    """Tests for building and serializing paths."""

    def test_builder_output(self) -> None:
        """Builder commands serialize in order with compact numbers."""
        path = (
            PathBuilder()
            .move_to((0, 0))
            .line_to((10.5, 0))
            .quad_to((12, 1), (12, 5))
            .arc_to(5, 5, (2, 5), large_arc=False, sweep=True)
            .close()
            .build()
        )
        assert path.to_string() == "M 0 0 L 10.5 0 Q 12 1 12 5 A 5 5 0 0 1 2 5 Z"
        assert str(path) == path.to_string()

    def test_parse_serialized_output(self) -> None:
        """Serialized text parses back to the same commands."""
        path = (
            PathBuilder()
            .move_to((1.25, 2))
            .cubic_to((3, 4), (5, 6), (7, 8))
            .arc_to(10, 20, (30, 40), large_arc=True, sweep=False, rotation=15)
            .close()
            .build()
        )
        assert parse_path(path.to_string()) == path

    def test_iteration(self) -> None:
        """Paths iterate over their commands."""
        path = PathBuilder().move_to((0, 0)).line_to((1, 1)).build()
        assert [type(c) for c in path] == [MoveTo, LineTo]
