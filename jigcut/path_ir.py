"""Path intermediate representation and the path-command mini-language.

A path is an ordered sequence of absolute drawing commands:

    M x y                          move to
    L x y                          line to
    C c1x c1y c2x c2y x y          cubic Bezier
    Q cx cy x y                    quadratic Bezier
    A rx ry rotation large sweep x y   elliptical arc (flags are 0/1)
    Z                              close path

Commands are case-sensitive. Arguments are separated by whitespace and/or commas.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Sequence, Tuple, Union

from .errors import MalformedPathCommand

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# Number of numeric arguments each command letter takes.
ARG_COUNTS = {"M": 2, "L": 2, "C": 6, "Q": 4, "A": 7, "Z": 0}

_DIGITS = "0123456789"


def _point(p: Sequence[float]) -> Point:
    return (float(p[0]), float(p[1]))


def format_number(value: float) -> str:
    """Format a coordinate compactly with at most 4 decimals."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


@dataclass(frozen=True)
class MoveTo:
    """Start a new subpath at ``end``."""

    end: Point

    def to_string(self) -> str:
        return f"M {format_number(self.end[0])} {format_number(self.end[1])}"


@dataclass(frozen=True)
class LineTo:
    """Straight segment to ``end``."""

    end: Point

    def to_string(self) -> str:
        return f"L {format_number(self.end[0])} {format_number(self.end[1])}"


@dataclass(frozen=True)
class CubicTo:
    """Cubic Bezier segment from the current point to ``end``."""

    c1: Point
    c2: Point
    end: Point

    def to_string(self) -> str:
        values = (*self.c1, *self.c2, *self.end)
        return "C " + " ".join(format_number(v) for v in values)


@dataclass(frozen=True)
class QuadTo:
    """Quadratic Bezier segment from the current point to ``end``."""

    c: Point
    end: Point

    def to_string(self) -> str:
        values = (*self.c, *self.end)
        return "Q " + " ".join(format_number(v) for v in values)


@dataclass(frozen=True)
class ArcTo:
    """Elliptical arc segment from the current point to ``end``.

    Attributes:
        rx: Ellipse x radius.
        ry: Ellipse y radius.
        rotation: Rotation of the ellipse x axis in degrees.
        large_arc: Select the larger of the two candidate arcs.
        sweep: Traverse in the positive-angle direction (clockwise on a y-down canvas).
        end: Arc end point.
    """

    rx: float
    ry: float
    rotation: float
    large_arc: bool
    sweep: bool
    end: Point

    def to_string(self) -> str:
        return "A {} {} {} {} {} {} {}".format(
            format_number(self.rx),
            format_number(self.ry),
            format_number(self.rotation),
            int(self.large_arc),
            int(self.sweep),
            format_number(self.end[0]),
            format_number(self.end[1]),
        )


@dataclass(frozen=True)
class ClosePath:
    """Close the current subpath back to its start point."""

    def to_string(self) -> str:
        return "Z"


PathCommand = Union[MoveTo, LineTo, CubicTo, QuadTo, ArcTo, ClosePath]


@dataclass(frozen=True)
class PathIR:
    """An immutable, ordered sequence of path commands."""

    commands: Tuple[PathCommand, ...] = ()

    @property
    def is_closed(self) -> bool:
        """True when the path ends with a ClosePath command."""
        return bool(self.commands) and isinstance(self.commands[-1], ClosePath)

    def to_string(self) -> str:
        """Serialize to the path mini-language."""
        return " ".join(command.to_string() for command in self.commands)

    @classmethod
    def parse(cls, text: str, strict: bool = False) -> "PathIR":
        """Parse path-command text. See :func:`parse_path`."""
        return parse_path(text, strict=strict)

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(self.commands)


class PathBuilder:
    """Accumulates commands and produces a PathIR.

    Methods return the builder so calls can be chained.
    """

    def __init__(self) -> None:
        """Initialize an empty builder."""
        self._commands: List[PathCommand] = []

    def move_to(self, point: Sequence[float]) -> "PathBuilder":
        self._commands.append(MoveTo(_point(point)))
        return self

    def line_to(self, point: Sequence[float]) -> "PathBuilder":
        self._commands.append(LineTo(_point(point)))
        return self

    def cubic_to(self, c1: Sequence[float], c2: Sequence[float], end: Sequence[float]) -> "PathBuilder":
        self._commands.append(CubicTo(_point(c1), _point(c2), _point(end)))
        return self

    def quad_to(self, c: Sequence[float], end: Sequence[float]) -> "PathBuilder":
        self._commands.append(QuadTo(_point(c), _point(end)))
        return self

    def arc_to(
        self,
        rx: float,
        ry: float,
        end: Sequence[float],
        large_arc: bool = False,
        sweep: bool = False,
        rotation: float = 0.0,
    ) -> "PathBuilder":
        self._commands.append(ArcTo(float(rx), float(ry), float(rotation), bool(large_arc), bool(sweep), _point(end)))
        return self

    def close(self) -> "PathBuilder":
        self._commands.append(ClosePath())
        return self

    def build(self) -> PathIR:
        """Return the accumulated commands as a PathIR."""
        return PathIR(tuple(self._commands))


class TokenKind(Enum):
    """Lexical token categories."""

    COMMAND = "command"
    NUMBER = "number"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    """A lexical token with its offset in the source text."""

    kind: TokenKind
    text: str
    position: int
    value: float = 0.0


def _scan_number(text: str, start: int) -> int:
    """Return the end offset of the number starting at ``start`` (``start`` if none)."""
    n = len(text)
    i = start
    if i < n and text[i] in "+-":
        i += 1
    int_start = i
    while i < n and text[i] in _DIGITS:
        i += 1
    has_digits = i > int_start
    if i < n and text[i] == ".":
        j = i + 1
        while j < n and text[j] in _DIGITS:
            j += 1
        if j > i + 1 or has_digits:
            has_digits = True
            i = j
    if not has_digits:
        return start
    # Exponent is only consumed when it is followed by at least one digit
    if i < n and text[i] in "eE":
        j = i + 1
        if j < n and text[j] in "+-":
            j += 1
        k = j
        while k < n and text[k] in _DIGITS:
            k += 1
        if k > j:
            i = k
    return i


def tokenize(text: str) -> Iterator[Token]:
    """Split path text into command, number and invalid tokens in a single pass.

    Args:
        text: Path-command text.

    Yields:
        Tokens in source order. Separators (whitespace and commas) are dropped.
    """
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace() or ch == ",":
            i += 1
            continue
        end = _scan_number(text, i)
        if end > i:
            literal = text[i:end]
            yield Token(TokenKind.NUMBER, literal, i, float(literal))
            i = end
        elif ch.isalpha():
            yield Token(TokenKind.COMMAND, ch, i)
            i += 1
        else:
            yield Token(TokenKind.INVALID, ch, i)
            i += 1


def _make_command(letter: str, args: List[float]) -> PathCommand:
    if letter == "M":
        return MoveTo((args[0], args[1]))
    if letter == "L":
        return LineTo((args[0], args[1]))
    if letter == "C":
        return CubicTo((args[0], args[1]), (args[2], args[3]), (args[4], args[5]))
    if letter == "Q":
        return QuadTo((args[0], args[1]), (args[2], args[3]))
    if letter == "A":
        return ArcTo(args[0], args[1], args[2], args[3] != 0, args[4] != 0, (args[5], args[6]))
    return ClosePath()


def _report(message: str, token: Token, strict: bool) -> None:
    if strict:
        raise MalformedPathCommand(message, command=token.text, position=token.position)
    logger.warning("Skipping malformed path command: %s", message)


def parse_path(text: str, strict: bool = False) -> PathIR:
    """Parse path-command text into a PathIR.

    Each command letter is followed by its fixed number of arguments. A command with an
    unknown letter or the wrong argument count is skipped together with its arguments, as
    are stray characters and numbers with no command; parsing continues with the next
    command letter.

    Args:
        text: Path-command text, absolute commands only.
        strict: Raise MalformedPathCommand instead of skipping.

    Returns:
        The parsed path.

    Raises:
        MalformedPathCommand: In strict mode, on the first malformed command.
    """
    tokens = list(tokenize(text))
    commands: List[PathCommand] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.kind is not TokenKind.COMMAND:
            _report(f"unexpected {token.text!r} at offset {token.position}", token, strict)
            i += 1
            continue

        j = i + 1
        args: List[float] = []
        while j < len(tokens) and tokens[j].kind is TokenKind.NUMBER:
            args.append(tokens[j].value)
            j += 1

        expected = ARG_COUNTS.get(token.text)
        if expected is None:
            _report(f"unknown command {token.text!r} at offset {token.position}", token, strict)
        elif len(args) != expected:
            _report(
                f"command {token.text!r} at offset {token.position} takes {expected} arguments, got {len(args)}",
                token,
                strict,
            )
        else:
            commands.append(_make_command(token.text, args))
        i = j

    return PathIR(tuple(commands))
