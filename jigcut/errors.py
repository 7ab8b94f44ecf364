"""Error types raised by the puzzle layout and path parsing code."""


class JigcutError(Exception):
    """Base class for all jigcut errors."""


class PuzzleLayoutError(JigcutError, ValueError):
    """A layout request that cannot produce a puzzle.

    The message is meant to be shown to the user as-is.
    """


class InvalidGrid(PuzzleLayoutError):
    """Raised when the grid dimensions are missing, non-positive or leave no drawable area."""


class UnsupportedShape(PuzzleLayoutError):
    """Raised when the puzzle form, piece style or piece variant is not recognized."""


class MalformedPathCommand(JigcutError, ValueError):
    """Raised in strict parsing mode for an unknown command or a wrong argument count.

    Attributes:
        command: The offending command letter or character.
        position: Character offset of the command in the source text.
    """

    def __init__(self, message: str, command: str = "", position: int = -1):
        """Initialize the error.

        Args:
            message: Human-readable description.
            command: The offending command letter or character.
            position: Character offset of the command in the source text.
        """
        super().__init__(message)
        self.command = command
        self.position = position
