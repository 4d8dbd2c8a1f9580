"""Error types shared by the repository, terminal and review layers."""


class PrunerError(Exception):
    """Base class for errors that end a review session."""


class TerminalError(PrunerError):
    """Raw mode could not be switched or terminal I/O failed."""


class RepositoryError(PrunerError):
    """A branch or commit lookup, delete or create failed."""


class EncodingError(PrunerError):
    """A branch name is not valid UTF-8."""


class InvalidInputError(PrunerError):
    """An unrecognized command key was pressed."""

    def __init__(self, char: str) -> None:
        """Initialize error.

        Args:
            char: The character that was read
        """
        super().__init__(f"invalid input, don't know what {char!r} means")
        self.char = char
