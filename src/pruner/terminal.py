"""Single-keypress terminal input and line output."""

import logging
import termios
import tty
from typing import Any, Optional, TextIO

from rich.console import Console

from pruner.errors import TerminalError

logger = logging.getLogger(__name__)


class Terminal:
    """Raw-mode keyboard input and line-oriented output.

    Use as a context manager: raw mode is switched on when entering and the
    previous settings are restored on exit, whatever happened in between.
    Input that is not a TTY (a pipe, a test runner) is read as-is.
    """

    def __init__(self, stdin: TextIO, console: Console) -> None:
        self.stdin = stdin
        self.console = console
        self.original_settings: Optional[list[Any]] = None

    def start(self) -> None:
        """Switch the input to raw mode."""
        if not self.stdin.isatty():
            return
        try:
            fd = self.stdin.fileno()
            self.original_settings = termios.tcgetattr(fd)
            tty.setraw(fd)
        except (termios.error, OSError) as err:
            raise TerminalError(f"Failed to enable raw mode: {err}") from err

    def stop(self) -> None:
        """Restore the terminal settings saved by start()."""
        if self.original_settings is None:
            return
        try:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self.original_settings)
        except (termios.error, OSError) as err:
            logger.warning("Failed to restore terminal settings: %s", err)
        finally:
            self.original_settings = None

    def write(self, text: str, end: str = "\r\n") -> None:
        """Write rich markup text. Raw mode needs an explicit carriage return."""
        try:
            self.console.print(text, end=end, highlight=False, soft_wrap=True)
            self.console.file.flush()
        except OSError as err:
            raise TerminalError(f"Failed to write to terminal: {err}") from err

    def read_key(self) -> Optional[str]:
        """Read a single keypress, or None at end of input."""
        try:
            data = self.stdin.buffer.read(1)
        except OSError as err:
            raise TerminalError(f"Failed to read from terminal: {err}") from err
        if not data:
            return None
        return chr(data[0])

    def __enter__(self) -> "Terminal":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
