"""Console output and logging configuration."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import MemoryHandler

from rich.console import Console
from rich.logging import RichHandler

console = Console()
stderr_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging with a Rich handler on stderr and return the app logger."""
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=stderr_console,
        markup=False,
        rich_tracebacks=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)

    logger = logging.getLogger("pruner")
    logger.handlers.clear()
    logger.setLevel(level)
    logger.addHandler(handler)

    return logger


@contextmanager
def held_logs() -> Iterator[None]:
    """Buffer app log records and emit them when the block exits.

    Raw mode turns off output post-processing, so records written while it is
    on would not start at the left margin.
    """
    logger = logging.getLogger("pruner")
    handlers = list(logger.handlers)
    buffers = [
        # Never flushes on its own, only when closed
        MemoryHandler(capacity=10000, flushLevel=logging.CRITICAL + 1, target=handler)
        for handler in handlers
    ]
    for handler in handlers:
        logger.removeHandler(handler)
    for buffer in buffers:
        logger.addHandler(buffer)
    try:
        yield
    finally:
        for buffer in buffers:
            logger.removeHandler(buffer)
            buffer.close()
        for handler in handlers:
            logger.addHandler(handler)
