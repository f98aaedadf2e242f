"""
Logging setup for dotroute.

Every module logs through logging.getLogger(__name__) under the "dotroute"
logger. configure() attaches a single RichHandler writing to stderr so that
stdout only ever carries the invocation's block.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

from .utils import Unset


def configure(verbose=False, /, *, console=Unset):
    """
    Install (or replace) the dotroute log handler and return the logger.

    - verbose: DEBUG when True, WARNING otherwise.
    - console: rich Console for the records (stderr by default).
    """
    if console is Unset:
        console = Console(stderr=True)
    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("dotroute")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger


__all__ = (
    "configure",
)
