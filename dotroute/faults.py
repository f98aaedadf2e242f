"""
dotroute faults (errors) and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep logs/searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself as the block printed for the invocation.
- Issue: one flag-level problem (CLI-facing flag name + message).
- trigger(): central entry point to surface any fault (print in shell mode,
  raise otherwise).

Rendered blocks
- UnknownCommandError  → header line, then the command list.
- UnionConflictError   → the conflict message, then the command's detail help.
- ValidationError      → "Validation error", one bullet per issue
                         ('  - <message> at "<flag>"'), then the detail help.
- HandlerError         → a single "<ExceptionType>: <message>" line.

Integration
- The resolver raises faults with the context the renderers need
  (command, commands, issues, exception) and hands them to trigger(fault, **ctx).
- DuplicateCommandError is a declaration mistake and is always raised.
"""
import logging
from enum import IntEnum
from types import MappingProxyType
from typing import NamedTuple

from rich.text import Text

from .helper import render_detail, render_list
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x): UNKNOWN_COMMAND, DUPLICATE_COMMAND
    - flags (1111x): UNION_CONFLICT, VALIDATION
    - delegated (1113x): HANDLER

    rationale
    - codes are discoverable (searchable in logs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND   = 11101
    DUPLICATE_COMMAND = 11102

    # --- flag errors (11xxx) ---
    UNION_CONFLICT    = 11111
    VALIDATION        = 11112

    # --- delegated errors (11xxx) ---
    HANDLER           = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Issue(NamedTuple):
    """
    One flag-level validation problem.

    path is the CLI-facing name ("--right") or the offending token for strays.
    """
    path: str
    message: str


class CommandException(Exception):
    """
    Base class of every user-facing fault.

    options (read-only) carry the rendering context: shell, console, colorful,
    plus fault-specific entries such as command, commands, issues or exception.
    """
    code = Unset
    header = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, type(self).header)
        super().__init__(self.message)
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def render(self):
        """
        Return the block printed for this fault as rich Text (no final newline).
        """
        return Text(self.message)

    def __rich__(self):
        return self.render()

    def __trigger__(self):
        """
        Print the block and return the exit status (shell mode), or raise.
        """
        if not self.options.get("shell", False):
            raise self from None
        self.options["console"].print(self, soft_wrap=True)
        return 1

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateCommandError(CommandException):
    code = FaultCode.DUPLICATE_COMMAND

    def __trigger__(self):
        raise self from None


class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND

    def render(self):
        block = Text(self.message)
        if "commands" in self.options:
            block.append("\n")
            block.append_text(render_list(self.options["commands"], colorful=self.options.get("colorful", False)))
        return block


class UnionConflictError(CommandException):
    code = FaultCode.UNION_CONFLICT

    def render(self):
        block = Text(self.message)
        if "command" in self.options:
            block.append("\n")
            block.append_text(render_detail(self.options["command"], colorful=self.options.get("colorful", False)))
        return block


class ValidationError(CommandException):
    code = FaultCode.VALIDATION
    header = "Validation error"

    @property
    def issues(self):
        return tuple(self.options.get("issues", ()))

    def render(self):
        block = Text(self.message)
        for issue in self.issues:
            block.append('\n  - %s at "%s"' % (issue.message, issue.path))
        if "command" in self.options:
            block.append("\n")
            block.append_text(render_detail(self.options["command"], colorful=self.options.get("colorful", False)))
        return block


class HandlerError(CommandException):
    code = FaultCode.HANDLER

    def render(self):
        try:
            exception = self.options["exception"]
        except KeyError:
            return Text(self.message)
        summary = str(exception).strip().splitlines()
        if summary:
            return Text("%s: %s" % (type(exception).__name__, summary[0]))
        return Text(type(exception).__name__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.options.get("exception")
        self.options["console"].print(self, soft_wrap=True)
        return 1


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the block is printed and the exit status returned; otherwise
      the (merged) fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault = fault.__replace__(**options)
    logger.debug("fault %s [%s]: %s", type(fault).__name__, fault.code.normalize(), fault.message)
    return fault.__trigger__()


__all__ = (
    "FaultCode",
    "Issue",
    "CommandException",
    "DuplicateCommandError",
    "UnknownCommandError",
    "UnionConflictError",
    "ValidationError",
    "HandlerError",
    "trigger",
)
