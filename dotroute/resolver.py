"""
dotroute resolver: from argv to exactly one printed block.

Pipeline
- split()     → leading command-path tokens and the flag tokens after them.
- Registry.resolve() → the command for the longest registered dotted path.
- tokenize()  → ParsedArgs (raw flag values, unknown flags, stray tokens).
- validate()  → the handler's keyword arguments, or a fault.
- dispatch()  → run the handler and print its value, or print help / the fault.

Process-wide flags
- "-h" / "--help" anywhere short-circuits to help: the detail form for a
  resolved command, the list form for the deepest namespace prefix
  ("search --help"), or the root list form.
- "--verbose-errors" anywhere re-raises handler exceptions unchanged instead
  of summarising them.

Modes
- shell=True (default): the block is printed on the console and the exit
  status (0 or 1) returned.
- shell=False: faults are raised, help is still printed, the handler's value
  is returned without printing.
"""
import asyncio
import inspect
import logging
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from .faults import CommandException, HandlerError, UnknownCommandError, trigger
from .helper import render_detail, render_list
from .logs import configure
from .pretty import pformat
from .utils import Unset, coalesce
from .validation import validate

logger = logging.getLogger(__name__)

HELP = ("-h", "--help")
VERBOSE = "--verbose-errors"

# "-s", "--name", "--name=value"; "-1" and "-.5" are values
_FLAGLIKE = re.compile(r"--?[^\W\d]")


class ParsedArgs(NamedTuple):
    """
    Tokenized invocation of one command.

    - path: the tokens that named the command.
    - flags: camelCase flag name -> raw value (str, or True for a bare switch).
    - strays: positional tokens nobody asked for.
    - unknown: switches the command does not declare.
    """
    path: tuple
    flags: dict
    strays: tuple
    unknown: tuple


def split(tokens, /):
    """
    Return (path, rest): the leading tokens that do not start with "-", and the others.
    """
    tokens = list(tokens)
    for index, token in enumerate(tokens):
        if token.startswith("-"):
            return tokens[:index], tokens[index:]
    return tokens, []


def tokenize(command, tokens, /, path=()):
    """
    Pair the flag tokens of an invocation with the flags `command` declares.

    Rules
    - "--long value", "--long=value", "-a value" and "-a=value" are accepted;
      long names may be kebab-case or camelCase.
    - boolean flags never consume the next token.
    - value-taking flags consume the next token unless it looks like a flag;
      a flag left without a value is recorded as True (validation rejects it).
    - an undeclared switch swallows its value the same way and is reported once.
    - on repetition the last occurrence wins.
    """
    tokens = deque(tokens)
    flags = {}
    strays = []
    unknown = []
    while tokens:
        token = tokens.popleft()
        if not _FLAGLIKE.match(token):
            strays.append(token)
            continue

        switch, separator, value = token.partition("=")
        if (name := command.locate(switch)) is None:
            unknown.append(switch)
            if not separator and tokens and not _FLAGLIKE.match(tokens[0]):
                tokens.popleft()
            continue

        if separator:
            flags[name] = value
        elif command.flags[name].boolean:
            flags[name] = True
        elif tokens and not _FLAGLIKE.match(tokens[0]):
            flags[name] = tokens.popleft()
        else:
            flags[name] = True

    return ParsedArgs(tuple(path), flags, tuple(strays), tuple(unknown))


def parse(registry, tokens, /):
    """
    Resolve the command named by `tokens` and tokenize the rest.

    Raises
    - UnknownCommandError: from Registry.resolve().
    """
    tokens = list(tokens)
    command, tail = registry.resolve(tokens)
    return command, tokenize(command, tail, tokens[:len(tokens) - len(tail)])


def render_help(registry, tokens, /, *, colorful=False):
    """
    Render the help block for an invocation (global flags already removed).
    """
    path, _ = split(tokens)
    try:
        command, _ = registry.resolve(path)
    except UnknownCommandError:
        prefix = registry.namespace(path)
        return render_list(registry.list(prefix) if prefix else registry.list(), colorful=colorful)
    return render_detail(command, colorful=colorful)


async def _settle(awaitable):
    return await awaitable


def _looping():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def dispatch(registry, tokens, /, *, shell=True, console, colorful=False):
    """
    Run one invocation end to end (see the module docstring for the modes).
    """
    tokens = list(tokens)
    verbose = VERBOSE in tokens
    tokens = [token for token in tokens if token != VERBOSE]
    options = {"shell": shell, "console": console, "colorful": colorful}

    if any(token in HELP for token in tokens):
        tokens = [token for token in tokens if token not in HELP]
        logger.debug("help requested for %r", tokens)
        console.print(render_help(registry, tokens, colorful=colorful), soft_wrap=True)
        return 0 if shell else None

    try:
        command, parsed = parse(registry, tokens)
        flags = validate(command, parsed)
    except CommandException as fault:
        return trigger(fault, **options)

    if inspect.iscoroutinefunction(command.handler) and _looping():
        raise RuntimeError("cannot await handler of %r inside a running event loop" % command.name)

    logger.debug("calling %r with %r", command.name, flags)
    try:
        value = command(**flags)
        if inspect.isawaitable(value):
            value = asyncio.run(_settle(value))
    except Exception as exception:
        if verbose:
            raise
        return trigger(HandlerError(str(exception), exception=exception, command=command), **options)

    if not shell:
        return value
    if value is not None:
        console.print(Text(pformat(value)), soft_wrap=True)
    return 0


def invoke(registry, prompt=Unset, /, *, shell=True, console=Unset, colorful=Unset):
    """
    Execute an invocation against a registry.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; will be split via shlex.split.
      • Iterable[str]: pre-tokenized sequence, used verbatim (empty strings and
        surrounding whitespace are values).
    - shell: print and return an exit status (True) or raise/return (False).
    - console: rich Console receiving the block (stdout by default).
    - colorful: style the output; defaults to whether the console is a terminal.

    Coroutine handlers are awaited with asyncio.run, so invoke() must be called
    outside a running event loop.

    Raises
    - TypeError: when prompt is not Unset/str/Iterable[str], or when an
      iterable contains a non-string element.
    - RuntimeError: when a coroutine handler is dispatched inside a running
      event loop (the handler is not called).
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(item, str) for item in tokens):
            raise TypeError("invoke() argument must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    if console is Unset:
        console = Console(highlight=False)
    colorful = coalesce(colorful, console.is_terminal)
    return dispatch(registry, tokens, shell=shell, console=console, colorful=colorful)


def main(registry, prompt=Unset, /):
    """
    Console entry point: configure logging, run the invocation and exit with its status.
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    else:
        # iterators are read here and again by invoke()
        tokens = prompt = list(prompt)
    configure(VERBOSE in tokens)
    sys.exit(invoke(registry, prompt))


__all__ = (
    "ParsedArgs",
    "split",
    "tokenize",
    "parse",
    "render_help",
    "dispatch",
    "invoke",
    "main",
)
