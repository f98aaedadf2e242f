"""
dotroute command layer: declare commands and keep them in a flat registry.

What this module provides
- Command: binds a handler to a dotted name, a description, an optional
  version, usage examples, a flag schema and union groups.
- command(...): create a Command or a decorator that produces one.
- Registry: the ordered table of commands keyed by full dotted path, with
  longest-prefix resolution of argv tokens and prefix listing for help.

Core ideas
- Flat namespacing: "search.byName" is a single key; "search" only exists as a
  prefix that help can list. No parent/child objects are kept.
- Declaration-time validation: bad names, duplicate flags/aliases and unknown
  union members fail when the command is declared, not when it runs.
- Handlers receive validated flags as keyword arguments (camelCase names):
    @registry.command(name="add", flags={"left": Flag("number", required=True), ...})
    def add(left, right):
        return left + right
"""
import inspect
import logging
import re
from collections.abc import Iterable, Mapping

from .faults import DuplicateCommandError, UnknownCommandError
from .flags import Flag, UnionGroup
from .utils import *

logger = logging.getLogger(__name__)

RESERVED_NAMES = ("help", "verboseErrors")
RESERVED_ALIASES = ("h",)


def _process_strings(cls, metadata):
    """
    Normalize scalar string metadata fields.

    - name: required dotted path; every segment starts with a letter and may
      contain letters, digits, "_" and "-".
    - descr, version: Unset or non-empty strings after trimming (None when omitted).

    Errors
    - TypeError: when a value is not str | Unset.
    - ValueError: when a string becomes empty after trimming or a name is malformed.
    """
    for name in ("name", "descr", "version"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if not re.fullmatch(r"[^\W\d_][\w-]*(\.[^\W\d_][\w-]*)*", metadata["name"]):
        raise ValueError(f"{cls.__typename__} 'name' must be a dotted path of identifiers")


def _process_iterables(cls, metadata):
    """
    Normalize the examples collection.

    - Each item must be a non-empty string (trimmed); duplicates are rejected.
    - Stabilized to a tuple while preserving order.
    """
    if not isinstance(object := metadata["examples"], Iterable) or isinstance(object, str):
        raise TypeError(f"{cls.__typename__} 'examples' must be an iterable of strings")
    examples = []
    for item in object:
        if not isinstance(item, str):
            raise TypeError(f"{cls.__typename__} 'examples' must be an iterable of strings")
        elif not (item := item.strip()):
            raise ValueError(f"{cls.__typename__} 'examples' must be an iterable of non-empty strings")
        elif item in examples:
            raise ValueError(f"{cls.__typename__} 'examples' cannot contain duplicates")
        examples.append(item)
    metadata["examples"] = tuple(examples)


def _process_flags(cls, metadata):
    """
    Materialize the flag schema.

    Input
    - metadata["flags"]: Mapping[str, Flag | Mapping] in declaration order.
      Plain mappings are expanded with Flag(**mapping).

    Rules
    - names are camelCase or kebab-case identifiers, stored camelCase and unique.
    - aliases are unique within the command.
    - "help"/"verbose-errors" and the alias "h" are reserved for process-wide flags.

    Result
    - metadata["flags"]: dict[name -> Flag]
    - metadata["aliases"]: dict[alias -> name]
    """
    if not isinstance(source := coalesce(metadata["flags"], {}), Mapping):
        raise TypeError(f"{cls.__typename__} 'flags' must be a mapping of names to flags")

    flags = {}
    aliases = {}
    for name, flag in source.items():
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} flag names must be strings")
        elif not re.fullmatch(r"[^\W\d_][^\W_]*(-[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} flag name {name!r} must be a camelCase or kebab-case identifier")
        if isinstance(flag, Mapping):
            flag = Flag(**flag)
        elif not isinstance(flag, Flag):
            raise TypeError(f"{cls.__typename__} flag {name!r} must be a flag")

        if (name := camel(name)) in flags:
            raise ValueError(f"{cls.__typename__} flag name {name!r} is already in use")
        if name in RESERVED_NAMES:
            raise ValueError(f"{cls.__typename__} flag name {name!r} is reserved")
        if flag.alias is not None:
            if flag.alias in aliases:
                raise ValueError(f"{cls.__typename__} flag alias {flag.alias!r} is already in use")
            if flag.alias in RESERVED_ALIASES:
                raise ValueError(f"{cls.__typename__} flag alias {flag.alias!r} is reserved")
            aliases[flag.alias] = name
        flags[name] = flag

    metadata["flags"] = flags
    metadata["aliases"] = aliases


def _process_unions(cls, metadata):
    """
    Compile and validate mutually exclusive flag groups.

    Input
    - metadata["unions"]: Iterable[UnionGroup | Iterable[str]]

    Validation rules
    - every member must be a declared flag.
    - a member cannot be required on its own (use UnionGroup(required=True)).

    Raises
    - TypeError: when the structure is not an iterable of groups, or a member is required.
    - ValueError: when a member refers to an unknown flag.
    """
    if not isinstance(metadata["unions"], Iterable) or isinstance(metadata["unions"], str):
        raise TypeError(f"{cls.__typename__} 'unions' must be an iterable of union groups")

    unions = []
    for union in metadata["unions"]:
        if isinstance(union, str):
            raise TypeError(f"{cls.__typename__} 'unions' must be an iterable of union groups")
        if not isinstance(union, UnionGroup):
            union = UnionGroup(*union)
        for name in union:
            if name not in metadata["flags"]:
                raise ValueError(f"{cls.__typename__} union member {name!r} is not a declared flag")
            if metadata["flags"][name].required:
                raise TypeError(f"{cls.__typename__} union member {name!r} cannot be required")
        unions.append(union)
    metadata["unions"] = tuple(unions)


class Command(metaclass=SpecType):
    """
    A declared command: a handler plus the metadata that drives parsing and help.

    Lifecycle
    - Constructed from a handler (usually via command(...) or Registry.command).
    - Metadata is sanitized; flags are materialized into Flag specs and union
      groups are checked against them.
    - Immutable afterwards: fields are exposed as read-only properties.

    Calling a Command forwards keyword flags to its handler.
    """

    __introspectable__ = (
        "name",
        "descr",
        "version",
        "examples",
        "flags",
        "unions",
        "handler",
    )

    __displayable__ = (
        "name",
        "descr",
        "version",
        "flags",
    )

    def __new__(
            cls,
            handler,
            /,
            name=Unset,
            descr=Unset,
            version=Unset,
            examples=(),
            flags=Unset,
            unions=(),
    ):
        """
        Construct a Command from a handler.

        Parameters
        - handler: Callable[..., Any]: receives validated flags as keyword arguments;
          may return an awaitable.
        - name: str | Unset: dotted path; defaults to the handler's __name__.
        - descr: str | Unset: defaults to the handler's docstring.
        - version: str | Unset: shown as " v<version>" in detail help.
        - examples: Iterable[str]: example command lines shown verbatim.
        - flags: Mapping[str, Flag | Mapping]: the flag schema, in declaration order.
        - unions: Iterable[UnionGroup | Iterable[str]]: mutually exclusive groups.

        Raises
        - TypeError/ValueError on invalid metadata (see the _process_* helpers).
        """
        if not callable(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must be callable")

        metadata = {
            "handler": handler,
            "name": coalesce(name, getattr(handler, "__name__", Unset)),
            "descr": coalesce(descr, inspect.getdoc(handler) or Unset),
            "version": version,
            "examples": examples,
            "flags": flags,
            "unions": unions,
        }
        _process_strings(cls, metadata)
        _process_iterables(cls, metadata)
        _process_flags(cls, metadata)
        _process_unions(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __call__(self, /, **flags):
        return self._handler(**flags)

    def locate(self, switch, /):
        """
        Map a CLI switch to the internal flag name, or None when it is not declared.

        Accepted spellings: "--search-term", "--searchTerm" and the alias "-s".
        """
        if switch.startswith("--"):
            name = camel(switch[2:])
            return name if name in self._flags else None
        return self._aliases.get(switch[1:])


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct: cmd = command(func, name="x", ...)
    - Decorator:
        @command(name="x", ...)
        def func(...): ...
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


class Registry:
    """
    Ordered table of commands keyed by full dotted path.

    Behavior
    - register() rejects duplicate paths with DuplicateCommandError.
    - resolve() matches the longest registered path formed by the leading
      non-flag tokens joined with "." (so "search byName" and "search.byName"
      both resolve), and returns the command with the remaining tokens.
    - list() keeps declaration order, optionally filtered by namespace prefix.
    - Supports len(), iteration over names, `in` and item lookup by name.
    """

    def __init__(self, commands=(), /):
        self._commands = {}
        for object in commands:
            self.register(object)

    @classmethod
    def from_table(cls, table, /):
        """
        Build a registry from a declaration table.

        Shape
        - {name: {"handler": fn, "descr"?, "version"?, "examples"?, "flags"?, "unions"?}}
        """
        if not isinstance(table, Mapping):
            raise TypeError("from_table() argument must be a mapping")
        commands = []
        for name, spec in table.items():
            if not isinstance(spec, Mapping) or "handler" not in spec:
                raise TypeError(f"command {name!r} must be a mapping with a 'handler'")
            commands.append(Command(
                spec["handler"],
                name,
                spec.get("descr", Unset),
                spec.get("version", Unset),
                spec.get("examples", ()),
                spec.get("flags", Unset),
                spec.get("unions", ()),
            ))
        return cls(commands)

    def register(self, command, /):
        """
        Add a command under its dotted name and return it.
        """
        if not isinstance(command, Command):
            raise TypeError("register() argument must be a command")
        if command.name in self._commands:
            raise DuplicateCommandError("command %r is already registered" % command.name, input=command.name)
        self._commands[command.name] = command
        logger.debug("registered command %r (%d flags)", command.name, len(command.flags))
        return command

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Like command(...), but also registers the result here.
        """
        @rename("command")
        def wrapper(source, /):
            return self.register(command(source, *args, **kwargs))

        return wrapper(source) if source is not Unset else wrapper

    def resolve(self, tokens, /):
        """
        Return (command, tail) for the longest registered path at the head of tokens.

        Raises
        - UnknownCommandError: no prefix of the leading non-flag tokens is registered
          (including when there are no such tokens).
        """
        tokens = list(tokens)
        path = []
        for token in tokens:
            if token.startswith("-"):
                break
            path.append(token)

        for end in range(len(path), 0, -1):
            try:
                command = self._commands[".".join(path[:end])]
            except KeyError:
                continue
            logger.debug("resolved %r to command %r", path, command.name)
            return command, tokens[end:]

        if path:
            message = 'Unknown command "%s"' % ".".join(path)
        else:
            message = "No command specified"
        raise UnknownCommandError(message, input=".".join(path), commands=self.list())

    def namespace(self, tokens, /):
        """
        Return the longest dotted prefix of the leading tokens that groups commands, or None.
        """
        path = []
        for token in tokens:
            if token.startswith("-"):
                break
            path.append(token)
        for end in range(len(path), 0, -1):
            prefix = ".".join(path[:end])
            if any(name.startswith(prefix + ".") for name in self._commands):
                return prefix
        return None

    def list(self, prefix=Unset, /):
        """
        Return commands in declaration order, optionally only those under `prefix`.
        """
        if prefix is Unset:
            return tuple(self._commands.values())
        return tuple(
            command for name, command in self._commands.items()
            if name == prefix or name.startswith(prefix + ".")
        )

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(self._commands)

    def __contains__(self, name):
        return name in self._commands

    def __getitem__(self, name):
        return self._commands[name]

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._commands))


__all__ = (
    "Command",
    "command",
    "Registry",
)
