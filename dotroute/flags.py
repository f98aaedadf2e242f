r"""
dotroute flag specifications and value validators.

Overview
- Specs
  • Flag: one named, typed flag of a command ("string", "number", "boolean";
    an enum is a string flag with choices).
  • UnionGroup: a set of flag names of which at most one may be supplied.

- Validators (a small closed set, composed per flag at construction time)
  • Coerce: converts the raw token to the declared type.
  • ExclusiveMinimum: numeric bound, the value must be strictly greater.
  • Membership: enum membership over the declared choices.
  • Predicate: custom refinement with a fallback message ("Invalid input").
  Each validator returns the (possibly converted) value or raises Rejection
  carrying the user-facing message.

Metadata (sanitized on construction)
- type: "string" | "number" | "boolean".
- alias: Unset | single letter (e.g. "s" for -s).
- descr: Unset | str, non-empty when provided (None when omitted).
- default: any value; Unset means "no default" (None is a real default).
  Boolean flags default to False.
- required: bool; boolean flags cannot be required.
- gt: Unset | int | float, only for number flags.
- choices: Iterable[str], only for string flags, duplicates rejected.
- refine / message: predicate over the coerced value and its failure message.

Quick example:
    >>> from dotroute.flags import Flag, UnionGroup
    >>> right = Flag("number", descr="The denominator", required=True, refine=lambda x: x != 0)
    >>> right.check("4")
    4
    >>> UnionGroup("step", "to").names
    ('step', 'to')
"""
import math
import re
from collections.abc import Iterable
from typing import final

from .pretty import pformat
from .utils import *

TYPES = ("string", "number", "boolean")

# decimal with optional exponent, or a signed Infinity
_NUMERIC = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Infinity)", re.ASCII)


class Rejection(Exception):
    """
    Raised by a validator when a value does not satisfy it.

    The message is the user-facing text of the resulting issue
    (e.g. "Expected number, received nan").
    """

    def __init__(self, message, /):
        super().__init__(message)
        self.message = message


def _typeof(value):
    """
    name the runtime type of a raw value the way issue messages spell it.
    """
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if value is None:
        return "null"
    return "string"


def _string(value):
    if not isinstance(value, str):
        raise Rejection("Expected string, received %s" % _typeof(value))
    return value


def _number(value):
    if not isinstance(value, str):
        raise Rejection("Expected number, received %s" % _typeof(value))
    if _NUMERIC.fullmatch(token := value.strip()):
        number = float(token)
    else:
        # unparsable tokens become NaN, which is never a valid number
        number = math.nan
    if math.isnan(number):
        raise Rejection("Expected number, received nan")
    return int(number) if number.is_integer() else number


def _boolean(value):
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise Rejection("Expected boolean, received %s" % _typeof(value))


@final
class Coerce:
    """
    Convert a raw token (str, or True for a value-less flag) to the declared type.
    """
    __slots__ = ("type", "_converter")

    def __init__(self, type, /):
        self.type = type
        self._converter = {"string": _string, "number": _number, "boolean": _boolean}[type]

    def __call__(self, value, /):
        return self._converter(value)

    def __repr__(self):
        return "coerce(%r)" % self.type


@final
class ExclusiveMinimum:
    """
    Require a number strictly greater than the bound.
    """
    __slots__ = ("bound",)

    def __init__(self, bound, /):
        self.bound = bound

    def __call__(self, value, /):
        if not value > self.bound:
            raise Rejection("Number must be greater than %s" % pformat(self.bound))
        return value

    def __repr__(self):
        return "exclusive-minimum(%r)" % self.bound


@final
class Membership:
    """
    Require a value from a closed set of choices.
    """
    __slots__ = ("choices",)

    def __init__(self, choices, /):
        self.choices = tuple(choices)

    def __call__(self, value, /):
        if value not in self.choices:
            raise Rejection("Invalid enum value. Expected %s, received %s" % (
                " | ".join(map(pformat, self.choices)), pformat(value)
            ))
        return value

    def __repr__(self):
        return "membership(%r)" % (self.choices,)


@final
class Predicate:
    """
    Require a custom predicate to hold; report `message` otherwise.
    """
    __slots__ = ("predicate", "message")

    def __init__(self, predicate, /, message="Invalid input"):
        self.predicate = predicate
        self.message = message

    def __call__(self, value, /):
        if not self.predicate(value):
            raise Rejection(self.message)
        return value

    def __repr__(self):
        return "predicate(%r, %r)" % (self.predicate, self.message)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the descriptive metadata of a flag.

    - type: must be one of TYPES.
    - alias: Unset or a single letter; normalized to None when omitted.
    - descr: Unset or non-empty string after trimming; normalized to None when omitted.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a string field is empty or not an accepted value.
    """
    if not isinstance(type := metadata["type"], str):
        raise TypeError(f"{cls.__typename__} 'type' must be a string")
    elif type not in TYPES:
        raise ValueError(f"{cls.__typename__} 'type' must be one of: {', '.join(TYPES)}")

    if not isinstance(alias := metadata["alias"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string")
    elif isinstance(alias, str) and not (len(alias) == 1 and alias.isalpha()):
        raise ValueError(f"{cls.__typename__} 'alias' must be a single letter")
    metadata["alias"] = coalesce(alias)

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_constraints(cls, metadata, /):
    """
    Internal: validate the value constraints of a flag against its type.

    - required: boolean flags are always optional (their absence is False).
    - gt: only number flags may declare an exclusive minimum; must be a real number.
    - choices: only string flags may declare choices; strings, no duplicates.
    - refine: callable or Unset; message: non-empty string or Unset.
    - default: boolean flags default to False when Unset.
    """
    type = metadata["type"]

    if metadata["required"] and type == "boolean":
        raise TypeError(f"boolean {cls.__typename__} cannot be required")

    if (gt := metadata["gt"]) is not Unset:
        if type != "number":
            raise TypeError(f"{type} {cls.__typename__} cannot have an exclusive minimum")
        if isinstance(gt, bool) or not isinstance(gt, int | float) or math.isnan(gt):
            raise TypeError(f"{cls.__typename__} 'gt' must be a number")
    metadata["gt"] = coalesce(gt)

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
    sanitized = []
    for choice in choices:
        if not isinstance(choice, str):
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    if sanitized and type != "string":
        raise TypeError(f"{type} {cls.__typename__} cannot have choices")
    metadata["choices"] = tuple(sanitized)

    if not callable(refine := metadata["refine"]) and refine is not Unset:
        raise TypeError(f"{cls.__typename__} 'refine' must be callable")
    metadata["refine"] = coalesce(refine)

    if not isinstance(message := metadata["message"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'message' must be a string")
    elif isinstance(message, str) and not (message := message.strip()):
        raise ValueError(f"{cls.__typename__} 'message' cannot be empty")
    metadata["message"] = coalesce(message, "Invalid input")

    if type == "boolean":
        metadata["default"] = coalesce(metadata["default"], False)


class Flag(metaclass=SpecType):
    """
    Named, typed flag specification.

    A Flag does not know its own name: it is bound to one by the command that
    declares it (the mapping key, camelCase internally, kebab-case on the CLI).

    Highlights
    - Value-taking flags ("string", "number") consume exactly one token;
      boolean flags consume none.
    - check(value) runs the validator chain and returns the coerced value or
      raises Rejection on the first failing validator.
    - default stays Unset when no default was declared, so a None default is
      distinguishable from "no default".

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "type",
        "alias",
        "descr",
        "default",
        "required",
        "gt",
        "choices",
        "refine",
        "message",
    )

    __displayable__ = (
        "type",
        "alias",
        "descr",
        "default",
        "required",
    )

    def __new__(
            cls,
            type="string",
            *,
            alias=Unset,
            descr=Unset,
            default=Unset,
            required=False,
            gt=Unset,
            choices=(),
            refine=Unset,
            message=Unset,
    ):
        """
        Construct a Flag with the provided metadata.

        Parameters
        - type: "string" | "number" | "boolean"
        - alias: Unset | str: single letter used as -<alias>.
        - descr: Unset | str: help description.
        - default: Any: value used when the flag is not supplied.
        - required: bool: report "Required" when absent (and no default).
        - gt: Unset | int | float: exclusive minimum (number flags).
        - choices: Iterable[str]: enum values (string flags).
        - refine: Unset | Callable[[Any], bool]: custom predicate.
        - message: Unset | str: refinement failure message ("Invalid input").
        """
        metadata = {
            "type": type,
            "alias": alias,
            "descr": descr,
            "default": default,
            "required": bool(required),
            "gt": gt,
            "choices": choices,
            "refine": refine,
            "message": message,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_constraints(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        validators = [Coerce(self.type)]
        if self.gt is not None:
            validators.append(ExclusiveMinimum(self.gt))
        if self.choices:
            validators.append(Membership(self.choices))
        if self.refine is not None:
            validators.append(Predicate(self.refine, self.message))
        self._validators = tuple(validators)
        return self

    @property
    def boolean(self):
        """
        True for presence-only flags (no value token).
        """
        return self.type == "boolean"

    @property
    def validators(self):
        """
        The composed validator chain, in application order.
        """
        return self._validators

    def check(self, value, /):
        """
        Run the validator chain over a raw value and return the coerced result.

        Raises
        - Rejection: from the first validator that refuses the value.
        """
        for validator in self._validators:
            value = validator(value)
        return value

    def defaulted(self, value, /):
        """
        Return True when a raw value coerces to this flag's declared default.

        Used by the union check: supplying a member with its default value
        does not count as choosing that member.
        """
        if self.default is Unset:
            return False
        try:
            return self.check(value) == self.default
        except Rejection:
            return False


class UnionGroup(metaclass=SpecType):
    """
    A set of mutually exclusive flag names within one command.

    Rules
    - at least two distinct names; names may be given in camelCase or kebab-case
      and are stored camelCase.
    - required=True means exactly one member must be supplied.
    """

    __introspectable__ = (
        "names",
        "required",
    )

    def __new__(cls, *names, required=False):
        sanitized = []
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} names must be strings")
            elif not (name := name.strip()):
                raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
            elif (name := camel(name)) in sanitized:
                raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
            sanitized.append(name)
        if len(sanitized) < 2:
            raise ValueError(f"{cls.__typename__} must have at least two names")

        self = super().__new__(cls)
        self._names = tuple(sanitized)
        self._required = bool(required)
        return self

    def __iter__(self):
        return iter(self._names)

    def __contains__(self, name):
        return name in self._names

    def __len__(self):
        return len(self._names)


__all__ = (
    "TYPES",
    "Rejection",
    "Coerce",
    "ExclusiveMinimum",
    "Membership",
    "Predicate",
    "Flag",
    "UnionGroup",
)
