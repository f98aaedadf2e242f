"""
dotroute flag validation: turn tokenized flags into the handler's keyword arguments.

Phases (short-circuiting between phases, collecting within)
1. unions: more than one non-default member of a union group supplied
   → UnionConflictError, nothing else is reported.
2. coercion: raw tokens converted to the declared type.
3. checks: exclusive minimum, enum membership, refinement.
4. presence: required flags absent after defaulting ("Required"), required
   union groups with no member, then unknown flags and stray positionals.
Issues from phases 2-4 are reported together in flag declaration order as a
single ValidationError.
"""
import logging

from .faults import Issue, UnionConflictError, ValidationError
from .flags import Rejection
from .utils import Unset, kebab

logger = logging.getLogger(__name__)


def _switch(name):
    return "--" + kebab(name)


def _enumerate(switches):
    """
    join switches for a sentence: "--a and --b", "--a, --b and --c".
    """
    *head, last = switches
    return "%s and %s" % (", ".join(head), last) if head else last


def _unions(command, supplied):
    for group in command.unions:
        chosen = [
            name for name in group
            if name in supplied and not command.flags[name].defaulted(supplied[name])
        ]
        if len(chosen) > 1:
            switches = tuple(map(_switch, chosen))
            raise UnionConflictError(
                "%s are incompatible and cannot be used together" % _enumerate(switches),
                command=command,
                switches=switches,
            )


def validate(command, parsed, /):
    """
    Validate parsed arguments against a command's flag schema.

    Returns
    - dict[camelCase name -> value]: supplied flags coerced, unsupplied flags
      with a default set to it, unsupplied optional flags absent.

    Raises
    - UnionConflictError: two or more members of one union group supplied.
    - ValidationError: every coercion, constraint and presence issue, with the
      unknown flags and stray tokens of `parsed` last.
    """
    supplied = parsed.flags
    _unions(command, supplied)

    members = {name for group in command.unions for name in group}
    values = {}
    issues = []
    for name, flag in command.flags.items():
        if name in supplied:
            try:
                values[name] = flag.check(supplied[name])
            except Rejection as rejection:
                issues.append(Issue(_switch(name), rejection.message))
        elif flag.default is not Unset:
            values[name] = flag.default
        elif flag.required and name not in members:
            issues.append(Issue(_switch(name), "Required"))

    for group in command.unions:
        if group.required and not any(name in supplied for name in group):
            switches = tuple(map(_switch, group))
            issues.append(Issue(switches[0], "Expected one of %s" % ", ".join(switches)))

    issues.extend(Issue(token, "Unrecognized flag") for token in parsed.unknown)
    issues.extend(Issue(token, "Unexpected argument") for token in parsed.strays)

    if issues:
        logger.debug("%d issue(s) validating %r", len(issues), command.name)
        raise ValidationError(issues=tuple(issues), command=command)
    logger.debug("validated %r: %s", command.name, ", ".join(values) or "no flags")
    return values


__all__ = (
    "validate",
)
