"""
dotroute help rendering.

Forms
- list form (render_list): the "Commands:" table followed by the process-wide
  "Flags:" table. Used for root --help, namespace --help (e.g. "search --help")
  and underneath unknown-command errors.
- detail form (render_detail): one command's name/version, description,
  usage line, flags table and examples. Used for "<command> --help" and
  underneath validation errors.

Layout rules
- every table row is "  " + signature padded to (longest signature + 8) + description.
- each table computes its own column from its own rows.
- rows whose description is empty keep their padding (trailing spaces).
- renderers return rich Text without the final newline; the console adds it.

Styling
- plain when colorful=False (the default); otherwise the palette below applies.
- a mapping named __styles__ in __main__ overrides any palette entry.
"""
from collections import defaultdict

from rich.text import Text

from .pretty import pformat
from .utils import kebab

PADDING = 2
GUTTER = 8

GLOBAL_FLAGS = (
    ("-h, --help", "Show help"),
    ("    --verbose-errors", "Throw raw errors (by default errors are summarised)"),
)


def _palette(colorful):
    styles = defaultdict(str, {
        # === Sections ===
        "section-label": "bold #FFFFFF",
        "program-name": "bold #FF4D94",
        "version": "#9CA3AF",
        "description-section": "italic #A3A3A3",
        "usage-section": "bold #36C5F0",

        # === Tables ===
        "command-name": "bold #36C5F0",
        "flag-name": "bold #00E6FF",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",

        # === Examples ===
        "example": "#E5E7EB",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _table(rows):
    """
    Lay out (signature, description) pairs on a shared column.

    Both elements of each pair are Text; the column is the longest signature
    plus the gutter.
    """
    width = max((len(signature) for signature, _ in rows), default=0) + GUTTER
    lines = []
    for signature, descr in rows:
        line = Text(" " * PADDING)
        line.append_text(signature)
        line.append(" " * (width - len(signature)))
        line.append_text(descr)
        lines.append(line)
    return lines


def _global_rows(styler):
    return [
        (Text(signature, styler("flag-name")), Text(descr, styler("argument-description")))
        for signature, descr in GLOBAL_FLAGS
    ]


def signature(name, flag, /):
    """
    Return the CLI signature of a declared flag: "-s, --status <string>" or "    --name <string>".
    """
    head = "-%s, " % flag.alias if flag.alias else " " * 4
    text = "%s--%s" % (head, kebab(name))
    if not flag.boolean:
        text += " <%s>" % flag.type
    return text


def description(flag, /):
    """
    Return the help description of a declared flag with its inline metadata suffixes.
    """
    parts = []
    if flag.descr:
        parts.append(flag.descr)
    if flag.choices:
        parts.append("Enum: %s" % ",".join(flag.choices))
    if flag.gt is not None:
        parts.append("Exclusive minimum: %s" % pformat(flag.gt))
    return "; ".join(parts)


def render_list(commands, /, *, colorful=False):
    """
    Render the list form for the given commands (in the given order).
    """
    styler = _palette(colorful)

    rows = [
        (Text(command.name, styler("command-name")), Text(command.descr or "", styler("argument-description")))
        for command in commands
    ]

    lines = [Text("Commands:", styler("section-label"))]
    lines.extend(_table(rows))
    lines.append(Text())
    lines.append(Text("Flags:", styler("section-label")))
    lines.extend(_table(_global_rows(styler)))
    return Text("\n").join(lines)


def render_detail(command, /, *, colorful=False):
    """
    Render the detail form of one command.
    """
    styler = _palette(colorful)

    header = Text(command.name, styler("program-name"))
    if command.version:
        header.append(" v%s" % command.version, styler("version"))
    lines = [header, Text()]

    if command.descr:
        lines.append(Text(command.descr, styler("description-section")))
        lines.append(Text())

    lines.append(Text("Usage:", styler("section-label")))
    lines.append(Text.assemble(" " * PADDING, ("%s [flags...]" % command.name, styler("usage-section"))))
    lines.append(Text())

    rows = _global_rows(styler)[:1]
    for name, flag in command.flags.items():
        signed = Text(signature(name, flag), styler("flag-name"))
        if not flag.boolean:
            # the type hint is the trailing " <type>" segment
            signed.stylize(styler("metavar"), len(signed) - len(flag.type) - 2)
        rows.append((signed, Text(description(flag), styler("argument-description"))))

    lines.append(Text("Flags:", styler("section-label")))
    lines.extend(_table(rows))

    if command.examples:
        lines.append(Text())
        lines.append(Text("Examples:", styler("section-label")))
        for example in command.examples:
            lines.append(Text.assemble(" " * PADDING, (example, styler("example"))))

    return Text("\n").join(lines)


__all__ = (
    "GLOBAL_FLAGS",
    "signature",
    "description",
    "render_list",
    "render_detail",
)
