"""
Usage banners and help pages.

Usage banner
- "Usage: <application> " followed by the required arguments, then the optional
  ones (both in declaration order), then the final positional argument.
- each argument renders as its flag followed by its metavars:
  • Fixed(n):      --name NAME NAME NAME ...   (at most three metavars, "..." above three)
  • Variable("*"): --name [NAME NAME...]
  • Variable("+"): --name NAME [NAME...]
  • optional arguments are wrapped in [...]
  • the final argument has no flag.
- lines wrap at 80 columns; continuation lines are indented to the width of
  the "Usage: <application> " prefix (NARROW_INDENT columns when that prefix
  takes more than half the line). Wrapping is decided on the real column of
  the current line.

Palette keys (override through a __styles__ mapping in __main__)
- usage-label, program-name, option-name, final-name, metavar, bracket
- group-label, argument-description
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.text import Text

from .arguments import Fixed, Multiplicity, Variable

WIDTH = 80
NARROW_INDENT = 4


def _styler(colorful):
    styles = defaultdict(str, {
        # === Head section ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop

        # === Names / metavars ===
        "option-name": "bold #00E6FF",  # CYAN for flags
        "final-name": "bold #22C55E",  # GREEN for the trailing positional
        "metavar": "bold #FFD600",  # AMBER for parameters
        "bracket": "#737373",  # Dim gray for optional markers

        # === Help groups ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _metavars(descriptor, styler):
    metavar = Text(descriptor.metavar, styler("final-name" if descriptor.final else "metavar"))
    segments = []
    match descriptor.arity:
        case Fixed(count):
            segments.extend(metavar.copy() for _ in range(min(count, 3)))
            if count > 3:
                segments.append(Text("..."))
        case Variable(Multiplicity.ZERO_OR_MORE):
            segments.append(Text.assemble(
                ("[", styler("bracket")), metavar.copy(), " ", metavar.copy(), ("...]", styler("bracket"))
            ))
        case Variable(Multiplicity.ONE_OR_MORE):
            segments.append(metavar.copy())
            segments.append(Text.assemble(
                ("[", styler("bracket")), metavar.copy(), ("...]", styler("bracket"))
            ))
    return segments


def render_argument(descriptor, /, *, colorful=False):
    """
    Render one descriptor as it appears in a usage banner.
    """
    styler = _styler(colorful)
    segments = [] if descriptor.final else [Text(descriptor.flag, styler("option-name"))]
    segments.extend(_metavars(descriptor, styler))

    rendering = Text(" ").join(segments)
    if descriptor.optional:
        rendering = Text.assemble(("[", styler("bracket")), rendering, ("]", styler("bracket")))
    return rendering


def _ordered(registry):
    final = registry.final
    required = [descriptor for descriptor in registry.descriptors if not descriptor.optional and descriptor is not final]
    optional = [descriptor for descriptor in registry.descriptors if descriptor.optional and descriptor is not final]
    return required + optional + ([final] if final is not None else [])


def render(registry, /, *, colorful=False, width=WIDTH):
    """
    Build the usage banner of a registry as rich Text.

    The plain form (Text.plain) is the canonical usage string.

    Continuation lines are indented to the width of the "Usage: <application>"
    prefix. When that prefix is wider than half the line, they use a fixed
    indent of NARROW_INDENT columns instead and the first argument may move
    to the second line. A single argument wider than the line is never split.
    """
    styler = _styler(colorful)

    usage = Text()
    usage.append("Usage", styler("usage-label")).append(":")
    if registry.application:
        usage.append(" ").append(registry.application, styler("program-name"))

    indent = len(usage) + 1  # column where every argument line starts
    if indent > width // 2:
        indent = NARROW_INDENT
    column = len(usage)  # length of the current line, never modulo the whole banner

    for descriptor in _ordered(registry):
        rendering = render_argument(descriptor, colorful=colorful)
        if column > indent and column + 1 + len(rendering) > width:
            usage.append("\n").append(" " * indent).append(rendering)
            column = indent + len(rendering)
        else:
            usage.append(" ").append(rendering)
            column += 1 + len(rendering)

    return usage


def render_help(registry, /, *, colorful=False, width=WIDTH):
    """
    Build a help page: the usage banner followed by the required and optional groups.

    Each entry lists every flag spelling of the argument and its metavars, then
    its description aligned on a hanging indent.
    """
    styler = _styler(colorful)
    console = Console(width=width)

    renders = [render(registry, colorful=colorful, width=width).append("\n")]

    padding = 2   # Leading spaces before the first column
    indent = 24   # Column for description wrap/hanging indent

    ordered = _ordered(registry)
    groups = {
        "required": [descriptor for descriptor in ordered if not descriptor.optional],
        "optional": [descriptor for descriptor in ordered if descriptor.optional],
    }

    for group, descriptors in groups.items():
        if not descriptors:
            continue
        section = Text()
        section.append(group, styler("group-label")).append(":").append("\n")

        for descriptor in descriptors:
            segments = [Text(", ").join(Text(flag, styler("option-name")) for flag in descriptor.flags)]
            segments.extend(_metavars(descriptor, styler))
            entry = Text(" " * padding).append(Text(" ").join(segment for segment in segments if segment))

            if descriptor.descr:
                descr = Text(descriptor.descr, styler("argument-description"))
                if len(entry) >= indent:
                    entry.append("\n").append(" " * indent)
                else:
                    entry.append(" " * (indent - len(entry)))
                wrapped = descr.wrap(console, width - indent)
                entry.append(wrapped[0])
                for line in wrapped[1:]:
                    entry.append("\n").append(" " * indent).append(line)

            section.append(entry).append("\n")
        renders.append(section)

    renders[-1].rstrip()
    return Group(*renders)


__all__ = (
    "WIDTH",
    "NARROW_INDENT",
    "render_argument",
    "render",
    "render_help",
)
