"""
Argcell faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  (errors and warnings). Codes are grouped by domain to keep logs/searches predictable.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves in a short, lowercased, actionable way.
- ParserExit: groups every error collected by a deferred parse.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The parser collects faults while declaring/parsing and calls trigger(fault, **ctx).
- In non-shell mode, exceptions are raised and warnings go through warnings.warn;
  in shell mode, they are rendered via rich on stderr.
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - declarations (2110x)
      • INVALID_DECLARATION
    - parsing (2111x)
      • UNKNOWN_ARGUMENT, UNEXPECTED_VALUE, MISSING_VALUE, MISSING_REQUIRED_ARGUMENT
    - retrieval (2112x)
      • TYPE_MISMATCH, KEY_NOT_FOUND
    - warnings (22xxx)
      • REASSIGNED_ARGUMENT
    """
    # --- declaration errors (21xxx) ---
    INVALID_DECLARATION         = 21101

    # --- parsing errors (21xxx) ---
    UNKNOWN_ARGUMENT            = 21111
    UNEXPECTED_VALUE            = 21112
    MISSING_VALUE               = 21113
    MISSING_REQUIRED_ARGUMENT   = 21114

    # --- retrieval errors (21xxx) ---
    TYPE_MISMATCH               = 21121
    KEY_NOT_FOUND               = 21122

    # --- warnings (22xxx) ---
    REASSIGNED_ARGUMENT         = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title, body):
    """
    shared rich layout for errors and warnings: a bracketed header, the message and a hint.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    header = Text.assemble(
        "[ ",
        text(options.get("application") or getattr(main, "__prog__", "argcell"), "prog-name"),
    )
    if (code := options.get("code")) is not None:
        header.append(" — ").append(text(code.normalize(), "code"))
    header.append(" | ").append(text(options.get("title", type(fault).__name__).title(), title)).append(" ]")

    message = text(fault.message, body)
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if options.get("fancy", False):
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(*renders), title=header, title_align="left", width=width)

    return Group(header, *renders)


class ParserException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title", "error-message")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidDeclarationError(ParserException, ValueError): ...
class UnknownArgumentError(ParserException): ...
class UnexpectedValueError(ParserException): ...
class MissingValueError(ParserException): ...
class MissingRequiredArgumentError(ParserException): ...
class TypeMismatchError(ParserException, TypeError): ...


class KeyNotFoundError(ParserException, KeyError):
    # KeyError quotes its argument in str(); keep the plain message instead.
    __str__ = ParserException.__str__


class ParserWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title", "warning-message")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 4))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ReassignedArgumentWarning(ParserWarning): ...


class ParserExit(ExceptionGroup[ParserException]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Exit)
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = text(self.options.get("application") or getattr(main, "__prog__", "argcell"), "prog-name")
        header = Text.assemble("[ ", prog, " — ", text(self.message.title(), "title"), " ]")

        renders = [copy.replace(exception, ratio=2/3) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich console; otherwise exceptions
      are raised and warnings are emitted through the warnings module.

    typical options
    - application, shell, fancy, colorful, deferred, title, code, hint, and any other
      context the reporter may want to show (e.g., token/index/name).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParserException",
    "InvalidDeclarationError",
    "UnknownArgumentError",
    "UnexpectedValueError",
    "MissingValueError",
    "MissingRequiredArgumentError",
    "TypeMismatchError",
    "KeyNotFoundError",
    "ParserWarning",
    "ReassignedArgumentWarning",
    "ParserExit",
    "trigger",
)
