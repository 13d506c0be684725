r"""
Argcell argument model: arities and descriptors.

Overview
- Arity (tagged variant)
  • Fixed(count): exactly `count` values per occurrence; Fixed(0) is a presence-only switch.
  • Variable(kind): Multiplicity.ONE_OR_MORE ("+") or Multiplicity.ZERO_OR_MORE ("*").
  • arity(nargs): normalize "+", "*", an int >= 0 or an arity into a Fixed | Variable.

- Descriptor
  • Immutable declaration of one argument: short/long name, arity, optionality,
    final (trailing positional) marker and an optional description.
  • Read-only fields are exposed through properties backed by guarded storage.

Naming rules (sanitized on construction)
- short names are written "-x" and stored as "x".
- long names are written "--name" and stored as "name" (more than one character).
- the final positional is written "name" or "--name" and stored as "name".
- a name is a letter followed by letters, digits, underscores or single hyphens.

Quick example:
    >>> descriptor = Descriptor("-n", "--name", nargs=1, optional=False)
    >>> descriptor.short, descriptor.long, descriptor.arity
    ('n', 'name', Fixed(count=1))
"""
import functools
import operator
import re
from enum import StrEnum
from typing import NamedTuple

from .faults import FaultCode, InvalidDeclarationError
from .internals import StorageGuard, view
from .utils import *


class Multiplicity(StrEnum):
    ONE_OR_MORE = "+"
    ZERO_OR_MORE = "*"


class Fixed(NamedTuple):
    count: int


class Variable(NamedTuple):
    kind: Multiplicity


def _invalid(message, hint, **options):
    return InvalidDeclarationError(
        message,
        title="invalid declaration",
        code=FaultCode.INVALID_DECLARATION,
        hint=hint,
        **options
    )


def arity(nargs, /):
    """
    Normalize a declaration-time arity into Fixed | Variable.

    Accepted forms
    - Fixed(count) / Variable(kind): returned after validation.
    - int >= 0: Fixed(nargs). Booleans are rejected.
    - "+" / "*": Variable(Multiplicity(nargs)).

    Raises
    - InvalidDeclarationError for anything else.
    """
    match nargs:
        case Fixed(bool()) | bool():
            pass
        case Fixed(int(count)) if count >= 0:
            return nargs
        case Variable(Multiplicity()):
            return nargs
        case int() if nargs >= 0:
            return Fixed(nargs)
        case "+" | "*":
            return Variable(Multiplicity(nargs))
    raise _invalid(
        "bad arity %r" % (nargs,),
        "use a non-negative integer, '+' (one or more) or '*' (zero or more)",
        nargs=nargs,
    )


_NAME = re.compile(r"[^\W\d_](-?\w+)*")


def _sanitize_flag(name):
    """
    Internal: split a dashed flag spelling into ("short" | "long", bare name).
    """
    if not isinstance(name, str):
        raise TypeError("argument names must be strings")

    if name.startswith("--"):
        bare = name[2:]
        if len(bare) < 2:
            raise _invalid(
                "bad argument name %r, double-dashed names must be multi-character" % name,
                "write single-character names with one dash (for example: -%s)" % bare if bare else
                "add a name after '--' (for example: --name)",
                name=name,
            )
        kind = "long"
    elif name.startswith("-"):
        bare = name[1:]
        if len(bare) != 1:
            raise _invalid(
                "bad argument name %r, single-dashed names must be one character" % name,
                "write multi-character names with two dashes (for example: --%s)" % bare if bare else
                "add a character after '-' (for example: -n)",
                name=name,
            )
        kind = "short"
    elif len(name) == 1:
        raise _invalid(
            "bad argument name %r, short names must begin with '-'" % name,
            "write it as -%s" % name,
            name=name,
        )
    else:
        raise _invalid(
            "bad argument name %r, multi-character names must begin with '--'" % name,
            "write it as --%s" % name if name else "give the argument a name (for example: --name)",
            name=name,
        )

    if not _NAME.fullmatch(bare):
        raise _invalid(
            "bad argument name %r, names are a letter followed by letters, digits, underscores or single hyphens" % name,
            "rename it (for example: --dry-run or -n)",
            name=name,
        )
    return kind, bare


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the flag spellings of a regular descriptor.

    Responsibilities
    - one or two names, at most one short and one long.
    - stores the bare names under 'short' and 'long' ("" when absent).
    """
    names = metadata.pop("names")
    if not 1 <= len(names) <= 2:
        raise _invalid(
            "%s takes one or two names but %d were given" % (cls.__typename__, len(names)),
            "declare a short name, a long name, or both (for example: -n --name)",
            names=names,
        )

    metadata["short"] = metadata["long"] = ""
    for name in names:
        kind, bare = _sanitize_flag(name)
        if metadata[kind]:
            raise _invalid(
                "%s cannot have two %s names (%r)" % (cls.__typename__, kind, names),
                "keep one short name and/or one long name",
                names=names,
            )
        metadata[kind] = bare


def _sanitize_final(cls, metadata, /):
    """
    Internal: validate the name of the trailing positional descriptor.

    The name may be written bare ("files") or double-dashed ("--files") and is
    always stored as a long name.
    """
    names = metadata.pop("names")
    if len(names) != 1:
        raise _invalid(
            "final %s takes exactly one name but %d were given" % (cls.__typename__, len(names)),
            "declare the final argument with a single multi-character name",
            names=names,
        )
    name, = names
    if not isinstance(name, str):
        raise TypeError("argument names must be strings")

    bare = name.removeprefix("--")
    if bare.startswith("-") or len(bare) < 2 or not _NAME.fullmatch(bare):
        raise _invalid(
            "bad final argument name %r" % name,
            "use a multi-character name such as 'files' or '--files'",
            name=name,
        )
    metadata["short"] = ""
    metadata["long"] = bare


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize arity, optionality and description.
    """
    metadata["arity"] = arity(metadata["arity"])
    metadata["optional"] = bool(metadata["optional"])

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class DescriptorType(type):
    """
    Metaclass giving descriptors read-only fields and stable representations.

    - __typename__ is derived from the class name and used in messages.
    - every name in __introspectable__ becomes a read-only property (see view()).
    - __repr__/__rich_repr__ list the introspectable fields.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Descriptor(StorageGuard, metaclass=DescriptorType):
    """
    Immutable declaration of one argument.

    Fields
    - short: str, bare single-character name or "".
    - long: str, bare multi-character name or "".
    - arity: Fixed | Variable.
    - optional: bool, False means the argument is required.
    - final: bool, True for the trailing positional argument.
    - descr: str | None, one-line description for help pages.
    """

    __introspectable__ = (
        "short",
        "long",
        "arity",
        "optional",
        "final",
        "descr",
    )

    def __new__(cls, *names, nargs=1, optional=True, final=False, descr=Unset):
        """
        Construct a descriptor from its dashed names.

        Parameters
        - names: one or two of "-x" / "--name" (a single bare or double-dashed
          name when final is True).
        - nargs: int >= 0 | "+" | "*" | Fixed | Variable.
        - optional: bool.
        - final: bool, marks the trailing positional argument.
        - descr: Unset | str.

        Raises
        - InvalidDeclarationError on malformed names or arities.
        """
        metadata = {
            "names": names,
            "arity": nargs,
            "optional": optional,
            "final": bool(final),
            "descr": descr,
        }
        if metadata["final"]:
            _sanitize_final(cls, metadata)
        else:
            _sanitize_names(cls, metadata)
        _sanitize_metadata(cls, metadata)

        if metadata["final"] and metadata["arity"] == Fixed(0):
            raise _invalid(
                "final argument %r cannot be a switch" % metadata["long"],
                "give the final argument at least one value, '+' or '*'",
                name=metadata["long"],
            )

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "-" + name, object)
        return self

    @property
    def name(self):
        """
        Primary bare name: the long name when present, otherwise the short one.
        """
        return self.long or self.short

    @property
    def names(self):
        """
        Bare names, short first.
        """
        return tuple(name for name in (self.short, self.long) if name)

    @property
    def flags(self):
        """
        Dashed spellings accepted on the command line, short first (empty for the final argument).
        """
        if self.final:
            return ()
        flags = ()
        if self.short:
            flags += ("-" + self.short,)
        if self.long:
            flags += ("--" + self.long,)
        return flags

    @property
    def flag(self):
        """
        Spelling shown in usage banners: the long flag when present.
        """
        if self.final:
            return ""
        return "--" + self.long if self.long else "-" + self.short

    @property
    def metavar(self):
        return upper(self.name)


__all__ = (
    "Multiplicity",
    "Fixed",
    "Variable",
    "arity",
    "Descriptor",
)

# Keep the metaclass out of star-imports and documentation.
del DescriptorType
