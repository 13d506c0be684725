"""
Typed value cells.

A cell stores exactly one tagged value and hands it back only when the caller
names the exact target type of that value. The closed set of tags is:

- Scalar(value)    → retrieved as str    (fixed arity of one)
- Sequence(values) → retrieved as list   (fixed arity above one, variable arity)
                     or tuple
- Switch(present)  → retrieved as bool   (fixed arity of zero)

Any other requested type raises TypeMismatchError; nothing is ever converted.

    >>> cell = Cell(Scalar("Ada"))
    >>> cell.retrieve(str)
    'Ada'
    >>> cell.retrieve(list)
    Traceback (most recent call last):
    ...
    argcell.faults.TypeMismatchError: stored value is a scalar, retrieve it as 'str' instead of 'list'
"""
import builtins
from typing import NamedTuple

from rich.text import Text

from .arguments import Fixed, Variable
from .faults import FaultCode, TypeMismatchError


class Scalar(NamedTuple):
    value: str = ""

    __targets__ = (str,)


class Sequence(NamedTuple):
    values: tuple[str, ...] = ()

    __targets__ = (list, tuple)


class Switch(NamedTuple):
    present: bool = False

    __targets__ = (bool,)


_VARIANTS = (Scalar, Sequence, Switch)


class Cell:
    """
    Storage slot for one argument, index-aligned with the registry.

    Attributes
    - content: the current tagged value (read-only, replace it through assign()).
    - bound: True once a parse stored a value in this cell.
    """

    __slots__ = ("_content", "_bound")

    def __init__(self, content=Scalar(), /, *, bound=False):
        self._content = _validate(content)
        self._bound = bool(bound)

    @classmethod
    def empty(cls, arity, /):
        """
        Build the unset cell that matches an arity.
        """
        match arity:
            case Fixed(0):
                return cls(Switch())
            case Fixed(1):
                return cls(Scalar())
            case Fixed() | Variable():
                return cls(Sequence())
            case _:
                raise TypeError("Cell.empty() argument must be an arity")

    @property
    def content(self):
        return self._content

    @property
    def bound(self):
        return self._bound

    def assign(self, content, /):
        """
        Replace the stored value and its tag in one step.

        The new content is validated before anything changes, so a rejected
        assignment leaves the previous value untouched.
        """
        content = _validate(content)
        self._content, self._bound = content, True
        return self

    def retrieve(self, type=str, /):
        """
        Return the stored value as `type`, which must be the tag's own type.
        """
        content = self._content
        if type not in content.__targets__:
            kind = _KINDS[builtins.type(content)]
            raise TypeMismatchError(
                "stored value is a %s, retrieve it as %r instead of %r" % (
                    kind, content.__targets__[0].__name__, getattr(type, "__name__", repr(type))
                ),
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                hint="request the value as %s" % " or ".join(repr(target.__name__) for target in content.__targets__),
                stored=builtins.type(content),
                requested=type,
            )
        match content:
            case Scalar(value):
                return value
            case Sequence(values):
                return type(values)
            case Switch(present):
                return present

    @property
    def count(self):
        """
        Number of values bound: 0/1 for scalars and switches, the element count for sequences.
        """
        match self._content:
            case Scalar():
                return int(self._bound)
            case Sequence(values):
                return len(values)
            case Switch(present):
                return int(present)

    def __copy__(self):
        return type(self)(self._content, bound=self._bound)

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return builtins.type(self._content) is builtins.type(other._content) and self._content == other._content

    __hash__ = None

    def __repr__(self):
        return "cell(%r, bound=%r)" % (self._content, self._bound)

    def __rich_repr__(self):
        yield self._content
        yield "bound", self._bound

    def __rich__(self):
        match self._content:
            case Scalar(value):
                return Text(repr(value), style="green" if self._bound else "dim")
            case Sequence(values):
                return Text(repr(list(values)), style="green" if self._bound else "dim")
            case Switch(present):
                return Text(repr(present), style="green" if present else "dim")


_KINDS = {
    Scalar: "scalar",
    Sequence: "sequence",
    Switch: "switch",
}


def _validate(content):
    if builtins.type(content) not in _VARIANTS:
        raise TypeError("cell content must be a Scalar, a Sequence or a Switch")
    match content:
        case Scalar(value) if not isinstance(value, str):
            raise TypeError("Scalar value must be a string")
        case Sequence(values) if not isinstance(values, tuple) or not all(isinstance(value, str) for value in values):
            raise TypeError("Sequence values must be a tuple of strings")
        case Switch(present) if not isinstance(present, bool):
            raise TypeError("Switch presence must be a boolean")
    return content


__all__ = (
    "Scalar",
    "Sequence",
    "Switch",
    "Cell",
)
