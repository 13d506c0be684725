"""
Argument registry: declared descriptors, their name index and value cells.

The registry keeps three index-aligned structures:
- descriptors, in declaration order (drives usage rendering);
- cells, one per descriptor, holding the parsed values;
- an index from every bare name (short and long) to the descriptor position.

It also records the designated final positional, the application name and
whether the first token of a parse is skipped.
"""
import re

from .arguments import Descriptor
from .cells import Cell
from .faults import FaultCode, InvalidDeclarationError, KeyNotFoundError
from .utils import Unset

_FLAG = re.compile(r"-(?P<short>[^\W\d_])|--(?P<long>[^\W\d_](-?\w+)+)")


class Registry:
    """
    Ordered collection of descriptors with a name → position index.

    Invariants
    - no two descriptors share a name (checked on insert).
    - cells[i] always belongs to descriptors[i].
    - final is None or the position of the only descriptor matched positionally.
    """

    def __init__(self):
        self._descriptors = []
        self._cells = []
        self._index = {}
        self._final = None
        self.application = ""
        self.skip_first = False

    @property
    def descriptors(self):
        return tuple(self._descriptors)

    @property
    def cells(self):
        return tuple(self._cells)

    @property
    def final(self):
        """
        The final positional descriptor, or None.
        """
        return None if self._final is None else self._descriptors[self._final]

    def insert(self, descriptor, /):
        """
        Append a descriptor, create its empty cell and index its names.

        Returns the new position.

        Raises
        - InvalidDeclarationError when one of its names is already declared.
        """
        if not isinstance(descriptor, Descriptor):
            raise TypeError("insert() argument must be a descriptor")

        for name in descriptor.names:
            if name in self._index:
                raise InvalidDeclarationError(
                    "duplicate argument name %r" % name,
                    title="invalid declaration",
                    code=FaultCode.INVALID_DECLARATION,
                    hint="each short and long name can be declared only once",
                    name=name,
                    previous=self._descriptors[self._index[name]],
                )

        if descriptor.final and self._final is not None:
            self._demote(self._final)

        position = len(self._descriptors)
        self._descriptors.append(descriptor)
        self._cells.append(Cell.empty(descriptor.arity))
        for name in descriptor.names:
            self._index[name] = position
        if descriptor.final:
            self._final = position
        return position

    def _demote(self, position):
        # a previous final argument stays declared as a regular --name argument
        previous = self._descriptors[position]
        self._descriptors[position] = Descriptor(
            "--" + previous.long,
            nargs=previous.arity,
            optional=previous.optional,
            descr=Unset if previous.descr is None else previous.descr,
        )
        self._final = None

    def resolve(self, name, /):
        """
        Return the position of a declared name.

        The name may be bare ("name") or written with its dashes ("--name", "-n").

        Raises
        - KeyNotFoundError when the name is not declared.
        """
        if not isinstance(name, str):
            raise TypeError("argument names must be strings")
        bare = name.removeprefix("--") if name.startswith("--") else name.removeprefix("-")
        try:
            return self._index[bare]
        except KeyError:
            raise KeyNotFoundError(
                "argument %r is not declared" % name,
                title="key not found",
                code=FaultCode.KEY_NOT_FOUND,
                hint="declare it first or check the spelling",
                name=name,
            ) from None

    def match(self, flag, /):
        """
        Return the position a dashed flag ("-x", "--name") refers to, or None.

        Short flags only match short names and long flags only long names;
        the final positional never matches a flag.
        """
        if not (match := _FLAG.fullmatch(flag)):
            return None
        name = match["short"] or match["long"]
        position = self._index.get(name)
        if position == self._final:
            return None
        return position

    def reset(self):
        """
        Replace every cell with a fresh empty one (declarations are kept).
        """
        self._cells = [Cell.empty(descriptor.arity) for descriptor in self._descriptors]

    def clear(self):
        """
        Drop every declaration and cell, as if nothing had been declared.
        """
        self._descriptors.clear()
        self._cells.clear()
        self._index.clear()
        self._final = None

    def __getitem__(self, position, /):
        return self._descriptors[position], self._cells[position]

    def __len__(self):
        return len(self._descriptors)

    def __iter__(self):
        return zip(self._descriptors, self._cells)

    def __contains__(self, name, /):
        try:
            self.resolve(name)
        except (KeyNotFoundError, TypeError):
            return False
        return True


__all__ = (
    "Registry",
)
