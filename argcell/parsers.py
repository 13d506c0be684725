"""
Argcell parser: declare arguments, parse tokens, retrieve typed values.

What this module provides
- ArgumentParser: the public facade over a Registry.
  • Declaration: declare(...), declare_final(...), ignore_first_token(...), application_name(...).
  • Parsing: parse(tokens) in a single left-to-right pass.
  • Retrieval: retrieve(name, type), exists(name), count(name), is_empty(), clear().
  • Usage: usage(), print_usage(), print_help(), and rich rendering (__rich__).

Quick start
    from argcell import ArgumentParser

    parser = ArgumentParser()
    parser.declare("-n", "--name", optional=False)
    parser.declare("--inputs", nargs="+")
    parser.declare_final("output", optional=True)

    parser.parse(["app", "--name", "Ada", "--inputs", "a.txt", "b.txt", "out.txt"])

    parser.retrieve("name")              # "Ada"
    parser.retrieve("inputs", list)      # ["a.txt", "b.txt"]
    parser.retrieve("output")            # "out.txt"

Parsing rules
- the first token is the program token: it becomes the application name unless
  one was set explicitly or ignore_first_token(True) was requested; it is never matched.
- "-x" / "--name" (or "--name=value") select a declared argument, which then
  consumes values according to its arity; a run stops only at the next declared
  flag, so an undeclared dash-shaped token inside a run ("--bogus") is a value.
- outside a run, undeclared dash-shaped tokens are unknown arguments; plain
  tokens are held back for the final positional argument.
- every required argument must be bound once the pass is over.

Runtime options
- shell: print faults (and the usage banner) on stderr and exit with status 1
  instead of raising.
- deferred: keep parsing after an error and raise every collected error at
  once in a ParserExit group.
- colorful / fancy: styling of rendered faults, usage and help.

Failure policy
- after a failed parse the values held by the parser are unspecified; every
  cell is reset when the next parse starts, so the parser can be reused as is.
"""
import copy
import difflib
import functools
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from rich.console import Console

from .arguments import Descriptor, Fixed, Multiplicity, Variable
from .cells import Scalar, Sequence, Switch
from .faults import *
from .registry import Registry
from .usage import render, render_help
from .utils import Unset

# shape of anything that looks like an option: -x, --name, --name=value
_SWITCH = re.compile(r"(?P<flag>--?[^\W\d_](-?\w+)*)(=(?P<value>.*))?", re.DOTALL)


@functools.cache
def _ordinal(number):
    """
    1 → "1st", 2 → "2nd", 11 → "11th", 23 → "23rd".
    """
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


def _tokenize(tokens):
    """
    Normalize a parse input into a list of tokens.

    - Unset: the current process arguments (sys.argv).
    - str: shell-like string split with shlex.split.
    - Iterable[str]: used as-is; every item must be a string.
    """
    if tokens is Unset:
        return list(sys.argv)
    if isinstance(tokens, str):
        return shlex.split(tokens)
    if isinstance(tokens, Iterable):
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class ArgumentParser:
    """
    Declare, parse and retrieve command-line arguments.

    Each instance owns its registry; nothing is shared between parsers.
    """

    def __init__(self, application=Unset, /, *, shell=False, colorful=True, fancy=False, deferred=False):
        self._registry = Registry()
        self._faults = []
        self._tokens = deque()
        self._index = 0

        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.deferred = bool(deferred)

        if application is not Unset:
            self.application_name(application)

    # ------------------------------------------------------------------
    # declaration
    # ------------------------------------------------------------------

    def declare(self, *names, nargs=1, optional=True, descr=Unset):
        """
        Declare an argument from one or two dashed names ("-n", "--name").

        Parameters
        - names: a short "-x" and/or a long "--name" spelling.
        - nargs: int >= 0 (0 declares a switch), "+" or "*".
        - optional: False makes the argument required.
        - descr: one-line description shown by print_help().

        Returns the new Descriptor.

        Raises
        - InvalidDeclarationError on malformed or duplicate names and bad arities.
        """
        descriptor = Descriptor(*names, nargs=nargs, optional=optional, descr=descr)
        self._registry.insert(descriptor)
        return descriptor

    def declare_final(self, name, /, nargs=1, optional=False, descr=Unset):
        """
        Declare the trailing positional argument ("files" or "--files").

        Tokens that do not belong to any flag are bound to it once every flag
        has been consumed. A later call replaces the designation; the previous
        final argument stays declared as a regular "--name" argument.
        """
        descriptor = Descriptor(name, nargs=nargs, optional=optional, final=True, descr=descr)
        self._registry.insert(descriptor)
        return descriptor

    def ignore_first_token(self, ignore=True, /):
        """
        Do not record the first token of a parse as the application name.

        The first token is the program token either way and is never matched.
        """
        self._registry.skip_first = bool(ignore)

    def application_name(self, name, /):
        if not isinstance(name, str):
            raise TypeError("application name must be a string")
        self._registry.application = name

    @property
    def application(self):
        return self._registry.application

    @property
    def descriptors(self):
        return self._registry.descriptors

    # ------------------------------------------------------------------
    # faults
    # ------------------------------------------------------------------

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options.

        - warnings are always surfaced immediately.
        - errors are collected in deferred mode and raised together at the end of the pass.
        - in shell mode, the usage banner is printed on stderr before the error.
        """
        fault = copy.replace(
            fault,
            **options,
            application=self.application,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
            deferred=self.deferred,
        )
        if isinstance(fault, ParserWarning):
            return trigger(fault)
        if self.deferred:
            return self._faults.append(fault)
        if self.shell:
            self.print_usage(stderr=True)
        trigger(fault)

    def _finalize(self):
        if not self._faults:
            return
        faults = self._faults[:]
        self._faults.clear()
        if self.shell:
            self.print_usage(stderr=True)
        trigger(ParserExit(
            faults,
            application=self.application,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
        ))

    # ------------------------------------------------------------------
    # parsing
    # ------------------------------------------------------------------

    def _resolve_token(self, token):
        """
        Return (position, inline value) when the token names a declared flag, else (None, None).
        """
        if not (match := _SWITCH.fullmatch(token)):
            return None, None
        return self._registry.match(match["flag"]), match["value"]

    def _peekable(self):
        # a value run stops at the next declared flag or at the end of input
        return bool(self._tokens) and self._resolve_token(self._tokens[0])[0] is None

    def _consume(self):
        self._index += 1
        return self._tokens.popleft()

    def _collect(self, position, inline, start):
        """
        Consume the values of one flag occurrence and bind them to its cell.
        """
        descriptor, cell = self._registry[position]
        values = [] if inline is None else [inline]

        match descriptor.arity:
            case Fixed(0):
                if inline is not None:
                    return self.trigger(UnexpectedValueError(
                        "argument %r at %s position does not take a value" % (descriptor.flag, _ordinal(start)),
                        title="unexpected value",
                        code=FaultCode.UNEXPECTED_VALUE,
                        hint="remove everything from '=' (for example: %s)" % descriptor.flag,
                        name=descriptor.name,
                        index=start,
                        value=inline,
                    ))
                cell.assign(Switch(True))

            case Fixed(count):
                while len(values) < count and self._peekable():
                    values.append(self._consume())
                if len(values) < count:
                    return self.trigger(MissingValueError(
                        "argument %r at %s position expects %d value%s but got %d" % (
                            descriptor.flag, _ordinal(start), count, "s" * (count > 1), len(values)
                        ),
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        hint="pass %d value%s after %s" % (count, "s" * (count > 1), descriptor.flag),
                        name=descriptor.name,
                        index=start,
                        expected=count,
                        received=len(values),
                    ))
                cell.assign(Scalar(values[0]) if count == 1 else Sequence(tuple(values)))

            case Variable(kind):
                while self._peekable():
                    values.append(self._consume())
                if kind is Multiplicity.ONE_OR_MORE and not values:
                    return self.trigger(MissingValueError(
                        "argument %r at %s position expects at least one value" % (descriptor.flag, _ordinal(start)),
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        hint="pass one or more values after %s" % descriptor.flag,
                        name=descriptor.name,
                        index=start,
                        expected=1,
                        received=0,
                    ))
                cell.assign(Sequence(tuple(values)))

    def _unknown(self, token, index):
        flags = [flag for descriptor in self._registry.descriptors for flag in descriptor.flags]
        suggestions = difflib.get_close_matches(token.partition("=")[0], flags, 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "check the usage banner for the accepted arguments"
        self.trigger(UnknownArgumentError(
            "unknown argument %r at %s position" % (token, _ordinal(index)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            hint=hint,
            token=token,
            index=index,
            suggestions=suggestions,
        ))

    def _bind_final(self, held):
        """
        Bind the held-back plain tokens to the final positional argument.
        """
        if (final := self._registry.final) is None:
            for index, token in held:
                self.trigger(UnknownArgumentError(
                    "unexpected positional argument %r at %s position" % (token, _ordinal(index)),
                    title="unknown argument",
                    code=FaultCode.UNKNOWN_ARGUMENT,
                    hint="remove this extra value or pass it after the flag it belongs to",
                    token=token,
                    index=index,
                ))
            return

        cell = self._registry.cells[self._registry.resolve(final.name)]
        values = [token for _, token in held]

        match final.arity:
            case Fixed(count):
                for index, token in held[count:]:
                    self.trigger(UnknownArgumentError(
                        "unexpected positional argument %r at %s position" % (token, _ordinal(index)),
                        title="unknown argument",
                        code=FaultCode.UNKNOWN_ARGUMENT,
                        hint="%s takes %d value%s" % (final.metavar, count, "s" * (count > 1)),
                        token=token,
                        index=index,
                    ))
                values = values[:count]
                if not values:
                    return
                if len(values) < count:
                    return self.trigger(MissingValueError(
                        "final argument %s expects %d values but got %d" % (final.metavar, count, len(values)),
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        hint="pass %d trailing values" % count,
                        name=final.name,
                        expected=count,
                        received=len(values),
                    ))
                cell.assign(Scalar(values[0]) if count == 1 else Sequence(tuple(values)))
            case Variable():
                if values:
                    cell.assign(Sequence(tuple(values)))

    def _check_required(self):
        for descriptor, cell in self._registry:
            if descriptor.optional or cell.bound:
                continue
            spelling = descriptor.metavar if descriptor.final else descriptor.flag
            self.trigger(MissingRequiredArgumentError(
                "missing required argument %s" % spelling,
                title="missing required argument",
                code=FaultCode.MISSING_REQUIRED_ARGUMENT,
                hint="add %s to the command line" % spelling,
                name=descriptor.name,
            ))

    def parse(self, tokens=Unset, /):
        """
        Parse a token sequence and populate the value cells.

        Parameters
        - tokens: Unset (read sys.argv), a shell-like string, or an iterable of strings.
          The first token is the program token.

        Raises
        - UnknownArgumentError, UnexpectedValueError, MissingValueError,
          MissingRequiredArgumentError (or ParserExit in deferred mode).
        """
        registry = self._registry
        registry.reset()
        self._faults.clear()
        self._tokens = deque(_tokenize(tokens))
        self._index = 0

        if self._tokens:
            program = self._consume()
            if not registry.application and not registry.skip_first:
                registry.application = program

        seen = set()
        held = []
        while self._tokens:
            start = self._index
            token = self._consume()
            position, inline = self._resolve_token(token)

            if position is None:
                if _SWITCH.fullmatch(token):
                    self._unknown(token, start)
                else:
                    held.append((start, token))
                continue

            if position in seen:
                descriptor = registry.descriptors[position]
                self.trigger(ReassignedArgumentWarning(
                    "argument %r at %s position was already provided, the last value wins" % (
                        descriptor.flag, _ordinal(start)
                    ),
                    title="reassigned argument",
                    code=FaultCode.REASSIGNED_ARGUMENT,
                    hint="keep a single %s" % descriptor.flag,
                    name=descriptor.name,
                    index=start,
                    stacklevel=5,
                ))
            seen.add(position)
            self._collect(position, inline, start)

        self._bind_final(held)
        self._check_required()
        self._finalize()

    # ------------------------------------------------------------------
    # retrieval
    # ------------------------------------------------------------------

    def retrieve(self, name, /, type=str):
        """
        Return the parsed value of an argument as `type`.

        - Fixed(1) arguments are retrieved as str.
        - Fixed(n > 1) and variable arguments as list (or tuple).
        - Fixed(0) switches as bool.

        Raises
        - KeyNotFoundError when the name is not declared.
        - TypeMismatchError when `type` is not the stored value's type.
        """
        return self._registry.cells[self._registry.resolve(name)].retrieve(type)

    def exists(self, name, /):
        """
        Whether an argument with this name is declared.
        """
        return name in self._registry

    def count(self, name, /):
        """
        Number of values bound to an argument (0/1 for scalars and switches).

        Raises
        - KeyNotFoundError when the name is not declared.
        """
        return self._registry.cells[self._registry.resolve(name)].count

    def is_empty(self):
        return not self._registry

    def clear(self):
        """
        Drop every declaration and value.
        """
        self._registry.clear()

    # ------------------------------------------------------------------
    # usage
    # ------------------------------------------------------------------

    def usage(self):
        """
        Return the plain usage banner, wrapped at 80 columns.
        """
        return render(self._registry).plain

    def print_usage(self, *, stderr=False):
        Console(stderr=stderr).print(render(self._registry, colorful=self.colorful), soft_wrap=True)

    def print_help(self, *, stderr=False):
        Console(stderr=stderr).print(render_help(self._registry, colorful=self.colorful), soft_wrap=True)

    def __rich__(self):
        return render(self._registry, colorful=self.colorful)

    def __rich_repr__(self):
        for descriptor, cell in self._registry:
            yield descriptor.name, cell

    def __repr__(self):
        return "argument-parser(application=%r, arguments=%d)" % (self.application, len(self._registry))


__all__ = (
    "ArgumentParser",
)
