"""
Descriptor and arity tests.

Scope
- arity(): normalization of ints, "+" and "*", rejection of everything else.
- Descriptor: naming rules, final naming rules, read-only storage, derived names.
"""
import unittest
from unittest import TestCase

from argcell import Descriptor, Fixed, Multiplicity, Variable, arity
from argcell import InvalidDeclarationError, FaultCode


class ArityTest(TestCase):
    def testIntegers(self) -> None:
        self.assertEqual(arity(0), Fixed(0))
        self.assertEqual(arity(3), Fixed(3))

    def testMultiplicities(self) -> None:
        self.assertEqual(arity("+"), Variable(Multiplicity.ONE_OR_MORE))
        self.assertEqual(arity("*"), Variable(Multiplicity.ZERO_OR_MORE))

    def testAritiesPassThrough(self) -> None:
        self.assertEqual(arity(Fixed(2)), Fixed(2))
        self.assertEqual(arity(Variable(Multiplicity.ZERO_OR_MORE)), Variable(Multiplicity.ZERO_OR_MORE))

    def testRejected(self) -> None:
        for nargs in (-1, "?", "2", True, 1.0, Fixed(-1)):
            with self.subTest(nargs=nargs), self.assertRaises(InvalidDeclarationError):
                arity(nargs)

    def testRejectionCarriesCode(self) -> None:
        with self.assertRaises(InvalidDeclarationError) as context:
            arity("?")
        self.assertEqual(context.exception.options["code"], FaultCode.INVALID_DECLARATION)
        self.assertIsInstance(context.exception, ValueError)


class DescriptorTest(TestCase):
    def testShortAndLong(self) -> None:
        descriptor = Descriptor("-n", "--name")
        self.assertEqual(descriptor.short, "n")
        self.assertEqual(descriptor.long, "name")
        self.assertEqual(descriptor.arity, Fixed(1))
        self.assertTrue(descriptor.optional)
        self.assertFalse(descriptor.final)
        self.assertIsNone(descriptor.descr)

    def testOrderOfNamesDoesNotMatter(self) -> None:
        descriptor = Descriptor("--name", "-n")
        self.assertEqual(descriptor.names, ("n", "name"))
        self.assertEqual(descriptor.flags, ("-n", "--name"))

    def testShortOnly(self) -> None:
        descriptor = Descriptor("-v", nargs=0)
        self.assertEqual(descriptor.name, "v")
        self.assertEqual(descriptor.flag, "-v")
        self.assertEqual(descriptor.metavar, "V")

    def testLongPreferredForDisplay(self) -> None:
        descriptor = Descriptor("-d", "--dry-run", nargs=0)
        self.assertEqual(descriptor.name, "dry-run")
        self.assertEqual(descriptor.flag, "--dry-run")
        self.assertEqual(descriptor.metavar, "DRY-RUN")

    def testUnderscoresInNames(self) -> None:
        descriptor = Descriptor("--dry_run", nargs=0)
        self.assertEqual(descriptor.long, "dry_run")
        self.assertEqual(descriptor.metavar, "DRY_RUN")
        self.assertEqual(Descriptor("output_dir", final=True).long, "output_dir")

    def testBadNames(self) -> None:
        for names in (("-name",), ("name",), ("n",), ("--x",), ("-",), ("--",), ("--9lives",), ("--_name",), ("-1",)):
            with self.subTest(names=names), self.assertRaises(InvalidDeclarationError):
                Descriptor(*names)

    def testBadNameCounts(self) -> None:
        for names in ((), ("-a", "-b"), ("--aa", "--bb"), ("-a", "--aa", "--bb")):
            with self.subTest(names=names), self.assertRaises(InvalidDeclarationError):
                Descriptor(*names)

    def testNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            Descriptor(1)

    def testDescription(self) -> None:
        self.assertEqual(Descriptor("--name", descr="  who to greet ").descr, "who to greet")
        with self.assertRaises(TypeError):
            Descriptor("--name", descr=None)
        with self.assertRaises(ValueError):
            Descriptor("--name", descr="   ")

    def testFinal(self) -> None:
        for name in ("files", "--files"):
            with self.subTest(name=name):
                descriptor = Descriptor(name, nargs="*", final=True)
                self.assertEqual(descriptor.long, "files")
                self.assertEqual(descriptor.short, "")
                self.assertEqual(descriptor.flags, ())
                self.assertEqual(descriptor.flag, "")
                self.assertEqual(descriptor.metavar, "FILES")

    def testBadFinal(self) -> None:
        for name in ("-f", "f", "--f", "---files"):
            with self.subTest(name=name), self.assertRaises(InvalidDeclarationError):
                Descriptor(name, final=True)
        with self.assertRaises(InvalidDeclarationError):
            Descriptor("files", "other", final=True)

    def testFinalCannotBeSwitch(self) -> None:
        with self.assertRaises(InvalidDeclarationError):
            Descriptor("files", nargs=0, final=True)

    def testReadOnly(self) -> None:
        descriptor = Descriptor("--name")
        with self.assertRaises(AttributeError):
            descriptor.long = "other"
        with self.assertRaises(AttributeError):
            del descriptor.long
        with self.assertRaises(AttributeError):
            getattr(descriptor, "-long")

    def testRepr(self) -> None:
        self.assertEqual(
            repr(Descriptor("-n", "--name", optional=False)),
            "descriptor(short='n', long='name', arity=Fixed(count=1), optional=False, final=False, descr=None)",
        )


if __name__ == "__main__":
    unittest.main()
