"""
Usage banner and help page rendering.
"""
import unittest
from unittest import TestCase

from rich.console import Console

from argcell import Descriptor
from argcell.registry import Registry
from argcell.usage import NARROW_INDENT, WIDTH, render, render_argument, render_help


def _registry(application, *descriptors):
    registry = Registry()
    registry.application = application
    for descriptor in descriptors:
        registry.insert(descriptor)
    return registry


class RenderArgumentTest(TestCase):
    def testRequiredScalar(self) -> None:
        self.assertEqual(render_argument(Descriptor("--name", optional=False)).plain, "--name NAME")

    def testOptionalSwitch(self) -> None:
        self.assertEqual(render_argument(Descriptor("-v", nargs=0)).plain, "[-v]")

    def testFixedCountsAboveThreeAreElided(self) -> None:
        self.assertEqual(render_argument(Descriptor("--pair", nargs=2)).plain, "[--pair PAIR PAIR]")
        self.assertEqual(render_argument(Descriptor("--many", nargs=5)).plain, "[--many MANY MANY MANY ...]")

    def testVariable(self) -> None:
        self.assertEqual(
            render_argument(Descriptor("--inputs", nargs="*")).plain,
            "[--inputs [INPUTS INPUTS...]]",
        )
        self.assertEqual(
            render_argument(Descriptor("--inputs", nargs="+", optional=False)).plain,
            "--inputs INPUTS [INPUTS...]",
        )

    def testFinalHasNoFlag(self) -> None:
        self.assertEqual(render_argument(Descriptor("output", final=True)).plain, "[OUTPUT]")
        self.assertEqual(render_argument(Descriptor("files", nargs="*", optional=False, final=True)).plain, "[FILES FILES...]")

    def testColorfulKeepsPlainText(self) -> None:
        descriptor = Descriptor("--name", optional=False)
        colorful = render_argument(descriptor, colorful=True)
        self.assertEqual(colorful.plain, render_argument(descriptor).plain)
        self.assertTrue(colorful.spans)


class RenderTest(TestCase):
    def testCanonicalBanner(self) -> None:
        registry = _registry(
            "prog",
            Descriptor("--name", optional=False),
            Descriptor("--inputs", nargs="*"),
        )
        self.assertEqual(render(registry).plain, "Usage: prog --name NAME [--inputs [INPUTS INPUTS...]]")

    def testOrdering(self) -> None:
        registry = _registry(
            "prog",
            Descriptor("--alpha"),
            Descriptor("files", optional=False, final=True),
            Descriptor("--beta", optional=False),
            Descriptor("--gamma"),
        )
        self.assertEqual(render(registry).plain, "Usage: prog --beta BETA [--alpha ALPHA] [--gamma GAMMA] FILES")

    def testWithoutApplication(self) -> None:
        self.assertEqual(render(_registry("")).plain, "Usage:")
        self.assertEqual(render(_registry("", Descriptor("-v", nargs=0))).plain, "Usage: [-v]")

    def testWrapping(self) -> None:
        registry = _registry("prog", *(Descriptor("--argument-%d" % index) for index in range(10)))
        lines = render(registry).plain.split("\n")
        self.assertGreater(len(lines), 1)
        self.assertTrue(lines[0].startswith("Usage: prog [--argument-0 ARGUMENT-0]"))
        for line in lines:
            self.assertLessEqual(len(line), WIDTH)
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * 12 + "["))
            self.assertFalse(line.startswith(" " * 13))

    def testWrappingUsesTheCurrentLine(self) -> None:
        registry = _registry("prog", *(Descriptor("--argument-%d" % index) for index in range(9)))
        lines = render(registry).plain.split("\n")
        # the banner prefix and the continuation indent are one column apart
        self.assertEqual([line.count("[--argument-") for line in lines], [2, 2, 2, 2, 1])

    def testWideApplicationNameUsesANarrowIndent(self) -> None:
        registry = _registry("p" * 50, Descriptor("--argument-name", nargs=2, optional=False))
        lines = render(registry).plain.split("\n")
        self.assertEqual(lines[0], "Usage: " + "p" * 50)
        self.assertEqual(lines[1], " " * NARROW_INDENT + "--argument-name ARGUMENT-NAME ARGUMENT-NAME")
        for line in lines:
            self.assertLessEqual(len(line), WIDTH)

    def testFirstArgumentStaysOnTheBannerLineWhenItFits(self) -> None:
        registry = _registry("p" * 50, Descriptor("-v", nargs=0))
        self.assertEqual(render(registry).plain, "Usage: " + "p" * 50 + " [-v]")


class RenderHelpTest(TestCase):
    def render(self, registry) -> str:
        console = Console(color_system=None, force_terminal=False, width=WIDTH)
        with console.capture() as capture:
            console.print(render_help(registry))
        return capture.get()

    def testGroups(self) -> None:
        output = self.render(_registry(
            "prog",
            Descriptor("-n", "--name", optional=False, descr="who to greet"),
            Descriptor("--inputs", nargs="*", descr="files to read"),
        ))
        self.assertIn("Usage: prog --name NAME [--inputs [INPUTS INPUTS...]]", output)
        self.assertIn("required:", output)
        self.assertIn("optional:", output)
        self.assertIn("  -n, --name NAME       who to greet", output)
        self.assertIn("  --inputs [INPUTS INPUTS...]", output)
        self.assertLess(output.index("required:"), output.index("optional:"))

    def testEmptyGroupsAreOmitted(self) -> None:
        output = self.render(_registry("prog", Descriptor("-v", nargs=0)))
        self.assertNotIn("required:", output)
        self.assertIn("optional:", output)

    def testLongDescriptionsWrapOnTheHangingIndent(self) -> None:
        output = self.render(_registry("prog", Descriptor("--name", descr="word " * 30)))
        lines = [line for line in output.splitlines() if "word" in line]
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertTrue(line.startswith(" " * 24) or line.startswith("  --name"))
            self.assertLessEqual(len(line), WIDTH)


if __name__ == "__main__":
    unittest.main()
