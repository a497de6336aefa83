"""
Utils module behavioral tests (naming, sentinel, module globs).

Scope
- kebab(): flag names derived from identifiers, idempotence, no stray hyphens.
- Unset / coalesce(): sentinel semantics.
- mglob(): dotted module glob expansion over a temporary package tree.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import TestCase

from verbum import kebab
from verbum.utils import Unset, UnsetType, coalesce, mglob, mirror


class TestKebab(TestCase):
    """Behavioral tests for kebab()."""

    def testPascalCase(self):
        self.assertEqual(kebab("NoCache"), "no-cache")
        self.assertEqual(kebab("RemoveIntermediateContainers"), "remove-intermediate-containers")

    def testCamelCase(self):
        self.assertEqual(kebab("buildArgs"), "build-args")

    def testSnakeCase(self):
        self.assertEqual(kebab("no_cache"), "no-cache")
        self.assertEqual(kebab("log_file"), "log-file")

    def testSingleWord(self):
        self.assertEqual(kebab("tags"), "tags")
        self.assertEqual(kebab("Context"), "context")

    def testAlreadyKebab(self):
        self.assertEqual(kebab("log-file"), "log-file")

    def testNoLeadingOrTrailingHyphens(self):
        for identifier in ("_private", "trailing_", "__dunder__", "-x-"):
            with self.subTest(identifier=identifier):
                text = kebab(identifier)
                self.assertFalse(text.startswith("-"))
                self.assertFalse(text.endswith("-"))

    def testIdempotent(self):
        for identifier in ("NoCache", "buildArgs", "no_cache", "HTTPServer", "log-file", "Pull", "x", "_a_B_c"):
            with self.subTest(identifier=identifier):
                self.assertEqual(kebab(kebab(identifier)), kebab(identifier))

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            kebab(42)


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesceKeepsFalseyValues(self):
        self.assertEqual(coalesce(Unset, ","), ",")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("", "x"), "")
        self.assertIsNone(coalesce(None, "x"))

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", "b"]

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(AttributeError):
            holder.items = ()


class TestModuleGlob(TestCase):
    """Behavioral tests for mglob() over a temporary package tree."""

    def setUp(self):
        self._directory = tempfile.TemporaryDirectory()
        root = Path(self._directory.name) / "globhost"
        for package in (root, root / "git", root / "docker"):
            package.mkdir()
            (package / "__init__.py").write_text("")
        (root / "git" / "verbs.py").write_text("")
        (root / "docker" / "verbs.py").write_text("")
        (root / "docker" / "helpers.py").write_text("")
        sys.path.insert(0, self._directory.name)

    def tearDown(self):
        sys.path.remove(self._directory.name)
        for name in [name for name in sys.modules if name == "globhost" or name.startswith("globhost.")]:
            del sys.modules[name]
        self._directory.cleanup()

    def testConcretePatternReturnedAsIs(self):
        self.assertEqual(mglob("globhost.git.verbs"), ["globhost.git.verbs"])

    def testStarMatchesOneSegment(self):
        self.assertEqual(mglob("globhost.*"), ["globhost.docker", "globhost.git"])

    def testDoubleStarSpansSegments(self):
        self.assertEqual(mglob("globhost.**.verbs"), ["globhost.docker.verbs", "globhost.git.verbs"])

    def testUnknownPrefixYieldsNothing(self):
        self.assertEqual(mglob("globhost_missing.*"), [])

    def testPatternMustStartConcrete(self):
        with self.assertRaises(ValueError):
            mglob("*.verbs")

    def testRejectsEmpty(self):
        with self.assertRaises(ValueError):
            mglob("   ")


if __name__ == "__main__":
    unittest.main()
