"""
Fields module behavioral tests (Kind, Option, Value).

Scope
- Kind zeros and predicates.
- Option/Value construction: names, separators, help, choices, path hints.
- Descriptor behavior on verb instances (zero reads, assignment, deletion).
- Naming fallbacks (long name derived with kebab()).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Option, Value, Kind, PathType).
"""

from __future__ import annotations

import unittest
from enum import Enum
from unittest import TestCase

from verbum import Kind, Option, PathType, Value


class Platform(Enum):
    AMD64 = "linux/amd64"
    ARM64 = "linux/arm64"


class Holder:
    tags = Option(Kind.LIST_OF_STRING, "-t", "--tag", help="Image tags")
    no_cache = Option(Kind.BOOLEAN)
    rm = Option(Kind.NULLABLE_BOOLEAN)
    retries = Option(Kind.INTEGER)
    ratio = Option(Kind.FLOATING_POINT)
    platform = Option(Kind.NULLABLE_ENUM, choices=Platform)
    context = Value(0, default=".")


class TestKind(TestCase):
    """Behavioral tests for Kind."""

    def testZeros(self):
        self.assertIs(Kind.BOOLEAN.zero, False)
        self.assertEqual(Kind.INTEGER.zero, 0)
        self.assertEqual(Kind.FLOATING_POINT.zero, 0.0)
        for kind in (Kind.NULLABLE_BOOLEAN, Kind.STRING, Kind.ENUM, Kind.LIST_OF_STRING, Kind.NULLABLE_INTEGER):
            with self.subTest(kind=kind):
                self.assertIsNone(kind.zero)

    def testPredicates(self):
        self.assertTrue(Kind.NULLABLE_BOOLEAN.boolean)
        self.assertTrue(Kind.NULLABLE_BOOLEAN.nullable)
        self.assertFalse(Kind.BOOLEAN.nullable)
        self.assertTrue(Kind.LIST_OF_ENUM.enumerated)
        self.assertTrue(Kind.LIST_OF_ENUM.multiple)
        self.assertFalse(Kind.ENUM.multiple)
        self.assertTrue(Kind.NULLABLE_FLOATING_POINT.numeric)
        self.assertFalse(Kind.STRING.numeric)

    def testValuesAreKebabNames(self):
        self.assertEqual(Kind.NULLABLE_LIST_OF_ENUM.value, "nullable-list-of-enum")


class TestOption(TestCase):
    """Behavioral tests for Option specifications."""

    def testExplicitNames(self):
        self.assertEqual(Holder.tags.long, "tag")
        self.assertEqual(Holder.tags.short, "t")
        self.assertEqual(Holder.tags.flag, "--tag")

    def testLongNameDerivedFromIdentifier(self):
        self.assertEqual(Holder.no_cache.long, "no-cache")
        self.assertIsNone(Holder.no_cache.short)
        self.assertEqual(Holder.no_cache.key, "no-cache")

    def testUnboundOptionHasNoDerivedName(self):
        option = Option(Kind.STRING)
        self.assertIsNone(option.long)
        self.assertIsNone(option.flag)
        self.assertIsNone(option.identifier)

    def testIdentifierBound(self):
        self.assertEqual(Holder.tags.identifier, "tags")
        self.assertFalse(Holder.tags.positional)

    def testDefaultsToNoneWhenOmitted(self):
        self.assertIsNone(Holder.tags.default)
        self.assertEqual(Holder.tags.separator, ",")
        self.assertFalse(Holder.tags.required)

    def testHelpIsStripped(self):
        option = Option(Kind.STRING, help="  Name of the Dockerfile  ")
        self.assertEqual(option.help, "Name of the Dockerfile")

    def testEmptyHelpRejected(self):
        with self.assertRaises(ValueError):
            Option(Kind.STRING, help="   ")

    def testKindMustBeKind(self):
        with self.assertRaises(TypeError):
            Option("string")

    def testMalformedNamesRejected(self):
        for name in ("tag", "-tag", "--bad_name", "---x", "--1x"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    Option(Kind.STRING, name)

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Option(Kind.STRING, 42)

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Option(Kind.STRING, "--tag", "--tag")

    def testTwoLongNamesRejected(self):
        with self.assertRaises(ValueError):
            Option(Kind.STRING, "--tag", "--label")

    def testTwoShortNamesRejected(self):
        with self.assertRaises(ValueError):
            Option(Kind.STRING, "-t", "-l")

    def testSeparatorMustBeOneCharacter(self):
        self.assertEqual(Option(Kind.LIST_OF_STRING, separator=";").separator, ";")
        with self.assertRaises(ValueError):
            Option(Kind.LIST_OF_STRING, separator=";;")
        with self.assertRaises(TypeError):
            Option(Kind.LIST_OF_STRING, separator=1)

    def testChoicesRequireEnumKind(self):
        self.assertIs(Holder.platform.choices, Platform)
        with self.assertRaises(TypeError):
            Option(Kind.STRING, choices=Platform)
        with self.assertRaises(TypeError):
            Option(Kind.ENUM, choices=["a", "b"])

    def testPathHintDefaultsFilter(self):
        option = Option(Kind.STRING, "-f", "--file", path=PathType.FILE)
        self.assertIs(option.path, PathType.FILE)
        self.assertEqual(option.filter, "All Files|*.*")
        self.assertIsNone(Option(Kind.STRING).filter)

    def testExplicitFilterKept(self):
        option = Option(Kind.STRING, path=PathType.FILE, filter="Dockerfiles|Dockerfile*|All Files|*.*")
        self.assertEqual(option.filter, "Dockerfiles|Dockerfile*|All Files|*.*")

    def testRebindingUnderAnotherNameRejected(self):
        shared = Option(Kind.STRING)
        with self.assertRaises((TypeError, RuntimeError)):
            type("Twice", (), {"first": shared, "second": shared})

    def testRepr(self):
        self.assertTrue(repr(Holder.tags).startswith("option(kind=<Kind.LIST_OF_STRING"))


class TestValue(TestCase):
    """Behavioral tests for Value specifications."""

    def testPositional(self):
        self.assertTrue(Holder.context.positional)
        self.assertEqual(Holder.context.index, 0)
        self.assertEqual(Holder.context.key, "context")
        self.assertEqual(Holder.context.default, ".")
        self.assertIs(Holder.context.kind, Kind.STRING)

    def testIndexValidation(self):
        with self.assertRaises(ValueError):
            Value(-1)
        with self.assertRaises(TypeError):
            Value(True)
        with self.assertRaises(TypeError):
            Value("0")


class TestDescriptor(TestCase):
    """Behavioral tests for field access on instances."""

    def testFreshInstanceReadsZeros(self):
        holder = Holder()
        self.assertIs(holder.no_cache, False)
        self.assertIsNone(holder.rm)
        self.assertEqual(holder.retries, 0)
        self.assertEqual(holder.ratio, 0.0)
        self.assertIsNone(holder.tags)
        self.assertIsNone(holder.platform)
        self.assertIsNone(holder.context)

    def testAssignmentIsPerInstance(self):
        first, second = Holder(), Holder()
        first.tags = ["a:latest"]
        self.assertEqual(first.tags, ["a:latest"])
        self.assertIsNone(second.tags)

    def testDeletionRestoresZero(self):
        holder = Holder()
        holder.retries = 3
        del holder.retries
        self.assertEqual(holder.retries, 0)

    def testClassAccessReturnsSpec(self):
        self.assertIsInstance(Holder.tags, Option)
        self.assertIsInstance(Holder.context, Value)


if __name__ == "__main__":
    unittest.main()
