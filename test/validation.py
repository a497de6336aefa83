"""
Validation module behavioral tests (declaration checks and reporting).

Scope
- Each check on a clean verb set (no issues) and on a seeded mistake
  (exactly one issue per mistake).
- Advisory required-nullability warnings.
- ValidationResult summaries and rich reporting.

Conventions
- Test method names follow CamelCase per project convention.
- Verbs with seeded mistakes are declared inside the tests that use them.
"""

from __future__ import annotations

import io
import unittest
import warnings
from typing import ClassVar
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from verbum import (
    DefaultSetter,
    FaultCode,
    Kind,
    NullableRequiredWarning,
    Option,
    PostAction,
    Registry,
    ValidationResult,
    Value,
    check_attributes,
    check_duplicates,
    check_indices,
    check_long_names,
    check_required_nullability,
    check_short_names,
    check_zero_on_creation,
    report,
    validate,
    validate_all,
    verb,
)


class LogFileContract(PostAction):
    log_file = Option(Kind.STRING)

    def post_action(self, exit_code, output, error):
        pass


@verb("build", help="Build an image from a Dockerfile")
class Build(DefaultSetter, LogFileContract):
    tags = Option(Kind.LIST_OF_STRING, "-t", "--tag")
    dockerfile = Option(Kind.STRING, "-f", "--file")
    no_cache = Option(Kind.BOOLEAN)
    rm = Option(Kind.NULLABLE_BOOLEAN)
    context = Option(Kind.STRING, default=".")

    def update_defaults(self):
        self.context = self.context or "."


@verb("add", help="Add file contents to the index")
class Add:
    force = Option(Kind.BOOLEAN, "-f")
    depth = Option(Kind.INTEGER)
    pathspec = Value(0, Kind.LIST_OF_STRING)


@verb("commit")
class Commit:
    message = Option(Kind.STRING, "-m", required=True)
    timeout: ClassVar[int] = 30

    def describe(self):
        return f"commit {self.message}"

    @property
    def summary(self):
        return self.message


CLEAN = (Build, Add, Commit)


class TestCleanVerbs(TestCase):
    """A correctly declared verb set reports nothing."""

    def testEveryCheckPasses(self):
        for check in (
                check_zero_on_creation,
                check_attributes,
                check_short_names,
                check_long_names,
                check_indices,
                check_duplicates,
                validate_all,
        ):
            with self.subTest(check=check.__name__):
                self.assertEqual(check(CLEAN), [])

    def testRegistryAccepted(self):
        self.assertEqual(validate_all(Registry(*CLEAN)), [])

    def testSingleVerbAccepted(self):
        self.assertEqual(validate_all(Build), [])
        self.assertEqual(validate_all(Build.__verb__), [])


class TestDuplicates(TestCase):
    """Exactly one issue per duplicated name or index."""

    def testExplicitAndDerivedLongNameCollide(self):
        @verb("logged")
        class Logged:
            log = Option(Kind.STRING, "--log-file")
            log_file = Option(Kind.STRING)

        issues = check_long_names([Logged])
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0], "Logged: Duplicate long name '--log-file' on fields: log, log_file")
        self.assertIs(issues[0].code, FaultCode.DUPLICATE_LONG_NAME)
        self.assertEqual(issues[0].verb, "logged")
        self.assertEqual(len(validate_all([Logged])), 1)

    def testDuplicateShortName(self):
        @verb("tagged")
        class Tagged:
            tag = Option(Kind.STRING, "-t")
            target = Option(Kind.STRING, "-t")

        issues = check_short_names([Tagged])
        self.assertEqual(issues, ["Tagged: Duplicate short name '-t' on fields: tag, target"])
        self.assertEqual(len(check_duplicates([Tagged])), 1)

    def testDuplicateIndex(self):
        @verb("copy")
        class Copy:
            source = Value(0)
            destination = Value(0)

        issues = check_indices([Copy])
        self.assertEqual(issues, ["Copy: Duplicate value index 0 on fields: source, destination"])
        self.assertEqual(len(validate_all([Copy])), 1)

    def testThreeWayDuplicateIsOneIssue(self):
        @verb("triple")
        class Triple:
            a = Option(Kind.BOOLEAN, "-x")
            b = Option(Kind.BOOLEAN, "-x")
            c = Option(Kind.BOOLEAN, "-x")

        self.assertEqual(len(check_short_names([Triple])), 1)

    def testOneIssuePerMistake(self):
        @verb("messy")
        class Messy:
            a = Option(Kind.BOOLEAN, "-x", "--first")
            b = Option(Kind.BOOLEAN, "-x", "--first")
            c = Value(0)
            d = Value(0)

        self.assertEqual(len(check_duplicates([Messy])), 3)


class TestAttributes(TestCase):
    """Members without Option/Value metadata are reported."""

    def testAnnotatedMember(self):
        @verb("annotated")
        class Annotated:
            verbose: bool = False

        issues = check_attributes([Annotated])
        self.assertEqual(issues, ["Annotated.verbose is missing Option or Value metadata"])
        self.assertIs(issues[0].code, FaultCode.MISSING_METADATA)

    def testSettableProperty(self):
        @verb("proped")
        class Proped:
            @property
            def level(self):
                return 1

            @level.setter
            def level(self, value):
                pass

        self.assertEqual(check_attributes([Proped]), ["Proped.level is missing Option or Value metadata"])

    def testConstructorAttribute(self):
        @verb("constructed")
        class Constructed:
            def __init__(self):
                self.cache = None

        self.assertEqual(check_attributes([Constructed]), ["Constructed.cache is missing Option or Value metadata"])

    def testPrivateMembersIgnored(self):
        @verb("private")
        class Private:
            _cache = {}

            def __init__(self):
                self._seen = None

        self.assertEqual(check_attributes([Private]), [])

    def testNonVerbReported(self):
        issues = check_attributes([LogFileContract])
        self.assertEqual(len(issues), 1)
        self.assertIs(issues[0].code, FaultCode.NOT_A_VERB)


class TestZeroOnCreation(TestCase):
    """Fresh instances must hold the zero of every field."""

    def testFieldAssignedInConstructor(self):
        @verb("eager")
        class Eager:
            retries = Option(Kind.INTEGER)
            context = Option(Kind.STRING)

            def __init__(self):
                self.retries = 3
                self.context = "."

        issues = check_zero_on_creation([Eager])
        self.assertEqual(issues, [
            "Eager.retries is not zero on creation (was: 3)",
            "Eager.context is not None on creation (was: '.')",
        ])
        self.assertTrue(all(issue.code is FaultCode.NONZERO_ON_CREATION for issue in issues))

    def testPlainAttributeAssignedInConstructor(self):
        @verb("stateful")
        class Stateful:
            def __init__(self):
                self.history = []

        self.assertEqual(check_zero_on_creation([Stateful]), ["Stateful.history is not None on creation (was: [])"])

    def testUnconstructibleVerbReportedNotRaised(self):
        @verb("needy")
        class Needy:
            def __init__(self, required):
                self.required = required

        issues = check_zero_on_creation([Needy])
        self.assertEqual(len(issues), 1)
        self.assertIs(issues[0].code, FaultCode.UNCONSTRUCTIBLE_VERB)
        self.assertEqual(check_attributes([Needy]), [])


class TestRequiredNullability(TestCase):
    """Advisory check for required fields of nullable kinds."""

    @verb("strict")
    class Strict:
        rm = Option(Kind.NULLABLE_BOOLEAN, required=True)
        name = Option(Kind.STRING, required=True)

    def testWarnsAndReports(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            issues = check_required_nullability([self.Strict])
        self.assertEqual(issues, ["Strict.rm is required but its kind is nullable (nullable-boolean)"])
        self.assertEqual(len(caught), 1)
        self.assertIsInstance(caught[0].message, NullableRequiredWarning)

    def testSilentWhenAsked(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            check_required_nullability([self.Strict], warn=False)
        self.assertEqual(caught, [])

    def testExcludedFromValidateAll(self):
        self.assertEqual(validate_all([self.Strict]), [])


class TestResult(TestCase):
    """Behavioral tests for validate(), ValidationResult and report()."""

    def testPassedSummary(self):
        result = validate(CLEAN)
        self.assertTrue(result.valid)
        self.assertTrue(result)
        self.assertEqual(str(result), "All validations passed")

    def testFailedSummary(self):
        @verb("copy")
        class Copy:
            source = Value(0)
            destination = Value(0)

        result = validate([Copy])
        self.assertFalse(result.valid)
        self.assertEqual(
            str(result),
            "Validation failed with 1 issue(s):\n  - Copy: Duplicate value index 0 on fields: source, destination",
        )

    def testWarningsDoNotFail(self):
        @verb("strict")
        class Strict:
            rm = Option(Kind.NULLABLE_BOOLEAN, required=True)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = validate([Strict])
        self.assertEqual(caught, [])
        self.assertTrue(result.valid)
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("1 warning(s):", str(result))

    def testReportPrintsToStderrConsole(self):
        @verb("copy")
        class Copy:
            source = Value(0)
            destination = Value(0)

        console = Console(file=io.StringIO(), width=120, color_system=None)
        with patch("verbum.validation.console", console):
            valid = report(validate([Copy]), fancy=False)
        self.assertFalse(valid)
        text = console.file.getvalue()
        self.assertIn("validation failed with 1 issue(s)", text)
        self.assertIn("Duplicate value index 0", text)

    def testReportRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            report("All validations passed")

    def testResultIsImmutableView(self):
        result = ValidationResult(["a"], ["b"])
        self.assertEqual(result.issues, ("a",))
        self.assertEqual(result.warnings, ("b",))


if __name__ == "__main__":
    unittest.main()
