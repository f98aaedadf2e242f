# python
"""
Helper module behavioral tests (golden help texts and styling).

Scope
- Validate the list form for the calculator and migrations applications.
- Validate the detail form: version header, blank description handling,
  flag signatures, metadata suffixes, kept trailing padding and examples.
- Validate that colorful output keeps the same plain text.

Conventions
- Test method names follow CamelCase per project convention.
- Goldens are spelled line by line so trailing spaces stay visible.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from fixtures import calculator, migrations

from dotroute import Command, Flag
from dotroute.helper import description, render_detail, render_list, signature

CALCULATOR_LIST = "\n".join((
    "Commands:",
    "  add             Add two numbers. Use this if you and your friend both have apples, and you want to know how many apples there are in total.",
    "  subtract        Subtract two numbers. Useful if you have a number and you want to make it smaller.",
    "  multiply        Multiply two numbers together. Useful if you want to count the number of tiles on your bathroom wall and are short on time.",
    "  divide          Divide two numbers. Useful if you have a number and you want to make it smaller and `subtract` isn't quite powerful enough for you.",
    "",
    "Flags:",
    "  -h, --help                  Show help",
    "      --verbose-errors        Throw raw errors (by default errors are summarised)",
))

ADD_DETAIL = "\n".join((
    "add",
    "",
    "Add two numbers. Use this if you and your friend both have apples, and you want to know how many apples there are in total.",
    "",
    "Usage:",
    "  add [flags...]",
    "",
    "Flags:",
    "  -h, --help                  Show help",
    "      --left <number>         The first number",
    "      --right <number>        The second number",
))

DIVIDE_DETAIL = "\n".join((
    "divide v1.0.0",
    "",
    "Divide two numbers. Useful if you have a number and you want to make it smaller and `subtract` isn't quite powerful enough for you.",
    "",
    "Usage:",
    "  divide [flags...]",
    "",
    "Flags:",
    "  -h, --help                  Show help",
    "      --left <number>         The numerator of the division operation.",
    "      --right <number>        The denominator of the division operation. Note: must not be zero.",
    "",
    "Examples:",
    "  divide --left 8 --right 4",
))

MIGRATIONS_LIST = "\n".join((
    "Commands:",
    "  apply                   Apply migrations. By default all pending migrations will be applied.",
    "  create                  Create a new migration",
    "  list                    List all migrations",
    "  search.byName           Look for migrations by name",
    "  search.byContent        Look for migrations by their script content",
    "",
    "Flags:",
    "  -h, --help                  Show help",
    "      --verbose-errors        Throw raw errors (by default errors are summarised)",
))

SEARCH_BY_NAME_DETAIL = "\n".join((
    "search.byName",
    "",
    "Look for migrations by name",
    "",
    "Usage:",
    "  search.byName [flags...]",
    "",
    "Flags:",
    "  -h, --help                   Show help",
    "      --name <string>          ",
    "  -s, --status <string>        Filter to only show migrations with this status; Enum: executed,pending",
))

APPLY_DETAIL = "\n".join((
    "apply",
    "",
    "Apply migrations. By default all pending migrations will be applied.",
    "",
    "Usage:",
    "  apply [flags...]",
    "",
    "Flags:",
    "  -h, --help                 Show help",
    "      --step <number>        Mark this many migrations as executed; Exclusive minimum: 0",
    "      --to <string>          Mark migrations up to this one as exectued",
))


class TestListForm(TestCase):
    """Golden tests for the command list."""

    def testCalculatorList(self):
        self.assertEqual(render_list(calculator.registry.list()).plain, CALCULATOR_LIST)

    def testMigrationsList(self):
        self.assertEqual(render_list(migrations.build().list()).plain, MIGRATIONS_LIST)

    def testNamespaceList(self):
        text = render_list(migrations.build().list("search")).plain
        self.assertTrue(text.startswith("\n".join((
            "Commands:",
            "  search.byName           Look for migrations by name",
            "  search.byContent        Look for migrations by their script content",
            "",
        ))))

    def testBlankDescriptionKeepsPadding(self):
        text = render_list([Command(lambda: None, "noop")]).plain
        self.assertEqual(text.splitlines()[1], "  noop        ")


class TestDetailForm(TestCase):
    """Golden tests for the per-command help."""

    def testAddDetail(self):
        self.assertEqual(render_detail(calculator.registry["add"]).plain, ADD_DETAIL)

    def testDivideDetailWithVersionAndExamples(self):
        self.assertEqual(render_detail(calculator.registry["divide"]).plain, DIVIDE_DETAIL)

    def testSearchByNameDetail(self):
        self.assertEqual(render_detail(migrations.build()["search.byName"]).plain, SEARCH_BY_NAME_DETAIL)

    def testApplyDetail(self):
        self.assertEqual(render_detail(migrations.build()["apply"]).plain, APPLY_DETAIL)

    def testDetailWithoutDescription(self):
        text = render_detail(Command(lambda: None, "noop")).plain
        self.assertEqual(text.splitlines()[:4], ["noop", "", "Usage:", "  noop [flags...]"])

    def testColorfulKeepsPlainText(self):
        command = calculator.registry["divide"]
        text = render_detail(command, colorful=True)
        self.assertEqual(text.plain, DIVIDE_DETAIL)
        self.assertTrue(text.spans)


class TestSignatures(TestCase):
    """Behavioral tests for flag signatures and descriptions."""

    def testSignatureForms(self):
        self.assertEqual(signature("status", Flag(alias="s")), "-s, --status <string>")
        self.assertEqual(signature("searchTerm", Flag()), "    --search-term <string>")
        self.assertEqual(signature("dry", Flag("boolean")), "    --dry")

    def testDescriptionSuffixes(self):
        self.assertEqual(description(Flag()), "")
        self.assertEqual(description(Flag(choices=("a", "b"))), "Enum: a,b")
        self.assertEqual(description(Flag("number", descr="Steps", gt=0.5)), "Steps; Exclusive minimum: 0.5")


if __name__ == "__main__":
    unittest.main()
