# python
"""
Flags module behavioral tests (specs, sanitizers and the validator chain).

Scope
- Validate Flag construction: type, alias, descr, constraints per type.
- Validate the composed validator chain: coercion, exclusive minimum, enum
  membership and refinement, with their user-facing messages.
- Validate defaulted() as used by the union check.
- Validate UnionGroup normalization.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from dotroute import Flag, UnionGroup, Rejection
from dotroute.flags import Coerce, ExclusiveMinimum, Membership, Predicate
from dotroute.utils import Unset


class TestFlag(TestCase):
    """Behavioral tests for Flag specifications."""

    def testFlagTypeDefaultsToString(self):
        self.assertEqual(Flag().type, "string")

    def testFlagUnknownTypeRejected(self):
        with self.assertRaises(ValueError):
            Flag("integer")

    def testFlagTypeMustBeString(self):
        with self.assertRaises(TypeError):
            Flag(int)

    def testFlagDescrDefaultsToNone(self):
        self.assertIsNone(Flag().descr)

    def testFlagDescrIsTrimmed(self):
        self.assertEqual(Flag(descr="  The first number ").descr, "The first number")

    def testFlagEmptyDescrRejected(self):
        with self.assertRaises(ValueError):
            Flag(descr="   ")

    def testFlagAliasMustBeSingleLetter(self):
        with self.assertRaises(ValueError):
            Flag(alias="st")
        with self.assertRaises(ValueError):
            Flag(alias="1")
        self.assertEqual(Flag(alias="s").alias, "s")

    def testFlagDefaultStaysUnset(self):
        self.assertIs(Flag("number").default, Unset)

    def testFlagNoneDefaultIsKept(self):
        self.assertIsNone(Flag("string", default=None).default)

    def testBooleanFlagDefaultsToFalse(self):
        flag = Flag("boolean")
        self.assertTrue(flag.boolean)
        self.assertIs(flag.default, False)

    def testBooleanFlagCannotBeRequired(self):
        with self.assertRaises(TypeError):
            Flag("boolean", required=True)

    def testExclusiveMinimumOnlyForNumbers(self):
        with self.assertRaises(TypeError):
            Flag("string", gt=0)
        with self.assertRaises(TypeError):
            Flag("number", gt="0")
        self.assertEqual(Flag("number", gt=0).gt, 0)

    def testChoicesOnlyForStrings(self):
        with self.assertRaises(TypeError):
            Flag("number", choices=("1", "2"))

    def testChoicesDuplicatesRejected(self):
        with self.assertRaises(ValueError):
            Flag(choices=("executed", "executed"))

    def testChoicesFrozenToTuple(self):
        self.assertEqual(Flag(choices=["executed", "pending"]).choices, ("executed", "pending"))

    def testRefineMustBeCallable(self):
        with self.assertRaises(TypeError):
            Flag("number", refine=0)

    def testMessageDefaultsToInvalidInput(self):
        self.assertEqual(Flag().message, "Invalid input")

    def testValidatorChainOrder(self):
        flag = Flag("number", gt=0, refine=bool)
        self.assertEqual(
            [type(validator) for validator in flag.validators],
            [Coerce, ExclusiveMinimum, Predicate],
        )
        flag = Flag("string", choices=("a", "b"))
        self.assertEqual([type(validator) for validator in flag.validators], [Coerce, Membership])

    def testFlagIsReadOnly(self):
        flag = Flag("number")
        with self.assertRaises(AttributeError):
            flag.type = "string"

    def testFlagReprNamesType(self):
        self.assertTrue(repr(Flag("number")).startswith("flag(type='number'"))


class TestFlagCheck(TestCase):
    """Behavioral tests for value coercion and constraints."""

    def _reject(self, flag, value):
        with self.assertRaises(Rejection) as context:
            flag.check(value)
        return context.exception.message

    def testNumberCoercion(self):
        flag = Flag("number")
        self.assertEqual(flag.check("2"), 2)
        self.assertIsInstance(flag.check("2"), int)
        self.assertEqual(flag.check("2.5"), 2.5)
        self.assertEqual(flag.check("-1"), -1)

    def testUnparsableNumberReportsNan(self):
        self.assertEqual(self._reject(Flag("number"), "notanumber"), "Expected number, received nan")
        self.assertEqual(self._reject(Flag("number"), "nan"), "Expected number, received nan")

    def testNumberGrammar(self):
        flag = Flag("number")
        self.assertEqual(flag.check("1e3"), 1000)
        self.assertEqual(flag.check(" .5 "), 0.5)
        self.assertEqual(flag.check("Infinity"), math.inf)
        self.assertEqual(flag.check("-Infinity"), -math.inf)
        for token in ("1_000", "infinity", "inf", "0x10", "1e", ""):
            with self.subTest(token=token):
                self.assertEqual(self._reject(flag, token), "Expected number, received nan")

    def testMissingValueReportsBoolean(self):
        self.assertEqual(self._reject(Flag("number"), True), "Expected number, received boolean")
        self.assertEqual(self._reject(Flag("string"), True), "Expected string, received boolean")

    def testBooleanAcceptsLiterals(self):
        flag = Flag("boolean")
        self.assertIs(flag.check(True), True)
        self.assertIs(flag.check("false"), False)
        self.assertEqual(self._reject(flag, "yes"), "Expected boolean, received string")

    def testExclusiveMinimum(self):
        flag = Flag("number", gt=0)
        self.assertEqual(flag.check("1"), 1)
        self.assertEqual(self._reject(flag, "0"), "Number must be greater than 0")

    def testEnumMembership(self):
        flag = Flag(choices=("executed", "pending"))
        self.assertEqual(flag.check("pending"), "pending")
        self.assertEqual(
            self._reject(flag, "done"),
            "Invalid enum value. Expected 'executed' | 'pending', received 'done'",
        )

    def testRefinementDefaultMessage(self):
        flag = Flag("number", refine=lambda number: number != 0)
        self.assertEqual(flag.check("4"), 4)
        self.assertEqual(self._reject(flag, "0"), "Invalid input")

    def testRefinementCustomMessage(self):
        flag = Flag("number", refine=lambda number: number != 0, message="Must not be zero")
        self.assertEqual(self._reject(flag, "0"), "Must not be zero")

    def testFirstFailureWins(self):
        flag = Flag("number", gt=0, refine=lambda number: number != 0)
        self.assertEqual(self._reject(flag, "0"), "Number must be greater than 0")

    def testDefaulted(self):
        flag = Flag("number", default=1)
        self.assertTrue(flag.defaulted("1"))
        self.assertFalse(flag.defaulted("2"))
        self.assertFalse(flag.defaulted("notanumber"))
        self.assertFalse(Flag("number").defaulted("1"))


class TestUnionGroup(TestCase):
    """Behavioral tests for UnionGroup specifications."""

    def testUnionGroupNamesAreCamelCased(self):
        self.assertEqual(UnionGroup("step", "search-term").names, ("step", "searchTerm"))

    def testUnionGroupNeedsTwoNames(self):
        with self.assertRaises(ValueError):
            UnionGroup("step")

    def testUnionGroupDuplicatesRejected(self):
        with self.assertRaises(ValueError):
            UnionGroup("searchTerm", "search-term")

    def testUnionGroupContainment(self):
        group = UnionGroup("step", "to")
        self.assertIn("to", group)
        self.assertNotIn("from", group)
        self.assertEqual(len(group), 2)
        self.assertFalse(group.required)


if __name__ == "__main__":
    unittest.main()
