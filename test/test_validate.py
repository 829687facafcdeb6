"""
Validators and argument declaration tests.

Scope
- Validate the predicate factories (string, number, boolean, one_of, optional).
- Validate Flag/Arg construction checks and read-only access.
- Validate the declaration helpers (flag maps, arg arrays, choice and default-false flags).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API only.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from flagship import (
    Arg,
    Flag,
    Unset,
    create_arg,
    create_arg_array,
    create_choice_arg,
    create_choice_flag,
    create_default_false_flag,
    create_flag_map,
    validate,
)


class TestValidators(TestCase):
    """Behavioral tests for the validator factories."""

    def testStringAcceptsOnlyStrings(self):
        check = validate.string()
        self.assertTrue(check("abc"))
        self.assertTrue(check(""))
        self.assertFalse(check(1))
        self.assertFalse(check(None))

    def testNumberRejectsBooleans(self):
        check = validate.number()
        self.assertTrue(check(3))
        self.assertTrue(check(2.5))
        self.assertFalse(check(True))
        self.assertFalse(check("3"))

    def testBooleanAcceptsOnlyBooleans(self):
        check = validate.boolean()
        self.assertTrue(check(False))
        self.assertFalse(check(0))
        self.assertFalse(check("true"))

    def testOneOfUsesEquality(self):
        check = validate.one_of("dev", "prod", ["a"])
        self.assertTrue(check("prod"))
        self.assertTrue(check(["a"]))
        self.assertFalse(check("staging"))

    def testOptionalAcceptsNoneAndDelegates(self):
        check = validate.optional(validate.number())
        self.assertTrue(check(None))
        self.assertTrue(check(4))
        self.assertFalse(check("four"))

    def testOptionalRequiresCallable(self):
        with self.assertRaises(TypeError):
            validate.optional("nope")


class TestFlag(TestCase):
    """Behavioral tests for Flag specifications."""

    def testDescriptionIsTrimmed(self):
        flag = Flag("  What name?  ", validate.string())
        self.assertEqual(flag.description, "What name?")

    def testEmptyDescriptionRejected(self):
        with self.assertRaises(ValueError):
            Flag("   ", validate.string())

    def testValidatorMustBeCallable(self):
        with self.assertRaises(TypeError):
            Flag("What name?", "string")

    def testHookMustBeCallable(self):
        with self.assertRaises(TypeError):
            Flag("What name?", validate.string(), default="Ada")

    def testHooksDefaultToUnset(self):
        flag = Flag("What name?", validate.string())
        self.assertIs(flag.default, Unset)
        self.assertIs(flag.prompt, Unset)
        self.assertIs(flag.parse, Unset)
        self.assertFalse(flag.defaultable)
        self.assertFalse(flag.optional)

    def testFlagIsReadOnly(self):
        flag = Flag("What name?", validate.string())
        with self.assertRaises(AttributeError):
            flag.description = "Another"
        with self.assertRaises(AttributeError):
            flag.extra = True

    def testReprNamesTheType(self):
        flag = Flag("What name?", validate.string())
        self.assertTrue(repr(flag).startswith("flag("))


class TestArg(TestCase):
    """Behavioral tests for Arg specifications."""

    def testArgRequiresName(self):
        with self.assertRaises(ValueError):
            Arg(" ", "The file.", validate.string())

    def testCreateArgForwardsHooks(self):
        parse = int
        arg = create_arg("count", "How many?", validate.number(), parse=parse)
        self.assertEqual(arg.name, "count")
        self.assertIs(arg.parse, parse)

    def testArgHasNoDefault(self):
        with self.assertRaises(TypeError):
            Arg("file", "The file.", validate.string(), default=lambda: "a.txt")


class TestDeclarationHelpers(TestCase):
    """Behavioral tests for flag maps, arg arrays and flag shortcuts."""

    def testFlagMapRejectsDashedNames(self):
        with self.assertRaises(ValueError):
            create_flag_map({"--name": Flag("What name?", validate.string())})

    def testFlagMapRejectsNonFlags(self):
        with self.assertRaises(TypeError):
            create_flag_map({"name": validate.string()})

    def testFlagMapKeepsDeclarationOrder(self):
        flags = create_flag_map({
            "b": Flag("B", validate.string()),
            "a": Flag("A", validate.string()),
        })
        self.assertEqual(list(flags), ["b", "a"])

    def testArgArrayIsTuple(self):
        args = create_arg_array([Arg("file", "The file.", validate.string())])
        self.assertIsInstance(args, tuple)

    def testArgArrayRejectsFlags(self):
        with self.assertRaises(TypeError):
            create_arg_array([Flag("B", validate.string())])

    def testChoiceFlagListsChoices(self):
        flag = create_choice_flag("Which environment?", ["dev", "prod"])
        self.assertEqual(flag.description, "Which environment?\nChoose from:\n  dev\n  prod")
        self.assertTrue(flag.validate("dev"))
        self.assertFalse(flag.validate("staging"))
        self.assertIsNot(flag.prompt, Unset)

    def testChoiceFlagNeedsChoices(self):
        with self.assertRaises(ValueError):
            create_choice_flag("Which environment?", [])

    def testChoiceArgValidates(self):
        arg = create_choice_arg("target", "Which target?", ("x86", "arm"))
        self.assertEqual(arg.name, "target")
        self.assertTrue(arg.validate("arm"))

    def testDefaultFalseFlag(self):
        flag = create_default_false_flag("Are we excited?")
        self.assertTrue(flag.defaultable)
        self.assertIs(flag.default(), False)
        self.assertTrue(flag.validate(True))
        self.assertFalse(flag.validate("yes"))

    def testDefaultFalseFlagOverrides(self):
        flag = create_default_false_flag("Are we excited?", default=lambda: True)
        self.assertIs(flag.default(), True)


if __name__ == "__main__":
    unittest.main()
