import math
import unittest

from schema_validator.caster import CastError, cast
from schema_validator.compiler import FieldType


class NumberCastTests(unittest.TestCase):
    def test_number_cases(self):
        cases = [
            ("14", 14),
            ("4.5", 4.5),
            (" -2 ", -2),
            (True, 1),
            (False, 0),
            (float("nan"), 0),
            (None, 0),
            (7, 7),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(cast(value, "number"), expected)

    def test_synonyms_accepted(self):
        self.assertEqual(cast("2.5", "float"), 2.5)
        self.assertEqual(cast("2.5", "int"), 2)

    def test_non_numeric_strings_fail(self):
        for value in ("hello", "", "nan", "inf", "1_000", "12abc"):
            with self.subTest(value=value):
                with self.assertRaises(CastError):
                    cast(value, FieldType.NUMBER)

    def test_infinity_and_containers_fail(self):
        for value in (math.inf, [1], {"a": 1}):
            with self.subTest(value=value):
                with self.assertRaises(CastError):
                    cast(value, FieldType.NUMBER)

    def test_integer_truncates_toward_zero(self):
        self.assertEqual(cast("3.9", FieldType.INTEGER), 3)
        self.assertEqual(cast(-3.9, FieldType.INTEGER), -3)
        self.assertIsInstance(cast("14", FieldType.INTEGER), int)
        self.assertEqual(cast(float("nan"), FieldType.INTEGER), 0)

    def test_huge_integers_pass_through(self):
        big = 10 ** 400
        self.assertEqual(cast(big, FieldType.NUMBER), big)
        self.assertEqual(cast(big, FieldType.INTEGER), big)

    def test_cast_error_is_value_error(self):
        with self.assertRaises(ValueError):
            cast("hello", "integer")


class OtherCastTests(unittest.TestCase):
    def test_boolean_uses_truthiness(self):
        for value, expected in ((1, True), (0, False), ("", False), ("false", True), ([], False), (None, False)):
            with self.subTest(value=value):
                self.assertIs(cast(value, "boolean"), expected)

    def test_string_stringifies(self):
        self.assertEqual(cast(12, "string"), "12")
        self.assertEqual(cast(True, "string"), "true")
        self.assertEqual(cast(None, "string"), "null")
        self.assertEqual(cast("x", "string"), "x")

    def test_string_dumps_containers_as_json(self):
        self.assertEqual(cast({"a": 1}, "string"), '{"a": 1}')
        self.assertEqual(cast([1, None, False], "string"), "[1, null, false]")

    def test_containers_untouched(self):
        value = {"a": "1"}
        self.assertIs(cast(value, FieldType.OBJECT), value)


if __name__ == "__main__":
    unittest.main()
