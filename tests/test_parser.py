import unittest

from schema_validator import parser
from schema_validator.exceptions import RuleSyntaxError, SchemaError
from schema_validator.parser import KeyedArgument, RuleDescriptor


class ParserTests(unittest.TestCase):
    def test_bare_name(self):
        self.assertEqual(parser.parse_rules("email"), (RuleDescriptor("email", ()),))

    def test_positional_argument(self):
        out = parser.parse_rules("equals[phone2]")
        self.assertEqual(out, (RuleDescriptor("equals", ("phone2",)),))
        self.assertEqual(out[0].to_dict(), {"name": "equals", "arguments": ["phone2"]})

    def test_keyed_argument_quotes_dropped(self):
        out = parser.parse_rules('required[email="no"]')
        self.assertEqual(out[0].to_dict(), {
            "name": "required",
            "arguments": [{"key": "email", "value": "no"}],
        })

    def test_pipe_separated_directives_keep_order(self):
        out = parser.parse_rules('phoneUS|required[email="no"]|equals[phone2]')
        self.assertEqual([d.name for d in out], ["phoneUS", "required", "equals"])
        self.assertEqual(out[1].arguments, (KeyedArgument("email", "no"),))

    def test_mixed_arguments_and_empty_value(self):
        out = parser.parse_rules("combined[param=hello,param2=,world]")
        self.assertEqual(out[0].arguments, (
            KeyedArgument("param", "hello"),
            KeyedArgument("param2", ""),
            "world",
        ))
        self.assertEqual(out[0].positional, ["world"])
        self.assertEqual(out[0].keyed, {"param": "hello", "param2": ""})

    def test_argument_tokens_kept_verbatim(self):
        out = parser.parse_rules("betweenNumber[0, 100]")
        self.assertEqual(out[0].arguments, ("0", " 100"))

    def test_value_may_contain_equals(self):
        out = parser.parse_rules("match[expr=a=b]")
        self.assertEqual(out[0].arguments, (KeyedArgument("expr", "a=b"),))

    def test_empty_brackets_and_empty_string(self):
        self.assertEqual(parser.parse_rules("email[]"), (RuleDescriptor("email"),))
        self.assertEqual(parser.parse_rules(""), ())

    def test_pipe_inside_brackets_is_an_argument(self):
        out = parser.parse_rules("oneOf[a|b,c]|email")
        self.assertEqual(out[0].arguments, ("a|b", "c"))
        self.assertEqual(out[1].name, "email")


class ParserErrorTests(unittest.TestCase):
    def test_unmatched_open_bracket(self):
        with self.assertRaisesRegex(RuleSyntaxError, r"unmatched '\['"):
            parser.parse_rules("betweenNumber[0,100")

    def test_stray_closing_bracket(self):
        with self.assertRaises(RuleSyntaxError):
            parser.parse_rules("email]")

    def test_nested_brackets_rejected(self):
        with self.assertRaisesRegex(RuleSyntaxError, "nested"):
            parser.parse_rules("a[b[c]]")

    def test_text_after_closing_bracket(self):
        with self.assertRaises(RuleSyntaxError):
            parser.parse_rules("equals[x]y")

    def test_empty_directive(self):
        with self.assertRaises(RuleSyntaxError):
            parser.parse_rules("email||equals[x]")

    def test_rule_syntax_error_is_schema_error(self):
        with self.assertRaises(SchemaError):
            parser.parse_rules("[x]")

    def test_non_string_raises_type_error(self):
        with self.assertRaises(TypeError):
            parser.parse_rules(42)
