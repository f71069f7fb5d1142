import unittest
from unittest import TestCase

from types_to_json_schema.annotations import AnnotationParser, parse_value
from types_to_json_schema.diagnostics import Diagnostics
from types_to_json_schema.oracle.model import DocSegment, DocTag, SymbolInfo
from types_to_json_schema.oracle.model_oracle import ModelOracle


def symbol(documentation=(), tags=()):
    return SymbolInfo(name="field", documentation=list(documentation), tags=[DocTag(n, t) for n, t in tags])


class TestAnnotationParser(TestCase):
    def setUp(self):
        self.parser = AnnotationParser(ModelOracle([]))

    def parse(self, sym, parser=None):
        definition, other = {}, set()
        diagnostics = Diagnostics()
        (parser or self.parser).parse_into(sym, definition, other, diagnostics)
        return definition, other, diagnostics

    def test_no_symbol(self):
        definition, other = {}, set()
        self.parser.parse_into(None, definition, other)
        self.assertEqual(definition, {})
        self.assertEqual(other, set())

    def test_description(self):
        sym = symbol([DocSegment(" First line "), DocSegment("\n", "lineBreak"), DocSegment("second line\r\n")])
        definition, _, _ = self.parse(sym)
        self.assertEqual(definition, {"description": "First line\nsecond line"})

    def test_empty_description_is_skipped(self):
        definition, _, _ = self.parse(symbol([DocSegment("   ")]))
        self.assertNotIn("description", definition)

    def test_validation_keywords(self):
        sym = symbol(
            tags=[
                ("minLength", "3"),
                ("maximum", "10.5"),
                ("pattern", "^[a-z]+$"),
                ("uniqueItems", "true"),
                ("default", '{"a": 1}'),
                ("format", None),
            ]
        )
        definition, other, _ = self.parse(sym)
        self.assertEqual(
            definition,
            {
                "minLength": 3,
                "maximum": 10.5,
                "pattern": "^[a-z]+$",
                "uniqueItems": True,
                "default": {"a": 1},
                "format": "",
            },
        )
        self.assertEqual(other, set())

    def test_other_annotations(self):
        definition, other, _ = self.parse(symbol(tags=[("nullable", None), ("deprecated", "use name")]))
        self.assertEqual(definition, {})
        self.assertEqual(other, {"nullable", "deprecated"})

    def test_sentinel_tag(self):
        definition, other, _ = self.parse(symbol(tags=[("TJS", "-format email"), ("TJS", "-type integer")]))
        self.assertEqual(definition, {"format": "email", "type": "integer"})
        self.assertEqual(other, set())

    def test_malformed_sentinel_tag(self):
        definition, other, diagnostics = self.parse(symbol(tags=[("TJS", "format")]))
        self.assertEqual(definition, {})
        self.assertEqual(other, {"TJS"})
        self.assertEqual(len(diagnostics.warnings), 1)

    def test_extra_keywords(self):
        sym = symbol(tags=[("examples", '["a", "b"]')])

        definition, other, _ = self.parse(sym)
        self.assertEqual(definition, {})
        self.assertEqual(other, {"examples"})

        parser = AnnotationParser(ModelOracle([]), ["examples"])
        definition, other, _ = self.parse(sym, parser)
        self.assertEqual(definition, {"examples": ["a", "b"]})
        self.assertEqual(other, set())


class TestParseValue(TestCase):
    def test_json(self):
        self.assertEqual(parse_value("3"), 3)
        self.assertEqual(parse_value("[1, 2]"), [1, 2])
        self.assertIsNone(parse_value("null"))

    def test_raw_text(self):
        self.assertEqual(parse_value("email"), "email")
        self.assertEqual(parse_value("^\\d+$"), "^\\d+$")


if __name__ == "__main__":
    unittest.main()
