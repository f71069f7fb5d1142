import re
import unittest
from unittest import TestCase

from program_builder import ProgramBuilder

from types_to_json_schema.catalog import build_catalog
from types_to_json_schema.utils import node_hash


class TestCatalog(TestCase):
    def test_registers_type_declarations(self):
        b = ProgramBuilder()
        user = b.interface("User")
        b.enum("Role", [("Admin", "admin", None)])
        alias_target = b.union(b.literal("a"), b.literal("b"))
        b.alias("Letter", alias_target)

        catalog = build_catalog(b.oracle())

        self.assertEqual([s.name for s in catalog.symbols], ["User", "Role", "Letter"])
        self.assertIs(catalog.all_symbols["User"], user)
        self.assertIs(catalog.all_symbols["Letter"], alias_target)
        self.assertEqual(list(catalog.user_symbols), ["User", "Role", "Letter"])

    def test_fully_qualified_and_short_names(self):
        b = ProgramBuilder()
        b.interface("User")
        ref = build_catalog(b.oracle()).symbols[0]

        self.assertEqual(ref.fully_qualified_name, '"/project/src/types".User')
        self.assertEqual(ref.type_name, "User")
        self.assertEqual(ref.name, "User")

    def test_nested_declarations(self):
        b = ProgramBuilder()
        namespace = b.namespace("Geometry")
        b.interface("Point", parent=namespace)

        catalog = build_catalog(b.oracle())
        self.assertIn("Point", catalog.all_symbols)
        self.assertIn("Point", catalog.user_symbols)

    def test_user_declaration_wins_over_library(self):
        b = ProgramBuilder()
        lib = b.add_unit("/project/node_modules/lib.d.ts", is_library=True)
        b.units.reverse()  # library unit first
        library_event = b.interface("Event", unit=lib)
        user_event = b.interface("Event", [b.prop("name", b.string)])

        catalog = build_catalog(b.oracle())

        self.assertIs(catalog.all_symbols["Event"], user_event)
        self.assertIs(catalog.user_symbols["Event"], user_event.symbol)
        # Every declaration stays in the list
        self.assertEqual([s.symbol for s in catalog.symbols], [library_event.symbol, user_event.symbol])

    def test_first_user_declaration_wins(self):
        b = ProgramBuilder()
        other = b.add_unit("/project/src/other.ts")
        first = b.interface("Config")
        b.interface("Config", unit=other)

        catalog = build_catalog(b.oracle())

        self.assertIs(catalog.all_symbols["Config"], first)
        self.assertIs(catalog.user_symbols["Config"], first.symbol)
        self.assertEqual(len(catalog.symbols), 2)

    def test_first_library_declaration_wins(self):
        b = ProgramBuilder()
        lib_a = b.add_unit("/project/node_modules/a.d.ts", is_library=True)
        lib_b = b.add_unit("/project/node_modules/b.d.ts", is_library=True)
        first = b.interface("Promise", unit=lib_a)
        b.interface("Promise", unit=lib_b)

        catalog = build_catalog(b.oracle())

        self.assertIs(catalog.all_symbols["Promise"], first)
        self.assertNotIn("Promise", catalog.user_symbols)

    def test_only_include_files(self):
        b = ProgramBuilder()
        other = b.add_unit("/project/src/other.ts")
        b.interface("Included", unit=other)
        b.interface("Excluded")

        catalog = build_catalog(b.oracle(), only_include_files=["/project/src/other.ts"])

        self.assertEqual(list(catalog.user_symbols), ["Included"])
        self.assertEqual(sorted(catalog.all_symbols), ["Excluded", "Included"])

    def test_unique_names(self):
        b = ProgramBuilder()
        other = b.add_unit("/project/src/other.ts")
        first = b.interface("Item")
        second = b.interface("Item", unit=other)

        catalog = build_catalog(b.oracle(), unique_names=True)
        names = [s.name for s in catalog.symbols]

        for name in names:
            self.assertRegex(name, re.compile(r"^Item\.[0-9a-f]{8}$"))
        self.assertNotEqual(names[0], names[1])
        self.assertEqual(names[0], f"Item.{node_hash('src/types.ts', first.symbol.declarations[0].position)}")
        self.assertEqual(names[1], f"Item.{node_hash('src/other.ts', second.symbol.declarations[0].position)}")
        self.assertEqual([s.type_name for s in catalog.symbols], ["Item", "Item"])
        self.assertEqual(sorted(catalog.all_symbols), sorted(names))

    def test_inheriting_types(self):
        b = ProgramBuilder()
        base = b.klass("Animal", abstract=True)
        b.klass("Dog", bases=[base])
        b.klass("Cat", bases=[base])

        catalog = build_catalog(b.oracle())
        self.assertEqual(catalog.inheriting_types, {base.name: ["Dog", "Cat"]})


if __name__ == "__main__":
    unittest.main()
