import json
from pathlib import Path

import pytest

from types_to_json_schema.errors import ProgramLoadError
from types_to_json_schema.oracle import load_program, load_program_dict
from types_to_json_schema.oracle.model import (
    ExpressionKind,
    ModifierFlags,
    NodeKind,
    ObjectFlags,
    SymbolFlags,
    TypeFlags,
)

PROGRAM_PATH = Path(__file__).parent / "test_data" / "program.json"


@pytest.fixture
def oracle():
    return load_program(str(PROGRAM_PATH))


def test_units(oracle):
    units = oracle.source_units()
    assert [u.file_name for u in units] == [
        "/project/node_modules/typescript/lib/lib.d.ts",
        "/project/src/shapes.ts",
    ]
    assert units[0].is_library and units[0].is_declaration_file
    assert not units[1].is_library
    assert [d.name for d in units[1].statements] == ["ShapeKind", "Circle", "Square", "Drawing", "Color"]
    assert oracle.current_directory() == "/project"
    assert oracle.diagnostics() == []


def test_references_are_linked(oracle):
    drawing = oracle.source_units()[1].statements[3]
    assert drawing.kind is NodeKind.INTERFACE_DECLARATION
    assert drawing.modifiers == ModifierFlags.EXPORT
    assert drawing.symbol.name == "Drawing"
    assert drawing.type.symbol is drawing.symbol
    assert drawing.type.object_flags == ObjectFlags.INTERFACE
    assert [m.name for m in drawing.symbol.members] == ["title", "shapes", "color", "defaultKind"]

    title, shapes, _, default_kind = drawing.symbol.members
    assert title.flags == SymbolFlags.PROPERTY | SymbolFlags.OPTIONAL
    assert [t.flags for t in title.type.types] == [TypeFlags.UNDEFINED, TypeFlags.STRING]
    assert shapes.type.number_index_type.flags == TypeFlags.UNION
    assert default_kind.referenced_type.name == "ShapeKind"


def test_documentation_and_tags(oracle):
    statements = oracle.source_units()[1].statements
    shape_kind, circle = statements[0].symbol, statements[1].symbol

    assert [s.text for s in shape_kind.documentation] == ["Kind of shape"]
    assert [s.text for s in circle.documentation] == ["A circle"]
    radius = circle.members[1]
    assert [(t.name, t.text) for t in radius.tags] == [("minimum", "0")]


def test_initializers_and_constants(oracle):
    circle = oracle.source_units()[1].statements[1]
    radius = circle.symbol.members[1].declarations[0]
    assert radius.initializer.kind is ExpressionKind.NUMERIC_LITERAL
    assert radius.initializer.value == 1

    color = oracle.source_units()[1].statements[4]
    assert [oracle.constant_value(m) for m in color.members] == ["red", "green"]


def test_type_ids_default_to_position():
    oracle = load_program_dict(
        {
            "types": {
                "a": {"flags": ["STRING"]},
                "b": {"flags": ["NUMBER"], "id": 40},
                "u": {"flags": ["UNION"], "types": ["a", "b"]},
            },
            "symbols": {"s": {"name": "x", "flags": ["PROPERTY"], "type": "u"}},
            "declarations": {"d": {"kind": "property", "name": "x", "symbol": "s"}},
            "units": [{"fileName": "/a.ts", "statements": ["d"]}],
        }
    )
    union = oracle.source_units()[0].statements[0].symbol.type
    assert union.id == 3
    assert [t.id for t in union.types] == [1, 40]


def test_flags_accept_integers_and_single_names():
    oracle = load_program_dict(
        {
            "types": {"a": {"flags": TypeFlags.STRING.value}},
            "symbols": {"s": {"name": "x", "flags": "property", "type": "a"}},
            "declarations": {"d": {"kind": "PROPERTY", "name": "x", "symbol": "s"}},
            "units": [{"fileName": "/a.ts", "statements": ["d"]}],
        }
    )
    declaration = oracle.source_units()[0].statements[0]
    assert declaration.kind is NodeKind.PROPERTY
    assert declaration.symbol.flags == SymbolFlags.PROPERTY
    assert declaration.symbol.type.flags == TypeFlags.STRING


def test_expression_shorthand():
    oracle = load_program_dict(
        {
            "declarations": {"d": {"kind": "property", "name": "x", "initializer": "compute()"}},
            "units": [{"fileName": "/a.ts", "statements": ["d"]}],
        }
    )
    initializer = oracle.source_units()[0].statements[0].initializer
    assert initializer.kind is ExpressionKind.OTHER
    assert initializer.text == "compute()"


@pytest.mark.parametrize(
    "data,message",
    [
        ({"types": {"a": {"symbol": "missing"}}}, "unresolved reference 'missing'"),
        ({"types": {"a": {"flags": ["STRINGY"]}}}, "unknown TypeFlags member 'STRINGY'"),
        ({"declarations": {"d": {"kind": "widget"}}}, "unknown NodeKind 'widget'"),
        ({"units": [{"statements": []}]}, "missing fileName"),
        ({"types": []}, "must be an object keyed by reference"),
    ],
)
def test_malformed_dump(data, message):
    with pytest.raises(ProgramLoadError, match=message):
        load_program_dict(data)


def test_non_object_dump():
    with pytest.raises(ProgramLoadError, match="must be a JSON object"):
        load_program_dict([])


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ProgramLoadError, match="Invalid program dump"):
        load_program(str(path))


def test_round_trip_through_file(tmp_path):
    path = tmp_path / "program.json"
    path.write_text(json.dumps({"currentDirectory": "/tmp", "diagnostics": ["error TS1005"], "units": []}))

    oracle = load_program(str(path))
    assert oracle.diagnostics() == ["error TS1005"]
    assert oracle.current_directory() == "/tmp"
