"""
Loader for JSON program dumps.

A program dump is the checked program written out by a front-end::

    {
        "currentDirectory": "/project",
        "diagnostics": [],
        "types": {"<key>": {...}},
        "symbols": {"<key>": {...}},
        "declarations": {"<key>": {...}},
        "units": [{"fileName": ..., "statements": ["<declaration key>", ...]}]
    }

Entries reference each other by key, so cyclic graphs are expressed
naturally. Flags are lists of enum member names (``["OBJECT"]``).
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from ..errors import ProgramLoadError
from .model import (
    Declaration,
    DocSegment,
    DocTag,
    Expression,
    ExpressionKind,
    ModifierFlags,
    NodeKind,
    ObjectFlags,
    SourceUnit,
    SymbolFlags,
    SymbolInfo,
    TypeFlags,
    TypeInfo,
)
from .model_oracle import ModelOracle


def _parse_flags(enum_class: type, names: Any, where: str):
    if names is None:
        return enum_class(0)
    if isinstance(names, int):
        return enum_class(names)
    if isinstance(names, str):
        names = [names]

    value = enum_class(0)
    for name in names:
        try:
            value |= enum_class[name.upper()]
        except KeyError:
            raise ProgramLoadError(f"{where}: unknown {enum_class.__name__} member {name!r}") from None
    return value


def _parse_kind(enum_class: type[Enum], value: Any, where: str):
    if value is None:
        return enum_class("other")
    try:
        return enum_class(value.lower())
    except (AttributeError, ValueError):
        raise ProgramLoadError(f"{where}: unknown {enum_class.__name__} {value!r}") from None


def _parse_expression(data: dict | None, where: str) -> Expression | None:
    if data is None:
        return None
    if isinstance(data, str):
        # Shorthand: source text only
        return Expression(kind=ExpressionKind.OTHER, text=data)
    return Expression(
        kind=_parse_kind(ExpressionKind, data.get("kind"), where),
        text=data.get("text", ""),
        value=data.get("value"),
        expression=_parse_expression(data.get("expression"), where),
    )


def _parse_documentation(data: Any) -> list[DocSegment]:
    if data is None:
        return []
    if isinstance(data, str):
        return [DocSegment(text=data)]
    return [DocSegment(text=segment.get("text", ""), kind=segment.get("kind", "text")) for segment in data]


class ProgramDumpLoader:
    """Builds model objects from a program dump in two passes.

    The first pass creates every type, symbol and declaration; the second
    links the key references between them.
    """

    def __init__(self, data: dict[str, Any]):
        if not isinstance(data, dict):
            raise ProgramLoadError("Program dump must be a JSON object")
        self.data = data
        self.types: dict[str, TypeInfo] = {}
        self.symbols: dict[str, SymbolInfo] = {}
        self.declarations: dict[str, Declaration] = {}

    def load(self) -> ModelOracle:
        type_entries = self._section("types")
        symbol_entries = self._section("symbols")
        declaration_entries = self._section("declarations")

        for index, (key, entry) in enumerate(type_entries.items(), start=1):
            where = f"types.{key}"
            self.types[key] = TypeInfo(
                id=entry.get("id", index),
                flags=_parse_flags(TypeFlags, entry.get("flags"), where),
                object_flags=_parse_flags(ObjectFlags, entry.get("objectFlags"), where),
                name=entry.get("name", ""),
                value=entry.get("value"),
            )

        for key, entry in symbol_entries.items():
            where = f"symbols.{key}"
            self.symbols[key] = SymbolInfo(
                name=entry.get("name", ""),
                flags=_parse_flags(SymbolFlags, entry.get("flags"), where),
                fully_qualified_name=entry.get("fullyQualifiedName", ""),
                documentation=_parse_documentation(entry.get("documentation")),
                tags=[DocTag(name=tag.get("name", ""), text=tag.get("text")) for tag in entry.get("tags", [])],
            )

        for key, entry in declaration_entries.items():
            where = f"declarations.{key}"
            self.declarations[key] = Declaration(
                kind=_parse_kind(NodeKind, entry.get("kind"), where),
                name=entry.get("name", ""),
                modifiers=_parse_flags(ModifierFlags, entry.get("modifiers"), where),
                initializer=_parse_expression(entry.get("initializer"), where),
                constant_value=entry.get("constantValue"),
                position=entry.get("position", 0),
            )

        for key, entry in type_entries.items():
            self._link_type(self.types[key], entry, f"types.{key}")
        for key, entry in symbol_entries.items():
            self._link_symbol(self.symbols[key], entry, f"symbols.{key}")
        for key, entry in declaration_entries.items():
            self._link_declaration(self.declarations[key], entry, f"declarations.{key}")

        units = [self._unit(entry, f"units[{i}]") for i, entry in enumerate(self.data.get("units", []))]
        return ModelOracle(
            units,
            diagnostics=self.data.get("diagnostics", []),
            current_directory=self.data.get("currentDirectory", "."),
        )

    def _section(self, name: str) -> dict[str, dict[str, Any]]:
        section = self.data.get(name, {})
        if not isinstance(section, dict):
            raise ProgramLoadError(f"Section {name!r} must be an object keyed by reference")
        return section

    def _ref(self, table: dict[str, Any], key: str | None, where: str):
        if key is None:
            return None
        try:
            return table[key]
        except KeyError:
            raise ProgramLoadError(f"{where}: unresolved reference {key!r}") from None

    def _refs(self, table: dict[str, Any], keys: list[str] | None, where: str) -> list:
        return [self._ref(table, key, where) for key in keys or []]

    def _link_type(self, typ: TypeInfo, entry: dict[str, Any], where: str) -> None:
        typ.symbol = self._ref(self.symbols, entry.get("symbol"), where)
        typ.alias_symbol = self._ref(self.symbols, entry.get("aliasSymbol"), where)
        typ.alias_type_arguments = self._refs(self.types, entry.get("aliasTypeArguments"), where)
        typ.types = self._refs(self.types, entry.get("types"), where)
        typ.element_types = self._refs(self.types, entry.get("elementTypes"), where)
        typ.base_types = self._refs(self.types, entry.get("baseTypes"), where)
        typ.number_index_type = self._ref(self.types, entry.get("numberIndexType"), where)

    def _link_symbol(self, symbol: SymbolInfo, entry: dict[str, Any], where: str) -> None:
        symbol.declarations = self._refs(self.declarations, entry.get("declarations"), where)
        symbol.members = self._refs(self.symbols, entry.get("members"), where)
        symbol.type = self._ref(self.types, entry.get("type"), where)
        symbol.referenced_type = self._ref(self.symbols, entry.get("referencedType"), where)
        symbol.aliased = self._ref(self.symbols, entry.get("aliased"), where)

    def _link_declaration(self, declaration: Declaration, entry: dict[str, Any], where: str) -> None:
        declaration.symbol = self._ref(self.symbols, entry.get("symbol"), where)
        declaration.type = self._ref(self.types, entry.get("type"), where)
        declaration.members = self._refs(self.declarations, entry.get("members"), where)
        declaration.children = self._refs(self.declarations, entry.get("children"), where)
        declaration.parameters = self._refs(self.types, entry.get("parameters"), where)

    def _unit(self, entry: dict[str, Any], where: str) -> SourceUnit:
        if "fileName" not in entry:
            raise ProgramLoadError(f"{where}: missing fileName")
        return SourceUnit(
            file_name=entry["fileName"],
            statements=self._refs(self.declarations, entry.get("statements"), where),
            is_library=entry.get("isLibrary", False),
            is_declaration_file=entry.get("isDeclarationFile", False),
        )


def load_program_dict(data: dict[str, Any]) -> ModelOracle:
    """
    Build an oracle from an already parsed program dump.

    Args:
        data: The program dump

    Returns:
        A ModelOracle over the dumped program

    Raises:
        ProgramLoadError: If the dump is malformed
    """
    return ProgramDumpLoader(data).load()


def load_program(path: str) -> ModelOracle:
    """Read a program dump JSON file into an oracle."""
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProgramLoadError(f"Invalid program dump {path}: {e}") from e
    return load_program_dict(data)
