"""
Type Oracle over the in-memory declaration model.

The model already carries everything a checker would compute, so most
queries are lookups. Inherited properties and unit membership are derived
once from the model.
"""

from __future__ import annotations

from .base import TypeOracle
from .model import Declaration, DocSegment, DocTag, SourceUnit, SymbolFlags, SymbolInfo, TypeInfo


class ModelOracle(TypeOracle):
    """Answers oracle queries from model dataclasses."""

    def __init__(
        self,
        units: list[SourceUnit],
        diagnostics: list[str] | None = None,
        current_directory: str = ".",
    ):
        """
        Initialize the oracle.

        Args:
            units: Source units in program order
            diagnostics: Formatted pre-emit diagnostics, if any
            current_directory: Directory unit paths are relative to
        """
        self.units = units
        self._diagnostics = list(diagnostics or [])
        self._current_directory = current_directory
        self._unit_by_node: dict[int, SourceUnit] = {}
        self._index_units()

    def _index_units(self) -> None:
        """Map every declaration node to its source unit."""
        for unit in self.units:
            stack = list(unit.statements)
            while stack:
                node = stack.pop()
                self._unit_by_node[id(node)] = unit
                stack.extend(node.children)
                stack.extend(node.members)

    def source_units(self) -> list[SourceUnit]:
        return self.units

    def diagnostics(self) -> list[str]:
        return self._diagnostics

    def current_directory(self) -> str:
        return self._current_directory

    def type_at(self, node: Declaration) -> TypeInfo:
        if node.type is not None:
            return node.type
        if node.symbol is not None and node.symbol.type is not None:
            return node.symbol.type
        raise ValueError(f"Declaration {node.name!r} has no type")

    def type_to_string(self, typ: TypeInfo) -> str:
        return typ.name

    def fully_qualified_name(self, symbol: SymbolInfo) -> str:
        return symbol.fully_qualified_name or symbol.name

    def aliased_symbol(self, symbol: SymbolInfo) -> SymbolInfo:
        return symbol.aliased if symbol.aliased is not None else symbol

    def properties_of(self, typ: TypeInfo) -> list[SymbolInfo]:
        props: list[SymbolInfo] = []
        seen: set[str] = set()
        self._collect_properties(typ, props, seen, set())
        return props

    def _collect_properties(self, typ: TypeInfo, props: list[SymbolInfo], seen: set[str], visited: set[int]) -> None:
        if id(typ) in visited:
            return
        visited.add(id(typ))

        if typ.symbol is not None:
            for member in typ.symbol.members:
                if member.name not in seen:
                    seen.add(member.name)
                    props.append(member)

        for base in typ.base_types:
            self._collect_properties(base, props, seen, visited)

    def base_types(self, typ: TypeInfo) -> list[TypeInfo]:
        return typ.base_types

    def number_index_type(self, typ: TypeInfo) -> TypeInfo | None:
        return typ.number_index_type

    def type_of_symbol(self, symbol: SymbolInfo, node: Declaration | None = None) -> TypeInfo:
        if symbol.type is None:
            raise ValueError(f"Symbol {symbol.name!r} has no type")
        return symbol.type

    def referenced_type_symbol(self, prop: SymbolInfo) -> SymbolInfo | None:
        symbol = prop.referenced_type
        if symbol is not None and symbol.flags & SymbolFlags.ALIAS:
            return self.aliased_symbol(symbol)
        return symbol

    def constant_value(self, member: Declaration) -> str | int | float | None:
        return member.constant_value

    def documentation(self, symbol: SymbolInfo) -> list[DocSegment]:
        return symbol.documentation

    def doc_tags(self, symbol: SymbolInfo) -> list[DocTag]:
        return symbol.tags

    def source_unit_of(self, node: Declaration) -> SourceUnit | None:
        return self._unit_by_node.get(id(node))
