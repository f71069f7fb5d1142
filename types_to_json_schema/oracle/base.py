"""
Base class for Type Oracles.

Provides the abstract capability interface the schema generator uses to
query a type-checked program. Everything program-specific (parsing,
checking, name display) lives behind it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .model import Declaration, DocSegment, DocTag, SourceUnit, SymbolInfo, TypeInfo


class TypeOracle(ABC):
    """Queries a type-checked program on behalf of the schema generator."""

    @abstractmethod
    def source_units(self) -> list[SourceUnit]:
        """Source units in deterministic program order."""

    @abstractmethod
    def diagnostics(self) -> list[str]:
        """Pre-emit diagnostics of the program, already formatted."""

    @abstractmethod
    def current_directory(self) -> str:
        """Directory unit paths are made relative to."""

    @abstractmethod
    def type_at(self, node: Declaration) -> TypeInfo:
        """Declared type of a class, interface, enum or alias declaration."""

    @abstractmethod
    def type_to_string(self, typ: TypeInfo) -> str:
        """Fully qualified, untruncated display name of a type."""

    @abstractmethod
    def fully_qualified_name(self, symbol: SymbolInfo) -> str:
        """Fully qualified name of a symbol, module prefix included."""

    @abstractmethod
    def aliased_symbol(self, symbol: SymbolInfo) -> SymbolInfo:
        """Target of an alias symbol."""

    @abstractmethod
    def properties_of(self, typ: TypeInfo) -> list[SymbolInfo]:
        """Own and inherited properties of a type, own ones first."""

    @abstractmethod
    def base_types(self, typ: TypeInfo) -> list[TypeInfo]:
        """Declared base types of a class or interface type."""

    @abstractmethod
    def number_index_type(self, typ: TypeInfo) -> TypeInfo | None:
        """Element type of a number-indexed (array-like) type."""

    @abstractmethod
    def type_of_symbol(self, symbol: SymbolInfo, node: Declaration | None = None) -> TypeInfo:
        """Type of a property symbol as seen from a declaration."""

    @abstractmethod
    def referenced_type_symbol(self, prop: SymbolInfo) -> SymbolInfo | None:
        """Symbol named by a property's type annotation, aliases resolved."""

    @abstractmethod
    def constant_value(self, member: Declaration) -> str | int | float | None:
        """Compiler-computed constant of an enum member, or None."""

    @abstractmethod
    def documentation(self, symbol: SymbolInfo) -> list[DocSegment]:
        """Documentation comment segments of a symbol."""

    @abstractmethod
    def doc_tags(self, symbol: SymbolInfo) -> list[DocTag]:
        """Documentation tags of a symbol."""

    @abstractmethod
    def source_unit_of(self, node: Declaration) -> SourceUnit | None:
        """Source unit a declaration belongs to."""
