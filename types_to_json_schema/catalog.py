"""
Symbol catalog built from the program's declarations.

Walks every source unit once and records the named types, which of them
are user-declared, and which types inherit from which base.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .oracle.base import TypeOracle
from .oracle.model import CATALOG_NODE_KINDS, Declaration, SourceUnit, SymbolInfo, TypeInfo
from .utils import node_hash, strip_module_prefix


@dataclass
class SymbolRef:
    """A catalog entry for one type declaration."""

    name: str = ""  # Catalog name (short name, hashed with unique_names)
    type_name: str = ""  # Short name without module prefix
    fully_qualified_name: str = ""
    symbol: SymbolInfo | None = None


@dataclass
class SymbolCatalog:
    """Result of walking the program's declarations."""

    # Every declaration, in walk order (never deduplicated)
    symbols: list[SymbolRef] = field(default_factory=list)

    # Catalog name -> type; a user declaration is never shadowed
    all_symbols: dict[str, TypeInfo] = field(default_factory=dict)

    # Catalog name -> symbol, for declarations in user units
    user_symbols: dict[str, SymbolInfo] = field(default_factory=dict)

    # Base type full name -> names of types inheriting from it
    inheriting_types: dict[str, list[str]] = field(default_factory=dict)


class CatalogBuilder:
    """Builds a SymbolCatalog from a Type Oracle."""

    def __init__(self, oracle: TypeOracle, unique_names: bool = False, only_include_files: list[str] | None = None):
        """
        Initialize the builder.

        Args:
            oracle: Type oracle of the program
            unique_names: Suffix names with a hash of the declaration location
            only_include_files: Files considered user units (None = non-library units)
        """
        self.oracle = oracle
        self.unique_names = unique_names
        self.only_include_files = only_include_files

    def build(self) -> SymbolCatalog:
        catalog = SymbolCatalog()
        working_dir = self.oracle.current_directory()

        for unit in self.oracle.source_units():
            relative_path = os.path.relpath(unit.file_name, working_dir)
            is_user = self._is_user_unit(unit)
            for node in unit.statements:
                self._inspect(node, relative_path, is_user, catalog)

        return catalog

    def _is_user_unit(self, unit: SourceUnit) -> bool:
        if self.only_include_files is None:
            return not unit.is_library
        return unit.file_name in self.only_include_files

    def _inspect(self, node: Declaration, relative_path: str, is_user: bool, catalog: SymbolCatalog) -> None:
        """Register a type declaration, or recurse into a non-type node."""
        if node.kind not in CATALOG_NODE_KINDS or node.symbol is None:
            for child in node.children:
                self._inspect(child, relative_path, is_user, catalog)
            return

        symbol = node.symbol
        node_type = self.oracle.type_at(node)
        fully_qualified_name = self.oracle.fully_qualified_name(symbol)
        type_name = strip_module_prefix(fully_qualified_name)
        name = type_name
        if self.unique_names:
            name = f"{type_name}.{node_hash(relative_path, node.position)}"

        catalog.symbols.append(
            SymbolRef(
                name=name,
                type_name=type_name,
                fully_qualified_name=fully_qualified_name,
                symbol=symbol,
            )
        )

        # The first user declaration owns its name, otherwise the first one seen
        owned_by_user = name in catalog.user_symbols
        if name not in catalog.all_symbols or (is_user and not owned_by_user):
            catalog.all_symbols[name] = node_type

        if is_user and not owned_by_user:
            catalog.user_symbols[name] = symbol

        for base_type in self.oracle.base_types(node_type):
            base_name = self.oracle.type_to_string(base_type)
            catalog.inheriting_types.setdefault(base_name, []).append(name)


def build_catalog(
    oracle: TypeOracle,
    unique_names: bool = False,
    only_include_files: list[str] | None = None,
) -> SymbolCatalog:
    """Walk the program once and build its symbol catalog."""
    return CatalogBuilder(oracle, unique_names, only_include_files).build()
