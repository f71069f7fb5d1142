"""
Schema generator facade.

Builds the symbol catalog of a program once, then assembles JSON Schema
documents for one or more requested root types.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from .arena import DefinitionArena
from .catalog import SymbolCatalog, SymbolRef, build_catalog
from .config import GeneratorConfig
from .diagnostics import Diagnostics
from .errors import ProgramDiagnosticsError, SchemaGenerationError, SymbolNotFoundError
from .naming import TypeNameRegistry
from .oracle.base import TypeOracle
from .oracle.model import SourceUnit
from .resolver import TypeDefinitionResolver

logger = logging.getLogger(__name__)

SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"


class JsonSchemaGenerator:
    """
    Generates JSON Schema documents for the named types of a program.

    Referenced definitions accumulate across requests on the same
    generator, so requesting several types shares their common
    definitions.
    """

    def __init__(self, oracle: TypeOracle, catalog: SymbolCatalog, config: GeneratorConfig | None = None):
        """
        Initialize the generator.

        Args:
            oracle: Type oracle of the program
            catalog: Symbol catalog built from the same oracle
            config: Generation options
        """
        self.oracle = oracle
        self.catalog = catalog
        self.config = config or GeneratorConfig()
        self.arena = DefinitionArena()
        self.names = TypeNameRegistry(oracle)
        self.resolver = TypeDefinitionResolver(oracle, catalog, self.config, self.arena, self.names)

        # Diagnostics of the last request
        self.diagnostics = Diagnostics()

    @property
    def reffed_definitions(self) -> dict[str, dict[str, Any]]:
        return self.arena.as_dict()

    def get_schema_for_symbol(
        self,
        name: str,
        include_reffed_definitions: bool = True,
        diagnostics: Diagnostics | None = None,
    ) -> dict[str, Any]:
        """
        Generate the schema of a single type.

        Args:
            name: Catalog name of the type
            include_reffed_definitions: Attach referenced definitions
            diagnostics: Collector to use instead of a fresh one

        Returns:
            The schema document

        Raises:
            SymbolNotFoundError: If the name is not in the catalog
        """
        if name not in self.catalog.all_symbols:
            raise SymbolNotFoundError(name)

        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        logger.debug(f"Generating schema for {name}")

        known = set(self.arena.as_dict())
        try:
            schema = self._resolve_root(name)
        except SchemaGenerationError:
            self.arena.rollback(known)
            raise

        if self.config.ref and include_reffed_definitions and len(self.arena) > 0:
            schema["definitions"] = self.reffed_definitions

        schema["$schema"] = SCHEMA_DRAFT
        if self.config.id:
            schema["$id"] = self.config.id

        return schema

    def get_schema_for_symbols(
        self,
        names: list[str],
        include_reffed_definitions: bool = True,
        diagnostics: Diagnostics | None = None,
    ) -> dict[str, Any]:
        """
        Generate one schema holding the definitions of several types.

        Args:
            names: Catalog names of the types
            include_reffed_definitions: Merge referenced definitions in
            diagnostics: Collector to use instead of a fresh one

        Returns:
            The schema document with a ``definitions`` map

        Raises:
            SymbolNotFoundError: If a name is not in the catalog
        """
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        root: dict[str, Any] = {"$schema": SCHEMA_DRAFT}
        if self.config.id:
            root["$id"] = self.config.id

        definitions: dict[str, Any] = {}
        known = set(self.arena.as_dict())
        try:
            for name in names:
                if name not in self.catalog.all_symbols:
                    raise SymbolNotFoundError(name)
                logger.debug(f"Generating definition for {name}")
                definitions[name] = self._resolve_root(name)
        except SchemaGenerationError:
            # A failed request leaves no definitions behind
            self.arena.rollback(known)
            raise

        if self.config.ref and include_reffed_definitions and len(self.arena) > 0:
            definitions = {**definitions, **self.reffed_definitions}

        root["definitions"] = definitions
        return root

    def _resolve_root(self, name: str) -> dict[str, Any]:
        return self.resolver.resolve(
            self.catalog.all_symbols[name],
            self.diagnostics,
            as_ref=self.config.top_ref,
            paired_symbol=self.catalog.user_symbols.get(name),
        )

    def get_symbols(self, name: str | None = None) -> list[SymbolRef]:
        """All catalog entries, or those whose short type name is ``name``."""
        if name is None:
            return self.catalog.symbols
        return [symbol for symbol in self.catalog.symbols if symbol.type_name == name]

    def get_user_symbols(self) -> list[str]:
        return list(self.catalog.user_symbols)

    def get_main_file_symbols(self, only_include_files: list[str] | None = None) -> list[str]:
        """
        Names of user symbols declared in main units.

        Args:
            only_include_files: Units to consider (default: every non-declaration unit)

        Returns:
            Catalog names in registration order
        """
        main_units = [unit for unit in self.oracle.source_units() if self._is_main_unit(unit, only_include_files)]
        if not main_units:
            return []

        main_ids = {id(unit) for unit in main_units}
        names = []
        for name, symbol in self.catalog.user_symbols.items():
            if not symbol.declarations:
                continue
            unit = self.oracle.source_unit_of(symbol.declarations[0])
            if unit is not None and id(unit) in main_ids:
                names.append(name)
        return names

    @staticmethod
    def _is_main_unit(unit: SourceUnit, only_include_files: list[str] | None) -> bool:
        if only_include_files is None:
            return not unit.is_declaration_file
        file_name = os.path.normpath(unit.file_name)
        return any(os.path.normpath(f) == file_name for f in only_include_files)

    def set_schema_override(self, name: str, schema: dict[str, Any]) -> None:
        """Use a fixed definition for a type name instead of resolving it."""
        self.arena.put(name, schema)


def build_generator(
    oracle: TypeOracle,
    config: GeneratorConfig | None = None,
    only_include_files: list[str] | None = None,
) -> JsonSchemaGenerator:
    """
    Build a generator for a checked program.

    Args:
        oracle: Type oracle of the program
        config: Generation options
        only_include_files: Files whose declarations are user symbols

    Returns:
        The generator

    Raises:
        ProgramDiagnosticsError: If the program has diagnostics and errors are not ignored
    """
    config = config or GeneratorConfig()

    program_diagnostics = oracle.diagnostics()
    if program_diagnostics and not config.ignore_errors:
        for message in program_diagnostics:
            logger.error(message)
        raise ProgramDiagnosticsError(program_diagnostics)

    catalog = build_catalog(oracle, config.unique_names, only_include_files)
    logger.debug(f"Catalog has {len(catalog.all_symbols)} types, {len(catalog.user_symbols)} user types")
    return JsonSchemaGenerator(oracle, catalog, config)


def generate_schema(
    oracle: TypeOracle,
    full_type_name: str,
    config: GeneratorConfig | None = None,
    only_include_files: list[str] | None = None,
    generator: JsonSchemaGenerator | None = None,
) -> dict[str, Any]:
    """
    Generate the schema of a type, or of every main-file type for ``"*"``.

    Args:
        oracle: Type oracle of the program
        full_type_name: Requested type name, or "*"
        config: Generation options
        only_include_files: Files whose declarations are user symbols
        generator: Existing generator to reuse

    Returns:
        The schema document

    Raises:
        SymbolNotFoundError: If the requested type does not exist
        SchemaGenerationError: If unique names make the request ambiguous
    """
    config = config or GeneratorConfig()
    if generator is None:
        generator = build_generator(oracle, config, only_include_files)

    if full_type_name == "*":
        return generator.get_schema_for_symbols(generator.get_main_file_symbols(only_include_files))

    if config.unique_names:
        # Catalog names carry a hash; look the type up by its short name
        matching = generator.get_symbols(full_type_name)
        if not matching:
            raise SymbolNotFoundError(full_type_name)
        if len(matching) > 1:
            raise SchemaGenerationError(f'{len(matching)} definitions found for requested type "{full_type_name}".')
        return generator.get_schema_for_symbol(matching[0].name)

    return generator.get_schema_for_symbol(full_type_name)
