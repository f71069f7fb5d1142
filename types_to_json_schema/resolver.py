"""
Type definition resolver.

Converts one type of the checked program into a JSON Schema definition,
recursively. Named types are resolved once into the definition arena and
referenced through ``$ref`` everywhere else, which also breaks cycles.
"""

from __future__ import annotations

from typing import Any

from .annotations import AnnotationParser
from .arena import DefinitionArena
from .catalog import SymbolCatalog
from .config import GeneratorConfig
from .defaults import NO_DEFAULT, extract_default, template_text
from .diagnostics import Diagnostics
from .errors import IndexSignatureError, UnsupportedTypeError
from .naming import TypeNameRegistry
from .oracle.base import TypeOracle
from .oracle.model import (
    Declaration,
    ExpressionKind,
    ModifierFlags,
    NodeKind,
    ObjectFlags,
    SymbolFlags,
    SymbolInfo,
    TypeFlags,
    TypeInfo,
)
from .utils import js_typeof, normalize_number, push_unique, sort_values, strip_file_names, unique

# Generic aliases that only change mutability and are transparent to schemas
WRAPPER_ALIASES = frozenset({"Readonly", "Mutable"})

# Symbol names of types mapped directly instead of by their members
RAW_SYMBOL_NAMES = frozenset({"Date", "integer"})

# Keys a definition may have and still count as a simple type
SIMPLE_TYPE_KEYS = frozenset({"type", "description"})

# Marker for types without a literal value
_NO_LITERAL: Any = object()


def literal_value(typ: TypeInfo) -> Any:
    """Value of a literal type, or _NO_LITERAL."""
    value = typ.value
    if typ.flags & TypeFlags.STRING_LITERAL:
        return str(value)
    if typ.flags & TypeFlags.BOOLEAN_LITERAL:
        return value is True or value == "true"
    if typ.flags & TypeFlags.ENUM_LITERAL:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return normalize_number(value)
        try:
            return normalize_number(float(value))
        except (TypeError, ValueError):
            return value
    if typ.flags & TypeFlags.NUMBER_LITERAL:
        return normalize_number(float(value))
    return _NO_LITERAL


def make_nullable(definition: dict[str, Any]) -> dict[str, Any]:
    """Allow null in a definition, in place.

    Simple types get "null" added to their type; anything else becomes
    the first branch of an anyOf with {"type": "null"}.
    """
    if not _add_null_type(definition):
        original = dict(definition)
        definition.clear()
        definition["anyOf"] = [original, {"type": "null"}]
    return definition


def _add_null_type(definition: dict[str, Any]) -> bool:
    if "type" not in definition or not set(definition) <= SIMPLE_TYPE_KEYS:
        return False

    current = definition["type"]
    if isinstance(current, str):
        if current != "null":
            definition["type"] = [current, "null"]
        return True
    if isinstance(current, list) and all(isinstance(t, str) for t in current):
        if "null" not in current:
            definition["type"] = [*current, "null"]
        return True
    return False


def _is_private(prop: SymbolInfo) -> bool:
    return any(decl.modifiers & ModifierFlags.PRIVATE for decl in prop.declarations)


def _string_literal_value(expression) -> str:
    if isinstance(expression.value, str):
        return expression.value
    if expression.kind == ExpressionKind.NO_SUBSTITUTION_TEMPLATE:
        return template_text(expression)
    return expression.text[1:-1]


class TypeDefinitionResolver:
    """Resolves types into JSON Schema definitions."""

    def __init__(
        self,
        oracle: TypeOracle,
        catalog: SymbolCatalog,
        config: GeneratorConfig,
        arena: DefinitionArena | None = None,
        names: TypeNameRegistry | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            oracle: Type oracle of the program
            catalog: Symbol catalog, used to expand abstract types
            config: Generation options
            arena: Named definitions shared across requests
            names: Registry assigning definition names
        """
        self.oracle = oracle
        self.catalog = catalog
        self.config = config
        self.arena = arena if arena is not None else DefinitionArena()
        self.names = names if names is not None else TypeNameRegistry(oracle)
        self.annotations = AnnotationParser(oracle, config.validation_keywords)

        # Properties whose union type contains undefined
        self._maybe_undefined: set[SymbolInfo] = set()

    def resolve(
        self,
        typ: TypeInfo,
        diagnostics: Diagnostics,
        as_ref: bool | None = None,
        union_modifier: str = "anyOf",
        prop: SymbolInfo | None = None,
        reffed_type: SymbolInfo | None = None,
        paired_symbol: SymbolInfo | None = None,
    ) -> dict[str, Any]:
        """
        Resolve a type into a definition.

        Args:
            typ: The type to resolve
            diagnostics: Collector for soft warnings and errors
            as_ref: Reference named types (defaults to config.ref)
            union_modifier: Keyword used for union branches ("anyOf" or "oneOf")
            prop: Property whose type this is
            reffed_type: Symbol named by the property's type annotation
            paired_symbol: User symbol of a requested root type

        Returns:
            The definition, or a $ref to it

        Raises:
            UnsupportedTypeError: If the type has no JSON Schema mapping
            IndexSignatureError: If a declaration has unmappable index signatures
        """
        if as_ref is None:
            as_ref = self.config.ref
        definition: dict[str, Any] = {}

        # JSON Schema does not care about mutability
        while (
            typ.alias_symbol is not None
            and typ.alias_symbol.name in WRAPPER_ALIASES
            and typ.alias_type_arguments
        ):
            typ = typ.alias_type_arguments[0]
            reffed_type = None

        if self.config.type_of_keyword and self._is_anonymous_object(typ):
            return {"typeof": "function"}

        symbol = typ.symbol
        is_raw = self._is_raw(typ)

        # A union of string literals is referenced by its alias, like an enum
        is_string_enum = bool(typ.flags & TypeFlags.UNION) and all(t.flags & TypeFlags.STRING_LITERAL for t in typ.types)

        as_type_alias_ref = as_ref and reffed_type is not None and (self.config.alias_ref or is_string_enum)
        if not as_type_alias_ref and (is_raw or self._is_anonymous_object(typ)):
            as_ref = False

        full_type_name = ""
        if as_type_alias_ref:
            target = self.oracle.aliased_symbol(reffed_type) if reffed_type.flags & SymbolFlags.ALIAS else reffed_type
            full_type_name = strip_file_names(self.oracle.fully_qualified_name(target))
        elif as_ref:
            full_type_name = self.names.name_for(typ)

        returned = definition
        if as_ref:
            returned = {"$ref": f"{self.config.id}#/definitions/{full_type_name}"}

        other_annotations: set[str] = set()
        self.annotations.parse_into(reffed_type, definition, other_annotations, diagnostics)
        if prop is not None:
            self.annotations.parse_into(prop, returned, other_annotations, diagnostics)
        self.annotations.parse_into(symbol, definition, other_annotations, diagnostics)

        if not as_ref or full_type_name not in self.arena:
            handle = None
            if as_ref:
                # Reserved before building so self-references find it
                handle = self.arena.reserve(full_type_name, definition)
                if self.config.titles and full_type_name:
                    definition["title"] = full_type_name

            try:
                if "type" not in definition:
                    self._infer_definition(typ, definition, diagnostics, union_modifier, prop, reffed_type, paired_symbol, is_raw)
            except Exception:
                # A half built definition must not be referenced later
                if handle is not None:
                    self.arena.discard(full_type_name)
                raise

            if handle is not None:
                handle.complete()

        if "nullable" in other_annotations:
            make_nullable(returned)

        return returned

    def _is_anonymous_object(self, typ: TypeInfo) -> bool:
        return bool(typ.flags & TypeFlags.OBJECT and typ.object_flags & ObjectFlags.ANONYMOUS)

    def _is_raw(self, typ: TypeInfo) -> bool:
        """Raw types are mapped directly and never referenced."""
        symbol = typ.symbol
        return symbol is None or symbol.name in RAW_SYMBOL_NAMES or self.oracle.number_index_type(typ) is not None

    def _is_tuple(self, typ: TypeInfo) -> bool:
        if not typ.flags & TypeFlags.OBJECT:
            return False
        if typ.object_flags & ObjectFlags.TUPLE:
            return True
        return bool(typ.symbol is None and typ.object_flags & ObjectFlags.REFERENCE and typ.element_types)

    @staticmethod
    def _declaration_of(typ: TypeInfo) -> Declaration | None:
        symbol = typ.symbol
        if symbol is None or not symbol.declarations:
            return None
        return symbol.declarations[0]

    def _infer_definition(
        self,
        typ: TypeInfo,
        definition: dict[str, Any],
        diagnostics: Diagnostics,
        union_modifier: str,
        prop: SymbolInfo | None,
        reffed_type: SymbolInfo | None,
        paired_symbol: SymbolInfo | None,
        is_raw: bool,
    ) -> None:
        """Infer the structure of a definition whose type was not given explicitly."""
        symbol = typ.symbol
        node = self._declaration_of(typ)

        if typ.flags & TypeFlags.UNION:
            self._union_definition(typ, prop, union_modifier, definition, diagnostics)
        elif typ.flags & TypeFlags.INTERSECTION:
            if self.config.no_extra_props:
                # allOf does not combine with additionalProperties: false
                self._merged_intersection_definition(typ, definition, diagnostics)
            else:
                self._intersection_definition(typ, definition, diagnostics)
        elif is_raw:
            if paired_symbol is not None:
                self.annotations.parse_into(paired_symbol, definition, set(), diagnostics)
            self._root_type_definition(typ, reffed_type, definition, diagnostics)
        elif node is not None and node.kind in (NodeKind.ENUM_DECLARATION, NodeKind.ENUM_MEMBER):
            self._enum_definition(typ, node, definition, diagnostics)
        elif (
            symbol is not None
            and symbol.flags & SymbolFlags.TYPE_LITERAL
            and not symbol.members
            and not (node is not None and node.kind == NodeKind.MAPPED_TYPE)
        ):
            # {} has no members and no declarations
            definition["type"] = "object"
            definition["properties"] = {}
        else:
            self._class_definition(typ, definition, diagnostics)

    def _root_type_definition(
        self,
        typ: TypeInfo,
        reffed_type: SymbolInfo | None,
        definition: dict[str, Any],
        diagnostics: Diagnostics,
    ) -> dict[str, Any]:
        """Map a primitive-like type directly."""
        if self._is_tuple(typ):
            fixed_types = [self.resolve(element, diagnostics) for element in typ.element_types]
            definition["type"] = "array"
            definition["items"] = fixed_types
            definition["minItems"] = len(fixed_types)
            definition["additionalItems"] = {"anyOf": list(fixed_types)}
            return definition

        type_string = self.oracle.type_to_string(typ)
        flags = typ.flags

        if flags & TypeFlags.STRING:
            definition["type"] = "string"
        elif flags & TypeFlags.NUMBER:
            is_integer = definition.get("type") == "integer" or (reffed_type is not None and reffed_type.name == "integer")
            definition["type"] = "integer" if is_integer else "number"
        elif flags & TypeFlags.BOOLEAN:
            definition["type"] = "boolean"
        elif flags & TypeFlags.NULL:
            definition["type"] = "null"
        elif flags & TypeFlags.UNDEFINED:
            definition["type"] = "undefined"
        elif flags & TypeFlags.ANY:
            # No type restriction, so that anything will match
            pass
        elif type_string == "Date" and not self.config.reject_date_type:
            definition["type"] = "string"
            definition["format"] = "date-time"
        elif type_string == "object":
            definition["type"] = "object"
            definition["properties"] = {}
            definition["additionalProperties"] = True
        else:
            value = literal_value(typ)
            element_type = self.oracle.number_index_type(typ)
            if value is not _NO_LITERAL:
                definition["type"] = js_typeof(value)
                definition["enum"] = [value]
            elif element_type is not None:
                definition["type"] = "array"
                definition["items"] = self.resolve(element_type, diagnostics)
            else:
                raise UnsupportedTypeError(f"Unsupported type: {type_string}", typ)

        return definition

    def _union_definition(
        self,
        typ: TypeInfo,
        prop: SymbolInfo | None,
        union_modifier: str,
        definition: dict[str, Any],
        diagnostics: Diagnostics,
    ) -> dict[str, Any]:
        enum_values: list[Any] = []
        simple_types: list[str] = []
        schemas: list[dict[str, Any]] = []

        for member in typ.types:
            value = literal_value(member)
            if value is not _NO_LITERAL:
                push_unique(enum_values, value)
                continue

            member_definition = self.resolve(member, diagnostics)
            if member_definition.get("type") == "undefined":
                if prop is not None:
                    self._maybe_undefined.add(prop)
            elif list(member_definition) == ["type"]:
                if isinstance(member_definition["type"], str):
                    push_unique(simple_types, member_definition["type"])
                else:
                    diagnostics.error("Expected only a simple type.", self.oracle.type_to_string(member))
            else:
                schemas.append(member_definition)

        if enum_values:
            is_only_booleans = len(enum_values) == 2 and all(isinstance(v, bool) for v in enum_values) and enum_values[0] != enum_values[1]
            if is_only_booleans:
                push_unique(simple_types, "boolean")
            else:
                enum_schema: dict[str, Any] = {"enum": sort_values(enum_values)}
                kinds = {js_typeof(v) for v in enum_values}
                if len(kinds) == 1 and kinds <= {"string", "number", "boolean"}:
                    enum_schema["type"] = kinds.pop()
                schemas.append(enum_schema)

        if simple_types:
            schemas.append({"type": simple_types[0] if len(simple_types) == 1 else simple_types})

        if len(schemas) == 1:
            definition.update(schemas[0])
        else:
            definition[union_modifier] = schemas
        return definition

    def _intersection_definition(self, typ: TypeInfo, definition: dict[str, Any], diagnostics: Diagnostics) -> dict[str, Any]:
        simple_types: list[str] = []
        schemas: list[dict[str, Any]] = []

        for member in typ.types:
            member_definition = self.resolve(member, diagnostics)
            if member_definition.get("type") == "undefined":
                diagnostics.error("Undefined in intersection makes no sense.", self.oracle.type_to_string(typ))
            elif list(member_definition) == ["type"]:
                if isinstance(member_definition["type"], str):
                    push_unique(simple_types, member_definition["type"])
                else:
                    diagnostics.error("Expected only a simple type.", self.oracle.type_to_string(member))
            else:
                schemas.append(member_definition)

        if simple_types:
            schemas.append({"type": simple_types[0] if len(simple_types) == 1 else simple_types})

        if len(schemas) == 1:
            definition.update(schemas[0])
        else:
            definition["allOf"] = schemas
        return definition

    def _merged_intersection_definition(self, typ: TypeInfo, definition: dict[str, Any], diagnostics: Diagnostics) -> dict[str, Any]:
        """Flatten an intersection of object types into one object."""
        definition["additionalProperties"] = False

        for member in typ.types:
            other = self.resolve(member, diagnostics, as_ref=False)
            if "type" in other:
                definition["type"] = other["type"]
            else:
                definition.pop("type", None)

            definition["properties"] = {**definition.get("properties", {}), **other.get("properties", {})}

            other_default = other.get("default")
            if isinstance(other_default, dict) and other_default:
                current_default = definition.get("default")
                base = current_default if isinstance(current_default, dict) else {}
                definition["default"] = {**base, **other_default}

            if other.get("required"):
                definition["required"] = sorted(set(definition.get("required", [])) | set(other["required"]))

        return definition

    def _enum_definition(self, typ: TypeInfo, node: Declaration, definition: dict[str, Any], diagnostics: Diagnostics) -> dict[str, Any]:
        full_name = self.oracle.type_to_string(typ)
        members = node.members if node.kind == NodeKind.ENUM_DECLARATION else [node]
        enum_values: list[Any] = []
        enum_types: list[str] = []

        for member in members:
            constant_value = self.oracle.constant_value(member)
            if constant_value is not None:
                constant_value = normalize_number(constant_value)
                push_unique(enum_values, constant_value)
                push_unique(enum_types, js_typeof(constant_value))
                continue

            # Probably a cast expression: CASELABEL = 'literal' as any
            initial = member.initializer
            if initial is not None and initial.expression is not None:
                expression = initial.expression
                if expression.kind in (ExpressionKind.STRING_LITERAL, ExpressionKind.NO_SUBSTITUTION_TEMPLATE):
                    push_unique(enum_values, _string_literal_value(expression))
                    push_unique(enum_types, "string")
                elif expression.kind in (ExpressionKind.TRUE_KEYWORD, ExpressionKind.FALSE_KEYWORD):
                    push_unique(enum_values, expression.kind == ExpressionKind.TRUE_KEYWORD)
                    push_unique(enum_types, "boolean")
                else:
                    diagnostics.warn(f"initializer is expression for enum: {full_name}.{member.name}", f"{full_name}.{member.name}")
            elif initial is not None and initial.kind == ExpressionKind.NO_SUBSTITUTION_TEMPLATE:
                push_unique(enum_values, template_text(initial))
                push_unique(enum_types, "string")
            elif initial is not None and initial.kind == ExpressionKind.NULL_KEYWORD:
                push_unique(enum_values, None)
                push_unique(enum_types, "null")
            else:
                diagnostics.warn(f"unsupported initializer for enum: {full_name}.{member.name}", f"{full_name}.{member.name}")

        if enum_types:
            definition["type"] = enum_types[0] if len(enum_types) == 1 else enum_types

        if enum_values:
            definition["enum"] = sort_values(enum_values)

        return definition

    def _class_definition(self, typ: TypeInfo, definition: dict[str, Any], diagnostics: Diagnostics) -> dict[str, Any]:
        node = self._declaration_of(typ)
        if node is None:
            raise UnsupportedTypeError(f"Unsupported type: {self.oracle.type_to_string(typ)}", typ)

        if self.config.type_of_keyword and node.kind == NodeKind.FUNCTION_TYPE:
            definition["typeof"] = "function"
            return definition

        props = [p for p in self.oracle.properties_of(typ) if not (self.config.exclude_private and _is_private(p))]
        full_name = self.oracle.type_to_string(typ)

        if node.modifiers & ModifierFlags.ABSTRACT:
            subtype_names = self.catalog.inheriting_types.get(full_name, [])
            definition["oneOf"] = [self.resolve(self.catalog.all_symbols[name], diagnostics) for name in subtype_names]
            return definition

        self._index_signature_definition(node, definition, diagnostics)

        property_definitions: dict[str, Any] = {}
        ignored: set[str] = set()
        for prop in props:
            property_definition = self._property_definition(prop, node, diagnostics)
            if property_definition is not None:
                property_definitions[prop.name] = property_definition
            elif not prop.flags & SymbolFlags.METHOD:
                ignored.add(prop.name)

        if "type" not in definition:
            definition["type"] = "object"

        if definition["type"] == "object" and property_definitions:
            definition["properties"] = property_definitions

        if self.config.default_props:
            definition["defaultProperties"] = []

        if self.config.no_extra_props and "additionalProperties" not in definition:
            definition["additionalProperties"] = False

        if self.config.prop_order:
            # propertyOrder is non-standard, but useful
            definition["propertyOrder"] = unique(prop.name for prop in props)

        if self.config.required:
            required = [prop.name for prop in props if self._is_required(prop) and prop.name not in ignored]
            if required:
                definition["required"] = sorted(set(required))

        return definition

    def _index_signature_definition(self, node: Declaration, definition: dict[str, Any], diagnostics: Diagnostics) -> None:
        index_signatures = [member for member in node.members if member.kind == NodeKind.INDEX_SIGNATURE]
        if not index_signatures:
            return

        if len(index_signatures) > 1:
            raise IndexSignatureError(f"Not supported: {len(index_signatures)} index signatures on {node.name}")

        signature = index_signatures[0]
        if len(signature.parameters) != 1:
            raise IndexSignatureError("Not supported: index signature parameters count != 1")

        index_type = signature.parameters[0]
        is_string_indexed = index_type.flags == TypeFlags.STRING
        if index_type.flags != TypeFlags.NUMBER and not is_string_indexed:
            raise IndexSignatureError("Not supported: index signature with index symbol other than a number or a string")

        if signature.type is None:
            raise IndexSignatureError(f"Index signature of {node.name} has no value type")

        value_definition = self.resolve(signature.type, diagnostics, union_modifier="anyOf")
        if is_string_indexed:
            definition["type"] = "object"
            definition["additionalProperties"] = value_definition
        else:
            definition["type"] = "array"
            definition["items"] = value_definition

    def _property_definition(self, prop: SymbolInfo, node: Declaration, diagnostics: Diagnostics) -> dict[str, Any] | None:
        if prop.flags & SymbolFlags.METHOD:
            return None

        property_type = self.oracle.type_of_symbol(prop, node)
        reffed_type = self.oracle.referenced_type_symbol(prop)
        definition = self.resolve(property_type, diagnostics, prop=prop, reffed_type=reffed_type)

        if self.config.titles:
            definition["title"] = prop.name

        if "ignore" in definition:
            return None

        declaration = prop.value_declaration
        if declaration is not None and declaration.initializer is not None:
            default = extract_default(declaration.initializer, prop.name, diagnostics)
            if default is not NO_DEFAULT:
                definition["default"] = default

        return definition

    def _is_required(self, prop: SymbolInfo) -> bool:
        return (
            not prop.flags & SymbolFlags.OPTIONAL
            and not prop.flags & SymbolFlags.METHOD
            and prop not in self._maybe_undefined
        )
