"""
Declaration model exposed by a Type Oracle.

These nodes represent the type-checked program as seen by the schema
generator: types, symbols, declarations and source units. A front-end
builds them (directly or through a program dump) and the resolver only
reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Any


class TypeFlags(IntFlag):
    """Category flags of a type."""

    NONE = 0
    ANY = 1 << 0
    STRING = 1 << 1
    NUMBER = 1 << 2
    BOOLEAN = 1 << 3
    ENUM = 1 << 4
    STRING_LITERAL = 1 << 5
    NUMBER_LITERAL = 1 << 6
    BOOLEAN_LITERAL = 1 << 7
    ENUM_LITERAL = 1 << 8
    ES_SYMBOL = 1 << 9
    VOID = 1 << 10
    UNDEFINED = 1 << 11
    NULL = 1 << 12
    NEVER = 1 << 13
    OBJECT = 1 << 14
    UNION = 1 << 15
    INTERSECTION = 1 << 16
    INDEX = 1 << 17
    INDEXED_ACCESS = 1 << 18

    LITERAL = STRING_LITERAL | NUMBER_LITERAL | BOOLEAN_LITERAL | ENUM_LITERAL


class ObjectFlags(IntFlag):
    """Sub-category flags of object types."""

    NONE = 0
    CLASS = 1 << 0
    INTERFACE = 1 << 1
    REFERENCE = 1 << 2
    TUPLE = 1 << 3
    ANONYMOUS = 1 << 4
    MAPPED = 1 << 5


class SymbolFlags(IntFlag):
    """Flags describing what a symbol declares."""

    NONE = 0
    PROPERTY = 1 << 0
    METHOD = 1 << 1
    OPTIONAL = 1 << 2
    ALIAS = 1 << 3
    TYPE_LITERAL = 1 << 4
    CLASS = 1 << 5
    INTERFACE = 1 << 6
    ENUM = 1 << 7
    ENUM_MEMBER = 1 << 8
    TYPE_ALIAS = 1 << 9


class ModifierFlags(IntFlag):
    """Declaration modifiers."""

    NONE = 0
    PRIVATE = 1 << 0
    PROTECTED = 1 << 1
    ABSTRACT = 1 << 2
    READONLY = 1 << 3
    EXPORT = 1 << 4


class NodeKind(str, Enum):
    """Kinds of declaration nodes the generator cares about."""

    SOURCE_FILE = "source_file"
    MODULE_DECLARATION = "module_declaration"
    CLASS_DECLARATION = "class_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    ENUM_DECLARATION = "enum_declaration"
    TYPE_ALIAS_DECLARATION = "type_alias_declaration"
    ENUM_MEMBER = "enum_member"
    PROPERTY = "property"
    METHOD = "method"
    INDEX_SIGNATURE = "index_signature"
    FUNCTION_TYPE = "function_type"
    MAPPED_TYPE = "mapped_type"
    TYPE_LITERAL = "type_literal"
    OTHER = "other"


# Kinds registered in the symbol catalog
CATALOG_NODE_KINDS = frozenset(
    {
        NodeKind.CLASS_DECLARATION,
        NodeKind.INTERFACE_DECLARATION,
        NodeKind.ENUM_DECLARATION,
        NodeKind.TYPE_ALIAS_DECLARATION,
    }
)


class ExpressionKind(str, Enum):
    """Kinds of initializer expressions."""

    STRING_LITERAL = "string_literal"
    NUMERIC_LITERAL = "numeric_literal"
    TRUE_KEYWORD = "true_keyword"
    FALSE_KEYWORD = "false_keyword"
    NULL_KEYWORD = "null_keyword"
    NO_SUBSTITUTION_TEMPLATE = "no_substitution_template"
    TEMPLATE = "template"
    ARRAY_LITERAL = "array_literal"
    OBJECT_LITERAL = "object_literal"
    IDENTIFIER = "identifier"
    PREFIX_UNARY = "prefix_unary"
    BINARY = "binary"
    PROPERTY_ACCESS = "property_access"
    ELEMENT_ACCESS = "element_access"
    CALL = "call"
    NEW = "new"
    PARENTHESIZED = "parenthesized"
    TYPE_ASSERTION = "type_assertion"
    AS_EXPRESSION = "as_expression"
    OTHER = "other"


# Wrappers that only change the static type of the wrapped expression
TYPE_ASSERTION_KINDS = frozenset({ExpressionKind.TYPE_ASSERTION, ExpressionKind.AS_EXPRESSION})


@dataclass(eq=False)
class Expression:
    """An initializer expression.

    Attributes:
        kind: Syntactic kind
        text: Source text as written (quotes and backticks included)
        value: Literal value for literal kinds (unquoted string, number)
        expression: Inner expression for wrapper, access and call kinds
    """

    kind: ExpressionKind = ExpressionKind.OTHER
    text: str = ""
    value: Any = None
    expression: Expression | None = None


@dataclass
class DocSegment:
    """One piece of a documentation comment."""

    text: str = ""
    kind: str = "text"  # "text" or "lineBreak"


@dataclass
class DocTag:
    """A documentation tag such as ``@minLength 3``."""

    name: str = ""
    text: str | None = None


@dataclass(eq=False)
class Declaration:
    """A declaration node in a source unit."""

    kind: NodeKind = NodeKind.OTHER
    name: str = ""
    symbol: SymbolInfo | None = None

    # Declared type at this node (class/interface/alias/enum type)
    type: TypeInfo | None = None

    modifiers: ModifierFlags = ModifierFlags.NONE

    # Enum members, index signatures and class members
    members: list[Declaration] = field(default_factory=list)

    # Nested declarations (namespaces, modules)
    children: list[Declaration] = field(default_factory=list)

    initializer: Expression | None = None

    # Compiler-computed constant of an enum member (None if not constant)
    constant_value: str | int | float | None = None

    # Index signature parameter types
    parameters: list[TypeInfo] = field(default_factory=list)

    # Offset of the node in its source unit
    position: int = 0


@dataclass(eq=False)
class SymbolInfo:
    """A named declaration with documentation, modifiers and members."""

    name: str = ""
    flags: SymbolFlags = SymbolFlags.NONE
    fully_qualified_name: str = ""
    documentation: list[DocSegment] = field(default_factory=list)
    tags: list[DocTag] = field(default_factory=list)
    declarations: list[Declaration] = field(default_factory=list)

    # Properties and methods of a class, interface or type literal
    members: list[SymbolInfo] = field(default_factory=list)

    # Type of a property symbol
    type: TypeInfo | None = None

    # Symbol named by a property's type annotation (``x: Foo`` -> Foo)
    referenced_type: SymbolInfo | None = None

    # Target of an alias (import/export) symbol
    aliased: SymbolInfo | None = None

    @property
    def value_declaration(self) -> Declaration | None:
        return self.declarations[0] if self.declarations else None


@dataclass(eq=False)
class TypeInfo:
    """A type identity in the checked program."""

    id: int = 0
    flags: TypeFlags = TypeFlags.NONE
    object_flags: ObjectFlags = ObjectFlags.NONE

    # Fully qualified display name (``typeToString``)
    name: str = ""

    symbol: SymbolInfo | None = None
    alias_symbol: SymbolInfo | None = None
    alias_type_arguments: list[TypeInfo] = field(default_factory=list)

    # Union and intersection members
    types: list[TypeInfo] = field(default_factory=list)

    # Tuple element types
    element_types: list[TypeInfo] = field(default_factory=list)

    # Literal value for literal types
    value: Any = None

    base_types: list[TypeInfo] = field(default_factory=list)

    # Element type of array-like types
    number_index_type: TypeInfo | None = None

    def __repr__(self) -> str:
        return f"TypeInfo(id={self.id}, name={self.name!r})"


@dataclass(eq=False)
class SourceUnit:
    """A source file of the program."""

    file_name: str = ""
    statements: list[Declaration] = field(default_factory=list)

    # Part of the default library (never a user unit)
    is_library: bool = False

    # Ambient declaration file (never a main file)
    is_declaration_file: bool = False
