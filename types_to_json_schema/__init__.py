"""Types to JSON Schema

A Python package for generating JSON Schema (draft-07) documents from the
statically declared types of a type-checked program. Supports classes,
interfaces, enums, type aliases, unions, intersections, tuples and
documentation-comment validation keywords.
"""

__version__ = "0.9.0"

from .config import GeneratorConfig
from .diagnostics import Diagnostic, Diagnostics
from .errors import (
    IndexSignatureError,
    ProgramDiagnosticsError,
    ProgramLoadError,
    SchemaGenerationError,
    SymbolNotFoundError,
    UnsupportedTypeError,
)
from .generator import JsonSchemaGenerator, build_generator, generate_schema
from .oracle import ModelOracle, TypeOracle, load_program, load_program_dict

__all__ = [
    "JsonSchemaGenerator",
    "GeneratorConfig",
    "build_generator",
    "generate_schema",
    "TypeOracle",
    "ModelOracle",
    "load_program",
    "load_program_dict",
    "Diagnostic",
    "Diagnostics",
    "SchemaGenerationError",
    "ProgramDiagnosticsError",
    "UnsupportedTypeError",
    "IndexSignatureError",
    "SymbolNotFoundError",
    "ProgramLoadError",
]
