"""
Exceptions raised by the schema generator.
"""

from __future__ import annotations

from typing import Any


class SchemaGenerationError(Exception):
    """Base class for schema generation failures."""

    pass


class ProgramDiagnosticsError(SchemaGenerationError):
    """Raised when the program has type-check diagnostics.

    Resolution does not run on a program with diagnostics unless
    ``ignore_errors`` is set.
    """

    def __init__(self, diagnostics: list[str]):
        self.diagnostics = list(diagnostics)
        super().__init__(f"Program has {len(self.diagnostics)} diagnostic(s)")


class UnsupportedTypeError(SchemaGenerationError, TypeError):
    """Raised when a type has no JSON Schema mapping.

    Attributes:
        type: The offending type
    """

    def __init__(self, message: str, type: Any = None):
        super().__init__(message)
        self.type = type


class IndexSignatureError(SchemaGenerationError, ValueError):
    """Raised for index signatures that cannot be mapped.

    This happens when:
    - A declaration has more than one index signature
    - An index signature does not have exactly one parameter
    - The index key is neither a number nor a string
    """

    pass


class SymbolNotFoundError(SchemaGenerationError, KeyError):
    """Raised when a requested root type is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"type {self.name} not found"


class ProgramLoadError(SchemaGenerationError, ValueError):
    """Raised when a program dump cannot be loaded."""

    pass
