"""
Structured diagnostics collected during schema generation.

Soft problems (ambiguous enum initializers, non-constant defaults, odd
union members) never abort a request. They are recorded here and logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity of a diagnostic."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic.

    Attributes:
        severity: Warning or (non-fatal) error
        message: Human readable description
        subject: Name of the property, enum member or type concerned
    """

    severity: Severity
    message: str
    subject: str = ""

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.message}"


@dataclass
class Diagnostics:
    """Ordered collection of diagnostics for one schema request."""

    items: list[Diagnostic] = field(default_factory=list)

    def warn(self, message: str, subject: str = "") -> None:
        self.items.append(Diagnostic(Severity.WARNING, message, subject))
        logger.warning(message)

    def error(self, message: str, subject: str = "") -> None:
        self.items.append(Diagnostic(Severity.ERROR, message, subject))
        logger.error(message)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.ERROR]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
