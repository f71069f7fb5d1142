"""
Annotation parser for documentation comments.

Copies descriptions and validation keywords from a symbol's documentation
into a schema definition. Tags that are not keywords are collected as
"other annotations" (``@nullable``, ...).
"""

from __future__ import annotations

import json
import re
from typing import Any

from .diagnostics import Diagnostics
from .oracle.base import TypeOracle
from .oracle.model import SymbolInfo

# Tag whose text carries the real keyword: @TJS-format email
SENTINEL_TAG = "TJS"

_SENTINEL_TEXT = re.compile(r"^-(\w+)\s+(\S|\S[\s\S]*\S)\s*$")

# Documentation tags copied into the schema as keywords
VALIDATION_KEYWORDS = frozenset(
    {
        "multipleOf",
        "maximum",
        "exclusiveMaximum",
        "minimum",
        "exclusiveMinimum",
        "maxLength",
        "minLength",
        "pattern",
        "maxItems",
        "minItems",
        "uniqueItems",
        "maxProperties",
        "minProperties",
        "additionalProperties",
        "enum",
        "type",
        "ignore",
        "description",
        "format",
        "default",
        "$ref",
        "id",
    }
)


def parse_value(text: str) -> Any:
    """Parse a tag value as JSON, returning the raw text if that fails."""
    try:
        return json.loads(text)
    except ValueError:
        return text


class AnnotationParser:
    """Parses symbol documentation into schema keywords."""

    def __init__(self, oracle: TypeOracle, extra_keywords: list[str] | None = None):
        """
        Initialize the parser.

        Args:
            oracle: Type oracle providing documentation
            extra_keywords: Custom keywords copied in addition to the standard ones
        """
        self.oracle = oracle
        self.keywords = VALIDATION_KEYWORDS | frozenset(extra_keywords or [])

    def parse_into(
        self,
        symbol: SymbolInfo | None,
        definition: dict[str, Any],
        other_annotations: set[str],
        diagnostics: Diagnostics | None = None,
    ) -> None:
        """Parse the comments of a symbol into the definition and other annotations."""
        if symbol is None:
            return

        description = self._description(symbol)
        if description:
            definition["description"] = description

        for tag in self.oracle.doc_tags(symbol):
            name, text = tag.name, tag.text
            if tag.name == SENTINEL_TAG:
                match = _SENTINEL_TEXT.match(tag.text or "")
                if match is None:
                    if diagnostics is not None:
                        diagnostics.warn(f"malformed @{SENTINEL_TAG} annotation on {symbol.name}: {tag.text!r}", symbol.name)
                    other_annotations.add(tag.name)
                    continue
                name, text = match.group(1), match.group(2)

            if name in self.keywords:
                definition[name] = "" if text is None else parse_value(text)
            else:
                other_annotations.add(tag.name)

    def _description(self, symbol: SymbolInfo) -> str:
        parts = []
        for segment in self.oracle.documentation(symbol):
            if segment.kind == "lineBreak":
                parts.append(segment.text)
            else:
                parts.append(segment.text.strip().replace("\r\n", "\n"))
        return "".join(parts)
