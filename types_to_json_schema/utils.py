"""
Utility functions for the schema generator.
"""

import hashlib
import math
import re
from typing import Any, Iterable

# Regex matching module prefixes (import("x"). or "x".) and spaces in type names
_FILE_NAME_OR_SPACE = re.compile(r'(\bimport\(".*?"\)|".*?")\.| ')

# Regex matching the quoted module prefix of a fully qualified symbol name
_MODULE_PREFIX = re.compile(r'".*"\.')


def strip_file_names(name: str) -> str:
    """Remove module prefixes and spaces from a type display name.

    Examples:
        'import("/src/a").Foo' -> "Foo"
        '"/src/a".Foo' -> "Foo"
        "Map<string, Foo>" -> "Map<string,Foo>"
    """
    return _FILE_NAME_OR_SPACE.sub("", name)


def strip_module_prefix(fully_qualified_name: str) -> str:
    """Strip a leading quoted module prefix from a fully qualified name."""
    return _MODULE_PREFIX.sub("", fully_qualified_name, count=1)


def node_hash(relative_path: str, position: int) -> str:
    """Stable 8 hex digit hash of a declaration's location."""
    digest = hashlib.md5()
    digest.update(relative_path.encode("utf-8"))
    digest.update(str(position).encode("utf-8"))
    return digest.hexdigest()[:8]


def normalize_number(value: Any) -> Any:
    """Return integral floats as ints, leave other values alone."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def js_typeof(value: Any) -> str:
    """Primitive kind of a literal value, as JSON Schema names it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _js_string(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(normalize_number(value))
    return str(value)


def sort_values(values: Iterable[Any]) -> list[Any]:
    """Sort literal values the way the JavaScript default sort does.

    Values are compared by the UTF-16 code units of their string form, so
    ``[10, 9, 1]`` sorts to ``[1, 10, 9]``. The sort is stable.
    """
    return sorted(values, key=lambda v: _js_string(v).encode("utf-16-be"))


def same_value(a: Any, b: Any) -> bool:
    """Strict equality: ``True`` and ``1`` are different values."""
    return type(a) is type(b) and a == b


def push_unique(values: list[Any], value: Any) -> None:
    """Append value unless a strictly equal value is already present."""
    if not any(same_value(v, value) for v in values):
        values.append(value)


def unique(values: Iterable[str]) -> list[str]:
    """Deduplicate preserving first-seen order."""
    return list(dict.fromkeys(values))
