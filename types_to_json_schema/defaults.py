"""
Default values extracted from property initializers.

Only constant literal initializers are trusted. They are evaluated by a
small recursive-descent evaluator that understands numbers, strings,
booleans, null, undefined, array literals and parentheses. Identifiers,
calls and operators are rejected, so no code ever runs.
"""

from __future__ import annotations

from typing import Any

from .diagnostics import Diagnostics
from .oracle.model import TYPE_ASSERTION_KINDS, Expression, ExpressionKind
from .utils import normalize_number


class _Sentinel:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


# Returned when a property has no usable default
NO_DEFAULT: Any = _Sentinel("NO_DEFAULT")

# Value of the ``undefined`` literal
UNDEFINED: Any = _Sentinel("undefined")


class LiteralSyntaxError(ValueError):
    """Raised when an initializer is not a constant literal expression."""

    pass


_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "'": "'",
    '"': '"',
    "`": "`",
    "\\": "\\",
}

_KEYWORDS = {"true": True, "false": False, "null": None, "undefined": UNDEFINED}

_DIGITS = "0123456789"

# Nesting limit for arrays, objects, parentheses and unary signs
MAX_DEPTH = 100
_IDENTIFIER_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$"


class LiteralEvaluator:
    """Evaluates constant literal expressions written in source syntax."""

    def evaluate(self, text: str) -> Any:
        """
        Evaluate a literal expression.

        Args:
            text: Source text of the expression

        Returns:
            The value; lists for arrays, dicts for object literals

        Raises:
            LiteralSyntaxError: If the text is not a constant literal
        """
        self.text = text
        self.pos = 0
        self.depth = 0
        value = self._expression()
        self._skip_whitespace()
        if self.pos != len(self.text):
            raise LiteralSyntaxError(f"unexpected {self.text[self.pos]!r} at offset {self.pos}")
        return value

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif self.text.startswith("//", self.pos):
                end = self.text.find("\n", self.pos)
                self.pos = len(self.text) if end == -1 else end + 1
            elif self.text.startswith("/*", self.pos):
                end = self.text.find("*/", self.pos + 2)
                if end == -1:
                    raise LiteralSyntaxError("unterminated comment")
                self.pos = end + 2
            else:
                break

    def _expect(self, ch: str) -> None:
        self._skip_whitespace()
        if self._peek() != ch:
            found = self._peek() or "end of input"
            raise LiteralSyntaxError(f"expected {ch!r}, found {found!r}")
        self.pos += 1

    def _expression(self) -> Any:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise LiteralSyntaxError(f"expression nested deeper than {MAX_DEPTH} levels")
        try:
            return self._unary()
        finally:
            self.depth -= 1

    def _unary(self) -> Any:
        self._skip_whitespace()
        ch = self._peek()
        if ch in ("-", "+"):
            self.pos += 1
            operand = self._expression()
            if isinstance(operand, bool) or not isinstance(operand, (int, float)):
                raise LiteralSyntaxError(f"unary {ch} applied to a non-number")
            return -operand if ch == "-" else operand
        return self._primary()

    def _primary(self) -> Any:
        ch = self._peek()
        if not ch:
            raise LiteralSyntaxError("unexpected end of input")
        if ch in ("'", '"'):
            return self._string(ch)
        if ch == "`":
            return self._template()
        if ch in _DIGITS or (ch == "." and self.text[self.pos + 1 : self.pos + 2].isdigit()):
            return self._number()
        if ch == "[":
            return self._array()
        if ch == "{":
            return self._object()
        if ch == "(":
            self.pos += 1
            value = self._expression()
            self._expect(")")
            return value
        if ch in _IDENTIFIER_CHARS:
            word = self._identifier()
            if word in _KEYWORDS:
                return _KEYWORDS[word]
            raise LiteralSyntaxError(f"{word} is not defined")
        raise LiteralSyntaxError(f"unexpected {ch!r} at offset {self.pos}")

    def _identifier(self) -> str:
        start = self.pos
        while self._peek() and self._peek() in _IDENTIFIER_CHARS:
            self.pos += 1
        return self.text[start : self.pos]

    def _number(self) -> int | float:
        start = self.pos
        prefix = self.text[self.pos : self.pos + 2].lower()
        bases = {"0x": 16, "0o": 8, "0b": 2}
        if prefix in bases:
            self.pos += 2
            digits = self._identifier()
            try:
                return int(digits.replace("_", ""), bases[prefix])
            except ValueError:
                raise LiteralSyntaxError(f"invalid number {self.text[start:self.pos]!r}") from None

        while self._peek() and (self._peek() in _DIGITS or self._peek() in "._"):
            self.pos += 1
        if self._peek() in ("e", "E"):
            self.pos += 1
            if self._peek() in ("+", "-"):
                self.pos += 1
            while self._peek() and self._peek() in _DIGITS:
                self.pos += 1
        if self._peek() and self._peek() in _IDENTIFIER_CHARS:
            raise LiteralSyntaxError(f"invalid number {self.text[start:self.pos + 1]!r}")

        literal = self.text[start : self.pos].replace("_", "")
        try:
            return normalize_number(float(literal))
        except ValueError:
            raise LiteralSyntaxError(f"invalid number {literal!r}") from None

    def _string(self, quote: str) -> str:
        self.pos += 1
        chars = []
        while True:
            ch = self._peek()
            if not ch or ch == "\n":
                raise LiteralSyntaxError("unterminated string")
            self.pos += 1
            if ch == quote:
                return "".join(chars)
            if ch == "\\":
                chars.append(self._escape())
            else:
                chars.append(ch)

    def _template(self) -> str:
        self.pos += 1
        chars = []
        while True:
            ch = self._peek()
            if not ch:
                raise LiteralSyntaxError("unterminated template")
            self.pos += 1
            if ch == "`":
                return "".join(chars)
            if ch == "$" and self._peek() == "{":
                raise LiteralSyntaxError("template substitutions are not constant")
            if ch == "\\":
                chars.append(self._escape())
            else:
                chars.append(ch)

    def _escape(self) -> str:
        ch = self._peek()
        if not ch:
            raise LiteralSyntaxError("unterminated escape")
        self.pos += 1
        if ch in _ESCAPES:
            return _ESCAPES[ch]
        if ch == "\n":
            return ""
        if ch == "x":
            return self._code_point(2)
        if ch == "u":
            if self._peek() == "{":
                end = self.text.find("}", self.pos)
                if end == -1:
                    raise LiteralSyntaxError("unterminated unicode escape")
                digits = self.text[self.pos + 1 : end]
                self.pos = end + 1
                return self._chr(digits)
            return self._code_point(4)
        return ch

    def _code_point(self, length: int) -> str:
        digits = self.text[self.pos : self.pos + length]
        self.pos += length
        return self._chr(digits)

    @staticmethod
    def _chr(digits: str) -> str:
        try:
            return chr(int(digits, 16))
        except (ValueError, OverflowError):
            raise LiteralSyntaxError(f"invalid escape digits {digits!r}") from None

    def _array(self) -> list[Any]:
        self.pos += 1
        items = []
        while True:
            self._skip_whitespace()
            if self._peek() == "]":
                self.pos += 1
                return items
            item = self._expression()
            # Arrays cannot hold undefined in JSON
            items.append(None if item is UNDEFINED else item)
            self._skip_whitespace()
            if self._peek() == ",":
                self.pos += 1
            elif self._peek() != "]":
                raise LiteralSyntaxError(f"expected ',' or ']' at offset {self.pos}")

    def _object(self) -> dict[str, Any]:
        self.pos += 1
        obj = {}
        while True:
            self._skip_whitespace()
            ch = self._peek()
            if ch == "}":
                self.pos += 1
                return obj
            if ch in ("'", '"'):
                key = self._string(ch)
            elif ch and ch in _IDENTIFIER_CHARS:
                key = self._identifier()
            else:
                raise LiteralSyntaxError(f"invalid object key at offset {self.pos}")
            self._expect(":")
            obj[key] = self._expression()
            self._skip_whitespace()
            if self._peek() == ",":
                self.pos += 1
            elif self._peek() != "}":
                raise LiteralSyntaxError(f"expected ',' or '}}' at offset {self.pos}")


def extract_default(initializer: Expression | None, property_name: str, diagnostics: Diagnostics) -> Any:
    """
    Derive a literal default value from a property initializer.

    Args:
        initializer: The property's initializer expression, if any
        property_name: Name used in diagnostics
        diagnostics: Collector for soft warnings

    Returns:
        The default value, or NO_DEFAULT
    """
    if initializer is None:
        return NO_DEFAULT

    while initializer.kind in TYPE_ASSERTION_KINDS and initializer.expression is not None:
        initializer = initializer.expression

    if initializer.expression is not None:
        diagnostics.warn(f"initializer is expression for property {property_name}", property_name)
        return NO_DEFAULT

    if initializer.kind == ExpressionKind.NO_SUBSTITUTION_TEMPLATE:
        return template_text(initializer)

    try:
        value = LiteralEvaluator().evaluate(initializer.text)
    except LiteralSyntaxError as e:
        diagnostics.warn(f"exception evaluating initializer for property {property_name}: {e}", property_name)
        return NO_DEFAULT

    if value is UNDEFINED:
        return NO_DEFAULT
    if value is None or isinstance(value, (str, int, float, bool, list)):
        return value

    diagnostics.warn(f"unknown initializer for property {property_name}: {initializer.text}", property_name)
    return NO_DEFAULT


def template_text(expression: Expression) -> str:
    """Raw text of a template literal without substitutions."""
    if isinstance(expression.value, str):
        return expression.value
    text = expression.text
    if len(text) >= 2 and text.startswith("`") and text.endswith("`"):
        return text[1:-1]
    return text
