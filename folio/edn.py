"""Reader and writer for the metadata literal-map syntax.

Content documents open with a single map written in a small subset of EDN:

    {:title "Projects"
     :layout :page
     :page-index 0
     :navbar? true}

Supported values are strings, keywords, integers, floats, booleans, ``nil``
and flat vectors/lists of those scalars. Map keys must be keywords. Commas
count as whitespace and ``;`` starts a comment that runs to the end of the line.

Key functions:
- read_map: Read one map from a position in a larger text.
- loads: Read a string that holds exactly one map.
- dumps: Serialize a mapping back to the literal-map syntax.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_WHITESPACE = " \t\r\n,\ufeff"
_DELIMITERS = set(_WHITESPACE) | set('{}[]()";')

KEYWORD_RE = re.compile(r"^[A-Za-z*+!\-_'?<>=.][A-Za-z0-9*+!\-_'?<>=./#:]*$")
INT_RE = re.compile(r"^[+-]?\d+$")
FLOAT_RE = re.compile(r"^[+-]?\d+(\.\d*)?([eE][+-]?\d+)?$")

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}
_WRITE_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r"}

_SEQUENCE_CLOSERS = {"[": "]", "(": ")"}


class MetadataSyntaxError(ValueError):
    """Malformed literal-map text.

    Attributes:
        message: Human-readable description of the problem.
        position: Offset into the text where the problem was found.
        line: 1-based line number of ``position``.
        column: 1-based column number of ``position``.
    """

    def __init__(self, message: str, text: str, position: int):
        self.message = message
        self.position = position
        self.line = text.count("\n", 0, position) + 1
        self.column = position - (text.rfind("\n", 0, position) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")


class Keyword(str):
    """A keyword value such as ``:page``.

    Compares equal to its bare name so ``Keyword("page") == "page"``, while
    still serializing back as ``:page``.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Keyword({str.__repr__(self)})"


class _Reader:
    """Cursor over the source text."""

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def error(self, message: str, position: int | None = None) -> MetadataSyntaxError:
        return MetadataSyntaxError(
            message, self.text, self.pos if position is None else position
        )

    def skip_blank(self) -> None:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char in _WHITESPACE:
                self.pos += 1
            elif char == ";":
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            else:
                break

    def peek(self) -> str:
        self.skip_blank()
        if self.pos >= len(self.text):
            return ""
        return self.text[self.pos]

    def read_map(self) -> dict[str, Any]:
        start = self.pos
        if self.peek() != "{":
            raise self.error("Expected '{' to open the metadata map")
        self.pos += 1
        result: dict[str, Any] = {}
        while True:
            char = self.peek()
            if not char:
                raise self.error("Unterminated map: missing '}'", start)
            if char == "}":
                self.pos += 1
                return result
            key_pos = self.pos
            if char in _SEQUENCE_CLOSERS:
                raise self.error("Map keys must be keywords like :title")
            key = self.read_value(allow_sequence=False)
            if not isinstance(key, Keyword):
                raise self.error("Map keys must be keywords like :title", key_pos)
            if key in result:
                raise self.error(f"Duplicate key :{key}", key_pos)
            if self.peek() in ("}", ""):
                raise self.error(f"Key :{key} has no value", key_pos)
            result[str(key)] = self.read_value(allow_sequence=True)

    def read_sequence(self) -> list[Any]:
        start = self.pos
        closer = _SEQUENCE_CLOSERS[self.text[self.pos]]
        self.pos += 1
        items: list[Any] = []
        while True:
            char = self.peek()
            if not char:
                raise self.error(f"Unterminated sequence: missing '{closer}'", start)
            if char == closer:
                self.pos += 1
                return items
            items.append(self.read_value(allow_sequence=False))

    def read_value(self, allow_sequence: bool) -> Any:
        char = self.peek()
        if not char:
            raise self.error("Unexpected end of input")
        if char == '"':
            return self.read_string()
        if char in _SEQUENCE_CLOSERS:
            if not allow_sequence:
                raise self.error("Nested sequences are not supported")
            return self.read_sequence()
        if char == "{":
            raise self.error("Nested maps are not supported")
        if char == "#":
            raise self.error("Tagged literals and sets are not supported")
        if char == "\\":
            raise self.error("Character literals are not supported")
        if char in "}])":
            raise self.error(f"Unexpected '{char}'")
        return self.read_atom()

    def read_string(self) -> str:
        start = self.pos
        self.pos += 1
        chunks: list[str] = []
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == '"':
                self.pos += 1
                return "".join(chunks)
            if char == "\\":
                escape = text[self.pos + 1 : self.pos + 2]
                if escape not in _ESCAPES:
                    raise self.error(f"Unknown string escape '\\{escape}'")
                chunks.append(_ESCAPES[escape])
                self.pos += 2
                continue
            chunks.append(char)
            self.pos += 1
        raise self.error("Unterminated string", start)

    def read_atom(self) -> Any:
        start = self.pos
        text = self.text
        while self.pos < len(text) and text[self.pos] not in _DELIMITERS:
            self.pos += 1
        token = text[start : self.pos]
        if token.startswith(":"):
            name = token[1:]
            if not KEYWORD_RE.match(name):
                raise self.error(f"Invalid keyword '{token}'", start)
            return Keyword(name)
        if token == "true":
            return True
        if token == "false":
            return False
        if token == "nil":
            return None
        if INT_RE.match(token):
            return int(token)
        if FLOAT_RE.match(token):
            return float(token)
        raise self.error(f"Unsupported value '{token}'", start)


def read_map(text: str, pos: int = 0) -> tuple[dict[str, Any], int]:
    """Read one map from ``text``.

    Leading whitespace and comments before the opening brace are skipped.

    Args:
        text: Source text.
        pos: Offset to start reading from.

    Returns:
        Tuple of (mapping, offset just past the closing brace).

    Raises:
        MetadataSyntaxError: If the text does not start with a valid map.
    """
    reader = _Reader(text, pos)
    mapping = reader.read_map()
    return mapping, reader.pos


def loads(text: str) -> dict[str, Any]:
    """Read a string that holds exactly one map."""
    reader = _Reader(text)
    mapping = reader.read_map()
    if reader.peek():
        raise reader.error("Unexpected content after the map")
    return mapping


def _write_string(value: str) -> str:
    return '"' + "".join(_WRITE_ESCAPES.get(char, char) for char in value) + '"'


def _write_scalar(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Keyword):
        if not KEYWORD_RE.match(value):
            raise ValueError(f"Cannot write keyword :{value}")
        return f":{value}"
    if isinstance(value, str):
        return _write_string(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"Cannot write non-finite float {value!r}")
        return repr(value)
    raise TypeError(f"Unsupported metadata value of type {type(value).__name__}")


def _write_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_write_scalar(item) for item in value) + "]"
    return _write_scalar(value)


def dumps(mapping: Mapping[str, Any], multiline: bool = False) -> str:
    """Serialize a mapping to the literal-map syntax.

    Args:
        mapping: Keys are keyword names without the leading colon.
        multiline: Write one key per line, aligned under the opening brace.

    Returns:
        The serialized map, e.g. ``{:title "About" :layout :page}``.

    Raises:
        TypeError: If a value is outside the supported value model.
        ValueError: If a key is not a valid keyword name.
    """
    entries = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not KEYWORD_RE.match(key):
            raise ValueError(f"Cannot write map key {key!r} as a keyword")
        entries.append(f":{key} {_write_value(value)}")
    separator = "\n " if multiline else " "
    return "{" + separator.join(entries) + "}"
