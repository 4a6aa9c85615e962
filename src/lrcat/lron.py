"""
lron stands for Lightroom Object Notation. It is found throughout the catalog database to store arbitrary but
structured data (filters, smart collection rules, crop geometry...).

It looks like a plist (before XML) or JSON, but doesn't match either:

    name = {
        object = {
            x = 1.3,
            string = "some text",
        },
        [ "quoted key" ] = ZSTR "localized",
    }

The document is parsed with a small recursive descent parser (ordered choice with backtracking) into a tree of
immutable nodes:

    Object := Dict | Pair | Str | ZStr | Int
    Value  := Dict | Str | ZStr | Int | Float | Bool

A string leaf may itself hold a complete lron document. Such leaves are never parsed eagerly, use
`parse_nested` (or `Dict.nested`) when the key is known to carry one.
"""
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from lrcat.errors import LrcatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dict:
    items: tuple["Object", ...]

    def __post_init__(self):
        # Keep the node hashable whatever sequence it was built from
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "Object":
        return self.items[index]

    def __iter__(self) -> Iterator["Object"]:
        return iter(self.items)

    def pairs(self) -> Iterator["Pair"]:
        """Iterate the key/value children, skipping bare values"""
        return (item for item in self.items if isinstance(item, Pair))

    def get(self, key: str) -> Union["Value", None]:
        """Return the value of the first pair named `key`"""
        for pair in self.pairs():
            if pair.key == key:
                return pair.value

        return None

    def nested(self, key: str) -> Union["Pair", None]:
        """
        Re-parse the string value of `key` as a fresh lron document.
        Returns None if the key is missing or not a string, raises LronParseError if the string is not a document.
        """
        value = self.get(key)
        if value is None:
            return None

        return parse_nested(value)


@dataclass(frozen=True)
class Pair:
    key: str
    value: "Value"


@dataclass(frozen=True)
class Str:
    value: str


@dataclass(frozen=True)
class ZStr:
    """A localizable string (written as `ZSTR "..."`)"""

    value: str


@dataclass(frozen=True)
class Int:
    value: int


@dataclass(frozen=True)
class Float:
    value: float


@dataclass(frozen=True)
class Bool:
    value: bool


Object = Union[Dict, Pair, Str, ZStr, Int]
Value = Union[Dict, Str, ZStr, Int, Float, Bool]


class LronParseError(LrcatError):
    """Raised when the text is not a valid lron document. Position is 1-based"""

    def __init__(self, line: int, column: int, expected: frozenset[str]):
        self.line = line
        self.column = column
        self.expected = expected
        super().__init__(f"lron parse error at {line}:{column}, expected one of {', '.join(sorted(expected))}")


def parse(text: str) -> Pair:
    """
    Parse an lron document. The root is always a single pair whose value is a Dict (`name = { ... }`)
    """
    return _Parser(text).parse()


def parse_nested(value: Value) -> Pair | None:
    """
    Parse a string leaf as a complete lron document of its own.
    Returns None for non string values.
    """
    if not isinstance(value, (Str, ZStr)):
        return None

    return parse(value.value)


def to_number(value: Value | None, kind: type = float) -> int | float | None:
    """
    Coerce an Int or Float node into `kind`, regardless of how the literal was written.
    Anything else yields None.
    """
    if isinstance(value, (Int, Float)):
        return kind(value.value)

    return None


_WHITESPACE = " \t\r\n"
# Any other backslash is kept as is
_ESCAPES = {'"': '"', "\n": "\n"}

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_]+")
_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?[0-9]+\.[0-9]+")


class _NoMatch(Exception):
    """Internal backtracking signal, the failure itself is recorded on the parser"""


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

        # Furthest failure, used for error reporting
        self.error_pos = 0
        self.expected: set[str] = set()

    def parse(self) -> Pair:
        try:
            return self.root()
        except _NoMatch:
            raise self.error() from None
        except RecursionError:
            # Nested deeper than the interpreter stack allows
            self.error_pos = self.pos
            self.expected = {"shallower nesting"}
            raise self.error() from None

    def error(self) -> LronParseError:
        line = self.text.count("\n", 0, self.error_pos) + 1
        column = self.error_pos - (self.text.rfind("\n", 0, self.error_pos) + 1) + 1
        return LronParseError(line=line, column=column, expected=frozenset(self.expected))

    def fail(self, expected: str, pos: int | None = None) -> _NoMatch:
        pos = self.pos if pos is None else pos

        if pos > self.error_pos:
            self.error_pos = pos
            self.expected = {expected}
        elif pos == self.error_pos:
            self.expected.add(expected)

        return _NoMatch()

    # -- helpers

    def skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def peek(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def literal(self, token: str):
        if not self.peek(token):
            raise self.fail(f'"{token}"')

        self.pos += len(token)

    def regex(self, pattern: re.Pattern, expected: str) -> str:
        match = pattern.match(self.text, self.pos)
        if match is None:
            raise self.fail(expected)

        self.pos = match.end()
        return match.group()

    def choice(self, *alternatives):
        """PEG ordered choice: the first alternative to match wins, position is restored between attempts"""
        start = self.pos

        for alternative in alternatives:
            try:
                return alternative()
            except _NoMatch:
                self.pos = start

        raise _NoMatch()

    # -- grammar rules

    def root(self) -> Pair:
        self.skip_whitespace()
        key = self.identifier()
        self.skip_whitespace()
        self.literal("=")
        self.skip_whitespace()
        items = self.dict_items()
        self.skip_whitespace()

        if self.pos != len(self.text):
            raise self.fail("end of input")

        return Pair(key=key, value=Dict(items))

    def dict_items(self) -> list[Object]:
        self.literal("{")

        items = []
        self.skip_whitespace()

        if self.peek("}"):
            self.pos += 1
            return items

        self.fail('"}"')

        while True:
            items.append(self.object())
            self.skip_whitespace()

            if self.peek(","):
                self.pos += 1
                self.skip_whitespace()

                # Trailing comma
                if self.peek("}"):
                    self.pos += 1
                    return items

                self.fail('"}"')
                continue

            self.fail('","')
            self.literal("}")
            return items

    def object(self) -> Object:
        return self.choice(
            lambda: Dict(self.dict_items()),
            self.pair,
            lambda: Str(self.string()),
            lambda: ZStr(self.zstr()),
            lambda: Int(self.int_literal()),
        )

    def pair(self) -> Pair:
        return self.choice(self.identifier_pair, self.bracket_pair)

    def identifier_pair(self) -> Pair:
        key = self.identifier()
        self.skip_whitespace()
        self.literal("=")
        self.skip_whitespace()
        return Pair(key=key, value=self.value())

    def bracket_pair(self) -> Pair:
        self.literal("[")
        self.skip_whitespace()
        key = self.string()
        self.skip_whitespace()
        self.literal("]")
        self.skip_whitespace()
        self.literal("=")
        self.skip_whitespace()
        return Pair(key=key, value=self.value())

    def value(self) -> Value:
        return self.choice(
            lambda: Int(self.int_literal()),
            lambda: Bool(self.bool_literal()),
            lambda: Float(self.float_literal()),
            lambda: Str(self.string()),
            lambda: Dict(self.dict_items()),
            lambda: ZStr(self.zstr()),
        )

    def int_literal(self) -> int:
        start = self.pos
        digits = self.regex(_INT_RE, "integer")

        # A decimal point means this is a float
        if self.peek("."):
            raise self.fail("integer", start)

        return int(digits)

    def float_literal(self) -> float:
        return float(self.regex(_FLOAT_RE, "floating point"))

    def bool_literal(self) -> bool:
        if self.peek("true"):
            self.pos += 4
            return True

        if self.peek("false"):
            self.pos += 5
            return False

        raise self.fail("boolean")

    def identifier(self) -> str:
        return self.regex(_IDENTIFIER_RE, "identifier")

    def string(self) -> str:
        if not self.peek('"'):
            raise self.fail("string")

        text = self.text
        pos = self.pos + 1
        chars = []

        while pos < len(text):
            char = text[pos]

            if char == "\\" and pos + 1 < len(text) and text[pos + 1] in _ESCAPES:
                chars.append(_ESCAPES[text[pos + 1]])
                pos += 2
                continue

            if char == '"':
                self.pos = pos + 1
                return "".join(chars)

            chars.append(char)
            pos += 1

        raise self.fail("closing quote", pos)

    def zstr(self) -> str:
        self.literal("ZSTR")
        self.skip_whitespace()
        return self.string()
