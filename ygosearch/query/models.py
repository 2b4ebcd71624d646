"""Query data model.

Clauses, operators and values produced by the parser. All of them are
immutable and can be shared between threads.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .fields import FieldKind, FieldSpec

# =============================================================================
# Operators
# =============================================================================


class Operator(Enum):
    """Comparison operator of a clause. The value is the canonical lexeme."""

    EQ = ":"
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @property
    def is_ordering(self) -> bool:
        return self in (Operator.LT, Operator.LE, Operator.GT, Operator.GE)

    @property
    def lexeme(self) -> str:
        return self.value


# Longest lexemes first so "=" never splits "==", "!=", "<=" or ">=".
OPERATOR_LEXEMES: dict[str, Operator] = {
    "==": Operator.EQ,
    "!=": Operator.NE,
    "<=": Operator.LE,
    ">=": Operator.GE,
    "=<": Operator.LE,
    "=>": Operator.GE,
    "=": Operator.EQ,
    "<": Operator.LT,
    ">": Operator.GT,
    ":": Operator.EQ,
}

_OPERATOR_WORDS = {
    Operator.LT: "is less than",
    Operator.LE: "is at most",
    Operator.GT: "is greater than",
    Operator.GE: "is at least",
}


def match_operator(text: str, index: int) -> str | None:
    """Return the operator lexeme starting at ``text[index]``, if any."""
    for lexeme in OPERATOR_LEXEMES:
        if text.startswith(lexeme, index):
            return lexeme
    return None


# =============================================================================
# Values
# =============================================================================

UNKNOWN_STAT = "?"

_NEEDS_QUOTES = re.compile(r'[\s"|]')
# A leading "/" would read as a regex, a leading operator character as an operator.
_QUOTED_STARTS = frozenset("/=<>!:")


def _format_text(text: str) -> str:
    if text and text[0] not in _QUOTED_STARTS and not _NEEDS_QUOTES.search(text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True, slots=True)
class IntegerValue:
    value: int

    def to_query_string(self) -> str:
        return str(self.value)

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class TextValue:
    """A literal string, already case-folded."""

    value: str

    def to_query_string(self) -> str:
        if self.value == UNKNOWN_STAT:
            return self.value
        return _format_text(self.value)

    def describe(self) -> str:
        return f'"{self.value}"'


Scalar = Union[IntegerValue, TextValue]


@dataclass(frozen=True, slots=True)
class SetValue:
    """Alternatives of one field (``level:3|6|9``), in input order."""

    members: tuple[Scalar, ...]

    def to_query_string(self) -> str:
        return "|".join(m.to_query_string() for m in self.members)

    def describe(self) -> str:
        return " or ".join(m.describe() for m in self.members)


@dataclass(frozen=True, slots=True)
class RegexValue:
    """A case-insensitive regular expression (``o:/draw \\d+ card/``)."""

    pattern: str
    compiled: re.Pattern[str]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegexValue):
            return NotImplemented
        return self.pattern == other.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def to_query_string(self) -> str:
        return f"/{self.pattern}/"

    def describe(self) -> str:
        return f"/{self.pattern}/"


Value = Union[IntegerValue, TextValue, SetValue, RegexValue]


# =============================================================================
# Clauses and queries
# =============================================================================


@dataclass(frozen=True, slots=True)
class Clause:
    """One field/operator/value unit of a query.

    ``raw`` and ``position`` point back at the token the clause came from and
    are ignored when comparing clauses.
    """

    field: FieldSpec
    operator: Operator
    value: Value
    raw: str = ""
    position: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Clause):
            return NotImplemented
        return (self.field, self.operator, self.value) == (other.field, other.operator, other.value)

    def __hash__(self) -> int:
        return hash((self.field, self.operator, self.value))

    def to_query_string(self) -> str:
        """Canonical form, e.g. ``level:3|6`` or ``text:"destroy that target"``."""
        return f"{self.field.canonical_name}{self.operator.lexeme}{self.value.to_query_string()}"

    def describe(self) -> str:
        """Readable form, e.g. ``name contains "blue-eyes"``."""
        name = self.field.canonical_name
        negated = self.operator is Operator.NE
        value = self.value

        if self.operator.is_ordering:
            return f"{name} {_OPERATOR_WORDS[self.operator]} {value.describe()}"
        if (
            self.field.kind is FieldKind.NUMERIC
            and isinstance(value, TextValue)
            and value.value == UNKNOWN_STAT
        ):
            return f"{name} is {'not ' if negated else ''}unknown"
        if isinstance(value, RegexValue):
            verb = "does not match" if negated else "matches"
            return f"{name} {verb} {value.describe()}"
        if isinstance(value, SetValue):
            verb = "is none of" if negated else "is one of"
            if self.field.kind is FieldKind.TEXT:
                verb = "contains none of" if negated else "contains one of"
            return f"{name} {verb} {', '.join(m.describe() for m in value.members)}"
        if self.field.kind is FieldKind.TEXT:
            verb = "does not contain" if negated else "contains"
        else:
            verb = "is not" if negated else "is"
        return f"{name} {verb} {value.describe()}"

    def __str__(self) -> str:
        return self.to_query_string()


@dataclass(frozen=True, slots=True)
class Query:
    """A conjunction of clauses. The empty query matches every card."""

    clauses: tuple[Clause, ...] = ()

    def to_query_string(self) -> str:
        return " ".join(c.to_query_string() for c in self.clauses)

    def describe(self) -> str:
        if not self.clauses:
            return "any card"
        return " and ".join(c.describe() for c in self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    def __str__(self) -> str:
        return self.to_query_string()
