"""Filter evaluator.

Compiles parsed clauses into predicates over card records. A card record is
a read-only mapping from canonical field name to an int, a string, a list of
strings or None. Evaluation never raises: a missing or mistyped field simply
does not match.
"""

from __future__ import annotations

import operator as op
from collections.abc import Callable, Mapping
from typing import Any

from .fields import FieldKind
from .models import (
    UNKNOWN_STAT,
    Clause,
    IntegerValue,
    Operator,
    Query,
    RegexValue,
    SetValue,
    TextValue,
    Value,
)
from .values import fold

CardRecord = Mapping[str, Any]
Predicate = Callable[[CardRecord], bool]

# =============================================================================
# Operator Definitions
# =============================================================================

NUMERIC_OPERATORS: dict[Operator, Callable[[int, int], bool]] = {
    Operator.EQ: op.eq,
    Operator.NE: op.ne,
    Operator.LT: op.lt,
    Operator.LE: op.le,
    Operator.GT: op.gt,
    Operator.GE: op.ge,
}


def _as_number(raw: Any) -> int | None:
    # bool is an int subclass but never a card stat
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    return None


def _as_strings(raw: Any) -> list[str] | None:
    """Fold a record value into the list of strings it offers for matching."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return [fold(raw)]
    if isinstance(raw, (list, tuple, set, frozenset)):
        return [fold(str(item)) for item in raw if item is not None]
    return [fold(str(raw))]


def _numeric_hit(number: int, operator: Operator, value: Value) -> bool:
    if isinstance(value, SetValue):
        hit = any(
            isinstance(m, IntegerValue) and number == m.value for m in value.members
        )
        return hit if operator is Operator.EQ else not hit
    if isinstance(value, IntegerValue):
        return NUMERIC_OPERATORS[operator](number, value.value)
    return False


def _contains(strings: list[str], value: Value) -> bool:
    """Substring or regex hit on any of the record strings."""
    if isinstance(value, TextValue):
        return any(value.value in s for s in strings)
    if isinstance(value, RegexValue):
        return any(value.compiled.search(s) is not None for s in strings)
    if isinstance(value, SetValue):
        return any(_contains(strings, m) for m in value.members)
    return False


def _has_tag(strings: list[str], value: Value) -> bool:
    """Exact hit on any of the record tags."""
    if isinstance(value, TextValue):
        return value.value in strings
    if isinstance(value, SetValue):
        return any(isinstance(m, TextValue) and m.value in strings for m in value.members)
    return False


# =============================================================================
# Filter Compilation
# =============================================================================


def _compile_numeric(clause: Clause) -> Predicate:
    name = clause.field.canonical_name
    operator = clause.operator
    value = clause.value

    if isinstance(value, TextValue) and value.value == UNKNOWN_STAT:
        # Present-but-None is how records spell an unknown stat.
        want_unknown = operator is Operator.EQ

        def unknown_filter(record: CardRecord) -> bool:
            if name not in record:
                return False
            raw = record[name]
            if raw is None:
                return want_unknown
            return not want_unknown and _as_number(raw) is not None

        return unknown_filter

    def numeric_filter(record: CardRecord) -> bool:
        number = _as_number(record.get(name))
        if number is None:
            return False
        return _numeric_hit(number, operator, value)

    return numeric_filter


def _compile_strings(clause: Clause, hit: Callable[[list[str], Value], bool]) -> Predicate:
    name = clause.field.canonical_name
    value = clause.value
    negate = clause.operator is Operator.NE

    def string_filter(record: CardRecord) -> bool:
        strings = _as_strings(record.get(name))
        if not strings:
            return False
        return hit(strings, value) != negate

    return string_filter


def compile_clause(clause: Clause) -> Predicate:
    """Compile one clause into a predicate over card records."""
    kind = clause.field.kind
    if kind is FieldKind.NUMERIC:
        return _compile_numeric(clause)
    if kind is FieldKind.TEXT:
        return _compile_strings(clause, _contains)
    return _compile_strings(clause, _has_tag)


def compile_query(query: Query) -> Predicate:
    """Compile a query into a single predicate (logical AND of its clauses).

    The predicate is pure and can be shared between threads.
    """
    filters = [compile_clause(clause) for clause in query.clauses]
    if not filters:
        return lambda _: True
    if len(filters) == 1:
        return filters[0]
    return lambda record: all(f(record) for f in filters)


def evaluate(query: Query, record: CardRecord) -> bool:
    """Check whether a card record satisfies every clause of ``query``."""
    return compile_query(query)(record)


def matches(record: CardRecord, query: Query | None) -> bool:
    """Check if a record matches a query. None matches every record."""
    if query is None:
        return True
    return evaluate(query, record)
