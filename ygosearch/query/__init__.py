"""Card query language.

Parses queries such as ``c:fusion l!=12 blue-eyes`` or ``o:/draw \\d+ card/``
and evaluates them against card records.

Example:
    from ygosearch.query import compile_query, parse_query

    query = parse_query("a:fire def:200")
    predicate = compile_query(query)
    hits = [card for card in records if predicate(card)]
"""

from __future__ import annotations

from ..exceptions import ParseErrorKind, QueryError, QueryParseError
from .fields import DEFAULT_REGISTRY, FieldKind, FieldRegistry, FieldSpec
from .filters import CardRecord, Predicate, compile_clause, compile_query, evaluate, matches
from .models import (
    Clause,
    IntegerValue,
    Operator,
    Query,
    RegexValue,
    SetValue,
    TextValue,
    Value,
)
from .parser import parse_clause, parse_query
from .tokenizer import Token, tokenize
from .values import parse_value

__all__ = [
    # Errors
    "ParseErrorKind",
    "QueryError",
    "QueryParseError",
    # Fields
    "DEFAULT_REGISTRY",
    "FieldKind",
    "FieldRegistry",
    "FieldSpec",
    # Model
    "Clause",
    "IntegerValue",
    "Operator",
    "Query",
    "RegexValue",
    "SetValue",
    "TextValue",
    "Value",
    # Parsing
    "Token",
    "tokenize",
    "parse_clause",
    "parse_query",
    "parse_value",
    # Evaluation
    "CardRecord",
    "Predicate",
    "compile_clause",
    "compile_query",
    "evaluate",
    "matches",
]
