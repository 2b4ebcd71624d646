"""Clause parser and query builder.

Parses query text such as ``c:fusion l!=12 blue-eyes`` into a validated
Query. Any error rejects the whole query.
"""

from __future__ import annotations

import logging

from ..exceptions import ParseErrorKind, QueryParseError
from .fields import DEFAULT_REGISTRY, FieldKind, FieldRegistry
from .models import OPERATOR_LEXEMES, Clause, Operator, Query, match_operator
from .tokenizer import QUOTE, REGEX_DELIMITER, Token, skip_quoted, skip_regex, tokenize
from .values import parse_value

logger = logging.getLogger(__name__)


def find_operator(text: str) -> tuple[int, str] | None:
    """Locate the first operator outside quotes (and outside a leading regex).

    Returns:
        Tuple of (index, lexeme), or None for a bare term
    """
    pos = 0
    if text.startswith(REGEX_DELIMITER):
        pos = skip_regex(text, 0)
    while pos < len(text):
        ch = text[pos]
        if ch == QUOTE:
            pos = skip_quoted(text, pos)
            continue
        lexeme = match_operator(text, pos)
        if lexeme:
            return pos, lexeme
        pos += 1
    return None


def parse_clause(
    token: Token | str,
    registry: FieldRegistry = DEFAULT_REGISTRY,
) -> Clause:
    """Parse a single clause token.

    A token without an operator is a bare term and searches card names.

    Raises:
        QueryParseError: For unknown fields, operator/field mismatches and
            invalid values
    """
    if isinstance(token, str):
        token = Token(token, 0)
    text = token.text
    offset = token.position

    try:
        found = find_operator(text)
    except QueryParseError as e:
        raise e.at(offset) from None

    if found is None:
        field = registry.name_field
        value = parse_value(text, field, Operator.EQ, position=offset)
        return Clause(field, Operator.EQ, value, raw=text, position=offset)

    index, lexeme = found
    alias = text[:index]
    field = registry.resolve(alias) if alias else None
    if field is None:
        known = ", ".join(sorted(spec.canonical_name for spec in registry))
        raise QueryParseError(
            ParseErrorKind.UNKNOWN_FIELD,
            f"Unknown field '{alias}'. Known fields: {known}"
            if alias
            else f"Missing field name before '{lexeme}'",
            token=text,
            position=offset,
        )

    value_start = index + len(lexeme)
    # ":" may introduce an explicit operator: "atk:>=4000" reads as "atk>=4000".
    if lexeme == ":":
        explicit = match_operator(text, value_start)
        if explicit and explicit != ":":
            lexeme = explicit
            value_start += len(explicit)

    operator = OPERATOR_LEXEMES[lexeme]
    if operator.is_ordering and field.kind is not FieldKind.NUMERIC:
        raise QueryParseError(
            ParseErrorKind.OPERATOR_FIELD_MISMATCH,
            f"Operator '{lexeme}' needs a numeric field, but '{field}' is {field.kind.value}. "
            f"Use ':' or '!=' instead",
            token=text,
            position=offset + index,
            field=field.canonical_name,
        )

    value = parse_value(text[value_start:], field, operator, position=offset + value_start)
    return Clause(field, operator, value, raw=text, position=offset)


def parse_query(text: str, registry: FieldRegistry = DEFAULT_REGISTRY) -> Query:
    """Parse query text into a Query (logical AND of its clauses).

    Args:
        text: Query as typed by the user
        registry: Field aliases to resolve against

    Returns:
        The parsed Query

    Raises:
        QueryParseError: If the text is blank or any clause is invalid
    """
    if not text or not text.strip():
        raise QueryParseError(ParseErrorKind.EMPTY_QUERY, "Empty query", token=text, position=0)

    clauses = tuple(parse_clause(token, registry) for token in tokenize(text))
    logger.debug("Parsed %r into %d clause(s): %s", text, len(clauses), clauses)
    return Query(clauses)
