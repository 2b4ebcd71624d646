"""Value parser.

Turns the raw right-hand side of a clause into an integer, a literal string,
a set of alternatives or a regular expression, checking it against the kind
of the field it is compared with.
"""

from __future__ import annotations

import functools
import logging
import re

from ..exceptions import ParseErrorKind, QueryParseError
from .fields import FieldKind, FieldSpec
from .models import (
    UNKNOWN_STAT,
    IntegerValue,
    Operator,
    RegexValue,
    Scalar,
    SetValue,
    TextValue,
    Value,
)
from .tokenizer import ESCAPE, QUOTE, REGEX_DELIMITER, skip_quoted, skip_regex

logger = logging.getLogger(__name__)

ALTERNATIVE_SEPARATOR = "|"
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


def fold(text: str) -> str:
    """Case-fold a string for comparison. Used for query values and record values alike."""
    return text.lower()


@functools.lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a case-insensitive pattern, memoized per pattern text."""
    logger.debug("Compiling pattern /%s/", pattern)
    return re.compile(pattern, re.IGNORECASE)


def _error(
    kind: ParseErrorKind,
    message: str,
    raw: str,
    position: int,
    field: FieldSpec,
) -> QueryParseError:
    return QueryParseError(
        kind, message, token=raw, position=position, field=field.canonical_name
    )


# =============================================================================
# Lexical helpers
# =============================================================================


def unquote(raw: str) -> tuple[str, bool]:
    """Strip quotes and decode escapes inside them.

    Returns:
        Tuple of (text, whether whitespace occurs outside quotes)
    """
    result: list[str] = []
    bare_space = False
    pos = 0
    while pos < len(raw):
        ch = raw[pos]
        if ch == QUOTE:
            end = skip_quoted(raw, pos) - 1
            inner = pos + 1
            while inner < end:
                c = raw[inner]
                if c == ESCAPE and raw[inner + 1] in (QUOTE, ESCAPE):
                    result.append(raw[inner + 1])
                    inner += 2
                else:
                    result.append(c)
                    inner += 1
            pos = end + 1
        else:
            if ch.isspace():
                bare_space = True
            result.append(ch)
            pos += 1
    return "".join(result), bare_space


def split_alternatives(raw: str) -> list[tuple[str, int]]:
    """Split on ``|`` outside quotes. Returns (member, offset) pairs."""
    members: list[tuple[str, int]] = []
    start = 0
    pos = 0
    while pos < len(raw):
        ch = raw[pos]
        if ch == QUOTE:
            pos = skip_quoted(raw, pos)
        elif ch == ALTERNATIVE_SEPARATOR:
            members.append((raw[start:pos], start))
            pos += 1
            start = pos
        else:
            pos += 1
    members.append((raw[start:], start))
    return members


# =============================================================================
# Value parsing
# =============================================================================


def _parse_regex(raw: str, field: FieldSpec, position: int) -> RegexValue:
    if field.kind is not FieldKind.TEXT:
        raise _error(
            ParseErrorKind.INVALID_REGEX,
            f"Regular expressions are only supported on text fields, not '{field}'",
            raw,
            position,
            field,
        )
    try:
        end = skip_regex(raw, 0)
    except QueryParseError as e:
        raise e.at(position) from None
    if end != len(raw):
        raise _error(
            ParseErrorKind.INVALID_REGEX,
            f"Unexpected '{raw[end:]}' after regular expression /{raw[1 : end - 1]}/ "
            "(flags are not supported; matching is always case-insensitive)",
            raw,
            position + end,
            field,
        )
    pattern = raw[1:-1]
    if not pattern:
        raise _error(
            ParseErrorKind.INVALID_REGEX, "Empty regular expression", raw, position, field
        )
    try:
        compiled = compile_pattern(pattern)
    except re.error as e:
        raise _error(
            ParseErrorKind.INVALID_REGEX,
            f"Invalid regular expression /{pattern}/: {e}",
            raw,
            position,
            field,
        ) from None
    return RegexValue(pattern, compiled)


def _parse_scalar(
    raw: str,
    field: FieldSpec,
    operator: Operator,
    position: int,
    *,
    in_set: bool = False,
) -> Scalar:
    try:
        text, bare_space = unquote(raw)
    except QueryParseError as e:
        raise e.at(position) from None

    if not text:
        if in_set:
            raise _error(
                ParseErrorKind.EMPTY_ALTERNATIVE,
                f"Empty alternative in '{field}' value",
                raw,
                position,
                field,
            )
        raise _error(
            ParseErrorKind.EMPTY_VALUE, f"Missing value for '{field}'", raw, position, field
        )

    if field.kind is FieldKind.NUMERIC:
        if text == UNKNOWN_STAT and field.allows_unknown and not in_set:
            if operator.is_ordering:
                raise _error(
                    ParseErrorKind.NOT_A_NUMBER,
                    f"'{field}{operator.lexeme}?' is not supported; use {field}:? or {field}!=?",
                    raw,
                    position,
                    field,
                )
            return TextValue(UNKNOWN_STAT)
        if not _INTEGER.fullmatch(text):
            raise _error(
                ParseErrorKind.NOT_A_NUMBER,
                f"'{text}' is not a number (field '{field}' is numeric)",
                raw,
                position,
                field,
            )
        number = int(text)
        if not INT64_MIN <= number <= INT64_MAX:
            raise _error(
                ParseErrorKind.NOT_A_NUMBER,
                f"'{text}' is out of range for field '{field}'",
                raw,
                position,
                field,
            )
        return IntegerValue(number)

    if bare_space:
        raise _error(
            ParseErrorKind.UNQUOTED_SPACES,
            f'Values with spaces must be quoted: {field}:"{text}"',
            raw,
            position,
            field,
        )
    return TextValue(fold(text))


def parse_value(raw: str, field: FieldSpec, operator: Operator, *, position: int = 0) -> Value:
    """Parse the right-hand side of a clause.

    Args:
        raw: The value text as typed (quotes and slashes included)
        field: The field the value is compared with
        operator: The clause operator (already checked against the field kind)
        position: Offset of ``raw`` in the query text, for error reporting

    Returns:
        An IntegerValue, TextValue, SetValue or RegexValue

    Raises:
        QueryParseError: INVALID_REGEX, EMPTY_ALTERNATIVE, NOT_A_NUMBER,
            UNQUOTED_SPACES or EMPTY_VALUE
    """
    if raw.startswith(REGEX_DELIMITER):
        return _parse_regex(raw, field, position)

    if not operator.is_ordering:
        try:
            alternatives = split_alternatives(raw)
        except QueryParseError as e:
            raise e.at(position) from None
        if len(alternatives) > 1:
            members = tuple(
                _parse_scalar(member, field, operator, position + offset, in_set=True)
                for member, offset in alternatives
            )
            return SetValue(members)

    return _parse_scalar(raw, field, operator, position)
