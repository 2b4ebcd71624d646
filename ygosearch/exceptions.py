"""
Exceptions raised by ygosearch.

Parse errors are terminal for the whole query: there is no clause-level
recovery, and evaluation itself never raises.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class YgoSearchError(Exception):
    """Base class for all ygosearch errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Query errors
# =============================================================================


class ParseErrorKind(Enum):
    """Why a query string was rejected."""

    UNTERMINATED_LITERAL = "unterminated_literal"
    UNKNOWN_FIELD = "unknown_field"
    OPERATOR_FIELD_MISMATCH = "operator_field_mismatch"
    INVALID_REGEX = "invalid_regex"
    EMPTY_ALTERNATIVE = "empty_alternative"
    NOT_A_NUMBER = "not_a_number"
    UNQUOTED_SPACES = "unquoted_spaces"
    EMPTY_VALUE = "empty_value"
    EMPTY_QUERY = "empty_query"


class QueryError(YgoSearchError):
    """Base class for query errors."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class QueryParseError(QueryError):
    """The query text could not be parsed.

    Attributes:
        kind: Machine-readable reason
        token: The offending token (or literal) as typed by the user
        position: 0-based offset of the offending token in the query text
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        *,
        token: str | None = None,
        position: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, field=field)
        self.kind = kind
        self.token = token
        self.position = position

    def at(self, offset: int) -> QueryParseError:
        """Shift the error position by ``offset`` (token-relative to query-relative)."""
        if self.position is not None:
            self.position += offset
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "token": self.token,
            "position": self.position,
            "field": self.field,
        }

    def __repr__(self) -> str:
        return f"QueryParseError({self.kind.name}, {self.message!r}, position={self.position})"


# =============================================================================
# Search errors
# =============================================================================


class SearchTimeoutError(YgoSearchError):
    """The evaluate-over-all-records pass ran past its deadline."""

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: float,
        elapsed_seconds: float,
        partial_results: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds
        self.elapsed_seconds = elapsed_seconds
        self.partial_results = partial_results or []


class CardDataError(YgoSearchError):
    """A card or set dump could not be read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
