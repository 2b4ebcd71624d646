"""
ygosearch: a query language for searching Yu-Gi-Oh! card data.

Example:
    from ygosearch import parse_query, search

    query = parse_query("c:fusion l!=12 blue-eyes")
    result = search("a:fire def:200", records)
    print(result.summary)
"""

from __future__ import annotations

from .exceptions import (
    CardDataError,
    ParseErrorKind,
    QueryError,
    QueryParseError,
    SearchTimeoutError,
    YgoSearchError,
)
from .query import (
    DEFAULT_REGISTRY,
    Clause,
    FieldKind,
    FieldRegistry,
    FieldSpec,
    Operator,
    Query,
    compile_query,
    evaluate,
    parse_query,
)
from .search import SearchResult, search, search_records

__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Errors
    "CardDataError",
    "ParseErrorKind",
    "QueryError",
    "QueryParseError",
    "SearchTimeoutError",
    "YgoSearchError",
    # Query language
    "DEFAULT_REGISTRY",
    "Clause",
    "FieldKind",
    "FieldRegistry",
    "FieldSpec",
    "Operator",
    "Query",
    "compile_query",
    "evaluate",
    "parse_query",
    # Search
    "SearchResult",
    "search",
    "search_records",
]
