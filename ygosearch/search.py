"""Search service.

Runs a parsed query over a collection of card records. The deadline is
watched from outside the engine: the predicate itself never suspends, the
loop checks the clock between records.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from .exceptions import SearchTimeoutError
from .query import DEFAULT_REGISTRY, CardRecord, FieldRegistry, Query, compile_query, parse_query

logger = logging.getLogger(__name__)

# The yearly tins have ~250 cards in them; stay above that so a set can be listed.
DEFAULT_RESULT_LIMIT = 300
DEADLINE_CHECK_INTERVAL = 256


@dataclass
class SearchResult:
    """Outcome of one search."""

    query: Query
    records: list[CardRecord] = field(default_factory=list)
    scanned: int = 0
    truncated: bool = False
    elapsed_seconds: float = 0.0

    @property
    def summary(self) -> str:
        return f"Showing {len(self.records)} results where {self.query.describe()}"


@dataclass
class _SearchContext:
    """Tracks state during one pass over the records."""

    timeout: float | None
    start_time: float = field(default_factory=time.monotonic)
    matched: list[CardRecord] = field(default_factory=list)

    def check_timeout(self) -> None:
        if self.timeout is None:
            return
        elapsed = time.monotonic() - self.start_time
        if elapsed > self.timeout:
            raise SearchTimeoutError(
                f"Search exceeded timeout of {self.timeout}s",
                timeout_seconds=self.timeout,
                elapsed_seconds=elapsed,
                partial_results=self.matched,
            )


def search_records(
    query: Query,
    records: Iterable[CardRecord],
    *,
    limit: int | None = DEFAULT_RESULT_LIMIT,
    timeout: float | None = None,
) -> SearchResult:
    """Return the records matching ``query``, in input order.

    Args:
        query: A parsed query
        records: Card records to scan (never modified)
        limit: Stop after this many matches (None for no limit)
        timeout: Give up after this many seconds

    Raises:
        SearchTimeoutError: If the deadline passes; carries the partial results
    """
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")

    predicate = compile_query(query)
    ctx = _SearchContext(timeout=timeout)
    scanned = 0
    truncated = False

    for record in records:
        if limit is not None and len(ctx.matched) >= limit:
            truncated = True
            break
        if scanned % DEADLINE_CHECK_INTERVAL == 0:
            ctx.check_timeout()
        scanned += 1
        if predicate(record):
            ctx.matched.append(record)

    elapsed = time.monotonic() - ctx.start_time
    logger.info(
        "Query %r matched %d of %d scanned records in %.3fs",
        query.to_query_string(),
        len(ctx.matched),
        scanned,
        elapsed,
    )
    return SearchResult(
        query=query,
        records=ctx.matched,
        scanned=scanned,
        truncated=truncated,
        elapsed_seconds=elapsed,
    )


def search(
    text: str,
    records: Iterable[CardRecord],
    *,
    registry: FieldRegistry = DEFAULT_REGISTRY,
    limit: int | None = DEFAULT_RESULT_LIMIT,
    timeout: float | None = None,
) -> SearchResult:
    """Parse ``text`` and run it over ``records``.

    Raises:
        QueryParseError: If the query is invalid; nothing is evaluated
        SearchTimeoutError: If the deadline passes
    """
    query = parse_query(text, registry)
    return search_records(query, records, limit=limit, timeout=timeout)
