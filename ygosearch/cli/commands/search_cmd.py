from __future__ import annotations

from typing import Any

import click
import rich_click

from ygosearch.cards import Card
from ygosearch.query import parse_query
from ygosearch.search import search_records

from ..context import CLIContext
from ..options import catalog_options, output_options
from ..runner import CommandOutput, run_command


def _card_row(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "name": card.name,
        "type": card.type_line,
        "stats": card.stats_line,
        "text": card.text,
    }


@click.command(name="search", cls=rich_click.RichCommand)
@click.argument("query", nargs=-1, required=True)
@catalog_options
@output_options
@click.pass_obj
def search_cmd(
    ctx: CLIContext,
    query: tuple[str, ...],
    *,
    cards_path: str | None,
    sets_path: str | None,
    limit: int | None,
    timeout: float | None,
) -> None:
    """Search cards, e.g. `ygosearch search c:fusion l!=12 blue-eyes`."""
    text = " ".join(query)

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        parsed = parse_query(text)
        config = ctx.resolve_search_config(
            cards_path=cards_path,
            sets_path=sets_path,
            result_limit=limit,
            timeout_seconds=timeout,
        )
        catalog = ctx.get_catalog(config, warnings=warnings)
        result = search_records(
            parsed,
            catalog.records,
            limit=config.result_limit or None,
            timeout=config.timeout_seconds,
        )
        cards = [_card_row(catalog.card_for(record)) for record in result.records]
        return CommandOutput(
            data={"cards": cards, "summary": result.summary},
            warnings=warnings,
            query=result.query.to_query_string(),
            description=result.query.describe(),
            scanned=result.scanned,
            truncated=result.truncated,
        )

    run_command(ctx, command="search", fn=fn, query=text)
