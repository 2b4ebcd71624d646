from __future__ import annotations

import click
import rich_click

from ygosearch.query import parse_query

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="explain", cls=rich_click.RichCommand)
@click.argument("query", nargs=-1, required=True)
@output_options
@click.pass_obj
def explain_cmd(ctx: CLIContext, query: tuple[str, ...]) -> None:
    """Parse a query and show how it will be read, without loading any cards."""
    text = " ".join(query)

    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        parsed = parse_query(text)
        clauses = [
            {
                "field": clause.field.canonical_name,
                "operator": clause.operator.lexeme,
                "query": clause.to_query_string(),
                "description": clause.describe(),
                "position": clause.position,
            }
            for clause in parsed.clauses
        ]
        return CommandOutput(
            data={
                "query": parsed.to_query_string(),
                "description": parsed.describe(),
                "clauses": clauses,
            },
            warnings=warnings,
            query=parsed.to_query_string(),
            description=parsed.describe(),
        )

    run_command(ctx, command="explain", fn=fn, query=text)
