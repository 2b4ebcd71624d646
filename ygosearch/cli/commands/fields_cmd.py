from __future__ import annotations

import click
import rich_click

from ygosearch.query import DEFAULT_REGISTRY, FieldKind, Operator

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


def _operators_for(kind: FieldKind) -> list[str]:
    if kind is FieldKind.NUMERIC:
        return [op.lexeme for op in Operator]
    return [Operator.EQ.lexeme, Operator.NE.lexeme]


@click.command(name="fields", cls=rich_click.RichCommand)
@output_options
@click.pass_obj
def fields_cmd(ctx: CLIContext) -> None:
    """List searchable fields, their aliases and operators."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        fields = [
            {
                "name": spec.canonical_name,
                "aliases": sorted(spec.aliases - {spec.canonical_name}),
                "kind": spec.kind.value,
                "operators": _operators_for(spec.kind),
                "regex": spec.kind is FieldKind.TEXT,
                "description": spec.description,
            }
            for spec in DEFAULT_REGISTRY
        ]
        return CommandOutput(data={"fields": fields})

    run_command(ctx, command="fields", fn=fn)
