from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar, get_args

import click

from .context import CLIContext, OutputFormat

F = TypeVar("F", bound=Callable[..., object])

OUTPUT_FORMATS: tuple[str, ...] = get_args(OutputFormat)


def _override_output(
    fixed: OutputFormat | None = None,
) -> Callable[[click.Context, click.Parameter, object], object]:
    """Callback that switches the shared context's output format.

    With ``fixed`` set the option is a flag and a truthy value selects ``fixed``;
    otherwise the option's own value is the format.
    """

    def callback(ctx: click.Context, _param: click.Parameter, value: object) -> object:
        if not value or not isinstance(ctx.obj, CLIContext):
            return value
        ctx.obj.output = fixed or value  # type: ignore[assignment]
        return value

    return callback


def output_options(fn: F) -> F:
    """``--output``/``--json`` on a subcommand, overriding the group setting."""
    fn = click.option(
        "--output",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Output format for this command.",
        callback=_override_output(),
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json",
        is_flag=True,
        help="Alias for --output json.",
        callback=_override_output("json"),
        expose_value=False,
    )(fn)
    return fn


def catalog_options(fn: F) -> F:
    """Card data locations and search limits; unset values fall back to env and config."""
    fn = click.option("--cards", "cards_path", type=str, default=None, help="Card dump (cards.json).")(fn)
    fn = click.option("--sets", "sets_path", type=str, default=None, help="Set list (sets.json).")(fn)
    fn = click.option(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of results (0 for no limit).",
    )(fn)
    fn = click.option(
        "--timeout",
        type=float,
        default=None,
        help="Search deadline in seconds.",
    )(fn)
    return fn
