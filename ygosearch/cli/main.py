from __future__ import annotations

from pathlib import Path

import click
import rich_click

import ygosearch

from .context import CLIContext
from .logging import configure_logging, restore_logging
from .options import OUTPUT_FORMATS
from .paths import get_paths


@click.group(
    name="ygosearch",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option("--profile", type=str, default=None, help="Config profile name.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: config.toml in the user config directory).",
)
@click.option("--dotenv/--no-dotenv", default=False, help="Opt-in .env loading.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=".env",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None)
@click.option("--no-log-file", is_flag=True, help="Disable file logging explicitly.")
@click.version_option(version=ygosearch.__version__, prog_name="ygosearch")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    profile: str | None,
    config_path: str | None,
    dotenv: bool,
    env_file: str,
    log_file: str | None,
    no_log_file: bool,
) -> None:
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    paths = get_paths()
    effective_log_file = Path(log_file) if log_file else paths.log_file
    enable_log_file = not no_log_file

    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        profile=profile,
        config_path=Path(config_path) if config_path else None,
        dotenv=dotenv,
        env_file=Path(env_file),
        log_file=effective_log_file,
        enable_log_file=enable_log_file,
        _paths=paths,
    )

    click_ctx.call_on_close(click_ctx.obj.close)

    previous_logging = configure_logging(
        verbosity=verbose,
        log_file=effective_log_file,
        enable_file=enable_log_file,
    )
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.explain_cmd import explain_cmd as _explain_cmd  # noqa: E402
from .commands.fields_cmd import fields_cmd as _fields_cmd  # noqa: E402
from .commands.search_cmd import search_cmd as _search_cmd  # noqa: E402

cli.add_command(_search_cmd)
cli.add_command(_explain_cmd)
cli.add_command(_fields_cmd)
