from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    mapping = {
        "parse_error": "Parse error",
        "usage_error": "Usage error",
        "config_error": "Configuration error",
        "data_error": "Card data error",
        "timeout": "Timeout",
        "internal_error": "Internal error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _caret_line(query: str, position: int, width: int) -> Text:
    """The query with a caret under the offending token."""
    text = Text()
    text.append(f"  {query}\n")
    text.append("  " + " " * position)
    text.append("^" * max(1, width), style="bold red")
    return text


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    query: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return

    if error_type == "parse_error" and details and query:
        position = details.get("position")
        if isinstance(position, int) and 0 <= position <= len(query):
            token = details.get("token") or ""
            width = min(len(token), len(query) - position) if token else 1
            stderr.print(_caret_line(query, position, width))

    if hint:
        stderr.print(f"Hint: {hint}", markup=False)
    elif error_type == "usage_error":
        stderr.print(f"Hint: run `ygosearch {command} --help`", markup=False)

    if details and settings.verbosity >= 2:
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


def _search_renderable(result: CommandResult, *, settings: RenderSettings) -> Any:
    data = result.data if isinstance(result.data, dict) else {}
    cards = data.get("cards") or []

    table = Table(show_header=True, header_style="bold")
    if settings.verbosity >= 1:
        table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Stats", justify="right")
    for card in cards:
        row = [Text(str(card.get("name", ""))), Text(card.get("type", "")), Text(card.get("stats", ""))]
        if settings.verbosity >= 1:
            row.insert(0, Text(str(card.get("id", ""))))
        table.add_row(*row)

    summary = Text(str(data.get("summary", "")), style="bold")
    summary.append(f" in {result.meta.duration_ms} ms", style="dim")
    if result.meta.truncated:
        summary.append(" (truncated; raise --limit to see more)", style="dim")
    if not cards:
        return summary
    return Group(table, summary)


def _explain_renderable(data: dict[str, Any]) -> Any:
    lines = Text()
    lines.append(str(data.get("query", "")), style="bold")
    lines.append("\n")
    lines.append(f"Cards where {data.get('description', '')}")
    for clause in data.get("clauses") or []:
        lines.append(f"\n  {clause.get('query', '')}", style="cyan")
        lines.append(f"  {clause.get('description', '')}")
    return Panel.fit(lines)


def _fields_renderable(data: dict[str, Any]) -> Any:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Aliases")
    table.add_column("Kind")
    table.add_column("Operators")
    table.add_column("Description")
    for spec in data.get("fields") or []:
        table.add_row(
            spec.get("name", ""),
            ", ".join(spec.get("aliases") or []),
            spec.get("kind", ""),
            Text(" ".join(spec.get("operators") or [])),
            spec.get("description", ""),
        )
    return table


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(f"{title}: {result.error.message}", markup=False)
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                query=result.meta.query,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return 0

    renderable: Any
    data = result.data if isinstance(result.data, dict) else {}
    if result.command == "search":
        renderable = _search_renderable(result, settings=settings)
    elif result.command == "explain":
        renderable = _explain_renderable(data)
    elif result.command == "fields":
        renderable = _fields_renderable(data)
    else:
        renderable = Panel.fit(Text(str(result.data) if result.data is not None else "OK"))

    stdout.print(renderable)
    return 0
