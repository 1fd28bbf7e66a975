"""Typer CLI for CAH — list, show, stats and export commands."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from result import Err

from cah.config import Config
from cah.models.sessions import SessionSource
from cah.services.container import ServiceContainer
from cah.services.export_service import EXPORT_FORMATS

app = typer.Typer(
    name="cah",
    help="Coding Assistant History — browse Claude Code and Copilot CLI session logs.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    claude_path: Annotated[
        list[Path] | None,
        typer.Option("--claude-path", help="Claude projects directory (repeatable)"),
    ] = None,
    copilot_path: Annotated[
        list[Path] | None,
        typer.Option("--copilot-path", help="Copilot session-state directory (repeatable)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Build the service container shared by every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = Config.from_env()
    if claude_path:
        config = replace(config, claude_paths=tuple(claude_path))
    if copilot_path:
        config = replace(config, copilot_paths=tuple(copilot_path))
    ctx.obj = ServiceContainer.create(config)


@app.command("list")
def list_sessions(
    ctx: typer.Context,
    source: Annotated[
        SessionSource | None, typer.Option("--source", help="Only list one source")
    ] = None,
) -> None:
    """List sessions, most recent activity first."""
    services: ServiceContainer = ctx.obj
    result = services.session_service.list_sessions(source)
    if isinstance(result, Err):
        _fail(result.err_value)

    for summary in result.ok_value:
        tokens = f"{summary.total_tokens} tokens" if summary.total_tokens is not None else "-"
        typer.echo(
            f"{summary.source}\t{summary.id}\t{summary.project}\t{summary.last_activity}\t"
            f"{summary.message_count} msgs\t{tokens}\t{summary.model or '-'}"
        )


@app.command()
def show(
    ctx: typer.Context,
    source: SessionSource,
    session_id: str,
    offset: Annotated[int, typer.Option("--offset", min=0)] = 0,
    limit: Annotated[int, typer.Option("--limit", min=1)] = 50,
) -> None:
    """Print a session header followed by a page of its messages."""
    services: ServiceContainer = ctx.obj
    detail_result = services.session_service.get_session_detail(source, session_id)
    if isinstance(detail_result, Err):
        _fail(detail_result.err_value)
    detail = detail_result.ok_value

    typer.echo(f"# {detail.source}:{detail.id}")
    typer.echo(f"Project: {detail.project} ({detail.project_path})")
    typer.echo(f"Model: {detail.model or '-'}")
    typer.echo(f"Started: {detail.start_time}  Last activity: {detail.last_activity}")
    typer.echo(f"Messages: {detail.message_count}")
    typer.echo("")

    messages_result = services.session_service.get_session_messages(
        source, session_id, offset=offset, limit=limit
    )
    if isinstance(messages_result, Err):
        _fail(messages_result.err_value)
    for msg in messages_result.ok_value:
        typer.echo(f"[{msg.timestamp}] {msg.role}: {msg.content}")
        for call in msg.tool_calls or []:
            typer.echo(f"  -> {call.name} ({call.id})")
        if msg.tool_result is not None:
            status = "ok" if msg.tool_result.success else "failed"
            typer.echo(f"  <- {msg.tool_result.tool_call_id} {status}")


@app.command()
def stats(ctx: typer.Context, source: SessionSource, session_id: str) -> None:
    """Print session statistics as JSON."""
    services: ServiceContainer = ctx.obj
    result = services.session_service.get_session_stats(source, session_id)
    if isinstance(result, Err):
        _fail(result.err_value)
    typer.echo(result.ok_value.model_dump_json(indent=2, exclude_none=True))


@app.command()
def export(
    ctx: typer.Context,
    source: SessionSource,
    session_id: str,
    fmt: Annotated[
        str, typer.Option("--format", "-f", help=f"One of: {', '.join(EXPORT_FORMATS)}")
    ] = "json",
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write to a file instead of stdout")
    ] = None,
) -> None:
    """Export a session as CSV, JSON or a JSON summary."""
    services: ServiceContainer = ctx.obj
    result = services.export_service.export_session(source, session_id, fmt)
    if isinstance(result, Err):
        _fail(result.err_value)

    if output is None:
        typer.echo(result.ok_value)
        return
    output.write_text(result.ok_value, encoding="utf-8")
    typer.echo(f"Wrote {output}")


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)
