#!/usr/bin/env python3
"""
Filekit - Filesystem convenience commands

Main entry point for the Filekit CLI application.
"""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core import AuditLogger, FileOpError, load_config
from core.config import DEFAULT_CONFIG_PATH
from modules.fs_utils import FileOperator, Presence


console = Console()


def get_operator(ctx: click.Context) -> FileOperator:
    """Get the FileOperator built for this invocation."""
    return ctx.obj["operator"]


def fail(error: FileOpError) -> None:
    """Report a failed operation and exit with status 1."""
    console.print(f"[red]Error ({error.kind.value}):[/red] {escape(str(error))}", highlight=False)
    sys.exit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="Filekit")
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True,
              help="Path to the YAML configuration file.")
@click.option("--no-audit", is_flag=True, help="Do not record operations in the audit log.")
@click.pass_context
def filekit(ctx, config_path: str, no_audit: bool):
    """
    Filekit - Filesystem convenience commands

    Count lines, copy, read, write and append files, and manage
    directories from the command line.
    """
    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--config")

    logger = None
    if config.audit_enabled and not no_audit:
        logger = AuditLogger(log_path=config.audit_log_path)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["operator"] = FileOperator(config=config, logger=logger)


@filekit.command("count-lines")
@click.argument("path")
@click.pass_context
def count_lines(ctx, path: str):
    """Count the lines of a file."""
    try:
        count = get_operator(ctx).count_lines(path)
    except FileOpError as e:
        fail(e)
    console.print(count)


@filekit.command()
@click.argument("src")
@click.argument("dst")
@click.pass_context
def copy(ctx, src: str, dst: str):
    """Copy SRC into DST (DST is not truncated first)."""
    try:
        get_operator(ctx).copy(src, dst)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Copied[/green] {escape(src)} -> {escape(dst)}", highlight=False)


@filekit.command()
@click.argument("path")
@click.pass_context
def cat(ctx, path: str):
    """Print the contents of a file."""
    try:
        content = get_operator(ctx).read(path)
    except FileOpError as e:
        fail(e)
    # Back to the original bytes, undecodable ones included.
    click.echo(content.encode(ctx.obj["config"].encoding, "surrogateescape"), nl=False)


@filekit.command()
@click.argument("path")
@click.argument("text")
@click.option("--atomic", is_flag=True, help="Write through a temporary file and rename it into place.")
@click.pass_context
def write(ctx, path: str, text: str, atomic: bool):
    """Write TEXT to PATH, replacing its contents."""
    try:
        get_operator(ctx).write(path, text, atomic=atomic)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Wrote[/green] {escape(path)}", highlight=False)


@filekit.command()
@click.argument("path")
@click.argument("text")
@click.pass_context
def append(ctx, path: str, text: str):
    """Append TEXT to the end of PATH."""
    try:
        get_operator(ctx).append(path, text)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Appended to[/green] {escape(path)}", highlight=False)


@filekit.command()
@click.argument("path")
@click.pass_context
def exists(ctx, path: str):
    """Report whether PATH exists (exit status 0 only when present)."""
    presence = get_operator(ctx).probe(path)
    colors = {
        Presence.PRESENT: "green",
        Presence.ABSENT: "yellow",
        Presence.UNKNOWN: "red",
    }
    color = colors[presence]
    console.print(f"[{color}]{presence.value}[/{color}]")
    if presence is not Presence.PRESENT:
        sys.exit(1)


@filekit.command()
@click.argument("path")
@click.pass_context
def readable(ctx, path: str):
    """Report whether PATH is readable (exit status 0 only when readable)."""
    if get_operator(ctx).is_readable(path):
        console.print("[green]readable[/green]")
    else:
        console.print("[red]not readable[/red]")
        sys.exit(1)


@filekit.command()
@click.argument("old_path")
@click.argument("new_path")
@click.pass_context
def rename(ctx, old_path: str, new_path: str):
    """Rename OLD_PATH to NEW_PATH."""
    try:
        get_operator(ctx).rename(old_path, new_path)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Renamed[/green] {escape(old_path)} -> {escape(new_path)}", highlight=False)


@filekit.command("rm")
@click.argument("path")
@click.pass_context
def remove(ctx, path: str):
    """Remove PATH and everything below it."""
    try:
        get_operator(ctx).remove(path)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Removed[/green] {escape(path)}", highlight=False)


@filekit.command("mkdir")
@click.argument("path")
@click.pass_context
def make_dir(ctx, path: str):
    """Create PATH and any missing parent directories."""
    try:
        get_operator(ctx).make_dir(path)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Created[/green] {escape(path)}", highlight=False)


@filekit.command()
@click.argument("path")
@click.pass_context
def clear(ctx, path: str):
    """Remove everything inside directory PATH."""
    try:
        get_operator(ctx).clear_dir(path)
    except FileOpError as e:
        fail(e)
    console.print(f"[green]Cleared[/green] {escape(path)}", highlight=False)


@filekit.command("ls")
@click.argument("path", default=".")
@click.option("--suffix", default="", help="Only list entries with this extension, e.g. .txt")
@click.pass_context
def list_files(ctx, path: str, suffix: str):
    """List the entries of a directory."""
    try:
        paths = get_operator(ctx).list_files(path, suffix)
    except FileOpError as e:
        fail(e)

    if not paths:
        console.print("[dim]No matching entries.[/dim]")
        return

    for entry in paths:
        click.echo(entry)


@filekit.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.option("--failures", is_flag=True, help="Only show failed operations.")
@click.option("--export", "export_format", type=click.Choice(["json", "csv"]),
              help="Print the whole log in this format instead of a table.")
@click.pass_context
def audit(ctx, limit: int, failures: bool, export_format: str):
    """View the audit log."""
    logger = AuditLogger(log_path=ctx.obj["config"].audit_log_path)

    if export_format:
        click.echo(logger.export(format=export_format))
        return

    entries = logger.get_failures(limit=limit) if failures else logger.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Operation")
    table.add_column("Target")
    table.add_column("Status")
    table.add_column("Result")

    for entry in entries:
        # Format timestamp
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "executed":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        target = entry.target or "—"
        table.add_row(
            time_str,
            entry.operation,
            escape(target[:50] + "..." if len(target) > 50 else target),
            status_str,
            escape(entry.result or "")
        )

    console.print(table)


if __name__ == "__main__":
    filekit()
