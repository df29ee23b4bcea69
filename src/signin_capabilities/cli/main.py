"""CLI entry point for signin-capabilities.

Invoked as::

    signin-capabilities [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m signin_capabilities.cli.main

Messages are read from and written to JSON files in the shape of
:class:`~signin_capabilities.message.SignInMessage`.

Commands
--------
version     Show version information
build       Delegate capabilities into a message
inspect     Show the capabilities encoded in a message
statement   Print the statement regenerated from a message
verify      Check a message's statement against its capabilities
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from signin_capabilities.errors import CapabilityError
from signin_capabilities.message import SignInMessage

console = Console()

_EXIT_MISMATCH = 1
_EXIT_UNDECODABLE = 2


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="signin-capabilities")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level.",
)
def cli(log_level: str) -> None:
    """Delegated capabilities for sign-in messages"""
    logging.basicConfig(level=getattr(logging, log_level.upper()))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from signin_capabilities import __version__

    console.print(f"[bold]signin-capabilities[/bold] v{__version__}")


# ------------------------------------------------------------------
# build
# ------------------------------------------------------------------


@cli.command(name="build")
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--default",
    "-d",
    "defaults",
    type=(str, str),
    multiple=True,
    metavar="NAMESPACE ACTION",
    help="Grant ACTION across NAMESPACE (repeatable).",
)
@click.option(
    "--grant",
    "-g",
    "grants",
    type=(str, str, str),
    multiple=True,
    metavar="NAMESPACE RESOURCE ACTION",
    help="Grant ACTION on RESOURCE within NAMESPACE (repeatable).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the resulting message JSON to this file path.",
)
def build_command(
    message_file: str,
    defaults: tuple[tuple[str, str], ...],
    grants: tuple[tuple[str, str, str], ...],
    output: str | None,
) -> None:
    """Delegate capabilities into the message in MESSAGE_FILE."""
    from signin_capabilities.builder import Builder

    message = _load_message(message_file)

    builder = Builder()
    try:
        for namespace, action in defaults:
            builder.with_default_actions(namespace, [action])
        for namespace, resource, action in grants:
            builder.with_actions(namespace, resource, [action])
        delegated = builder.build(message)
    except CapabilityError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    message_json = delegated.model_dump_json(indent=2)
    if output:
        Path(output).write_text(message_json, encoding="utf-8")
        console.print(f"[green]Message written to[/green] {output}")
    else:
        click.echo(message_json)


# ------------------------------------------------------------------
# inspect
# ------------------------------------------------------------------


@cli.command(name="inspect")
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False))
def inspect_command(message_file: str) -> None:
    """Show the capabilities encoded in MESSAGE_FILE."""
    from signin_capabilities.translation import extract_capabilities

    message = _load_message(message_file)
    try:
        capabilities = extract_capabilities(message)
    except CapabilityError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(_EXIT_UNDECODABLE)

    if capabilities.is_empty():
        console.print("[yellow]No capabilities delegated in this message.[/yellow]")
        return

    table = Table(title=f"Capabilities delegated to {escape(message.uri)}", show_header=True)
    table.add_column("Namespace", style="cyan")
    table.add_column("Resource")
    table.add_column("Actions")

    for namespace, capability in capabilities.sorted_items():
        if capability.default_actions:
            table.add_row(
                str(namespace),
                "[dim](any)[/dim]",
                ", ".join(sorted(capability.default_actions)),
            )
        for resource in sorted(capability.targeted_actions):
            table.add_row(
                str(namespace),
                escape(resource),
                ", ".join(sorted(capability.targeted_actions[resource])),
            )

    console.print(table)
    console.print(f"\nTotal: {len(capabilities)} namespace(s)")


# ------------------------------------------------------------------
# statement
# ------------------------------------------------------------------


@cli.command(name="statement")
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False))
def statement_command(message_file: str) -> None:
    """Print the statement regenerated from MESSAGE_FILE's capabilities."""
    from signin_capabilities.translation import (
        capabilities_to_statement,
        extract_capabilities,
    )

    message = _load_message(message_file)
    try:
        capabilities = extract_capabilities(message)
    except CapabilityError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(_EXIT_UNDECODABLE)

    generated = capabilities_to_statement(capabilities, message.uri)
    if generated is None:
        console.print("[yellow]No capabilities delegated in this message.[/yellow]")
        return
    click.echo(generated)


# ------------------------------------------------------------------
# verify
# ------------------------------------------------------------------


@cli.command(name="verify")
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False))
def verify_command(message_file: str) -> None:
    """Verify that MESSAGE_FILE's statement matches its capabilities.

    Exits 0 on a match, 1 on a mismatch and 2 when the capability
    resources cannot be decoded.
    """
    from signin_capabilities.verification import verify_statement

    message = _load_message(message_file)
    try:
        verified = verify_statement(message)
    except CapabilityError as exc:
        console.print(
            f"  [red]FAIL[/red]  Capabilities could not be decoded: {escape(str(exc))}"
        )
        sys.exit(_EXIT_UNDECODABLE)

    if verified:
        console.print("  [green]PASS[/green]  Statement matches the delegated capabilities.")
    else:
        console.print("  [red]FAIL[/red]  Statement does not match the delegated capabilities.")
        sys.exit(_EXIT_MISMATCH)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _load_message(message_file: str) -> SignInMessage:
    """Read a SignInMessage from a JSON file, exiting on invalid input."""
    try:
        text = Path(message_file).read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as exc:
        console.print(
            f"[red]Error:[/red] cannot read {message_file}: {escape(str(exc))}"
        )
        sys.exit(1)
    try:
        return SignInMessage.model_validate_json(text)
    except ValidationError as exc:
        console.print(
            f"[red]Error:[/red] {message_file} is not a valid message: {escape(str(exc))}"
        )
        sys.exit(1)


if __name__ == "__main__":
    cli()
