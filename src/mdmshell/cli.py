"""
mdmshell command line.

Usage:
    mdmshell info --json
    mdmshell agent recon -- -assetTag 12345
    mdmshell dialog hud --title "Restart needed" --button1 OK --abandon
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import click

from mdmshell import __version__
from mdmshell._types import DetachedProcess, HelperResponse, read_helper_output
from mdmshell.api import ManagedClient, create_client
from mdmshell.dialog.options import ALIGNMENTS, WINDOW_POSITIONS
from mdmshell.errors import MdmShellError, NetworkUnavailable
from mdmshell.logging_config import FILE_ENV, configure_logging, resolve_level


def _client(ctx: click.Context) -> ManagedClient:
    client = ctx.obj.get("client")
    if client is None:
        client = create_client(strict_dialog_options=ctx.obj.get("strict", False))
        ctx.obj["client"] = client
    return client


@click.group()
@click.version_option(version=__version__, prog_name="mdmshell")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """Inspect and drive the device-management agent on this machine."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    configure_logging(
        resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show this machine's identity and management configuration."""
    client = _client(ctx)

    try:
        address: str | None = client.current_ip_address()
    except NetworkUnavailable:
        address = None
    identity = client.hardware_identity()
    installed = client.installed()

    facts: dict[str, Any] = {
        "ip_address": address,
        "console_user": client.console_user(),
        "uuid": identity.uuid,
        "serial_number": identity.serial,
        "server_url": client.management_server_url(),
        "agent_installed": installed,
        "agent_version": client.agent_version() if installed else None,
    }

    if as_json:
        click.echo(json.dumps(facts, indent=2))
        return

    for key, value in facts.items():
        click.echo(f"{key.replace('_', ' '):>16}: {value if value is not None else '-'}")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def agent(ctx: click.Context, command: str, args: tuple[str, ...]) -> None:
    """Run an agent COMMAND with optional ARGS."""
    client = _client(ctx)
    verbose = ctx.obj["verbose"]
    try:
        output = client.run_agent(command, list(args), verbose=verbose)
    except MdmShellError as e:
        raise click.ClickException(str(e)) from e
    if not verbose:
        click.echo(output, nl=False)


@cli.command("server-status")
@click.pass_context
def server_status(ctx: click.Context) -> None:
    """Check whether the management server is reachable."""
    try:
        available = _client(ctx).server_available()
    except MdmShellError as e:
        raise click.ClickException(str(e)) from e
    if available:
        click.secho("available", fg="green")
    else:
        click.secho("unavailable", fg="red")
        ctx.exit(1)


@cli.command()
@click.pass_context
def receipts(ctx: click.Context) -> None:
    """List package receipts recorded by the agent."""
    try:
        paths = _client(ctx).receipts()
    except MdmShellError as e:
        raise click.ClickException(str(e)) from e
    for path in paths:
        click.echo(path.name)


@cli.command()
@click.argument("window_type")
@click.option("--title")
@click.option("--heading")
@click.option("--align-heading", type=click.Choice(ALIGNMENTS))
@click.option("--description")
@click.option("--align-description", type=click.Choice(ALIGNMENTS))
@click.option("--icon", type=click.Path())
@click.option("--icon-size", type=int)
@click.option("--full-screen-icon", is_flag=True, default=None)
@click.option("--window-position", type=click.Choice(WINDOW_POSITIONS))
@click.option("--button1")
@click.option("--button2")
@click.option("--default-button", type=int)
@click.option("--cancel-button", type=int)
@click.option("--timeout", type=int, help="Seconds before the window times out.")
@click.option("--delay-options", "show_delay_options", help='Comma-separated delays, e.g. "300, 600".')
@click.option("--countdown", is_flag=True, default=None)
@click.option("--align-countdown", type=click.Choice(ALIGNMENTS))
@click.option("--lock-hud", is_flag=True, default=None)
@click.option("--arg-string", help="Raw helper arguments, appended as given.")
@click.option("--output-file", type=click.Path(dir_okay=False), help="Save the helper's result here.")
@click.option("--abandon", "abandon_process", is_flag=True, help="Don't wait for the user.")
@click.option("--strict", is_flag=True, help="Reject unknown options.")
@click.pass_context
def dialog(
    ctx: click.Context,
    window_type: str,
    arg_string: str | None,
    output_file: str | None,
    abandon_process: bool,
    strict: bool,
    **display: Any,
) -> None:
    """
    Show a dialog of WINDOW_TYPE (hud, utility, fs).

    The result is read from --output-file when one is given. Without it the
    exit status is decoded, which can't carry delay choices above 25 seconds.
    """
    ctx.obj["strict"] = strict
    options = {name: value for name, value in display.items() if value is not None}

    try:
        result = _client(ctx).show_dialog(
            window_type,
            options,
            abandon_process=abandon_process,
            arg_string=arg_string,
            output_file=output_file,
        )
    except MdmShellError as e:
        raise click.ClickException(str(e)) from e

    if isinstance(result, DetachedProcess):
        click.echo(f"pid {result.pid}")
        return

    response = read_helper_output(Path(output_file)) if output_file else None
    if response is None:
        response = HelperResponse.from_exit_code(result)
    line = f"{response.exit_code} {response.outcome.value}"
    if response.button is not None:
        line += f" button={response.button}"
    if response.delay_seconds is not None:
        line += f" delay={response.delay_seconds}"
    click.echo(line)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
