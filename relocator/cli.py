"""Relocator CLI — the operator's entry point for embedding and un-embedding packages."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from relocator import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--project", "-p", default=".", type=click.Path(file_okay=False), help="Project root")
@click.option("--config", "-c", "config_path", default=None, help="Config file (default: <project>/relocator.yaml)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, project: str, config_path: str | None, verbose: bool):
    """Relocator — toggle development packages between linked and embedded.

    'embed' moves every package matching the configured filter out of the
    manifest and, on the next start, copies it into the project.
    'unembed' reverses it. Every command except 'status' first finishes a
    pending embed.
    """
    from relocator.config import load_config
    from relocator.errors import RelocationError
    from relocator.workflow.controller import RelocationController
    from relocator.workflow.host import CommandHost

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

    try:
        config = load_config(project, config_path)
    except RelocationError as e:
        _fail(e)

    host = CommandHost(config.project_root, config.commands)
    controller = RelocationController(config, host)
    ctx.obj = controller

    if ctx.invoked_subcommand != "status":
        _run_startup_hook(controller)


def _run_startup_hook(controller) -> None:
    from relocator.errors import RelocationError

    try:
        if controller.resume_embed_if_pending():
            controller.host.run_deferred()
            console.print("[green]Pending embed completed.[/]")
    except RelocationError as e:
        _fail(e)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/] {escape(str(error))}")
    sys.exit(1)


# ── Embed ────────────────────────────────────────────────────────────


@main.command()
@click.pass_obj
def embed(controller):
    """Unlink matching packages from the manifest (phase 1 of embed)."""
    from relocator.errors import RelocationError

    console.print(f"\n[bold blue]Relocator[/] — Embedding packages into: {controller.config.destination_root}\n")

    try:
        done = controller.start_embed()
    except RelocationError as e:
        _fail(e)

    if done:
        paths = controller.ledger.load()
        for path in paths:
            console.print(f"  [cyan]unlinked[/] {escape(path)}")
        console.print("\n[green]Manifest updated.[/] Packages are copied on the next start.")
    else:
        console.print("[yellow]This command only works for the configured operator.[/]")


@main.command()
@click.pass_obj
def unembed(controller):
    """Remove embedded packages and restore the manifest backup."""
    from relocator.errors import RelocationError

    console.print(f"\n[bold blue]Relocator[/] — Removing packages from: {controller.config.destination_root}\n")

    try:
        done = controller.un_embed()
    except RelocationError as e:
        _fail(e)

    if done:
        console.print("[green]Manifest restored.[/]")
    else:
        console.print("[yellow]This command only works for the configured operator.[/]")


@main.command()
def resume():
    """Finish a pending embed, if any (also runs before every other command)."""
    console.print("[dim]Startup hook finished.[/]")


# ── Status ───────────────────────────────────────────────────────────


@main.command()
@click.pass_obj
def status(controller):
    """Show the current relocation state without changing it."""
    from relocator.errors import RelocationError

    try:
        state = controller.status()
    except RelocationError as e:
        _fail(e)

    table = Table(title="Relocation State")
    table.add_column("Item", style="cyan")
    table.add_column("Value")

    table.add_row("Manifest", escape(str(controller.config.manifest_path)))
    table.add_row("Backup", "[green]present[/]" if state.backup_exists else "[dim]none[/]")
    table.add_row("Resume pending", "[yellow]yes[/]" if state.resume_pending else "no")
    if state.ledger_paths is None:
        table.add_row("Ledger", "[dim]none[/]")
    else:
        table.add_row("Ledger", escape("\n".join(state.ledger_paths)) or "[dim](empty)[/]")
    table.add_row("Embedded", ", ".join(state.embedded_packages) or "[dim]none[/]")

    console.print(table)


if __name__ == "__main__":
    main()
