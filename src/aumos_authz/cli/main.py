"""CLI entry point for aumos-authz.

Invoked as::

    authz [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m aumos_authz.cli.main

Commands
--------
- init     Write a starter permission matrix YAML
- show     Render a matrix file as a table
- check    Evaluate one access decision against a matrix file
- levels   Show the permission level hierarchy
- version  Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from aumos_authz.permissions.levels import LEVEL_HIERARCHY, PermissionLevel
from aumos_authz.permissions.matrix import PermissionMatrix, UserType
from aumos_authz.permissions.matrix_loader import MatrixConfigError, MatrixLoader

console = Console()
err_console = Console(stderr=True)

_LEVEL_CHOICES = [level.value for level in LEVEL_HIERARCHY]

_LEVEL_STYLES: dict[PermissionLevel, str] = {
    PermissionLevel.NONE: "dim",
    PermissionLevel.VIEW: "cyan",
    PermissionLevel.EDIT: "green",
    PermissionLevel.DELETE: "yellow",
    PermissionLevel.ADMIN: "bold red",
}

_STARTER_MATRIX: dict[str, dict[str, str]] = {
    "resourceA": {
        UserType.GUEST.value: "none",
        UserType.AUTHENTICATED.value: "view",
        UserType.PREMIUM.value: "edit",
        UserType.ADMIN.value: "admin",
    },
    "userSettings": {
        UserType.GUEST.value: "none",
        UserType.AUTHENTICATED.value: "edit",
        UserType.PREMIUM.value: "edit",
        UserType.ADMIN.value: "admin",
    },
    "adminPanel": {
        UserType.ADMIN.value: "admin",
    },
}


def _load_matrix(matrix_file: str) -> PermissionMatrix:
    try:
        return MatrixLoader().load(Path(matrix_file))
    except MatrixConfigError as exc:
        err_console.print(f"[red]Invalid matrix:[/red] {escape(str(exc))}")
        sys.exit(2)


def _styled(level: object) -> str:
    if isinstance(level, PermissionLevel):
        return f"[{_LEVEL_STYLES[level]}]{level.value}[/{_LEVEL_STYLES[level]}]"
    return f"[red]{escape(str(level))}?[/red]"


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="aumos-authz")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Authorization CLI — inspect permission matrices and test decisions."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from aumos_authz import __version__

    console.print(
        Panel(
            f"[bold]aumos-authz[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Feature-level authorization with a permission matrix.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# levels
# ---------------------------------------------------------------------------


@cli.command(name="levels")
def levels_command() -> None:
    """Show the permission level hierarchy, lowest first."""
    table = Table(title="Permission Levels", box=box.SIMPLE)
    table.add_column("Rank", justify="right")
    table.add_column("Level")
    table.add_column("Implies")
    for index, level in enumerate(LEVEL_HIERARCHY):
        implied = ", ".join(lvl.value for lvl in LEVEL_HIERARCHY[:index]) or "-"
        table.add_row(str(index), _styled(level), implied)
    console.print(table)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command(name="init")
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="permissions.yaml",
    show_default=True,
    help="Output matrix file path.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init_command(output: str, force: bool) -> None:
    """Write a starter permission matrix."""
    output_path = Path(output)
    if output_path.exists() and not force:
        err_console.print(
            f"[red]Refusing to overwrite[/red] {output_path} (use --force)."
        )
        sys.exit(1)

    matrix = MatrixLoader().load_from_dict({"version": "1.0", "matrix": _STARTER_MATRIX})
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(MatrixLoader().dump(matrix), encoding="utf-8")

    console.print(f"[green]Initialised[/green] permission matrix: [bold]{output_path}[/bold]")
    console.print(f"  Capabilities: [cyan]{len(matrix)}[/cyan]")


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("matrix_file", type=click.Path(exists=True))
def show_command(matrix_file: str) -> None:
    """Render MATRIX_FILE as a capability x class table."""
    matrix = _load_matrix(matrix_file)
    if not len(matrix):
        console.print("[yellow]Matrix is empty; every request is denied.[/yellow]")
        return

    classes = matrix.requester_classes()
    table = Table(title=f"Permission Matrix — {escape(matrix_file)}", box=box.SIMPLE)
    table.add_column("Capability", style="bold")
    for requester_class in classes:
        table.add_column(escape(str(requester_class)))
    for capability in matrix.capabilities():
        table.add_row(
            escape(str(capability)),
            *(_styled(matrix.lookup(capability, rc)) for rc in classes),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("matrix_file", type=click.Path(exists=True))
@click.option("--class", "-c", "requester_class", required=True, help="Requester class, e.g. 'authenticated'.")
@click.option("--capability", "-f", required=True, help="Capability (matrix row) to check.")
@click.option(
    "--level",
    "-l",
    "required_level",
    type=click.Choice(_LEVEL_CHOICES),
    required=True,
    help="Required permission level.",
)
@click.option(
    "--override",
    type=click.Choice(_LEVEL_CHOICES),
    default=None,
    help="Simulate a per-user override level.",
)
def check_command(
    matrix_file: str,
    requester_class: str,
    capability: str,
    required_level: str,
    override: str | None,
) -> None:
    """Evaluate one decision against MATRIX_FILE.

    Exits 0 when granted, 1 when denied, 2 on invalid input.
    """
    from aumos_authz.authorization.engine import AuthorizationEngine
    from aumos_authz.authorization.providers import (
        InMemoryOverrideStore,
        StaticMatrixProvider,
        StaticRequesterContext,
    )

    matrix = _load_matrix(matrix_file)
    overrides = InMemoryOverrideStore()
    user_id: str | None = None
    if override is not None:
        user_id = "cli-user"
        overrides.set_override(user_id, capability, override)

    context = StaticRequesterContext(requester_class, user_id)
    engine = AuthorizationEngine(
        matrix_provider=StaticMatrixProvider(matrix),
        requester_resolver=context,
        identity_resolver=context,
        override_provider=overrides,
    )
    required = PermissionLevel(required_level)
    granted = engine.has_permission(requester_class, capability, required, user_id)
    held = engine.effective_level(requester_class, capability, user_id)

    status_str = "[green]GRANTED[/green]" if granted else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Authorization Check", border_style="blue"))
    console.print(f"  Capability: [bold]{escape(capability)}[/bold]")
    console.print(f"  Class:      [bold]{escape(requester_class)}[/bold]")
    console.print(f"  Required:   {_styled(required)}")
    console.print(
        f"  Held:       {_styled(held)}"
        + (" [magenta](override)[/magenta]" if override is not None else "")
    )
    if capability not in matrix:
        console.print("  [yellow]Capability not in matrix; defaulted to none.[/yellow]")

    sys.exit(0 if granted else 1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
