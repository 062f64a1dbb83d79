"""CLI entry points for Enrollment Helper.

Commands:
    enrollment-helper enroll   Run the interactive enrollment wizard
    enrollment-helper catalog  Show the department and building picklists
    enrollment-helper preview  Print the command that would be run
    enrollment-helper version  Show the installed version
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import enrollment_helper

console = Console()
app = typer.Typer(
    name="enrollment-helper",
    help="Tag this computer with its owner, department, and building.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

_CATALOG_HELP = "Reference table (building:dept,dept per line). Defaults to the bundled table."
_CONFIG_HELP = "Optional TOML config file."


def _setup_logging(verbose: bool = False) -> None:
    """Configure root logging for CLI output.

    Without ``--verbose`` only warnings are shown so log lines do not
    interleave with the wizard's pages.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _load(config_path: Path | None, catalog_path: Path | None):
    """Load config and catalog, exiting with status 2 on a bad config file."""
    from enrollment_helper.catalog import load_catalog
    from enrollment_helper.config import ConfigManager
    from enrollment_helper.errors import ConfigError

    try:
        config = ConfigManager(config_path).load()
    except ConfigError as exc:
        console.print(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(2) from None

    source = catalog_path or config.catalog.get_path()
    catalog = load_catalog(
        source,
        other_building=config.catalog.other_building,
        other_department=config.catalog.other_department,
    )
    return config, catalog


# ------------------------------------------------------------------
# enrollment-helper enroll
# ------------------------------------------------------------------


@app.command()
def enroll(
    catalog_path: Path = typer.Option(None, "--catalog", help=_CATALOG_HELP),
    config_path: Path = typer.Option(None, "--config", help=_CONFIG_HELP),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Walk through the wizard without running jamf"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Run the interactive enrollment wizard."""
    _setup_logging(verbose)
    from enrollment_helper.executor import DryRunExecutor, PrivilegedExecutor
    from enrollment_helper.wizard.runner import EnrollmentRunner

    config, catalog = _load(config_path, catalog_path)

    if dry_run:
        executor = DryRunExecutor()
    else:
        executor = PrivilegedExecutor(
            shell=config.command.shell,
            escalation=config.command.escalation,
        )

    runner = EnrollmentRunner(config, catalog, executor, console=console, verbose=verbose)
    code = runner.run()
    if code:
        raise typer.Exit(code)


# ------------------------------------------------------------------
# enrollment-helper catalog
# ------------------------------------------------------------------


@app.command()
def catalog(
    catalog_path: Path = typer.Option(None, "--catalog", help=_CATALOG_HELP),
    config_path: Path = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Show the department and building picklists."""
    _setup_logging()
    _, loaded = _load(config_path, catalog_path)

    table = Table(title="Reference Catalog", border_style="cyan")
    table.add_column("Building", style="bold")
    table.add_column("Departments", style="cyan")

    for building in loaded.buildings:
        departments = loaded.departments_for(building)
        table.add_row(building, ", ".join(departments) if departments else "[dim]any[/dim]")

    console.print()
    console.print(table)
    console.print(
        f"\n{len(loaded.buildings)} buildings, {len(loaded.departments)} departments "
        "(including catch-all entries)"
    )


# ------------------------------------------------------------------
# enrollment-helper preview
# ------------------------------------------------------------------


@app.command()
def preview(
    first_name: str = typer.Option(..., "--first-name", help="Operator's first name"),
    last_name: str = typer.Option(..., "--last-name", help="Operator's last name"),
    department: str = typer.Option(..., "--department", help="Department from the catalog"),
    building: str = typer.Option(..., "--building", help="Building from the catalog"),
    catalog_path: Path = typer.Option(None, "--catalog", help=_CATALOG_HELP),
    config_path: Path = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print the command the wizard would run, without running it."""
    _setup_logging()
    from enrollment_helper.wizard.command import (
        build_command_line,
        derive_department_group,
        tag_building,
    )

    config, loaded = _load(config_path, catalog_path)

    first_name, last_name = first_name.strip(), last_name.strip()
    if not first_name or not last_name:
        console.print("[red]First and last name are both required.[/red]")
        raise typer.Exit(2)
    if not loaded.has_department(department):
        console.print(f"[red]Unknown department:[/red] {escape(department)}")
        raise typer.Exit(2)
    if not loaded.has_building(building):
        console.print(f"[red]Unknown building:[/red] {escape(building)}")
        raise typer.Exit(2)

    command_line = build_command_line(
        real_name=f"{first_name} {last_name}",
        building=tag_building(building, tags=config.tags),
        department_group=derive_department_group(
            department,
            other_department=loaded.other_department,
            tags=config.tags,
        ),
        command=config.command,
    )
    typer.echo(command_line)


# ------------------------------------------------------------------
# enrollment-helper version
# ------------------------------------------------------------------


@app.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"enrollment-helper {enrollment_helper.__version__}")
