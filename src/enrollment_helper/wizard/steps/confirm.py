"""Confirm step: review the collected details and enter the admin password."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from enrollment_helper.wizard.state import EnrollmentRecord
from enrollment_helper.wizard.steps import BACK

SUBMIT = "submit"


def run_confirm(
    console: Console,
    record: EnrollmentRecord,
    *,
    building_tag: str,
    department_group: str,
) -> dict[str, str]:
    """Show a summary of what will be sent and ask for the credential.

    The password prompt does not echo.  Choosing ``back`` skips the
    password prompt entirely.

    Args:
        console: Rich Console instance for terminal output.
        record: Completed enrollment record.
        building_tag: Building as it will be sent.
        department_group: Department group as it will be sent.

    Returns:
        Dictionary with keys ``action`` and ``credential`` (empty when
        going back).
    """
    table = Table(show_header=False, border_style="cyan", padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value", style="cyan")
    table.add_row("Name", record.full_name)
    table.add_row("Department", f"{record.department}  [dim]({department_group})[/dim]")
    table.add_row("Building", f"{record.building}  [dim]({building_tag})[/dim]")

    console.print()
    console.print(Panel(table, title="[bold]Review[/bold]", border_style="cyan", padding=(1, 2)))
    console.print()

    action = Prompt.ask(
        "[bold]Submit or go back?[/bold]",
        console=console,
        choices=[SUBMIT, BACK],
        default=SUBMIT,
    )
    if action == BACK:
        return {"action": BACK, "credential": ""}

    console.print("  [dim]An administrator password is required to update this computer.[/dim]")
    credential = Prompt.ask("[bold]Administrator password[/bold]", console=console, password=True)
    return {"action": SUBMIT, "credential": credential}
