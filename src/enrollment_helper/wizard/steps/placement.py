"""Department and building step: pick both from the reference catalog."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from enrollment_helper.catalog import Catalog
from enrollment_helper.wizard.state import EnrollmentRecord
from enrollment_helper.wizard.steps import BACK, NEXT


def run_placement(console: Console, catalog: Catalog, record: EnrollmentRecord) -> dict[str, str]:
    """Prompt for a department and a building from numbered picklists.

    The previous selection, if any, is the default choice.

    Args:
        console: Rich Console instance for terminal output.
        catalog: Picklists to choose from.
        record: Current enrollment record.

    Returns:
        Dictionary with keys ``department``, ``building`` and ``action``.
    """
    console.print()
    console.print("[bold cyan]Department and Building[/bold cyan]")

    department = _pick(console, "Department", catalog.departments, record.department)
    building = _pick(console, "Building", catalog.buildings, record.building)

    action = Prompt.ask(
        "[bold]Next or back?[/bold]",
        console=console,
        choices=[NEXT, BACK],
        default=NEXT,
    )
    return {"department": department, "building": building, "action": action}


def _pick(console: Console, label: str, options: list[str], current: str) -> str:
    """Show *options* as a numbered table and return the chosen entry."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("#", style="bold", justify="right")
    table.add_column(label, style="cyan")
    for index, option in enumerate(options, start=1):
        table.add_row(str(index), option)

    console.print()
    console.print(table)
    console.print()

    choices = [str(i) for i in range(1, len(options) + 1)]
    if current in options:
        choice = IntPrompt.ask(
            f"[bold]Select your {label.lower()}[/bold]",
            console=console,
            choices=choices,
            default=options.index(current) + 1,
            show_choices=False,
        )
    else:
        choice = IntPrompt.ask(
            f"[bold]Select your {label.lower()}[/bold]",
            console=console,
            choices=choices,
            show_choices=False,
        )
    selected = options[choice - 1]
    console.print(f"  {label}: [cyan]{selected}[/cyan]")
    return selected
