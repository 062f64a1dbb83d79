"""Name step: collect the operator's first and last name."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt

from enrollment_helper.wizard.state import EnrollmentRecord
from enrollment_helper.wizard.steps import BACK, NEXT


def run_name(console: Console, record: EnrollmentRecord) -> dict[str, str]:
    """Prompt for first and last name.

    Values already in *record* are offered as defaults, so returning to
    this page after navigating back loses nothing.

    Args:
        console: Rich Console instance for terminal output.
        record: Current enrollment record.

    Returns:
        Dictionary with keys ``first_name``, ``last_name`` and ``action``
        (``"next"`` or ``"back"``).
    """
    console.print()
    console.print("[bold cyan]Your Name[/bold cyan]")
    console.print()

    first_name = _ask("[bold]First name[/bold]", record.first_name, console)
    last_name = _ask("[bold]Last name[/bold]", record.last_name, console)

    action = Prompt.ask(
        "[bold]Next or back?[/bold]",
        console=console,
        choices=[NEXT, BACK],
        default=NEXT,
    )
    return {"first_name": first_name, "last_name": last_name, "action": action}


def _ask(label: str, current: str, console: Console) -> str:
    if current:
        return Prompt.ask(label, console=console, default=current)
    return Prompt.ask(label, console=console)
