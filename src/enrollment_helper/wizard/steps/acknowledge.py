"""Acknowledge step: explain why enrollment is mandatory."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.text import Text

from enrollment_helper.config.schema import UiSection


def run_acknowledge(console: Console, ui: UiSection) -> bool:
    """Display the title and the mandatory-enrollment notice.

    Args:
        console: Rich Console instance for terminal output.
        ui: Operator-facing text.

    Returns:
        True if the operator confirms, False if they decline.
    """
    console.print()

    header = Text(justify="center")
    header.append_text(Text(ui.title, style="bold red"))
    header.append("\n\n")
    header.append_text(Text(ui.acknowledge_message, style="bold"))

    console.print(Panel(header, border_style="red", padding=(1, 4)))
    console.print()

    return Confirm.ask("[bold]Continue?[/bold]", console=console, default=True)
