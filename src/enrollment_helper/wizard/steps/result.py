"""Submitting and result pages."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from enrollment_helper.config.schema import UiSection
from enrollment_helper.executor import CommandResult


def show_submitting(console: Console, ui: UiSection) -> None:
    """Tell the operator the privileged command is running."""
    console.print()
    console.print(Panel(ui.submitting_message, border_style="blue", padding=(1, 2)))


def run_result(console: Console, result: CommandResult, *, verbose: bool = False) -> None:
    """Show the outcome and wait for the operator to close.

    A launch failure is shown verbatim.  For a command that ran and failed,
    only a generic message is shown unless *verbose* is set.

    Args:
        console: Rich Console instance for terminal output.
        result: Outcome of the privileged command.
        verbose: Also show the command's output.
    """
    console.print()
    if result.succeeded:
        console.print(
            Panel(
                "This computer has been updated. You may close this window.",
                title="[bold green]Enrollment Complete[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )
    elif not result.launched:
        console.print(
            Panel(
                result.output,
                title="[bold red]Enrollment Failed[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )
    else:
        console.print(
            Panel(
                "The computer could not be updated. Run Enrollment Helper again, "
                "or contact IT support if the problem persists.",
                title="[bold red]Enrollment Failed[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

    if verbose and result.output and result.launched:
        console.print()
        console.print(f"[dim]Exit status {result.exit_code}[/dim]")
        console.print(result.output, markup=False, highlight=False)

    console.print()
    Prompt.ask("[dim]Press Enter to close[/dim]", console=console, default="", show_default=False)
