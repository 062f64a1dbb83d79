"""Terminal enrollment wizard: drives the state machine through its pages."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from enrollment_helper.catalog import Catalog
from enrollment_helper.config.schema import EnrollmentConfig
from enrollment_helper.errors import WizardStateError
from enrollment_helper.executor import LAUNCH_FAILURE_EXIT_CODE, CommandResult, CommandRunner
from enrollment_helper.wizard.command import derive_department_group, tag_building
from enrollment_helper.wizard.state import EnrollmentWizard, Submission, WizardState
from enrollment_helper.wizard.steps import BACK
from enrollment_helper.wizard.steps.acknowledge import run_acknowledge
from enrollment_helper.wizard.steps.confirm import run_confirm
from enrollment_helper.wizard.steps.name import run_name
from enrollment_helper.wizard.steps.placement import run_placement
from enrollment_helper.wizard.steps.result import run_result, show_submitting

logger = logging.getLogger(__name__)

_STEP_TITLES: dict[WizardState, tuple[int, str]] = {
    WizardState.ACKNOWLEDGE: (1, "Welcome"),
    WizardState.NAME_INPUT: (2, "Name"),
    WizardState.DEPARTMENT_BUILDING_INPUT: (3, "Department and Building"),
    WizardState.CONFIRM: (4, "Confirm"),
    WizardState.SUBMITTING: (5, "Submitting"),
}
_TOTAL_STEPS = len(_STEP_TITLES)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


class EnrollmentRunner:
    """Interactive terminal front end for :class:`EnrollmentWizard`.

    Every page runs on the calling thread.  The privileged command runs on
    a single worker thread while a spinner is shown; its result is
    collected back on the calling thread, which is the only thread that
    completes the wizard.  SIGINT is ignored while the command runs, so
    an enrollment that has started always reaches the result page.

    Args:
        config: Loaded configuration.
        catalog: Department and building picklists.
        executor: Runs the privileged command.
        console: Console to draw on.  A new one is created when omitted.
        verbose: Show the command's output on failure.
    """

    def __init__(
        self,
        config: EnrollmentConfig,
        catalog: Catalog,
        executor: CommandRunner,
        *,
        console: Console | None = None,
        verbose: bool = False,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._executor = executor
        self._console = console or Console()
        self._verbose = verbose
        self.wizard = EnrollmentWizard(config=config, catalog=catalog)

    def run(self) -> int:
        """Run the wizard to completion.

        Returns:
            Process exit code: 0 on success or when the operator declines
            at the first page, 1 when the privileged command fails, 130 if
            interrupted before submission.  Ctrl-C is ignored
            from submission until the command has finished.
        """
        wizard = self.wizard
        unsubscribe = wizard.subscribe(self._on_transition)
        self._step_header(wizard.state)

        try:
            while wizard.state not in (WizardState.SUBMITTING, WizardState.DONE):
                if not self._run_page():
                    self._console.print("[dim]Enrollment cancelled.[/dim]")
                    return EXIT_OK
        except KeyboardInterrupt:
            self._console.print()
            self._console.print("[dim]Enrollment interrupted.[/dim]")
            return EXIT_INTERRUPTED
        finally:
            unsubscribe()

        result = wizard.result
        if result is None:
            raise WizardStateError("Wizard stopped without a result", state=wizard.state.value)
        run_result(self._console, result, verbose=self._verbose)
        return EXIT_OK if result.succeeded else EXIT_FAILED

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def _run_page(self) -> bool:
        """Show the page for the current state and apply the answer.

        Returns:
            False if the operator declined to continue, True otherwise.
        """
        wizard = self.wizard
        console = self._console
        state = wizard.state

        if state is WizardState.ACKNOWLEDGE:
            if not run_acknowledge(console, self._config.ui):
                return False
            wizard.advance()

        elif state is WizardState.NAME_INPUT:
            answer = run_name(console, wizard.record)
            wizard.set_name(answer["first_name"], answer["last_name"])
            if answer["action"] == BACK:
                wizard.back()
            elif not wizard.advance():
                console.print("  [red]First and last name are both required.[/red]")

        elif state is WizardState.DEPARTMENT_BUILDING_INPUT:
            answer = run_placement(console, self._catalog, wizard.record)
            wizard.set_placement(answer["department"], answer["building"])
            if answer["action"] == BACK:
                wizard.back()
            elif not wizard.advance():
                console.print("  [red]Select both a department and a building.[/red]")

        elif state is WizardState.CONFIRM:
            record = wizard.record
            answer = run_confirm(
                console,
                record,
                building_tag=tag_building(record.building, tags=self._config.tags),
                department_group=derive_department_group(
                    record.department,
                    other_department=self._catalog.other_department,
                    tags=self._config.tags,
                ),
            )
            if answer["action"] == BACK:
                wizard.back()
                return True
            wizard.set_credential(answer["credential"])
            if not wizard.has_credential:
                console.print("  [red]The administrator password is required.[/red]")
                return True
            with _sigint_ignored():
                submission = wizard.begin_submit()
                if submission is not None:
                    self._submit(submission)

        return True

    def _submit(self, submission: Submission) -> None:
        """Run the privileged command off the calling thread, then complete the wizard."""
        show_submitting(self._console, self._config.ui)
        command_line = submission.command_line
        secret = submission.credential.get_secret_value()
        del submission

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="enrollment") as pool:
            future = pool.submit(self._execute, command_line, secret)
            del secret
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self._console,
                transient=True,
            ) as progress:
                progress.add_task("Updating computer record...", total=None)
                result = future.result()

        self.wizard.complete(result)

    def _execute(self, command_line: str, secret: str) -> CommandResult:
        try:
            return self._executor.run(command_line, secret)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Privileged command runner failed")
            return CommandResult(
                output=f"Failed to launch process: {exc}",
                exit_code=LAUNCH_FAILURE_EXIT_CODE,
                launched=False,
            )

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def _on_transition(self, old: WizardState, new: WizardState) -> None:
        self._step_header(new)

    def _step_header(self, state: WizardState) -> None:
        """Print a step header with progress indicator."""
        if state not in _STEP_TITLES:
            return
        step_num, name = _STEP_TITLES[state]
        self._console.print()
        self._console.rule(f"[bold cyan]Step {step_num}/{_TOTAL_STEPS} \u2014 {name}[/bold cyan]")


@contextmanager
def _sigint_ignored() -> Iterator[None]:
    """Ignore SIGINT for the duration of the block.

    Signal handlers can only be changed from the main thread; elsewhere
    this is a no-op, and KeyboardInterrupt is never raised off the main
    thread anyway.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)
