"""Enrollment wizard state machine.

The wizard owns the collected :class:`EnrollmentRecord` and the current
:class:`WizardState`.  Every mutation goes through one of its methods, and
each stage's gate is checked here rather than in the presentation layer,
so a page that forgets to disable its "Next" action still cannot skip a
stage.  Views learn about transitions through :meth:`EnrollmentWizard.subscribe`.

Stage order::

    ACKNOWLEDGE -> NAME_INPUT -> DEPARTMENT_BUILDING_INPUT -> CONFIRM
        -> SUBMITTING -> DONE
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import SecretStr

from enrollment_helper.catalog import Catalog
from enrollment_helper.config.schema import EnrollmentConfig
from enrollment_helper.errors import WizardStateError
from enrollment_helper.executor import CommandResult
from enrollment_helper.wizard.command import (
    build_command_line,
    derive_department_group,
    tag_building,
)

logger = logging.getLogger(__name__)


class WizardState(enum.Enum):
    ACKNOWLEDGE = "acknowledge"
    NAME_INPUT = "name_input"
    DEPARTMENT_BUILDING_INPUT = "department_building_input"
    CONFIRM = "confirm"
    SUBMITTING = "submitting"
    DONE = "done"


_FORWARD: dict[WizardState, WizardState] = {
    WizardState.ACKNOWLEDGE: WizardState.NAME_INPUT,
    WizardState.NAME_INPUT: WizardState.DEPARTMENT_BUILDING_INPUT,
    WizardState.DEPARTMENT_BUILDING_INPUT: WizardState.CONFIRM,
}

_BACKWARD: dict[WizardState, WizardState] = {
    WizardState.NAME_INPUT: WizardState.ACKNOWLEDGE,
    WizardState.DEPARTMENT_BUILDING_INPUT: WizardState.NAME_INPUT,
    WizardState.CONFIRM: WizardState.DEPARTMENT_BUILDING_INPUT,
}

StateListener = Callable[[WizardState, WizardState], None]


@dataclass(frozen=True)
class EnrollmentRecord:
    """Operator identity and placement collected by the wizard."""

    first_name: str = ""
    last_name: str = ""
    department: str = ""
    building: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def has_name(self) -> bool:
        return bool(self.first_name and self.last_name)

    def has_placement(self) -> bool:
        return bool(self.department and self.building)

    def is_complete(self) -> bool:
        return self.has_name() and self.has_placement()


@dataclass(frozen=True)
class Submission:
    """Everything the executor needs for the single privileged run."""

    record: EnrollmentRecord
    department_group: str
    building_tag: str
    command_line: str
    credential: SecretStr


class EnrollmentWizard:
    """Linear, gated state machine for one enrollment run.

    Must be driven from a single thread: the thread that constructs the
    wizard is the only one allowed to complete it.

    Args:
        config: Tagging and command settings.  Defaults apply when omitted.
        catalog: When given, department and building must be picklist
            entries to pass the placement gate.
    """

    def __init__(
        self,
        config: EnrollmentConfig | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self._config = config or EnrollmentConfig()
        self._catalog = catalog
        self._state = WizardState.ACKNOWLEDGE
        self._record = EnrollmentRecord()
        self._credential: SecretStr | None = None
        self._result: CommandResult | None = None
        self._listeners: list[StateListener] = []
        self._owner_thread = threading.get_ident()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def record(self) -> EnrollmentRecord:
        return self._record

    @property
    def result(self) -> CommandResult | None:
        return self._result

    @property
    def has_credential(self) -> bool:
        return self._credential is not None

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* to be called with ``(old, new)`` after each transition.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Field mutation
    # ------------------------------------------------------------------

    def set_name(self, first_name: str, last_name: str) -> None:
        """Record the operator's name.  Only valid during NAME_INPUT."""
        self._require(WizardState.NAME_INPUT, "set_name")
        self._record = dataclasses.replace(
            self._record,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
        )

    def set_placement(self, department: str, building: str) -> None:
        """Record department and building.  Only valid during DEPARTMENT_BUILDING_INPUT."""
        self._require(WizardState.DEPARTMENT_BUILDING_INPUT, "set_placement")
        self._record = dataclasses.replace(
            self._record,
            department=department.strip(),
            building=building.strip(),
        )

    def set_credential(self, secret: str) -> None:
        """Hold the administrator credential until submission.  Only valid during CONFIRM."""
        self._require(WizardState.CONFIRM, "set_credential")
        self._credential = SecretStr(secret) if secret else None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def can_advance(self) -> bool:
        """Return whether the current stage's gate is satisfied."""
        state = self._state
        if state is WizardState.ACKNOWLEDGE:
            return True
        if state is WizardState.NAME_INPUT:
            return self._record.has_name()
        if state is WizardState.DEPARTMENT_BUILDING_INPUT:
            return self._placement_selectable()
        if state is WizardState.CONFIRM:
            return self._record.is_complete() and self._credential is not None
        return False

    def advance(self) -> bool:
        """Move to the next input stage if the current gate allows it.

        Covers ACKNOWLEDGE, NAME_INPUT and DEPARTMENT_BUILDING_INPUT.  The
        CONFIRM stage advances through :meth:`begin_submit`, and SUBMITTING
        through :meth:`complete`.

        Returns:
            True if the state changed, False if the attempt was rejected.
        """
        target = _FORWARD.get(self._state)
        if target is None:
            logger.debug("advance() rejected: %s has no input-stage successor", self._state.value)
            return False
        if not self.can_advance():
            logger.debug("advance() rejected: %s gate not satisfied", self._state.value)
            return False
        self._transition(target)
        return True

    def back(self) -> bool:
        """Return to the previous input stage, keeping every entered value.

        Returns:
            True if the state changed, False if there is no previous stage.
        """
        target = _BACKWARD.get(self._state)
        if target is None:
            logger.debug("back() rejected in %s", self._state.value)
            return False
        if self._state is WizardState.CONFIRM:
            self._credential = None
        self._transition(target)
        return True

    def begin_submit(self) -> Submission | None:
        """Leave CONFIRM for SUBMITTING and hand over everything needed to run.

        The department group and building tag are derived here, once.  The
        wizard drops its reference to the credential: the returned
        :class:`Submission` is the only holder from this point on.

        Returns:
            The submission, or ``None`` if not in CONFIRM or the gate fails.
        """
        credential = self._credential
        if self._state is not WizardState.CONFIRM or credential is None or not self.can_advance():
            logger.debug("begin_submit() rejected in %s", self._state.value)
            return None

        record = self._record
        tags = self._config.tags
        department_group = derive_department_group(
            record.department,
            other_department=self._other_department(),
            tags=tags,
        )
        building_tag = tag_building(record.building, tags=tags)
        command_line = build_command_line(
            real_name=record.full_name,
            building=building_tag,
            department_group=department_group,
            command=self._config.command,
        )

        self._credential = None
        self._transition(WizardState.SUBMITTING)
        return Submission(
            record=record,
            department_group=department_group,
            building_tag=building_tag,
            command_line=command_line,
            credential=credential,
        )

    def complete(self, result: CommandResult) -> None:
        """Record the executor's result and finish.

        Raises:
            WizardStateError: Not in SUBMITTING, or called from a thread
                other than the one that created the wizard.
        """
        self._require(WizardState.SUBMITTING, "complete")
        if threading.get_ident() != self._owner_thread:
            raise WizardStateError(
                "complete() must be called on the thread that owns the wizard",
                state=self._state.value,
            )
        self._result = result
        self._transition(WizardState.DONE)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require(self, state: WizardState, operation: str) -> None:
        if self._state is not state:
            raise WizardStateError(
                f"{operation}() is only valid in {state.value}, not {self._state.value}",
                state=self._state.value,
            )

    def _placement_selectable(self) -> bool:
        record = self._record
        if not record.has_placement():
            return False
        if self._catalog is None:
            return True
        return self._catalog.has_department(record.department) and self._catalog.has_building(
            record.building
        )

    def _other_department(self) -> str:
        if self._catalog is not None:
            return self._catalog.other_department
        return self._config.catalog.other_department

    def _transition(self, new_state: WizardState) -> None:
        old_state = self._state
        self._state = new_state
        logger.debug("Wizard %s -> %s", old_state.value, new_state.value)
        for listener in list(self._listeners):
            try:
                listener(old_state, new_state)
            except Exception:  # noqa: BLE001
                logger.exception("Wizard state listener failed")
