"""Enrollment wizard: state machine, command formatting, and terminal pages."""

from enrollment_helper.wizard.state import (
    EnrollmentRecord,
    EnrollmentWizard,
    Submission,
    WizardState,
)

__all__ = ["EnrollmentRecord", "EnrollmentWizard", "Submission", "WizardState"]
