"""Enrollment Helper error hierarchy."""

from __future__ import annotations


class EnrollmentError(Exception):
    """Base error for all Enrollment Helper exceptions."""

    code = "ENROLLMENT_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class CatalogLoadError(EnrollmentError):
    """Reference table could not be read or decoded."""

    code = "CATALOG_LOAD"

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message, {"source": source})
        self.source = source


class ConfigError(EnrollmentError):
    """Config file is unreadable or fails validation."""

    code = "CONFIG"

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, {"path": path})
        self.path = path


class WizardStateError(EnrollmentError):
    """Wizard operation invoked in a state (or thread) that does not allow it."""

    code = "WIZARD_STATE"

    def __init__(self, message: str, state: str | None = None):
        super().__init__(message, {"state": state})
        self.state = state
