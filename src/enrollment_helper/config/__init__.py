"""Enrollment Helper configuration system."""

from enrollment_helper.config.manager import ConfigManager
from enrollment_helper.config.schema import EnrollmentConfig

__all__ = ["ConfigManager", "EnrollmentConfig"]
