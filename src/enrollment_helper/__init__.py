"""Enrollment Helper: on-boarding wizard that tags this machine via ``jamf recon``."""

__version__ = "0.1.0"
