"""Allow ``python -m enrollment_helper``."""

from enrollment_helper.cli import app

app()
