"""Default configuration values for Enrollment Helper."""

from __future__ import annotations

DEFAULT_CONFIG: dict[str, dict[str, object]] = {
    "command": {
        "executable": "/usr/local/bin/jamf",
        "subcommand": "recon",
        "shell": "/bin/zsh",
        "escalation": ["sudo", "-S", "-k", "-p", ""],
    },
    "tags": {
        "building_prefix": "NCSU-",
        "department_prefix": "COS-",
        "other_department_group": "COS-Other",
        "department_overrides": {"Dean's Office": "DEANS-OFFICE"},
    },
    "catalog": {
        "path": None,
        "other_building": "Other",
        "other_department": "Other COS Department",
    },
    "ui": {
        "title": "College of Sciences",
        "acknowledge_message": (
            "This process is a mandatory step for the computer to function correctly."
        ),
        "submitting_message": (
            "Submitting info, please wait. Approve any pop-up notifications "
            'associated with "jamf" or "terminal".'
        ),
    },
}
