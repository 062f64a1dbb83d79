"""Formatting of the privileged ``jamf recon`` command line."""

from __future__ import annotations

import re
import shlex
from collections.abc import Mapping

from enrollment_helper.config.schema import CommandSection, TagsSection

_WHITESPACE = re.compile(r"\s+")


def derive_department_group(
    department: str,
    *,
    other_department: str = "Other COS Department",
    tags: TagsSection | None = None,
) -> str:
    """Derive the department group token sent to Jamf.

    The catch-all department maps to a fixed group.  Otherwise the name
    is upper-cased with whitespace runs collapsed to hyphens, unless it has
    a canonical override (``Dean's Office`` becomes ``DEANS-OFFICE``), and
    the result is prefixed with the college tag.

    Examples:
        >>> derive_department_group("Bioinformatics")
        'COS-BIOINFORMATICS'
        >>> derive_department_group("Dean's Office")
        'COS-DEANS-OFFICE'
        >>> derive_department_group("Other COS Department")
        'COS-Other'
    """
    tags = tags or TagsSection()
    if department == other_department:
        return tags.other_department_group

    overrides: Mapping[str, str] = tags.department_overrides
    if department in overrides:
        token = overrides[department]
    else:
        token = _WHITESPACE.sub("-", department.strip()).upper()
    return f"{tags.department_prefix}{token}"


def tag_building(building: str, *, tags: TagsSection | None = None) -> str:
    """Prefix *building* with the institutional tag."""
    tags = tags or TagsSection()
    return f"{tags.building_prefix}{building}"


def build_command_line(
    *,
    real_name: str,
    building: str,
    department_group: str,
    command: CommandSection | None = None,
) -> str:
    """Build the shell-quoted recon command line.

    *building* and *department_group* are passed through as given; tag
    them first with :func:`tag_building` and :func:`derive_department_group`.
    """
    command = command or CommandSection()
    argv = [
        command.executable,
        command.subcommand,
        "--realname",
        real_name,
        "--building",
        building,
        "--department",
        department_group,
    ]
    return " ".join(shlex.quote(arg) for arg in argv)
