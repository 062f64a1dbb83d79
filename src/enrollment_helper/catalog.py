"""Reference catalog: the building and department picklists.

The reference table is line-oriented UTF-8 text::

    Building Name:Department One,Department Two,...

Only lines containing a colon are considered.  The literal department
token ``Other`` is a formatting artifact of the table and is dropped; the
real catch-all entries are appended after sorting so that they are always
the last choice in their picklist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from enrollment_helper.errors import CatalogLoadError

logger = logging.getLogger(__name__)

_DATA_FILE = Path(__file__).resolve().parent / "data" / "buildings_departments.txt"

OTHER_BUILDING = "Other"
OTHER_DEPARTMENT = "Other COS Department"

# Department token in the table that is not a real department.
_PLACEHOLDER_DEPARTMENT = "Other"


def _sort_key(name: str) -> tuple[str, str]:
    # Case-insensitive, with an exact tiebreak so case variants keep a stable order.
    return (name.lower(), name)


@dataclass(frozen=True)
class CatalogEntry:
    """One building and the departments housed in it."""

    building: str
    departments: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Catalog:
    """Sorted, deduplicated picklists, each ending with its catch-all entry."""

    buildings: list[str] = field(default_factory=lambda: [OTHER_BUILDING])
    departments: list[str] = field(default_factory=lambda: [OTHER_DEPARTMENT])
    entries: list[CatalogEntry] = field(default_factory=list)

    @property
    def other_building(self) -> str:
        return self.buildings[-1]

    @property
    def other_department(self) -> str:
        return self.departments[-1]

    def departments_for(self, building: str) -> list[str]:
        """Return the departments listed for *building*, sorted case-insensitively.

        Buildings absent from the table (including the catch-all) have no
        listed departments.
        """
        found: set[str] = set()
        for entry in self.entries:
            if entry.building == building:
                found.update(entry.departments)
        return sorted(found, key=_sort_key)

    def has_building(self, building: str) -> bool:
        return building in self.buildings

    def has_department(self, department: str) -> bool:
        return department in self.departments


def parse_catalog(
    text: str,
    *,
    other_building: str = OTHER_BUILDING,
    other_department: str = OTHER_DEPARTMENT,
) -> Catalog:
    """Parse reference table text into a :class:`Catalog`.

    Args:
        text: Contents of the reference table.
        other_building: Catch-all building appended last.
        other_department: Catch-all department appended last.

    Returns:
        The parsed catalog.
    """
    building_set: set[str] = set()
    department_set: set[str] = set()
    entries: list[CatalogEntry] = []

    for line in text.splitlines():
        if ":" not in line or line.lstrip().startswith("#"):
            continue

        building, _, department_text = line.partition(":")
        building = building.strip()

        departments = {
            name
            for name in (item.strip() for item in department_text.split(","))
            if name and name != _PLACEHOLDER_DEPARTMENT
        }
        department_set.update(departments)

        if not building:
            continue
        building_set.add(building)
        entries.append(CatalogEntry(building=building, departments=frozenset(departments)))

    # The catch-alls are appended after sorting, so drop any real row that
    # shadows them to keep both lists free of duplicates.
    building_set.discard(other_building)
    department_set.discard(other_department)

    buildings = sorted(building_set, key=_sort_key)
    buildings.append(other_building)
    departments = sorted(department_set, key=_sort_key)
    departments.append(other_department)

    return Catalog(buildings=buildings, departments=departments, entries=entries)


def load_catalog(
    source: Path | str | None = None,
    *,
    other_building: str = OTHER_BUILDING,
    other_department: str = OTHER_DEPARTMENT,
) -> Catalog:
    """Load the reference table, falling back to catch-all-only picklists.

    A missing or unreadable table is not fatal: the operator can still pick
    the catch-all building and department.

    Args:
        source: Path to the reference table, or ``None`` for the table
            shipped with the package.
        other_building: Catch-all building appended last.
        other_department: Catch-all department appended last.

    Returns:
        The loaded catalog, or an empty one containing only the catch-alls.
    """
    path = Path(source).expanduser() if source is not None else _DATA_FILE
    try:
        text = _read_table(path)
    except CatalogLoadError as exc:
        logger.warning("%s; continuing with catch-all entries only", exc)
        return parse_catalog(
            "", other_building=other_building, other_department=other_department
        )

    catalog = parse_catalog(
        text, other_building=other_building, other_department=other_department
    )
    logger.debug(
        "Loaded %d buildings and %d departments from %s",
        len(catalog.buildings) - 1,
        len(catalog.departments) - 1,
        path,
    )
    return catalog


def _read_table(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Could not load reference table {path}: {exc}", str(path)) from exc
