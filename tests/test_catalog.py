"""Tests for the reference catalog loader."""

from __future__ import annotations

import logging
from pathlib import Path

from enrollment_helper.catalog import (
    OTHER_BUILDING,
    OTHER_DEPARTMENT,
    Catalog,
    CatalogEntry,
    load_catalog,
    parse_catalog,
)

_TABLE = """\
Jordan Hall:MEAS,Dean's Office
SAS Hall:mathematics,Statistics,MEAS,Other
Cox Hall:Physics, Mathematics ,Other
  :Chemistry
No separator on this line
Withers Hall:Chemistry:Annex
Polk Hall:Biology,,  ,Statistics
"""


# ------------------------------------------------------------------
# parse_catalog: departments
# ------------------------------------------------------------------


class TestParseDepartments:
    """Department list is deduplicated, sorted, and ends with the catch-all."""

    def test_each_department_once(self) -> None:
        departments = parse_catalog(_TABLE).departments
        assert departments.count("MEAS") == 1
        assert departments.count("Statistics") == 1
        assert len(departments) == len(set(departments))

    def test_dedup_is_case_sensitive(self) -> None:
        departments = parse_catalog(_TABLE).departments
        assert "mathematics" in departments
        assert "Mathematics" in departments

    def test_sorted_case_insensitively(self) -> None:
        real = parse_catalog(_TABLE).departments[:-1]
        keys = [name.lower() for name in real]
        assert keys == sorted(keys)

    def test_catch_all_last(self) -> None:
        assert parse_catalog(_TABLE).departments[-1] == OTHER_DEPARTMENT

    def test_other_token_dropped(self) -> None:
        assert "Other" not in parse_catalog(_TABLE).departments

    def test_items_trimmed_and_blanks_dropped(self) -> None:
        departments = parse_catalog(_TABLE).departments
        assert "Physics" in departments
        assert "" not in departments
        assert all(name == name.strip() for name in departments)

    def test_only_first_colon_splits(self) -> None:
        assert "Chemistry:Annex" in parse_catalog(_TABLE).departments

    def test_departments_kept_when_building_blank(self) -> None:
        assert "Chemistry" in parse_catalog(_TABLE).departments


# ------------------------------------------------------------------
# parse_catalog: buildings
# ------------------------------------------------------------------


class TestParseBuildings:
    """Building list skips blanks and non-matching lines, ends with the catch-all."""

    def test_buildings_sorted_with_catch_all(self) -> None:
        assert parse_catalog(_TABLE).buildings == [
            "Cox Hall",
            "Jordan Hall",
            "Polk Hall",
            "SAS Hall",
            "Withers Hall",
            OTHER_BUILDING,
        ]

    def test_line_without_colon_ignored(self) -> None:
        buildings = parse_catalog(_TABLE).buildings
        assert not any("separator" in b for b in buildings)

    def test_mixed_case_sort(self) -> None:
        catalog = parse_catalog("beta:X\nAlpha:Y\ngamma:Z\n")
        assert catalog.buildings == ["Alpha", "beta", "gamma", OTHER_BUILDING]

    def test_case_variants_in_stable_order(self) -> None:
        catalog = parse_catalog("A:mathematics,Mathematics,MATHEMATICS\na:x\n")
        assert catalog.departments == [
            "MATHEMATICS",
            "Mathematics",
            "mathematics",
            "x",
            OTHER_DEPARTMENT,
        ]
        assert catalog.buildings == ["A", "a", OTHER_BUILDING]
        assert catalog.departments_for("A") == ["MATHEMATICS", "Mathematics", "mathematics"]

    def test_comment_lines_ignored(self) -> None:
        catalog = parse_catalog("# note: not a building\nCox Hall:Physics\n")
        assert catalog.buildings == ["Cox Hall", OTHER_BUILDING]

    def test_row_named_like_catch_all_not_duplicated(self) -> None:
        catalog = parse_catalog("Other:Biology\nCox Hall:Other COS Department\n")
        assert catalog.buildings.count(OTHER_BUILDING) == 1
        assert catalog.buildings[-1] == OTHER_BUILDING
        assert catalog.departments.count(OTHER_DEPARTMENT) == 1
        assert catalog.departments[-1] == OTHER_DEPARTMENT

    def test_custom_catch_all_labels(self) -> None:
        catalog = parse_catalog(
            "Cox Hall:Physics\n", other_building="Elsewhere", other_department="Unlisted"
        )
        assert catalog.buildings[-1] == "Elsewhere"
        assert catalog.departments[-1] == "Unlisted"
        assert catalog.other_building == "Elsewhere"
        assert catalog.other_department == "Unlisted"


# ------------------------------------------------------------------
# Catalog helpers
# ------------------------------------------------------------------


class TestCatalogLookups:
    """departments_for / has_* lookups."""

    def test_departments_for_building(self) -> None:
        catalog = parse_catalog(_TABLE)
        assert catalog.departments_for("SAS Hall") == ["mathematics", "MEAS", "Statistics"]

    def test_departments_for_unknown_building(self) -> None:
        assert parse_catalog(_TABLE).departments_for(OTHER_BUILDING) == []

    def test_membership(self) -> None:
        catalog = parse_catalog(_TABLE)
        assert catalog.has_building("Cox Hall")
        assert catalog.has_building(OTHER_BUILDING)
        assert not catalog.has_building("Nowhere Hall")
        assert catalog.has_department(OTHER_DEPARTMENT)
        assert not catalog.has_department("Other")

    def test_entries_recorded(self) -> None:
        entries = parse_catalog("Cox Hall:Physics,Other\n").entries
        assert entries == [CatalogEntry(building="Cox Hall", departments=frozenset({"Physics"}))]

    def test_default_catalog_has_only_catch_alls(self) -> None:
        catalog = Catalog()
        assert catalog.buildings == [OTHER_BUILDING]
        assert catalog.departments == [OTHER_DEPARTMENT]


# ------------------------------------------------------------------
# load_catalog
# ------------------------------------------------------------------


class TestLoadCatalog:
    """Loading from disk, packaged data, and fallback on failure."""

    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "table.txt"
        path.write_text(_TABLE, encoding="utf-8")
        assert load_catalog(path) == parse_catalog(_TABLE)

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        path = tmp_path / "table.txt"
        path.write_text("Cox Hall:Physics\n", encoding="utf-8")
        assert load_catalog(str(path)).buildings == ["Cox Hall", OTHER_BUILDING]

    def test_packaged_table(self) -> None:
        catalog = load_catalog()
        assert "SAS Hall" in catalog.buildings
        assert "Dean's Office" in catalog.departments
        assert catalog.buildings[-1] == OTHER_BUILDING
        assert catalog.departments[-1] == OTHER_DEPARTMENT
        assert "Other" not in catalog.departments

    def test_missing_file_falls_back(self, tmp_path: Path) -> None:
        catalog = load_catalog(tmp_path / "missing.txt")
        assert catalog.buildings == [OTHER_BUILDING]
        assert catalog.departments == [OTHER_DEPARTMENT]

    def test_directory_falls_back(self, tmp_path: Path) -> None:
        catalog = load_catalog(tmp_path)
        assert catalog.buildings == [OTHER_BUILDING]
        assert catalog.departments == [OTHER_DEPARTMENT]

    def test_undecodable_file_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "table.txt"
        path.write_bytes(b"Cox Hall:\xff\xfe\xfa\n")
        catalog = load_catalog(path)
        assert catalog.buildings == [OTHER_BUILDING]

    def test_fallback_logged(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="enrollment_helper.catalog"):
            load_catalog(tmp_path / "missing.txt")
        assert "Could not load reference table" in caplog.text

    def test_fallback_uses_custom_labels(self, tmp_path: Path) -> None:
        catalog = load_catalog(
            tmp_path / "missing.txt", other_building="Elsewhere", other_department="Unlisted"
        )
        assert catalog.buildings == ["Elsewhere"]
        assert catalog.departments == ["Unlisted"]
