"""
Unit tests for the key-based diff engine.

These tests verify that:
1. Comparing a dataset with itself reports nothing but unchanged rows
2. Added and removed keys are symmetric
3. Changed columns cover positional, ragged and role-based differences
4. Output order is A's rows first, then B-only rows
"""

import pytest

from bomsync.dataset import TabularDataset
from bomsync.diff import (
    DiffRow,
    DiffStatus,
    compare_datasets,
    status_by_ref,
    summarize_diff,
)

ROLES = {"ref": ["col-0"], "part_no": ["col-1"]}


def make_dataset(rows, roles=ROLES) -> TabularDataset:
    """Helper to create a dataset with ref=col-0 and part_no=col-1 by default."""
    return TabularDataset.from_rows(rows, column_roles=roles)


@pytest.fixture
def bom_a():
    return make_dataset([
        ["C1", "GRM188R71H104KA93D", "Murata", "100nF"],
        ["R1", "RC0603FR-0710KL", "Yageo", "10k"],
        ["U1", "STM32F103C8T6", "ST", ""],
    ], roles={"ref": ["col-0"], "part_no": ["col-1"], "manufacturer": ["col-2"], "value": ["col-3"]})


# =============================================================================
# PROPERTIES
# =============================================================================

class TestDiffProperties:

    def test_idempotence(self, bom_a):
        diffs = compare_datasets(bom_a, bom_a)

        assert [d.status for d in diffs] == [DiffStatus.UNCHANGED] * 3
        assert all(d.changed_columns == () for d in diffs)
        assert [(d.a_index, d.b_index) for d in diffs] == [(0, 0), (1, 1), (2, 2)]

    def test_key_symmetry(self):
        a = make_dataset([["C1", "PN1"], ["C2", "PN2"], ["C3", "PN3"]])
        b = make_dataset([["C2", "PN2"], ["C4", "PN4"], ["C5", "PN5"]])

        forward = compare_datasets(a, b)
        backward = compare_datasets(b, a)

        def keys(diffs, status):
            return {d.key for d in diffs if d.status == status}

        assert keys(forward, DiffStatus.ADDED) == keys(backward, DiffStatus.REMOVED) == {"C4", "C5"}
        assert keys(forward, DiffStatus.REMOVED) == keys(backward, DiffStatus.ADDED) == {"C1", "C3"}

    def test_whitespace_only_changes_are_ignored(self):
        a = make_dataset([["C1", "PN1 "]])
        b = make_dataset([[" C1", "PN1"]])

        assert compare_datasets(a, b)[0].status == DiffStatus.UNCHANGED


# =============================================================================
# SCENARIOS
# =============================================================================

class TestDiffScenarios:

    def test_modified_then_added(self):
        a = make_dataset([["C1", "PN1"]])
        b = make_dataset([["C1", "PN2"], ["C2", "PN3"]])

        diffs = compare_datasets(a, b)

        assert diffs == [
            DiffRow(status=DiffStatus.MODIFIED, key="C1", a_index=0, b_index=0, changed_columns=("col-1",)),
            DiffRow(status=DiffStatus.ADDED, key="C2", a_index=None, b_index=1),
        ]

    def test_removed_against_empty(self):
        a = make_dataset([["C1", "PN1"]])
        b = TabularDataset.from_rows([], headers=["Ref", "Part"], column_roles=ROLES)

        diffs = compare_datasets(a, b)

        assert diffs == [DiffRow(status=DiffStatus.REMOVED, key="C1", a_index=0, b_index=None)]

    def test_output_order(self):
        a = make_dataset([["C3", "x"], ["C1", "x"]])
        b = make_dataset([["C9", "x"], ["C1", "y"], ["C0", "x"]])

        diffs = compare_datasets(a, b)

        assert [(d.status.value, d.key) for d in diffs] == [
            ("removed", "C3"),
            ("modified", "C1"),
            ("added", "C9"),
            ("added", "C0"),
        ]


# =============================================================================
# CHANGED COLUMNS
# =============================================================================

class TestChangedColumns:

    def test_trailing_cells_count_as_changed(self):
        a = make_dataset([["C1", "PN1"]])
        b = make_dataset([["C1", "PN1", "", "note"]])

        diff = compare_datasets(a, b)[0]

        assert diff.status == DiffStatus.MODIFIED
        assert diff.changed_columns == ("col-2", "col-3")

    def test_role_comparison_catches_column_reordering(self):
        """Same part number in a different column position is not a part number change."""
        a = make_dataset([["C1", "PN1", "Murata"]], roles={"ref": ["col-0"], "part_no": ["col-1"], "manufacturer": ["col-2"]})
        b = make_dataset([["C1", "Murata", "PN1"]], roles={"ref": ["col-0"], "part_no": ["col-2"], "manufacturer": ["col-1"]})

        diff = compare_datasets(a, b)[0]

        # Positional pass flags both columns; role values agree, so nothing is added
        assert diff.changed_columns == ("col-1", "col-2")

    def test_role_change_adds_role_columns(self):
        a = make_dataset([["C1", "PN1", "Murata"]], roles={"ref": ["col-0"], "part_no": ["col-2"], "manufacturer": ["col-1"]})
        b = make_dataset([["C1", "PN1", "TDK"]], roles={"ref": ["col-0"], "part_no": ["col-1"], "manufacturer": ["col-2"]})

        diff = compare_datasets(a, b)[0]

        # col-2 differs by position; the part number (A: col-2) and manufacturer
        # (A: col-1) values differ by role
        assert diff.changed_columns == ("col-2", "col-1")

    def test_role_only_in_b_uses_b_ids(self):
        a = make_dataset([["C1", "10k"]], roles={"ref": ["col-0"]})
        b = make_dataset([["C1", "10k"]], roles={"ref": ["col-0"], "value": ["col-1"]})

        diff = compare_datasets(a, b)[0]

        assert diff.status == DiffStatus.MODIFIED
        assert diff.changed_columns == ("col-1",)


# =============================================================================
# KEYS
# =============================================================================

class TestKeys:

    def test_empty_keys_are_excluded(self):
        a = make_dataset([["", "PN1"], ["C1", "PN1"]])
        b = make_dataset([["C1", "PN1"], [" ", "PN9"]])

        diffs = compare_datasets(a, b)

        assert [(d.status, d.key) for d in diffs] == [(DiffStatus.UNCHANGED, "C1")]

    def test_duplicate_keys_match_first_row(self):
        a = make_dataset([["C1", "PN1"], ["C1", "PN2"]])
        b = make_dataset([["C1", "PN2"]])

        diffs = compare_datasets(a, b)

        assert [(d.status, d.a_index, d.b_index) for d in diffs] == [
            (DiffStatus.MODIFIED, 0, 0),
            (DiffStatus.UNCHANGED, 1, 0),
        ]

    def test_multi_column_key(self):
        roles = {"ref": ["col-0", "col-1"], "part_no": ["col-2"]}
        a = make_dataset([["C1", "C2", "PN1"]], roles=roles)
        b = make_dataset([["C1", "C2", "PN1"], ["C1", "", "PN1"]], roles=roles)

        diffs = compare_datasets(a, b)

        assert [(d.status.value, d.key) for d in diffs] == [("unchanged", "C1, C2"), ("added", "C1")]


# =============================================================================
# SERIALIZATION AND SUMMARIES
# =============================================================================

class TestDiffOutput:

    def test_to_dict(self):
        row = DiffRow(status=DiffStatus.MODIFIED, key="C1", a_index=0, b_index=2, changed_columns=("col-1",))

        assert row.to_dict() == {
            "status": "modified",
            "key": "C1",
            "a_index": 0,
            "b_index": 2,
            "changed_columns": ["col-1"],
        }

    def test_status_by_ref(self):
        diffs = compare_datasets(
            make_dataset([["C1", "PN1"], ["C2", "PN2"]]),
            make_dataset([["C1", "PN9"], ["C3", "PN3"]]),
        )

        assert status_by_ref(diffs) == {"C1": "modified", "C2": "removed", "C3": "added"}

    def test_summarize_diff(self):
        diffs = compare_datasets(
            make_dataset([["C1", "PN1"], ["C2", "PN2"], ["C4", "PN4"]]),
            make_dataset([["C1", "PN9"], ["C3", "PN3"], ["C4", "PN4"]]),
        )

        assert summarize_diff(diffs) == {
            "added": 1,
            "removed": 1,
            "modified": 1,
            "unchanged": 1,
            "total": 4,
        }
