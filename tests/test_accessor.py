"""Tests for role-based access to dataset rows."""

from bomsync.accessor import DatasetAccessor
from bomsync.dataset import TabularDataset


def make_accessor(rows, roles, headers=None) -> DatasetAccessor:
    return DatasetAccessor(TabularDataset.from_rows(rows, headers=headers, column_roles=roles))


class TestRoleValues:

    def test_values_are_trimmed_and_non_empty(self):
        acc = make_accessor([["  C1 ", "", " C2"]], {"ref": ["col-0", "col-1", "col-2"]})

        assert acc.values(0, "ref") == ["C1", "C2"]

    def test_multi_column_ref_joins_in_assignment_order(self):
        acc = make_accessor([["C1", "C2", "GRM188"]], {"ref": ["col-1", "col-0"]})

        assert acc.ref(0) == "C2, C1"

    def test_single_value_roles_take_first_value(self):
        acc = make_accessor(
            [["R1", "RC0603", "Yageo", "10k"]],
            {"ref": ["col-0"], "part_no": ["col-1"], "manufacturer": ["col-2"], "value": ["col-3"]},
        )

        assert acc.part_no(0) == "RC0603"
        assert acc.manufacturer(0) == "Yageo"
        assert acc.value(0) == "10k"

    def test_unassigned_role_is_empty(self):
        acc = make_accessor([["R1", "10k"]], {"ref": ["col-0"]})

        assert acc.values(0, "manufacturer") == []
        assert acc.manufacturer(0) == ""

    def test_short_row_yields_no_value(self):
        """A row shorter than the role column contributes nothing."""
        acc = make_accessor([["R1"], ["R2", "PN2"]], {"ref": ["col-0"], "part_no": ["col-1"]})

        assert acc.part_no(0) == ""
        assert acc.part_no(1) == "PN2"

    def test_unknown_column_id_is_skipped(self):
        acc = make_accessor([["R1"]], {"ref": ["col-0", "col-4"]})

        assert acc.column_indices("ref") == [0]
        assert acc.ref(0) == "R1"


class TestRawAccess:

    def test_cell_is_untrimmed(self):
        acc = make_accessor([[" R1 ", "PN1"]], {"ref": ["col-0"]})

        assert acc.cell(0, "col-0") == " R1 "
        assert acc.cell(0, "col-9") == ""

    def test_keys(self):
        acc = make_accessor([["R1"], [""], ["R2"]], {"ref": ["col-0"]})

        assert acc.keys() == ["R1", "", "R2"]

    def test_record_collects_attributes(self):
        acc = make_accessor(
            [["R1", "RC0603", "1", " 0603 ", ""]],
            {"ref": ["col-0"], "part_no": ["col-1"]},
            headers=["Ref", "Part No", "Qty", "Package", "Note"],
        )

        record = acc.record(0)

        assert record["ref"] == "R1"
        assert record["part_no"] == "RC0603"
        assert record["manufacturer"] == ""
        assert record["attributes"] == {"Qty": "1", "Package": "0603"}

    def test_find_column_is_case_insensitive(self):
        acc = make_accessor([["R1", "0603"]], {"ref": ["col-0"]}, headers=["Ref", "Package"])

        assert acc.find_column("package") == 1
        assert acc.find_column(" PACKAGE ") == 1
        assert acc.find_column("footprint") is None

    def test_len(self):
        assert len(make_accessor([["R1"], ["R2"]], {"ref": ["col-0"]})) == 2
