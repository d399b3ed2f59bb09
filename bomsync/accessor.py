"""Role-aware read API over a TabularDataset."""

from typing import Any, Dict, List, Optional

from .dataset import TabularDataset
from .schema import (
    CANONICAL_ROLES,
    REF_SEPARATOR,
    ROLE_MANUFACTURER,
    ROLE_PART_NO,
    ROLE_REF,
    ROLE_VALUE,
)


class DatasetAccessor:
    """
    Read-only, role-based access to the rows of a TabularDataset.

    Cell values are trimmed before they are returned; values that are empty
    after trimming count as absent. Rows shorter than a role column's index
    simply yield no value for that column.
    """

    def __init__(self, dataset: TabularDataset):
        self.dataset = dataset
        self._role_indices: Dict[str, List[int]] = {}

    def column_indices(self, role: str) -> List[int]:
        """Positional indices of the columns assigned to ``role``, in assignment order.

        Ids that no longer name a column of the dataset are skipped.
        """
        if role not in self._role_indices:
            indices = []
            for column_id in self.dataset.column_roles.get(role, ()):
                index = self.dataset.column_index(column_id)
                if index is not None:
                    indices.append(index)
            self._role_indices[role] = indices
        return list(self._role_indices[role])

    def values(self, row_index: int, role: str) -> List[str]:
        """Trimmed, non-empty values of every column assigned to ``role``."""
        row = self.dataset.rows[row_index]
        result = []
        for index in self.column_indices(role):
            if index < len(row):
                value = row[index].strip()
                if value:
                    result.append(value)
        return result

    def ref(self, row_index: int) -> str:
        """Join key of a row: all reference values joined with ", "."""
        return REF_SEPARATOR.join(self.values(row_index, ROLE_REF))

    def part_no(self, row_index: int) -> str:
        return self._first(row_index, ROLE_PART_NO)

    def manufacturer(self, row_index: int) -> str:
        return self._first(row_index, ROLE_MANUFACTURER)

    def value(self, row_index: int) -> str:
        return self._first(row_index, ROLE_VALUE)

    def _first(self, row_index: int, role: str) -> str:
        values = self.values(row_index, role)
        return values[0] if values else ""

    def cell(self, row_index: int, column_id: str) -> str:
        """Raw (untrimmed) cell by column id; empty string when absent."""
        index = self.dataset.column_index(column_id)
        row = self.dataset.rows[row_index]
        if index is None or index >= len(row):
            return ""
        return row[index]

    def keys(self) -> List[str]:
        """Join key of every row, in row order."""
        return [self.ref(index) for index in range(len(self.dataset.rows))]

    def record(self, row_index: int) -> Dict[str, Any]:
        """
        Structured view of one row, derived from the raw cells.

        Returns:
            Dictionary with ``ref``, ``part_no``, ``manufacturer``, ``value``
            and ``attributes`` (header name -> trimmed value for every
            non-empty cell in a column without a canonical role)
        """
        role_columns = set()
        for role in CANONICAL_ROLES:
            role_columns.update(self.column_indices(role))

        row = self.dataset.rows[row_index]
        attributes: Dict[str, str] = {}
        for index, column in enumerate(self.dataset.columns):
            if index in role_columns or index >= len(row):
                continue
            name = column.name.strip()
            value = row[index].strip()
            if name and value:
                attributes[name] = value

        return {
            "ref": self.ref(row_index),
            "part_no": self.part_no(row_index),
            "manufacturer": self.manufacturer(row_index),
            "value": self.value(row_index),
            "attributes": attributes,
        }

    def find_column(self, header_name: str) -> Optional[int]:
        """Index of the first column whose header equals ``header_name`` (case-insensitive)."""
        wanted = header_name.strip().lower()
        for index, column in enumerate(self.dataset.columns):
            if column.name.strip().lower() == wanted:
                return index
        return None

    def __len__(self) -> int:
        return len(self.dataset.rows)
