"""
Diff engine for comparing two classified BOM datasets.

Rows are matched by join key (the reference designator value, several
reference columns joined with ", "), never by row position:
- Rows whose key is empty take no part in the diff, on either side
- Within one dataset the first row seen with a key wins the lookup table
- A matched pair is compared cell by cell, then by semantic role, so a
  column reordering between revisions still surfaces part number,
  manufacturer and value changes

Output order is deterministic: every emitted row of A in A's order, then the
rows only present in B in B's order.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..accessor import DatasetAccessor
from ..dataset import TabularDataset
from ..schema import ROLE_MANUFACTURER, ROLE_PART_NO, ROLE_VALUE

logger = logging.getLogger(__name__)

# Roles compared through the accessor after the positional pass
SEMANTIC_ROLES = (ROLE_PART_NO, ROLE_MANUFACTURER, ROLE_VALUE)


class DiffStatus(str, Enum):
    """Status of one diff row."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffRow:
    """
    One change record.

    ``a_index``/``b_index`` are row indices into the compared datasets (None
    on the side where the key does not exist). ``changed_columns`` is only
    populated for modified rows.
    """
    status: DiffStatus
    key: str
    a_index: Optional[int] = None
    b_index: Optional[int] = None
    changed_columns: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "key": self.key,
            "a_index": self.a_index,
            "b_index": self.b_index,
            "changed_columns": list(self.changed_columns),
        }


def build_key_map(accessor: DatasetAccessor) -> Dict[str, int]:
    """Map each non-empty join key to the first row index carrying it."""
    key_map: Dict[str, int] = {}
    for row_index in range(len(accessor)):
        key = accessor.ref(row_index)
        if key and key not in key_map:
            key_map[key] = row_index
    return key_map


def diff_row_cells(
    accessor_a: DatasetAccessor,
    accessor_b: DatasetAccessor,
    a_index: int,
    b_index: int,
) -> Tuple[str, ...]:
    """
    Compute the ordered column ids that differ between two matched rows.

    Step 1 compares trimmed cells position by position; every index past
    the end of the shorter row counts as changed. Step 2 compares the part
    number, manufacturer and value roles through the accessors and adds the
    role's columns when the derived values differ.

    Args:
        accessor_a: Accessor over dataset A
        accessor_b: Accessor over dataset B
        a_index: Row index in A
        b_index: Row index in B

    Returns:
        Tuple of changed column ids (ids of dataset A where it has them)
    """
    dataset_a = accessor_a.dataset
    dataset_b = accessor_b.dataset
    row_a = dataset_a.rows[a_index]
    row_b = dataset_b.rows[b_index]

    changed: Dict[str, None] = {}

    # Step 1: positional comparison
    shorter = min(len(row_a), len(row_b))
    for index in range(max(len(row_a), len(row_b))):
        if index >= shorter or row_a[index].strip() != row_b[index].strip():
            changed[dataset_a.column_id_at(index)] = None

    # Step 2: semantic roles, protecting against column misalignment
    for role in SEMANTIC_ROLES:
        if accessor_a.values(a_index, role) == accessor_b.values(b_index, role):
            continue
        role_ids = dataset_a.column_roles.get(role) or dataset_b.column_roles.get(role) or ()
        for column_id in role_ids:
            changed[column_id] = None

    return tuple(changed)


def compare_datasets(dataset_a: TabularDataset, dataset_b: TabularDataset) -> List[DiffRow]:
    """
    Compare two classified datasets and produce change records.

    Args:
        dataset_a: Baseline dataset
        dataset_b: Comparison dataset

    Returns:
        DiffRows: A's rows in A's order (unchanged, modified or removed),
        then B-only rows in B's order (added)
    """
    accessor_a = DatasetAccessor(dataset_a)
    accessor_b = DatasetAccessor(dataset_b)

    # Step 1: key -> row index lookup tables (first seen wins)
    map_a = build_key_map(accessor_a)
    map_b = build_key_map(accessor_b)

    diffs: List[DiffRow] = []

    # Step 2: walk A
    for a_index in range(len(dataset_a.rows)):
        key = accessor_a.ref(a_index)
        if not key:
            continue

        b_index = map_b.get(key)
        if b_index is None:
            diffs.append(DiffRow(status=DiffStatus.REMOVED, key=key, a_index=a_index))
            continue

        changed = diff_row_cells(accessor_a, accessor_b, a_index, b_index)
        diffs.append(DiffRow(
            status=DiffStatus.MODIFIED if changed else DiffStatus.UNCHANGED,
            key=key,
            a_index=a_index,
            b_index=b_index,
            changed_columns=changed,
        ))

    # Step 3: B-only keys
    for b_index in range(len(dataset_b.rows)):
        key = accessor_b.ref(b_index)
        if key and key not in map_a:
            diffs.append(DiffRow(status=DiffStatus.ADDED, key=key, b_index=b_index))

    counts = summarize_diff(diffs)
    logger.info(
        f"Compared {len(dataset_a.rows)} vs {len(dataset_b.rows)} rows: "
        f"{counts['added']} added, {counts['removed']} removed, "
        f"{counts['modified']} modified, {counts['unchanged']} unchanged"
    )
    return diffs


def status_by_ref(diffs: List[DiffRow]) -> Dict[str, str]:
    """Map each join key to its diff status, for export comment annotation.

    When a key appears several times the first record wins.
    """
    statuses: Dict[str, str] = {}
    for diff in diffs:
        statuses.setdefault(diff.key, diff.status.value)
    return statuses


def summarize_diff(diffs: List[DiffRow]) -> Dict[str, int]:
    """Count diff rows per status."""
    counts = {status.value: 0 for status in DiffStatus}
    for diff in diffs:
        counts[diff.status.value] += 1
    counts["total"] = len(diffs)
    return counts
