"""
Merge engine: update a base BOM with an overlay BOM.

Merge strategy:
1. Queue overlay rows per join key, in overlay order (duplicate keys are
   consumed first-in, first-out)
2. For each base row, take the next overlay row queued under its key and
   overwrite base cells wherever the overlay cell is non-empty after
   trimming; a blank overlay cell never erases a base value
3. Append every overlay row that was never taken, verbatim and in overlay
   order

The result keeps the base's columns, role map and display order. Row
numbers restart at 1 and diagnostics are cleared; re-validation is up to the
caller.
"""

import logging
from collections import deque
from dataclasses import replace
from typing import Deque, Dict, List, Sequence, Set

from ..accessor import DatasetAccessor
from ..dataset import TabularDataset

logger = logging.getLogger(__name__)


def build_key_queues(accessor: DatasetAccessor) -> Dict[str, Deque[int]]:
    """Queue the row indices of each non-empty join key, in row order."""
    queues: Dict[str, Deque[int]] = {}
    for row_index in range(len(accessor)):
        key = accessor.ref(row_index)
        if key:
            queues.setdefault(key, deque()).append(row_index)
    return queues


def overlay_row(base_row: Sequence[str], overlay: Sequence[str]) -> List[str]:
    """Overwrite base cells with the overlay's non-empty cells, position by position.

    An overlay longer than the base extends it; trailing base cells the
    overlay does not reach are kept.
    """
    merged = list(base_row)
    for col_index, cell in enumerate(overlay):
        if not cell.strip():
            continue
        if col_index < len(merged):
            merged[col_index] = cell
        else:
            merged.extend([""] * (col_index - len(merged)))
            merged.append(cell)
    return merged


def merge_datasets(base: TabularDataset, overlay: TabularDataset) -> TabularDataset:
    """
    Merge ``overlay`` into ``base``.

    Args:
        base: Dataset to update; its structure is kept
        overlay: Dataset carrying the updates

    Returns:
        New TabularDataset with merged rows
    """
    base_accessor = DatasetAccessor(base)
    queues = build_key_queues(DatasetAccessor(overlay))

    merged_rows: List[List[str]] = []
    used: Set[int] = set()
    updated = 0

    # Step 2: update base rows
    for base_index, base_row in enumerate(base.rows):
        queue = queues.get(base_accessor.ref(base_index))
        if queue:
            overlay_index = queue.popleft()
            used.add(overlay_index)
            merged_rows.append(overlay_row(base_row, overlay.rows[overlay_index]))
            updated += 1
        else:
            merged_rows.append(list(base_row))

    # Step 3: append overlay rows never consumed
    appended = 0
    for overlay_index, row in enumerate(overlay.rows):
        if overlay_index not in used:
            merged_rows.append(list(row))
            appended += 1

    logger.info(
        f"Merged {len(overlay.rows)} overlay rows into {len(base.rows)} base rows: "
        f"{updated} updated, {len(base.rows) - updated} kept, {appended} appended"
    )

    return replace(
        base,
        rows=merged_rows,
        row_numbers=range(1, len(merged_rows) + 1),
        diagnostics=(),
    )
