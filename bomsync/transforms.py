"""
Caller-level row transforms applied before diffing or merging.

Each transform returns a new dataset with the same columns, roles and
display order. The reference transforms work on the primary (first)
reference column; a dataset without a reference role is returned as is.
"""

import logging
import re
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from .accessor import DatasetAccessor
from .dataset import TabularDataset
from .schema import ROLE_REF

logger = logging.getLogger(__name__)

_RANGE = re.compile(r'^([A-Za-z]*)([0-9]+)-([A-Za-z]*)([0-9]+)$')

# Parentheses are dropped; full-width ASCII forms and the ideographic space
# become their half-width equivalents.
_CLEANSE_TABLE: Dict[int, Optional[str]] = {ord(char): None for char in "()（）"}
for _codepoint in range(0xFF01, 0xFF5F):
    _CLEANSE_TABLE.setdefault(_codepoint, chr(_codepoint - 0xFEE0))
_CLEANSE_TABLE[0x3000] = " "


def parse_reference_range(reference: str) -> Optional[Tuple[str, int, int]]:
    """Parse "C1-C5" or "C1-5" into (prefix, start, end).

    Args:
        reference: Reference text with spaces already removed

    Returns:
        (prefix, start, end), or None when the text is not a range. The
        bounds are returned as written, so ``end`` may be below ``start``.
    """
    match = _RANGE.match(reference)
    if not match:
        return None
    start_prefix, start, end_prefix, end = match.groups()
    prefix = start_prefix or end_prefix
    if not prefix:
        return None
    if end_prefix and end_prefix != prefix:
        return None
    return prefix, int(start), int(end)


def _primary_ref_index(dataset: TabularDataset) -> Optional[int]:
    indices = DatasetAccessor(dataset).column_indices(ROLE_REF)
    return indices[0] if indices else None


def _cell(row, index: int) -> str:
    return row[index] if index < len(row) else ""


def _with_cell(row, index: int, value: str) -> List[str]:
    new_row = list(row)
    if index >= len(new_row):
        new_row.extend([""] * (index + 1 - len(new_row)))
    new_row[index] = value
    return new_row


def expand_reference_ranges(dataset: TabularDataset) -> TabularDataset:
    """
    Expand reference ranges into one row per designator.

    "C1-C4" becomes four rows C1, C2, C3, C4 that otherwise copy the source
    row, including its source row number.

    Raises:
        ValueError: If a range is inverted, e.g. "C5-C1"
    """
    ref_index = _primary_ref_index(dataset)
    if ref_index is None:
        return dataset

    rows: List[List[str]] = []
    row_numbers: List[int] = []
    for row, line_number in zip(dataset.rows, dataset.row_numbers):
        reference = _cell(row, ref_index)
        parsed = parse_reference_range(reference.replace(" ", ""))
        if parsed is None:
            rows.append(list(row))
            row_numbers.append(line_number)
            continue

        prefix, start, end = parsed
        if end < start:
            raise ValueError(f"Invalid reference range: {reference.strip()}")
        for number in range(start, end + 1):
            rows.append(_with_cell(row, ref_index, f"{prefix}{number}"))
            row_numbers.append(line_number)

    logger.info(f"Expanded reference ranges: {len(dataset.rows)} rows -> {len(rows)} rows")
    return replace(dataset, rows=rows, row_numbers=row_numbers)


def split_reference_rows(dataset: TabularDataset) -> TabularDataset:
    """Split "C1, C2, C3" reference cells into one row per designator."""
    ref_index = _primary_ref_index(dataset)
    if ref_index is None:
        return dataset

    rows: List[List[str]] = []
    row_numbers: List[int] = []
    for row, line_number in zip(dataset.rows, dataset.row_numbers):
        references = [part.strip() for part in _cell(row, ref_index).split(",") if part.strip()]
        if len(references) <= 1:
            rows.append(list(row))
            row_numbers.append(line_number)
            continue
        for reference in references:
            rows.append(_with_cell(row, ref_index, reference))
            row_numbers.append(line_number)

    logger.info(f"Split reference rows: {len(dataset.rows)} rows -> {len(rows)} rows")
    return replace(dataset, rows=rows, row_numbers=row_numbers)


def fill_blank_cells(dataset: TabularDataset) -> TabularDataset:
    """
    Fill blank cells from the previous non-blank value of the same column.

    Reference columns are never filled, and fully blank rows are left as they
    are.
    """
    ref_indices = set(DatasetAccessor(dataset).column_indices(ROLE_REF))
    previous: Dict[int, str] = {}
    rows: List[List[str]] = []

    for row in dataset.rows:
        if all(not cell.strip() for cell in row):
            rows.append(list(row))
            continue
        new_row = list(row)
        for index, cell in enumerate(new_row):
            if index in ref_indices:
                continue
            if cell.strip():
                previous[index] = cell
            elif index in previous:
                new_row[index] = previous[index]
        rows.append(new_row)

    return replace(dataset, rows=rows)


def cleanse_string(value: str) -> str:
    """Remove parentheses and convert full-width characters to half-width."""
    return value.translate(_CLEANSE_TABLE)


def cleanse_text(dataset: TabularDataset) -> TabularDataset:
    """Apply ``cleanse_string`` to every cell."""
    return replace(dataset, rows=[[cleanse_string(cell) for cell in row] for row in dataset.rows])
