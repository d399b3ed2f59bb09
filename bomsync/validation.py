"""Row-level validation producing advisory diagnostics.

Nothing here raises: every finding becomes a Diagnostic carrying the source
line number and, where it applies, the column index.
"""

import unicodedata
from typing import List, Optional, Set

from .accessor import DatasetAccessor
from .dataset import Diagnostic, Severity, TabularDataset
from .schema import CANONICAL_ROLES, ROLE_PART_NO, ROLE_REF


def find_invalid_char(cell: str) -> Optional[str]:
    """Return the first non-printable control/format character (tab excepted)."""
    for char in cell:
        if char != '\t' and unicodedata.category(char).startswith('C'):
            return char
    return None


def validate_dataset(dataset: TabularDataset) -> List[Diagnostic]:
    """Validate every data row of a classified dataset.

    Checks, in this order per row:
    - invalid control characters in any cell (warning)
    - a role-bearing column beyond the end of the row (error)
    - empty reference key, or no reference column at all (warning)
    - reference key already seen earlier in the dataset, when a reference
      role is resolved (warning)
    - empty part number, when a part number role is resolved (warning)

    Args:
        dataset: Dataset whose role map is already assigned

    Returns:
        Diagnostics in row order
    """
    accessor = DatasetAccessor(dataset)
    ref_indices = accessor.column_indices(ROLE_REF)
    part_indices = accessor.column_indices(ROLE_PART_NO)
    diagnostics: List[Diagnostic] = []
    seen_refs: Set[str] = set()

    for row_index, row in enumerate(dataset.rows):
        line_number = dataset.row_numbers[row_index] if row_index < len(dataset.row_numbers) else row_index + 1

        for col_index, cell in enumerate(row):
            invalid = find_invalid_char(cell)
            if invalid is not None:
                diagnostics.append(Diagnostic(
                    message=f"Row {line_number} (column {col_index + 1}): invalid character U+{ord(invalid):04X}",
                    severity=Severity.WARNING,
                    row=line_number,
                    column=col_index,
                ))

        missing_roles = set()
        for role in CANONICAL_ROLES:
            for col_index in accessor.column_indices(role):
                if col_index >= len(row):
                    missing_roles.add(role)
                    diagnostics.append(Diagnostic(
                        message=f"Row {line_number}: missing data for {role} column {col_index + 1}",
                        severity=Severity.ERROR,
                        row=line_number,
                        column=col_index,
                    ))

        if not ref_indices:
            # Without a reference column every row lacks its key
            diagnostics.append(Diagnostic(
                message=f"Row {line_number}: reference is empty or its column was not detected",
                severity=Severity.WARNING,
                row=line_number,
            ))
        elif ROLE_REF not in missing_roles:
            reference = accessor.ref(row_index)
            if not reference:
                diagnostics.append(Diagnostic(
                    message=f"Row {line_number}: reference is empty",
                    severity=Severity.WARNING,
                    row=line_number,
                    column=ref_indices[0],
                ))
            elif reference in seen_refs:
                diagnostics.append(Diagnostic(
                    message=f"Row {line_number}: duplicate reference '{reference}'",
                    severity=Severity.WARNING,
                    row=line_number,
                    column=ref_indices[0],
                ))
            else:
                seen_refs.add(reference)

        if part_indices and ROLE_PART_NO not in missing_roles and not accessor.part_no(row_index):
            diagnostics.append(Diagnostic(
                message=f"Row {line_number}: part number is empty (reference: {accessor.ref(row_index)})",
                severity=Severity.WARNING,
                row=line_number,
                column=part_indices[0],
            ))

    return diagnostics
