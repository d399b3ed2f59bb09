"""Column profiling by content shape.

This module scores sampled column values against role-specific shape
predicates so that columns can be classified when the header row carries no
usable names (for example when the first row is already data).
"""

import re
from typing import Any, Callable, Dict, List, Sequence

from .schema import ROLE_MANUFACTURER, ROLE_PART_NO, ROLE_REF, ROLE_VALUE

# Letter prefix, then alphanumerics or -_/ containing at least one digit: R1, C12, U3-A, TP1_2
REF_SHAPE = re.compile(r'^[A-Za-z]+(?=[A-Za-z0-9\-_/]*[0-9])[A-Za-z0-9\-_/]+$')

# No whitespace; letters, digits and -_/. only (letter + digit checked separately)
PART_NO_SHAPE = re.compile(r'^[A-Za-z0-9\-_/.]+$')

VALUE_SHAPES = [
    re.compile(r'^[0-9]+(?:[.,][0-9]+)?\s*[pnuµμmkKMG]?[A-Za-zΩ]*%?$'),  # 10k, 100nF, 3.3V, 5%
    re.compile(r'^[0-9]+[RKkMmunpµμ][0-9]+[A-Za-zΩ]*$'),                # 4k7, 4R7, 2n2F
]

_HAS_LETTER = re.compile(r'[A-Za-z]')
_HAS_DIGIT = re.compile(r'[0-9]')


def is_ref_shaped(value: str) -> bool:
    """True for a reference designator or a comma list of them ("R1, R2")."""
    tokens = [token.strip() for token in value.split(',')]
    return bool(tokens) and all(token and REF_SHAPE.match(token) for token in tokens)


def is_part_no_shaped(value: str) -> bool:
    return bool(
        PART_NO_SHAPE.match(value)
        and _HAS_LETTER.search(value)
        and _HAS_DIGIT.search(value)
    )


def is_value_shaped(value: str) -> bool:
    return any(pattern.match(value) for pattern in VALUE_SHAPES)


def is_manufacturer_shaped(value: str, alpha_ratio: float = 0.7) -> bool:
    """Predominantly alphabetic text (spaces allowed) that is not a part number."""
    if is_part_no_shaped(value):
        return False
    chars = [char for char in value if not char.isspace()]
    if not chars:
        return False
    letters = sum(1 for char in chars if char.isalpha())
    return letters > 0 and letters / len(chars) >= alpha_ratio


class ColumnProfiler:
    """Profiles columns by testing sampled values against role shape predicates."""

    def __init__(self, sample_size: int = 200, manufacturer_alpha_ratio: float = 0.7):
        """Initialize the column profiler.

        Args:
            sample_size: Maximum number of non-empty values to sample (default: 200)
            manufacturer_alpha_ratio: Minimum letter share for the manufacturer shape
        """
        self.sample_size = sample_size
        self.manufacturer_alpha_ratio = manufacturer_alpha_ratio
        self.shape_predicates: Dict[str, Callable[[str], bool]] = {
            ROLE_REF: is_ref_shaped,
            ROLE_PART_NO: is_part_no_shaped,
            ROLE_MANUFACTURER: lambda v: is_manufacturer_shaped(v, self.manufacturer_alpha_ratio),
            ROLE_VALUE: is_value_shaped,
        }

    def profile_column(self, column_name: str, values: Sequence[Any]) -> Dict[str, Any]:
        """Compute a shape profile for a column.

        Args:
            column_name: Name of the column being profiled
            values: All values of the column, in row order

        Returns:
            Dictionary with the sample size, the count of empty values and
            ``shape_hits``: role -> share of sampled values matching its shape
        """
        sample = self._get_sample(values)
        null_count = len([v for v in values if v is None or str(v).strip() == ''])

        if not sample:
            return {
                'column_name': column_name,
                'sample_size': 0,
                'null_count': null_count,
                'shape_hits': {role: 0.0 for role in self.shape_predicates},
            }

        return {
            'column_name': column_name,
            'sample_size': len(sample),
            'null_count': null_count,
            'shape_hits': self._check_shapes(sample),
        }

    def _get_sample(self, values: Sequence[Any]) -> List[str]:
        """Get up to sample_size trimmed, non-empty values, in order."""
        sample = []
        for value in values:
            if value is None:
                continue
            text = str(value).strip()
            if text:
                sample.append(text)
                if len(sample) >= self.sample_size:
                    break
        return sample

    def _check_shapes(self, values: List[str]) -> Dict[str, float]:
        total = len(values)
        return {
            role: sum(1 for value in values if predicate(value)) / total
            for role, predicate in self.shape_predicates.items()
        }

    def profile_rows(self, rows: Sequence[Sequence[str]], width: int) -> List[Dict[str, Any]]:
        """Profile every column of positional rows.

        Args:
            rows: Data rows (may be ragged)
            width: Number of columns to profile

        Returns:
            One profile per column index
        """
        profiles = []
        for index in range(width):
            column_values = [row[index] if index < len(row) else '' for row in rows]
            profiles.append(self.profile_column(f"Column {index + 1}", column_values))
        return profiles

    def row_looks_like_data(self, cells: Sequence[str]) -> bool:
        """True when a row's cells look like BOM data rather than header names.

        A row is data-shaped when any cell is reference-designator shaped or
        part-number shaped.
        """
        for cell in cells:
            text = str(cell).strip()
            if text and (is_ref_shaped(text) or is_part_no_shaped(text)):
                return True
        return False
