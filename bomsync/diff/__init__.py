"""BOM dataset diff module."""

from .compare import (
    DiffRow,
    DiffStatus,
    build_key_map,
    compare_datasets,
    diff_row_cells,
    status_by_ref,
    summarize_diff,
)

__all__ = [
    "DiffRow",
    "DiffStatus",
    "build_key_map",
    "compare_datasets",
    "diff_row_cells",
    "status_by_ref",
    "summarize_diff",
]
