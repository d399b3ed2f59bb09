"""BOM dataset merge module."""

from .engine import build_key_queues, merge_datasets, overlay_row

__all__ = [
    "build_key_queues",
    "merge_datasets",
    "overlay_row",
]
