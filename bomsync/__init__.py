from .accessor import DatasetAccessor
from .classifier import ColumnRoleClassifier, classify
from .config import ClassifierConfig, load_config
from .dataset import ColumnMeta, Diagnostic, Severity, TabularDataset
from .diff import DiffRow, DiffStatus, compare_datasets, status_by_ref, summarize_diff
from .merge import merge_datasets
from .parser import BomParser
from .schema import CANONICAL_ROLES, HEADER_SYNONYMS

__all__ = [
    "BomParser",
    "CANONICAL_ROLES",
    "ClassifierConfig",
    "ColumnMeta",
    "ColumnRoleClassifier",
    "DatasetAccessor",
    "Diagnostic",
    "DiffRow",
    "DiffStatus",
    "HEADER_SYNONYMS",
    "Severity",
    "TabularDataset",
    "classify",
    "compare_datasets",
    "load_config",
    "merge_datasets",
    "status_by_ref",
    "summarize_diff",
]
