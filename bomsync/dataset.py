"""
Canonical tabular model for ingested BOM data.

A TabularDataset keeps the decoder's rows verbatim (blank cells, interior
blank rows and ragged rows included) next to a role map that says which
columns carry which meaning. Any structured view (ref, part number, ...) is
derived on demand through DatasetAccessor; it is never stored alongside the
raw rows.

Datasets are values: every operation in this package returns a new instance
instead of mutating an existing one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .schema import CANONICAL_ROLES

COLUMN_ID_PREFIX = "col-"


def column_id_for(index: int) -> str:
    """Return the stable positional id of the column at ``index``."""
    return f"{COLUMN_ID_PREFIX}{index}"


class Severity(str, Enum):
    """Severity of an advisory diagnostic. Never blocks processing."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ColumnMeta:
    """A column: stable positional id plus the display name from the header."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Diagnostic:
    """
    An advisory validation finding.

    ``row`` is the 1-based source line number and ``column`` the 0-based
    column index; either may be None when the finding is dataset-wide.
    """
    message: str
    severity: Severity = Severity.WARNING
    row: Optional[int] = None
    column: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "row": self.row,
            "column": self.column,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Diagnostic":
        return cls(
            message=str(data.get("message", "")),
            severity=Severity(data.get("severity", Severity.WARNING.value)),
            row=data.get("row"),
            column=data.get("column"),
        )


def _freeze_roles(column_roles: Mapping[str, Iterable[str]]) -> Mapping[str, Tuple[str, ...]]:
    frozen: Dict[str, Tuple[str, ...]] = {}
    for role, column_ids in column_roles.items():
        # Keep assignment order, drop repeated ids
        frozen[role] = tuple(dict.fromkeys(column_ids))
    return MappingProxyType(frozen)


def derive_column_order(
    columns: Sequence[ColumnMeta],
    column_roles: Mapping[str, Sequence[str]],
) -> Tuple[str, ...]:
    """
    Compute the display order of columns.

    Reference columns come first (in detected order), then part number,
    manufacturer and value columns, then every remaining column in its
    original position.

    Args:
        columns: Columns in original order
        column_roles: Role name -> assigned column ids

    Returns:
        Tuple of column ids in display order
    """
    known_ids = [column.id for column in columns]
    order: List[str] = []
    for role in CANONICAL_ROLES:
        for column_id in column_roles.get(role, ()):
            if column_id in known_ids and column_id not in order:
                order.append(column_id)
    order.extend(column_id for column_id in known_ids if column_id not in order)
    return tuple(order)


@dataclass(frozen=True)
class TabularDataset:
    """
    Immutable BOM dataset: raw rows, column metadata and role map.

    Attributes:
        rows: Data rows as ingested, excluding the header row. Rows may be
            shorter or longer than ``columns``.
        columns: Column metadata in original order
        column_roles: Role name -> column ids, in assignment order. A role may
            map to zero, one or many columns.
        column_order: Column ids in display/export order. Never semantic.
        row_numbers: Original 1-based source line number of each row;
            defaults to 1..n when omitted
        diagnostics: Advisory findings collected during classification
    """
    rows: Tuple[Tuple[str, ...], ...]
    columns: Tuple[ColumnMeta, ...]
    column_roles: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    column_order: Tuple[str, ...] = ()
    row_numbers: Tuple[int, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()

    def __post_init__(self):
        # Coerce containers so instances stay immutable whatever the caller passed
        object.__setattr__(self, "rows", tuple(tuple(str(cell) for cell in row) for row in self.rows))
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "column_roles", _freeze_roles(self.column_roles))
        object.__setattr__(self, "column_order", tuple(self.column_order))
        # Rows without explicit source line numbers are numbered 1..n
        row_numbers = tuple(self.row_numbers) or tuple(range(1, len(self.rows) + 1))
        object.__setattr__(self, "row_numbers", row_numbers)
        object.__setattr__(self, "diagnostics", tuple(self.diagnostics))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[str]],
        headers: Optional[Sequence[str]] = None,
        column_roles: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> "TabularDataset":
        """
        Build a dataset directly from rows and an explicit role map.

        Args:
            rows: Data rows (no header row)
            headers: Header names; defaults to "Column N" for the widest row
            column_roles: Role name -> column ids (e.g. {"ref": ["col-0"]})

        Returns:
            TabularDataset with positional ids and row numbers 1..n
        """
        if headers is None:
            width = max((len(row) for row in rows), default=0)
            headers = [f"Column {index + 1}" for index in range(width)]
        columns = tuple(ColumnMeta(column_id_for(index), str(name)) for index, name in enumerate(headers))
        roles = dict(column_roles or {})
        return cls(
            rows=rows,
            columns=columns,
            column_roles=roles,
            column_order=derive_column_order(columns, roles),
            row_numbers=range(1, len(rows) + 1),
        )

    @classmethod
    def empty(cls) -> "TabularDataset":
        """The dataset with no rows and no columns."""
        return cls(rows=(), columns=())

    def with_roles(self, column_roles: Mapping[str, Sequence[str]]) -> "TabularDataset":
        """
        Return a copy with a new role map and a recomputed display order.

        This is the only sanctioned way to change role assignments; diff and
        merge treat the role map as read-only.
        """
        roles = dict(column_roles)
        return replace(
            self,
            column_roles=roles,
            column_order=derive_column_order(self.columns, roles),
        )

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    @property
    def headers(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def column_ids(self) -> List[str]:
        return [column.id for column in self.columns]

    def column_index(self, column_id: str) -> Optional[int]:
        """Return the positional index of ``column_id``, or None if unknown."""
        for index, column in enumerate(self.columns):
            if column.id == column_id:
                return index
        return None

    def column_id_at(self, index: int) -> str:
        """Column id for a positional index, including indices past the header."""
        if 0 <= index < len(self.columns):
            return self.columns[index].id
        return column_id_for(index)

    def role_of(self, column_id: str) -> Optional[str]:
        """Return the first role a column is assigned to, if any."""
        for role, column_ids in self.column_roles.items():
            if column_id in column_ids:
                return role
        return None

    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    def __len__(self) -> int:
        return len(self.rows)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stable JSON shape consumed by exporters and the UI."""
        return {
            "rows": [list(row) for row in self.rows],
            "headers": self.headers,
            "columns": [column.to_dict() for column in self.columns],
            "column_roles": {role: list(ids) for role, ids in self.column_roles.items()},
            "column_order": list(self.column_order),
            "row_numbers": list(self.row_numbers),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TabularDataset":
        """Rebuild a dataset from ``to_dict()`` output."""
        rows = data.get("rows", [])
        if data.get("columns"):
            columns = tuple(ColumnMeta(str(c["id"]), str(c.get("name", ""))) for c in data["columns"])
        else:
            columns = tuple(
                ColumnMeta(column_id_for(index), str(name))
                for index, name in enumerate(data.get("headers", []))
            )
        roles = data.get("column_roles", {})
        return cls(
            rows=rows,
            columns=columns,
            column_roles=roles,
            column_order=data.get("column_order") or derive_column_order(columns, roles),
            row_numbers=data.get("row_numbers") or range(1, len(rows) + 1),
            diagnostics=tuple(Diagnostic.from_dict(d) for d in data.get("diagnostics", [])),
        )
