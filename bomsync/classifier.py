"""
Column role classification for freshly decoded BOM rows.

Turns raw rows from any decoder into a TabularDataset: picks the header row,
decides which columns carry the reference designator, part number,
manufacturer and value, orders columns for display, and validates rows.

Two strategies produce role candidates through the same interface:
- HeaderTextStrategy matches header cells against the synonym tables
- ContentShapeStrategy scores sampled cell values against shape predicates

The strategy is chosen once per dataset: content shape is used only when the
first non-blank row carries no known header name and itself looks like data.

Ambiguity policy: a role with exactly one candidate is assigned. A role that
may span several columns (the reference, under header matching) takes every
candidate. Anything else is left unresolved with a warning; the classifier
never guesses.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .column_profiler import ColumnProfiler
from .config import ClassifierConfig
from .dataset import (
    ColumnMeta,
    Diagnostic,
    Severity,
    TabularDataset,
    column_id_for,
    derive_column_order,
)
from .header_matcher import HeaderMatcher
from .schema import (
    CANONICAL_ROLES,
    MULTI_COLUMN_ROLES,
    ROLE_MANUFACTURER,
    ROLE_PART_NO,
    ROLE_REF,
    ROLE_VALUE,
)
from .validation import validate_dataset

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    ROLE_REF: "Reference",
    ROLE_PART_NO: "Part number",
    ROLE_MANUFACTURER: "Manufacturer",
    ROLE_VALUE: "Value",
}


@dataclass
class RoleCandidates:
    """Columns each strategy considers plausible for each role.

    Attributes:
        strategy: Name of the strategy that produced the candidates
        matches: Role -> candidate column indices, in column order
        multi_column_roles: Roles allowed to keep several candidates
    """
    strategy: str
    matches: Dict[str, List[int]] = field(default_factory=dict)
    multi_column_roles: FrozenSet[str] = frozenset()


class RoleStrategy:
    """Interface shared by the role detection strategies."""

    name = "base"

    def detect(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> RoleCandidates:
        raise NotImplementedError


class HeaderTextStrategy(RoleStrategy):
    """Role detection from header names."""

    name = "header"

    def __init__(self, matcher: HeaderMatcher):
        self.matcher = matcher

    def detect(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> RoleCandidates:
        matches = self.matcher.match_all(header)
        return RoleCandidates(
            strategy=self.name,
            matches={role: matches.get(role, []) for role in CANONICAL_ROLES},
            multi_column_roles=MULTI_COLUMN_ROLES,
        )


class ContentShapeStrategy(RoleStrategy):
    """Role detection from the shape of sampled cell values.

    Roles are scored in the order reference, value, part number,
    manufacturer. A column that uniquely claimed an earlier role is not a
    candidate for later ones, since e.g. "C1" is both reference-shaped and
    part-number-shaped.

    Part numbers that start with letters ("RC0603FR-0710KL", "LM358DR") are
    reference-shaped too, so a headerless BOM using them leaves both the
    reference and part number roles unresolved for manual assignment.
    """

    name = "content"
    role_priority: Tuple[str, ...] = (ROLE_REF, ROLE_VALUE, ROLE_PART_NO, ROLE_MANUFACTURER)

    def __init__(self, profiler: ColumnProfiler, threshold: float = 0.5):
        self.profiler = profiler
        self.threshold = threshold

    def detect(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> RoleCandidates:
        width = max([len(header)] + [len(row) for row in rows])
        profiles = self.profiler.profile_rows(rows, width)

        matches: Dict[str, List[int]] = {}
        claimed = set()
        for role in self.role_priority:
            candidates = [
                index for index, profile in enumerate(profiles)
                if index not in claimed
                and profile['sample_size'] > 0
                and profile['shape_hits'][role] > self.threshold
            ]
            if len(candidates) == 1:
                claimed.add(candidates[0])
            matches[role] = candidates

        return RoleCandidates(
            strategy=self.name,
            matches={role: matches.get(role, []) for role in CANONICAL_ROLES},
        )


def is_blank_row(row: Sequence[str]) -> bool:
    return all(not str(cell).strip() for cell in row)


def _to_text_rows(raw_rows: Sequence[Sequence[Any]]) -> List[List[str]]:
    return [["" if cell is None else str(cell) for cell in row] for row in raw_rows]


class ColumnRoleClassifier:
    """Builds a classified TabularDataset from raw decoder rows."""

    def __init__(self, config: Optional[ClassifierConfig] = None):
        """Initialize the classifier.

        Args:
            config: Classifier settings (defaults when omitted)
        """
        self.config = config or ClassifierConfig()
        self.matcher = HeaderMatcher(self.config.extra_synonyms)
        self.profiler = ColumnProfiler(
            sample_size=self.config.sample_size,
            manufacturer_alpha_ratio=self.config.manufacturer_alpha_ratio,
        )
        self.header_strategy = HeaderTextStrategy(self.matcher)
        self.content_strategy = ContentShapeStrategy(self.profiler, self.config.shape_threshold)

    def select_strategy(self, header: Sequence[str]) -> RoleStrategy:
        """Pick the strategy for a dataset from its first non-blank row."""
        if self.matcher.has_any_match(header):
            return self.header_strategy
        if self.profiler.row_looks_like_data(header):
            return self.content_strategy
        return self.header_strategy

    def classify(self, raw_rows: Sequence[Sequence[Any]]) -> TabularDataset:
        """Classify raw rows into a TabularDataset.

        Leading fully blank rows are skipped; the first non-blank row is the
        header candidate; every later row is data, interior blank rows
        included; trailing fully blank rows are dropped.

        Args:
            raw_rows: Rows from a decoder; rectangularity is not required

        Returns:
            TabularDataset with roles, display order and diagnostics

        Raises:
            ValueError: If no row can serve as header or data start
        """
        rows = _to_text_rows(raw_rows)

        header_index = next((index for index, row in enumerate(rows) if not is_blank_row(row)), None)
        if header_index is None:
            raise ValueError("No header row found: the BOM data is empty or entirely blank")

        header = rows[header_index]
        body: List[Tuple[int, List[str]]] = [(index, rows[index]) for index in range(header_index + 1, len(rows))]
        while body and is_blank_row(body[-1][1]):
            body.pop()

        strategy = self.select_strategy(header)
        if strategy is self.content_strategy:
            # The header candidate is itself data
            body.insert(0, (header_index, header))
            width = max(len(row) for _, row in body)
            columns = tuple(ColumnMeta(column_id_for(index), f"Column {index + 1}") for index in range(width))
        else:
            columns = tuple(ColumnMeta(column_id_for(index), name.strip()) for index, name in enumerate(header))

        data_rows = [row for _, row in body]
        candidates = strategy.detect([column.name for column in columns], data_rows)
        column_roles, role_diagnostics = self._resolve(candidates, columns)

        dataset = TabularDataset(
            rows=data_rows,
            columns=columns,
            column_roles=column_roles,
            column_order=derive_column_order(columns, column_roles),
            row_numbers=[index + 1 for index, _ in body],
        )
        row_diagnostics = validate_dataset(dataset)

        resolved = {role: list(ids) for role, ids in column_roles.items() if ids}
        logger.info(
            f"Classified {len(data_rows)} rows x {len(columns)} columns "
            f"using {strategy.name} strategy; roles: {resolved}"
        )
        if row_diagnostics:
            logger.info(f"Validation produced {len(row_diagnostics)} diagnostics")

        return replace(dataset, diagnostics=tuple(role_diagnostics) + tuple(row_diagnostics))

    def _resolve(
        self,
        candidates: RoleCandidates,
        columns: Sequence[ColumnMeta],
    ) -> Tuple[Dict[str, List[str]], List[Diagnostic]]:
        """Apply the ambiguity policy to role candidates.

        Returns:
            Tuple of (role -> assigned column ids, role-level diagnostics)
        """
        column_roles: Dict[str, List[str]] = {}
        diagnostics: List[Diagnostic] = []

        for role in CANONICAL_ROLES:
            indices = [index for index in candidates.matches.get(role, []) if index < len(columns)]
            label = ROLE_LABELS.get(role, role)

            if len(indices) == 1 or (indices and role in candidates.multi_column_roles):
                column_roles[role] = [columns[index].id for index in indices]
                continue

            column_roles[role] = []
            if indices:
                names = ", ".join(f"'{columns[index].name}' ({columns[index].id})" for index in indices)
                message = f"{label} column is ambiguous between {names}; assign the role manually"
                logger.debug(f"Unresolved role {role}: candidates {names}")
            else:
                message = f"{label} column could not be detected; assign the role manually"
                logger.debug(f"Unresolved role {role}: no candidates")
            diagnostics.append(Diagnostic(message=message, severity=Severity.WARNING))

        return column_roles, diagnostics


def classify(raw_rows: Sequence[Sequence[Any]], config: Optional[ClassifierConfig] = None) -> TabularDataset:
    """Classify raw decoder rows with a default or given configuration."""
    return ColumnRoleClassifier(config).classify(raw_rows)
