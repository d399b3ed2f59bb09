import re
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .schema import (
    HEADER_CONTAINS,
    HEADER_EXCLUDES,
    HEADER_PREFIXES,
    HEADER_SYNONYMS,
)

_SEPARATORS = re.compile(r'[\s_\-]+')


def normalize_header(raw: str) -> str:
    """Normalize a header cell: lowercase, with whitespace, "_" and "-" removed.

    "Part No" -> "partno", "  REF  " -> "ref", "Ref_Des" -> "refdes"
    """
    if not raw:
        return ""
    return _SEPARATORS.sub('', str(raw).strip().lower())


class HeaderMatcher:
    """Maps header text to column roles using the synonym tables.

    Matching runs in three passes per header, first hit wins:
    exact synonym, enumerated prefix (e.g. "Ref1"), then substring with
    per-role exclusions.
    """

    def __init__(self, extra_synonyms: Optional[Mapping[str, Iterable[str]]] = None):
        """Initialize the matcher.

        Args:
            extra_synonyms: Additional header names per role. They are merged
                into a private copy; the module tables are never modified.
        """
        synonyms: Dict[str, FrozenSet[str]] = dict(HEADER_SYNONYMS)
        for role, names in (extra_synonyms or {}).items():
            extra = {normalize_header(name) for name in names if normalize_header(name)}
            synonyms[role] = synonyms.get(role, frozenset()) | frozenset(extra)
        self._synonyms = synonyms

        # Forward lookup: normalized synonym -> role
        self._synonym_to_role: Dict[str, str] = {}
        for role, names in synonyms.items():
            for name in names:
                self._synonym_to_role.setdefault(name, role)

    @property
    def roles(self) -> List[str]:
        return list(self._synonyms.keys())

    def match(self, header: str) -> Optional[str]:
        """Return the role a header names, or None.

        Args:
            header: Raw header cell text

        Returns:
            Role name if the header matches, None otherwise
        """
        normalized = normalize_header(header)
        if not normalized:
            return None

        # Direct lookup
        if normalized in self._synonym_to_role:
            return self._synonym_to_role[normalized]

        # Enumerated variants ("ref1", "ref2", "refa")
        for role, prefixes in HEADER_PREFIXES.items():
            for prefix, max_length in prefixes:
                if normalized.startswith(prefix) and len(normalized) <= max_length:
                    return role

        # Partial matching (contains), vetoed by exclusions
        for role, needles in HEADER_CONTAINS.items():
            if any(needle in normalized for needle in needles):
                if not any(veto in normalized for veto in HEADER_EXCLUDES.get(role, ())):
                    return role

        return None

    def match_all(self, headers: Sequence[str]) -> Dict[str, List[int]]:
        """Group column indices by matched role, in column order.

        Args:
            headers: Header row cells

        Returns:
            Dictionary mapping each role to the indices of matching columns
            (roles with no match map to an empty list)
        """
        matches: Dict[str, List[int]] = {role: [] for role in self._synonyms}
        for index, header in enumerate(headers):
            role = self.match(header)
            if role is not None:
                matches.setdefault(role, []).append(index)
        return matches

    def has_any_match(self, headers: Sequence[str]) -> bool:
        return any(self.match(header) for header in headers)
