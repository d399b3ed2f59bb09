"""BOM schema definitions: canonical column roles and header synonym tables."""

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple

ROLE_REF = "ref"
ROLE_PART_NO = "part_no"
ROLE_MANUFACTURER = "manufacturer"
ROLE_VALUE = "value"

# Canonical roles, also the display order of role-bearing columns
CANONICAL_ROLES: Tuple[str, ...] = (
    ROLE_REF,
    ROLE_PART_NO,
    ROLE_MANUFACTURER,
    ROLE_VALUE,
)

# Roles that may legitimately span several columns (e.g. "Ref1", "Ref2")
MULTI_COLUMN_ROLES: FrozenSet[str] = frozenset({ROLE_REF})

# Separator used when several reference columns form one join key
REF_SEPARATOR = ", "


def _frozen(table: Dict[str, Tuple[str, ...]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({role: frozenset(names) for role, names in table.items()})


# Exact header names per role, already normalized (lowercase, no whitespace,
# no "_" or "-"). Covers English, Japanese, Chinese, German and French forms.
HEADER_SYNONYMS: Mapping[str, FrozenSet[str]] = _frozen({
    ROLE_REF: (
        "ref", "refs", "reference", "references", "refdes", "refdesignator",
        "referencedesignator", "referencedesignators", "designator",
        "designators", "designation", "designations", "partreference",
        "部品番号", "部番", "参照", "リファレンス", "位号", "位置号",
        "referenz", "bauteilreferenz", "repère", "repere",
    ),
    ROLE_PART_NO: (
        "partno", "partnumber", "partnr", "part", "part#", "pn", "p/n",
        "mpn", "mfrpn", "mfgpn", "mfrpartnumber", "mfgpartnumber",
        "manufacturerpartnumber", "manufacturerpn", "name",
        "型番", "品番", "部品型番", "部品名", "型号", "料号",
        "teilenummer", "artikelnummer", "numérodepièce",
    ),
    ROLE_MANUFACTURER: (
        "manufacturer", "manufacturers", "manufacturername", "mfr", "mfg",
        "mfgr", "mfg.", "maker", "make", "vendor", "vendorname", "supplier",
        "brand", "メーカー", "メーカー名", "製造元", "製造会社", "供給元",
        "厂商", "制造商", "厂家", "hersteller", "fabricant",
    ),
    ROLE_VALUE: (
        "value", "values", "val", "componentvalue", "値", "定数", "仕様",
        "数値", "值", "参数", "wert", "valeur",
    ),
})

# Substrings that mark a role when no exact synonym matched
HEADER_CONTAINS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    ROLE_REF: ("designator", "refdes", "部品番号", "部番", "参照"),
    ROLE_PART_NO: ("partno", "partnumber", "mpn", "型番", "品番", "teilenummer"),
    ROLE_VALUE: ("value", "仕様", "定数"),
    ROLE_MANUFACTURER: ("manufacturer", "maker", "vendor", "hersteller", "メーカー", "製造"),
})

# Substrings that veto a contains-match for the role
HEADER_EXCLUDES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    ROLE_REF: (),
    ROLE_PART_NO: (),
    ROLE_VALUE: ("partno", "partnumber"),
    ROLE_MANUFACTURER: ("part", "pn", "number", "型番", "品番"),
})

# Enumerated variants accepted by prefix: (prefix, max normalized length).
# "ref1", "ref2", "refa" are references; "reference" is matched exactly.
HEADER_PREFIXES: Mapping[str, Tuple[Tuple[str, int], ...]] = MappingProxyType({
    ROLE_REF: (("ref", 5),),
})

__all__ = [
    "ROLE_REF",
    "ROLE_PART_NO",
    "ROLE_MANUFACTURER",
    "ROLE_VALUE",
    "CANONICAL_ROLES",
    "MULTI_COLUMN_ROLES",
    "REF_SEPARATOR",
    "HEADER_SYNONYMS",
    "HEADER_CONTAINS",
    "HEADER_EXCLUDES",
    "HEADER_PREFIXES",
]
