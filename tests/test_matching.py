"""Tests for rule-engine match predicates."""

import pytest

from bomsync.accessor import DatasetAccessor
from bomsync.dataset import TabularDataset
from bomsync.matching import (
    MatchCondition,
    MatchType,
    condition_matches,
    field_value,
    value_matches,
    wildcard_match,
)


@pytest.fixture
def accessor():
    ds = TabularDataset.from_rows(
        [["R1", "RC0603FR-0710KL", "Yageo", "10k", "0603"]],
        headers=["Ref", "Part No", "Maker", "Value", "Package"],
        column_roles={"ref": ["col-0"], "part_no": ["col-1"], "manufacturer": ["col-2"], "value": ["col-3"]},
    )
    return DatasetAccessor(ds)


class TestValueMatches:

    @pytest.mark.parametrize("target, pattern, match_type", [
        ("GRM188", "grm188", "equals"),
        ("GRM188R71H104", "R71", "contains"),
        ("GRM188R71H104", "grm", "starts_with"),
        ("GRM188R71H104", "H104", "ends_with"),
        ("GRM188R71H104", "GRM*104", "wildcard"),
        ("GRM188", "GRM188", MatchType.EQUALS),
    ])
    def test_match_types(self, target, pattern, match_type):
        assert value_matches(target, pattern, match_type)

    def test_mismatches(self):
        assert not value_matches("GRM188", "GRM18", "equals")
        assert not value_matches("GRM188", "xyz", "contains")
        assert not value_matches("GRM188", "188", "starts_with")
        assert not value_matches("GRM188", "GRM", "ends_with")

    def test_default_is_wildcard_when_pattern_has_star(self):
        assert value_matches("RC0603FR-0710KL", "RC0603*")
        assert not value_matches("RC0603FR-0710KL", "RC0603")

    def test_unknown_match_type_falls_back(self):
        assert value_matches("GRM188", "grm*", "fuzzy")
        assert value_matches("GRM188", "grm188", " Fuzzy ")

    def test_non_string_match_type_falls_back(self):
        assert value_matches("GRM188", "grm*", 3)
        assert value_matches("GRM188", "grm188", 3)
        assert not value_matches("GRM188", "grm", 3)


class TestWildcardMatch:

    def test_star_alone_matches_anything(self):
        assert wildcard_match("anything", "*")
        assert wildcard_match("", "*")

    def test_only_star_is_special(self):
        assert wildcard_match("a.b", "a.b")
        assert not wildcard_match("axb", "a.b")
        assert not wildcard_match("ab", "a?")

    def test_anchored(self):
        assert wildcard_match("abc", "a*c")
        assert not wildcard_match("abcd", "a*c")
        assert wildcard_match("abcabc", "*bc*bc")


class TestConditions:

    @pytest.mark.parametrize("field, expected", [
        ("ref", "R1"),
        ("Reference", "R1"),
        ("partno", "RC0603FR-0710KL"),
        ("部品型番", "RC0603FR-0710KL"),
        ("manufacturer", "Yageo"),
        ("value", "10k"),
        ("package", "0603"),
    ])
    def test_field_value(self, accessor, field, expected):
        assert field_value(accessor, 0, field) == expected

    def test_unknown_field(self, accessor):
        assert field_value(accessor, 0, "footprint") is None
        assert not condition_matches(accessor, 0, MatchCondition("footprint", "wildcard", "*"))

    def test_condition_matches(self, accessor):
        assert condition_matches(accessor, 0, MatchCondition("part_no", MatchType.STARTS_WITH, "rc0603"))
        assert condition_matches(accessor, 0, MatchCondition("Package", None, "0603"))
        assert not condition_matches(accessor, 0, MatchCondition("manufacturer", "equals", "Murata"))
