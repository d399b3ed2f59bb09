"""Tests for classifier configuration loading."""

import pytest
from pydantic import ValidationError

from bomsync.config import ClassifierConfig, load_config


class TestClassifierConfig:

    def test_defaults(self):
        config = ClassifierConfig()

        assert config.sample_size == 200
        assert config.shape_threshold == 0.5
        assert config.manufacturer_alpha_ratio == 0.7
        assert config.extra_synonyms == {}

    @pytest.mark.parametrize("field, value", [
        ("sample_size", 0),
        ("shape_threshold", 1.0),
        ("manufacturer_alpha_ratio", 0.0),
    ])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            ClassifierConfig(**{field: value})

    def test_unknown_synonym_role(self):
        with pytest.raises(ValidationError, match="Unknown roles in extra_synonyms: quantity"):
            ClassifierConfig(extra_synonyms={"quantity": ["Qty"]})


class TestLoadConfig:

    def test_no_path(self):
        assert load_config() == ClassifierConfig()

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == ClassifierConfig()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "bomsync.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == ClassifierConfig()

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "bomsync.yaml"
        path.write_text(
            "sample_size: 50\n"
            "shape_threshold: 0.6\n"
            "extra_synonyms:\n"
            "  part_no:\n"
            "    - Order Code\n"
            "  manufacturer:\n"
            "    - 製造者\n",
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.sample_size == 50
        assert config.shape_threshold == 0.6
        assert config.manufacturer_alpha_ratio == 0.7
        assert config.extra_synonyms == {"part_no": ["Order Code"], "manufacturer": ["製造者"]}

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "bomsync.yaml"
        path.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(path)
