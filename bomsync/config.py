"""Configuration for column role classification."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .schema import CANONICAL_ROLES

logger = logging.getLogger(__name__)


class ClassifierConfig(BaseModel):
    """Tuning knobs for the column role classifier."""

    sample_size: int = Field(
        default=200,
        ge=1,
        description="Maximum number of non-empty values sampled per column for content-shape scoring",
    )
    shape_threshold: float = Field(
        default=0.5,
        ge=0.0,
        lt=1.0,
        description="A column matches a shape when its share of matching sampled values is above this",
    )
    manufacturer_alpha_ratio: float = Field(
        default=0.7,
        gt=0.0,
        le=1.0,
        description="Minimum share of letters among non-space characters for a manufacturer-shaped value",
    )
    extra_synonyms: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Additional header synonyms per role, merged with the built-in tables",
    )

    @field_validator("extra_synonyms")
    @classmethod
    def validate_extra_synonyms(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        """Only canonical roles may receive extra synonyms."""
        unknown = sorted(set(v) - set(CANONICAL_ROLES))
        if unknown:
            raise ValueError(f"Unknown roles in extra_synonyms: {', '.join(unknown)}")
        return v


def load_config(config_path: Optional[Union[str, Path]] = None) -> ClassifierConfig:
    """Load classifier configuration from a YAML file.

    Args:
        config_path: Path to the YAML file. When omitted or missing, the
            defaults are returned.

    Returns:
        Validated ClassifierConfig

    Raises:
        ValueError: If the document is not a mapping or fails validation
        yaml.YAMLError: If the file is not valid YAML
    """
    if config_path is None:
        return ClassifierConfig()

    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}; using defaults")
        return ClassifierConfig()

    logger.debug(f"Loading configuration from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)

    if config_data is None:
        return ClassifierConfig()
    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")

    return ClassifierConfig(**config_data)
