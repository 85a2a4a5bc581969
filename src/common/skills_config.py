"""
Skills configuration: alias tables, hierarchy, scoring weights, thresholds.

The configuration is a JSON document (data/skills_config.json by default,
SKILLS_CONFIG_PATH to override) validated with pydantic. Loading is fail-fast:
a missing file, invalid JSON or a schema violation raises SkillsConfigError.
There are no built-in fallback values for weights, thresholds or tables.

Usage:
    config = load_skills_config()
    config.scoring.weights.language  # 0.35
"""

import json
import math
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from src.common.config import Config
from src.common.error_handling import SkillsConfigError
from src.common.logger import get_logger

logger = get_logger(__name__)

# Tolerance for the weights-sum-to-one check
WEIGHT_SUM_TOLERANCE = 1e-6

DEFAULT_IMPLIED_WEIGHT = 0.7
DEFAULT_CATEGORY_WEIGHT = 0.5


class _ConfigModel(BaseModel):
    """Accepts camelCase keys from the JSON file and snake_case from code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ScoringWeights(_ConfigModel):
    language: float = Field(..., ge=0, le=1)
    commits: float = Field(..., ge=0, le=1)
    prs: float = Field(..., ge=0, le=1)
    project_quality: float = Field(..., alias="projectQuality", ge=0, le=1)
    recency: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        """Scores stay within [baseScore, 100] only if the weights sum to 1."""
        total = self.language + self.commits + self.prs + self.project_quality + self.recency
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"scoring weights must sum to 1.0, got {total:.4f}")
        return self


class ScoringSettings(_ConfigModel):
    weights: ScoringWeights
    base_score: float = Field(..., alias="baseScore", ge=0, le=100)
    max_score: float = Field(..., alias="maxScore", gt=0, le=100)
    min_score_threshold: float = Field(..., alias="minScoreThreshold", ge=0, le=100)

    @model_validator(mode="after")
    def base_not_above_max(self):
        """A fractional base counts as the next whole score."""
        if math.ceil(self.base_score) > self.max_score:
            raise ValueError(
                f"baseScore ({self.base_score}) cannot exceed maxScore ({self.max_score})"
            )
        return self


class ExplanationThresholds(_ConfigModel):
    language_strong: float = Field(..., alias="languageStrong")
    language_moderate: float = Field(..., alias="languageModerate")
    commit_active: float = Field(..., alias="commitActive")
    pr_significant: float = Field(..., alias="prSignificant")
    project_quality: float = Field(..., alias="projectQuality")
    recency_recent: float = Field(..., alias="recencyRecent")
    recency_ongoing: float = Field(..., alias="recencyOngoing")
    score_solid: float = Field(..., alias="scoreSolid")
    score_working: float = Field(..., alias="scoreWorking")


class EvidenceLimits(_ConfigModel):
    max_per_skill: int = Field(..., alias="maxPerSkill", ge=0)
    repo_limit: int = Field(..., alias="repoLimit", ge=0)
    pr_limit: int = Field(..., alias="prLimit", ge=0)
    commit_limit: int = Field(..., alias="commitLimit", ge=0)
    star_limit: int = Field(..., alias="starLimit", ge=0)


class OutputSettings(_ConfigModel):
    enable_skill_limit: bool = Field(..., alias="enableSkillLimit")
    max_skills_to_report: int = Field(..., alias="maxSkillsToReport", ge=1)


class CategoryInferenceSettings(_ConfigModel):
    enabled: bool
    weight: float = Field(DEFAULT_CATEGORY_WEIGHT, ge=0)


class SkillHierarchyEntry(_ConfigModel):
    """Skills implied by a parent skill ("React Native" implies "React")."""

    implies: List[str]
    weight: float = Field(DEFAULT_IMPLIED_WEIGHT, ge=0)


class SkillsConfig(_ConfigModel):
    """
    Root of the skills configuration document.
    """

    short_term_expansions: Dict[str, str] = Field(..., alias="shortTermExpansions")
    skill_aliases: Dict[str, List[str]] = Field(..., alias="skillAliases")
    language_aliases: Dict[str, List[str]] = Field(..., alias="languageAliases")
    extension_to_tech: Dict[str, str] = Field(..., alias="extensionToTech")
    special_files: Dict[str, str] = Field(..., alias="specialFiles")
    skill_hierarchy: Dict[str, SkillHierarchyEntry] = Field(..., alias="skillHierarchy")
    category_inference: CategoryInferenceSettings = Field(..., alias="categoryInference")
    scoring: ScoringSettings
    explanation_thresholds: ExplanationThresholds = Field(..., alias="explanationThresholds")
    evidence: EvidenceLimits
    output: OutputSettings

    @field_validator("skill_aliases", "language_aliases", mode="before")
    @classmethod
    def coerce_alias_lists(cls, value):
        """Alias groups may be written as a single string instead of a list."""
        if not isinstance(value, dict):
            return value
        return {key: cls._coerce_to_list(aliases) for key, aliases in value.items()}

    @field_validator("short_term_expansions", mode="before")
    @classmethod
    def lowercase_short_terms(cls, value):
        if not isinstance(value, dict):
            return value
        return {str(key).lower(): expansion for key, expansion in value.items()}

    @staticmethod
    def _coerce_to_list(value: Union[str, List[str], tuple, None]) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)

    @classmethod
    def from_dict(cls, data: Dict) -> "SkillsConfig":
        """
        Validate a pre-loaded configuration dictionary.

        Raises:
            SkillsConfigError: If the data does not match the schema
        """
        if not isinstance(data, dict):
            raise SkillsConfigError(
                f"Skills configuration must be a JSON object, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SkillsConfigError(f"Invalid skills configuration: {e}") from e


def load_skills_config(path: Optional[Union[str, Path]] = None) -> SkillsConfig:
    """
    Load and validate the skills configuration file.

    Args:
        path: Configuration file path. Defaults to Config.SKILLS_CONFIG_PATH.

    Returns:
        Validated SkillsConfig

    Raises:
        SkillsConfigError: If the file is missing, unreadable or invalid
    """
    config_path = Path(path) if path else Path(Config.SKILLS_CONFIG_PATH)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        logger.error(f"Skills config file not found: {config_path}")
        raise SkillsConfigError(
            f"Skills configuration file not found: {config_path}. "
            f"Set SKILLS_CONFIG_PATH to point at a valid file."
        ) from e
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in skills config {config_path}: {e}")
        raise SkillsConfigError(f"Invalid JSON in skills configuration {config_path}: {e}") from e
    except OSError as e:
        logger.error(f"Could not read skills config {config_path}: {e}")
        raise SkillsConfigError(f"Could not read skills configuration {config_path}: {e}") from e

    config = SkillsConfig.from_dict(data)
    logger.info(
        f"Loaded skills config: {len(config.skill_aliases)} alias groups, "
        f"{len(config.extension_to_tech)} extensions, {len(config.skill_hierarchy)} hierarchy entries"
    )
    return config
