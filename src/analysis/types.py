"""
Data types for skill scoring.

- Evidence: one activity item supporting a skill
- ScoreComponents: the five 0-100 sub-scores
- ScoredSkill: final, immutable result for one skill
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from src.catalog.types import SkillEntity


class EvidenceKind(str, Enum):
    REPO = "repo"
    COMMIT = "commit"
    PR = "pr"
    STARRED = "starred"


@dataclass(frozen=True)
class Evidence:
    kind: EvidenceKind
    title: str
    url: str
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "title": self.title,
            "url": self.url,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ScoreComponents:
    """Independent sub-scores, each in [0, 100]."""

    language: float = 0.0
    commit: float = 0.0
    pr: float = 0.0
    project_quality: float = 0.0
    recency: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "language": round(self.language, 2),
            "commit": round(self.commit, 2),
            "pr": round(self.pr, 2),
            "project_quality": round(self.project_quality, 2),
            "recency": round(self.recency, 2),
        }


@dataclass(frozen=True)
class ScoredSkill:
    """
    A skill with its confidence score, breakdown, evidence and explanation.

    Created once per run by the ScoringEngine and never modified.
    """

    skill: SkillEntity
    score: int                          # 0-100 confidence
    components: ScoreComponents
    evidence: Tuple[Evidence, ...] = ()
    explanation: str = ""
    inferred_from: FrozenSet[str] = field(default_factory=frozenset)
    matched_terms: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "skill": self.skill.to_dict(),
            "score": self.score,
            "components": self.components.to_dict(),
            "evidence": [e.to_dict() for e in self.evidence],
            "explanation": self.explanation,
            "inferred_from": sorted(self.inferred_from),
            "matched_terms": sorted(self.matched_terms),
        }

    @property
    def evidence_urls(self) -> List[str]:
        return [e.url for e in self.evidence]
