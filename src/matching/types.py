"""
Data types produced by skill matching.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Set

from src.catalog.types import SkillEntity


@dataclass
class MatchedSkill:
    """
    A catalog skill with the weighted terms that resolved to it.

    There is exactly one MatchedSkill per skill id in a run. Contributions
    from several terms, implications and categories are summed into
    raw_score, which is only meaningful relative to other matches.
    """

    skill: SkillEntity
    matched_terms: Set[str] = field(default_factory=set)  # Raw terms resolved directly to this skill
    raw_score: float = 0.0
    inferred_from: Set[str] = field(default_factory=set)  # Skills whose hierarchy/category implied this one

    @property
    def is_inferred_only(self) -> bool:
        return not self.matched_terms

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "skill": self.skill.to_dict(),
            "matched_terms": sorted(self.matched_terms),
            "raw_score": round(self.raw_score, 4),
            "inferred_from": sorted(self.inferred_from),
        }
