"""
Confidence scoring and evidence collection for matched skills.
"""

from src.analysis.types import Evidence, EvidenceKind, ScoreComponents, ScoredSkill
from src.analysis.corpus_matching import CorpusMatcher, skill_terms
from src.analysis.evidence import EvidenceCollector
from src.analysis.scoring import ScoringEngine, get_top_scored_skills

__all__ = [
    "Evidence",
    "EvidenceKind",
    "ScoreComponents",
    "ScoredSkill",
    "CorpusMatcher",
    "skill_terms",
    "EvidenceCollector",
    "ScoringEngine",
    "get_top_scored_skills",
]
