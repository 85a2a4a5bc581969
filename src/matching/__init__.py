"""
Term to skill matching: alias tables, catalog search, hierarchy inference.
"""

from src.matching.alias_resolver import AliasResolver
from src.matching.search_cache import SearchCache
from src.matching.skill_matcher import SkillMatcher, is_reasonable_match
from src.matching.types import MatchedSkill

__all__ = [
    "AliasResolver",
    "SearchCache",
    "SkillMatcher",
    "is_reasonable_match",
    "MatchedSkill",
]
