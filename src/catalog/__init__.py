"""
Skill catalog boundary: canonical skill entities and how to search them.
"""

from src.catalog.types import SkillEntity
from src.catalog.base import SkillCatalog
from src.catalog.in_memory import InMemorySkillCatalog
from src.catalog.standardized_skills_client import StandardizedSkillsClient

__all__ = [
    "SkillEntity",
    "SkillCatalog",
    "InMemorySkillCatalog",
    "StandardizedSkillsClient",
]
