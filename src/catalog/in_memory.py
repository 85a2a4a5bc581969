"""
Skill catalog backed by a list held in memory.

Used for offline runs (a skills list exported from the API) and in tests.
Search ranks exact name matches first, then prefix matches, then name
substrings, then category substrings, keeping catalog order inside each tier.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from src.catalog.base import SkillCatalog
from src.catalog.types import SkillEntity
from src.common.string_utils import normalize_term

logger = logging.getLogger(__name__)


class InMemorySkillCatalog(SkillCatalog):
    """A fixed set of skills."""

    def __init__(self, skills: Iterable[SkillEntity]):
        self._skills: List[SkillEntity] = []
        self._by_id: Dict[str, SkillEntity] = {}
        for skill in skills:
            if skill.id in self._by_id:
                logger.debug(f"Duplicate skill id ignored: {skill.id} ({skill.name})")
                continue
            self._by_id[skill.id] = skill
            self._skills.append(skill)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemorySkillCatalog":
        """Load a JSON list of skill records (the full-list API response format)."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Skills file must contain a JSON list: {path}")
        skills = [
            SkillEntity.from_api(record)
            for record in data
            if isinstance(record, dict) and record.get("id") and record.get("name")
        ]
        if len(skills) < len(data):
            logger.warning(f"Skipped {len(data) - len(skills)} skill records without an id or name in {path}")
        logger.info(f"Loaded {len(skills)} skills from {path}")
        return cls(skills)

    def __len__(self) -> int:
        return len(self._skills)

    def get_by_id(self, skill_id: str) -> Optional[SkillEntity]:
        return self._by_id.get(skill_id)

    def search(self, term: str) -> List[SkillEntity]:
        query = term.strip().lower()
        if not query:
            return []
        normalized_query = normalize_term(query)

        exact, prefix, contains, by_category = [], [], [], []
        for skill in self._skills:
            name = skill.name.lower()
            if normalize_term(name) == normalized_query:
                exact.append(skill)
            elif name.startswith(query):
                prefix.append(skill)
            elif query in name:
                contains.append(skill)
            elif skill.category and query in skill.category.lower():
                by_category.append(skill)

        return exact + prefix + contains + by_category

    def all_skill_names(self) -> List[str]:
        return [skill.name for skill in self._skills]
