"""
Abstract interface for skill catalogs.
"""

from abc import ABC, abstractmethod
from typing import List

from src.catalog.types import SkillEntity


class SkillCatalog(ABC):
    """
    Source of canonical skill entities.

    Implementations:
    - InMemorySkillCatalog: a fixed list of skills (offline runs, tests)
    - StandardizedSkillsClient: the standardized skills HTTP API
    """

    @abstractmethod
    def search(self, term: str) -> List[SkillEntity]:
        """
        Search for skills matching a free-form term.

        Returns:
            Skills ordered by the catalog's own relevance, best first

        Raises:
            CatalogUnavailableError: If the catalog cannot be reached
        """
        pass

    @abstractmethod
    def all_skill_names(self) -> List[str]:
        """Names of every skill in the catalog, for whole-word text scanning."""
        pass

    def get_catalog_name(self) -> str:
        return type(self).__name__
