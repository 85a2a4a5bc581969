"""
Standardized Skills API client.

Endpoints (relative to SKILLS_API_BASE):
- GET /standardized-skills/skills?disablePagination=true  full list
- GET /standardized-skills/skills/autocomplete?term=&size=  prefix search
- GET /standardized-skills/skills/fuzzymatch?term=&size=  fuzzy search

search() asks autocomplete first and falls back to fuzzy match when
autocomplete has nothing. Requests are retried with exponential backoff;
once retries are exhausted the failure surfaces as CatalogUnavailableError.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.catalog.base import SkillCatalog
from src.catalog.types import SkillEntity
from src.common.config import Config
from src.common.error_handling import CatalogUnavailableError

logger = logging.getLogger(__name__)


class StandardizedSkillsClient(SkillCatalog):
    """HTTP client for the standardized skills catalog."""

    SKILLS_PATH = "/standardized-skills/skills"
    AUTOCOMPLETE_PATH = "/standardized-skills/skills/autocomplete"
    FUZZY_MATCH_PATH = "/standardized-skills/skills/fuzzymatch"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        search_size: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or Config.SKILLS_API_BASE).rstrip("/")
        self.timeout = timeout or Config.SKILLS_API_TIMEOUT
        self.search_size = search_size or Config.SKILLS_API_SEARCH_SIZE
        self.session = session or requests.Session()
        self._all_skills: Optional[List[SkillEntity]] = None

    @retry(
        retry=retry_if_exception_type(requests.exceptions.RequestException),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.session.get(
            f"{self.base_url}{path}",
            params=params,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def _request(self, path: str, params: Optional[Dict[str, Any]] = None, term: Optional[str] = None) -> Any:
        try:
            return self._get_json(path, params)
        except requests.exceptions.Timeout as e:
            logger.error(f"Skills API request timed out: {path}")
            raise CatalogUnavailableError(f"Skills API timed out: {path}", term=term) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Skills API request failed: {path}: {e}")
            raise CatalogUnavailableError(f"Skills API request failed: {e}", term=term) from e
        except ValueError as e:
            # Response body was not JSON
            logger.error(f"Skills API returned invalid JSON: {path}: {e}")
            raise CatalogUnavailableError(f"Skills API returned invalid JSON: {path}", term=term) from e

    @staticmethod
    def _to_entities(data: Any) -> List[SkillEntity]:
        if isinstance(data, dict):
            # Some deployments wrap the list in an object
            data = data.get("result", data.get("data", []))
        if not isinstance(data, list):
            return []
        return [
            SkillEntity.from_api(record)
            for record in data
            if isinstance(record, dict) and record.get("id") and record.get("name")
        ]

    def get_all_skills(self) -> List[SkillEntity]:
        """Full skills list, fetched once per client."""
        if self._all_skills is None:
            data = self._request(self.SKILLS_PATH, {"disablePagination": "true"})
            self._all_skills = self._to_entities(data)
            logger.info(f"Loaded {len(self._all_skills)} skills from {self.base_url}")
        return list(self._all_skills)

    def autocomplete(self, term: str) -> List[SkillEntity]:
        data = self._request(self.AUTOCOMPLETE_PATH, {"term": term, "size": self.search_size}, term=term)
        return self._to_entities(data)

    def fuzzy_match(self, term: str) -> List[SkillEntity]:
        data = self._request(self.FUZZY_MATCH_PATH, {"term": term, "size": self.search_size}, term=term)
        return self._to_entities(data)

    def search(self, term: str) -> List[SkillEntity]:
        if not term.strip():
            return []
        results = self.autocomplete(term)
        if results:
            return results
        logger.debug(f"No autocomplete hit for '{term}', trying fuzzy match")
        return self.fuzzy_match(term)

    def all_skill_names(self) -> List[str]:
        return [skill.name for skill in self.get_all_skills()]
