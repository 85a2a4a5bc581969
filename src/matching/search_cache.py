"""
Per-run memoization of catalog searches.
"""

from typing import Callable, Dict, List

from src.catalog.types import SkillEntity
from src.common.string_utils import normalize_term


class SearchCache:
    """
    Read-through cache keyed by normalized query.

    One instance lives for one matching run, so the same term reached from
    several places ("JavaScript" implied by both React and Node.js) is only
    searched once. Failed searches are not cached.
    """

    def __init__(self):
        self._results: Dict[str, List[SkillEntity]] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(term: str) -> str:
        return normalize_term(term)

    def __contains__(self, term: str) -> bool:
        return self.key(term) in self._results

    def __len__(self) -> int:
        return len(self._results)

    def get_or_search(self, term: str, search: Callable[[str], List[SkillEntity]]) -> List[SkillEntity]:
        """Return cached results for the term, calling `search` on a miss."""
        key = self.key(term)
        if key in self._results:
            self.hits += 1
            return self._results[key]

        self.misses += 1
        results = list(search(term))
        self._results[key] = results
        return results

    def clear(self) -> None:
        self._results.clear()
        self.hits = 0
        self.misses = 0
