"""
Skill Matcher

Resolves the weighted term table to catalog skills in three phases:

1. Direct: each term goes through the alias table, then the catalog search.
   The catalog's first result is accepted only if it is a plausible match
   for the query (see is_reasonable_match).
2. Hierarchy: a directly matched skill passes a share of its raw score to
   the skills it implies ("Next.js" implies "React").
3. Category: optionally, a directly matched skill passes a share of its raw
   score to the skill named after its catalog category.

Implied and category skills are resolved and validated exactly like direct
terms. Matching is greedy, one best candidate per term, and deterministic:
terms are processed in sorted order and the output is ordered by raw score
descending, then skill id.
"""

from typing import Dict, List, Optional

from src.catalog.base import SkillCatalog
from src.catalog.types import SkillEntity
from src.common.error_handling import CatalogUnavailableError, ErrorCollector
from src.common.logger import PipelineLogger, get_logger
from src.common.string_utils import is_whole_word_match, normalize_term
from src.matching.alias_resolver import AliasResolver
from src.matching.search_cache import SearchCache
from src.matching.types import MatchedSkill

# Terms shorter than this are too ambiguous to search for
MIN_TERM_LENGTH = 2

# Prefix matches must cover most of the longer name ("java" vs "javascript" fails)
PREFIX_LENGTH_RATIO = 0.6

# Substring matches must cover at least this share of the candidate name
SUBSTRING_LENGTH_RATIO = 0.25


def is_reasonable_match(query: str, candidate_name: str) -> bool:
    """
    Decide whether a catalog candidate plausibly names the queried technology.

    Accepts any of:
    - equal after normalization ("React.js" / "reactjs")
    - one is a prefix of the other, shorter/longer length >= 0.6
    - the query is a whole word of the candidate ("docker" in "Docker Compose")
    - the query is a non-prefix substring covering >= 1/4 of the candidate
    """
    q = normalize_term(query)
    c = normalize_term(candidate_name)
    if not q or not c:
        return False

    if q == c:
        return True

    if c.startswith(q) or q.startswith(c):
        if min(len(q), len(c)) / max(len(q), len(c)) >= PREFIX_LENGTH_RATIO:
            return True

    if is_whole_word_match(candidate_name.lower(), query.strip().lower()):
        return True

    if q in c and not c.startswith(q):
        return len(q) / len(c) >= SUBSTRING_LENGTH_RATIO

    return False


class SkillMatcher:
    """
    Maps a weighted term table to catalog skills.

    Catalog failures never abort a run. The first CatalogUnavailableError is
    recorded in the ErrorCollector and the catalog is treated as down for
    the rest of the run: terms already in the search cache still resolve,
    everything else is skipped.
    """

    def __init__(
        self,
        catalog: SkillCatalog,
        resolver: AliasResolver,
        errors: Optional[ErrorCollector] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        self.catalog = catalog
        self.resolver = resolver
        self.errors = errors if errors is not None else ErrorCollector()
        self.logger = logger or get_logger(__name__, stage="match")

        self._cache = SearchCache()
        self._catalog_down = False

    # ===== Catalog resolution =====

    def resolve_skill(self, term: str) -> Optional[SkillEntity]:
        """
        Resolve one term to a validated catalog skill.

        The alias table is consulted first and its canonical name is what
        gets searched and validated. Returns None when nothing plausible
        is found or the catalog is unavailable.
        """
        query = self.resolver.resolve_alias(term) or term

        if self._catalog_down and query not in self._cache:
            return None

        try:
            results = self._cache.get_or_search(query, self.catalog.search)
        except CatalogUnavailableError as e:
            self._catalog_down = True
            self.logger.warning(
                f"Skill catalog unavailable while searching '{query}', skipping remaining lookups: {e}"
            )
            self.errors.add_error(
                stage="match",
                operation="catalog_search",
                message=str(e),
                severity="high",
                recoverable=True,
                exception=e,
                term=query,
            )
            return None

        if not results:
            self.logger.debug(f"No catalog result for '{query}'")
            return None

        candidate = results[0]
        if not is_reasonable_match(query, candidate.name):
            self.logger.debug(f"Rejected '{candidate.name}' as a match for '{query}'")
            return None

        return candidate

    # ===== Matching phases =====

    def _match_direct(self, table: Dict[str, float]) -> Dict[str, MatchedSkill]:
        matches: Dict[str, MatchedSkill] = {}

        for term in sorted(table):
            weight = table[term]
            if weight <= 0:
                continue

            query = self.resolver.expand_short_term(term).strip()
            if len(query) < MIN_TERM_LENGTH:
                continue

            skill = self.resolve_skill(query)
            if skill is None:
                continue

            matched = matches.setdefault(skill.id, MatchedSkill(skill=skill))
            matched.raw_score += weight
            matched.matched_terms.add(term)

        return matches

    def _add_contribution(
        self,
        matches: Dict[str, MatchedSkill],
        skill: SkillEntity,
        amount: float,
        source: str,
    ) -> None:
        matched = matches.setdefault(skill.id, MatchedSkill(skill=skill))
        matched.raw_score += amount
        matched.inferred_from.add(source)

    def _hierarchy_for(self, skill: SkillEntity):
        implied = self.resolver.implied_skills(skill.name)
        if not implied:
            canonical = self.resolver.resolve_alias(skill.name)
            if canonical:
                implied = self.resolver.implied_skills(canonical)
        return implied

    def _infer_from_hierarchy(self, matches: Dict[str, MatchedSkill], direct: List[MatchedSkill]) -> None:
        for source in direct:
            for implied_name, weight in self._hierarchy_for(source.skill):
                implied = self.resolve_skill(implied_name)
                if implied is None or implied.id == source.skill.id:
                    continue
                self._add_contribution(matches, implied, source.raw_score * weight, source.skill.name)

    def _infer_from_category(self, matches: Dict[str, MatchedSkill], direct: List[MatchedSkill]) -> None:
        settings = self.resolver.config.category_inference
        if not settings.enabled:
            return

        for source in direct:
            category = source.skill.category
            if not category:
                continue
            category_skill = self.resolve_skill(category)
            if category_skill is None or category_skill.id == source.skill.id:
                continue
            self._add_contribution(
                matches,
                category_skill,
                source.raw_score * settings.weight,
                f"{source.skill.name} (category)",
            )

    def match(self, table: Dict[str, float]) -> List[MatchedSkill]:
        """
        Resolve a weighted term table to matched skills.

        Args:
            table: lowercase term -> accumulated signal weight

        Returns:
            MatchedSkill list sorted by raw score descending, then skill id
        """
        self._cache = SearchCache()
        self._catalog_down = False

        matches = self._match_direct(table)

        # Inference reads the direct scores as they were before any inference
        direct = [
            MatchedSkill(skill=m.skill, matched_terms=set(m.matched_terms), raw_score=m.raw_score)
            for m in sorted(matches.values(), key=lambda m: m.skill.id)
        ]
        self._infer_from_hierarchy(matches, direct)
        self._infer_from_category(matches, direct)

        result = sorted(matches.values(), key=lambda m: (-m.raw_score, m.skill.id))

        self.logger.info(
            f"Matched {len(result)} skills from {len(table)} terms "
            f"({len(direct)} direct, {self._cache.misses} catalog searches)"
        )
        return result

    def get_top_matches(self, table: Dict[str, float], limit: int = 20) -> List[MatchedSkill]:
        return self.match(table)[:limit]

    @property
    def catalog_available(self) -> bool:
        return not self._catalog_down

    @property
    def search_cache(self) -> SearchCache:
        return self._cache
