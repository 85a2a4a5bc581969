"""
Unit tests for src/matching/skill_matcher.py

Tests plausibility checks, the three matching phases, caching and
graceful degradation when the catalog goes down.
"""

import pytest

from src.catalog.in_memory import InMemorySkillCatalog
from src.catalog.types import SkillEntity
from src.common.error_handling import CatalogUnavailableError, ErrorCollector
from src.common.skills_config import SkillsConfig
from src.matching.alias_resolver import AliasResolver
from src.matching.search_cache import SearchCache
from src.matching.skill_matcher import SkillMatcher, is_reasonable_match


class CountingCatalog(InMemorySkillCatalog):
    """In-memory catalog that records every search and can fail after N calls."""

    def __init__(self, skills, fail_after=None):
        super().__init__(skills)
        self.queries = []
        self.fail_after = fail_after

    def search(self, term):
        if self.fail_after is not None and len(self.queries) >= self.fail_after:
            raise CatalogUnavailableError("connection refused", term=term)
        self.queries.append(term)
        return super().search(term)


@pytest.fixture
def counting_catalog(catalog):
    return CountingCatalog([catalog.get_by_id(i) for i in ("sk-ts", "sk-react", "sk-js", "sk-python", "sk-docker", "sk-gcloud")])


@pytest.fixture
def typescript_table():
    return {"typescript": 17.0, "javascript": 2.0, "react": 2.0}


# ===== TESTS: is_reasonable_match =====

class TestIsReasonableMatch:

    @pytest.mark.parametrize("query,candidate", [
        ("typescript", "TypeScript"),
        ("reactjs", "React.js"),
        ("React", "React.js"),
        ("docker", "Docker Compose"),
        ("script", "JavaScript"),
    ])
    def test_accepts_plausible_candidates(self, query, candidate):
        assert is_reasonable_match(query, candidate)

    @pytest.mark.parametrize("query,candidate", [
        ("java", "JavaScript"),
        ("go", "Google Cloud Platform"),
        ("ab", "Abcdefghij"),
        ("", "Python"),
    ])
    def test_rejects_implausible_candidates(self, query, candidate):
        assert not is_reasonable_match(query, candidate)


# ===== TESTS: Direct matching =====

class TestDirectMatching:

    def test_typescript_scenario(self, counting_catalog, resolver, typescript_table):
        matches = SkillMatcher(counting_catalog, resolver).match(typescript_table)
        by_name = {m.skill.name: m for m in matches}

        assert set(by_name) == {"TypeScript", "JavaScript", "React.js"}
        assert by_name["TypeScript"].raw_score == pytest.approx(17.0)
        assert by_name["React.js"].matched_terms == {"react"}
        assert by_name["React.js"].raw_score == pytest.approx(2.0)

    def test_terms_for_same_skill_are_summed(self, counting_catalog, resolver):
        table = {"react": 2.0, "reactjs": 1.0, "react.js": 0.5}
        matches = SkillMatcher(counting_catalog, resolver).match(table)

        assert len(matches) == 1
        assert matches[0].skill.id == "sk-react"
        assert matches[0].raw_score == pytest.approx(3.5)
        assert matches[0].matched_terms == {"react", "reactjs", "react.js"}

    def test_same_query_searched_once(self, counting_catalog, resolver):
        """All three terms resolve to the alias 'React'; one catalog search."""
        SkillMatcher(counting_catalog, resolver).match({"react": 2.0, "reactjs": 1.0, "react.js": 0.5})
        assert counting_catalog.queries == ["React"]

    def test_short_terms_skipped(self, counting_catalog, resolver):
        assert SkillMatcher(counting_catalog, resolver).match({"r": 5.0, "c": 3.0}) == []
        assert counting_catalog.queries == []

    def test_short_form_is_expanded_first(self, counting_catalog, resolver):
        """TypeScript comes from the short form; JavaScript only through the hierarchy."""
        matches = SkillMatcher(counting_catalog, resolver).match({"ts": 4.0})
        assert matches[0].skill.name == "TypeScript"
        assert matches[0].matched_terms == {"ts"}
        assert all(not m.matched_terms for m in matches[1:])

    def test_implausible_top_hit_rejected(self, counting_catalog, resolver):
        """'go' must not be absorbed by 'Google Cloud Platform'."""
        assert SkillMatcher(counting_catalog, resolver).match({"go": 3.0}) == []

    def test_unknown_term_contributes_nothing(self, counting_catalog, resolver):
        assert SkillMatcher(counting_catalog, resolver).match({"cobol": 3.0}) == []

    def test_ties_broken_by_id(self, counting_catalog, resolver):
        matches = SkillMatcher(counting_catalog, resolver).match({"python": 1.0, "docker": 1.0})
        assert [m.skill.id for m in matches] == ["sk-docker", "sk-python"]

    def test_empty_table(self, counting_catalog, resolver):
        assert SkillMatcher(counting_catalog, resolver).match({}) == []

    def test_get_top_matches_truncates(self, counting_catalog, resolver, typescript_table):
        top = SkillMatcher(counting_catalog, resolver).get_top_matches(typescript_table, limit=1)
        assert [m.skill.name for m in top] == ["TypeScript"]


# ===== TESTS: Hierarchy and category inference =====

class TestInference:

    def test_hierarchy_adds_weighted_contribution(self, counting_catalog, resolver, typescript_table):
        matches = SkillMatcher(counting_catalog, resolver).match(typescript_table)
        javascript = next(m for m in matches if m.skill.name == "JavaScript")

        # 2 direct + 17 * 0.6 implied by TypeScript
        assert javascript.raw_score == pytest.approx(12.2)
        assert javascript.inferred_from == {"TypeScript"}
        assert [m.skill.name for m in matches] == ["TypeScript", "JavaScript", "React.js"]

    def test_hierarchy_creates_inferred_only_skill(self, counting_catalog, resolver):
        matches = SkillMatcher(counting_catalog, resolver).match({"typescript": 10.0})
        javascript = next(m for m in matches if m.skill.name == "JavaScript")
        assert javascript.is_inferred_only
        assert javascript.raw_score == pytest.approx(6.0)

    def test_hierarchy_never_bypasses_validation(self, counting_catalog, config_dict):
        """An implied skill whose catalog hit is implausible contributes nothing."""
        config_dict["skillHierarchy"] = {"TypeScript": {"implies": ["Go"], "weight": 0.9}}
        resolver = AliasResolver(SkillsConfig.from_dict(config_dict))
        matches = SkillMatcher(counting_catalog, resolver).match({"typescript": 10.0})

        assert [m.skill.name for m in matches] == ["TypeScript"]
        assert "Go" in counting_catalog.queries

    def test_hierarchy_uses_alias_of_catalog_name(self, counting_catalog, config_dict):
        """'React.js' from the catalog finds the hierarchy entry written as 'React'."""
        config_dict["skillHierarchy"] = {"React": {"implies": ["JavaScript"], "weight": 0.5}}
        resolver = AliasResolver(SkillsConfig.from_dict(config_dict))
        matches = SkillMatcher(counting_catalog, resolver).match({"react": 4.0})
        javascript = next(m for m in matches if m.skill.name == "JavaScript")
        assert javascript.raw_score == pytest.approx(2.0)
        assert javascript.inferred_from == {"React.js"}

    def test_category_inference(self, catalog, config_dict):
        config_dict["categoryInference"] = {"enabled": True, "weight": 0.5}
        config_dict["skillHierarchy"] = {}
        resolver = AliasResolver(SkillsConfig.from_dict(config_dict))
        skills = [catalog.get_by_id(i) for i in ("sk-ts", "sk-js", "sk-react")]
        skills.append(SkillEntity(id="sk-pl", name="Programming Languages"))

        matches = SkillMatcher(InMemorySkillCatalog(skills), resolver).match(
            {"typescript": 17.0, "javascript": 2.0}
        )
        category = next(m for m in matches if m.skill.id == "sk-pl")
        assert category.raw_score == pytest.approx(9.5)
        assert category.inferred_from == {"TypeScript (category)", "JavaScript (category)"}

    def test_category_inference_disabled(self, counting_catalog, resolver, typescript_table):
        matches = SkillMatcher(counting_catalog, resolver).match(typescript_table)
        assert not any("(category)" in source for m in matches for source in m.inferred_from)


# ===== TESTS: Catalog failures =====

class TestCatalogFailures:

    def test_outage_skips_remaining_terms(self, catalog, resolver, typescript_table):
        flaky = CountingCatalog([catalog.get_by_id(i) for i in ("sk-ts", "sk-react", "sk-js")], fail_after=1)
        errors = ErrorCollector()
        matcher = SkillMatcher(flaky, resolver, errors=errors)

        matches = matcher.match(typescript_table)

        # "javascript" resolved before the outage, the rest is skipped
        assert [m.skill.name for m in matches] == ["JavaScript"]
        assert flaky.queries == ["JavaScript"]
        assert not matcher.catalog_available
        assert len(errors.errors) == 1
        assert errors.errors[0].operation == "catalog_search"
        assert errors.errors[0].exception_type == "CatalogUnavailableError"
        assert errors.errors[0].recoverable

    def test_cached_terms_still_resolve_during_outage(self, catalog, resolver):
        """After an outage, a query already answered this run is served from cache."""
        flaky = CountingCatalog([catalog.get_by_id("sk-react")], fail_after=1)
        matcher = SkillMatcher(flaky, resolver)

        assert matcher.resolve_skill("react").id == "sk-react"
        assert matcher.resolve_skill("rust") is None
        assert not matcher.catalog_available

        # "reactjs" resolves to the already searched "React"
        assert matcher.resolve_skill("reactjs").id == "sk-react"
        assert matcher.resolve_skill("python") is None
        assert flaky.queries == ["React"]

    def test_each_run_starts_with_fresh_cache(self, counting_catalog, resolver):
        matcher = SkillMatcher(counting_catalog, resolver)
        matcher.match({"python": 1.0})
        matcher.match({"python": 1.0})
        assert counting_catalog.queries == ["Python", "Python"]
        assert isinstance(matcher.search_cache, SearchCache)
