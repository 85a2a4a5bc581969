"""
Unit tests for src/analysis/scoring.py

Component values below are worked out by hand from the fixture corpora
in conftest.py.
"""

from datetime import timedelta

import pytest

from src.activity.types import ActivityCorpus, Commit, Repository
from src.analysis.scoring import ScoringEngine, get_top_scored_skills
from src.analysis.types import ScoreComponents, ScoredSkill
from src.catalog.types import SkillEntity
from src.common.skills_config import SkillsConfig
from src.matching.types import MatchedSkill


TYPESCRIPT = SkillEntity(id="sk-ts", name="TypeScript")
JAVASCRIPT = SkillEntity(id="sk-js", name="JavaScript")
REACT = SkillEntity(id="sk-react", name="React.js")
PYTHON = SkillEntity(id="sk-python", name="Python")
DOCKER = SkillEntity(id="sk-docker", name="Docker")


@pytest.fixture
def engine(skills_config, resolver, now):
    return ScoringEngine(skills_config, resolver, now=now)


@pytest.fixture
def typescript_matches():
    return [
        MatchedSkill(skill=TYPESCRIPT, matched_terms={"typescript"}, raw_score=17.0),
        MatchedSkill(skill=JAVASCRIPT, matched_terms={"javascript"}, raw_score=12.2, inferred_from={"TypeScript"}),
        MatchedSkill(skill=REACT, matched_terms={"react"}, raw_score=2.0),
    ]


def scored(name, score, skill_id=None):
    return ScoredSkill(skill=SkillEntity(id=skill_id or name, name=name), score=score, components=ScoreComponents())


# ===== TESTS: Components =====

class TestComponents:

    def test_language_score(self, engine, typescript_corpus):
        # rank 40 + coverage 25 + byte share 150/170 * 20 + relative share capped at 15
        value = engine.language_score(["typescript"], typescript_corpus, 17.0, 17.0, 31.2)
        assert value == pytest.approx(40 + 25 + 150000 / 170000 * 20 + 15)

    def test_language_score_zero_raw(self, engine, typescript_corpus):
        assert engine.language_score(["cobol"], typescript_corpus, 0.0, 0.0, 0.0) == 0.0

    def test_commit_score(self, engine, mixed_corpus):
        # 2/4 file matches, 2/4 message matches, 2 relevant commits
        assert engine.commit_score(["python"], mixed_corpus) == pytest.approx(30 + 12.5 + 3)

    def test_commit_score_without_commits(self, engine):
        assert engine.commit_score(["python"], ActivityCorpus()) == 0.0

    def test_pr_score(self, engine, mixed_corpus):
        assert engine.pr_score(["python"], mixed_corpus) == pytest.approx(25 + 40 + 2)
        # Relevant but never merged
        assert engine.pr_score(["docker"], mixed_corpus) == pytest.approx(25 + 0 + 2)
        assert engine.pr_score(["go"], mixed_corpus) == 0.0

    def test_pr_score_baseline_without_prs(self, engine):
        assert engine.pr_score(["python"], ActivityCorpus()) == 50.0

    def test_project_quality_log_scale(self, engine, typescript_corpus):
        value = engine.project_quality_score(["typescript"], typescript_corpus)
        assert value == pytest.approx(57.0, abs=0.01)

    def test_project_quality_no_repos(self, engine, typescript_corpus):
        assert engine.project_quality_score(["docker"], typescript_corpus) == 0.0

    def test_recency_tiers(self, engine, now):
        def repo(name, days):
            return Repository(name=name, full_name=f"dev/{name}", url=f"https://github.com/dev/{name}",
                              language="Go", updated_at=now - timedelta(days=days))

        corpus = ActivityCorpus(repos=[repo("a", 10), repo("b", 200), repo("c", 500), repo("d", 900)])
        assert engine.recency_score(["go"], corpus, now) == 20 + 12 + 6

    def test_recency_counts_recent_file_commits(self, engine, mixed_corpus, now):
        # dev/api updated 400 days ago (6) plus two recent .py commits (10)
        assert engine.recency_score(["python"], mixed_corpus, now) == 16

    def test_recency_caps(self, engine, now):
        repos = [
            Repository(name=str(i), full_name=f"dev/{i}", url="u", language="Go", updated_at=now)
            for i in range(5)
        ]
        commits = [
            Commit(repo="dev/0", sha=str(i), message="m", date=now, files_changed=["main.go"])
            for i in range(10)
        ]
        corpus = ActivityCorpus(repos=repos, commits=commits)
        assert engine.recency_score(["go"], corpus, now) == 100

    def test_old_commits_ignored(self, engine, now):
        corpus = ActivityCorpus(commits=[
            Commit(repo="dev/x", sha="1", message="m", date=now - timedelta(days=400), files_changed=["a.go"]),
        ])
        assert engine.recency_score(["go"], corpus, now) == 0


# ===== TESTS: Combination and explanation =====

class TestCombine:

    def test_zero_components_give_base_score(self, engine):
        assert engine.combine(ScoreComponents()) == 15

    def test_full_components_give_hundred(self, engine):
        full = ScoreComponents(language=100, commit=100, pr=100, project_quality=100, recency=100)
        assert engine.combine(full) == 100

    def test_fractional_base_never_rounded_below(self, config_dict, resolver):
        config_dict["scoring"]["baseScore"] = 15.4
        engine = ScoringEngine(SkillsConfig.from_dict(config_dict), resolver)
        assert engine.combine(ScoreComponents()) == 16
        assert engine.combine(ScoreComponents(recency=1)) >= 15.4

    def test_clamped_to_max_score(self, config_dict, resolver):
        config_dict["scoring"]["maxScore"] = 90
        engine = ScoringEngine(SkillsConfig.from_dict(config_dict), resolver)
        full = ScoreComponents(language=100, commit=100, pr=100, project_quality=100, recency=100)
        assert engine.combine(full) == 90

    def test_explanation_lists_strong_signals(self, engine):
        components = ScoreComponents(language=97.6, commit=86.5, pr=0, project_quality=57.0, recency=25)
        assert engine.generate_explanation("TypeScript", components, 72) == (
            "Strong TypeScript usage in repositories, active commit history, quality projects, ongoing usage"
        )

    def test_explanation_fallbacks(self, engine):
        weak = ScoreComponents()
        assert engine.generate_explanation("Go", weak, 65) == "Solid foundation in Go"
        assert engine.generate_explanation("Go", weak, 45) == "Working knowledge of Go"
        assert engine.generate_explanation("Go", weak, 15) == "Basic experience with Go detected"

    def test_explanation_language_tiers(self, engine):
        assert engine.generate_explanation("Go", ScoreComponents(language=50), 30) == "Moderate Go experience"
        assert engine.generate_explanation("Go", ScoreComponents(language=5), 20) == "Some Go usage"


# ===== TESTS: Scoring matched skills =====

class TestScoreSkills:

    def test_typescript_scenario(self, engine, typescript_matches, typescript_corpus):
        results = engine.score_skills(typescript_matches, typescript_corpus)
        by_name = {s.skill.name: s for s in results}

        assert [s.skill.name for s in results] == ["TypeScript", "JavaScript", "React.js"]
        assert by_name["TypeScript"].score == 72
        assert by_name["JavaScript"].score == 44
        assert by_name["React.js"].score == 45

        typescript = by_name["TypeScript"].components
        assert typescript.language > 0
        assert typescript.recency > 0
        assert typescript.commit == pytest.approx(86.5)
        assert by_name["React.js"].components.pr == pytest.approx(92.0)

    def test_evidence_attached(self, engine, typescript_matches, typescript_corpus):
        results = engine.score_skills(typescript_matches, typescript_corpus)
        react = next(s for s in results if s.skill.name == "React.js")

        assert "https://github.com/dev/webapp" in react.evidence_urls
        assert "https://github.com/dev/webapp/pull/7" in react.evidence_urls
        assert react.inferred_from == frozenset()
        assert react.matched_terms == frozenset({"react"})

    def test_unsupported_skill_gets_base_score(self, engine, typescript_corpus):
        result = engine.score_skills([MatchedSkill(skill=DOCKER, matched_terms={"docker"}, raw_score=3.0)],
                                     typescript_corpus)[0]

        assert result.score == 15
        assert result.components == ScoreComponents()
        assert result.evidence == ()
        assert result.explanation == "Basic experience with Docker detected"

    def test_scores_within_bounds(self, engine, mixed_corpus):
        matches = [
            MatchedSkill(skill=PYTHON, matched_terms={"python"}, raw_score=12.0),
            MatchedSkill(skill=DOCKER, matched_terms={"docker", "dockerfile"}, raw_score=5.0),
            MatchedSkill(skill=JAVASCRIPT, matched_terms={"javascript"}, raw_score=1.0),
        ]
        for result in engine.score_skills(matches, mixed_corpus):
            assert 15 <= result.score <= 100
            for value in result.components.to_dict().values():
                assert 0 <= value <= 100

    def test_empty_matches(self, engine, typescript_corpus):
        assert engine.score_skills([], typescript_corpus) == []

    def test_deterministic(self, engine, typescript_matches, typescript_corpus):
        first = engine.score_skills(typescript_matches, typescript_corpus)
        second = engine.score_skills(typescript_matches, typescript_corpus)
        assert first == second

    def test_naive_reference_time_taken_as_utc(self, engine, skills_config, resolver, now,
                                               typescript_matches, typescript_corpus):
        naive = ScoringEngine(skills_config, resolver, now=now.replace(tzinfo=None))
        assert naive.now == now
        assert naive.score_skills(typescript_matches, typescript_corpus) == \
            engine.score_skills(typescript_matches, typescript_corpus)


# ===== TESTS: Ranking =====

class TestGetTopScoredSkills:

    def test_threshold_and_order(self, skills_config):
        skills = [scored("Go", 10), scored("Rust", 15), scored("Python", 80), scored("Java", 40)]
        ranked = get_top_scored_skills(skills, skills_config)
        assert [s.skill.name for s in ranked] == ["Python", "Java", "Rust"]

    def test_ties_keep_input_order(self, skills_config):
        skills = [scored("B", 50), scored("A", 50), scored("C", 60)]
        assert [s.skill.name for s in get_top_scored_skills(skills, skills_config)] == ["C", "B", "A"]

    def test_explicit_limit(self, skills_config):
        skills = [scored(str(i), 20 + i) for i in range(5)]
        assert len(get_top_scored_skills(skills, skills_config, limit=2)) == 2

    def test_configured_limit(self, config_dict):
        config_dict["output"] = {"enableSkillLimit": True, "maxSkillsToReport": 3}
        config = SkillsConfig.from_dict(config_dict)
        skills = [scored(str(i), 20 + i) for i in range(5)]
        ranked = get_top_scored_skills(skills, config)
        assert [s.score for s in ranked] == [24, 23, 22]
