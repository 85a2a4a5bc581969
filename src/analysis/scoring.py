"""
Scoring Engine

Turns matched skills into 0-100 confidence scores. Five components, each
normalized to [0, 100] from capped sub-terms so no single factor saturates
a component on its own:

    language         rank vs. top skill (40), repo coverage (25),
                     byte share in matching repos (20), share of all raw score (15)
    commit           file-extension match rate (60), message match rate (25),
                     matching commit count (15)
    pr               match rate (50), merge rate of matches (40), count (10);
                     a flat 50 when the developer has no pull requests
    project_quality  repo count (20), owned repos (15),
                     log10 stars (40), log10 forks (25)
    recency          repos updated within 6/12/24 months (70),
                     matching commits within a year (30)

Final score = round(base + sum(component * weight) * (100 - base) / 100),
clamped to [0, maxScore]. A skill nothing in the corpus supports gets all
components at 0 and therefore exactly the base score.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from src.activity.types import ActivityCorpus, parse_timestamp
from src.analysis.corpus_matching import CorpusMatcher, skill_terms
from src.analysis.evidence import EvidenceCollector
from src.analysis.types import ScoreComponents, ScoredSkill
from src.common.logger import PipelineLogger, get_logger
from src.common.skills_config import SkillsConfig
from src.matching.alias_resolver import AliasResolver
from src.matching.types import MatchedSkill

# Repository recency tiers: (max age in days, points)
RECENCY_TIERS = ((180, 20), (365, 12), (730, 6))
RECENCY_REPO_CAP = 70
RECENT_COMMIT_DAYS = 365
RECENT_COMMIT_POINTS = 5
RECENT_COMMIT_CAP = 30

# Score used for the PR component when the developer has no pull requests
NO_PR_BASELINE = 50.0


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(value, high))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_top_scored_skills(
    skills: Sequence[ScoredSkill],
    config: SkillsConfig,
    limit: Optional[int] = None,
) -> List[ScoredSkill]:
    """
    Filter and rank scored skills for reporting.

    Drops skills below minScoreThreshold and sorts by score descending.
    Equal scores keep their input order. The result is capped at `limit`,
    or at output.maxSkillsToReport when output.enableSkillLimit is set.
    """
    threshold = config.scoring.min_score_threshold
    kept = [s for s in skills if s.score >= threshold]
    ranked = sorted(kept, key=lambda s: -s.score)

    if limit is None and config.output.enable_skill_limit:
        limit = config.output.max_skills_to_report
    if limit is not None:
        ranked = ranked[:max(limit, 0)]
    return ranked


class ScoringEngine:
    """
    Scores MatchedSkills against an ActivityCorpus.

    Args:
        config: Validated skills configuration
        resolver: Alias tables used for corpus matching
        now: Reference time for recency (defaults to the current UTC time;
            a naive datetime is taken as UTC)
    """

    def __init__(
        self,
        config: SkillsConfig,
        resolver: AliasResolver,
        now: Optional[datetime] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        self.config = config
        self.matcher = CorpusMatcher(resolver)
        self.evidence_collector = EvidenceCollector(config.evidence, self.matcher)
        self.now = parse_timestamp(now)
        self.logger = logger or get_logger(__name__, stage="score")

    # ===== Components =====

    def language_score(
        self,
        terms: Sequence[str],
        corpus: ActivityCorpus,
        raw_score: float,
        max_raw: float,
        sum_raw: float,
    ) -> float:
        rank = min(raw_score / max_raw * 40, 40) if max_raw > 0 else 0.0
        relative = min(raw_score / sum_raw * 30, 15) if sum_raw > 0 else 0.0

        matching = [repo for repo in corpus.repos if self.matcher.repo_metadata_matches(terms, repo)]
        coverage = len(matching) / len(corpus.repos) if corpus.repos else 0.0

        total_bytes = sum(sum(repo.languages.values()) for repo in matching)
        skill_bytes = sum(self.matcher.matching_language_bytes(terms, repo) for repo in matching)
        byte_share = skill_bytes / total_bytes if total_bytes > 0 else 0.0

        return _clamp(rank + min(coverage * 25, 25) + min(byte_share * 20, 20) + relative)

    def commit_score(self, terms: Sequence[str], corpus: ActivityCorpus) -> float:
        total = len(corpus.commits)
        if total == 0:
            return 0.0

        file_matches = 0
        message_matches = 0
        relevant = 0
        for commit in corpus.commits:
            by_file = self.matcher.commit_file_matches(terms, commit)
            by_message = self.matcher.commit_message_matches(terms, commit)
            file_matches += by_file
            message_matches += by_message
            relevant += by_file or by_message

        return _clamp(
            min(file_matches / total * 60, 60)
            + min(message_matches / total * 25, 25)
            + min(relevant * 1.5, 15)
        )

    def pr_score(self, terms: Sequence[str], corpus: ActivityCorpus) -> float:
        total = len(corpus.pull_requests)
        if total == 0:
            # Neutral when there are no pull requests at all
            return NO_PR_BASELINE

        relevant = [pr for pr in corpus.pull_requests if self.matcher.pr_matches(terms, pr)]
        if not relevant:
            return 0.0

        merge_rate = sum(1 for pr in relevant if pr.merged) / len(relevant)
        return _clamp(
            min(len(relevant) / total * 50, 50)
            + merge_rate * 40
            + min(len(relevant) * 2, 10)
        )

    def project_quality_score(self, terms: Sequence[str], corpus: ActivityCorpus) -> float:
        matching = [repo for repo in corpus.repos if self.matcher.repo_metadata_matches(terms, repo)]
        if not matching:
            return 0.0

        owned = sum(1 for repo in matching if repo.is_owner)
        stars = sum(max(repo.stars, 0) for repo in matching)
        forks = sum(max(repo.forks, 0) for repo in matching)

        # log10 of total stars and forks
        return _clamp(
            min(len(matching) * 5, 20)
            + min(owned * 5, 15)
            + min(math.log10(stars + 1) * 15, 40)
            + min(math.log10(forks + 1) * 10, 25)
        )

    def recency_score(self, terms: Sequence[str], corpus: ActivityCorpus, now: datetime) -> float:
        repo_points = 0
        for repo in corpus.repos:
            if repo.updated_at is None or not self.matcher.repo_metadata_matches(terms, repo):
                continue
            age_days = max((now - repo.updated_at).days, 0)
            for max_age, points in RECENCY_TIERS:
                if age_days <= max_age:
                    repo_points += points
                    break

        cutoff = now - timedelta(days=RECENT_COMMIT_DAYS)
        recent_commits = sum(
            1 for commit in corpus.commits
            if commit.date is not None and commit.date >= cutoff
            and self.matcher.commit_file_matches(terms, commit)
        )

        return _clamp(
            min(repo_points, RECENCY_REPO_CAP)
            + min(recent_commits * RECENT_COMMIT_POINTS, RECENT_COMMIT_CAP)
        )

    # ===== Composition =====

    def combine(self, components: ScoreComponents) -> int:
        """Weighted sum of components lifted onto [baseScore, 100], clamped to maxScore."""
        scoring = self.config.scoring
        w = scoring.weights
        weighted = (
            components.language * w.language
            + components.commit * w.commits
            + components.pr * w.prs
            + components.project_quality * w.project_quality
            + components.recency * w.recency
        )
        base = scoring.base_score
        # Rounding must not drop a fractional base below itself
        score = max(_round_half_up(base + weighted * (100 - base) / 100), math.ceil(base))
        return int(_clamp(score, 0, scoring.max_score))

    def generate_explanation(self, skill_name: str, components: ScoreComponents, score: int) -> str:
        t = self.config.explanation_thresholds
        parts = []

        if components.language >= t.language_strong:
            parts.append(f"strong {skill_name} usage in repositories")
        elif components.language >= t.language_moderate:
            parts.append(f"moderate {skill_name} experience")
        elif components.language > 0:
            parts.append(f"some {skill_name} usage")

        if components.commit >= t.commit_active:
            parts.append("active commit history")
        if components.pr >= t.pr_significant:
            parts.append("significant PR contributions")
        if components.project_quality >= t.project_quality:
            parts.append("quality projects")

        if components.recency >= t.recency_recent:
            parts.append("recent activity")
        elif components.recency >= t.recency_ongoing:
            parts.append("ongoing usage")

        if not parts:
            if score >= t.score_solid:
                return f"Solid foundation in {skill_name}"
            if score >= t.score_working:
                return f"Working knowledge of {skill_name}"
            return f"Basic experience with {skill_name} detected"

        sentence = ", ".join(parts)
        return sentence[0].upper() + sentence[1:]

    def score_skill(
        self,
        match: MatchedSkill,
        corpus: ActivityCorpus,
        max_raw: float,
        sum_raw: float,
        now: datetime,
    ) -> ScoredSkill:
        terms = skill_terms(match.skill.name, match.matched_terms)

        if self.matcher.has_support(terms, corpus):
            components = ScoreComponents(
                language=self.language_score(terms, corpus, match.raw_score, max_raw, sum_raw),
                commit=self.commit_score(terms, corpus),
                pr=self.pr_score(terms, corpus),
                project_quality=self.project_quality_score(terms, corpus),
                recency=self.recency_score(terms, corpus, now),
            )
        else:
            components = ScoreComponents()

        score = self.combine(components)
        return ScoredSkill(
            skill=match.skill,
            score=score,
            components=components,
            evidence=tuple(self.evidence_collector.collect_evidence(terms, corpus)),
            explanation=self.generate_explanation(match.skill.name, components, score),
            inferred_from=frozenset(match.inferred_from),
            matched_terms=frozenset(match.matched_terms),
        )

    def score_skills(self, matches: Sequence[MatchedSkill], corpus: ActivityCorpus) -> List[ScoredSkill]:
        """
        Score every matched skill; output order follows the input order.
        """
        if not matches:
            return []

        now = self.now or datetime.now(timezone.utc)
        raw_scores = [max(m.raw_score, 0.0) for m in matches]
        max_raw = max(raw_scores)
        sum_raw = sum(raw_scores)

        scored = [self.score_skill(m, corpus, max_raw, sum_raw, now) for m in matches]
        self.logger.info(f"Scored {len(scored)} skills")
        return scored

    def get_top_scored_skills(self, skills: Sequence[ScoredSkill], limit: Optional[int] = None) -> List[ScoredSkill]:
        return get_top_scored_skills(skills, self.config, limit)
