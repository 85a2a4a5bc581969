"""
Skill Inference Pipeline

Runs the stages in order over one activity snapshot:

1. Extract: activity -> weighted term table
2. Match: term table -> catalog skills (aliases, search, hierarchy, category)
3. Score: matched skills -> confidence scores with evidence and explanation
4. Rank: drop skills under the minimum score, sort, optionally cap

Catalog outages degrade the run instead of failing it: they are recorded in
the result's error collector and the skills resolved so far are still scored.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from src.activity.types import ActivityCorpus
from src.analysis.scoring import ScoringEngine
from src.analysis.types import ScoredSkill
from src.catalog.base import SkillCatalog
from src.common.error_handling import ErrorCollector
from src.common.logger import get_logger
from src.common.skills_config import SkillsConfig, load_skills_config
from src.matching.alias_resolver import AliasResolver
from src.matching.skill_matcher import SkillMatcher
from src.matching.types import MatchedSkill
from src.signals.extractor import SignalWeights, TechnologySignalExtractor


@dataclass
class PipelineResult:
    """Everything one run produced."""

    run_id: str
    skills: List[ScoredSkill] = field(default_factory=list)      # Ranked and filtered
    scored: List[ScoredSkill] = field(default_factory=list)      # Every matched skill, unfiltered
    matched: List[MatchedSkill] = field(default_factory=list)
    term_table: Dict[str, float] = field(default_factory=dict)
    errors: ErrorCollector = field(default_factory=ErrorCollector)
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    duration_ms: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.skills

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "run_id": self.run_id,
            "created_at": self.created_at,
            "duration_ms": self.duration_ms,
            "skills": [s.to_dict() for s in self.skills],
            "summary": {
                "terms": len(self.term_table),
                "matched_skills": len(self.matched),
                "reported_skills": len(self.skills),
            },
            "errors": [e.to_dict() for e in self.errors.errors],
        }


class SkillInferencePipeline:
    """
    Wires extractor, matcher and scoring engine for one configuration.

    Args:
        config: Validated skills configuration
        catalog: Skill catalog to resolve terms against
        run_id: Identifier used in log prefixes (generated if omitted)
        now: Reference time for recency scoring
    """

    def __init__(
        self,
        config: SkillsConfig,
        catalog: SkillCatalog,
        run_id: Optional[str] = None,
        now: Optional[datetime] = None,
        signal_weights: Optional[SignalWeights] = None,
    ):
        self.config = config
        self.catalog = catalog
        self.run_id = run_id or str(uuid.uuid4())
        self.now = now
        self.signal_weights = signal_weights
        self.resolver = AliasResolver(config)
        self.logger = get_logger(__name__, run_id=self.run_id)

    def run(self, corpus: ActivityCorpus, limit: Optional[int] = None) -> PipelineResult:
        """
        Infer skills from an activity snapshot.

        An empty corpus is valid and yields an empty result.

        Raises:
            CatalogUnavailableError: If the catalog's skill name list cannot
                be fetched (nothing can be matched without it)
        """
        start = time.time()
        result = PipelineResult(run_id=self.run_id)

        self.logger.info("=" * 60)
        self.logger.info("STARTING SKILL INFERENCE")
        self.logger.info(
            f"Corpus: {len(corpus.repos)} repos, {len(corpus.commits)} commits, "
            f"{len(corpus.pull_requests)} PRs, {len(corpus.stars)} stars"
        )
        self.logger.info("=" * 60)

        if corpus.is_empty:
            self.logger.info("Empty activity snapshot, nothing to infer")
            result.duration_ms = int((time.time() - start) * 1000)
            return result

        extract_logger = self.logger.bind("extract")
        with extract_logger.stage_timer("Signal extraction"):
            extractor = TechnologySignalExtractor(
                self.resolver,
                known_skill_names=self.catalog.all_skill_names(),
                weights=self.signal_weights,
                logger=extract_logger,
            )
            result.term_table = extractor.extract(corpus)

        match_logger = self.logger.bind("match")
        with match_logger.stage_timer("Skill matching"):
            matcher = SkillMatcher(self.catalog, self.resolver, errors=result.errors, logger=match_logger)
            result.matched = matcher.match(result.term_table)

        score_logger = self.logger.bind("score")
        engine = ScoringEngine(self.config, self.resolver, now=self.now, logger=score_logger)
        with score_logger.stage_timer("Scoring"):
            result.scored = engine.score_skills(result.matched, corpus)

        with self.logger.bind("rank").stage_timer("Ranking"):
            result.skills = engine.get_top_scored_skills(result.scored, limit)

        result.duration_ms = int((time.time() - start) * 1000)
        if result.errors.has_errors():
            self.logger.warning(f"Completed with {len(result.errors.errors)} recoverable error(s)")
        self.logger.info(
            f"Reported {len(result.skills)} of {len(result.scored)} scored skills in {result.duration_ms}ms"
        )
        return result


def run_pipeline(
    corpus: ActivityCorpus,
    catalog: SkillCatalog,
    config: Optional[SkillsConfig] = None,
    limit: Optional[int] = None,
) -> PipelineResult:
    """
    Run skill inference with the configured skills file.

    Raises:
        SkillsConfigError: If no config is given and the skills file is
            missing or invalid
    """
    config = config or load_skills_config()
    return SkillInferencePipeline(config, catalog).run(corpus, limit=limit)
