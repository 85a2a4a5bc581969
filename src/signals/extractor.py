"""
Technology Signal Extractor

Walks a developer's activity and emits weighted technology terms:

    Repository   primary language 5, language bytes min(bytes // 10000, 10),
                 topic 2, root config file 3, README skill mention 1
    Commit       skill mention in message 1, changed-file technology 1
    Pull request skill mention in title/body 2 (authored PRs only)
    Star         language 0.5, topic 0.5

Signals are summed per lowercase term into a weighted term table. Summation
is the only reduction, so the table does not depend on processing order.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from src.activity.types import ActivityCorpus, Commit, PullRequest, Repository, StarredRepo
from src.common.logger import PipelineLogger, get_logger
from src.common.string_utils import find_whole_words
from src.matching.alias_resolver import AliasResolver


class SignalKind(str, Enum):
    LANGUAGE = "language"
    TOPIC = "topic"
    ROOT_FILE = "root_file"
    README_MENTION = "readme_mention"
    COMMIT_MESSAGE = "commit_message"
    COMMIT_FILE = "commit_file"
    PR_TEXT = "pr_text"
    STAR_LANGUAGE = "star_language"
    STAR_TOPIC = "star_topic"


@dataclass(frozen=True)
class TechnologySignal:
    """One weighted observation of a technology in one activity item."""

    term: str
    weight: float
    source_kind: SignalKind


@dataclass(frozen=True)
class SignalWeights:
    """
    Weight per signal source.

    PR text outweighs commit messages: PR titles and bodies are written for
    reviewers, commit messages are noisy. Stars are interest, not work.
    """

    primary_language: float = 5.0
    bytes_per_point: int = 10000
    max_language_bytes_weight: int = 10
    topic: float = 2.0
    root_file: float = 3.0
    readme_mention: float = 1.0
    commit_message: float = 1.0
    commit_file: float = 1.0
    pr_text: float = 2.0
    star: float = 0.5

    def language_bytes_weight(self, size: int) -> int:
        """Capped linear weight for a language's byte count."""
        return min(size // self.bytes_per_point, self.max_language_bytes_weight)


class TechnologySignalExtractor:
    """
    Turns an ActivityCorpus into a weighted term table.

    Args:
        resolver: Alias tables for file extension / special-file lookups
        known_skill_names: Catalog skill names scanned for in README,
            commit and PR text
        weights: Signal weights (defaults as documented above)
    """

    def __init__(
        self,
        resolver: AliasResolver,
        known_skill_names: Iterable[str] = (),
        weights: Optional[SignalWeights] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        self.resolver = resolver
        self.known_skill_names = sorted(set(known_skill_names))
        self.weights = weights or SignalWeights()
        self.logger = logger or get_logger(__name__, stage="extract")

    # ===== Per-item signals =====

    def _mentions(self, text: Optional[str]) -> List[str]:
        if not text or not self.known_skill_names:
            return []
        return find_whole_words(text, self.known_skill_names)

    def signals_for_repo(self, repo: Repository) -> List[TechnologySignal]:
        w = self.weights
        signals = []

        if repo.language:
            signals.append(TechnologySignal(repo.language, w.primary_language, SignalKind.LANGUAGE))

        for language, size in repo.languages.items():
            weight = w.language_bytes_weight(size)
            if weight > 0:
                signals.append(TechnologySignal(language, weight, SignalKind.LANGUAGE))

        for topic in repo.topics:
            signals.append(TechnologySignal(topic, w.topic, SignalKind.TOPIC))

        root_techs = []
        for filename in repo.root_files:
            for tech in self.resolver.techs_for_special_file(filename):
                if tech not in root_techs:
                    root_techs.append(tech)
        for tech in root_techs:
            signals.append(TechnologySignal(tech, w.root_file, SignalKind.ROOT_FILE))

        for name in self._mentions(repo.readme):
            signals.append(TechnologySignal(name, w.readme_mention, SignalKind.README_MENTION))

        return signals

    def signals_for_commit(self, commit: Commit) -> List[TechnologySignal]:
        w = self.weights
        signals = [
            TechnologySignal(name, w.commit_message, SignalKind.COMMIT_MESSAGE)
            for name in self._mentions(commit.message)
        ]

        file_techs = []
        for path in commit.files_changed:
            for tech in self.resolver.techs_for_file(path):
                if tech not in file_techs:
                    file_techs.append(tech)
        signals.extend(TechnologySignal(tech, w.commit_file, SignalKind.COMMIT_FILE) for tech in file_techs)

        return signals

    def signals_for_pull_request(self, pr: PullRequest) -> List[TechnologySignal]:
        if not pr.is_author:
            return []
        return [
            TechnologySignal(name, self.weights.pr_text, SignalKind.PR_TEXT)
            for name in self._mentions(pr.text)
        ]

    def signals_for_star(self, star: StarredRepo) -> List[TechnologySignal]:
        signals = []
        if star.language:
            signals.append(TechnologySignal(star.language, self.weights.star, SignalKind.STAR_LANGUAGE))
        for topic in star.topics:
            signals.append(TechnologySignal(topic, self.weights.star, SignalKind.STAR_TOPIC))
        return signals

    # ===== Whole corpus =====

    def extract_signals(self, corpus: ActivityCorpus) -> List[TechnologySignal]:
        signals: List[TechnologySignal] = []
        for repo in corpus.repos:
            signals.extend(self.signals_for_repo(repo))
        for commit in corpus.commits:
            signals.extend(self.signals_for_commit(commit))
        for pr in corpus.pull_requests:
            signals.extend(self.signals_for_pull_request(pr))
        for star in corpus.stars:
            signals.extend(self.signals_for_star(star))
        return signals

    @staticmethod
    def build_term_table(signals: Iterable[TechnologySignal]) -> Dict[str, float]:
        """Sum signal weights per lowercase term."""
        table: Dict[str, float] = {}
        for signal in signals:
            term = signal.term.strip().lower()
            if not term:
                continue
            table[term] = table.get(term, 0.0) + signal.weight
        return table

    def extract(self, corpus: ActivityCorpus) -> Dict[str, float]:
        """
        Build the weighted term table for a corpus.

        Returns:
            lowercase term -> summed weight (empty for an empty corpus)
        """
        signals = self.extract_signals(corpus)
        table = self.build_term_table(signals)

        by_kind = Counter(signal.source_kind.value for signal in signals)
        self.logger.info(f"Extracted {len(signals)} signals into {len(table)} terms")
        self.logger.debug(f"Signals by source: {dict(sorted(by_kind.items()))}")
        return table
