"""
Evidence Collector

Gathers a short, priority-ordered list of activity items supporting a skill:

1. Repositories (language/topic/config-file alias match or README mention),
   most starred first
2. Merged pull requests mentioning the skill
3. Repositories ranked by number of matching commits
4. Starred repositories with a matching language or topic

Each source has its own limit; the concatenation is truncated to the
per-skill maximum. Ordering never depends on dict or set iteration.
"""

from typing import Dict, List, Optional, Sequence

from src.activity.types import ActivityCorpus
from src.analysis.corpus_matching import CorpusMatcher
from src.analysis.types import Evidence, EvidenceKind
from src.common.skills_config import EvidenceLimits

# Star descriptions are cut to this length in evidence details
STAR_DETAIL_LENGTH = 50


class EvidenceCollector:
    def __init__(self, limits: EvidenceLimits, matcher: CorpusMatcher):
        self.limits = limits
        self.matcher = matcher

    def collect_evidence(
        self,
        terms: Sequence[str],
        corpus: ActivityCorpus,
        max_total: Optional[int] = None,
    ) -> List[Evidence]:
        """
        Collect evidence for a skill.

        Args:
            terms: Lowercase skill terms (matched terms plus skill name)
            corpus: Activity snapshot
            max_total: Overall cap, defaults to the configured maxPerSkill

        Returns:
            Evidence list in priority order, at most max_total long
        """
        limit = self.limits.max_per_skill if max_total is None else max_total
        if limit <= 0 or not terms:
            return []

        evidence: List[Evidence] = []
        evidence.extend(self._repo_evidence(terms, corpus, self.limits.repo_limit))
        evidence.extend(self._pr_evidence(terms, corpus, self.limits.pr_limit))
        evidence.extend(self._commit_evidence(terms, corpus, self.limits.commit_limit))
        evidence.extend(self._star_evidence(terms, corpus, self.limits.star_limit))
        return evidence[:limit]

    def _repo_evidence(self, terms: Sequence[str], corpus: ActivityCorpus, limit: int) -> List[Evidence]:
        matching = [repo for repo in corpus.repos if self.matcher.repo_matches(terms, repo)]
        matching.sort(key=lambda repo: (-repo.stars, repo.full_name))

        evidence = []
        for repo in matching[:limit]:
            top_languages = sorted(repo.languages.items(), key=lambda item: (-item[1], item[0]))[:3]
            languages = ", ".join(name for name, _ in top_languages)
            evidence.append(Evidence(
                kind=EvidenceKind.REPO,
                title=repo.full_name,
                url=repo.url,
                detail=f"Languages: {languages}" if languages else None,
            ))
        return evidence

    def _pr_evidence(self, terms: Sequence[str], corpus: ActivityCorpus, limit: int) -> List[Evidence]:
        matching = [
            pr for pr in corpus.pull_requests
            if pr.merged and self.matcher.pr_matches(terms, pr)
        ]
        return [
            Evidence(
                kind=EvidenceKind.PR,
                title=f"PR #{pr.number}: {pr.title}",
                url=pr.url,
                detail="Merged",
            )
            for pr in matching[:limit]
        ]

    def _commit_evidence(self, terms: Sequence[str], corpus: ActivityCorpus, limit: int) -> List[Evidence]:
        counts: Dict[str, int] = {}
        for commit in corpus.commits:
            if self.matcher.commit_matches(terms, commit):
                counts[commit.repo] = counts.get(commit.repo, 0) + 1

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

        evidence = []
        for repo_name, count in ranked:
            if len(evidence) >= limit:
                break
            repo = corpus.find_repo(repo_name)
            if repo is None:
                continue
            evidence.append(Evidence(
                kind=EvidenceKind.COMMIT,
                title=f"{count} commits in {repo_name}",
                url=f"{repo.url}/commits",
                detail="Active contributor",
            ))
        return evidence

    def _star_evidence(self, terms: Sequence[str], corpus: ActivityCorpus, limit: int) -> List[Evidence]:
        matching = [star for star in corpus.stars if self.matcher.star_matches(terms, star)]
        return [
            Evidence(
                kind=EvidenceKind.STARRED,
                title=f"Starred: {star.full_name}",
                url=star.url,
                detail=star.description[:STAR_DETAIL_LENGTH] if star.description else None,
            )
            for star in matching[:limit]
        ]
