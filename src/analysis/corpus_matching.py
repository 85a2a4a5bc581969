"""
Predicates deciding whether an activity item relates to a skill.

A skill is represented by its lowercase terms: the raw terms that matched it
plus its own catalog name. Structured fields (languages, topics, config
files) are compared with alias equivalence, free text (README, commit
messages, PR text) with whole-word matching. Shared by evidence collection
and scoring so both agree on what counts as support for a skill.
"""

from typing import Iterable, List, Sequence

from src.activity.types import ActivityCorpus, Commit, PullRequest, Repository, StarredRepo
from src.common.string_utils import is_whole_word_match
from src.matching.alias_resolver import AliasResolver


def skill_terms(name: str, matched_terms: Iterable[str]) -> List[str]:
    """Sorted, lowercase, deduplicated terms for a skill."""
    terms = {t.strip().lower() for t in matched_terms if t and t.strip()}
    terms.add(name.strip().lower())
    return sorted(terms)


class CorpusMatcher:
    def __init__(self, resolver: AliasResolver):
        self.resolver = resolver

    def _any_alias(self, terms: Sequence[str], values: Iterable[str]) -> bool:
        values = [v for v in values if v]
        return any(self.resolver.are_aliases(term, value) for term in terms for value in values)

    @staticmethod
    def _any_whole_word(terms: Sequence[str], text: str) -> bool:
        text_lower = text.lower()
        return any(is_whole_word_match(text_lower, term) for term in terms)

    # ===== Repositories =====

    def repo_metadata_matches(self, terms: Sequence[str], repo: Repository) -> bool:
        """Language, byte-map language, topic or root config file."""
        if self._any_alias(terms, [repo.language, *repo.languages.keys(), *repo.topics]):
            return True
        for filename in repo.root_files:
            if self._any_alias(terms, self.resolver.techs_for_special_file(filename)):
                return True
        return False

    def repo_readme_matches(self, terms: Sequence[str], repo: Repository) -> bool:
        return bool(repo.readme) and self._any_whole_word(terms, repo.readme)

    def repo_matches(self, terms: Sequence[str], repo: Repository, include_readme: bool = True) -> bool:
        if self.repo_metadata_matches(terms, repo):
            return True
        return include_readme and self.repo_readme_matches(terms, repo)

    def matching_language_bytes(self, terms: Sequence[str], repo: Repository) -> int:
        return sum(
            size for language, size in repo.languages.items()
            if self._any_alias(terms, [language])
        )

    # ===== Commits =====

    def commit_message_matches(self, terms: Sequence[str], commit: Commit) -> bool:
        return self._any_whole_word(terms, commit.message)

    def commit_file_matches(self, terms: Sequence[str], commit: Commit) -> bool:
        """A changed file's extension or special name maps to one of the terms."""
        return any(
            self._any_alias(terms, self.resolver.techs_for_file(path))
            for path in commit.files_changed
        )

    def commit_matches(self, terms: Sequence[str], commit: Commit) -> bool:
        return self.commit_message_matches(terms, commit) or self.commit_file_matches(terms, commit)

    # ===== Pull requests and stars =====

    def pr_matches(self, terms: Sequence[str], pr: PullRequest) -> bool:
        return self._any_whole_word(terms, pr.text)

    def star_matches(self, terms: Sequence[str], star: StarredRepo) -> bool:
        return self._any_alias(terms, [star.language, *star.topics])

    def has_support(self, terms: Sequence[str], corpus: ActivityCorpus) -> bool:
        """True if any activity item at all relates to the terms."""
        return (
            any(self.repo_matches(terms, r) for r in corpus.repos)
            or any(self.commit_matches(terms, c) for c in corpus.commits)
            or any(self.pr_matches(terms, p) for p in corpus.pull_requests)
            or any(self.star_matches(terms, s) for s in corpus.stars)
        )
