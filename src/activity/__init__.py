"""
Developer activity snapshot: repositories, commits, pull requests, stars.
"""

from src.activity.types import (
    ActivityCorpus,
    Commit,
    LanguageStat,
    PullRequest,
    Repository,
    StarredRepo,
    aggregate_languages,
    parse_timestamp,
)
from src.activity.loader import load_activity_corpus

__all__ = [
    "ActivityCorpus",
    "Commit",
    "LanguageStat",
    "PullRequest",
    "Repository",
    "StarredRepo",
    "aggregate_languages",
    "parse_timestamp",
    "load_activity_corpus",
]
