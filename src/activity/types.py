"""
Data types for a developer's collected activity.

The corpus is a read-only snapshot produced by the collector (GitHub scan):
- Repository: an owned or contributed repository with language byte counts
- Commit: one commit with its changed file paths
- PullRequest: a pull request the developer opened or reviewed
- StarredRepo: a repository the developer starred
- ActivityCorpus: all of the above for one pipeline run

Snapshots are read from JSON written either with snake_case keys (to_dict
output) or with the collector's camelCase keys.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Naive values are taken as UTC and a trailing "Z" is accepted.
    Returns None for missing values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _get(data: Dict[str, Any], key: str, camel_key: Optional[str] = None, default: Any = None) -> Any:
    """Read a snake_case key, falling back to the collector's camelCase key."""
    if key in data and data[key] is not None:
        return data[key]
    if camel_key and camel_key in data and data[camel_key] is not None:
        return data[camel_key]
    return default


@dataclass
class Repository:
    """A repository from the developer's account."""

    name: str
    full_name: str
    url: str = ""
    description: Optional[str] = None
    language: Optional[str] = None             # Primary language reported by the host
    languages: Dict[str, int] = field(default_factory=dict)  # language -> bytes
    topics: List[str] = field(default_factory=list)
    stars: int = 0
    forks: int = 0
    is_owner: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    root_files: List[str] = field(default_factory=list)  # File names at the repository root
    readme: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Repository":
        name = _get(data, "name", default="")
        return cls(
            name=name,
            full_name=_get(data, "full_name", "fullName", name),
            url=_get(data, "url", default=""),
            description=_get(data, "description"),
            language=_get(data, "language"),
            languages={lang: int(size) for lang, size in _get(data, "languages", default={}).items()},
            topics=list(_get(data, "topics", default=[])),
            stars=int(_get(data, "stars", default=0)),
            forks=int(_get(data, "forks", default=0)),
            is_owner=bool(_get(data, "is_owner", "isOwner", True)),
            created_at=parse_timestamp(_get(data, "created_at", "createdAt")),
            updated_at=parse_timestamp(_get(data, "updated_at", "updatedAt")),
            root_files=list(_get(data, "root_files", "rootFiles", [])),
            readme=_get(data, "readme"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "url": self.url,
            "description": self.description,
            "language": self.language,
            "languages": dict(self.languages),
            "topics": list(self.topics),
            "stars": self.stars,
            "forks": self.forks,
            "is_owner": self.is_owner,
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
            "root_files": list(self.root_files),
            "readme": self.readme,
        }


@dataclass
class Commit:
    """A single commit; `repo` is the owning repository's full name."""

    repo: str
    sha: str
    message: str
    date: Optional[datetime] = None
    files_changed: List[str] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        return cls(
            repo=_get(data, "repo", default=""),
            sha=_get(data, "sha", default=""),
            message=_get(data, "message", default=""),
            date=parse_timestamp(_get(data, "date")),
            files_changed=list(_get(data, "files_changed", "filesChanged", [])),
            additions=int(_get(data, "additions", default=0)),
            deletions=int(_get(data, "deletions", default=0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "repo": self.repo,
            "sha": self.sha,
            "message": self.message,
            "date": _format_timestamp(self.date),
            "files_changed": list(self.files_changed),
            "additions": self.additions,
            "deletions": self.deletions,
        }


@dataclass
class PullRequest:
    repo: str
    number: int
    title: str
    body: Optional[str] = None
    url: str = ""
    state: str = "open"
    merged: bool = False
    created_at: Optional[datetime] = None
    is_author: bool = True

    @property
    def text(self) -> str:
        """Title and body, the searchable part of a pull request."""
        return f"{self.title} {self.body or ''}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PullRequest":
        return cls(
            repo=_get(data, "repo", default=""),
            number=int(_get(data, "number", default=0)),
            title=_get(data, "title", default=""),
            body=_get(data, "body"),
            url=_get(data, "url", default=""),
            state=_get(data, "state", default="open"),
            merged=bool(_get(data, "merged", default=False)),
            created_at=parse_timestamp(_get(data, "created_at", "createdAt")),
            is_author=bool(_get(data, "is_author", "isAuthor", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "repo": self.repo,
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "url": self.url,
            "state": self.state,
            "merged": self.merged,
            "created_at": _format_timestamp(self.created_at),
            "is_author": self.is_author,
        }


@dataclass
class StarredRepo:
    name: str
    full_name: str
    url: str = ""
    description: Optional[str] = None
    language: Optional[str] = None
    topics: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StarredRepo":
        name = _get(data, "name", default="")
        return cls(
            name=name,
            full_name=_get(data, "full_name", "fullName", name),
            url=_get(data, "url", default=""),
            description=_get(data, "description"),
            language=_get(data, "language"),
            topics=list(_get(data, "topics", default=[])),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "url": self.url,
            "description": self.description,
            "language": self.language,
            "topics": list(self.topics),
        }


@dataclass
class LanguageStat:
    """Aggregate usage of one language across all repositories."""

    bytes: int = 0
    repos: int = 0
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"bytes": self.bytes, "repos": self.repos, "percentage": self.percentage}


def aggregate_languages(repos: List[Repository]) -> Dict[str, LanguageStat]:
    """
    Sum language bytes over repositories.

    Percentages are of the total byte count, rounded to two decimals.
    """
    stats: Dict[str, LanguageStat] = {}
    total_bytes = 0

    for repo in repos:
        for language, size in repo.languages.items():
            stat = stats.setdefault(language, LanguageStat())
            stat.bytes += size
            stat.repos += 1
            total_bytes += size

    for stat in stats.values():
        stat.percentage = round(stat.bytes / total_bytes * 100, 2) if total_bytes > 0 else 0.0

    return stats


@dataclass
class ActivityCorpus:
    """
    Everything collected for one developer in one run.

    The pipeline treats the corpus as immutable.
    """

    repos: List[Repository] = field(default_factory=list)
    commits: List[Commit] = field(default_factory=list)
    pull_requests: List[PullRequest] = field(default_factory=list)
    stars: List[StarredRepo] = field(default_factory=list)
    username: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.repos or self.commits or self.pull_requests or self.stars)

    def find_repo(self, full_name: str) -> Optional[Repository]:
        for repo in self.repos:
            if repo.full_name == full_name:
                return repo
        return None

    def language_stats(self) -> Dict[str, LanguageStat]:
        return aggregate_languages(self.repos)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityCorpus":
        return cls(
            repos=[Repository.from_dict(r) for r in _get(data, "repos", default=[])],
            commits=[Commit.from_dict(c) for c in _get(data, "commits", default=[])],
            pull_requests=[
                PullRequest.from_dict(p)
                for p in _get(data, "pull_requests", "pullRequests", [])
            ],
            stars=[StarredRepo.from_dict(s) for s in _get(data, "stars", default=[])],
            username=_get(data, "username"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "username": self.username,
            "repos": [r.to_dict() for r in self.repos],
            "commits": [c.to_dict() for c in self.commits],
            "pull_requests": [p.to_dict() for p in self.pull_requests],
            "stars": [s.to_dict() for s in self.stars],
            "languages": {lang: stat.to_dict() for lang, stat in self.language_stats().items()},
        }
