"""
Global fixtures for all unit tests.

Provides:
- A small, self-contained skills configuration (independent of data/)
- A fake catalog and a sample activity corpus
- Environment isolation so no test talks to the real skills API

These fixtures apply to ALL tests in tests/unit/.
"""

import copy
import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment BEFORE any imports to prevent Config from loading real values
os.environ["SKILLS_API_BASE"] = "https://skills.test.invalid/v5"
os.environ["DEBUG_MODE"] = "false"

from src.activity.types import ActivityCorpus, Commit, PullRequest, Repository, StarredRepo
from src.catalog.in_memory import InMemorySkillCatalog
from src.catalog.types import SkillEntity
from src.common.logger import set_global_debug_mode
from src.common.skills_config import SkillsConfig
from src.matching.alias_resolver import AliasResolver


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


BASE_CONFIG = {
    "shortTermExpansions": {"js": "javascript", "ts": "typescript", "py": "python", "k8s": "kubernetes"},
    "skillAliases": {
        "JavaScript": ["javascript", "js", "ecmascript"],
        "TypeScript": ["typescript", "ts"],
        "Python": ["python", "python3"],
        "React": ["react", "reactjs", "react.js"],
        "Node.js": ["node", "nodejs", "node.js"],
        "Docker": ["docker", "dockerfile"],
        "Kubernetes": ["kubernetes", "k8s"],
        "Go": ["go", "golang"],
    },
    "languageAliases": {
        "C#": ["csharp", "c-sharp"],
        "C++": ["cpp", "cplusplus"],
        "JavaScript": ["js", "ecmascript"],
    },
    "skillHierarchy": {
        "React Native": {"implies": ["React"], "weight": 0.7},
        "TypeScript": {"implies": ["JavaScript"], "weight": 0.6},
    },
    "categoryInference": {"enabled": False, "weight": 0.5},
    "scoring": {
        "weights": {"language": 0.35, "commits": 0.25, "prs": 0.15, "projectQuality": 0.15, "recency": 0.10},
        "baseScore": 15,
        "maxScore": 100,
        "minScoreThreshold": 15,
    },
    "explanationThresholds": {
        "languageStrong": 70,
        "languageModerate": 40,
        "commitActive": 30,
        "prSignificant": 60,
        "projectQuality": 40,
        "recencyRecent": 50,
        "recencyOngoing": 20,
        "scoreSolid": 60,
        "scoreWorking": 40,
    },
    "evidence": {"maxPerSkill": 5, "repoLimit": 3, "prLimit": 2, "commitLimit": 2, "starLimit": 1},
    "extensionToTech": {".ts": "TypeScript", ".tsx": "TypeScript", ".js": "JavaScript", ".py": "Python", ".go": "Go"},
    "specialFiles": {
        "package.json": "Node.js",
        "tsconfig.json": "TypeScript",
        "dockerfile": "Docker",
        "go.mod": "Go",
        "requirements.txt": "Python",
    },
    "output": {"enableSkillLimit": False, "maxSkillsToReport": 50},
}


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate tests from real configuration.

    Points the skills API at an invalid host and resets debug logging.
    """
    monkeypatch.setenv("SKILLS_API_BASE", "https://skills.test.invalid/v5")
    set_global_debug_mode(False)
    yield
    set_global_debug_mode(False)


@pytest.fixture
def config_dict():
    """A deep copy of the base config, safe to modify per test."""
    return copy.deepcopy(BASE_CONFIG)


@pytest.fixture
def skills_config(config_dict):
    return SkillsConfig.from_dict(config_dict)


@pytest.fixture
def resolver(skills_config):
    return AliasResolver(skills_config)


@pytest.fixture
def catalog():
    """TypeScript, React.js, JavaScript plus a few distractors."""
    return InMemorySkillCatalog([
        SkillEntity(id="sk-ts", name="TypeScript", category="Programming Languages"),
        SkillEntity(id="sk-react", name="React.js", category="Frontend Frameworks"),
        SkillEntity(id="sk-js", name="JavaScript", category="Programming Languages"),
        SkillEntity(id="sk-python", name="Python", category="Programming Languages"),
        SkillEntity(id="sk-docker", name="Docker", category="DevOps"),
        SkillEntity(id="sk-gcloud", name="Google Cloud Platform", category="Cloud"),
    ])


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def typescript_corpus():
    """
    One TypeScript repository with a React topic, one commit and one merged PR.
    """
    return ActivityCorpus(
        repos=[
            Repository(
                name="webapp",
                full_name="dev/webapp",
                url="https://github.com/dev/webapp",
                language="TypeScript",
                languages={"TypeScript": 150000, "JavaScript": 20000},
                topics=["react"],
                stars=245,
                forks=12,
                is_owner=True,
                updated_at=NOW,
            ),
        ],
        commits=[
            Commit(
                repo="dev/webapp",
                sha="abc123",
                message="fix: resolve TypeScript errors",
                date=NOW - timedelta(days=3),
                files_changed=["src/app.ts"],
            ),
        ],
        pull_requests=[
            PullRequest(
                repo="dev/webapp",
                number=7,
                title="Add React hooks",
                body="Moves state into hooks",
                url="https://github.com/dev/webapp/pull/7",
                state="closed",
                merged=True,
                created_at=NOW - timedelta(days=10),
            ),
        ],
        stars=[],
    )


@pytest.fixture
def mixed_corpus():
    """Two repos, several commits, open and merged PRs, and stars."""
    return ActivityCorpus(
        repos=[
            Repository(
                name="api",
                full_name="dev/api",
                url="https://github.com/dev/api",
                language="Python",
                languages={"Python": 90000, "Shell": 3000},
                topics=["fastapi", "docker"],
                stars=30,
                forks=4,
                root_files=["Dockerfile", "requirements.txt"],
                updated_at=NOW - timedelta(days=400),
            ),
            Repository(
                name="site",
                full_name="dev/site",
                url="https://github.com/dev/site",
                language="JavaScript",
                languages={"JavaScript": 40000},
                topics=[],
                stars=2,
                forks=0,
                is_owner=False,
                readme="A small site built with Docker and plain JS.",
                updated_at=NOW - timedelta(days=30),
            ),
        ],
        commits=[
            Commit(repo="dev/api", sha="1", message="add python worker", date=NOW - timedelta(days=5),
                   files_changed=["worker.py"]),
            Commit(repo="dev/api", sha="2", message="tweak Dockerfile", date=NOW - timedelta(days=6),
                   files_changed=["Dockerfile"]),
            Commit(repo="dev/site", sha="3", message="update page", date=NOW - timedelta(days=7),
                   files_changed=["index.js"]),
            Commit(repo="other/fork", sha="4", message="python fixes", date=NOW - timedelta(days=8),
                   files_changed=["x.py"]),
        ],
        pull_requests=[
            PullRequest(repo="dev/api", number=1, title="Python 3.12 support", url="https://github.com/dev/api/pull/1",
                        merged=True, state="closed"),
            PullRequest(repo="dev/api", number=2, title="Docker image cleanup", url="https://github.com/dev/api/pull/2",
                        merged=False, state="open"),
        ],
        stars=[
            StarredRepo(name="black", full_name="psf/black", url="https://github.com/psf/black",
                        description="The uncompromising Python code formatter, now with more words",
                        language="Python", topics=["formatter"]),
        ],
    )
