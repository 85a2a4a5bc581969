"""
Exceptions and recoverable-error bookkeeping.

Bad or missing configuration is fatal: SkillsConfigError is raised before any
stage runs. A catalog that stops answering is not: the matcher records a
StageError in the run's ErrorCollector and the run finishes with what it has.
"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

SEVERITIES = ("critical", "high", "medium", "low")


class SkillInferenceError(Exception):
    """Base class for errors raised by this package."""


class SkillsConfigError(SkillInferenceError):
    """Skills configuration file is missing, unreadable or invalid."""


class CatalogUnavailableError(SkillInferenceError):
    """The skill catalog could not answer a request."""

    def __init__(self, message: str, term: Optional[str] = None):
        super().__init__(message)
        self.term = term  # Query being served when the catalog failed


@dataclass
class StageError:
    """A failure one stage recovered from."""

    stage: str
    operation: str  # e.g. "catalog_search"
    severity: str
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    recoverable: bool = True
    exception_type: Optional[str] = None
    term: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ErrorCollector:
    """Per-run list of StageErrors, attached to the PipelineResult."""

    def __init__(self):
        self.errors: List[StageError] = []

    def __len__(self) -> int:
        return len(self.errors)

    def add(self, error: StageError) -> None:
        self.errors.append(error)

    def add_error(
        self,
        stage: str,
        operation: str,
        message: str,
        severity: str = "medium",
        recoverable: bool = True,
        exception: Optional[Exception] = None,
        term: Optional[str] = None,
    ) -> StageError:
        error = StageError(
            stage=stage,
            operation=operation,
            severity=severity,
            message=message,
            recoverable=recoverable,
            exception_type=type(exception).__name__ if exception is not None else None,
            term=term,
        )
        self.add(error)
        return error

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_critical_errors(self) -> bool:
        """Critical and unrecoverable; a recoverable critical error does not count."""
        return any(e.severity == "critical" and not e.recoverable for e in self.errors)

    def for_stage(self, stage: str) -> List[StageError]:
        return [e for e in self.errors if e.stage == stage]

    def get_error_messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def summary(self) -> Dict[str, Any]:
        severities = Counter(e.severity for e in self.errors)
        recoverable = sum(e.recoverable for e in self.errors)
        return {
            "total": len(self.errors),
            "by_severity": {level: severities.get(level, 0) for level in SEVERITIES},
            "by_stage": dict(Counter(e.stage for e in self.errors)),
            "recoverable": recoverable,
            "non_recoverable": len(self.errors) - recoverable,
        }
