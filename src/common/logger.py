"""
Logging for the skill inference pipeline.

Stages log through a PipelineLogger, which tags every line with the run id
and the stage it came from:

    2025-06-01 12:00:00 [INFO] src.workflow: [run:1a2b3c4d] [match] Matched 12 skills

Leaf modules (catalog clients, loaders) use plain logging.getLogger(__name__).
Set DEBUG_MODE=true, or pass --debug to the CLI, for debug output.
"""

import json
import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional


SIMPLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
SIMPLE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    """Applies to PipelineLoggers created after the call."""
    global _debug_mode
    _debug_mode = enabled


def is_debug_mode() -> bool:
    return _debug_mode


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, SIMPLE_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class PipelineLogger:
    """
    Logger bound to one pipeline run and stage.

    Args:
        name: Underlying logger name, usually __name__
        run_id: Run identifier; the first 8 characters appear in each line
        stage: "extract", "match", "score" or "rank"
        debug_mode: Force DEBUG on or off; None follows the global flag
    """

    def __init__(
        self,
        name: str,
        run_id: Optional[str] = None,
        stage: Optional[str] = None,
        debug_mode: Optional[bool] = None,
    ):
        self.logger = logging.getLogger(name)
        self.run_id = run_id
        self.stage = stage
        self.debug_mode = is_debug_mode() if debug_mode is None else debug_mode
        if self.debug_mode:
            self.logger.setLevel(logging.DEBUG)

    @property
    def level(self) -> int:
        return self.logger.level

    @property
    def prefix(self) -> str:
        tags = []
        if self.run_id:
            tags.append(f"[run:{self.run_id[:8]}]")
        if self.stage:
            tags.append(f"[{self.stage}]")
        return " ".join(tags)

    def bind(self, stage: str) -> "PipelineLogger":
        """Same run and logger, different stage."""
        return PipelineLogger(self.logger.name, self.run_id, stage, self.debug_mode)

    def log(self, level: int, message: str, **kwargs) -> None:
        if self.prefix:
            message = f"{self.prefix} {message}"
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self.log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self.log(logging.ERROR, message, exc_info=True, **kwargs)

    @contextmanager
    def stage_timer(self, description: str) -> Iterator[None]:
        """
        Log how long a block took at debug level.

        A failing block is logged at error level with its elapsed time and
        the exception propagates unchanged.
        """
        start = time.perf_counter()
        try:
            yield
        except Exception:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            self.error(f"{description} failed after {elapsed_ms}ms")
            raise
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        self.debug(f"{description} took {elapsed_ms}ms")


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Route all logging to stderr, replacing existing root handlers.

    stdout is left free for the report.

    Args:
        level: DEBUG, INFO, WARNING or ERROR; unknown names fall back to INFO
        format: "simple" or "json"
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt=SIMPLE_DATE_FORMAT))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    run_id: Optional[str] = None,
    stage: Optional[str] = None,
    debug_mode: Optional[bool] = None,
) -> PipelineLogger:
    return PipelineLogger(name, run_id, stage, debug_mode)
