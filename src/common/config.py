"""
Runtime configuration for the skill inference pipeline.

Loads process-level settings from environment variables (.env file).
Domain tables and scoring weights live in the skills configuration file,
see src/common/skills_config.py.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# Shipped skills configuration, used when SKILLS_CONFIG_PATH is not set
DEFAULT_SKILLS_CONFIG_PATH = Path(__file__).parent.parent.parent / "data" / "skills_config.json"


class Config:
    """
    Centralized process configuration.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== Skills configuration file =====
    SKILLS_CONFIG_PATH: str = os.getenv("SKILLS_CONFIG_PATH", str(DEFAULT_SKILLS_CONFIG_PATH))

    # ===== Standardized skills catalog API =====
    SKILLS_API_BASE: str = os.getenv("SKILLS_API_BASE", "https://api.topcoder-dev.com/v5")
    SKILLS_API_TIMEOUT: int = int(os.getenv("SKILLS_API_TIMEOUT", "30"))
    SKILLS_API_SEARCH_SIZE: int = int(os.getenv("SKILLS_API_SEARCH_SIZE", "10"))

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "simple")  # "simple" or "json"

    LOG_FORMATS = ("simple", "json")

    @classmethod
    def validate(cls) -> None:
        """
        Check settings before a run.

        Raises:
            ValueError: Empty API base, non-positive timeout or search size,
                unknown log format
        """
        problems = []
        if not cls.SKILLS_API_BASE:
            problems.append("SKILLS_API_BASE is empty")
        if cls.SKILLS_API_TIMEOUT <= 0:
            problems.append(f"SKILLS_API_TIMEOUT must be positive, got {cls.SKILLS_API_TIMEOUT}")
        if cls.SKILLS_API_SEARCH_SIZE <= 0:
            problems.append(f"SKILLS_API_SEARCH_SIZE must be positive, got {cls.SKILLS_API_SEARCH_SIZE}")
        if cls.LOG_FORMAT not in cls.LOG_FORMATS:
            problems.append(f"LOG_FORMAT must be one of {cls.LOG_FORMATS}, got '{cls.LOG_FORMAT}'")
        if problems:
            raise ValueError("Invalid configuration: " + "; ".join(problems) + ". Check your .env file.")

    @classmethod
    def summary(cls) -> str:
        """Settings overview for logs; holds no secrets."""
        config_state = "found" if Path(cls.SKILLS_CONFIG_PATH).is_file() else "MISSING"
        return "\n".join([
            "Skill inference settings:",
            f"  skills config : {cls.SKILLS_CONFIG_PATH} ({config_state})",
            f"  catalog API   : {cls.SKILLS_API_BASE}",
            f"  API timeout   : {cls.SKILLS_API_TIMEOUT}s, {cls.SKILLS_API_SEARCH_SIZE} results per search",
            f"  logging       : {cls.LOG_LEVEL} ({cls.LOG_FORMAT})",
        ])
