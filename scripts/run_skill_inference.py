"""
CLI Entry Point: Infer skills from a collected GitHub activity snapshot

Usage:
    python scripts/run_skill_inference.py --activity activity.json
    python scripts/run_skill_inference.py --activity activity.json --skills-file skills.json --format json
    python scripts/run_skill_inference.py --activity activity.json --limit 10 --no-evidence
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.activity.loader import load_activity_corpus
from src.catalog.in_memory import InMemorySkillCatalog
from src.catalog.standardized_skills_client import StandardizedSkillsClient
from src.common.config import Config
from src.common.error_handling import SkillInferenceError
from src.common.logger import set_global_debug_mode, setup_logging
from src.common.skills_config import load_skills_config
from src.output.report import ReportGenerator
from src.workflow import SkillInferencePipeline
from version import __version__


def progress(message: str) -> None:
    """Progress goes to stderr so stdout carries only the report."""
    print(message, file=sys.stderr)


def main():
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Infer a ranked, explained skill list from developer activity"
    )
    parser.add_argument(
        "--activity",
        required=True,
        help="Path to the activity snapshot JSON (repos, commits, pull requests, stars)"
    )
    parser.add_argument(
        "--skills-file",
        help="Offline skills list (JSON array of {id, name, category}); "
             "defaults to the standardized skills API"
    )
    parser.add_argument(
        "--config",
        default=Config.SKILLS_CONFIG_PATH,
        help="Skills configuration file (aliases, hierarchy, scoring weights)"
    )
    parser.add_argument(
        "--format",
        default="text",
        choices=["text", "json"],
        help="Report format"
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of skills to report"
    )
    parser.add_argument(
        "--no-evidence",
        action="store_true",
        help="Hide evidence links in the text report"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.debug:
        set_global_debug_mode(True)
    setup_logging(level="DEBUG" if args.debug else Config.LOG_LEVEL, format=Config.LOG_FORMAT)

    try:
        Config.validate()
        if args.debug:
            progress(Config.summary())

        progress(f"Loading skills configuration from: {args.config}")
        config = load_skills_config(args.config)

        progress(f"Loading activity from: {args.activity}")
        corpus = load_activity_corpus(args.activity)
        progress(
            f"✓ {len(corpus.repos)} repos, {len(corpus.commits)} commits, "
            f"{len(corpus.pull_requests)} PRs, {len(corpus.stars)} stars"
        )

        if args.skills_file:
            catalog = InMemorySkillCatalog.from_json_file(args.skills_file)
            progress(f"✓ Loaded {len(catalog)} skills from {args.skills_file}")
        else:
            progress(f"Using skills API: {Config.SKILLS_API_BASE}")
            catalog = StandardizedSkillsClient()

        result = SkillInferencePipeline(config, catalog).run(corpus, limit=args.limit)

        report = ReportGenerator(format=args.format, show_evidence=not args.no_evidence)
        print(report.generate(result, corpus))

        if result.errors.has_errors():
            progress(f"⚠️  {len(result.errors.errors)} catalog error(s) during matching:")
            for message in result.errors.get_error_messages():
                progress(f"  - {message}")

    except (SkillInferenceError, FileNotFoundError, ValueError) as e:
        progress(f"\n❌ ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
