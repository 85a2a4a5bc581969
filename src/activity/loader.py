"""
Load a collected activity snapshot from disk.
"""

import json
import logging
from pathlib import Path
from typing import Union

from src.activity.types import ActivityCorpus

logger = logging.getLogger(__name__)


def load_activity_corpus(path: Union[str, Path]) -> ActivityCorpus:
    """
    Read an ActivityCorpus from a JSON file.

    Args:
        path: Snapshot file written by the collector

    Returns:
        ActivityCorpus

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object or has malformed fields
    """
    corpus_path = Path(path)

    with open(corpus_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in activity snapshot {corpus_path}: {e}")
            raise ValueError(f"Invalid JSON in activity snapshot {corpus_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Activity snapshot must be a JSON object: {corpus_path}")

    try:
        corpus = ActivityCorpus.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Malformed activity snapshot {corpus_path}: {e}")
        raise ValueError(f"Malformed activity snapshot {corpus_path}: {e}") from e

    logger.info(
        f"Loaded activity: {len(corpus.repos)} repos, {len(corpus.commits)} commits, "
        f"{len(corpus.pull_requests)} PRs, {len(corpus.stars)} stars"
    )
    return corpus
