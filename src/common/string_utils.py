"""
String matching helpers shared by signal extraction, evidence and scoring.

Whole-word matching is done with plain `str.find` and fixed character tests.
No pattern is ever compiled from a skill name or other catalog data, so the
check stays linear in the length of the text.
"""

import re
from typing import Iterable


# Characters stripped when comparing two technology names ("React.js" == "reactjs")
_NORMALIZE_STRIP = re.compile(r"[.\s\-]")


def _is_alphanumeric(char: str) -> bool:
    """ASCII letters and digits only (a-z, A-Z, 0-9)."""
    return ("0" <= char <= "9") or ("a" <= char <= "z") or ("A" <= char <= "Z")


def is_whole_word_match(text: str, word: str) -> bool:
    """
    Check whether `word` occurs in `text` as a complete word.

    Both arguments should already be lowercased by the caller. Every
    occurrence is examined, since an early one may sit inside a longer word
    ("javascript and java") while a later one stands alone.

    Args:
        text: Text to search in
        word: Word to look for

    Returns:
        True if at least one occurrence is bounded by non-alphanumeric
        characters or the ends of the string
    """
    if not word:
        return False

    word_len = len(word)
    index = text.find(word)
    while index != -1:
        end = index + word_len
        boundary_before = index == 0 or not _is_alphanumeric(text[index - 1])
        boundary_after = end >= len(text) or not _is_alphanumeric(text[end])
        if boundary_before and boundary_after:
            return True
        index = text.find(word, index + 1)

    return False


def find_whole_words(text: str, words: Iterable[str]) -> list:
    """
    Return the subset of `words` that appear as whole words in `text`.

    Matching is case-insensitive; the returned names keep their original
    casing and input order, without duplicates.
    """
    text_lower = text.lower()
    found = []
    seen = set()
    for word in words:
        word_lower = word.lower()
        if word_lower in seen:
            continue
        if is_whole_word_match(text_lower, word_lower):
            seen.add(word_lower)
            found.append(word)
    return found


def normalize_term(term: str) -> str:
    """Lowercase and drop dots, whitespace and hyphens."""
    return _NORMALIZE_STRIP.sub("", term.lower())
