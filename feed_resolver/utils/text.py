"""Text similarity helpers used for feed and episode matching"""

import re
from difflib import SequenceMatcher


def similarity(a: str, b: str) -> float:
    """
    Jaccard similarity of the whitespace-separated token sets of two strings.

    Case-sensitive, no stemming. Two empty strings are identical (1.0);
    an empty string shares nothing with a non-empty one (0.0).
    """
    tokens_a = set(a.split())
    tokens_b = set(b.split())

    if not tokens_a and not tokens_b:
        return 1.0
    if not tokens_a or not tokens_b:
        return 0.0

    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def sequence_similarity(a: str, b: str) -> float:
    """Character-level similarity ratio between two strings"""
    if not a and not b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def normalize_title(title: str) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace"""
    title = re.sub(r'[^\w\s]', ' ', (title or '').lower())
    return ' '.join(title.split())
