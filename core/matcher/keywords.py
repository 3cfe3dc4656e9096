#!/usr/bin/env python3
"""
Keyword Extractor - Tokenize free text into matchable keywords.
"""
import re
from typing import List

MIN_KEYWORD_LENGTH = 3

_NON_WORD = re.compile(r"\W+")

# Articles, conjunctions, auxiliaries and recruiting filler words
STOP_WORDS = frozenset([
    'the', 'a', 'an', 'and', 'or', 'but',
    'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
    'is', 'are', 'was', 'were', 'be', 'been', 'being',
    'have', 'has', 'had', 'do', 'does', 'did',
    'will', 'would', 'could', 'should', 'may', 'might', 'can', 'must', 'shall',
    'experience', 'knowledge', 'skills', 'ability', 'proficiency', 'understanding',
])


def extract_keywords(text: str) -> List[str]:
    """
    Extract meaningful keywords from text.

    Lower-cases, splits on runs of non-word characters and drops short tokens
    and stop words. Order and duplicates are preserved.

    Args:
        text: Free text

    Returns:
        List of keywords
    """
    if not text:
        return []
    return [
        token for token in _NON_WORD.split(text.lower())
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    ]
