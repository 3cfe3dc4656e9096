import math
import logging

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive scores.

    Python's round() uses banker's rounding (round(72.5) == 72); scores are
    rounded the way people read them (72.5 -> 73).
    """
    return int(math.floor(value + 0.5))


def similarity_from_raw_score(raw_score: float, offset: float = 1.0) -> float:
    """Recover cosine similarity from a vector index raw score.

    Vector indexes report raw_score = cosine_similarity + offset (with the
    default offset the range is [0, 2]). The result is clipped to [-1, 1].

    Args:
        raw_score: Score reported by the vector index
        offset: Offset convention of the index

    Returns:
        Cosine similarity in range [-1, 1]
    """
    similarity = float(raw_score) - offset
    if not (-1.0 <= similarity <= 1.0):
        logger.error(f"Similarity out of range: {similarity}, clipping to [-1, 1]")
        return max(-1.0, min(1.0, similarity))
    return similarity


def normalize_description(description: str) -> str:
    """Normalized form used to deduplicate requirements (trim + case-fold)."""
    return (description or "").strip().casefold()
