"""Near-duplicate prompt matching.

Similarity is lexical: the Jaccard index of the whitespace-delimited token
sets of two normalized prompt fingerprints. The scan walks candidates in
recency order and stops at the first one that reaches the threshold, which
bounds a miss to one pass over the live entries.
"""

import logging
from collections.abc import Callable, Iterable

from response_cache.config import settings
from response_cache.entities import CacheEntry

logger = logging.getLogger(__name__)


def jaccard(first: set[str], second: set[str]) -> float:
    """Jaccard index of two sets (0.0 when both are empty)."""
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


class SimilarityIndex:
    """Finds a cached entry whose prompt is close enough to a new one.

    Matching trades precision for cost: a false positive returns a
    plausible response for a slightly different prompt instead of paying
    for an upstream call.
    """

    def __init__(self, threshold: float | None = None) -> None:
        """Initialize the index.

        Args:
            threshold: Minimum similarity (0-1) for a hit. Defaults to settings.
        """
        value = threshold if threshold is not None else settings.cache_similarity_threshold
        self._check_threshold(value)
        self._threshold = value

    @staticmethod
    def _check_threshold(threshold: float) -> None:
        if not 0 <= threshold <= 1:
            raise ValueError("Threshold must be between 0 and 1")

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._threshold

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Args:
            threshold: New threshold value (0-1, higher = more strict)
        """
        self._check_threshold(threshold)
        self._threshold = threshold

    @staticmethod
    def tokenize(fingerprint: str) -> set[str]:
        return set(fingerprint.split())

    def similarity(self, first: str, second: str) -> float:
        """Score two normalized fingerprints.

        Fingerprints that only differ in spacing ("써줘" / "써 줘") score 1.0;
        otherwise the score is the Jaccard index of their token sets.
        """
        compact = first.replace(" ", "")
        if compact and compact == second.replace(" ", ""):
            return 1.0
        return jaccard(self.tokenize(first), self.tokenize(second))

    def find(
        self,
        fingerprint: str,
        model: str,
        candidates: Iterable[CacheEntry],
        is_expired: Callable[[CacheEntry], bool],
    ) -> CacheEntry | None:
        """Return the first live candidate of the same model above the threshold.

        Args:
            fingerprint: Normalized prompt of the request
            model: Model identifier of the request
            candidates: Entries in most-recently-used-first order
            is_expired: Expiry check for a candidate

        Returns:
            The first qualifying entry, or None
        """
        for entry in candidates:
            if entry.model != model or is_expired(entry):
                continue
            score = self.similarity(fingerprint, entry.fingerprint)
            if score >= self._threshold:
                logger.debug(
                    "Similarity match",
                    extra={"cache_key": entry.key, "similarity": round(score, 4)},
                )
                return entry
        return None
