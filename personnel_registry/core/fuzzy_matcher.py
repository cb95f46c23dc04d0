"""Fuzzy name matching used for "did you mean" suggestions."""

from typing import Iterable, List, Optional, Tuple

from rapidfuzz import fuzz, process

from .normalizer import TextNormalizer


class FuzzyMatcher:
    """Suggests stored names that are close to a query with no hits."""

    def __init__(self, threshold: float = 0.6) -> None:
        """
        Initialize the fuzzy matcher.

        Args:
            threshold: Minimum similarity (0-1) for a name to be suggested
        """
        self.threshold = threshold
        self.normalizer = TextNormalizer()

    def suggest_corrections(
        self,
        query: str,
        candidates: Iterable[str],
        max_suggestions: int = 5,
        threshold: Optional[float] = None,
    ) -> List[str]:
        """
        Suggest names for a query.

        Args:
            query: Query to get suggestions for
            candidates: Names to choose from; duplicates are collapsed
            max_suggestions: Maximum number of suggestions
            threshold: Custom threshold (uses instance threshold if None)

        Returns:
            Suggested names, best first
        """
        return [name for name, _ in self._extract(query, candidates, max_suggestions, threshold)]

    def _extract(
        self,
        query: str,
        candidates: Iterable[str],
        limit: int,
        threshold: Optional[float],
    ) -> List[Tuple[str, float]]:
        if not query or limit <= 0:
            return []

        unique = list(dict.fromkeys(c for c in candidates if c))
        if not unique:
            return []

        threshold = self.threshold if threshold is None else threshold
        extracted = process.extract(
            query,
            unique,
            scorer=fuzz.WRatio,
            processor=self.normalizer.normalize,
            limit=limit,
            score_cutoff=threshold * 100,
        )
        return [(choice, score / 100.0) for choice, score, _ in extracted]
