"""
Similarity service.
Ranks candidate strings and tag suggestions against a search query.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..config import Settings, get_settings
from ..models.schemas import RankedCandidate, RankedTag, ScoreMethod, TagRecord
from ..utils.string_utils import escape_html
from ..utils.text_utils import (
    compute_score,
    compute_text_match_score,
    levenshtein_distance,
    partial_ratio,
)

logger = logging.getLogger(__name__)


SCORERS = {
    ScoreMethod.GENERAL: compute_score,
    ScoreMethod.TEXT_MATCH: compute_text_match_score,
}


def highlight_label(name: str, query: str) -> str:
    """Escape a tag name for rich text and bold the first match of query."""
    match = re.search(re.escape(query), name, re.IGNORECASE) if query else None
    if match is None:
        return escape_html(name)
    start, end = match.span()
    return (
        escape_html(name[:start])
        + "<b>" + escape_html(name[start:end]) + "</b>"
        + escape_html(name[end:])
    )


@dataclass
class SimilarityComparison:
    """Every similarity signal for one pair of strings."""
    distance: int
    partial_ratio: float
    score: float
    text_match_score: float


class SimilarityService:
    """Scores and ranks strings with the fuzzy similarity engine."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _check_query(self, query: str) -> None:
        if isinstance(query, str) and len(query) > self.settings.max_query_length:
            raise ValueError(
                f"Query too long: {len(query)} characters "
                f"(max {self.settings.max_query_length})"
            )

    def _bound(self, candidate: str) -> str:
        """Truncate a candidate before scoring; the engine does no bounding itself."""
        if isinstance(candidate, str):
            return candidate[:self.settings.max_candidate_length]
        return candidate

    def _bound_pair(self, a: str, b: str) -> tuple[str, str]:
        """Check the shorter string as a query and truncate the longer one."""
        if not (isinstance(a, str) and isinstance(b, str)):
            # Left to the engine, which rejects non-strings
            return a, b
        if len(a) <= len(b):
            self._check_query(a)
            return a, self._bound(b)
        self._check_query(b)
        return self._bound(a), b

    def score(self, a: str, b: str, method: ScoreMethod = ScoreMethod.GENERAL) -> float:
        """Composite similarity of two strings using the given method."""
        a, b = self._bound_pair(a, b)
        return SCORERS[ScoreMethod(method)](a, b)

    def compare(self, a: str, b: str) -> SimilarityComparison:
        """Compute distance, partial ratio and both composite scores."""
        a, b = self._bound_pair(a, b)
        if len(a) < len(b):
            part = partial_ratio(a, b)
        else:
            part = partial_ratio(b, a)

        return SimilarityComparison(
            distance=levenshtein_distance(a, b),
            partial_ratio=part,
            score=compute_score(a, b),
            text_match_score=compute_text_match_score(a, b),
        )

    def rank(
        self,
        query: str,
        candidates: list[str],
        method: ScoreMethod = ScoreMethod.TEXT_MATCH,
        limit: Optional[int] = None,
        min_score: Optional[float] = None
    ) -> list[RankedCandidate]:
        """
        Rank candidates against a query, best first.

        Args:
            query: The user's search query
            candidates: Candidate strings (tags, titles)
            method: Which composite score to rank by
            limit: Maximum number of results (None = all)
            min_score: Drop candidates scoring below this (None = settings default)

        Returns:
            Ranked candidates; equal scores keep their input order
        """
        self._check_query(query)
        if len(candidates) > self.settings.max_candidates:
            raise ValueError(
                f"Too many candidates: {len(candidates)} (max {self.settings.max_candidates})"
            )

        scorer = SCORERS[ScoreMethod(method)]
        threshold = self.settings.default_min_score if min_score is None else min_score

        ranked = []
        for index, candidate in enumerate(candidates):
            score = scorer(query, self._bound(candidate))
            if score < threshold:
                continue
            ranked.append(RankedCandidate(candidate=candidate, index=index, score=score))

        # sorted() is stable, so ties stay in input order
        ranked = sorted(ranked, key=lambda r: r.score, reverse=True)
        if limit is not None:
            ranked = ranked[:limit]

        logger.debug(f"Ranked {len(candidates)} candidates for {query!r}, kept {len(ranked)}")
        return ranked

    def suggest_tags(
        self,
        query: str,
        tags: list[TagRecord],
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
        highlight: bool = False
    ) -> list[RankedTag]:
        """
        Rank tag suggestions for an autocomplete query.

        Tags are scored with the text-match score against their name; ties
        go to the tag with more posts. An empty query ranks by post count.
        With highlight set, each suggestion carries an HTML label with the
        matched part of the name in bold.
        """
        self._check_query(query)
        threshold = self.settings.default_min_score if min_score is None else min_score

        suggestions = []
        for tag in tags:
            score = compute_text_match_score(query, self._bound(tag.name)) if query else 0.0
            if query and score < threshold:
                continue
            label = highlight_label(tag.name, query) if highlight else None
            suggestions.append(RankedTag(name=tag.name, count=tag.count, score=score, label=label))

        suggestions.sort(key=lambda s: (s.score, s.count), reverse=True)
        if limit is not None:
            suggestions = suggestions[:limit]
        return suggestions


# Singleton instance
_similarity_service: Optional[SimilarityService] = None


def get_similarity_service() -> SimilarityService:
    """Get singleton instance of similarity service."""
    global _similarity_service
    if _similarity_service is None:
        _similarity_service = SimilarityService()
    return _similarity_service
