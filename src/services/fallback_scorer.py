"""Heuristic fallback scorer.

Deterministic, rule-based scoring used whenever the external assessment is
unavailable or returns something unparsable. No I/O; always succeeds.
"""

from __future__ import annotations

from src.models import MatchTier, Profile, ScoreResult, ScoreSource
from src.services.match_policy import policy_for

BASE_SCORE = 50

FALLBACK_EXPLANATIONS = {
    MatchTier.HIGH: (
        f"{MatchTier.HIGH.label}: Strong alignment on the key preferences for this match."
    ),
    MatchTier.GOOD: (
        f"{MatchTier.GOOD.label}: Several important preferences line up well."
    ),
    MatchTier.AVERAGE: (
        f"{MatchTier.AVERAGE.label}: Some preferences align, others differ."
    ),
    MatchTier.LIMITED: (
        f"{MatchTier.LIMITED.label}: Few of the key preferences line up."
    ),
}


def heuristic_points(customer: Profile, candidate: Profile) -> int:
    """Base score plus every policy adjustment that applies, unclamped."""
    points = BASE_SCORE
    for adjustment in policy_for(customer).adjustments:
        if adjustment.applies(customer, candidate):
            points += adjustment.points
    return points


def fallback_score(customer: Profile, candidate: Profile) -> ScoreResult:
    """Score a pair without the external assessment."""
    result = ScoreResult(
        score=heuristic_points(customer, candidate),
        explanation="",
        source=ScoreSource.FALLBACK,
    )
    result.explanation = FALLBACK_EXPLANATIONS[result.tier]
    return result
