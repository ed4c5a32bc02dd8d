"""Data models - Pure data structures with no business logic."""

from .profile import Gender, Preference, Profile
from .match import (
    MatchCandidate,
    MatchSuggestion,
    MatchTier,
    ScoreResult,
    ScoreSource,
    Suggestion,
    SuggestionRun,
)

__all__ = [
    "Gender",
    "Preference",
    "Profile",
    "MatchCandidate",
    "MatchSuggestion",
    "MatchTier",
    "ScoreResult",
    "ScoreSource",
    "Suggestion",
    "SuggestionRun",
]
