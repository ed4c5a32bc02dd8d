"""Matchmaker suggestion engine package."""

from .models import Gender, Preference, Profile, ScoreResult, Suggestion
from .services.matching_service import MatchingService
from .services.profile_store import CustomerNotFoundError, StoreError

__all__ = [
    "Gender",
    "Preference",
    "Profile",
    "ScoreResult",
    "Suggestion",
    "MatchingService",
    "CustomerNotFoundError",
    "StoreError",
]
