"""Match data models.

Pure data structures for scoring results and persisted suggestions.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field as dataclass_field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from src.models.profile import Profile


def clamp_score(value: int) -> int:
    return max(0, min(100, int(value)))


class MatchTier(Enum):
    """Coarse compatibility class, a pure function of the score."""
    HIGH = "High"
    GOOD = "Good"
    AVERAGE = "Average"
    LIMITED = "Limited"

    @classmethod
    def from_score(cls, score: int) -> "MatchTier":
        if score >= 80:
            return cls.HIGH
        if score >= 65:
            return cls.GOOD
        if score >= 50:
            return cls.AVERAGE
        return cls.LIMITED

    @property
    def label(self) -> str:
        """Canonical prefix the explanation text is expected to start with."""
        return TIER_LABELS[self]


TIER_LABELS = {
    MatchTier.HIGH: "High Potential Match",
    MatchTier.GOOD: "Good Compatibility",
    MatchTier.AVERAGE: "Average Compatibility",
    MatchTier.LIMITED: "Limited Compatibility",
}


class ScoreSource(Enum):
    """Where a score came from."""
    EXTERNAL = "external"
    FALLBACK = "fallback"


@dataclass
class ScoreResult:
    """Outcome of scoring one customer/candidate pair.

    The score is clamped to [0, 100] on construction and the tier is always
    derived from it, whatever the source.
    """
    score: int
    explanation: str
    source: ScoreSource

    def __post_init__(self):
        self.score = clamp_score(self.score)

    @property
    def tier(self) -> MatchTier:
        return MatchTier.from_score(self.score)

    @property
    def has_tier_prefix(self) -> bool:
        """Whether the explanation starts with the label for its tier (display only)."""
        return self.explanation.strip().lower().startswith(self.tier.label.lower())

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "explanation": self.explanation,
            "tier": self.tier.value,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class MatchCandidate:
    """Transient pairing of a customer with one profile from the pool."""
    customer: Profile
    profile: Profile
    position: int  # index in pool order, used as the sort tie-break

    @property
    def income_delta(self) -> int:
        return self.profile.income - self.customer.income

    @property
    def height_delta(self) -> int:
        return self.profile.height - self.customer.height

    @property
    def age_delta(self) -> int | None:
        customer_age = self.customer.age()
        candidate_age = self.profile.age()
        if customer_age is None or candidate_age is None:
            return None
        return candidate_age - customer_age


@dataclass
class Suggestion:
    """Persisted record of one scoring event."""
    customer_id: str
    candidate_id: str
    score: int
    explanation: str
    id: str = ""
    created_at: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "candidateId": self.candidate_id,
            "score": self.score,
            "explanation": self.explanation,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Suggestion":
        return cls(
            id=data.get("id", ""),
            customer_id=data.get("customerId", ""),
            candidate_id=data.get("candidateId", ""),
            score=int(data.get("score", 0)),
            explanation=data.get("explanation", ""),
            created_at=data.get("createdAt", ""),
        )


@dataclass
class MatchSuggestion:
    """A ranked suggestion as returned to callers."""
    candidate: Profile
    result: ScoreResult
    intro: str = ""
    suggestion_id: str = ""

    @property
    def candidate_id(self) -> str:
        return self.candidate.id

    @property
    def score(self) -> int:
        return self.result.score

    @property
    def tier(self) -> MatchTier:
        return self.result.tier

    def to_suggestion(self, customer_id: str) -> Suggestion:
        return Suggestion(
            customer_id=customer_id,
            candidate_id=self.candidate.id,
            score=self.result.score,
            explanation=self.result.explanation,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidateId": self.candidate.id,
            "name": self.candidate.full_name,
            "score": self.result.score,
            "explanation": self.result.explanation,
            "tier": self.result.tier.value,
            "source": self.result.source.value,
            "intro": self.intro,
            "suggestionId": self.suggestion_id,
        }


@dataclass
class SuggestionRun:
    """Result of one suggestion-generation call."""
    customer_id: str
    suggestions: list[MatchSuggestion] = dataclass_field(default_factory=list)
    pool_size: int = 0
    fallback_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "customerId": self.customer_id,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "poolSize": self.pool_size,
            "fallbackCount": self.fallback_count,
        }
