"""Scoring Service - Compatibility scoring through the external assessment.

This module handles:
- Building the evaluation prompt for a customer/candidate pair
- Parsing the "<score>\\n<explanation>" reply into a ScoreResult
- Falling back to the heuristic scorer on any failure

Interface Contract:
- score_async(customer, candidate) -> ScoreResult, never raises
- score(customer, candidate) -> ScoreResult, blocking variant
- source is ScoreSource.FALLBACK whenever the reply was not usable

Cancellation of the awaiting task is not a failure and is not absorbed.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from config import LLM_TIMEOUT_SECONDS
from src.models import MatchCandidate, Profile, ScoreResult, ScoreSource
from src.services.fallback_scorer import FALLBACK_EXPLANATIONS, fallback_score
from src.services.llm_service import LLMServiceError, LLMTimeoutError
from src.services.match_policy import policy_for

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"-?\d+")


class ScoreParseError(LLMServiceError):
    """Raised when no score can be extracted from the reply."""
    pass


def comparable_fields(profile: Profile) -> dict[str, Any]:
    """Attributes the assessment compares. Names and contact details are left out."""
    return {
        "gender": profile.gender.value,
        "age": profile.age(),
        "income": profile.income,
        "heightCm": profile.height,
        "city": profile.city,
        "country": profile.country,
        "maritalStatus": profile.marital_status,
        "religion": profile.religion,
        "caste": profile.caste,
        "languages": list(profile.languages),
        "wantKids": profile.wants_kids.value,
        "openToRelocate": profile.open_to_relocate.value,
        "openToPets": profile.open_to_pets.value,
        "designation": profile.designation,
        "degree": profile.degree,
    }


def profile_differences(pair: MatchCandidate) -> dict[str, Any]:
    """Candidate minus customer on the numeric attributes the selection rules compare."""
    return {
        "ageYears": pair.age_delta,
        "income": pair.income_delta,
        "heightCm": pair.height_delta,
    }


def parse_score_response(response: str) -> tuple[int, str]:
    """Extract (score, explanation) from a reply.

    The score is the first integer anywhere in the text, so "Score: 87" and
    "87/100" both work. The explanation is whatever follows the line holding
    that integer.

    Raises:
        ScoreParseError: If the reply contains no integer
    """
    lines = response.strip().splitlines()
    for index, line in enumerate(lines):
        found = _INTEGER_RE.search(line)
        if not found:
            continue
        explanation = "\n".join(lines[index + 1:]).strip()
        if not explanation:
            rest = line[:found.start()] + line[found.end():]
            explanation = rest.strip(" \t:-/|").strip()
        return int(found.group()), explanation
    raise ScoreParseError(f"No score found in response: {response[:80]!r}")


class ScoringService:
    """Service for scoring customer/candidate compatibility."""

    def __init__(self, llm_service=None, *, timeout: float = LLM_TIMEOUT_SECONDS):
        """Initialize with optional LLM service dependency.

        Args:
            llm_service: LLM service for assessment. If None, uses default.
            timeout: Seconds allowed per assessment call
        """
        self._llm = llm_service
        self.timeout = timeout

    @property
    def llm(self):
        """Lazy load LLM service."""
        if self._llm is None:
            from src.services.llm_service import LLMService
            self._llm = LLMService.get_instance()
        return self._llm

    async def score_async(self, customer: Profile, candidate: Profile) -> ScoreResult:
        """Score a pair, falling back to the heuristic on any failure."""
        prompt = self._build_scoring_prompt(customer, candidate)
        try:
            try:
                response = await asyncio.wait_for(self.llm.call_async(prompt), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                raise LLMTimeoutError(f"Assessment exceeded {self.timeout}s") from e
            return self._parse_score_response(response)
        except Exception as e:
            logger.warning(
                "[score] fallback customer=%s candidate=%s reason=%s: %s",
                customer.id, candidate.id, type(e).__name__, e,
            )
            return fallback_score(customer, candidate)

    def score(self, customer: Profile, candidate: Profile) -> ScoreResult:
        """Blocking variant of score_async for non-async callers."""
        return asyncio.run(self.score_async(customer, candidate))

    def _build_scoring_prompt(self, customer: Profile, candidate: Profile) -> str:
        """Build prompt for compatibility assessment."""
        pair = MatchCandidate(customer=customer, profile=candidate, position=0)
        payload = {
            "customer": comparable_fields(customer),
            "candidate": comparable_fields(candidate),
            "differences": profile_differences(pair),
        }
        return f'''Evaluate the compatibility between a matchmaking customer and a potential match.

PROFILES (JSON):
{json.dumps(payload, ensure_ascii=False, indent=2)}
"differences" holds candidate minus customer values.

PRIORITIES:
{policy_for(customer).instruction}

RESPONSE FORMAT:
Line 1: a single whole number from 0 to 100 (the compatibility score)
Line 2 onwards: a short explanation (2-3 sentences) that starts with exactly one of:
- "High Potential Match" (score 80-100)
- "Good Compatibility" (score 65-79)
- "Average Compatibility" (score 50-64)
- "Limited Compatibility" (score below 50)

Return ONLY the score line and the explanation, no additional text.'''

    def _parse_score_response(self, response: str) -> ScoreResult:
        """Parse LLM response into ScoreResult."""
        score, explanation = parse_score_response(response)
        result = ScoreResult(score=score, explanation=explanation, source=ScoreSource.EXTERNAL)
        if not result.explanation:
            result.explanation = FALLBACK_EXPLANATIONS[result.tier]
        if not result.has_tier_prefix:
            logger.debug("[score] explanation lacks tier prefix tier=%s", result.tier.value)
        return result
