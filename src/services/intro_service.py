"""Intro Service - Short personalized introduction per accepted match.

Interface Contract:
- generate_intro_async(customer, candidate) -> str, never raises
- generate_intro(customer, candidate) -> str, blocking variant
- Any failure degrades to a template built from both profiles
"""

from __future__ import annotations

import asyncio
import logging

from config import LLM_TIMEOUT_SECONDS
from src.models import Profile
from src.services.llm_service import LLMResponseError, LLMTimeoutError

logger = logging.getLogger(__name__)

MAX_INTRO_WORDS = 100


def _describe(profile: Profile) -> str:
    age = profile.age()
    parts = [f"{age}" if age is not None else "age not shared"]
    parts.append(profile.designation or "professional")
    parts.append(f"in {profile.city}" if profile.city else "location not shared")
    return ", ".join(parts)


def template_intro(customer: Profile, candidate: Profile) -> str:
    """Static intro used when the external capability is unavailable."""
    return (
        f"Hi {customer.first_name}, meet {candidate.first_name} ({_describe(candidate)}). "
        f"We think you ({_describe(customer)}) and {candidate.first_name} "
        f"would have a lot to talk about."
    )


class IntroService:
    """Service for match introduction blurbs."""

    def __init__(self, llm_service=None, *, timeout: float = LLM_TIMEOUT_SECONDS):
        self._llm = llm_service
        self.timeout = timeout

    @property
    def llm(self):
        """Lazy load LLM service."""
        if self._llm is None:
            from src.services.llm_service import LLMService
            self._llm = LLMService.get_instance()
        return self._llm

    async def generate_intro_async(self, customer: Profile, candidate: Profile) -> str:
        prompt = self._build_intro_prompt(customer, candidate)
        try:
            try:
                response = await asyncio.wait_for(self.llm.call_async(prompt), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                raise LLMTimeoutError(f"Intro exceeded {self.timeout}s") from e
            return self._clean_intro(response)
        except Exception as e:
            logger.warning(
                "[intro] fallback customer=%s candidate=%s reason=%s: %s",
                customer.id, candidate.id, type(e).__name__, e,
            )
            return template_intro(customer, candidate)

    def generate_intro(self, customer: Profile, candidate: Profile) -> str:
        return asyncio.run(self.generate_intro_async(customer, candidate))

    def _build_intro_prompt(self, customer: Profile, candidate: Profile) -> str:
        """Build prompt for intro generation."""
        return f'''Write a short, warm, personalized email intro introducing {candidate.first_name} to {customer.first_name}.

CUSTOMER:
Name: {customer.first_name}
Age: {customer.age() or 'Not specified'}
Profession: {customer.designation or 'Not specified'}
City: {customer.city or 'Not specified'}

MATCH:
Name: {candidate.first_name}
Age: {candidate.age() or 'Not specified'}
Profession: {candidate.designation or 'Not specified'}
City: {candidate.city or 'Not specified'}
Languages: {', '.join(candidate.languages) if candidate.languages else 'Not specified'}

REQUIREMENTS:
1. Keep it under {MAX_INTRO_WORDS} words
2. Address {customer.first_name} directly
3. Do not invent facts beyond the profiles above

Return ONLY the intro text.'''

    def _clean_intro(self, response: str) -> str:
        text = response.strip()
        if not text:
            raise LLMResponseError("Empty intro")
        words = text.split()
        if len(words) > MAX_INTRO_WORDS:
            text = " ".join(words[:MAX_INTRO_WORDS]) + "..."
        return text
