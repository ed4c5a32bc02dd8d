"""Matching Service - Suggestion generation for one customer.

This module handles:
- Resolving the customer and selecting the candidate pool
- Scoring every candidate concurrently (external assessment or fallback)
- Dropping low scores, ranking, adding intros and persisting records

Interface Contract:
- get_suggestions(customer_id) -> list[MatchSuggestion] (async)
- run(customer_id) -> SuggestionRun (async, with run statistics)
- get_suggestions_sync(customer_id, timeout=None) -> SuggestionRun
- history(customer_id) -> list[Suggestion]
- Only CustomerNotFoundError and StoreError escape; scoring failures never do

Scoring tasks are all joined before anything is filtered or stored, and
records are written in one batch at the very end, so a cancelled or timed
out run leaves nothing behind.
"""

from __future__ import annotations

import asyncio
import logging

from config import CANDIDATE_POOL_LIMIT, GENERATE_INTROS, MATCH_SCORE_THRESHOLD
from src.models import (
    MatchCandidate,
    MatchSuggestion,
    ScoreSource,
    Suggestion,
    SuggestionRun,
)
from src.services.candidate_service import CandidateService
from src.services.intro_service import IntroService
from src.services.profile_store import BaseProfileStore
from src.services.scoring_service import ScoringService
from src.services.suggestion_store import BaseSuggestionStore

logger = logging.getLogger(__name__)


class MatchingService:
    """Coordinates selection, scoring, ranking and persistence."""

    def __init__(
        self,
        profile_store: BaseProfileStore,
        suggestion_store: BaseSuggestionStore,
        *,
        llm_service=None,
        candidate_service: CandidateService | None = None,
        scoring_service: ScoringService | None = None,
        intro_service: IntroService | None = None,
        threshold: int = MATCH_SCORE_THRESHOLD,
        pool_limit: int = CANDIDATE_POOL_LIMIT,
        generate_intros: bool = GENERATE_INTROS,
    ):
        """Initialize with stores and optional collaborators.

        Args:
            profile_store: Read-only source of customers and candidates
            suggestion_store: Append-only sink for suggestion records
            llm_service: Shared client handed to the default scorer and intro service
            threshold: Scores at or below this are dropped
            pool_limit: Maximum candidates scored per run
            generate_intros: Attach an intro blurb to each retained match
        """
        self.profile_store = profile_store
        self.suggestion_store = suggestion_store
        self.candidates = candidate_service or CandidateService(profile_store)
        self.scorer = scoring_service or ScoringService(llm_service)
        self.intros = intro_service or IntroService(llm_service)
        self.threshold = threshold
        self.pool_limit = pool_limit
        self.generate_intros = generate_intros

    async def get_suggestions(self, customer_id: str) -> list[MatchSuggestion]:
        """Ranked suggestions for a customer, highest score first."""
        run = await self.run(customer_id)
        return run.suggestions

    async def run(self, customer_id: str) -> SuggestionRun:
        """Generate, persist and return one suggestion set.

        Raises:
            CustomerNotFoundError: If customer_id does not resolve
            StoreError: If either store fails
        """
        customer, pool = self.candidates.select_for_id(customer_id, self.pool_limit)
        candidates = [
            MatchCandidate(customer=customer, profile=profile, position=index)
            for index, profile in enumerate(pool)
        ]

        # gather keeps argument order, so completion order never leaks into the ranking
        results = await asyncio.gather(
            *(self.scorer.score_async(c.customer, c.profile) for c in candidates)
        )
        fallback_count = sum(1 for r in results if r.source is ScoreSource.FALLBACK)

        retained = [
            (candidate, result)
            for candidate, result in zip(candidates, results)
            if result.score > self.threshold
        ]
        retained.sort(key=lambda pair: (-pair[1].score, pair[0].position))

        if self.generate_intros:
            intros = await asyncio.gather(
                *(self.intros.generate_intro_async(customer, c.profile) for c, _ in retained)
            )
        else:
            intros = [""] * len(retained)

        suggestions = [
            MatchSuggestion(candidate=candidate.profile, result=result, intro=intro)
            for (candidate, result), intro in zip(retained, intros)
        ]
        records = [s.to_suggestion(customer.id) for s in suggestions]
        self.suggestion_store.insert_many(records)
        for suggestion, record in zip(suggestions, records):
            suggestion.suggestion_id = record.id

        logger.info(
            "[match] customer=%s pool=%d retained=%d fallback=%d threshold=%d",
            customer.id, len(candidates), len(suggestions), fallback_count, self.threshold,
        )
        return SuggestionRun(
            customer_id=customer.id,
            suggestions=suggestions,
            pool_size=len(candidates),
            fallback_count=fallback_count,
        )

    def get_suggestions_sync(self, customer_id: str, *, timeout: float | None = None) -> SuggestionRun:
        """Blocking entry point for Flask views and the CLI.

        Raises:
            asyncio.TimeoutError: If timeout elapses first; nothing is persisted
        """
        coro = self.run(customer_id)
        if timeout is not None:
            coro = asyncio.wait_for(coro, timeout=timeout)
        return asyncio.run(coro)

    def history(self, customer_id: str) -> list[Suggestion]:
        """Every stored suggestion for a customer, across all runs."""
        self.profile_store.find_by_id(customer_id)
        return self.suggestion_store.list_for_customer(customer_id)
