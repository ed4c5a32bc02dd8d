"""Candidate Service - Builds the candidate pool for a customer.

Interface Contract:
- select_candidates(customer, pool_limit) -> list[Profile]
- select_for_id(customer_id, pool_limit) -> (Profile, list[Profile])
- Raises CustomerNotFoundError for an unknown customer id
- Read-only: never writes to the profile store

Fewer matches than pool_limit are returned as-is: the filter is never
relaxed and the pool is never padded.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from config import CANDIDATE_POOL_LIMIT, CANDIDATE_POOL_ONLY
from src.models import Profile
from src.services.match_policy import policy_for
from src.services.profile_store import BaseProfileStore, ProfileFilter

logger = logging.getLogger(__name__)


class CandidateService:
    """Selects the eligible candidate pool for one customer."""

    def __init__(self, profile_store: BaseProfileStore, *, candidate_pool_only: bool = CANDIDATE_POOL_ONLY):
        self.profile_store = profile_store
        self.candidate_pool_only = candidate_pool_only

    def build_filter(self, customer: Profile) -> ProfileFilter:
        """Eligibility filter for the customer, per their gender's policy."""
        return replace(
            policy_for(customer).build_filter(customer),
            candidate_pool_only=self.candidate_pool_only,
            exclude_ids=frozenset({customer.id}),
        )

    def select_candidates(self, customer: Profile, pool_limit: int = CANDIDATE_POOL_LIMIT) -> list[Profile]:
        """Return up to pool_limit eligible profiles in store order.

        Raises:
            ValueError: If pool_limit is not positive
            StoreError: If the profile store is unavailable
        """
        if pool_limit < 1:
            raise ValueError(f"pool_limit must be a positive integer, got {pool_limit}")
        candidates = self.profile_store.find_by_filter(self.build_filter(customer), pool_limit)
        logger.info(
            "[select] customer=%s gender=%s pool=%d limit=%d",
            customer.id, customer.gender.value, len(candidates), pool_limit,
        )
        return candidates

    def select_for_id(self, customer_id: str, pool_limit: int = CANDIDATE_POOL_LIMIT) -> tuple[Profile, list[Profile]]:
        """Resolve the customer and select their pool.

        Raises:
            CustomerNotFoundError: If customer_id does not resolve
        """
        customer = self.profile_store.find_by_id(customer_id)
        return customer, self.select_candidates(customer, pool_limit)
