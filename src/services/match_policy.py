"""Gender-conditioned matching policy.

The platform applies different rules depending on the customer's gender.
Each MatchPolicy bundles the three places those rules show up:
- the eligibility filter used to pick the candidate pool
- the additive adjustments of the heuristic scorer
- the instruction block sent to the external assessment

Changing the policy only touches this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from src.models import Gender, Profile
from src.services.profile_store import ProfileFilter

Predicate = Callable[[Profile, Profile], bool]


@dataclass(frozen=True)
class Adjustment:
    """Points added to the heuristic score when `applies(customer, candidate)` holds."""
    points: int
    reason: str
    applies: Predicate


@dataclass(frozen=True)
class MatchPolicy:
    gender: Gender
    build_filter: Callable[[Profile], ProfileFilter]
    adjustments: tuple[Adjustment, ...]
    instruction: str


def _male_customer_filter(customer: Profile) -> ProfileFilter:
    return ProfileFilter(
        gender=Gender.FEMALE,
        # unknown date of birth admits nobody as strictly younger
        born_after=customer.date_of_birth or date.max,
        income_below=customer.income,
        height_below=customer.height,
        equals={"wants_kids": customer.wants_kids},
    )


def _female_customer_filter(customer: Profile) -> ProfileFilter:
    return ProfileFilter(
        gender=Gender.MALE,
        equals={
            "open_to_relocate": customer.open_to_relocate,
            "religion": customer.religion,
            "caste": customer.caste,
        },
    )


MALE_CUSTOMER_POLICY = MatchPolicy(
    gender=Gender.MALE,
    build_filter=_male_customer_filter,
    adjustments=(
        Adjustment(15, "younger", lambda c, p: p.is_younger_than(c)),
        Adjustment(10, "earns less", lambda c, p: p.income < c.income),
        Adjustment(10, "shorter", lambda c, p: p.height < c.height),
        Adjustment(15, "same view on kids", lambda c, p: p.wants_kids is c.wants_kids),
    ),
    instruction=(
        "The customer is male. Prioritize women who are younger, earn less, "
        "are shorter, and have matching views on children."
    ),
)

FEMALE_CUSTOMER_POLICY = MatchPolicy(
    gender=Gender.FEMALE,
    build_filter=_female_customer_filter,
    adjustments=(
        Adjustment(10, "older", lambda c, p: p.is_older_than(c)),
        Adjustment(15, "earns at least as much", lambda c, p: p.income >= c.income),
        Adjustment(10, "taller", lambda c, p: p.height > c.height),
        Adjustment(15, "shared language", lambda c, p: p.shares_language_with(c)),
    ),
    instruction=(
        "The customer is female. Prioritize compatibility on profession, values, "
        "relocation preferences, pets, and languages."
    ),
)

POLICIES: dict[Gender, MatchPolicy] = {
    Gender.MALE: MALE_CUSTOMER_POLICY,
    Gender.FEMALE: FEMALE_CUSTOMER_POLICY,
}


def policy_for(customer: Profile) -> MatchPolicy:
    return POLICIES[customer.gender]
