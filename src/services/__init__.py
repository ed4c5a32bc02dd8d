"""Service layer - Business logic modules.

Each service module has a clear interface and can be developed/tested independently.
"""

from .llm_service import LLMService
from .candidate_service import CandidateService
from .scoring_service import ScoringService
from .intro_service import IntroService
from .matching_service import MatchingService

__all__ = [
    "LLMService",
    "CandidateService",
    "ScoringService",
    "IntroService",
    "MatchingService",
]
