"""
Clinical guidance built on top of a RiskAssessment: care recommendations and
natural-language explanations.
"""
from .recommendations import (
    MAX_RECOMMENDATIONS,
    CareRecommendation,
    CareRecommendationGenerator,
    RecommendationPriority,
)
from .explanation import explain

__all__ = [
    "MAX_RECOMMENDATIONS",
    "CareRecommendation",
    "CareRecommendationGenerator",
    "RecommendationPriority",
    "explain",
]
