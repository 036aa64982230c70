"""
Risk Scoring

Transforms a post-operative assessment into a quantified complication risk.

Usage:
    from postop_risk.core.scoring import RiskScoringEngine

    engine = RiskScoringEngine(random_source)
    risk = engine.score(assessment)
"""
from .base import (
    FactorAxis,
    FollowUpPriority,
    RiskAssessment,
    RiskCategory,
    RiskFactor,
    categorize,
    follow_up_priority,
    round_half_up,
)
from .catalog import CATALOG, CatalogEntry, FiredRule, evaluate_catalog
from .engine import RiskScoringEngine
from .temporal import describe_elapsed, hours_since_surgery, temporal_multiplier

__all__ = [
    "RiskScoringEngine",
    "RiskAssessment",
    "RiskFactor",
    "RiskCategory",
    "FollowUpPriority",
    "FactorAxis",
    "categorize",
    "follow_up_priority",
    "round_half_up",
    "CATALOG",
    "CatalogEntry",
    "FiredRule",
    "evaluate_catalog",
    "describe_elapsed",
    "hours_since_surgery",
    "temporal_multiplier",
]
