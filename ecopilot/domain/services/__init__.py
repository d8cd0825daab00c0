"""Domain services: pure policies with no infrastructure dependencies."""

from .fallback_policy import (
    TIERS,
    DecisionTier,
    excess_percent,
    fallback_decision,
    select_tier,
)
from .identifiers import generate_optimization_id

__all__ = [
    "TIERS",
    "DecisionTier",
    "excess_percent",
    "fallback_decision",
    "generate_optimization_id",
    "select_tier",
]
