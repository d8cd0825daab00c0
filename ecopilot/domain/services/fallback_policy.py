"""
Deterministic fallback policy.

Maps the excess over the daily threshold onto one of three remediation
tiers. Each tier's upper bound belongs to the tier below it: exactly 20%
is REDUCE_CONSUMPTION, exactly 10% is OPTIMIZE_SCHEDULING.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from ecopilot.domain.entities.optimization import (
    Decision,
    DecisionSource,
    OptimizationAction,
)


@dataclass(frozen=True)
class DecisionTier:
    action: OptimizationAction
    lower_bound_percent: float
    target_window: str
    savings_cap_percent: float
    confidence: float
    label: str
    rationale: str


TIERS: Tuple[DecisionTier, ...] = (
    DecisionTier(
        action=OptimizationAction.SHIFT_LOAD,
        lower_bound_percent=20.0,
        target_window="02:00-05:00",
        savings_cap_percent=25.0,
        confidence=0.85,
        label="High",
        rationale="recommending load shift to off-peak hours",
    ),
    DecisionTier(
        action=OptimizationAction.REDUCE_CONSUMPTION,
        lower_bound_percent=10.0,
        target_window="18:00-22:00",
        savings_cap_percent=15.0,
        confidence=0.78,
        label="Moderate",
        rationale="recommending consumption reduction during peak",
    ),
    DecisionTier(
        action=OptimizationAction.OPTIMIZE_SCHEDULING,
        lower_bound_percent=float("-inf"),
        target_window="12:00-16:00",
        savings_cap_percent=10.0,
        confidence=0.72,
        label="Minor",
        rationale="recommending schedule optimization",
    ),
)


def excess_percent(excess_amount: float, threshold: float) -> float:
    """Excess as a percentage of the threshold; unbounded for a zero threshold."""
    if threshold <= 0:
        return math.inf
    return excess_amount * 100 / threshold


def select_tier(percent: float) -> DecisionTier:
    for tier in TIERS:
        if percent > tier.lower_bound_percent:
            return tier
    return TIERS[-1]


def fallback_decision(percent: float) -> Decision:
    """Build the fallback decision for a given excess percentage."""
    tier = select_tier(percent)
    return Decision(
        action=tier.action,
        target_window=tier.target_window,
        expected_savings_percent=min(tier.savings_cap_percent, percent),
        confidence=tier.confidence,
        reasoning=f"{tier.label} excess ({percent:.1f}%) - {tier.rationale}",
        source=DecisionSource.FALLBACK,
    )
