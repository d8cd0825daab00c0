"""
Application Use Cases - Decision Engine

Produces the remediation decision for a breached day. The AI backend is
consulted first; when it is unconfigured, slow, unreachable or replies with
something that does not decode, the deterministic fallback policy decides.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from ecopilot.application.dtos.decision_dto import decode_ai_decision
from ecopilot.domain.entities.errors import DecisionBackendError
from ecopilot.domain.entities.optimization import Decision, DecisionSource
from ecopilot.domain.ports.decision_backend import IDecisionBackend
from ecopilot.domain.services.fallback_policy import (
    TIERS,
    excess_percent,
    fallback_decision,
)

logger = structlog.get_logger(__name__)

AI_SAVINGS_CAP_PERCENT = 30.0
AI_DEFAULT_SAVINGS_PERCENT = 10.0
AI_DEFAULT_REASONING = "AI-generated recommendation"

PROMPT_TEMPLATE = """You are an energy optimization AI assistant. Analyze the following energy usage data and recommend an optimization action.

## Usage Data
- Date: {date}
- Total Consumption: {total_consumption} kWh
- Daily Threshold: {threshold} kWh
- Excess Amount: {excess_amount} kWh ({excess_percent:.1f}% over threshold)

## Instructions
Based on this data, recommend ONE of these actions:
{catalogue}

## Response Format
Return ONLY a valid JSON object with these exact fields:
{{
  "action": {actions},
  "targetWindow": "HH:MM-HH:MM",
  "expectedSavingsPercent": <number 0-{savings_cap:.0f}>,
  "confidence": <number 0.0-1.0>,
  "reasoning": "<brief explanation>"
}}"""

_TIER_GUIDANCE = {
    "SHIFT_LOAD": "Move high-consumption activities to off-peak hours (best for high excess > 20%)",
    "REDUCE_CONSUMPTION": "Reduce usage during peak hours (best for moderate excess 10-20%)",
    "OPTIMIZE_SCHEDULING": "Optimize appliance schedules (best for minor excess < 10%)",
}


@dataclass
class AIOutcome:
    decision: Decision


@dataclass
class AIFailure:
    reason: str


@dataclass
class FallbackOutcome:
    decision: Decision
    reason: str


DecisionOutcome = Union[AIOutcome, FallbackOutcome]


def build_prompt(
    total_consumption: float,
    threshold: float,
    excess_amount: float,
    date: str,
    percent: float,
) -> str:
    """Render the instruction sent to the AI backend."""
    catalogue = "\n".join(
        f"{index}. **{tier.action.value}** - {_TIER_GUIDANCE[tier.action.value]}"
        for index, tier in enumerate(TIERS, start=1)
    )
    actions = " | ".join(f'"{tier.action.value}"' for tier in TIERS)
    return PROMPT_TEMPLATE.format(
        date=date,
        total_consumption=total_consumption,
        threshold=threshold,
        excess_amount=excess_amount,
        excess_percent=percent,
        catalogue=catalogue,
        actions=actions,
        savings_cap=AI_SAVINGS_CAP_PERCENT,
    )


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


class DecisionEngine:
    """AI-primary, fallback-secondary decision maker. Never raises."""

    def __init__(
        self,
        backend: Optional[IDecisionBackend] = None,
        timeout_seconds: float = 15.0,
    ):
        """
        Args:
            backend: AI backend; None behaves like an unconfigured backend.
            timeout_seconds: Upper bound for one AI call. Expiry falls back.
        """
        self.backend = backend
        self.timeout_seconds = timeout_seconds

    def is_available(self) -> bool:
        return self.backend is not None and self.backend.is_configured()

    async def decide(
        self,
        total_consumption: float,
        threshold: float,
        excess_amount: float,
        date: str,
    ) -> Decision:
        outcome = await self.evaluate(total_consumption, threshold, excess_amount, date)
        return outcome.decision

    async def evaluate(
        self,
        total_consumption: float,
        threshold: float,
        excess_amount: float,
        date: str,
    ) -> DecisionOutcome:
        """Run the AI branch, falling back to the tier policy on failure."""
        percent = excess_percent(excess_amount, threshold)

        attempt = await self._try_ai(
            total_consumption, threshold, excess_amount, date, percent
        )
        if isinstance(attempt, AIOutcome):
            logger.info(
                "decision.ai_complete",
                action=attempt.decision.action.value,
                confidence=attempt.decision.confidence,
                source=DecisionSource.AI.value,
            )
            return attempt

        logger.warning(
            "decision.ai_failed_using_fallback",
            reason=attempt.reason,
            excess_percent=f"{percent:.1f}",
        )
        decision = fallback_decision(percent)
        logger.info(
            "decision.fallback_complete",
            action=decision.action.value,
            target_window=decision.target_window,
            expected_savings_percent=decision.expected_savings_percent,
        )
        return FallbackOutcome(decision=decision, reason=attempt.reason)

    async def _try_ai(
        self,
        total_consumption: float,
        threshold: float,
        excess_amount: float,
        date: str,
        percent: float,
    ) -> Union[AIOutcome, AIFailure]:
        if self.backend is None or not self.backend.is_configured():
            return AIFailure("AI backend credential is not configured")

        prompt = build_prompt(total_consumption, threshold, excess_amount, date, percent)
        logger.info(
            "decision.ai_request",
            model=self.backend.model_name,
            excess_percent=f"{percent:.1f}",
        )

        try:
            raw = await asyncio.wait_for(
                self.backend.generate(prompt), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            return AIFailure(f"AI call exceeded {self.timeout_seconds}s")
        except DecisionBackendError as exc:
            return AIFailure(exc.message)
        except Exception as exc:  # never-raise contract of the engine
            logger.error("decision.ai_unexpected_error", error=str(exc), exc_info=exc)
            return AIFailure(f"Unexpected AI backend error: {exc}")

        try:
            payload = decode_ai_decision(raw)
        except ValueError as exc:
            return AIFailure(f"Invalid AI response: {exc}")

        savings = (
            payload.expected_savings_percent
            if payload.expected_savings_percent is not None
            else AI_DEFAULT_SAVINGS_PERCENT
        )
        return AIOutcome(
            Decision(
                action=payload.action,
                target_window=payload.target_window,
                expected_savings_percent=_clamp(savings, 0.0, AI_SAVINGS_CAP_PERCENT),
                confidence=_clamp(payload.confidence, 0.0, 1.0),
                reasoning=payload.reasoning or AI_DEFAULT_REASONING,
                source=DecisionSource.AI,
                model=self.backend.model_name,
            )
        )
