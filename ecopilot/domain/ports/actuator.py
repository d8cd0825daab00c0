"""Domain port for applying remediation actions."""

from __future__ import annotations

from typing import Protocol

from ecopilot.domain.entities.optimization import Decision, ExecutionResult


class IActuator(Protocol):
    async def apply(self, decision: Decision) -> ExecutionResult:
        """
        Apply a decision to the energy management system.

        Raises:
            Exception: Any failure; the executor records it as FAILED.
        """
        ...
