"""Domain port for the AI decision backend."""

from __future__ import annotations

from typing import Protocol


class IDecisionBackend(Protocol):
    """A text-generation backend consulted before the fallback policy."""

    @property
    def model_name(self) -> str:
        ...

    def is_configured(self) -> bool:
        """False when no credential is set; the engine then skips the call."""
        ...

    async def generate(self, prompt: str) -> str:
        """
        Return the raw model reply for a prompt.

        Raises:
            DecisionBackendError: On transport, HTTP or response-shape errors.
        """
        ...
