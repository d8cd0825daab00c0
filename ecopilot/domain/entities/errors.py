"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class OptimizationNotFoundError(DomainError):
    """Raised when an optimization state cannot be found."""

    def __init__(self, optimization_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"Optimization with ID {optimization_id} not found"
        super().__init__(message, details)


class InvalidStateTransitionError(DomainError):
    """Raised when a lifecycle transition would skip, regress or reopen."""

    def __init__(
        self,
        optimization_id: str,
        current: str,
        target: str,
        reason: Optional[str] = None,
    ):
        message = f"Optimization {optimization_id} cannot move from {current} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            {"optimization_id": optimization_id, "current": current, "target": target},
        )


class DecisionBackendError(DomainError):
    """Raised by an AI decision backend; always absorbed by the engine."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ActuationError(DomainError):
    """Raised when a remediation action cannot be applied."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
