"""
Infrastructure Repository - Optimization State MongoDB Implementation
"""

from typing import Any, Dict, Optional

import structlog
from pymongo.errors import DuplicateKeyError, PyMongoError

from ecopilot.domain.entities.errors import (
    InvalidStateTransitionError,
    OptimizationNotFoundError,
)
from ecopilot.domain.entities.optimization import (
    Decision,
    DecisionSource,
    ExecutionResult,
    OptimizationAction,
    OptimizationState,
    OptimizationStatus,
)
from ecopilot.domain.repositories.optimization_repository import IOptimizationRepository
from ecopilot.infrastructure.database.mongo_database import OPTIMIZATIONS, MongoDatabase

logger = structlog.get_logger(__name__)

_TERMINAL = [OptimizationStatus.COMPLETED.value, OptimizationStatus.FAILED.value]


class OptimizationRepository(IOptimizationRepository):
    """MongoDB implementation of the optimization state repository."""

    def __init__(self, database: MongoDatabase):
        self.database = database

    async def get_by_id(self, optimization_id: str) -> Optional[OptimizationState]:
        try:
            document = await self.database.find_one(OPTIMIZATIONS, {"id": optimization_id})
        except PyMongoError as e:
            logger.error(
                "Failed to get optimization",
                optimization_id=optimization_id,
                error=str(e),
            )
            raise
        return self._from_document(document) if document else None

    async def create(self, state: OptimizationState) -> bool:
        collection = self.database.get_collection(OPTIMIZATIONS)
        try:
            collection.insert_one(self._to_document(state))
        except DuplicateKeyError:
            return False
        logger.info("Optimization created", optimization_id=state.id)
        return True

    async def save(self, state: OptimizationState) -> OptimizationState:
        """
        Raises:
            OptimizationNotFoundError: If the state was never created.
            InvalidStateTransitionError: If the stored state is terminal.
        """
        if await self._replace_open(state):
            return state

        stored = await self.get_by_id(state.id)
        if stored is None:
            raise OptimizationNotFoundError(state.id)
        raise InvalidStateTransitionError(
            state.id, stored.status.value, state.status.value, "stored state is terminal"
        )

    async def complete(self, state: OptimizationState) -> bool:
        return await self._replace_open(state)

    async def _replace_open(self, state: OptimizationState) -> bool:
        collection = self.database.get_collection(OPTIMIZATIONS)
        try:
            result = collection.replace_one(
                {"id": state.id, "status": {"$nin": _TERMINAL}},
                self._to_document(state),
            )
        except PyMongoError as e:
            logger.error(
                "Failed to persist optimization",
                optimization_id=state.id,
                status=state.status.value,
                error=str(e),
            )
            raise
        return result.matched_count > 0

    def _to_document(self, state: OptimizationState) -> Dict[str, Any]:
        decision = state.decision
        result = state.execution_result
        return {
            "id": state.id,
            "status": state.status.value,
            "triggered_at": state.triggered_at,
            "decision": (
                {
                    "action": decision.action.value,
                    "target_window": decision.target_window,
                    "expected_savings_percent": decision.expected_savings_percent,
                    "confidence": decision.confidence,
                    "reasoning": decision.reasoning,
                    "source": decision.source.value,
                    "model": decision.model,
                }
                if decision
                else None
            ),
            "execution_result": (
                {
                    "success": result.success,
                    "applied_at": result.applied_at,
                    "details": result.details,
                }
                if result
                else None
            ),
            "completed_at": state.completed_at,
            "updated_at": state.updated_at,
        }

    def _from_document(self, document: Dict[str, Any]) -> OptimizationState:
        decision_doc = document.get("decision")
        result_doc = document.get("execution_result")
        return OptimizationState(
            id=document["id"],
            triggered_at=document["triggered_at"],
            status=OptimizationStatus(document["status"]),
            decision=(
                Decision(
                    action=OptimizationAction(decision_doc["action"]),
                    target_window=decision_doc["target_window"],
                    expected_savings_percent=decision_doc["expected_savings_percent"],
                    confidence=decision_doc["confidence"],
                    reasoning=decision_doc["reasoning"],
                    source=DecisionSource(decision_doc.get("source", "fallback")),
                    model=decision_doc.get("model"),
                )
                if decision_doc
                else None
            ),
            execution_result=(
                ExecutionResult(
                    success=result_doc["success"],
                    applied_at=result_doc["applied_at"],
                    details=result_doc["details"],
                )
                if result_doc
                else None
            ),
            completed_at=document.get("completed_at"),
            updated_at=document.get("updated_at"),
        )
