from __future__ import annotations

import asyncio
import copy
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence

import pytest
from pymongo.errors import DuplicateKeyError

from ecopilot.domain.entities.errors import (
    InvalidStateTransitionError,
    OptimizationNotFoundError,
)
from ecopilot.domain.entities.optimization import (
    Decision,
    DecisionSource,
    ExecutionRequest,
    ExecutionResult,
    OptimizationAction,
    OptimizationRequest,
    OptimizationState,
)
from ecopilot.domain.entities.usage import (
    DailyUsage,
    SensorReading,
    SensorState,
    UserPreferences,
)
from ecopilot.domain.repositories import (
    IOptimizationRepository,
    IPreferencesRepository,
    ISensorRepository,
    IUsageRepository,
)

# ---------------------------------------------------------------------------
# Fake pymongo layer
# ---------------------------------------------------------------------------

UNIQUE_KEYS = {
    "daily_usage": "date",
    "optimization_triggers": "date",
    "optimizations": "id",
    "preferences": "key",
    "sensors": "sensor_id",
}


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, expected in query.items():
        actual = document.get(key)
        if isinstance(expected, dict) and "$nin" in expected:
            if actual in expected["$nin"]:
                return False
        elif isinstance(expected, dict) and "$ne" in expected:
            if isinstance(actual, list):
                if expected["$ne"] in actual:
                    return False
            elif actual == expected["$ne"]:
                return False
        elif isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


class FakeCollection:
    def __init__(self, unique_key: Optional[str] = None) -> None:
        self.unique_key = unique_key
        self.documents: List[Dict[str, Any]] = []
        self.created_indexes: List[tuple] = []
        self._next_id = 1

    def _find(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for document in self.documents:
            if _matches(document, query):
                return document
        return None

    def _check_unique(self, document: Dict[str, Any]) -> None:
        if self.unique_key is None:
            return
        value = document.get(self.unique_key)
        for existing in self.documents:
            if existing is not document and existing.get(self.unique_key) == value:
                raise DuplicateKeyError(f"duplicate {self.unique_key}: {value}")

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def find_one(
        self, query: Dict[str, Any], projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        document = self._find(query)
        if document is None:
            return None
        result = copy.deepcopy(document)
        if projection and projection.get("_id") == 0:
            result.pop("_id", None)
        return result

    def insert_one(self, document: Dict[str, Any]) -> Any:
        stored = copy.deepcopy(document)
        stored["_id"] = self._new_id()
        self._check_unique(stored)
        self.documents.append(stored)
        return SimpleNamespace(acknowledged=True, inserted_id=stored["_id"])

    def replace_one(
        self, query: Dict[str, Any], document: Dict[str, Any], upsert: bool = False
    ) -> Any:
        existing = self._find(query)
        if existing is None:
            if not upsert:
                return SimpleNamespace(matched_count=0, upserted_id=None)
            result = self.insert_one(document)
            return SimpleNamespace(matched_count=0, upserted_id=result.inserted_id)
        replacement = copy.deepcopy(document)
        replacement["_id"] = existing["_id"]
        self.documents[self.documents.index(existing)] = replacement
        return SimpleNamespace(matched_count=1, upserted_id=None)

    def _update(
        self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool
    ) -> tuple:
        existing = self._find(query)
        if existing is None:
            if not upsert:
                return SimpleNamespace(matched_count=0, upserted_id=None), None
            document = self._apply(
                {k: v for k, v in query.items() if not isinstance(v, dict)},
                update,
                inserting=True,
            )
            result = self.insert_one(document)
            stored = self.documents[-1]
            return (
                SimpleNamespace(matched_count=0, upserted_id=result.inserted_id),
                stored,
            )
        self._apply(existing, update, inserting=False)
        return SimpleNamespace(matched_count=1, upserted_id=None), existing

    def update_one(
        self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False
    ) -> Any:
        result, _ = self._update(query, update, upsert)
        return result

    def find_one_and_update(
        self,
        query: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False,
        projection: Optional[Dict[str, Any]] = None,
        return_document: Any = None,
    ) -> Optional[Dict[str, Any]]:
        _, document = self._update(query, update, upsert)
        if document is None:
            return None
        result = copy.deepcopy(document)
        if projection and projection.get("_id") == 0:
            result.pop("_id", None)
        return result

    @staticmethod
    def _apply(
        document: Dict[str, Any], update: Dict[str, Any], inserting: bool
    ) -> Dict[str, Any]:
        if inserting:
            document.update(update.get("$setOnInsert", {}))
        document.update(update.get("$set", {}))
        for key, value in update.get("$push", {}).items():
            document.setdefault(key, []).append(value)
        for key, value in update.get("$inc", {}).items():
            document[key] = document.get(key, 0) + value
        for key, value in update.get("$max", {}).items():
            document[key] = value if key not in document else max(document[key], value)
        return document

    def create_index(self, keys: Any, name: Optional[str] = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.closed = False

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(UNIQUE_KEYS.get(name))
        return self.collections[name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        return self.get_collection(collection_name).find_one(query, {"_id": 0})

    async def create_indexes(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


class InMemoryUsageRepository(IUsageRepository):
    def __init__(self) -> None:
        self.days: Dict[str, DailyUsage] = {}
        self.applied: Dict[str, set] = {}
        self.claims: Dict[str, tuple] = {}
        self._lock = asyncio.Lock()

    async def get_by_date(self, date: str) -> Optional[DailyUsage]:
        usage = self.days.get(date)
        return copy.deepcopy(usage) if usage else None

    async def append_reading(
        self, date: str, value: float, reading_id: str
    ) -> DailyUsage:
        async with self._lock:
            usage = self.days.setdefault(date, DailyUsage(date=date))
            applied = self.applied.setdefault(date, set())
            # yield while holding the lock so concurrent callers interleave
            await asyncio.sleep(0)
            if reading_id not in applied:
                applied.add(reading_id)
                usage.add_reading(value)
            return copy.deepcopy(usage)

    async def claim_optimization_trigger(
        self, date: str, reading_id: str, request: OptimizationRequest
    ) -> Optional[OptimizationRequest]:
        async with self._lock:
            if date in self.claims:
                owner, stored = self.claims[date]
                return copy.deepcopy(stored) if owner == reading_id else None
            await asyncio.sleep(0)
            self.claims[date] = (reading_id, copy.deepcopy(request))
            return request

    async def is_optimization_triggered(self, date: str) -> bool:
        return date in self.claims


class InMemoryOptimizationRepository(IOptimizationRepository):
    def __init__(self) -> None:
        self.states: Dict[str, OptimizationState] = {}
        self.history: List[tuple] = []

    async def get_by_id(self, optimization_id: str) -> Optional[OptimizationState]:
        state = self.states.get(optimization_id)
        return copy.deepcopy(state) if state else None

    async def create(self, state: OptimizationState) -> bool:
        if state.id in self.states:
            return False
        self._store(state)
        return True

    async def save(self, state: OptimizationState) -> OptimizationState:
        stored = self.states.get(state.id)
        if stored is None:
            raise OptimizationNotFoundError(state.id)
        if stored.is_terminal:
            raise InvalidStateTransitionError(
                state.id, stored.status.value, state.status.value
            )
        self._store(state)
        return state

    async def complete(self, state: OptimizationState) -> bool:
        stored = self.states.get(state.id)
        if stored is None or stored.is_terminal:
            return False
        self._store(state)
        return True

    def _store(self, state: OptimizationState) -> None:
        self.states[state.id] = copy.deepcopy(state)
        self.history.append((state.id, state.status))


class InMemoryPreferencesRepository(IPreferencesRepository):
    def __init__(self, preferences: Optional[UserPreferences] = None) -> None:
        self.preferences = preferences

    async def get(self) -> Optional[UserPreferences]:
        return copy.deepcopy(self.preferences)

    async def save(self, preferences: UserPreferences) -> UserPreferences:
        self.preferences = copy.deepcopy(preferences)
        return preferences


class InMemorySensorRepository(ISensorRepository):
    def __init__(self) -> None:
        self.states: Dict[str, SensorState] = {}
        self.raw: List[SensorReading] = []

    async def save_state(self, state: SensorState) -> None:
        self.states[state.sensor_id] = state

    async def get_state(self, sensor_id: str) -> Optional[SensorState]:
        return self.states.get(sensor_id)

    async def record_raw(self, reading: SensorReading) -> None:
        self.raw.append(reading)


# ---------------------------------------------------------------------------
# Recording ports
# ---------------------------------------------------------------------------


class RecordingSensorPublisher:
    def __init__(self) -> None:
        self.readings: List[SensorReading] = []

    async def publish_reading_created(self, reading: SensorReading) -> str:
        self.readings.append(reading)
        return f"task-{len(self.readings)}"


class RecordingOptimizationPublisher:
    def __init__(self) -> None:
        self.requests: List[OptimizationRequest] = []

    async def publish_optimization_required(self, request: OptimizationRequest) -> str:
        self.requests.append(request)
        return f"task-{len(self.requests)}"


class RecordingExecutionDispatcher:
    def __init__(self) -> None:
        self.requests: List[ExecutionRequest] = []

    async def dispatch_execution(self, request: ExecutionRequest) -> str:
        self.requests.append(request)
        return f"task-{len(self.requests)}"


class RecordingStatusPublisher:
    def __init__(self) -> None:
        self.messages: List[OptimizationState] = []

    async def publish(self, state: OptimizationState) -> None:
        self.messages.append(copy.deepcopy(state))

    @property
    def statuses(self) -> List[str]:
        return [state.status.value for state in self.messages]


class FakeDecisionBackend:
    def __init__(
        self,
        replies: Sequence[Any] = (),
        configured: bool = True,
        model_name: str = "fake-model",
        delay: float = 0.0,
    ) -> None:
        self.replies = list(replies)
        self.configured = configured
        self._model_name = model_name
        self.delay = delay
        self.prompts: List[str] = []

    @property
    def model_name(self) -> str:
        return self._model_name

    def is_configured(self) -> bool:
        return self.configured

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeActuator:
    def __init__(self, failures: Sequence[BaseException] = ()) -> None:
        self.failures = list(failures)
        self.applied: List[Decision] = []

    async def apply(self, decision: Decision) -> ExecutionResult:
        self.applied.append(decision)
        if self.failures:
            raise self.failures.pop(0)
        return ExecutionResult(
            success=True,
            applied_at=datetime.now(timezone.utc),
            details=f"Applied {decision.action.value}",
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def usage_repository() -> InMemoryUsageRepository:
    return InMemoryUsageRepository()


@pytest.fixture()
def optimization_repository() -> InMemoryOptimizationRepository:
    return InMemoryOptimizationRepository()


@pytest.fixture()
def preferences_repository() -> InMemoryPreferencesRepository:
    return InMemoryPreferencesRepository()


@pytest.fixture()
def sensor_repository() -> InMemorySensorRepository:
    return InMemorySensorRepository()


@pytest.fixture()
def sensor_publisher() -> RecordingSensorPublisher:
    return RecordingSensorPublisher()


@pytest.fixture()
def optimization_publisher() -> RecordingOptimizationPublisher:
    return RecordingOptimizationPublisher()


@pytest.fixture()
def execution_dispatcher() -> RecordingExecutionDispatcher:
    return RecordingExecutionDispatcher()


@pytest.fixture()
def status_publisher() -> RecordingStatusPublisher:
    return RecordingStatusPublisher()


@pytest.fixture()
def dummy_now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture()
def sample_request(dummy_now: datetime) -> OptimizationRequest:
    return OptimizationRequest(
        optimization_id="opt-2025-01-15-1736899200000-0a1b2c3d",
        date="2025-01-15",
        total_consumption=130.0,
        threshold=100.0,
        excess_amount=30.0,
        triggered_at=dummy_now,
    )


@pytest.fixture()
def sample_decision() -> Decision:
    return Decision(
        action=OptimizationAction.SHIFT_LOAD,
        target_window="02:00-05:00",
        expected_savings_percent=25.0,
        confidence=0.85,
        reasoning="High excess (30.0%) - recommending load shift to off-peak hours",
        source=DecisionSource.FALLBACK,
    )


@pytest.fixture()
def make_preferences_repository():
    def _make(daily_max: float, peak_hour_limit: float = 50.0):
        from ecopilot.domain.entities.usage import Thresholds

        return InMemoryPreferencesRepository(
            UserPreferences(
                thresholds=Thresholds(
                    daily_max=daily_max, peak_hour_limit=peak_hour_limit
                )
            )
        )

    return _make


@pytest.fixture()
def decision_backend_factory():
    return FakeDecisionBackend


@pytest.fixture()
def actuator_factory():
    return FakeActuator
