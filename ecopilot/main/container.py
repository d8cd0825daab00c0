"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application. The API process and the Celery workers share it.
"""

from contextlib import asynccontextmanager
from typing import Optional

from dependency_injector import containers, providers

from ecopilot.application.use_cases.decision_use_case import DecisionEngine
from ecopilot.application.use_cases.optimization_execution_use_case import (
    OptimizationExecutionUseCase,
)
from ecopilot.application.use_cases.optimization_query_use_cases import (
    GetDailyUsageUseCase,
    GetOptimizationUseCase,
)
from ecopilot.application.use_cases.optimization_workflow_use_case import (
    OptimizationWorkflowUseCase,
)
from ecopilot.application.use_cases.preferences_use_cases import (
    GetPreferencesUseCase,
    UpdatePreferencesUseCase,
)
from ecopilot.application.use_cases.sensor_ingestion_use_case import (
    SensorIngestionUseCase,
)
from ecopilot.application.use_cases.usage_aggregation_use_case import (
    UsageAggregationUseCase,
)
from ecopilot.domain.entities.usage import Thresholds
from ecopilot.domain.ports.decision_backend import IDecisionBackend
from ecopilot.domain.ports.status_publisher import IStatusPublisher
from ecopilot.infrastructure.database import MongoDatabase
from ecopilot.infrastructure.gateways.gemini_gateway import GeminiGateway
from ecopilot.infrastructure.repositories import (
    OptimizationRepository,
    PreferencesRepository,
    SensorRepository,
    UsageRepository,
)
from ecopilot.infrastructure.services.actuator import SimulatedActuator
from ecopilot.infrastructure.services.event_dispatch import (
    CeleryExecutionDispatcher,
    CeleryOptimizationEventPublisher,
    CelerySensorEventPublisher,
)
from ecopilot.infrastructure.services.status_publisher import (
    NullStatusPublisher,
    RedisStatusPublisher,
)
from ecopilot.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


def build_status_publisher(
    redis_url: Optional[str], channel_prefix: str
) -> IStatusPublisher:
    if not redis_url:
        return NullStatusPublisher()
    return RedisStatusPublisher(redis_url=redis_url, channel_prefix=channel_prefix)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    wiring_config = containers.WiringConfiguration(packages=["..presentation"])

    # Settings
    config = providers.Configuration()

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
    )

    usage_repository = providers.Singleton(UsageRepository, database=mongo_database)
    optimization_repository = providers.Singleton(
        OptimizationRepository, database=mongo_database
    )
    preferences_repository = providers.Singleton(
        PreferencesRepository, database=mongo_database
    )
    sensor_repository = providers.Singleton(SensorRepository, database=mongo_database)

    sensor_event_publisher = providers.Singleton(CelerySensorEventPublisher)
    optimization_event_publisher = providers.Singleton(CeleryOptimizationEventPublisher)
    execution_dispatcher = providers.Singleton(CeleryExecutionDispatcher)

    status_publisher = providers.Singleton(
        build_status_publisher,
        redis_url=config.redis.url,
        channel_prefix=config.redis.status_channel_prefix,
    )

    # Gateways
    decision_backend = providers.Singleton(
        GeminiGateway,
        api_key=config.ai.api_key,
        model=config.ai.model,
        base_url=config.ai.base_url,
        timeout=config.ai.timeout_seconds,
    )

    decision_engine = providers.Singleton(
        DecisionEngine,
        backend=decision_backend,
        timeout_seconds=config.ai.timeout_seconds,
    )

    actuator = providers.Singleton(SimulatedActuator)

    default_thresholds = providers.Factory(
        Thresholds,
        daily_max=config.thresholds.daily_max,
        peak_hour_limit=config.thresholds.peak_hour_limit,
    )

    # Application (use cases)
    sensor_ingestion_use_case = providers.Factory(
        SensorIngestionUseCase,
        sensor_repository=sensor_repository,
        event_publisher=sensor_event_publisher,
    )

    usage_aggregation_use_case = providers.Factory(
        UsageAggregationUseCase,
        usage_repository=usage_repository,
        preferences_repository=preferences_repository,
        event_publisher=optimization_event_publisher,
        default_thresholds=default_thresholds,
    )

    optimization_workflow_use_case = providers.Factory(
        OptimizationWorkflowUseCase,
        optimization_repository=optimization_repository,
        decision_engine=decision_engine,
        execution_dispatcher=execution_dispatcher,
        status_publisher=status_publisher,
    )

    optimization_execution_use_case = providers.Factory(
        OptimizationExecutionUseCase,
        optimization_repository=optimization_repository,
        actuator=actuator,
        status_publisher=status_publisher,
        timeout_seconds=config.celery.execution_timeout_seconds,
    )

    get_preferences_use_case = providers.Factory(
        GetPreferencesUseCase,
        preferences_repository=preferences_repository,
        default_thresholds=default_thresholds,
    )

    update_preferences_use_case = providers.Factory(
        UpdatePreferencesUseCase,
        preferences_repository=preferences_repository,
    )

    get_optimization_use_case = providers.Factory(
        GetOptimizationUseCase,
        optimization_repository=optimization_repository,
    )

    get_daily_usage_use_case = providers.Factory(
        GetDailyUsageUseCase,
        usage_repository=usage_repository,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


def configure_decision_backend(
    container: AppContainer, backend: Optional[IDecisionBackend]
) -> None:
    """Swap the AI backend; None leaves the fallback policy deciding alone."""
    container.decision_backend.override(providers.Object(backend))
    container.decision_engine.reset()
    logger.info(
        "container.decision_backend.configured",
        backend=type(backend).__name__ if backend is not None else None,
    )


def reset_decision_backend(container: AppContainer) -> None:
    """Restore the backend built from settings."""
    container.decision_backend.reset_override()
    container.decision_backend.reset()
    container.decision_engine.reset()


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for external resources.

    Used by the FastAPI lifespan to create indexes on startup and close the
    MongoDB client on shutdown.
    """
    container = get_container()
    mongo_database = container.mongo_database()

    try:
        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()
        logger.info(
            "container.resources.initialized",
            ai_available=container.decision_engine().is_available(),
        )
        yield container

    finally:
        logger.info("container.mongo.close")
        mongo_database.close()
        logger.info("container.resources.shutdown")
