"""
Infrastructure Services - Celery Configuration

This module contains the Celery application that carries the pipeline's
events. Each topic is bound to a task and each task to its own queue.
"""

from typing import Optional

from celery import Celery

from ecopilot.main.config import get_settings
from ecopilot.shared.consts import TASK_QUEUES

TASK_ROUTES = {
    task.value: {"queue": queue.value} for task, queue in TASK_QUEUES.items()
}


def create_celery_app(
    broker_url: Optional[str] = None,
    backend_url: Optional[str] = None,
) -> Celery:
    """
    Create and configure Celery application.

    Args:
        broker_url: Message broker URL (uses settings if not provided)
        backend_url: Result backend URL (uses settings if not provided)

    Returns:
        Configured Celery application
    """
    settings = get_settings().celery

    app = Celery(
        "ecopilot_worker",
        broker=broker_url or settings.broker_url,
        backend=backend_url or settings.result_backend_url,
        include=[
            "ecopilot.infrastructure.services.tasks.sensor_processing",
            "ecopilot.infrastructure.services.tasks.optimization",
            "ecopilot.infrastructure.services.tasks.execution",
        ],
    )

    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        result_expires=3600,
        task_routes=TASK_ROUTES,
        # at-least-once: acknowledge after the handler returns
        worker_prefetch_multiplier=1,
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_max_tasks_per_child=100,
        task_default_retry_delay=settings.retry_backoff_seconds,
        task_max_retries=settings.max_retries,
    )

    return app


def retry_delay(retries: int) -> int:
    """Exponential backoff for the given number of retries already spent."""
    settings = get_settings().celery
    return min(
        settings.retry_backoff_seconds * (2**retries),
        settings.retry_backoff_max_seconds,
    )


celery_app = create_celery_app()
