"""Shared Celery infrastructure components."""

from typing import Any

import structlog
from celery import Task

logger = structlog.get_logger(__name__)


def resolve_container() -> Any:
    """Container of the worker process, initialized on first use."""
    from ecopilot.main.config import get_settings
    from ecopilot.main.container import get_container, init_container

    try:
        return get_container()
    except RuntimeError:
        return init_container(get_settings())


class CallbackTask(Task):
    """Base task class that centralizes logging behaviour."""

    def on_success(self, retval, task_id, args, kwargs):
        logger.info("task.succeeded", task=self.name, task_id=task_id, result=retval)

    def on_retry(self, exc, task_id, args, kwargs, einfo):
        logger.warning(
            "task.retrying",
            task=self.name,
            task_id=task_id,
            retries=self.request.retries,
            error=str(exc),
        )

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(
            "task.failed",
            task=self.name,
            task_id=task_id,
            error=str(exc),
            traceback=einfo.traceback,
            exc_info=exc,
        )
