"""
Worker Entry Point - Main Layer

This module serves as the entry point for the Celery worker consuming the
pipeline's queues. Both API and Worker are application entry points that
belong to the Main layer.
"""

from ecopilot.main.config import get_settings
from ecopilot.main.container import init_container
from ecopilot.shared import (
    QueueNames,
    configure_logging,
    get_logger,
    update_logging_from_settings,
)

configure_logging()

logger = get_logger(__name__)


def create_worker():
    """
    Configure and return the Celery worker.

    Similar to create_app() in app.py, this function loads settings and the
    container before handing over the Celery application.
    """
    settings = get_settings()
    update_logging_from_settings(settings)
    init_container(settings)

    from ecopilot.infrastructure.services.celery_config import create_celery_app

    worker_app = create_celery_app(
        broker_url=settings.celery.broker_url,
        backend_url=settings.celery.result_backend_url,
    )

    logger.info(
        "Configuring Celery worker",
        broker_url=settings.celery.broker_url,
        backend_url=settings.celery.result_backend_url,
        app_name=worker_app.main,
    )

    return worker_app


def worker_arguments() -> list:
    queues = ",".join(queue.value for queue in QueueNames)
    return [
        "worker",
        "--loglevel=info",
        f"--queues={queues}",
        "--concurrency=4",
    ]


def main():
    """Main entry point for Celery worker."""

    logger.info("Starting Celery worker")
    worker_app = create_worker()
    worker_app.worker_main(worker_arguments())


if __name__ == "__main__":
    main()
