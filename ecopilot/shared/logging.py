"""
Logging Configuration - Shared Layer

Structured logging for the API process and the Celery workers. Both
entry points call :func:`configure_logging` before settings are loaded and
:func:`update_logging_from_settings` once they are.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog
from structlog.types import Processor

from ecopilot.shared.consts import EnumEnvironment

_SHARED_PROCESSORS: List[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _env_defaults() -> Dict[str, Optional[str]]:
    return {
        "level": os.environ.get("LOG_LEVEL", "INFO"),
        "file_path": os.environ.get("LOG_FILE_PATH"),
        "environment": os.environ.get("ENVIRONMENT", EnumEnvironment.DEVELOPMENT.value),
    }


def _build_renderer(environment: str) -> Processor:
    if environment.lower() == EnumEnvironment.PRODUCTION.value:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: Optional[str] = None,
) -> None:
    """
    Route stdlib and structlog records through one formatter.

    Args:
        level: Log level name, defaults to ``LOG_LEVEL`` or INFO.
        file_path: Optional file to mirror console output into.
        environment: ``production`` renders JSON, anything else renders
            human-readable console lines.
    """
    defaults = _env_defaults()
    log_level = (level or defaults["level"] or "INFO").upper()
    log_file = file_path or defaults["file_path"]
    env_value = str(environment or defaults["environment"])

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _build_renderer(env_value),
        ],
        foreign_pre_chain=_SHARED_PROCESSORS,
    )
    for handler in handlers:
        handler.setFormatter(formatter)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    logging.getLogger(__name__).info(
        "logging.configured", extra={"level": log_level, "file": log_file}
    )


def update_logging_from_settings(settings: Any) -> None:
    """
    Reconfigure logging from the loaded application settings.

    Args:
        settings: Object exposing ``logging.level``, ``logging.file_path``
            and ``environment`` (enum members or plain strings).
    """
    try:
        level = getattr(settings.logging.level, "value", settings.logging.level)
        environment = getattr(settings.environment, "value", settings.environment)
        configure_logging(
            level=level,
            file_path=settings.logging.file_path,
            environment=environment,
        )
    except AttributeError as exc:
        logging.getLogger(__name__).error(
            "logging.settings_invalid", extra={"error": str(exc)}
        )


@contextmanager
def bound_log_context(**values: Any) -> Iterator[None]:
    """Bind correlation fields (e.g. ``optimization_id``) for a unit of work."""
    tokens = structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)
