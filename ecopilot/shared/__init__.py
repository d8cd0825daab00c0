"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides shared utilities, constants, and enums that are used
across multiple layers of the application.

Its primary responsibilities include:
- Defining cross-layer constants (environment names, log levels, topics)
- Centralizing reusable enums and global values
- Configuring structured logging

Following Clean Architecture principles, the shared module must not depend
on Infrastructure or Frameworks.
"""

from .consts import (
    TASK_QUEUES,
    EnumEnvironment,
    EnumLogLevel,
    QueueNames,
    TaskNames,
    Topics,
)
from .logging import (
    bound_log_context,
    configure_logging,
    get_logger,
    update_logging_from_settings,
)

__all__ = [
    "TASK_QUEUES",
    "EnumEnvironment",
    "EnumLogLevel",
    "QueueNames",
    "TaskNames",
    "Topics",
    "bound_log_context",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
