"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .optimizations_controller import router as optimizations_router
from .preferences_controller import router as preferences_router
from .sensors_controller import router as sensors_router
from .usage_controller import router as usage_router

__all__ = [
    "optimizations_router",
    "preferences_router",
    "sensors_router",
    "usage_router",
]
