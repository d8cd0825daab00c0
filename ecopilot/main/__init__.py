"""
Composition root of EcoPilot.

Settings, the dependency container and the two entry points: the FastAPI
app (``app.create_app``) and the Celery worker (``worker.main``).
"""

from .config import AppSettings, get_settings
from .container import AppContainer, get_container, init_container

__all__ = [
    "AppContainer",
    "AppSettings",
    "get_container",
    "get_settings",
    "init_container",
]
