"""Infrastructure services: Celery app, tasks, dispatchers and side channels."""
