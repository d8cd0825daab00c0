"""``python -m ecopilot.main`` starts a Celery worker on every pipeline queue."""

from .worker import main

if __name__ == "__main__":
    main()
