"""
Infrastructure Layer Package

Concrete adapters for the domain: MongoDB repositories, the AI gateway,
Celery tasks and dispatchers, and the Redis status channel.
"""
