from __future__ import annotations

from ecopilot.infrastructure.services.celery_config import (
    TASK_ROUTES,
    create_celery_app,
    retry_delay,
)


def test_create_celery_app_uses_env(monkeypatch) -> None:
    monkeypatch.setenv("CELERY_BROKER_URL", "redis://env:6379/0")
    monkeypatch.setenv("CELERY_RESULT_BACKEND", "redis://env:6379/1")

    app = create_celery_app()

    assert app.conf.broker_url == "redis://env:6379/0"
    assert app.conf.result_backend == "redis://env:6379/1"
    assert app.conf.task_acks_late is True
    assert app.conf.worker_prefetch_multiplier == 1


def test_create_celery_app_with_explicit_params() -> None:
    app = create_celery_app(
        broker_url="amqp://explicit",
        backend_url="redis://explicit",
    )
    assert app.conf.broker_url == "amqp://explicit"
    assert app.conf.result_backend == "redis://explicit"


def test_each_task_has_its_own_queue() -> None:
    assert TASK_ROUTES == {
        "process_sensor_reading": {"queue": "sensor_events"},
        "optimize_energy": {"queue": "optimization"},
        "execute_optimization": {"queue": "execution"},
    }


def test_retry_delay_backs_off_exponentially(monkeypatch) -> None:
    monkeypatch.setenv("CELERY_RETRY_BACKOFF_SECONDS", "2")
    monkeypatch.setenv("CELERY_RETRY_BACKOFF_MAX_SECONDS", "10")

    assert [retry_delay(n) for n in range(5)] == [2, 4, 8, 10, 10]
