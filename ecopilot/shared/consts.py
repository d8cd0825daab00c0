from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Topics(str, Enum):
    """Event topics flowing through the pipeline."""

    SENSOR_READING_CREATED = "sensor.reading.created"
    OPTIMIZATION_REQUIRED = "optimization.required"
    EXECUTION_REQUESTED = "execution.requested"


class TaskNames(str, Enum):
    """Celery task names bound to each topic."""

    PROCESS_SENSOR_READING = "process_sensor_reading"
    OPTIMIZE_ENERGY = "optimize_energy"
    EXECUTE_OPTIMIZATION = "execute_optimization"


class QueueNames(str, Enum):
    SENSOR_EVENTS = "sensor_events"
    OPTIMIZATION = "optimization"
    EXECUTION = "execution"


TASK_QUEUES = {
    TaskNames.PROCESS_SENSOR_READING: QueueNames.SENSOR_EVENTS,
    TaskNames.OPTIMIZE_ENERGY: QueueNames.OPTIMIZATION,
    TaskNames.EXECUTE_OPTIMIZATION: QueueNames.EXECUTION,
}
