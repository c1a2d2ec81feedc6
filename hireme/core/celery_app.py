"""
Celery application configuration.

Redis is both broker and result backend. Lifecycle tasks acknowledge late
so a worker that dies mid-task leaves its message to be redelivered, which
makes every task at-least-once; handlers are written to tolerate that.
"""

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from hireme.core.config import settings
from hireme.core.logging_config import setup_logging

celery_app = Celery(
    "hireme_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL
)

# Scheduled completions sit in the broker for the whole interaction window.
# Redis redelivers unacknowledged messages after the visibility timeout, so it
# has to outlast the longest ETA or they would be delivered early and twice.
_VISIBILITY_TIMEOUT = (settings.INTERACTION_WINDOW_DAYS + 1) * 24 * 60 * 60

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=300,
    task_soft_time_limit=240,

    broker_transport_options={"visibility_timeout": _VISIBILITY_TIMEOUT},

    # Result backend
    result_expires=3600,

    # Worker behavior
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=200,

    beat_schedule={
        "sweep-due-job-connections": {
            "task": "hireme.tasks.job_connection_tasks.sweep_due_job_connections_task",
            "schedule": crontab(minute=f"*/{settings.COMPLETION_SWEEP_MINUTES}"),
        },
    },
)

celery_app.autodiscover_tasks(['hireme'])


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs):
    setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
