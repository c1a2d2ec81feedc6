"""
Helpers for dispatching Celery tasks after a database commit.

Dispatch failures are logged and reported as False rather than raised: by
the time a service dispatches, its transaction is already committed and the
caller's operation has succeeded. Completions that never reach the broker
are picked up by the periodic sweep.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional, Tuple

from celery import Task
from kombu import Connection

from hireme.core.config import settings

logger = logging.getLogger(__name__)

# Publishing from a worker thread keeps broker I/O off the caller's event loop
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="celery_queue")


def _queue_task_sync(task: Task, kwargs: dict, eta: Optional[datetime]) -> Tuple[bool, str, str]:
    """
    Publish a task on a fresh broker connection.

    Returns:
        Tuple[bool, str, str]: (success, task_id, error_message)
    """
    try:
        with Connection(settings.REDIS_URL) as conn:
            result = task.apply_async(
                kwargs=kwargs,
                eta=eta,
                connection=conn,
                retry=True,
                retry_policy={
                    'max_retries': 3,
                    'interval_start': 0,
                    'interval_step': 0.2,
                    'interval_max': 0.2,
                }
            )
            return (True, result.id, "")
    except Exception as e:
        return (False, "", str(e))


def _dispatch(task: Task, kwargs: dict, eta: Optional[datetime]) -> bool:
    future = _executor.submit(_queue_task_sync, task, kwargs, eta)
    try:
        success, task_id, error = future.result(timeout=5)
    except Exception as e:
        success, task_id, error = False, "", str(e)

    if success:
        when = f" for {eta.isoformat()}" if eta else ""
        logger.info(f"Task {task.name} queued{when}: {task_id}")
        return True

    logger.error(f"Failed to queue task {task.name}: {error}")
    return False


def enqueue_task(task: Task, **kwargs) -> bool:
    """
    Queue a task for immediate execution.

    Example:
        enqueue_task(cascade_job_closure_task, job_id=42)
    """
    return _dispatch(task, kwargs, None)


def schedule_task(task: Task, eta: datetime, **kwargs) -> bool:
    """
    Queue a task to run at an absolute UTC timestamp.

    Example:
        schedule_task(complete_job_connection_task, connection.interaction_end_at,
                      job_connection_id=connection.id)
    """
    return _dispatch(task, kwargs, eta)
