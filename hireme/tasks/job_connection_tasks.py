"""
Celery tasks for job connection completion.
"""

import logging

from hireme.core.celery_app import celery_app
from hireme.core.config import settings
from hireme.core.database import SessionLocal
from hireme.services.connection_completion import complete_job_connection, sweep_due_job_connections

logger = logging.getLogger(__name__)


@celery_app.task(
    name="hireme.tasks.job_connection_tasks.complete_job_connection_task",
    bind=True,
    max_retries=settings.TASK_MAX_RETRIES,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=settings.TASK_RETRY_BACKOFF_MAX,
    retry_jitter=True
)
def complete_job_connection_task(self, job_connection_id: int):
    """
    Scheduled at acceptance to run when the interaction window ends.

    Completes the connection if it is still active, then reveals its
    feedback and updates the recipients' ratings.
    """
    logger.info(f"[Task {self.request.id}] Completing JobConnection {job_connection_id} (attempt {self.request.retries + 1})")

    db = SessionLocal()
    try:
        summary = complete_job_connection(db, job_connection_id)
        if summary is None:
            return {"status": "skipped", "job_connection_id": job_connection_id}
        return {"status": "success", **summary}

    except Exception as e:
        db.rollback()
        logger.error(
            f"[Task {self.request.id}] Error processing completion of JobConnection {job_connection_id}: {e}",
            exc_info=True
        )
        raise

    finally:
        db.close()


@celery_app.task(name="hireme.tasks.job_connection_tasks.sweep_due_job_connections_task", bind=True)
def sweep_due_job_connections_task(self):
    """
    Periodic safety net for completions whose scheduled task never ran.

    Configured in the Celery beat schedule (see hireme.core.celery_app).
    """
    db = SessionLocal()
    try:
        result = sweep_due_job_connections(db)
        return {"status": "success", **result}
    except Exception as e:
        logger.error(f"[Task {self.request.id}] Completion sweep failed: {e}", exc_info=True)
        raise
    finally:
        db.close()
