"""
Celery tasks for application cascades.

Both tasks are idempotent (they only touch applications still in APPLIED),
so a failed attempt is simply retried with backoff.
"""

import logging

from hireme.core.celery_app import celery_app
from hireme.core.config import settings
from hireme.core.database import SessionLocal
from hireme.services.application_cascades import cascade_application_acceptance, cascade_job_closure

logger = logging.getLogger(__name__)


@celery_app.task(
    name="hireme.tasks.application_tasks.cascade_application_acceptance_task",
    bind=True,
    max_retries=settings.TASK_MAX_RETRIES,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=settings.TASK_RETRY_BACKOFF_MAX,
    retry_jitter=True
)
def cascade_application_acceptance_task(self, job_id: int, application_id: int, worker_id: str):
    """
    Close competing applications after an acceptance.

    Args:
        job_id: Job whose application was accepted
        application_id: The accepted application
        worker_id: The accepted worker
    """
    logger.info(f"[Task {self.request.id}] Acceptance cascade for application {application_id} on job {job_id}")

    db = SessionLocal()
    try:
        counts = cascade_application_acceptance(db, job_id, application_id, worker_id)
        return {"status": "success", "updated": counts}

    except Exception as e:
        db.rollback()
        logger.error(
            f"[Task {self.request.id}] Error handling acceptance of application {application_id} for job {job_id}: {e}",
            exc_info=True
        )
        raise  # Re-raise to trigger Celery retry

    finally:
        db.close()


@celery_app.task(
    name="hireme.tasks.application_tasks.cascade_job_closure_task",
    bind=True,
    max_retries=settings.TASK_MAX_RETRIES,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=settings.TASK_RETRY_BACKOFF_MAX,
    retry_jitter=True
)
def cascade_job_closure_task(self, job_id: int):
    """
    Close every open application on a closed job.
    """
    logger.info(f"[Task {self.request.id}] Job closure cascade for job {job_id}")

    db = SessionLocal()
    try:
        updated = cascade_job_closure(db, job_id)
        return {"status": "success", "updated": updated}

    except Exception as e:
        db.rollback()
        logger.error(f"[Task {self.request.id}] Error handling closure of job {job_id}: {e}", exc_info=True)
        raise

    finally:
        db.close()
