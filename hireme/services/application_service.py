"""
Application lifecycle: apply, edit, withdraw, accept and reject.

Accepting an application is the one multi-entity transition: the
application, its job and a new job connection change together in one
transaction, and only after that commits are the follow-up tasks queued
(the competing-application cascade now, the connection completion at the
end of the interaction window).
"""

import logging
from datetime import timedelta
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hireme.core import celery_utils
from hireme.core.clock import utcnow
from hireme.core.config import settings
from hireme.core.errors import ApplicationErrors
from hireme.core.result import Result, service_operation
from hireme.crud import application as application_crud
from hireme.crud import job as job_crud
from hireme.crud import job_connection as job_connection_crud
from hireme.lifecycle import rules
from hireme.models.application import Application, ApplicationStatus
from hireme.models.job import JobStatus
from hireme.models.job_connection import JobConnection
from hireme.schemas.application import (
    ApplicationCreateRequest,
    ApplicationUpdateRequest,
    AppliedApplicationResponse,
    PendingApplicationResponse,
)
from hireme.tasks.application_tasks import cascade_application_acceptance_task
from hireme.tasks.job_connection_tasks import complete_job_connection_task

logger = logging.getLogger(__name__)


@service_operation
def submit_application(db: Session, worker_id: str, request: ApplicationCreateRequest) -> Result[Application]:
    logger.info(f"Starting application creation for worker {worker_id} on job {request.job_id}")

    job = job_crud.get_by_id(db, request.job_id)
    already_applied = job is not None and application_crud.exists_for_job_and_worker(db, request.job_id, worker_id)

    error = rules.check_apply(job, already_applied)
    if error:
        status = job.status.value if job else None
        logger.warning(f"Application creation failed for worker {worker_id} on job {request.job_id}: {error.code} (job status: {status})")
        return Result.failure(error)

    try:
        application = application_crud.create(db, request.job_id, worker_id, request.message)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent apply for the same (job, worker)
        db.rollback()
        logger.warning(f"Application creation failed: worker {worker_id} has already applied to job {request.job_id}")
        return Result.failure(ApplicationErrors.ALREADY_APPLIED)

    db.refresh(application)
    logger.info(f"Application {application.id} created for job {request.job_id}")
    return Result.success(application)


@service_operation
def edit_application(db: Session, worker_id: str, application_id: int, request: ApplicationUpdateRequest) -> Result[Application]:
    logger.info(f"Starting application update for application {application_id} by worker {worker_id}")

    application = application_crud.get_by_id(db, application_id)
    error = rules.check_worker_update(application, worker_id)
    if error:
        logger.warning(f"Application update failed for application {application_id}: {error.code}")
        return Result.failure(error)

    application.message = request.message
    application.updated_at = utcnow()
    db.commit()
    db.refresh(application)

    logger.info(f"Application {application_id} updated")
    return Result.success(application)


@service_operation
def withdraw_application(db: Session, worker_id: str, application_id: int) -> Result[None]:
    logger.info(f"Starting application withdrawal for application {application_id} by worker {worker_id}")

    application = application_crud.get_by_id(db, application_id)
    error = rules.check_worker_update(application, worker_id)
    if error:
        logger.warning(f"Application withdrawal failed for application {application_id}: {error.code}")
        return Result.failure(error)

    if not application_crud.set_status_if_applied(db, application_id, ApplicationStatus.WITHDRAWN, utcnow()):
        db.rollback()
        logger.warning(f"Application withdrawal failed: application {application_id} left APPLIED concurrently")
        return Result.failure(ApplicationErrors.CANNOT_UPDATE_APPLICATION)

    db.commit()
    logger.info(f"Application {application_id} withdrawn by worker {worker_id}")
    return Result.success()


@service_operation
def accept_application(db: Session, employer_id: str, application_id: int) -> Result[JobConnection]:
    """
    Accept an application and open a job connection for it.

    Returns:
        Result carrying the new JobConnection
    """
    logger.info(f"Starting application acceptance for application {application_id} by employer {employer_id}")

    application = application_crud.get_by_id(db, application_id, with_job=True)
    job = application.job if application else None
    worker_has_active = (
        application is not None and job_connection_crud.worker_has_active(db, application.worker_id)
    )

    error = rules.check_accept(application, job, employer_id, worker_has_active)
    if error:
        db.rollback()
        logger.warning(f"Application acceptance failed for application {application_id}: {error.code}")
        return Result.failure(error)

    job_id = job.id
    worker_id = application.worker_id
    now = utcnow()
    interaction_end_at = now + timedelta(days=settings.INTERACTION_WINDOW_DAYS)

    # Compare-and-set so that of two concurrent accepts only one writes
    if not application_crud.set_status_if_applied(db, application_id, ApplicationStatus.ACCEPTED, now):
        db.rollback()
        logger.warning(f"Application acceptance failed: application {application_id} left APPLIED concurrently")
        return Result.failure(ApplicationErrors.INVALID_APPLICATION_STATUS)

    if not job_crud.set_status_if(db, job_id, JobStatus.PUBLISHED, JobStatus.IN_PROGRESS):
        db.rollback()
        logger.warning(f"Application acceptance failed: job {job_id} left PUBLISHED concurrently")
        return Result.failure(ApplicationErrors.INVALID_APPLICATION_STATUS)

    try:
        connection = job_connection_crud.create(db, job_id, worker_id, employer_id, interaction_end_at)
        job_connection_id = connection.id
        db.commit()
    except IntegrityError:
        # The one-active-connection-per-worker index caught a concurrent accept
        db.rollback()
        logger.warning(f"Application acceptance failed: worker {worker_id} already has an active job connection")
        return Result.failure(ApplicationErrors.WORKER_HAS_ACTIVE_CONNECTION)

    celery_utils.enqueue_task(
        cascade_application_acceptance_task,
        job_id=job_id,
        application_id=application_id,
        worker_id=worker_id,
    )
    celery_utils.schedule_task(
        complete_job_connection_task,
        interaction_end_at,
        job_connection_id=job_connection_id,
    )

    logger.info(
        f"Application {application_id} accepted by employer {employer_id}. "
        f"JobConnection {job_connection_id} created, interaction ends {interaction_end_at.isoformat()}"
    )
    db.refresh(connection)
    return Result.success(connection)


@service_operation
def reject_application(db: Session, employer_id: str, application_id: int) -> Result[None]:
    logger.info(f"Starting application rejection for application {application_id} by employer {employer_id}")

    application = application_crud.get_by_id(db, application_id, with_job=True)
    job = application.job if application else None

    error = rules.check_reject(application, job, employer_id)
    if error:
        logger.warning(f"Application rejection failed for application {application_id}: {error.code}")
        return Result.failure(error)

    if not application_crud.set_status_if_applied(db, application_id, ApplicationStatus.REJECTED, utcnow()):
        db.rollback()
        logger.warning(f"Application rejection failed: application {application_id} left APPLIED concurrently")
        return Result.failure(ApplicationErrors.INVALID_APPLICATION_STATUS)

    db.commit()
    logger.info(f"Application {application_id} rejected by employer {employer_id}")
    return Result.success()


@service_operation
def list_applied_applications(db: Session, employer_id: str, job_id: int) -> Result[List[AppliedApplicationResponse]]:
    """Open applications on a job, for the employer who owns it."""
    job = job_crud.get_by_id(db, job_id)
    if job is None:
        logger.warning(f"Get applied applications failed: job {job_id} not found")
        return Result.failure(ApplicationErrors.JOB_NOT_FOUND)
    if job.employer_id != employer_id:
        logger.warning(f"Get applied applications failed: employer {employer_id} does not own job {job_id}")
        return Result.failure(ApplicationErrors.JOB_NOT_OWNED_BY_EMPLOYER)

    applications = application_crud.list_applied_for_job(db, job_id)
    logger.info(f"Retrieved {len(applications)} applied applications for job {job_id}")
    return Result.success([
        AppliedApplicationResponse(
            application_id=a.id,
            message=a.message or "",
            created_at=a.created_at,
            is_updated=a.updated_at is not None,
            worker_id=a.worker_id,
            worker_name=a.worker.full_name if a.worker else None,
        )
        for a in applications
    ])


@service_operation
def list_pending_applications(db: Session, worker_id: str) -> Result[List[PendingApplicationResponse]]:
    """A worker's applications still waiting on an employer decision."""
    applications = application_crud.list_applied_for_worker(db, worker_id)
    logger.info(f"Retrieved {len(applications)} pending applications for worker {worker_id}")
    return Result.success([
        PendingApplicationResponse(
            application_id=a.id,
            message=a.message,
            created_at=a.created_at,
            job_id=a.job_id,
            job_title=a.job.title,
            salary=a.job.salary,
        )
        for a in applications
    ])
