"""
Job postings: publish, read, list and close.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from hireme.core import celery_utils
from hireme.core.errors import JobErrors
from hireme.core.result import Result, service_operation
from hireme.core.work_days import work_day_names
from hireme.crud import job as job_crud
from hireme.lifecycle import rules
from hireme.models.job import Job, JobStatus
from hireme.schemas.job import JobCreateRequest, JobResponse, JobSummaryResponse
from hireme.tasks.application_tasks import cascade_job_closure_task

logger = logging.getLogger(__name__)


@service_operation
def create_job(db: Session, employer_id: str, request: JobCreateRequest) -> Result[Job]:
    logger.info(f"Starting job creation for employer {employer_id}")

    job = job_crud.create(db, employer_id, request)
    db.commit()
    db.refresh(job)

    logger.info(f"Job {job.id} created: {job.working_days_per_week} days/week, {job.working_hours_per_day} hours/day")
    return Result.success(job)


@service_operation
def get_job(db: Session, job_id: int) -> Result[JobResponse]:
    job = job_crud.get_by_id(db, job_id)
    if job is None:
        logger.warning(f"Failed to retrieve job: job {job_id} not found")
        return Result.failure(JobErrors.JOB_NOT_FOUND)

    response = JobResponse.model_validate(
        {
            **{column.key: getattr(job, column.key) for column in Job.__table__.columns},
            "working_days": work_day_names(job.work_days),
        }
    )
    return Result.success(response)


@service_operation
def list_published_jobs(db: Session) -> Result[List[JobSummaryResponse]]:
    rows = job_crud.list_published_with_counts(db)
    logger.info(f"Retrieved {len(rows)} published jobs")
    return Result.success([
        JobSummaryResponse(
            id=job.id,
            title=job.title,
            salary=job.salary,
            working_days_per_week=job.working_days_per_week,
            working_hours_per_day=job.working_hours_per_day,
            number_of_applications=applications,
            number_of_questions=questions,
            created_at=job.created_at,
            is_updated=job.updated_at is not None,
        )
        for job, applications, questions in rows
    ])


@service_operation
def get_last_job_id_for_employer(db: Session, employer_id: str) -> Result[int]:
    job = job_crud.get_latest_for_employer(db, employer_id)
    if job is None:
        logger.warning(f"No jobs found for employer {employer_id}")
        return Result.failure(JobErrors.NO_JOBS_FOR_EMPLOYER)
    return Result.success(job.id)


@service_operation
def close_job(db: Session, job_id: int) -> Result[None]:
    """
    Close a job and queue the cascade that closes its open applications.
    """
    logger.info(f"Attempting to close job {job_id}")

    job = job_crud.get_by_id(db, job_id)
    error = rules.check_close_job(job)
    if error:
        logger.warning(f"Failed to close job {job_id}: {error.code}")
        return Result.failure(error)

    previous = job.status
    job.status = JobStatus.CLOSED
    db.commit()

    celery_utils.enqueue_task(cascade_job_closure_task, job_id=job_id)

    logger.info(f"Closed job {job_id} (was {previous.value}) and queued application closure")
    return Result.success()
