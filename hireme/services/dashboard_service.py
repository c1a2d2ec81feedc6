"""
Read-only dashboards for workers and employers.

Every figure is computed with grouped counts in the database; nothing here
changes state.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from hireme.core.clock import as_utc, utcnow
from hireme.core.result import Result, service_operation
from hireme.crud import application as application_crud
from hireme.crud import job as job_crud
from hireme.crud import job_connection as job_connection_crud
from hireme.crud import question as question_crud
from hireme.lifecycle import rules
from hireme.models.application import ApplicationStatus
from hireme.models.job_connection import JobConnection, JobConnectionStatus
from hireme.schemas.dashboard import (
    ActiveConnectionCardResponse,
    ActiveJobConnectionResponse,
    ApplicationStatistics,
    EmployerDashboardResponse,
    JobAnalyticsResponse,
    PublishedJobCardResponse,
    QuestionStatistics,
    RecentJobSummaryResponse,
    WorkerDashboardResponse,
    WorkerInfoResponse,
)

logger = logging.getLogger(__name__)

RECENT_JOBS_LIMIT = 5


def _active_connection_response(connection: JobConnection, now: datetime) -> ActiveJobConnectionResponse:
    end = as_utc(connection.interaction_end_at)
    return ActiveJobConnectionResponse(
        job_connection_id=connection.id,
        job_title=connection.job.title,
        person_name=connection.employer.full_name if connection.employer else None,
        contract_end_date=end,
        days_remaining=(end - as_utc(now)).days,
        status=connection.status,
    )


@service_operation
def get_worker_dashboard(db: Session, worker_id: str, now: Optional[datetime] = None) -> Result[WorkerDashboardResponse]:
    """
    A worker's dashboard.

    While the worker is inside an active connection only that connection is
    shown. Otherwise the dashboard counts applications and questions made
    since the worker's most recent connection started (or ever, if they have
    never been hired).

    Args:
        db: Database session
        worker_id: Worker whose dashboard to build
        now: Current time (defaults to the wall clock)
    """
    now = now or utcnow()
    logger.info(f"Building dashboard for worker {worker_id}")

    connection = job_connection_crud.get_open_for_worker(db, worker_id, now)
    if connection is not None and connection.status == JobConnectionStatus.ACTIVE:
        logger.info(f"Worker {worker_id} is in job connection {connection.id}")
        return Result.success(WorkerDashboardResponse(active_connection=_active_connection_response(connection, now)))

    since = job_connection_crud.latest_created_at_for_worker(db, worker_id)
    by_status = application_crud.count_by_status(db, worker_id=worker_id, created_after=since)
    answered, unanswered = question_crud.count_answered_for_worker(db, worker_id, created_after=since)

    applications = ApplicationStatistics(
        total=sum(by_status.values()),
        pending=by_status.get(ApplicationStatus.APPLIED, 0),
        rejected=by_status.get(ApplicationStatus.REJECTED, 0),
        closed=by_status.get(ApplicationStatus.JOB_CLOSED, 0),
        choose_another_worker=by_status.get(ApplicationStatus.EMPLOYER_CHOOSE_ANOTHER_WORKER, 0),
        withdrawn=by_status.get(ApplicationStatus.WITHDRAWN, 0),
    )
    questions = QuestionStatistics(answered_questions=answered, unanswered_questions=unanswered)

    logger.info(f"Worker {worker_id} dashboard: {applications.total} applications, {answered + unanswered} questions")
    return Result.success(WorkerDashboardResponse(applications=applications, questions=questions))


@service_operation
def get_job_analytics(db: Session, employer_id: str, job_id: int) -> Result[JobAnalyticsResponse]:
    job = job_crud.get_by_id(db, job_id)

    error = rules.check_view_job_analytics(job, employer_id)
    if error:
        logger.warning(f"Analytics for job {job_id} refused for employer {employer_id}: {error.code}")
        return Result.failure(error)

    by_status = application_crud.count_by_status(db, job_id=job_id)
    return Result.success(JobAnalyticsResponse(
        job_id=job.id,
        job_status=job.status,
        number_of_applications=sum(by_status.values()),
        applied_applications=by_status.get(ApplicationStatus.APPLIED, 0),
        rejected_applications=by_status.get(ApplicationStatus.REJECTED, 0),
        withdrawn_applications=by_status.get(ApplicationStatus.WITHDRAWN, 0),
        accepted_at_another_job_applications=by_status.get(ApplicationStatus.WORKER_ACCEPTED_AT_ANOTHER_JOB, 0),
        unanswered_questions=question_crud.count_unanswered_for_job(db, job_id),
        last_application_at=application_crud.last_created_at_for_job(db, job_id),
    ))


@service_operation
def get_recent_jobs(db: Session, employer_id: str, limit: int = RECENT_JOBS_LIMIT) -> Result[List[RecentJobSummaryResponse]]:
    """An employer's newest jobs in any status."""
    rows = job_crud.list_recent_for_employer_with_counts(db, employer_id, limit=limit)
    logger.info(f"Retrieved {len(rows)} recent jobs for employer {employer_id}")
    return Result.success([
        RecentJobSummaryResponse(
            id=job.id,
            title=job.title,
            working_days_per_week=job.working_days_per_week,
            working_hours_per_day=job.working_hours_per_day,
            number_of_questions=questions,
            number_of_applications=applications,
            status=job.status,
            created_at=job.created_at,
        )
        for job, applications, questions in rows
    ])


@service_operation
def get_employer_dashboard(db: Session, employer_id: str, now: Optional[datetime] = None) -> Result[EmployerDashboardResponse]:
    """
    An employer's published jobs with the work still waiting on them, and
    their connections that are still running.
    """
    now = now or utcnow()
    logger.info(f"Building dashboard for employer {employer_id}")

    published = job_crud.list_published_for_employer_with_open_counts(db, employer_id)
    connections = job_connection_crud.list_active_for_employer(db, employer_id, now)

    return Result.success(EmployerDashboardResponse(
        published_jobs=[
            PublishedJobCardResponse(
                id=job.id,
                title=job.title,
                pending_applications=pending,
                unanswered_questions=unanswered,
            )
            for job, pending, unanswered in published
        ],
        active_connections=[
            ActiveConnectionCardResponse(
                id=connection.id,
                job_title=connection.job.title,
                worker=WorkerInfoResponse(
                    worker_id=connection.worker_id,
                    full_name=connection.worker.full_name if connection.worker else None,
                ),
                ends_at=as_utc(connection.interaction_end_at),
            )
            for connection in connections
        ],
    ))
