"""
Follow-up application transitions run by background workers.

Each cascade is a single predicate-scoped UPDATE that only touches
applications still in APPLIED, so running it twice changes nothing the
second time.
"""

import logging
from typing import Dict

from sqlalchemy.orm import Session

from hireme.core.clock import utcnow
from hireme.crud import application as application_crud
from hireme.models.application import ApplicationStatus

logger = logging.getLogger(__name__)


def cascade_application_acceptance(db: Session, job_id: int, application_id: int, worker_id: str) -> Dict[str, int]:
    """
    Close out the applications an acceptance makes moot.

    - Other open applications on the same job: EMPLOYER_CHOOSE_ANOTHER_WORKER
    - The accepted worker's open applications on other jobs: WORKER_ACCEPTED_AT_ANOTHER_JOB

    Returns:
        Count of applications moved into each status
    """
    now = utcnow()

    logger.info(f"Rejecting other applications for job {job_id} after acceptance of application {application_id}")
    other_workers = application_crud.bulk_transition_applied(
        db,
        ApplicationStatus.EMPLOYER_CHOOSE_ANOTHER_WORKER,
        now,
        job_id=job_id,
        exclude_application_id=application_id,
    )

    logger.info(f"Closing other applications for worker {worker_id} after acceptance of application {application_id}")
    other_jobs = application_crud.bulk_transition_applied(
        db,
        ApplicationStatus.WORKER_ACCEPTED_AT_ANOTHER_JOB,
        now,
        worker_id=worker_id,
        exclude_application_id=application_id,
    )

    db.commit()

    logger.info(
        f"Acceptance cascade for application {application_id}: {other_workers} competing application(s) "
        f"on job {job_id}, {other_jobs} application(s) by worker {worker_id} on other jobs"
    )
    return {
        ApplicationStatus.EMPLOYER_CHOOSE_ANOTHER_WORKER.value: other_workers,
        ApplicationStatus.WORKER_ACCEPTED_AT_ANOTHER_JOB.value: other_jobs,
    }


def cascade_job_closure(db: Session, job_id: int) -> int:
    """
    Move every open application on a closed job to JOB_CLOSED.

    Returns:
        Number of applications changed
    """
    logger.info(f"Updating applications status to JOB_CLOSED for job {job_id}")

    updated = application_crud.bulk_transition_applied(
        db,
        ApplicationStatus.JOB_CLOSED,
        utcnow(),
        job_id=job_id,
    )
    db.commit()

    logger.info(f"Updated {updated} application(s) to JOB_CLOSED for job {job_id}")
    return updated
