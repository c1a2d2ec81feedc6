"""
Job connection cancellation and lookups.

Cancellation is synchronous and final. The completion task scheduled at
acceptance still fires later; it sees the connection is no longer active
and only reveals feedback.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from hireme.core.clock import utcnow
from hireme.core.identity import Role
from hireme.core.result import Result, service_operation
from hireme.crud import job_connection as job_connection_crud
from hireme.lifecycle import rules
from hireme.models.job import JobStatus
from hireme.models.job_connection import JobConnection

logger = logging.getLogger(__name__)


@service_operation
def cancel_job_connection(db: Session, user_id: str, job_connection_id: int, role: Optional[Role]) -> Result[JobConnection]:
    """
    Cancel an active job connection on behalf of one of its parties.

    Args:
        db: Database session
        user_id: Caller id
        job_connection_id: Connection to cancel
        role: Caller's marketplace role, resolved from their role claims

    Returns:
        Result carrying the cancelled JobConnection
    """
    logger.info(f"User {user_id} attempting to cancel job connection {job_connection_id} as {role.value if role else None}")

    connection = None
    if role is not None:
        connection = job_connection_crud.get_by_id(db, job_connection_id, with_job=True, for_update=True)

    now = utcnow()
    error = rules.check_cancel_connection(connection, user_id, role, now)
    if error:
        db.rollback()
        status = connection.status.value if connection else None
        logger.warning(f"Cancellation of job connection {job_connection_id} by user {user_id} failed: {error.code} (status: {status})")
        return Result.failure(error)

    connection.status = rules.cancellation_status_for(role)
    connection.cancelled_at = now

    job = connection.job
    if job is not None and rules.can_transition_job(job.status, JobStatus.CANCELLED):
        job.status = JobStatus.CANCELLED
    elif job is not None:
        logger.warning(f"Job {job.id} is {job.status.value}; leaving it unchanged on cancellation of connection {job_connection_id}")

    db.commit()
    db.refresh(connection)

    job_status = job.status.value if job is not None else None
    logger.info(f"Cancelled job connection {job_connection_id} ({connection.status.value}); job {connection.job_id} is {job_status}")
    return Result.success(connection)


@service_operation
def get_active_connection(db: Session, user_id: str, role: Role) -> Result[Optional[JobConnection]]:
    """The caller's active connection, if they have one."""
    connection = job_connection_crud.get_active_for_user(db, user_id, as_worker=role == Role.WORKER)
    return Result.success(connection)
