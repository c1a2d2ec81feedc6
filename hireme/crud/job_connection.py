"""
CRUD operations for JobConnection model.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from hireme.models.feedback import Feedback
from hireme.models.job_connection import JobConnection, JobConnectionStatus


def create(
    db: Session,
    job_id: int,
    worker_id: str,
    employer_id: str,
    interaction_end_at: datetime,
) -> JobConnection:
    connection = JobConnection(
        job_id=job_id,
        worker_id=worker_id,
        employer_id=employer_id,
        status=JobConnectionStatus.ACTIVE,
        interaction_end_at=interaction_end_at,
    )
    db.add(connection)
    db.flush()
    return connection


def get_by_id(db: Session, job_connection_id: int, with_job: bool = False, for_update: bool = False) -> Optional[JobConnection]:
    """
    Args:
        for_update: Lock the row until the transaction ends (ignored by SQLite)
    """
    query = db.query(JobConnection)
    if with_job:
        query = query.options(joinedload(JobConnection.job))
    if for_update:
        query = query.with_for_update(of=JobConnection)
    return query.filter(JobConnection.id == job_connection_id).first()


def worker_has_active(db: Session, worker_id: str) -> bool:
    return db.query(
        db.query(JobConnection)
        .filter(
            JobConnection.worker_id == worker_id,
            JobConnection.status == JobConnectionStatus.ACTIVE,
            JobConnection.is_deleted == False,  # noqa: E712
        )
        .exists()
    ).scalar()


def get_active_for_user(db: Session, user_id: str, as_worker: bool) -> Optional[JobConnection]:
    party = JobConnection.worker_id if as_worker else JobConnection.employer_id
    return (
        db.query(JobConnection)
        .options(joinedload(JobConnection.job))
        .filter(party == user_id, JobConnection.status == JobConnectionStatus.ACTIVE)
        .order_by(JobConnection.created_at.desc(), JobConnection.id.desc())
        .first()
    )


def list_due_ids(db: Session, now: datetime, limit: int = 500) -> List[int]:
    """
    Connections past their interaction end that still need the completion
    worker: either still ACTIVE, or holding feedback that is not yet visible.
    """
    hidden_feedback = (
        db.query(Feedback.id)
        .filter(Feedback.job_connection_id == JobConnection.id, Feedback.is_visible == False)  # noqa: E712
        .exists()
    )
    rows = (
        db.query(JobConnection.id)
        .filter(
            JobConnection.interaction_end_at <= now,
            or_(JobConnection.status == JobConnectionStatus.ACTIVE, hidden_feedback),
        )
        .order_by(JobConnection.interaction_end_at, JobConnection.id)
        .limit(limit)
        .all()
    )
    return [row[0] for row in rows]


def latest_created_at_for_worker(db: Session, worker_id: str) -> Optional[datetime]:
    return db.query(func.max(JobConnection.created_at)).filter(JobConnection.worker_id == worker_id).scalar()


def get_open_for_worker(db: Session, worker_id: str, now: datetime) -> Optional[JobConnection]:
    """The worker's newest connection whose interaction window is still open, in any status."""
    return (
        db.query(JobConnection)
        .options(joinedload(JobConnection.job), joinedload(JobConnection.employer))
        .filter(JobConnection.worker_id == worker_id, JobConnection.interaction_end_at > now)
        .order_by(JobConnection.created_at.desc(), JobConnection.id.desc())
        .first()
    )


def list_active_for_employer(db: Session, employer_id: str, now: datetime) -> List[JobConnection]:
    """ACTIVE connections whose interaction window has not passed yet."""
    return (
        db.query(JobConnection)
        .options(joinedload(JobConnection.job), joinedload(JobConnection.worker))
        .filter(
            JobConnection.employer_id == employer_id,
            JobConnection.status == JobConnectionStatus.ACTIVE,
            JobConnection.interaction_end_at > now,
        )
        .order_by(JobConnection.created_at.desc(), JobConnection.id.desc())
        .all()
    )
