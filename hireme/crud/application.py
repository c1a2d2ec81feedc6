"""
CRUD operations for Application model, including the bulk status
transitions used by the cascade workers.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from hireme.models.application import Application, ApplicationStatus


def create(db: Session, job_id: int, worker_id: str, message: Optional[str]) -> Application:
    application = Application(
        job_id=job_id,
        worker_id=worker_id,
        message=message,
        status=ApplicationStatus.APPLIED,
    )
    db.add(application)
    db.flush()
    return application


def get_by_id(db: Session, application_id: int, with_job: bool = False) -> Optional[Application]:
    query = db.query(Application)
    if with_job:
        query = query.options(joinedload(Application.job))
    return query.filter(Application.id == application_id).first()


def exists_for_job_and_worker(db: Session, job_id: int, worker_id: str) -> bool:
    return db.query(
        db.query(Application)
        .filter(
            Application.job_id == job_id,
            Application.worker_id == worker_id,
            Application.is_deleted == False,  # noqa: E712
        )
        .exists()
    ).scalar()


def set_status_if_applied(db: Session, application_id: int, status: ApplicationStatus, now: datetime) -> bool:
    """
    Move a single application out of APPLIED.

    Returns:
        False if it had already left APPLIED (someone else got there first)
    """
    updated = (
        db.query(Application)
        .filter(
            Application.id == application_id,
            Application.status == ApplicationStatus.APPLIED,
            Application.is_deleted == False,  # noqa: E712
        )
        .update(
            {Application.status: status, Application.status_changed_at: now},
            synchronize_session="fetch",
        )
    )
    return updated == 1


def bulk_transition_applied(
    db: Session,
    status: ApplicationStatus,
    now: datetime,
    job_id: Optional[int] = None,
    worker_id: Optional[str] = None,
    exclude_application_id: Optional[int] = None,
) -> int:
    """
    Move every matching APPLIED application to `status` in one UPDATE.

    Args:
        db: Database session
        status: Target status
        now: Value for status_changed_at
        job_id: Restrict to one job
        worker_id: Restrict to one worker
        exclude_application_id: Leave this application alone

    Returns:
        Number of applications changed
    """
    query = db.query(Application).filter(
        Application.status == ApplicationStatus.APPLIED,
        Application.is_deleted == False,  # noqa: E712
    )
    if job_id is not None:
        query = query.filter(Application.job_id == job_id)
    if worker_id is not None:
        query = query.filter(Application.worker_id == worker_id)
    if exclude_application_id is not None:
        query = query.filter(Application.id != exclude_application_id)

    return query.update(
        {Application.status: status, Application.status_changed_at: now},
        synchronize_session=False,
    )


def list_applied_for_job(db: Session, job_id: int) -> List[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.worker))
        .filter(Application.job_id == job_id, Application.status == ApplicationStatus.APPLIED)
        .order_by(Application.created_at, Application.id)
        .all()
    )


def list_applied_for_worker(db: Session, worker_id: str) -> List[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.worker_id == worker_id, Application.status == ApplicationStatus.APPLIED)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def count_by_status(
    db: Session,
    job_id: Optional[int] = None,
    worker_id: Optional[str] = None,
    created_after: Optional[datetime] = None,
) -> Dict[ApplicationStatus, int]:
    """
    Application counts grouped by status. Statuses with no applications are
    absent from the result.
    """
    query = db.query(Application.status, func.count(Application.id)).filter(
        Application.is_deleted == False,  # noqa: E712
    )
    if job_id is not None:
        query = query.filter(Application.job_id == job_id)
    if worker_id is not None:
        query = query.filter(Application.worker_id == worker_id)
    if created_after is not None:
        query = query.filter(Application.created_at > created_after)

    return {status: int(count) for status, count in query.group_by(Application.status).all()}


def last_created_at_for_job(db: Session, job_id: int) -> Optional[datetime]:
    return (
        db.query(func.max(Application.created_at))
        .filter(Application.job_id == job_id, Application.is_deleted == False)  # noqa: E712
        .scalar()
    )
