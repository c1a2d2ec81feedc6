"""
CRUD operations for Job model.
"""

from typing import List, Optional, Tuple

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from hireme.core.work_days import count_work_days, shift_duration_hours
from hireme.models.application import Application, ApplicationStatus
from hireme.models.job import Job, JobStatus, ShiftType
from hireme.models.question import Answer, Question
from hireme.schemas.job import JobCreateRequest


def create(db: Session, employer_id: str, job_data: JobCreateRequest) -> Job:
    """
    Add a new published job, deriving its schedule fields.

    Args:
        db: Database session
        employer_id: Owning employer
        job_data: Validated job creation data

    Returns:
        Job instance with id assigned (flushed, not committed)
    """
    db_job = Job(
        title=job_data.title,
        salary=job_data.salary,
        has_accommodation=job_data.has_accommodation,
        preferred_gender=job_data.preferred_gender,
        work_days=job_data.work_days,
        working_days_per_week=count_work_days(job_data.work_days),
        shift_start_time=job_data.shift_start_time,
        shift_end_time=job_data.shift_end_time,
        working_hours_per_day=shift_duration_hours(job_data.shift_start_time, job_data.shift_end_time),
        shift_type=ShiftType.MORNING if job_data.shift_start_time.hour < 12 else ShiftType.NIGHT,
        address=job_data.address,
        description=job_data.description,
        experience=job_data.experience,
        status=JobStatus.PUBLISHED,
        employer_id=employer_id,
    )

    db.add(db_job)
    db.flush()

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    return db.query(Job).filter(Job.id == job_id).first()


def set_status_if(db: Session, job_id: int, expected: JobStatus, status: JobStatus) -> bool:
    """
    Compare-and-set the job status.

    Returns:
        True if the job was in `expected` and now has `status`
    """
    updated = (
        db.query(Job)
        .filter(Job.id == job_id, Job.status == expected, Job.is_deleted == False)  # noqa: E712
        .update({Job.status: status}, synchronize_session="fetch")
    )
    return updated == 1


def _application_counts(db: Session, status: Optional[ApplicationStatus] = None):
    query = (
        db.query(Application.job_id, func.count(Application.id).label("n"))
        .filter(Application.is_deleted == False)  # noqa: E712
    )
    if status is not None:
        query = query.filter(Application.status == status)
    return query.group_by(Application.job_id).subquery()


def _question_counts(db: Session, unanswered_only: bool = False):
    query = (
        db.query(Question.job_id, func.count(Question.id).label("n"))
        .filter(Question.is_deleted == False)  # noqa: E712
    )
    if unanswered_only:
        query = (
            query.outerjoin(Answer, and_(Answer.question_id == Question.id, Answer.is_deleted == False))  # noqa: E712
            .filter(Answer.id.is_(None))
        )
    return query.group_by(Question.job_id).subquery()


def _with_counts(db: Session, application_counts, question_counts):
    return (
        db.query(
            Job,
            func.coalesce(application_counts.c.n, 0),
            func.coalesce(question_counts.c.n, 0),
        )
        .outerjoin(application_counts, application_counts.c.job_id == Job.id)
        .outerjoin(question_counts, question_counts.c.job_id == Job.id)
    )


def list_published_with_counts(db: Session) -> List[Tuple[Job, int, int]]:
    """
    Published jobs, newest first, with their application and question counts.
    """
    rows = (
        _with_counts(db, _application_counts(db), _question_counts(db))
        .filter(Job.status == JobStatus.PUBLISHED)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    return [(job, int(apps), int(questions)) for job, apps, questions in rows]


def list_recent_for_employer_with_counts(db: Session, employer_id: str, limit: int = 5) -> List[Tuple[Job, int, int]]:
    """
    An employer's newest jobs in any status, with their application and
    question counts.
    """
    rows = (
        _with_counts(db, _application_counts(db), _question_counts(db))
        .filter(Job.employer_id == employer_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .limit(limit)
        .all()
    )
    return [(job, int(apps), int(questions)) for job, apps, questions in rows]


def list_published_for_employer_with_open_counts(db: Session, employer_id: str) -> List[Tuple[Job, int, int]]:
    """
    An employer's published jobs, newest first, with the number of
    applications still awaiting a decision and of unanswered questions.
    """
    rows = (
        _with_counts(
            db,
            _application_counts(db, status=ApplicationStatus.APPLIED),
            _question_counts(db, unanswered_only=True),
        )
        .filter(Job.employer_id == employer_id, Job.status == JobStatus.PUBLISHED)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    return [(job, int(pending), int(unanswered)) for job, pending, unanswered in rows]



def get_latest_for_employer(db: Session, employer_id: str) -> Optional[Job]:
    return (
        db.query(Job)
        .filter(Job.employer_id == employer_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .first()
    )
