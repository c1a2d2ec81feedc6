"""
CRUD operations for Question and Answer models.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, joinedload

from hireme.models.job import Job, JobStatus
from hireme.models.question import Answer, Question


def create_question(db: Session, job_id: int, worker_id: str, text: str) -> Question:
    question = Question(job_id=job_id, worker_id=worker_id, question_text=text)
    db.add(question)
    db.flush()
    return question


def get_question(db: Session, question_id: int) -> Optional[Question]:
    return (
        db.query(Question)
        .options(joinedload(Question.answer), joinedload(Question.job))
        .filter(Question.id == question_id)
        .first()
    )


def list_for_job(db: Session, job_id: int) -> List[Question]:
    return (
        db.query(Question)
        .options(joinedload(Question.answer))
        .filter(Question.job_id == job_id)
        .order_by(Question.created_at, Question.id)
        .all()
    )


def create_answer(db: Session, question_id: int, employer_id: str, text: str) -> Answer:
    answer = Answer(question_id=question_id, employer_id=employer_id, answer_text=text)
    db.add(answer)
    db.flush()
    return answer


def get_answer(db: Session, answer_id: int) -> Optional[Answer]:
    return db.query(Answer).filter(Answer.id == answer_id).first()


def get_answer_for_question(db: Session, question_id: int) -> Optional[Answer]:
    return db.query(Answer).filter(Answer.question_id == question_id).first()


def _answered_counts(db: Session):
    """(questions, answered) counting query; unanswered is the difference."""
    return (
        db.query(func.count(Question.id), func.count(Answer.id))
        .select_from(Question)
        .outerjoin(Answer, and_(Answer.question_id == Question.id, Answer.is_deleted == False))  # noqa: E712
        .filter(Question.is_deleted == False)  # noqa: E712
    )


def count_answered_for_worker(db: Session, worker_id: str, created_after: Optional[datetime] = None) -> Tuple[int, int]:
    """
    Answered and unanswered questions a worker asked on jobs that are still
    published.

    Returns:
        (answered, unanswered)
    """
    query = (
        _answered_counts(db)
        .join(Job, Job.id == Question.job_id)
        .filter(Question.worker_id == worker_id, Job.status == JobStatus.PUBLISHED)
    )
    if created_after is not None:
        query = query.filter(Question.created_at > created_after)

    total, answered = query.one()
    return int(answered), int(total) - int(answered)


def count_unanswered_for_job(db: Session, job_id: int) -> int:
    total, answered = _answered_counts(db).filter(Question.job_id == job_id).one()
    return int(total) - int(answered)
