"""
CRUD operations for Feedback model.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from hireme.models.feedback import Feedback


def create(
    db: Session,
    job_connection_id: int,
    from_user_id: str,
    to_user_id: str,
    rating: int,
    message: Optional[str],
) -> Feedback:
    feedback = Feedback(
        job_connection_id=job_connection_id,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        rating=rating,
        message=message,
        is_visible=False,
    )
    db.add(feedback)
    db.flush()
    return feedback


def exists_from_user(db: Session, job_connection_id: int, from_user_id: str) -> bool:
    return db.query(
        db.query(Feedback)
        .filter(
            Feedback.job_connection_id == job_connection_id,
            Feedback.from_user_id == from_user_id,
            Feedback.is_deleted == False,  # noqa: E712
        )
        .exists()
    ).scalar()


def list_hidden_for_connection(db: Session, job_connection_id: int) -> List[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.job_connection_id == job_connection_id, Feedback.is_visible == False)  # noqa: E712
        .order_by(Feedback.id)
        .with_for_update()
        .all()
    )


def list_visible_for_recipient(db: Session, to_user_id: str) -> List[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.to_user_id == to_user_id, Feedback.is_visible == True)  # noqa: E712
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .all()
    )
