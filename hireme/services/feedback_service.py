"""
Feedback submission within a job connection's interaction window.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hireme.core.clock import utcnow
from hireme.core.errors import FeedbackErrors
from hireme.core.result import Result, service_operation
from hireme.crud import feedback as feedback_crud
from hireme.crud import job_connection as job_connection_crud
from hireme.lifecycle import rules
from hireme.models.feedback import Feedback
from hireme.schemas.feedback import FeedbackCreateRequest, FeedbackResponse

logger = logging.getLogger(__name__)


@service_operation
def add_feedback(db: Session, from_user_id: str, request: FeedbackCreateRequest) -> Result[Feedback]:
    """
    Record hidden feedback from one party about the other.

    It becomes visible, and counts towards the recipient's rating, when the
    connection's completion worker runs.
    """
    job_connection_id = request.job_connection_id
    logger.info(f"Starting feedback creation for JobConnection {job_connection_id} by user {from_user_id}")

    connection = job_connection_crud.get_by_id(db, job_connection_id)
    already_submitted = connection is not None and feedback_crud.exists_from_user(db, job_connection_id, from_user_id)

    error = rules.check_submit_feedback(connection, from_user_id, utcnow(), already_submitted)
    if error:
        logger.warning(f"Feedback creation failed for JobConnection {job_connection_id} by user {from_user_id}: {error.code}")
        return Result.failure(error)

    try:
        feedback = feedback_crud.create(
            db,
            job_connection_id=job_connection_id,
            from_user_id=from_user_id,
            to_user_id=connection.counterparty_of(from_user_id),
            rating=request.rating,
            message=request.message,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Feedback creation failed: user {from_user_id} already submitted feedback for JobConnection {job_connection_id}")
        return Result.failure(FeedbackErrors.FEEDBACK_ALREADY_EXISTS)

    db.refresh(feedback)
    logger.info(f"Feedback {feedback.id} created for JobConnection {job_connection_id}")
    return Result.success(feedback)


@service_operation
def list_visible_feedback(db: Session, user_id: str) -> Result[List[FeedbackResponse]]:
    """Revealed feedback a user has received."""
    feedbacks = feedback_crud.list_visible_for_recipient(db, user_id)
    return Result.success([FeedbackResponse.model_validate(feedback) for feedback in feedbacks])
