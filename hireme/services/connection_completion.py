"""
Job connection completion.

Runs once a connection's interaction window has ended:

1. An ACTIVE connection becomes COMPLETED and its job COMPLETED. A
   connection that was cancelled keeps its status.
2. Every hidden feedback on the connection is revealed and its rating is
   folded into the recipient's aggregate.

Both happen in one transaction. A feedback is counted in the same write
that makes it visible and visible feedback is never counted again, so a
redelivered or repeated run leaves ratings unchanged.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from hireme.core.clock import as_utc, utcnow
from hireme.crud import feedback as feedback_crud
from hireme.crud import job_connection as job_connection_crud
from hireme.crud import user as user_crud
from hireme.lifecycle import rules
from hireme.models.feedback import Feedback
from hireme.models.job import JobStatus
from hireme.models.job_connection import JobConnectionStatus

logger = logging.getLogger(__name__)


def complete_job_connection(db: Session, job_connection_id: int, now: Optional[datetime] = None) -> Optional[Dict]:
    """
    Complete a job connection and reveal its feedback.

    Args:
        db: Database session
        job_connection_id: Connection to process
        now: Current time (defaults to the wall clock)

    Returns:
        Summary dict, or None if the connection no longer exists or its
        window has not ended yet
    """
    now = now or utcnow()
    logger.info(f"Starting job connection completion for JobConnection {job_connection_id}")

    connection = job_connection_crud.get_by_id(db, job_connection_id, with_job=True, for_update=True)
    if connection is None:
        db.rollback()
        logger.warning(f"JobConnection {job_connection_id} not found")
        return None

    if as_utc(now) < as_utc(connection.interaction_end_at):
        # Early delivery; the completion sweep runs it again once due
        db.rollback()
        logger.warning(f"JobConnection {job_connection_id} interaction window is still open, skipping")
        return None

    completed = False
    if rules.can_transition_job_connection(connection.status, JobConnectionStatus.COMPLETED):
        connection.status = JobConnectionStatus.COMPLETED
        completed = True
        logger.info(f"JobConnection {job_connection_id} marked as COMPLETED")

        job = connection.job
        if job is not None and rules.can_transition_job(job.status, JobStatus.COMPLETED):
            job.status = JobStatus.COMPLETED
            logger.info(f"Job {job.id} marked as COMPLETED")
        elif job is not None:
            logger.warning(f"Job {job.id} is {job.status.value}; not marking it COMPLETED")
    else:
        logger.info(
            f"JobConnection {job_connection_id} status is {connection.status.value}. "
            f"Status will not be changed, but feedback processing will continue."
        )

    feedbacks = feedback_crud.list_hidden_for_connection(db, job_connection_id)
    if feedbacks:
        logger.info(f"Revealing {len(feedbacks)} feedback(s) for JobConnection {job_connection_id}")
        for feedback in feedbacks:
            feedback.is_visible = True
        _apply_ratings(db, feedbacks)
    else:
        logger.info(f"No hidden feedback for JobConnection {job_connection_id}")

    status = connection.status.value
    db.commit()

    logger.info(f"Successfully completed processing for JobConnection {job_connection_id}")
    return {
        "job_connection_id": job_connection_id,
        "status": status,
        "completed": completed,
        "feedback_revealed": len(feedbacks),
    }


def _apply_ratings(db: Session, feedbacks: List[Feedback]) -> None:
    by_recipient: Dict[str, List[Feedback]] = defaultdict(list)
    for feedback in feedbacks:
        by_recipient[feedback.to_user_id].append(feedback)

    for user_id, received in by_recipient.items():
        # One feedback per rater per connection means one per recipient
        if len(received) > 1:
            logger.warning(f"User {user_id} received {len(received)} feedbacks on one connection; counting each")

        for feedback in received:
            if user_crud.apply_rating(db, user_id, feedback.rating):
                logger.info(f"Added rating {feedback.rating} to user {user_id} from feedback {feedback.id}")
            else:
                logger.warning(f"User {user_id} not found while updating ratings")


def sweep_due_job_connections(db: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    """
    Run completion for every connection whose window has ended but which
    was never (fully) completed.

    Each connection is processed in its own transaction; a failure is
    logged and left for the next sweep.
    """
    now = now or utcnow()
    due = job_connection_crud.list_due_ids(db, now)
    db.rollback()

    processed = 0
    failed = 0
    for job_connection_id in due:
        try:
            complete_job_connection(db, job_connection_id, now=now)
            processed += 1
        except Exception as e:
            db.rollback()
            failed += 1
            logger.error(f"Sweep failed to complete JobConnection {job_connection_id}: {e}", exc_info=True)

    if due:
        logger.info(f"Completion sweep: {processed} processed, {failed} failed, {len(due)} due")
    return {"due": len(due), "processed": processed, "failed": failed}
