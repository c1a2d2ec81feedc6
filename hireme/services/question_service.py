"""
Public Q&A on job postings.

Workers ask questions on published jobs; the job's employer answers them.
Once answered, a question can no longer be edited or deleted.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from hireme.core.clock import utcnow
from hireme.core.errors import AnswerErrors, JobErrors, QuestionErrors
from hireme.core.result import Result, service_operation
from hireme.crud import job as job_crud
from hireme.crud import question as question_crud
from hireme.lifecycle import rules
from hireme.models.question import Answer, Question
from hireme.schemas.question import (
    AnswerCreateRequest,
    AnswerSummaryResponse,
    AnswerUpdateRequest,
    QuestionCreateRequest,
    QuestionSummaryResponse,
    QuestionUpdateRequest,
)

logger = logging.getLogger(__name__)


@service_operation
def add_question(db: Session, worker_id: str, request: QuestionCreateRequest) -> Result[Question]:
    logger.info(f"Starting question creation for worker {worker_id} on job {request.job_id}")

    job = job_crud.get_by_id(db, request.job_id)
    error = rules.check_ask_question(job)
    if error:
        logger.warning(f"Question creation failed on job {request.job_id}: {error.code}")
        return Result.failure(error)

    question = question_crud.create_question(db, request.job_id, worker_id, request.question_text)
    db.commit()
    db.refresh(question)

    logger.info(f"Question {question.id} created on job {request.job_id}")
    return Result.success(question)


def _load_own_unanswered_question(db: Session, worker_id: str, question_id: int):
    question = question_crud.get_question(db, question_id)
    if question is None:
        return None, QuestionErrors.QUESTION_NOT_FOUND
    if question.worker_id != worker_id:
        return None, QuestionErrors.UNAUTHORIZED_QUESTION_UPDATE
    if question.answer is not None:
        return None, QuestionErrors.QUESTION_ALREADY_ANSWERED
    return question, None


@service_operation
def update_question(db: Session, worker_id: str, question_id: int, request: QuestionUpdateRequest) -> Result[Question]:
    question, error = _load_own_unanswered_question(db, worker_id, question_id)
    if error:
        logger.warning(f"Question update failed for question {question_id}: {error.code}")
        return Result.failure(error)

    question.question_text = request.question_text
    question.updated_at = utcnow()
    db.commit()
    db.refresh(question)

    logger.info(f"Question {question_id} updated")
    return Result.success(question)


@service_operation
def delete_question(db: Session, worker_id: str, question_id: int) -> Result[None]:
    question, error = _load_own_unanswered_question(db, worker_id, question_id)
    if error:
        logger.warning(f"Question deletion failed for question {question_id}: {error.code}")
        return Result.failure(error)

    question.is_deleted = True
    db.commit()

    logger.info(f"Question {question_id} deleted")
    return Result.success()


@service_operation
def list_questions(db: Session, job_id: int) -> Result[List[QuestionSummaryResponse]]:
    if job_crud.get_by_id(db, job_id) is None:
        logger.warning(f"Get questions failed: job {job_id} not found")
        return Result.failure(JobErrors.JOB_NOT_FOUND)

    questions = question_crud.list_for_job(db, job_id)
    return Result.success([
        QuestionSummaryResponse(
            id=q.id,
            text=q.question_text,
            has_answer=q.answer is not None,
            created_at=q.created_at,
            is_updated=q.updated_at is not None,
        )
        for q in questions
    ])


@service_operation
def add_answer(db: Session, employer_id: str, request: AnswerCreateRequest) -> Result[Answer]:
    logger.info(f"Starting answer creation by employer {employer_id} on question {request.question_id}")

    question = question_crud.get_question(db, request.question_id)
    if question is None:
        logger.warning(f"Answer creation failed: question {request.question_id} not found")
        return Result.failure(AnswerErrors.QUESTION_NOT_FOUND)
    if question.job is None:
        logger.warning(f"Answer creation failed: job for question {request.question_id} not found")
        return Result.failure(JobErrors.JOB_NOT_FOUND)
    if question.job.employer_id != employer_id:
        logger.warning(f"Answer creation failed: employer {employer_id} does not own the job of question {request.question_id}")
        return Result.failure(AnswerErrors.UNAUTHORIZED_ANSWER_CREATION)
    if question.answer is not None:
        logger.warning(f"Answer creation failed: question {request.question_id} has already been answered")
        return Result.failure(AnswerErrors.QUESTION_ALREADY_ANSWERED)

    answer = question_crud.create_answer(db, request.question_id, employer_id, request.answer_text)
    db.commit()
    db.refresh(answer)

    logger.info(f"Answer {answer.id} created for question {request.question_id}")
    return Result.success(answer)


@service_operation
def update_answer(db: Session, employer_id: str, answer_id: int, request: AnswerUpdateRequest) -> Result[Answer]:
    answer = question_crud.get_answer(db, answer_id)
    if answer is None:
        logger.warning(f"Answer update failed: answer {answer_id} not found")
        return Result.failure(AnswerErrors.ANSWER_NOT_FOUND)
    if answer.employer_id != employer_id:
        logger.warning(f"Answer update failed: employer {employer_id} does not own answer {answer_id}")
        return Result.failure(AnswerErrors.UNAUTHORIZED_ANSWER_UPDATE)

    answer.answer_text = request.answer_text
    answer.updated_at = utcnow()
    db.commit()
    db.refresh(answer)
    return Result.success(answer)


@service_operation
def delete_answer(db: Session, employer_id: str, answer_id: int) -> Result[None]:
    answer = question_crud.get_answer(db, answer_id)
    if answer is None:
        logger.warning(f"Answer deletion failed: answer {answer_id} not found")
        return Result.failure(AnswerErrors.ANSWER_NOT_FOUND)
    if answer.employer_id != employer_id:
        logger.warning(f"Answer deletion failed: employer {employer_id} does not own answer {answer_id}")
        return Result.failure(AnswerErrors.UNAUTHORIZED_ANSWER_DELETE)

    answer.is_deleted = True
    db.commit()

    logger.info(f"Answer {answer_id} deleted")
    return Result.success()


@service_operation
def get_answer(db: Session, question_id: int) -> Result[AnswerSummaryResponse]:
    answer = question_crud.get_answer_for_question(db, question_id)
    if answer is None:
        logger.warning(f"Answer not found for question {question_id}")
        return Result.failure(AnswerErrors.ANSWER_NOT_FOUND)

    return Result.success(AnswerSummaryResponse(
        id=answer.id,
        text=answer.answer_text,
        question_id=answer.question_id,
        created_at=answer.created_at,
        is_updated=answer.updated_at is not None,
    ))
