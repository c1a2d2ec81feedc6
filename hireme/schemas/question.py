from datetime import datetime

from pydantic import BaseModel, Field


class QuestionCreateRequest(BaseModel):
    job_id: int
    question_text: str = Field(..., min_length=1, max_length=500)


class QuestionUpdateRequest(BaseModel):
    question_text: str = Field(..., min_length=1, max_length=500)


class QuestionSummaryResponse(BaseModel):
    id: int
    text: str
    has_answer: bool
    created_at: datetime
    is_updated: bool


class AnswerCreateRequest(BaseModel):
    question_id: int
    answer_text: str = Field(..., min_length=1, max_length=1000)


class AnswerUpdateRequest(BaseModel):
    answer_text: str = Field(..., min_length=1, max_length=1000)


class AnswerSummaryResponse(BaseModel):
    id: int
    text: str
    question_id: int
    created_at: datetime
    is_updated: bool
