from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from hireme.models.job import JobStatus
from hireme.models.job_connection import JobConnectionStatus


class ApplicationStatistics(BaseModel):
    """A worker's applications since their last connection, by outcome"""
    total: int = 0
    pending: int = 0
    rejected: int = 0
    closed: int = 0
    choose_another_worker: int = 0
    withdrawn: int = 0


class QuestionStatistics(BaseModel):
    answered_questions: int = 0
    unanswered_questions: int = 0


class ActiveJobConnectionResponse(BaseModel):
    """The connection a worker is currently engaged in"""
    job_connection_id: int
    job_title: str
    person_name: Optional[str] = None
    contract_end_date: datetime
    days_remaining: int
    status: JobConnectionStatus


class WorkerDashboardResponse(BaseModel):
    """
    Either the worker's active connection, or their activity statistics
    when they have none.
    """
    active_connection: Optional[ActiveJobConnectionResponse] = None
    applications: Optional[ApplicationStatistics] = None
    questions: Optional[QuestionStatistics] = None


class JobAnalyticsResponse(BaseModel):
    job_id: int
    job_status: JobStatus
    number_of_applications: int
    applied_applications: int
    rejected_applications: int
    withdrawn_applications: int
    accepted_at_another_job_applications: int
    unanswered_questions: int
    last_application_at: Optional[datetime] = None


class RecentJobSummaryResponse(BaseModel):
    """An employer's own job with its activity counts"""
    id: int
    title: str
    working_days_per_week: int
    working_hours_per_day: int
    number_of_questions: int
    number_of_applications: int
    status: JobStatus
    created_at: datetime


class PublishedJobCardResponse(BaseModel):
    id: int
    title: str
    pending_applications: int
    unanswered_questions: int


class WorkerInfoResponse(BaseModel):
    worker_id: str
    full_name: Optional[str] = None


class ActiveConnectionCardResponse(BaseModel):
    id: int
    job_title: str
    worker: WorkerInfoResponse
    ends_at: datetime


class EmployerDashboardResponse(BaseModel):
    published_jobs: List[PublishedJobCardResponse]
    active_connections: List[ActiveConnectionCardResponse]
