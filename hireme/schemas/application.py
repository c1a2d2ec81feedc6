from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ApplicationCreateRequest(BaseModel):
    job_id: int
    message: Optional[str] = Field(None, max_length=1000)


class ApplicationUpdateRequest(BaseModel):
    message: Optional[str] = Field(None, max_length=1000)


class AppliedApplicationResponse(BaseModel):
    """An open application as the job's employer sees it"""
    application_id: int
    message: str
    created_at: datetime
    is_updated: bool
    worker_id: str
    worker_name: Optional[str] = None


class PendingApplicationResponse(BaseModel):
    """An open application as the applying worker sees it"""
    application_id: int
    message: Optional[str] = None
    created_at: datetime
    job_id: int
    job_title: str
    salary: Decimal
