from datetime import datetime, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from hireme.core.work_days import is_valid_mask
from hireme.models.job import JobStatus, PreferredGender, ShiftType


class JobCreateRequest(BaseModel):
    """Schema for publishing a new job"""
    title: str = Field(..., min_length=1, max_length=200)
    salary: Decimal = Field(..., gt=0)
    has_accommodation: bool = False
    preferred_gender: PreferredGender = PreferredGender.ANY
    shift_start_time: time
    shift_end_time: time
    work_days: int = Field(..., description="Bitmask: Saturday=1, Sunday=2, ... Friday=64")
    address: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None

    @field_validator("work_days")
    @classmethod
    def validate_work_days(cls, v: int) -> int:
        if not is_valid_mask(v):
            raise ValueError("work_days must select at least one day and only use the seven weekday bits")
        return v


class JobResponse(BaseModel):
    id: int
    title: str
    salary: Decimal
    has_accommodation: bool
    preferred_gender: PreferredGender
    work_days: int
    working_days: List[str]
    working_days_per_week: int
    working_hours_per_day: int
    shift_type: ShiftType
    shift_start_time: time
    shift_end_time: time
    address: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None
    status: JobStatus
    employer_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobSummaryResponse(BaseModel):
    """Listing card for a published job"""
    id: int
    title: str
    salary: Decimal
    working_days_per_week: int
    working_hours_per_day: int
    number_of_applications: int
    number_of_questions: int
    created_at: datetime
    is_updated: bool
