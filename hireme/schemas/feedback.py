from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FeedbackCreateRequest(BaseModel):
    job_connection_id: int
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 (poor) to 5 (excellent)")
    message: Optional[str] = Field(None, max_length=500)


class FeedbackResponse(BaseModel):
    id: int
    job_connection_id: int
    from_user_id: str
    to_user_id: str
    rating: int
    message: Optional[str] = None
    is_visible: bool
    created_at: datetime

    class Config:
        from_attributes = True
