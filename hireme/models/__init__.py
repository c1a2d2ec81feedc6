"""
Database models package.
"""

from hireme.models.user import User
from hireme.models.job import Job, JobStatus, PreferredGender, ShiftType
from hireme.models.application import Application, ApplicationStatus
from hireme.models.job_connection import JobConnection, JobConnectionStatus
from hireme.models.feedback import Feedback
from hireme.models.question import Answer, Question

__all__ = [
    "User",
    "Job", "JobStatus", "PreferredGender", "ShiftType",
    "Application", "ApplicationStatus",
    "JobConnection", "JobConnectionStatus",
    "Feedback",
    "Question", "Answer",
]
