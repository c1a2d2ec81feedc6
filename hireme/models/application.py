"""
Application database model.

A worker's bid on a job. Only an APPLIED application ever changes status;
every other status is final.
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from hireme.core.database import Base
from hireme.models.base import SoftDeleteMixin, TimestampMixin


class ApplicationStatus(str, enum.Enum):
    """
    Application lifecycle:

    APPLIED -> ACCEPTED                        (employer accepts)
            -> REJECTED                        (employer rejects)
            -> WITHDRAWN                       (worker withdraws)
            -> EMPLOYER_CHOOSE_ANOTHER_WORKER  (another application on the job was accepted)
            -> WORKER_ACCEPTED_AT_ANOTHER_JOB  (the worker was accepted elsewhere)
            -> JOB_CLOSED                      (the job was closed)
    """
    APPLIED = "APPLIED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"
    WORKER_ACCEPTED_AT_ANOTHER_JOB = "WORKER_ACCEPTED_AT_ANOTHER_JOB"
    EMPLOYER_CHOOSE_ANOTHER_WORKER = "EMPLOYER_CHOOSE_ANOTHER_WORKER"
    JOB_CLOSED = "JOB_CLOSED"


class Application(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "applications"
    __table_args__ = (
        # One live application per worker per job
        Index(
            "ux_applications_job_worker",
            "job_id",
            "worker_id",
            unique=True,
            postgresql_where=text("NOT is_deleted"),
            sqlite_where=text("NOT is_deleted"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    message = Column(Text, nullable=True)

    status = Column(
        Enum(ApplicationStatus),
        default=ApplicationStatus.APPLIED,
        nullable=False,
        index=True
    )
    status_changed_at = Column(DateTime(timezone=True), nullable=True)

    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    worker_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    job = relationship("Job", back_populates="applications")
    worker = relationship("User")

    def __repr__(self):
        return f"<Application(id={self.id}, job_id={self.job_id}, status={self.status.value})>"
