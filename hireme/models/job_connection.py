"""
JobConnection database model.

Created when an employer accepts an application. It bounds the interaction
window during which either party may cancel or leave feedback.
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship, validates

from hireme.core.database import Base
from hireme.models.base import SoftDeleteMixin, TimestampMixin


class JobConnectionStatus(str, enum.Enum):
    """
    ACTIVE -> COMPLETED               (completion worker at interaction end)
           -> CANCELLED_BY_WORKER     (worker cancels)
           -> CANCELLED_BY_EMPLOYER   (employer cancels)
    """
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED_BY_WORKER = "CANCELLED_BY_WORKER"
    CANCELLED_BY_EMPLOYER = "CANCELLED_BY_EMPLOYER"


class JobConnection(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "job_connections"
    __table_args__ = (
        # A worker holds at most one active connection at a time
        Index(
            "ux_job_connections_active_worker",
            "worker_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE' AND NOT is_deleted"),
            sqlite_where=text("status = 'ACTIVE' AND NOT is_deleted"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    interaction_end_at = Column(DateTime(timezone=True), nullable=False, index=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        Enum(JobConnectionStatus),
        default=JobConnectionStatus.ACTIVE,
        nullable=False,
        index=True
    )

    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    worker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    employer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    job = relationship("Job")
    worker = relationship("User", foreign_keys=[worker_id])
    employer = relationship("User", foreign_keys=[employer_id])

    @validates("interaction_end_at")
    def _freeze_interaction_end(self, key, value):
        if self.interaction_end_at is not None and value != self.interaction_end_at:
            raise ValueError("interaction_end_at cannot change once set")
        return value

    def is_party(self, user_id: str) -> bool:
        return user_id in (self.worker_id, self.employer_id)

    def counterparty_of(self, user_id: str) -> str:
        return self.worker_id if user_id == self.employer_id else self.employer_id

    def __repr__(self):
        return f"<JobConnection(id={self.id}, job_id={self.job_id}, status={self.status.value})>"
