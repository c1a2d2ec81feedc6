import enum

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Numeric, String, Text, Time
from sqlalchemy.orm import relationship

from hireme.core.database import Base
from hireme.models.base import SoftDeleteMixin, TimestampMixin


class JobStatus(str, enum.Enum):
    """
    Job lifecycle:

    PUBLISHED -> IN_PROGRESS -> COMPLETED
        |             |
        v             v
      CLOSED      CANCELLED
    """
    PUBLISHED = "PUBLISHED"      # Open for applications and questions
    IN_PROGRESS = "IN_PROGRESS"  # An application was accepted
    COMPLETED = "COMPLETED"      # Its job connection ran to the end of the window
    CLOSED = "CLOSED"            # Closed by the employer or an administrator
    CANCELLED = "CANCELLED"      # Its job connection was cancelled by either party


class ShiftType(str, enum.Enum):
    MORNING = "MORNING"
    NIGHT = "NIGHT"


class PreferredGender(str, enum.Enum):
    ANY = "ANY"
    MALE = "MALE"
    FEMALE = "FEMALE"


class Job(SoftDeleteMixin, TimestampMixin, Base):
    """
    A job posting published by an employer.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    salary = Column(Numeric(12, 2), nullable=False)
    has_accommodation = Column(Boolean, default=False, nullable=False)
    preferred_gender = Column(Enum(PreferredGender), default=PreferredGender.ANY, nullable=False)

    # Schedule
    work_days = Column(Integer, nullable=False)  # WorkDays bitmask
    working_days_per_week = Column(Integer, nullable=False)
    shift_start_time = Column(Time, nullable=False)
    shift_end_time = Column(Time, nullable=False)
    working_hours_per_day = Column(Integer, nullable=False)
    shift_type = Column(Enum(ShiftType), nullable=False)

    address = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    experience = Column(String, nullable=True)

    status = Column(Enum(JobStatus), default=JobStatus.PUBLISHED, nullable=False, index=True)

    employer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    employer = relationship("User")
    applications = relationship("Application", back_populates="job")
    questions = relationship("Question", back_populates="job")

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status.value})>"
