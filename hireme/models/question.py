"""
Question and Answer models: the public Q&A thread on a job posting.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from hireme.core.database import Base
from hireme.models.base import SoftDeleteMixin, TimestampMixin


class Question(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    question_text = Column(Text, nullable=False)

    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    worker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    job = relationship("Job", back_populates="questions")
    answer = relationship("Answer", back_populates="question", uselist=False)


class Answer(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    answer_text = Column(Text, nullable=False)

    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False, index=True)
    employer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    question = relationship("Question", back_populates="answer")
