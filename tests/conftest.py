"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- Recording Celery dispatch instead of talking to Redis
- Users, jobs, applications and connections in common states
"""

from datetime import time, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hireme.core.clock import utcnow
from hireme.core.database import Base
from hireme.core.work_days import WorkDays
from hireme.crud import job as job_crud
from hireme.crud import job_connection as job_connection_crud
from hireme.models.application import Application, ApplicationStatus
from hireme.models.job import Job, JobStatus
from hireme.models.user import User
from hireme.schemas.job import JobCreateRequest


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


class DispatchRecorder:
    """Collects what services would have sent to the broker."""

    def __init__(self):
        self.enqueued = []
        self.scheduled = []

    def enqueue(self, task, **kwargs):
        self.enqueued.append((task.name, kwargs))
        return True

    def schedule(self, task, eta, **kwargs):
        self.scheduled.append((task.name, eta, kwargs))
        return True

    def enqueued_names(self):
        return [name for name, _ in self.enqueued]


@pytest.fixture
def dispatched(monkeypatch):
    """
    Mock Celery dispatch for testing without Redis.
    Tasks are recorded, not run; tests invoke the handlers directly.
    """
    recorder = DispatchRecorder()
    monkeypatch.setattr("hireme.core.celery_utils.enqueue_task", recorder.enqueue)
    monkeypatch.setattr("hireme.core.celery_utils.schedule_task", recorder.schedule)
    return recorder


@pytest.fixture
def make_user(db_session):
    def _make_user(name):
        user = User(email=f"{name}@example.com", full_name=name.title())
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture
def worker(make_user):
    return make_user("worker")


@pytest.fixture
def other_worker(make_user):
    return make_user("other_worker")


@pytest.fixture
def employer(make_user):
    return make_user("employer")


@pytest.fixture
def other_employer(make_user):
    return make_user("other_employer")


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Farm Hand",
        "salary": Decimal("4500.00"),
        "has_accommodation": True,
        "shift_start_time": time(8, 0),
        "shift_end_time": time(16, 0),
        "work_days": int(WorkDays.SATURDAY | WorkDays.SUNDAY | WorkDays.MONDAY | WorkDays.TUESDAY | WorkDays.WEDNESDAY),
        "address": "Giza",
        "description": "Harvest season help",
    }


@pytest.fixture
def make_job(db_session, sample_job_data):
    def _make_job(employer, status=JobStatus.PUBLISHED, **overrides):
        job = job_crud.create(db_session, employer.id, JobCreateRequest(**{**sample_job_data, **overrides}))
        job.status = status
        db_session.commit()
        return job
    return _make_job


@pytest.fixture
def make_application(db_session):
    def _make_application(job, worker, status=ApplicationStatus.APPLIED, message="Hi"):
        application = Application(job_id=job.id, worker_id=worker.id, message=message, status=status)
        db_session.add(application)
        db_session.commit()
        return application
    return _make_application


@pytest.fixture
def make_connection(db_session):
    """
    An ACTIVE connection with its job IN_PROGRESS.

    ends_in controls how far away the interaction end is; pass a negative
    timedelta for a window that has already closed.
    """
    def _make_connection(job, worker, ends_in=timedelta(days=10)):
        job.status = JobStatus.IN_PROGRESS
        connection = job_connection_crud.create(
            db_session,
            job_id=job.id,
            worker_id=worker.id,
            employer_id=job.employer_id,
            interaction_end_at=utcnow() + ends_in,
        )
        db_session.commit()
        return connection
    return _make_connection


@pytest.fixture
def reload(db_session):
    """Fresh copy of a row, bypassing anything cached in the session."""
    def _reload(model, id_):
        db_session.expire_all()
        return db_session.query(model).filter(model.id == id_).first()
    return _reload


@pytest.fixture
def task_sessions(monkeypatch):
    """Point the Celery task bodies at the test database."""
    monkeypatch.setattr("hireme.tasks.application_tasks.SessionLocal", TestingSessionLocal)
    monkeypatch.setattr("hireme.tasks.job_connection_tasks.SessionLocal", TestingSessionLocal)
