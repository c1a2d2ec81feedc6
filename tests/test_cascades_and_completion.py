"""
Test suite for the background handlers.

Tests cover:
- Acceptance and job-closure cascades (and running them twice)
- Job connection completion, including redelivery and the
  cancelled-before-deadline path
- The completion sweep
- The Celery task wrappers
"""

from datetime import timedelta

import pytest

from hireme.core.clock import as_utc, utcnow
from hireme.crud import feedback as feedback_crud
from hireme.models.application import Application, ApplicationStatus
from hireme.models.feedback import Feedback
from hireme.models.job import Job, JobStatus
from hireme.models.job_connection import JobConnection, JobConnectionStatus
from hireme.models.user import User
from hireme.services.application_cascades import cascade_application_acceptance, cascade_job_closure
from hireme.services.connection_completion import complete_job_connection, sweep_due_job_connections


@pytest.fixture
def add_hidden_feedback(db_session):
    def _add(connection, from_user, rating):
        feedback = feedback_crud.create(
            db_session,
            job_connection_id=connection.id,
            from_user_id=from_user.id,
            to_user_id=connection.counterparty_of(from_user.id),
            rating=rating,
            message=None,
        )
        db_session.commit()
        return feedback
    return _add


def after_end(connection):
    return as_utc(connection.interaction_end_at) + timedelta(minutes=1)


class TestAcceptanceCascade:
    """Tests for closing competing applications after an acceptance"""

    def test_cascade(self, db_session, worker, other_worker, employer, make_job, make_application, reload):
        job = make_job(employer)
        elsewhere = make_job(employer, title="Elsewhere")
        accepted = make_application(job, worker, status=ApplicationStatus.ACCEPTED)
        competitor = make_application(job, other_worker)
        own_other = make_application(elsewhere, worker)
        withdrawn = make_application(elsewhere, other_worker, status=ApplicationStatus.WITHDRAWN)

        counts = cascade_application_acceptance(db_session, job.id, accepted.id, worker.id)

        assert counts == {
            "EMPLOYER_CHOOSE_ANOTHER_WORKER": 1,
            "WORKER_ACCEPTED_AT_ANOTHER_JOB": 1,
        }
        assert reload(Application, accepted.id).status == ApplicationStatus.ACCEPTED
        assert reload(Application, competitor.id).status == ApplicationStatus.EMPLOYER_CHOOSE_ANOTHER_WORKER
        assert reload(Application, own_other.id).status == ApplicationStatus.WORKER_ACCEPTED_AT_ANOTHER_JOB
        assert reload(Application, withdrawn.id).status == ApplicationStatus.WITHDRAWN
        assert reload(Application, competitor.id).status_changed_at is not None

    def test_cascade_is_idempotent(self, db_session, worker, other_worker, employer, make_job, make_application):
        job = make_job(employer)
        accepted = make_application(job, worker, status=ApplicationStatus.ACCEPTED)
        make_application(job, other_worker)
        cascade_application_acceptance(db_session, job.id, accepted.id, worker.id)

        counts = cascade_application_acceptance(db_session, job.id, accepted.id, worker.id)

        assert counts == {
            "EMPLOYER_CHOOSE_ANOTHER_WORKER": 0,
            "WORKER_ACCEPTED_AT_ANOTHER_JOB": 0,
        }


class TestJobClosureCascade:
    """Tests for closing open applications on a closed job"""

    def test_closure(self, db_session, worker, other_worker, employer, make_job, make_application, reload):
        job = make_job(employer, status=JobStatus.CLOSED)
        pending = make_application(job, worker)
        rejected = make_application(job, other_worker, status=ApplicationStatus.REJECTED)

        assert cascade_job_closure(db_session, job.id) == 1

        assert reload(Application, pending.id).status == ApplicationStatus.JOB_CLOSED
        assert reload(Application, rejected.id).status == ApplicationStatus.REJECTED
        assert cascade_job_closure(db_session, job.id) == 0

    def test_closure_skips_soft_deleted(self, db_session, worker, employer, make_job, make_application, reload):
        job = make_job(employer, status=JobStatus.CLOSED)
        deleted = make_application(job, worker)
        deleted.is_deleted = True
        db_session.commit()

        assert cascade_job_closure(db_session, job.id) == 0


class TestCompletion:
    """Tests for completing a connection at the end of its window"""

    def test_completes_active_connection(
        self, db_session, worker, employer, make_job, make_connection, add_hidden_feedback, reload
    ):
        job = make_job(employer)
        connection = make_connection(job, worker)
        add_hidden_feedback(connection, worker, 4)
        add_hidden_feedback(connection, employer, 5)

        summary = complete_job_connection(db_session, connection.id, now=after_end(connection))

        assert summary["status"] == "COMPLETED"
        assert summary["completed"] is True
        assert summary["feedback_revealed"] == 2
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.COMPLETED
        assert reload(Job, job.id).status == JobStatus.COMPLETED
        assert all(f.is_visible for f in db_session.query(Feedback).all())

        rated_worker = reload(User, worker.id)
        assert (rated_worker.rating_sum, rated_worker.rating_count, rated_worker.average_rating) == (5, 1, 5.0)
        rated_employer = reload(User, employer.id)
        assert (rated_employer.rating_sum, rated_employer.rating_count, rated_employer.average_rating) == (4, 1, 4.0)

    def test_average_over_several_connections(
        self, db_session, worker, other_worker, employer, make_job, make_connection, add_hidden_feedback, reload
    ):
        first = make_connection(make_job(employer, title="First"), worker)
        second = make_connection(make_job(employer, title="Second"), other_worker)
        add_hidden_feedback(first, worker, 5)
        add_hidden_feedback(second, other_worker, 2)

        complete_job_connection(db_session, first.id, now=after_end(first))
        complete_job_connection(db_session, second.id, now=after_end(second))

        rated = reload(User, employer.id)
        assert rated.rating_sum == 7
        assert rated.rating_count == 2
        assert rated.average_rating == pytest.approx(3.5)

    def test_redelivery_does_not_double_count(
        self, db_session, worker, employer, make_job, make_connection, add_hidden_feedback, reload
    ):
        connection = make_connection(make_job(employer), worker)
        add_hidden_feedback(connection, employer, 5)
        now = after_end(connection)

        complete_job_connection(db_session, connection.id, now=now)
        summary = complete_job_connection(db_session, connection.id, now=now)

        assert summary["completed"] is False
        assert summary["feedback_revealed"] == 0
        rated = reload(User, worker.id)
        assert (rated.rating_sum, rated.rating_count) == (5, 1)

    def test_cancelled_connection_keeps_status_but_reveals_feedback(
        self, db_session, worker, employer, make_job, make_connection, add_hidden_feedback, reload
    ):
        job = make_job(employer)
        connection = make_connection(job, worker)
        add_hidden_feedback(connection, worker, 3)
        connection.status = JobConnectionStatus.CANCELLED_BY_WORKER
        job.status = JobStatus.CANCELLED
        db_session.commit()

        summary = complete_job_connection(db_session, connection.id, now=after_end(connection))

        assert summary["completed"] is False
        assert summary["feedback_revealed"] == 1
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.CANCELLED_BY_WORKER
        assert reload(Job, job.id).status == JobStatus.CANCELLED
        assert reload(User, employer.id).rating_count == 1

    def test_early_delivery_changes_nothing(
        self, db_session, worker, employer, make_job, make_connection, add_hidden_feedback, reload
    ):
        connection = make_connection(make_job(employer), worker)
        add_hidden_feedback(connection, worker, 4)

        summary = complete_job_connection(db_session, connection.id, now=utcnow())

        assert summary is None
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.ACTIVE
        assert db_session.query(Feedback).filter(Feedback.is_visible == True).count() == 0  # noqa: E712

    def test_missing_connection(self, db_session):
        assert complete_job_connection(db_session, 404, now=utcnow()) is None

    def test_no_feedback(self, db_session, worker, employer, make_job, make_connection, reload):
        connection = make_connection(make_job(employer), worker)

        summary = complete_job_connection(db_session, connection.id, now=after_end(connection))

        assert summary["feedback_revealed"] == 0
        assert reload(User, worker.id).rating_count == 0


class TestCompletionSweep:
    """Tests for the periodic completion safety net"""

    def test_sweep_completes_overdue_connections(
        self, db_session, worker, other_worker, employer, make_job, make_connection, reload
    ):
        overdue = make_connection(make_job(employer, title="Overdue"), worker, ends_in=timedelta(hours=-1))
        running = make_connection(make_job(employer, title="Running"), other_worker)

        result = sweep_due_job_connections(db_session)

        assert result == {"due": 1, "processed": 1, "failed": 0}
        assert reload(JobConnection, overdue.id).status == JobConnectionStatus.COMPLETED
        assert reload(JobConnection, running.id).status == JobConnectionStatus.ACTIVE

    def test_sweep_picks_up_cancelled_connection_with_hidden_feedback(
        self, db_session, worker, employer, make_job, make_connection, add_hidden_feedback, reload
    ):
        connection = make_connection(make_job(employer), worker, ends_in=timedelta(seconds=-30))
        add_hidden_feedback(connection, employer, 2)
        connection.status = JobConnectionStatus.CANCELLED_BY_EMPLOYER
        db_session.commit()

        result = sweep_due_job_connections(db_session)

        assert result["processed"] == 1
        assert reload(User, worker.id).rating_sum == 2
        assert sweep_due_job_connections(db_session) == {"due": 0, "processed": 0, "failed": 0}

    def test_sweep_continues_after_a_failure(
        self, db_session, worker, other_worker, employer, make_job, make_connection, monkeypatch
    ):
        make_connection(make_job(employer, title="A"), worker, ends_in=timedelta(hours=-2))
        make_connection(make_job(employer, title="B"), other_worker, ends_in=timedelta(hours=-1))

        from hireme.services import connection_completion

        original = connection_completion.complete_job_connection
        calls = []

        def flaky(db, job_connection_id, now=None):
            calls.append(job_connection_id)
            if len(calls) == 1:
                raise RuntimeError("lock timeout")
            return original(db, job_connection_id, now=now)

        monkeypatch.setattr(connection_completion, "complete_job_connection", flaky)

        result = sweep_due_job_connections(db_session)

        assert result == {"due": 2, "processed": 1, "failed": 1}


@pytest.mark.usefixtures("task_sessions")
class TestTaskWrappers:
    """Tests for the Celery task bodies, run eagerly against the test database"""

    def test_job_closure_task(self, db_session, worker, employer, make_job, make_application, reload):
        from hireme.tasks.application_tasks import cascade_job_closure_task

        job = make_job(employer, status=JobStatus.CLOSED)
        application = make_application(job, worker)

        result = cascade_job_closure_task.apply(kwargs={"job_id": job.id}).get()

        assert result == {"status": "success", "updated": 1}
        assert reload(Application, application.id).status == ApplicationStatus.JOB_CLOSED

    def test_completion_task_skips_missing_connection(self, db_session):
        from hireme.tasks.job_connection_tasks import complete_job_connection_task

        result = complete_job_connection_task.apply(kwargs={"job_connection_id": 404}).get()

        assert result == {"status": "skipped", "job_connection_id": 404}
