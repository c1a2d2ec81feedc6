"""
Test suite for job connection cancellation and lookups.
"""

import logging
from datetime import timedelta

import pytest

from hireme.core.clock import utcnow
from hireme.core.errors import JobConnectionErrors
from hireme.core.identity import Role, caller_from_claims, resolve_role
from hireme.models.job import Job, JobStatus
from hireme.models.job_connection import JobConnection, JobConnectionStatus
from hireme.services import job_connection_service
from hireme.services.connection_completion import complete_job_connection


class TestRoleResolution:
    """Tests for mapping role claims to a marketplace role"""

    @pytest.mark.parametrize("claims,role", [
        (["Worker"], Role.WORKER),
        (["Employer"], Role.EMPLOYER),
        (["Employer", "Worker"], Role.WORKER),
        (["Admin"], None),
        ([], None),
    ])
    def test_resolve_role(self, claims, role):
        assert resolve_role(claims) == role

    def test_caller_from_claims(self):
        caller = caller_from_claims("u1", ["Employer"])
        assert caller.user_id == "u1"
        assert caller.role == Role.EMPLOYER


class TestCancelJobConnection:
    """Tests for cancelling an active connection"""

    def test_worker_cancels(self, db_session, worker, employer, make_job, make_connection, reload):
        job = make_job(employer)
        connection = make_connection(job, worker)

        result = job_connection_service.cancel_job_connection(db_session, worker.id, connection.id, Role.WORKER)

        assert result.is_success
        cancelled = reload(JobConnection, connection.id)
        assert cancelled.status == JobConnectionStatus.CANCELLED_BY_WORKER
        assert cancelled.cancelled_at is not None
        assert reload(Job, job.id).status == JobStatus.CANCELLED

    def test_employer_cancels(self, db_session, worker, employer, make_job, make_connection, reload):
        connection = make_connection(make_job(employer), worker)

        caller = caller_from_claims(employer.id, ["Employer"])
        result = job_connection_service.cancel_job_connection(db_session, caller.user_id, connection.id, caller.role)

        assert result.is_success
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.CANCELLED_BY_EMPLOYER

    def test_cancel_without_marketplace_role(self, db_session, worker, employer, make_job, make_connection, reload):
        connection = make_connection(make_job(employer), worker)

        caller = caller_from_claims(worker.id, ["Admin"])
        result = job_connection_service.cancel_job_connection(db_session, caller.user_id, connection.id, caller.role)

        assert result.error == JobConnectionErrors.UNAUTHORIZED_CANCELLATION
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.ACTIVE

    def test_cancel_by_outsider(self, db_session, worker, other_worker, employer, make_job, make_connection, reload):
        connection = make_connection(make_job(employer), worker)

        result = job_connection_service.cancel_job_connection(db_session, other_worker.id, connection.id, Role.WORKER)

        assert result.error == JobConnectionErrors.UNAUTHORIZED_CANCELLATION
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.ACTIVE

    def test_cancel_completed_connection(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)
        connection.status = JobConnectionStatus.COMPLETED
        db_session.commit()

        result = job_connection_service.cancel_job_connection(db_session, worker.id, connection.id, Role.WORKER)

        assert result.error == JobConnectionErrors.JOB_CONNECTION_NOT_ACTIVE

    def test_cancel_twice(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)
        job_connection_service.cancel_job_connection(db_session, worker.id, connection.id, Role.WORKER)

        result = job_connection_service.cancel_job_connection(db_session, employer.id, connection.id, Role.EMPLOYER)

        assert result.error == JobConnectionErrors.JOB_CONNECTION_NOT_ACTIVE

    def test_cancel_after_interaction_window(self, db_session, worker, employer, make_job, make_connection, reload):
        job = make_job(employer)
        connection = make_connection(job, worker, ends_in=timedelta(minutes=-5))

        result = job_connection_service.cancel_job_connection(db_session, worker.id, connection.id, Role.WORKER)

        assert result.error == JobConnectionErrors.JOB_CONNECTION_NOT_ACTIVE
        assert reload(JobConnection, connection.id).status == JobConnectionStatus.ACTIVE
        assert reload(Job, job.id).status == JobStatus.IN_PROGRESS

        # The pending completion still finishes the connection normally
        complete_job_connection(db_session, connection.id, now=utcnow())

        assert reload(JobConnection, connection.id).status == JobConnectionStatus.COMPLETED
        assert reload(Job, job.id).status == JobStatus.COMPLETED

    def test_success_log_reports_job_status(self, db_session, worker, employer, make_job, make_connection, caplog):
        job = make_job(employer)
        connection = make_connection(job, worker)

        with caplog.at_level(logging.INFO, logger="hireme.services.job_connection_service"):
            job_connection_service.cancel_job_connection(db_session, worker.id, connection.id, Role.WORKER)

        assert f"job {job.id} is CANCELLED" in caplog.text

    def test_success_log_when_job_is_left_unchanged(
        self, db_session, worker, employer, make_job, make_connection, reload, caplog
    ):
        job = make_job(employer)
        connection = make_connection(job, worker)
        job.status = JobStatus.COMPLETED
        db_session.commit()

        with caplog.at_level(logging.INFO, logger="hireme.services.job_connection_service"):
            result = job_connection_service.cancel_job_connection(db_session, employer.id, connection.id, Role.EMPLOYER)

        assert result.is_success
        assert reload(Job, job.id).status == JobStatus.COMPLETED
        assert f"job {job.id} is COMPLETED" in caplog.text

    def test_cancel_missing_connection(self, db_session, worker):
        result = job_connection_service.cancel_job_connection(db_session, worker.id, 404, Role.WORKER)
        assert result.error == JobConnectionErrors.JOB_CONNECTION_NOT_FOUND

    def test_worker_can_be_hired_again_after_cancelling(
        self, db_session, worker, employer, make_job, make_connection
    ):
        connection = make_connection(make_job(employer), worker)
        job_connection_service.cancel_job_connection(db_session, worker.id, connection.id, Role.WORKER)

        # The one-active-connection index no longer applies to the cancelled row
        second = make_connection(make_job(employer, title="Next gig"), worker)

        assert second.status == JobConnectionStatus.ACTIVE


class TestConnectionModel:
    """Tests for JobConnection model guards"""

    def test_interaction_end_is_immutable(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)

        with pytest.raises(ValueError):
            connection.interaction_end_at = connection.interaction_end_at + timedelta(days=1)

    def test_counterparty(self):
        connection = JobConnection(worker_id="w", employer_id="e")
        assert connection.counterparty_of("w") == "e"
        assert connection.counterparty_of("e") == "w"
        assert connection.is_party("w") and not connection.is_party("x")


class TestActiveConnection:
    """Tests for looking up a caller's active connection"""

    def test_active_connection_for_each_party(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)

        as_worker = job_connection_service.get_active_connection(db_session, worker.id, Role.WORKER)
        as_employer = job_connection_service.get_active_connection(db_session, employer.id, Role.EMPLOYER)

        assert as_worker.value.id == connection.id
        assert as_employer.value.id == connection.id

    def test_no_active_connection(self, db_session, worker):
        result = job_connection_service.get_active_connection(db_session, worker.id, Role.WORKER)

        assert result.is_success
        assert result.value is None
