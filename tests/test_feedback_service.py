"""
Test suite for feedback submission.
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from hireme.core.errors import FeedbackErrors
from hireme.models.feedback import Feedback
from hireme.models.job_connection import JobConnectionStatus
from hireme.schemas.feedback import FeedbackCreateRequest, FeedbackResponse
from hireme.services import feedback_service


def feedback_request(connection, rating=4, message="Reliable and on time"):
    return FeedbackCreateRequest(job_connection_id=connection.id, rating=rating, message=message)


class TestAddFeedback:
    """Tests for leaving feedback inside the interaction window"""

    def test_worker_rates_employer(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)

        result = feedback_service.add_feedback(db_session, worker.id, feedback_request(connection))

        assert result.is_success
        feedback = result.value
        assert feedback.from_user_id == worker.id
        assert feedback.to_user_id == employer.id
        assert feedback.rating == 4
        assert feedback.is_visible is False

    def test_employer_rates_worker(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)

        feedback = feedback_service.add_feedback(db_session, employer.id, feedback_request(connection, rating=5)).value

        assert feedback.to_user_id == worker.id

    def test_feedback_on_cancelled_connection_is_allowed(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)
        connection.status = JobConnectionStatus.CANCELLED_BY_EMPLOYER
        db_session.commit()

        result = feedback_service.add_feedback(db_session, worker.id, feedback_request(connection))

        assert result.is_success

    def test_second_feedback_from_same_user(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)
        feedback_service.add_feedback(db_session, worker.id, feedback_request(connection))

        result = feedback_service.add_feedback(db_session, worker.id, feedback_request(connection, rating=1))

        assert result.error == FeedbackErrors.FEEDBACK_ALREADY_EXISTS
        assert db_session.query(Feedback).count() == 1

    def test_unique_constraint_catches_a_race(self, db_session, worker, employer, make_job, make_connection, monkeypatch):
        connection = make_connection(make_job(employer), worker)
        feedback_service.add_feedback(db_session, worker.id, feedback_request(connection))
        monkeypatch.setattr("hireme.crud.feedback.exists_from_user", lambda db, connection_id, user_id: False)

        result = feedback_service.add_feedback(db_session, worker.id, feedback_request(connection, rating=1))

        assert result.error == FeedbackErrors.FEEDBACK_ALREADY_EXISTS
        assert db_session.query(Feedback).count() == 1

    def test_after_interaction_end(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker, ends_in=timedelta(seconds=-1))

        result = feedback_service.add_feedback(db_session, worker.id, feedback_request(connection))

        assert result.error == FeedbackErrors.INTERACTION_PERIOD_ENDED

    def test_outsider(self, db_session, worker, other_worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)

        result = feedback_service.add_feedback(db_session, other_worker.id, feedback_request(connection))

        assert result.error == FeedbackErrors.NOT_PART_OF_CONNECTION

    def test_missing_connection(self, db_session, worker):
        result = feedback_service.add_feedback(
            db_session, worker.id, FeedbackCreateRequest(job_connection_id=404, rating=3)
        )
        assert result.error == FeedbackErrors.JOB_CONNECTION_NOT_FOUND

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError):
            FeedbackCreateRequest(job_connection_id=1, rating=rating)

    def test_message_too_long(self):
        with pytest.raises(ValidationError):
            FeedbackCreateRequest(job_connection_id=1, rating=3, message="x" * 501)


class TestVisibleFeedback:
    """Tests for reading revealed feedback"""

    def test_hidden_feedback_is_not_listed(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)
        feedback_service.add_feedback(db_session, worker.id, feedback_request(connection))

        result = feedback_service.list_visible_feedback(db_session, employer.id)

        assert result.value == []

    def test_visible_feedback_is_listed(self, db_session, worker, employer, make_job, make_connection):
        connection = make_connection(make_job(employer), worker)
        feedback = feedback_service.add_feedback(db_session, worker.id, feedback_request(connection)).value
        feedback.is_visible = True
        db_session.commit()

        result = feedback_service.list_visible_feedback(db_session, employer.id)

        assert [f.id for f in result.value] == [feedback.id]
        listed = result.value[0]
        assert isinstance(listed, FeedbackResponse)
        assert listed.from_user_id == worker.id
        assert listed.to_user_id == employer.id
        assert listed.rating == 4
        assert listed.is_visible
