"""
Lifecycle rules for jobs, applications, job connections and feedback.

Every check here is pure: it looks at entity state that the caller has
already loaded and returns None when the action is allowed or the Error
explaining why it is not. Callers apply the state change themselves.

Checks run in a fixed order so that the same situation always produces the
same error: existence first, then the rule the request violates
most directly.
"""

from datetime import datetime
from typing import Dict, FrozenSet, Optional

from hireme.core.clock import as_utc
from hireme.core.errors import (
    ApplicationErrors,
    FeedbackErrors,
    JobConnectionErrors,
    JobErrors,
)
from hireme.core.identity import Role
from hireme.core.result import Error
from hireme.models.application import Application, ApplicationStatus
from hireme.models.job import Job, JobStatus
from hireme.models.job_connection import JobConnection, JobConnectionStatus


APPLICATION_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.APPLIED: frozenset({
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
        ApplicationStatus.EMPLOYER_CHOOSE_ANOTHER_WORKER,
        ApplicationStatus.WORKER_ACCEPTED_AT_ANOTHER_JOB,
        ApplicationStatus.JOB_CLOSED,
    }),
}

JOB_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.PUBLISHED: frozenset({JobStatus.IN_PROGRESS, JobStatus.CLOSED}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED}),
}

JOB_CONNECTION_TRANSITIONS: Dict[JobConnectionStatus, FrozenSet[JobConnectionStatus]] = {
    JobConnectionStatus.ACTIVE: frozenset({
        JobConnectionStatus.COMPLETED,
        JobConnectionStatus.CANCELLED_BY_WORKER,
        JobConnectionStatus.CANCELLED_BY_EMPLOYER,
    }),
}


def can_transition_application(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return target in APPLICATION_TRANSITIONS.get(current, frozenset())


def can_transition_job(current: JobStatus, target: JobStatus) -> bool:
    return target in JOB_TRANSITIONS.get(current, frozenset())


def can_transition_job_connection(current: JobConnectionStatus, target: JobConnectionStatus) -> bool:
    return target in JOB_CONNECTION_TRANSITIONS.get(current, frozenset())


def is_terminal_application_status(status: ApplicationStatus) -> bool:
    return status not in APPLICATION_TRANSITIONS


# Applications

def check_apply(job: Optional[Job], already_applied: bool) -> Optional[Error]:
    if job is None:
        return ApplicationErrors.JOB_NOT_FOUND
    if job.status != JobStatus.PUBLISHED:
        return ApplicationErrors.JOB_NOT_ACCEPTING_APPLICATIONS
    if already_applied:
        return ApplicationErrors.ALREADY_APPLIED
    return None


def check_worker_update(application: Optional[Application], worker_id: str) -> Optional[Error]:
    """Editing the message and withdrawing share the same preconditions."""
    if application is None:
        return ApplicationErrors.APPLICATION_NOT_FOUND
    if application.worker_id != worker_id:
        return ApplicationErrors.UNAUTHORIZED_APPLICATION_UPDATE
    if is_terminal_application_status(application.status):
        return ApplicationErrors.CANNOT_UPDATE_APPLICATION
    return None


def check_accept(
    application: Optional[Application],
    job: Optional[Job],
    employer_id: str,
    worker_has_active_connection: bool,
) -> Optional[Error]:
    if application is None:
        return ApplicationErrors.APPLICATION_NOT_FOUND
    if job is None or job.employer_id != employer_id:
        return ApplicationErrors.JOB_NOT_OWNED_BY_EMPLOYER
    if job.status != JobStatus.PUBLISHED:
        return ApplicationErrors.JOB_NOT_ACCEPTING_APPLICATIONS
    if not can_transition_application(application.status, ApplicationStatus.ACCEPTED):
        return ApplicationErrors.INVALID_APPLICATION_STATUS
    if worker_has_active_connection:
        return ApplicationErrors.WORKER_HAS_ACTIVE_CONNECTION
    return None


def check_reject(application: Optional[Application], job: Optional[Job], employer_id: str) -> Optional[Error]:
    if application is None:
        return ApplicationErrors.APPLICATION_NOT_FOUND
    if not can_transition_application(application.status, ApplicationStatus.REJECTED):
        return ApplicationErrors.INVALID_APPLICATION_STATUS
    if job is None or job.employer_id != employer_id:
        return ApplicationErrors.JOB_NOT_OWNED_BY_EMPLOYER
    return None


# Jobs

def check_close_job(job: Optional[Job]) -> Optional[Error]:
    if job is None:
        return JobErrors.JOB_NOT_FOUND
    if job.status == JobStatus.CLOSED:
        return JobErrors.JOB_ALREADY_CLOSED
    return None


def check_view_job_analytics(job: Optional[Job], employer_id: str) -> Optional[Error]:
    if job is None:
        return JobErrors.JOB_NOT_FOUND
    if job.employer_id != employer_id:
        return ApplicationErrors.JOB_NOT_OWNED_BY_EMPLOYER
    return None


def check_ask_question(job: Optional[Job]) -> Optional[Error]:
    if job is None:
        return JobErrors.JOB_NOT_FOUND
    if job.status != JobStatus.PUBLISHED:
        return JobErrors.JOB_NOT_ACCEPTING_QUESTIONS
    return None


# Job connections

def cancellation_status_for(role: Role) -> JobConnectionStatus:
    if role == Role.WORKER:
        return JobConnectionStatus.CANCELLED_BY_WORKER
    return JobConnectionStatus.CANCELLED_BY_EMPLOYER


def check_cancel_connection(
    connection: Optional[JobConnection],
    user_id: str,
    role: Optional[Role],
    now: datetime,
) -> Optional[Error]:
    """A connection whose interaction window has passed is no longer active,
    even before the completion sweep has marked it completed."""
    if role is None:
        return JobConnectionErrors.UNAUTHORIZED_CANCELLATION
    if connection is None:
        return JobConnectionErrors.JOB_CONNECTION_NOT_FOUND
    if not can_transition_job_connection(connection.status, cancellation_status_for(role)):
        return JobConnectionErrors.JOB_CONNECTION_NOT_ACTIVE
    if as_utc(now) >= as_utc(connection.interaction_end_at):
        return JobConnectionErrors.JOB_CONNECTION_NOT_ACTIVE

    party_id = connection.worker_id if role == Role.WORKER else connection.employer_id
    if party_id != user_id:
        return JobConnectionErrors.UNAUTHORIZED_CANCELLATION
    return None


# Feedback

def check_submit_feedback(
    connection: Optional[JobConnection],
    from_user_id: str,
    now: datetime,
    already_submitted: bool,
) -> Optional[Error]:
    if connection is None:
        return FeedbackErrors.JOB_CONNECTION_NOT_FOUND
    if as_utc(now) >= as_utc(connection.interaction_end_at):
        return FeedbackErrors.INTERACTION_PERIOD_ENDED
    if not connection.is_party(from_user_id):
        return FeedbackErrors.NOT_PART_OF_CONNECTION
    if already_submitted:
        return FeedbackErrors.FEEDBACK_ALREADY_EXISTS
    return None
