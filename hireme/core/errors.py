"""
Error catalogue for every business rule the services enforce.

Codes are stable identifiers clients can match on; descriptions are for
humans.
"""

from hireme.core.result import Error, ErrorKind


class CommonErrors:
    INTERNAL_ERROR = Error("InternalError", "An unexpected error occurred. Please try again later.", ErrorKind.INTERNAL)


class JobErrors:
    JOB_NOT_FOUND = Error("JobNotFound", "The specified job does not exist.", ErrorKind.NOT_FOUND)
    JOB_ALREADY_CLOSED = Error("JobAlreadyClosed", "The job is already closed.", ErrorKind.CONFLICT)
    JOB_NOT_ACCEPTING_QUESTIONS = Error("JobNotAcceptingQuestions", "It may be closed or completed.", ErrorKind.CONFLICT)
    NO_JOBS_FOR_EMPLOYER = Error("NoJobsForEmployer", "This employer has not posted any jobs yet.", ErrorKind.NOT_FOUND)


class ApplicationErrors:
    JOB_NOT_FOUND = Error("JobNotFound", "The specified job does not exist.", ErrorKind.NOT_FOUND)
    JOB_NOT_ACCEPTING_APPLICATIONS = Error(
        "JobNotAcceptingApplications",
        "Cannot apply to a job that may be closed or completed.",
        ErrorKind.CONFLICT,
    )
    ALREADY_APPLIED = Error("AlreadyApplied", "You have already applied to this job.", ErrorKind.CONFLICT)
    APPLICATION_NOT_FOUND = Error("ApplicationNotFound", "The specified application does not exist.", ErrorKind.NOT_FOUND)
    CANNOT_UPDATE_APPLICATION = Error(
        "CannotUpdateApplication",
        "You cannot update this application because it has already been processed by the employer.",
        ErrorKind.CONFLICT,
    )
    UNAUTHORIZED_APPLICATION_UPDATE = Error(
        "UnauthorizedApplicationUpdate",
        "You are not authorized to update this application.",
        ErrorKind.FORBIDDEN,
    )
    INVALID_APPLICATION_STATUS = Error(
        "InvalidApplicationStatus",
        "The application status has already been changed.",
        ErrorKind.CONFLICT,
    )
    JOB_NOT_OWNED_BY_EMPLOYER = Error(
        "JobNotOwnedByEmployer",
        "You do not have permission to manage applications for this job.",
        ErrorKind.FORBIDDEN,
    )
    WORKER_HAS_ACTIVE_CONNECTION = Error(
        "WorkerHasActiveConnection",
        "This worker already has an active job connection and cannot be accepted for another job.",
        ErrorKind.CONFLICT,
    )


class JobConnectionErrors:
    JOB_CONNECTION_NOT_FOUND = Error(
        "JobConnectionNotFound", "The specified job connection does not exist.", ErrorKind.NOT_FOUND
    )
    JOB_CONNECTION_NOT_ACTIVE = Error(
        "JobConnectionNotActive",
        "The job connection is not active and cannot be cancelled.",
        ErrorKind.CONFLICT,
    )
    UNAUTHORIZED_CANCELLATION = Error(
        "UnauthorizedCancellation",
        "You are not authorized to cancel this job connection.",
        ErrorKind.FORBIDDEN,
    )


class FeedbackErrors:
    JOB_CONNECTION_NOT_FOUND = Error("Feedback.JobConnectionNotFound", "Job connection not found.", ErrorKind.NOT_FOUND)
    INTERACTION_PERIOD_ENDED = Error(
        "Feedback.InteractionPeriodEnded",
        "Cannot submit feedback after the interaction end date.",
        ErrorKind.WINDOW_CLOSED,
    )
    NOT_PART_OF_CONNECTION = Error(
        "Feedback.NotPartOfConnection", "You are not part of this job connection.", ErrorKind.FORBIDDEN
    )
    FEEDBACK_ALREADY_EXISTS = Error(
        "Feedback.AlreadyExists",
        "You have already submitted feedback for this job connection.",
        ErrorKind.CONFLICT,
    )


class QuestionErrors:
    QUESTION_NOT_FOUND = Error("QuestionNotFound", "The specified question does not exist.", ErrorKind.NOT_FOUND)
    QUESTION_ALREADY_ANSWERED = Error(
        "QuestionAlreadyAnswered",
        "Cannot update or delete a question that has already been answered.",
        ErrorKind.CONFLICT,
    )
    UNAUTHORIZED_QUESTION_UPDATE = Error(
        "UnauthorizedQuestionUpdate", "You are not authorized to update this question.", ErrorKind.FORBIDDEN
    )


class AnswerErrors:
    QUESTION_NOT_FOUND = Error("QuestionNotFound", "The specified question does not exist.", ErrorKind.NOT_FOUND)
    QUESTION_ALREADY_ANSWERED = Error(
        "QuestionAlreadyAnswered", "This question has already been answered.", ErrorKind.CONFLICT
    )
    UNAUTHORIZED_ANSWER_CREATION = Error(
        "UnauthorizedAnswerCreation", "You are not authorized to answer this question.", ErrorKind.FORBIDDEN
    )
    UNAUTHORIZED_ANSWER_UPDATE = Error(
        "UnauthorizedAnswerUpdate", "You are not authorized to update this answer.", ErrorKind.FORBIDDEN
    )
    UNAUTHORIZED_ANSWER_DELETE = Error(
        "UnauthorizedAnswerDelete", "You are not authorized to delete this answer.", ErrorKind.FORBIDDEN
    )
    ANSWER_NOT_FOUND = Error("AnswerNotFound", "The specified answer does not exist.", ErrorKind.NOT_FOUND)
