"""
CRUD operations for the marketplace models.

Functions here add, query and bulk-update rows but never commit: the
service layer owns transaction boundaries so that multi-row operations
such as accepting an application land atomically.
"""

from hireme.crud import application, feedback, job, job_connection, question, user

__all__ = ["application", "feedback", "job", "job_connection", "question", "user"]
