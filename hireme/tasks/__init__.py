"""
Celery tasks package.

Tasks are organized by domain:
- application_tasks: application cascades after acceptance and job closure
- job_connection_tasks: connection completion and the periodic completion sweep
"""

from hireme.tasks import application_tasks, job_connection_tasks

__all__ = ["application_tasks", "job_connection_tasks"]
