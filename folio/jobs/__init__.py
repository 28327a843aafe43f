"""Scheduled jobs.

Importing this package registers the built-in job definitions.
"""

from . import definitions  # noqa: F401
from .registry import get_all_jobs, get_job, list_job_names, register_job
from .scheduler import JobScheduler, get_scheduler, start_scheduler, stop_scheduler


__all__ = [
    "JobScheduler",
    "get_all_jobs",
    "get_job",
    "get_scheduler",
    "list_job_names",
    "register_job",
    "start_scheduler",
    "stop_scheduler",
]
