from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the orchestration job status client.
"""

from opskit.infra.network.jobs_client import (
    API_ODATA,
    API_REST,
    TERMINAL_STATUSES,
    JobPollError,
    JobTimeoutError,
    build_job_url,
    get_job_status,
    wait_for_job,
)

__all__ = [
    "API_ODATA",
    "API_REST",
    "TERMINAL_STATUSES",
    "JobPollError",
    "JobTimeoutError",
    "build_job_url",
    "get_job_status",
    "wait_for_job",
]
