from __future__ import annotations

"""
Orchestration Job Status Client.

Polls an orchestration server until a job reaches a terminal status. Two API
generations are supported: the legacy OData web service and the newer REST
web API, which differ in URL layout and response envelope.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from opskit.infra.network.common import DEFAULT_TIMEOUT, default_headers

logger = logging.getLogger(__name__)

API_ODATA = "odata"
API_REST = "rest"

_JOB_PATHS: Dict[str, str] = {
    API_ODATA: "Orchestrator2012/Orchestrator.svc/Jobs(guid'{job_id}')",
    API_REST: "api/Jobs({job_id})",
}

TERMINAL_STATUSES = frozenset({"Completed", "Failed", "Canceled"})
DEFAULT_POLL_INTERVAL = 5.0


class JobPollError(Exception):
    """The job status could not be retrieved or understood."""


class JobTimeoutError(JobPollError):
    """The job did not reach a terminal status in time."""


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_job_url(base_url: str, job_id: str, api: str = API_REST) -> str:
    """
    Compose the job resource URL for an API generation.

    Raises:
        ValueError: On an unknown API generation.
    """
    try:
        template = _JOB_PATHS[api]
    except KeyError:
        raise ValueError(f"Unknown API generation: {api!r}") from None
    return f"{base_url.rstrip('/')}/{template.format(job_id=job_id)}"


def get_job_status(
        base_url: str,
        job_id: str,
        api: str = API_REST,
        session: Optional[requests.Session] = None,
        auth: Optional[Tuple[str, str]] = None,
) -> str:
    """
    Fetch the current status of a job.

    Args:
        base_url: Server root, e.g. 'http://orchestrator:81'.
        job_id: Job identifier (GUID).
        api: 'odata' or 'rest'.
        session: Optional session to reuse connections and credentials.
        auth: Optional (user, password) for basic authentication.

    Returns:
        str: The job status reported by the server.

    Raises:
        JobPollError: On transport, HTTP or payload failures.
    """
    url = build_job_url(base_url, job_id, api)
    http = session or requests
    try:
        response = http.get(url, headers=default_headers(), auth=auth, timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        msg = f"Job status request failed for {job_id}: {e}"
        logger.error(msg)
        raise JobPollError(msg) from e
    except ValueError as e:
        msg = f"Job status response for {job_id} is not valid JSON."
        logger.error(msg)
        raise JobPollError(msg) from e

    return _extract_status(data, api, job_id)


def wait_for_job(
        base_url: str,
        job_id: str,
        api: str = API_REST,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        auth: Optional[Tuple[str, str]] = None,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
) -> str:
    """
    Poll a job until it reaches a terminal status.

    Args:
        interval: Seconds between polls.
        timeout: Maximum seconds to wait (None waits indefinitely).
        sleep: Injectable sleep function.
        monotonic: Injectable clock.

    Returns:
        str: The terminal status ('Completed', 'Failed' or 'Canceled').

    Raises:
        JobTimeoutError: If the timeout elapses first.
        JobPollError: If a poll fails.
    """
    deadline = None if timeout is None else monotonic() + timeout
    logger.info(f"Waiting for job {job_id} ({api} API)")

    while True:
        status = get_job_status(base_url, job_id, api, session=session, auth=auth)
        if status in TERMINAL_STATUSES:
            logger.info(f"Job {job_id} finished with status {status}")
            return status

        logger.debug(f"Job {job_id} status: {status}")
        if deadline is not None and monotonic() + interval > deadline:
            msg = f"Job {job_id} still '{status}' after {timeout} seconds."
            logger.error(msg)
            raise JobTimeoutError(msg)
        sleep(interval)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _extract_status(data: Any, api: str, job_id: str) -> str:
    """Read the status field from the response envelope of an API generation."""
    body = data
    if api == API_ODATA and isinstance(data, dict):
        body = data.get("d", {})
    status = body.get("Status") if isinstance(body, dict) else None
    if not isinstance(status, str) or not status:
        msg = f"Job status missing from response for {job_id}."
        logger.error(msg)
        raise JobPollError(msg)
    return status
