from __future__ import annotations

from opskit.domain.constants import APP_VERSION

USER_AGENT = f"opskit-Client/{APP_VERSION}"
DEFAULT_TIMEOUT = 10


def default_headers() -> dict:
    """Headers sent with every request."""
    return {"User-Agent": USER_AGENT, "Accept": "application/json"}
