"""Client utilities for the Upstash Redis REST API."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


class UpstashError(RuntimeError):
    """Raised when Upstash is not configured or returns an error payload."""


def get_value(key: str, base_url: str, token: str, timeout: float = 2.0) -> Optional[Any]:
    """Return the stored value for ``key`` or ``None`` when it is unset."""
    if not base_url or not token:
        raise UpstashError("Upstash REST URL and token are required")

    url = f"{base_url.rstrip('/')}/GET/{quote(key, safe='')}"
    response = _SESSION.get(url, headers={"Authorization": f"Bearer {token}"}, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    if "error" in payload:
        logger.error("GET %s failed: error=%s", key, payload.get("error"))
        raise UpstashError(payload.get("error") or "unknown Upstash error")
    return payload.get("result")
