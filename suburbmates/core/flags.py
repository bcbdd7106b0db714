"""Feature flag lookups.

A lookup is any callable taking a flag key and returning a bool. Search code
receives one as an argument, so tests and deployments pick the backend
without touching the scoring code.
"""

import logging
import os
from typing import Callable, Mapping, Optional

from suburbmates.core.config import Settings, get_settings
from suburbmates.vendors import upstash

logger = logging.getLogger(__name__)

FlagLookup = Callable[[str], bool]

_TRUTHY = {"1", "true", "yes", "on"}


def static_flags(flags: Mapping[str, bool]) -> FlagLookup:
    snapshot = dict(flags)

    def lookup(key: str) -> bool:
        return bool(snapshot.get(key, False))

    return lookup


def env_flags(prefix: str = "FLAG_") -> FlagLookup:
    """Read ``FLAG_SEARCH_RERANKER=1`` style variables at lookup time."""

    def lookup(key: str) -> bool:
        name = prefix + key.upper().replace("-", "_")
        return os.getenv(name, "").strip().lower() in _TRUTHY

    return lookup


def upstash_flags(settings: Settings) -> FlagLookup:
    """Flags stored in Upstash as ``flag:<key>``; only the value ``1`` means on."""

    def lookup(key: str) -> bool:
        value = upstash.get_value(
            f"flag:{key}",
            base_url=settings.upstash_redis_rest_url,
            token=settings.upstash_redis_rest_token,
            timeout=settings.flag_timeout_seconds,
        )
        return value is not None and str(value).strip() == "1"

    return lookup


def fail_open(lookup: FlagLookup) -> FlagLookup:
    """Wrap ``lookup`` so any failure reads as a disabled flag."""

    def guarded(key: str) -> bool:
        try:
            return bool(lookup(key))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Feature flag lookup failed for %s; treating as disabled: %s", key, exc)
            return False

    return guarded


def get_flag_lookup(settings: Optional[Settings] = None) -> FlagLookup:
    settings = settings or get_settings()
    if settings.flag_backend == "upstash":
        lookup = upstash_flags(settings)
    elif settings.flag_backend == "off":
        lookup = static_flags({})
    else:
        lookup = env_flags()
    return fail_open(lookup)
