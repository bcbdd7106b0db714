"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
FLAG_BACKENDS = {"env", "upstash", "off"}


@dataclass(frozen=True)
class Settings:
    flag_backend: str = "env"
    upstash_redis_rest_url: str = ""
    upstash_redis_rest_token: str = ""
    flag_timeout_seconds: float = 2.0
    moderation_rules_path: Optional[str] = None
    client_rerank_enabled: bool = False
    worker_port: int = 8080


def env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    flag_backend = os.getenv("FLAG_BACKEND", "env").strip().lower() or "env"
    if flag_backend not in FLAG_BACKENDS:
        logger.warning("Unknown FLAG_BACKEND=%s; falling back to 'env'.", flag_backend)
        flag_backend = "env"

    upstash_url = os.getenv("UPSTASH_REDIS_REST_URL", "").rstrip("/")
    upstash_token = os.getenv("UPSTASH_REDIS_REST_TOKEN", "")
    flag_timeout_seconds = float(os.getenv("FLAG_TIMEOUT_SECONDS", "2.0"))
    moderation_rules_path = os.getenv("MODERATION_RULES_PATH") or None
    client_rerank_enabled = env_bool("SEARCH_CLIENT_RERANK")
    worker_port = int(os.getenv("WORKER_PORT", "8080"))

    if flag_backend == "upstash":
        if not upstash_url:
            logger.warning("UPSTASH_REDIS_REST_URL is not set; feature flags will read as disabled.")
        if not upstash_token:
            logger.warning("UPSTASH_REDIS_REST_TOKEN is not configured; feature flag lookups will fail.")

    return Settings(
        flag_backend=flag_backend,
        upstash_redis_rest_url=upstash_url,
        upstash_redis_rest_token=upstash_token,
        flag_timeout_seconds=flag_timeout_seconds,
        moderation_rules_path=moderation_rules_path,
        client_rerank_enabled=client_rerank_enabled,
        worker_port=worker_port,
    )
