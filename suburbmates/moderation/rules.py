"""Keyword and domain lists used by the moderation checks.

The defaults cover the common cases; deployments can point
``MODERATION_RULES_PATH`` at a JSON file to extend or replace them without
shipping new code. Keys missing from the file keep their defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

from suburbmates.core.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_PROFANITY_WORDS = frozenset({"damn", "hell", "crap", "shit", "fuck", "bitch", "asshole"})

DEFAULT_DISPOSABLE_EMAIL_DOMAINS = frozenset(
    {
        "10minutemail.com",
        "guerrillamail.com",
        "mailinator.com",
        "tempmail.org",
        "throwaway.email",
        "temp-mail.org",
        "getnada.com",
        "maildrop.cc",
        "sharklasers.com",
    }
)

DEFAULT_SPAM_PHRASES = (
    "click here",
    "act now",
    "limited time",
    "free money",
    "make money",
    "work from home",
)


class RulesError(RuntimeError):
    """Raised when a moderation rules file cannot be used."""


@dataclass(frozen=True)
class ModerationRules:
    profanity_words: FrozenSet[str] = DEFAULT_PROFANITY_WORDS
    disposable_email_domains: FrozenSet[str] = DEFAULT_DISPOSABLE_EMAIL_DOMAINS
    spam_phrases: Tuple[str, ...] = DEFAULT_SPAM_PHRASES


def _string_list(payload: Dict[str, Any], key: str) -> Optional[list]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise RulesError(f"{key} must be a list of strings")
    return [v.strip().lower() for v in value if v.strip()]


def load_rules(path: Optional[Union[str, Path]] = None) -> ModerationRules:
    """Build rules from ``path``, or return the defaults when no path is given."""
    if not path:
        return ModerationRules()

    try:
        with Path(path).open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, ValueError) as exc:
        raise RulesError(f"Unable to read moderation rules from {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RulesError(f"Moderation rules in {path} must be a JSON object")

    defaults = ModerationRules()
    profanity = _string_list(payload, "profanity_words")
    domains = _string_list(payload, "disposable_email_domains")
    phrases = _string_list(payload, "spam_phrases")

    rules = ModerationRules(
        profanity_words=frozenset(profanity) if profanity is not None else defaults.profanity_words,
        disposable_email_domains=frozenset(domains) if domains is not None else defaults.disposable_email_domains,
        spam_phrases=tuple(phrases) if phrases is not None else defaults.spam_phrases,
    )
    logger.info(
        "Loaded moderation rules from %s: %d profanity words, %d disposable domains, %d spam phrases",
        path,
        len(rules.profanity_words),
        len(rules.disposable_email_domains),
        len(rules.spam_phrases),
    )
    return rules


@lru_cache(maxsize=1)
def get_rules() -> ModerationRules:
    return load_rules(get_settings().moderation_rules_path)
