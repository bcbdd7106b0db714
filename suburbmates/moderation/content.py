"""Heuristic moderation for business profiles and customer inquiries.

Every check is a deterministic rule over the submitted text; the combined
flags map onto an action:

    profanity or spam                          -> block
    disposable email, many links, low quality  -> flag
    anything else                              -> allow
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from suburbmates.moderation.rules import ModerationRules, get_rules

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"(https?://[^\s]+)", re.IGNORECASE)
ALL_CAPS_PATTERN = re.compile(r"\b[A-Z]{4,}\b")
EXCLAMATION_PATTERN = re.compile(r"!{3,}")
PHONE_PATTERN = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PUNCTUATION_PATTERN = re.compile(r"[!?.,;:]")
SENTENCE_SPLIT = re.compile(r"[.!?]+")
WHITESPACE_SPLIT = re.compile(r"\s+")

BUSINESS_SPAM_THRESHOLD = 0.6
INQUIRY_SPAM_THRESHOLD = 0.8
LOW_QUALITY_THRESHOLD = 0.4
BUSINESS_MAX_LINKS = 3
INQUIRY_MAX_LINKS = 1
MIN_INQUIRY_LENGTH = 5
SHORT_INQUIRY_LENGTH = 10


class ModerationAction(str, Enum):
    ALLOW = "allow"
    FLAG = "flag"
    BLOCK = "block"


@dataclass
class ModerationFlags:
    has_profanity: bool = False
    is_spam: bool = False
    has_excessive_links: bool = False
    is_low_quality: bool = False
    has_disposable_email: bool = False


@dataclass
class ModerationResult:
    is_allowed: bool
    confidence: float
    reasons: List[str] = field(default_factory=list)
    flags: ModerationFlags = field(default_factory=ModerationFlags)
    suggested_action: ModerationAction = ModerationAction.ALLOW

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["suggested_action"] = self.suggested_action.value
        return out


@dataclass
class SpamAnalysis:
    score: float
    indicators: List[str]
    link_count: int


@lru_cache(maxsize=8)
def _phrase_pattern(phrases: Tuple[str, ...]) -> Optional[re.Pattern]:
    if not phrases:
        return None
    alternatives = "|".join(re.escape(p) for p in phrases)
    return re.compile(rf"\b({alternatives})\b", re.IGNORECASE)


def _spam_patterns(rules: ModerationRules) -> List[Tuple[str, Optional[re.Pattern]]]:
    return [
        ("spam phrase", _phrase_pattern(rules.spam_phrases)),
        ("excessive capitalization", ALL_CAPS_PATTERN),
        ("repeated exclamation marks", EXCLAMATION_PATTERN),
        ("phone number", PHONE_PATTERN),
        ("email address", EMAIL_PATTERN),
    ]


def find_profanity(text: str, rules: Optional[ModerationRules] = None) -> List[str]:
    """Listed words found anywhere in ``text``, inflections included."""
    rules = rules or get_rules()
    lowered = text.lower()
    return [word for word in sorted(rules.profanity_words) if word in lowered]


def is_disposable_email(email: Optional[str], rules: Optional[ModerationRules] = None) -> bool:
    if not email or "@" not in email:
        return False
    rules = rules or get_rules()
    domain = email.lower().rsplit("@", 1)[1].strip()
    return domain in rules.disposable_email_domains


def analyze_spam(text: str, rules: Optional[ModerationRules] = None) -> SpamAnalysis:
    rules = rules or get_rules()
    score = 0.0
    indicators: List[str] = []

    link_count = len(URL_PATTERN.findall(text))
    if link_count > 2:
        score += 0.4
        indicators.append(f"Too many links ({link_count})")

    for name, pattern in _spam_patterns(rules):
        if pattern is None:
            continue
        matches = len(pattern.findall(text))
        if matches:
            score += 0.2 * matches
            indicators.append(f"Spam pattern: {name}")

    words = WHITESPACE_SPLIT.split(text)
    unique_ratio = len(set(WHITESPACE_SPLIT.split(text.lower()))) / len(words)
    if unique_ratio < 0.3 and len(words) > 20:
        score += 0.3
        indicators.append("Low word uniqueness (possible spam)")

    sentences = SENTENCE_SPLIT.split(text)
    if len(sentences) > 3 and len(sentences) - len(set(sentences)) > 1:
        score += 0.2
        indicators.append("Duplicate sentences detected")

    return SpamAnalysis(score=min(score, 1.0), indicators=indicators, link_count=link_count)


def assess_quality(text: str) -> Tuple[float, List[str]]:
    score = 1.0
    issues: List[str] = []

    if len(text) < 10:
        score -= 0.3
        issues.append("Content too short")
    elif len(text) > 5000:
        score -= 0.2
        issues.append("Content too long")

    if not re.match(r"[A-Z]", text.strip()):
        score -= 0.1
        issues.append("Missing proper capitalization")

    if text and len(PUNCTUATION_PATTERN.findall(text)) / len(text) > 0.1:
        score -= 0.2
        issues.append("Excessive punctuation")

    sentences = [s for s in SENTENCE_SPLIT.split(text) if s.strip()]
    word_count = len(WHITESPACE_SPLIT.split(text))
    avg_words = word_count / len(sentences) if sentences else float("inf")
    if avg_words < 3:
        score -= 0.2
        issues.append("Very short sentences (possible low quality)")
    elif avg_words > 50:
        score -= 0.1
        issues.append("Very long sentences (possible low quality)")

    return max(score, 0.0), issues


def _unique(reasons: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(reasons))


def moderate_business_content(
    name: Optional[str] = None,
    description: Optional[str] = None,
    email: Optional[str] = None,
    services: Optional[Sequence[str]] = None,
    rules: Optional[ModerationRules] = None,
) -> ModerationResult:
    """Moderate a business profile submission."""
    rules = rules or get_rules()
    text = " ".join([name or "", description or "", *(services or [])])
    reasons: List[str] = []
    confidence = 0.8

    profanity = find_profanity(text, rules)
    has_profanity = bool(profanity)
    if has_profanity:
        reasons.append(f"Profanity detected: {', '.join(profanity)}")
        confidence = max(confidence, 0.9)

    has_disposable_email = is_disposable_email(email, rules)
    if has_disposable_email:
        reasons.append("Disposable email domain detected")
        confidence = max(confidence, 0.7)

    spam = analyze_spam(text, rules)
    is_spam = spam.score > BUSINESS_SPAM_THRESHOLD
    if is_spam:
        reasons.extend(spam.indicators)
        confidence = max(confidence, 0.8)

    quality_score, quality_issues = assess_quality(text)
    is_low_quality = quality_score < LOW_QUALITY_THRESHOLD
    if is_low_quality:
        reasons.extend(quality_issues)
        confidence = max(confidence, 0.6)

    has_excessive_links = spam.link_count > BUSINESS_MAX_LINKS
    if has_excessive_links:
        reasons.append(f"Too many external links ({spam.link_count})")
        confidence = max(confidence, 0.7)

    if has_profanity or is_spam:
        action = ModerationAction.BLOCK
    elif has_disposable_email or has_excessive_links or is_low_quality:
        action = ModerationAction.FLAG
    else:
        action = ModerationAction.ALLOW

    if action is not ModerationAction.ALLOW:
        logger.info("Business content %s: %s", action.value, "; ".join(reasons))

    return ModerationResult(
        is_allowed=action is not ModerationAction.BLOCK,
        confidence=confidence,
        reasons=_unique(reasons),
        flags=ModerationFlags(
            has_profanity=has_profanity,
            is_spam=is_spam,
            has_excessive_links=has_excessive_links,
            is_low_quality=is_low_quality,
            has_disposable_email=has_disposable_email,
        ),
        suggested_action=action,
    )


def moderate_inquiry_content(
    name: str,
    message: str,
    email: Optional[str] = None,
    rules: Optional[ModerationRules] = None,
) -> ModerationResult:
    """Moderate a customer inquiry. Spam thresholds are looser than for profiles."""
    rules = rules or get_rules()
    name = name or ""
    message = message or ""
    text = f"{name} {message}"
    reasons: List[str] = []
    confidence = 0.8

    has_profanity = bool(find_profanity(text, rules))
    if has_profanity:
        reasons.append("Inappropriate language detected")
        confidence = max(confidence, 0.9)

    has_disposable_email = is_disposable_email(email, rules)
    if has_disposable_email:
        reasons.append("Suspicious email domain")
        confidence = max(confidence, 0.6)

    spam = analyze_spam(text, rules)
    is_spam = spam.score > INQUIRY_SPAM_THRESHOLD
    if is_spam:
        reasons.append("Possible spam content")
        confidence = max(confidence, 0.8)

    too_short = len(message) < MIN_INQUIRY_LENGTH
    if too_short:
        reasons.append("Message too short")
        confidence = max(confidence, 0.5)

    if has_profanity or is_spam:
        action = ModerationAction.BLOCK
    elif has_disposable_email or too_short:
        action = ModerationAction.FLAG
    else:
        action = ModerationAction.ALLOW

    if action is not ModerationAction.ALLOW:
        logger.info("Inquiry content %s: %s", action.value, "; ".join(reasons))

    return ModerationResult(
        is_allowed=action is not ModerationAction.BLOCK,
        confidence=confidence,
        reasons=_unique(reasons),
        flags=ModerationFlags(
            has_profanity=has_profanity,
            is_spam=is_spam,
            has_excessive_links=spam.link_count > INQUIRY_MAX_LINKS,
            is_low_quality=len(message) < SHORT_INQUIRY_LENGTH,
            has_disposable_email=has_disposable_email,
        ),
        suggested_action=action,
    )
