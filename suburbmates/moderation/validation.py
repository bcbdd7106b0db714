"""Input cleanup and Australian business detail checks."""

import re
from typing import List, Optional, Tuple

MAX_TEXT_LENGTH = 10000

_TAG_REGEX = re.compile(r"<[^>]*>")
_WHITESPACE_REGEX = re.compile(r"\s+")
_AU_PHONE_REGEX = re.compile(r"^(\+61|0)[2-9]\d{8}$")
_PHONE_NOISE_REGEX = re.compile(r"[\s\-()]")
_ABN_REGEX = re.compile(r"^\d{11}$")


def clean_text(text: Optional[str]) -> str:
    """Strip markup, collapse whitespace and cap the length."""
    if not text:
        return ""
    text = _TAG_REGEX.sub("", text)
    text = _WHITESPACE_REGEX.sub(" ", text).strip()
    return text[:MAX_TEXT_LENGTH]


def validate_australian_business(
    name: Optional[str],
    suburb: Optional[str],
    phone: Optional[str] = None,
    abn: Optional[str] = None,
) -> Tuple[bool, List[str]]:
    issues: List[str] = []

    if not name or len(name) < 2:
        issues.append("Business name too short")
    elif len(name) > 100:
        issues.append("Business name too long")

    if not suburb or len(suburb) < 2:
        issues.append("Invalid suburb")

    if phone and not _AU_PHONE_REGEX.match(_PHONE_NOISE_REGEX.sub("", phone)):
        issues.append("Invalid Australian phone number format")

    if abn and not _ABN_REGEX.match(re.sub(r"\s", "", abn)):
        issues.append("Invalid ABN format (should be 11 digits)")

    return not issues, issues
