"""Utilities for transforming raw listing rows into reranker records."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from suburbmates.models import BusinessRecord, SearchContext

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# canonical field -> accepted keys in the incoming row
_FIELD_KEYS = {
    "id": ("id",),
    "name": ("name",),
    "suburb": ("suburb",),
    "category": ("category",),
    "bio": ("bio",),
    "logo": ("logo",),
    "website": ("website",),
    "phone": ("phone",),
    "email": ("email",),
    "status": ("status",),
    "rating": ("rating",),
    "review_count": ("review_count", "reviewCount"),
    "completion_score": ("completion_score", "completionScore"),
    "created_at": ("created_at", "createdAt"),
    "updated_at": ("updated_at", "updatedAt"),
}
_KNOWN_KEYS = {key for keys in _FIELD_KEYS.values() for key in keys}


def _pick(row: Dict[str, Any], field_name: str) -> Any:
    for key in _FIELD_KEYS[field_name]:
        if row.get(key) is not None:
            return row[key]
    return None


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None or value == "":
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        pass
    # free text such as "1,234 reviews"
    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept datetimes, ISO-8601 strings (``Z`` suffix included) or epoch seconds."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug("Epoch timestamp out of range: %s", value)
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp: %s", value)
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_business_record(row: Dict[str, Any]) -> BusinessRecord:
    record_id = _strip_or_none(_pick(row, "id"))
    name = _strip_or_none(_pick(row, "name"))
    if not record_id or not name:
        raise ValueError("id and name are required for every business")

    rating = _safe_float(_pick(row, "rating"))
    if rating is not None and not 0 <= rating <= 5:
        logger.warning("Rating %s for %s outside 0-5; clamping", rating, record_id)
        rating = min(max(rating, 0.0), 5.0)

    review_count = _safe_int(_pick(row, "review_count"))
    if review_count is not None and review_count < 0:
        logger.warning("Negative review count for %s; treating as 0", record_id)
        review_count = 0

    completion = _safe_float(_pick(row, "completion_score"))
    if completion is not None:
        completion = min(max(completion, 0.0), 1.0)

    created_at = parse_timestamp(_pick(row, "created_at")) or _EPOCH
    updated_at = parse_timestamp(_pick(row, "updated_at")) or created_at

    return BusinessRecord(
        id=record_id,
        name=name,
        suburb=str(_pick(row, "suburb") or ""),
        created_at=created_at,
        updated_at=updated_at,
        category=_strip_or_none(_pick(row, "category")),
        bio=_strip_or_none(_pick(row, "bio")),
        logo=_strip_or_none(_pick(row, "logo")),
        website=_strip_or_none(_pick(row, "website")),
        phone=_strip_or_none(_pick(row, "phone")),
        email=_strip_or_none(_pick(row, "email")),
        status=_strip_or_none(_pick(row, "status")),
        rating=rating,
        review_count=review_count,
        completion_score=completion,
        extra={k: v for k, v in row.items() if k not in _KNOWN_KEYS},
    )


def to_business_records(rows: Iterable[Dict[str, Any]]) -> List[BusinessRecord]:
    records = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"business #{index} must be an object")
        records.append(to_business_record(row))
    return records


def to_search_context(payload: Optional[Dict[str, Any]]) -> SearchContext:
    payload = payload or {}
    location = payload.get("location")
    location_suburb = location.get("suburb") if isinstance(location, dict) else None
    return SearchContext(
        query=_strip_or_none(payload.get("query")),
        suburb=_strip_or_none(payload.get("suburb")),
        category=_strip_or_none(payload.get("category")),
        location_suburb=_strip_or_none(location_suburb),
    )
