"""Rules-based relevance signals for directory search results.

Each helper is a pure function of a single record (plus the search context
where it matters) and returns points on a fixed scale:

    locality         0 / 15 / 30
    completion       0 - 20
    rating           0 - 20
    recency          0 / 2 / 5 / 10
    query relevance  0 - 25
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from suburbmates.models import BusinessRecord, ScoreBreakdown, SearchContext

LOCALITY_EXACT = 30.0
LOCALITY_PARTIAL = 15.0
COMPLETION_MAX = 20.0
RATING_BASE_MAX = 15.0
RATING_MAX = 20.0
REVIEW_MULTIPLIER_CAP = 1.5
QUERY_RELEVANCE_MAX = 25.0

# (max days since update, points), checked in order
RECENCY_BANDS = ((7, 10.0), (30, 5.0), (90, 2.0))

_SECONDS_PER_DAY = 60 * 60 * 24


def _filled(value: Optional[str]) -> bool:
    return isinstance(value, str) and len(value) > 0


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def completion_score(record: BusinessRecord) -> float:
    """Fraction of the optional profile fields that are filled in."""
    profile_fields = (record.bio, record.logo, record.website, record.phone, record.category)
    return sum(1 for value in profile_fields if _filled(value)) / len(profile_fields)


def completion_boost(record: BusinessRecord) -> float:
    score = record.completion_score
    if score is None:
        score = completion_score(record)
    return score * COMPLETION_MAX


def locality_score(record: BusinessRecord, context: SearchContext) -> float:
    target = context.target_suburb
    if not target:
        return 0.0

    suburb = record.suburb.lower()
    target = target.lower()
    if suburb == target:
        return LOCALITY_EXACT
    # compound names, e.g. "North Melbourne" vs "Melbourne"
    if target in suburb or suburb in target:
        return LOCALITY_PARTIAL
    return 0.0


def rating_score(record: BusinessRecord) -> float:
    rating = record.rating or 0
    if rating == 0:
        return 0.0

    review_count = record.review_count or 0
    base = (rating / 5) * RATING_BASE_MAX
    multiplier = min(review_count / 10, REVIEW_MULTIPLIER_CAP)
    return min(base * multiplier, RATING_MAX)


def days_since(moment: datetime, now: Optional[datetime] = None) -> float:
    now = _as_utc(now or datetime.now(timezone.utc))
    return (now - _as_utc(moment)).total_seconds() / _SECONDS_PER_DAY


def recency_score(record: BusinessRecord, now: Optional[datetime] = None) -> float:
    days = days_since(record.updated_at, now)
    for max_days, points in RECENCY_BANDS:
        if days <= max_days:
            return points
    return 0.0


def name_acronym(name: str) -> str:
    return "".join(word[0] for word in name.lower().split(" ") if word)


def query_relevance_score(record: BusinessRecord, context: SearchContext) -> float:
    if not context.query:
        return 0.0

    query = context.query.lower()
    name = (record.name or "").lower()
    category = (record.category or "").lower()
    bio = (record.bio or "").lower()

    boost = 0.0
    if name == query:
        boost += 25
    elif name.startswith(query):
        boost += 15
    elif query in name:
        boost += 10

    if query in category:
        boost += 8
    if query in bio:
        boost += 5
    if name_acronym(name) == query:
        boost += 12

    return min(boost, QUERY_RELEVANCE_MAX)


def score_record(
    record: BusinessRecord,
    context: SearchContext,
    now: Optional[datetime] = None,
) -> ScoreBreakdown:
    return ScoreBreakdown(
        locality=locality_score(record, context),
        completion=completion_boost(record),
        rating=rating_score(record),
        recency=recency_score(record, now),
        query_relevance=query_relevance_score(record, context),
    )
