"""Rules-based reranking of directory search results."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from suburbmates.core.flags import FlagLookup, get_flag_lookup
from suburbmates.models import BusinessRecord, ScoreBreakdown, ScoredRecord, SearchContext
from suburbmates.search.scoring import score_record

logger = logging.getLogger(__name__)

RERANK_FLAG = "search_reranker"


def is_rerank_enabled(is_feature_enabled: Optional[FlagLookup] = None) -> bool:
    """Consult the reranker flag; lookup failures read as disabled."""
    try:
        lookup = is_feature_enabled or get_flag_lookup()
        return bool(lookup(RERANK_FLAG))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Flag %s lookup failed, reranking disabled: %s", RERANK_FLAG, exc)
        return False


def _unscored(records: Sequence[BusinessRecord]) -> List[ScoredRecord]:
    return [ScoredRecord(record=r, rerank_score=0.0, breakdown=ScoreBreakdown.zero()) for r in records]


def _score_all(
    records: Sequence[BusinessRecord],
    context: SearchContext,
    now: datetime,
) -> List[ScoredRecord]:
    scored = []
    for record in records:
        breakdown = score_record(record, context, now)
        scored.append(ScoredRecord(record=record, rerank_score=breakdown.total(), breakdown=breakdown))
    return scored


def _created_key(item: ScoredRecord) -> float:
    created = item.record.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def score_records(
    records: Sequence[BusinessRecord],
    context: Optional[SearchContext] = None,
    is_feature_enabled: Optional[FlagLookup] = None,
    now: Optional[datetime] = None,
) -> List[ScoredRecord]:
    """Score every record without changing the order. Useful for debugging."""
    if not records:
        return []
    if not is_rerank_enabled(is_feature_enabled):
        return _unscored(records)
    return _score_all(records, context or SearchContext(), now or datetime.now(timezone.utc))


def rerank(
    records: Sequence[BusinessRecord],
    context: Optional[SearchContext] = None,
    is_feature_enabled: Optional[FlagLookup] = None,
    now: Optional[datetime] = None,
) -> List[ScoredRecord]:
    """Score records and sort them by descending rerank score.

    Equal scores fall back to ``created_at`` (newest first); anything still
    tied keeps its input order since ``sorted`` is stable. With the
    ``search_reranker`` flag off every record comes back in input order with
    zero scores.
    """
    if not records:
        return []
    if not is_rerank_enabled(is_feature_enabled):
        logger.debug("Reranking disabled; returning %d records in input order", len(records))
        return _unscored(records)

    scored = _score_all(records, context or SearchContext(), now or datetime.now(timezone.utc))
    ranked = sorted(scored, key=lambda s: (s.rerank_score, _created_key(s)), reverse=True)
    logger.debug("Reranked %d records", len(ranked))
    return ranked
