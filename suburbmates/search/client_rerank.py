"""Light phrase-match reranking over rows that already carry a server score."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Sequence

from suburbmates.core.config import get_settings

logger = logging.getLogger(__name__)

TIE_TOLERANCE = 0.01
CLIENT_SCORE_CAP = 1.0


@dataclass(frozen=True)
class RerankOptions:
    phrase_boost: float = 0.2
    exact_match_boost: float = 0.3
    category_match_boost: float = 0.15
    suburb_match_boost: float = 0.1


def _lower(business: Dict[str, Any], key: str) -> str:
    return str(business.get(key) or "").lower()


def client_score(business: Dict[str, Any], query: str, options: Optional[RerankOptions] = None) -> float:
    if not query or not query.strip():
        return 0.0
    options = options or RerankOptions()

    q = query.lower().strip()
    name = _lower(business, "name")
    bio = _lower(business, "bio")
    category = _lower(business, "category")
    suburb = _lower(business, "suburb")

    score = 0.0
    if name == q:
        score += options.exact_match_boost
    if q in name:
        score += options.phrase_boost
    if q in bio:
        score += options.phrase_boost * 0.7
    if category == q:
        score += options.category_match_boost
    if suburb == q:
        score += options.suburb_match_boost

    query_words = [w for w in q.split() if len(w) > 2]
    if len(query_words) > 1:
        if all(w in name for w in query_words):
            score += options.phrase_boost * 0.8

        # phrase kept in order inside a window of consecutive name words
        name_words = name.split()
        width = len(query_words)
        windows = (" ".join(name_words[i:i + width]) for i in range(len(name_words) - width + 1))
        if any(q in window for window in windows):
            score += options.phrase_boost * 0.5

    return min(score, CLIENT_SCORE_CAP)


def is_client_rerank_enabled() -> bool:
    return get_settings().client_rerank_enabled


def rerank_search_results(
    businesses: Sequence[Dict[str, Any]],
    query: str,
    options: Optional[RerankOptions] = None,
    enabled: Optional[bool] = None,
) -> List[Dict[str, Any]]:
    """Combine ``search_score`` with a phrase score and reorder.

    Rows whose combined scores are within ``TIE_TOLERANCE`` keep their
    original relative order.
    """
    if enabled is None:
        enabled = is_client_rerank_enabled()
    if not enabled or not query or not query.strip() or not businesses:
        return list(businesses)

    options = options or RerankOptions()
    combined = []
    for position, business in enumerate(businesses):
        server_score = float(business.get("search_score") or 0)
        combined.append((server_score + client_score(business, query, options), position, business))

    def compare(a, b) -> int:
        if abs(a[0] - b[0]) < TIE_TOLERANCE:
            return a[1] - b[1]
        return -1 if a[0] > b[0] else 1

    ranked = sorted(combined, key=cmp_to_key(compare))
    logger.debug("Client reranked %d results for query=%s", len(ranked), query)
    return [business for _, _, business in ranked]


def rerank_stats(
    original: Sequence[Dict[str, Any]],
    reranked: Sequence[Dict[str, Any]],
    query: str,
    enabled: Optional[bool] = None,
) -> Dict[str, Any]:
    if enabled is None:
        enabled = is_client_rerank_enabled()

    changes: List[Dict[str, Any]] = []
    if enabled and len(original) == len(reranked):
        new_positions = {}
        for index, business in enumerate(reranked):
            new_positions.setdefault(business.get("id"), index)
        for index, business in enumerate(original):
            new_index = new_positions.get(business.get("id"))
            if new_index is not None and new_index != index:
                changes.append(
                    {
                        "id": business.get("id"),
                        "name": business.get("name"),
                        "from": index,
                        "to": new_index,
                        "change": index - new_index,
                    }
                )

    return {
        "enabled": enabled,
        "query": query,
        "original_count": len(original),
        "reranked_count": len(reranked),
        "position_changes": changes,
        "significant_changes": sum(1 for c in changes if abs(c["change"]) >= 2),
    }
