"""Core data models shared by the search reranker."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(slots=True)
class BusinessRecord:
    """Snapshot of a directory listing as handed to the reranker."""

    id: str
    name: str
    suburb: str
    created_at: datetime
    updated_at: datetime
    category: Optional[str] = None
    bio: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    completion_score: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            out[f.name] = value.isoformat() if isinstance(value, datetime) else value
        return out


@dataclass(slots=True)
class SearchContext:
    query: Optional[str] = None
    suburb: Optional[str] = None
    category: Optional[str] = None
    location_suburb: Optional[str] = None

    @property
    def target_suburb(self) -> Optional[str]:
        return self.suburb or self.location_suburb


@dataclass(slots=True)
class ScoreBreakdown:
    locality: float = 0.0
    completion: float = 0.0
    rating: float = 0.0
    recency: float = 0.0
    query_relevance: float = 0.0

    def total(self) -> float:
        return self.locality + self.completion + self.rating + self.recency + self.query_relevance

    @classmethod
    def zero(cls) -> "ScoreBreakdown":
        return cls()


@dataclass(slots=True)
class ScoredRecord:
    record: BusinessRecord
    rerank_score: float
    breakdown: ScoreBreakdown

    def to_dict(self) -> Dict[str, Any]:
        out = self.record.to_dict()
        out["rerank_score"] = self.rerank_score
        out["score_breakdown"] = {
            "locality": self.breakdown.locality,
            "completion": self.breakdown.completion,
            "rating": self.breakdown.rating,
            "recency": self.breakdown.recency,
            "query_relevance": self.breakdown.query_relevance,
        }
        return out
