import pytest

from suburbmates.search import client_rerank
from suburbmates.search.client_rerank import RerankOptions, client_score, rerank_search_results, rerank_stats


@pytest.fixture
def results():
    return [
        {"id": "1", "name": "Melbourne Hot Water", "suburb": "Carlton", "search_score": 0.40},
        {"id": "2", "name": "Hot Water Solutions", "suburb": "Richmond", "search_score": 0.35},
        {"id": "3", "name": "Bright Sparks", "bio": "Hot water systems installed", "search_score": 0.30},
        {"id": "4", "name": "Gas Fitters", "category": "plumbing", "search_score": 0.10},
    ]


def test_client_score_blank_query():
    assert client_score({"name": "Anything"}, "   ") == 0


def test_client_score_exact_name():
    # exact + phrase in name
    assert client_score({"name": "Hot Water"}, "hot water") == pytest.approx(0.3 + 0.2 + 0.16 + 0.1)


def test_client_score_phrase_and_words():
    score = client_score({"name": "Hot Water Solutions"}, "Hot Water")
    assert score == pytest.approx(0.2 + 0.16 + 0.1)


def test_client_score_category_and_suburb_equality():
    assert client_score({"name": "Gas Fitters", "category": "Plumbing"}, "plumbing") == pytest.approx(0.15)
    assert client_score({"name": "Gas Fitters", "suburb": "Richmond"}, "richmond") == pytest.approx(0.1)


def test_client_score_is_capped():
    options = RerankOptions(phrase_boost=1.0, exact_match_boost=1.0)
    assert client_score({"name": "plumber"}, "plumber", options) == 1.0


def test_rerank_disabled_returns_input(results):
    assert rerank_search_results(results, "hot water", enabled=False) == results


def test_rerank_blank_query_returns_input(results):
    assert rerank_search_results(results, " ", enabled=True) == results


def test_rerank_reads_setting(results, monkeypatch):
    monkeypatch.setenv("SEARCH_CLIENT_RERANK", "false")
    assert rerank_search_results(results, "hot water") == results


def test_rerank_boosts_phrase_hits(results):
    reranked = rerank_search_results(results, "hot water", enabled=True)
    assert [r["id"] for r in reranked] == ["1", "2", "3", "4"]

    reranked = rerank_search_results(results, "hot water solutions", enabled=True)
    assert [r["id"] for r in reranked][0] == "2"


def test_rerank_keeps_order_for_near_ties():
    rows = [
        {"id": "a", "name": "Alpha", "search_score": 0.500},
        {"id": "b", "name": "Beta", "search_score": 0.505},
    ]
    reranked = rerank_search_results(rows, "zzz", enabled=True)
    assert [r["id"] for r in reranked] == ["a", "b"]


def test_rerank_stats_reports_moves(results):
    reranked = [results[2], results[0], results[1], results[3]]
    stats = rerank_stats(results, reranked, "hot water", enabled=True)

    assert stats["enabled"] is True
    assert stats["original_count"] == stats["reranked_count"] == 4
    moves = {c["id"]: c for c in stats["position_changes"]}
    assert moves["3"]["from"] == 2 and moves["3"]["to"] == 0 and moves["3"]["change"] == 2
    assert moves["1"]["change"] == -1
    assert "4" not in moves
    assert stats["significant_changes"] == 1


def test_rerank_stats_disabled(results, monkeypatch):
    monkeypatch.setattr(client_rerank, "is_client_rerank_enabled", lambda: False)
    stats = rerank_stats(results, list(reversed(results)), "hot water")
    assert stats["enabled"] is False
    assert stats["position_changes"] == []
