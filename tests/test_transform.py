from datetime import datetime, timezone

import pytest

from suburbmates.etl import transform


def test_to_business_record_accepts_camel_case():
    row = {
        "id": "b1",
        "name": " ABC Plumbing ",
        "suburb": "Richmond",
        "category": "plumbing",
        "bio": "",
        "rating": "4.5",
        "reviewCount": "1,204",
        "completionScore": 0.6,
        "createdAt": "2026-01-02T03:04:05Z",
        "updatedAt": "2026-10-01T00:00:00.000Z",
        "slug": "abc-plumbing",
    }

    record = transform.to_business_record(row)

    assert record.name == "ABC Plumbing"
    assert record.bio is None
    assert record.rating == 4.5
    assert record.review_count == 1204
    assert record.completion_score == 0.6
    assert record.created_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert record.updated_at == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert record.extra == {"slug": "abc-plumbing"}


def test_to_business_record_fallbacks():
    record = transform.to_business_record({"id": 7, "name": "Acme", "created_at": 0})

    assert record.id == "7"
    assert record.suburb == ""
    assert record.created_at == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert record.updated_at == record.created_at
    assert record.rating is None and record.review_count is None


def test_to_business_record_clamps_out_of_range(caplog):
    with caplog.at_level("WARNING"):
        record = transform.to_business_record(
            {"id": "b1", "name": "Acme", "rating": 7, "review_count": -3, "completion_score": 1.4}
        )

    assert record.rating == 5.0
    assert record.review_count == 0
    assert record.completion_score == 1.0
    assert "outside 0-5" in " ".join(caplog.messages)


def test_to_business_record_requires_identity():
    with pytest.raises(ValueError):
        transform.to_business_record({"name": "Acme"})
    with pytest.raises(ValueError):
        transform.to_business_record({"id": "b1", "name": "  "})


def test_to_business_records_rejects_non_objects():
    with pytest.raises(ValueError):
        transform.to_business_records([{"id": "1", "name": "A"}, "oops"])


def test_parse_timestamp_variants():
    naive = datetime(2026, 5, 1, 12, 0)
    assert transform.parse_timestamp(naive).tzinfo is timezone.utc
    assert transform.parse_timestamp("2026-05-01") == datetime(2026, 5, 1, tzinfo=timezone.utc)
    assert transform.parse_timestamp("not a date") is None
    assert transform.parse_timestamp(None) is None


def test_to_search_context_reads_nested_location():
    context = transform.to_search_context({"query": "  ", "location": {"suburb": "Fitzroy"}, "category": "cafe"})

    assert context.query is None
    assert context.suburb is None
    assert context.target_suburb == "Fitzroy"
    assert context.category == "cafe"
    assert transform.to_search_context(None).target_suburb is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("-3", 0),
        ("2.5", 2),
        (12.9, 12),
        ("1,234 reviews", 1234),
        ("none yet", None),
    ],
)
def test_review_count_parsing(raw, expected):
    record = transform.to_business_record({"id": "1", "name": "x", "reviewCount": raw})
    assert record.review_count == expected


def test_parse_timestamp_out_of_range_epoch():
    assert transform.parse_timestamp(10**20) is None
    assert transform.parse_timestamp(-(10**20)) is None

    record = transform.to_business_record({"id": "1", "name": "x", "createdAt": 10**20})
    assert record.created_at == datetime(1970, 1, 1, tzinfo=timezone.utc)
