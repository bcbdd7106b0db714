import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure `suburbmates` is importable when running pytest from the repository root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from suburbmates.core import config  # noqa: E402
from suburbmates.models import BusinessRecord  # noqa: E402
from suburbmates.moderation import rules  # noqa: E402

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clear_caches():
    config.get_settings.cache_clear()
    rules.get_rules.cache_clear()
    yield
    config.get_settings.cache_clear()
    rules.get_rules.cache_clear()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    def factory(**overrides):
        values = dict(
            id="biz-1",
            name="Acme Plumbing",
            suburb="Richmond",
            created_at=NOW - timedelta(days=400),
            updated_at=NOW - timedelta(days=200),
        )
        values.update(overrides)
        return BusinessRecord(**values)

    return factory
