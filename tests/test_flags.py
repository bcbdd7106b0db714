import pytest
import requests

from suburbmates.core import flags
from suburbmates.core.config import Settings
from suburbmates.vendors import upstash


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse(payload={"result": None})
        self.error = None

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(upstash, "_SESSION", session)
    return session


def _upstash_settings(**overrides):
    values = dict(
        flag_backend="upstash",
        upstash_redis_rest_url="https://eu1.upstash.example",
        upstash_redis_rest_token="tok",
        flag_timeout_seconds=1.5,
    )
    values.update(overrides)
    return Settings(**values)


def test_get_value_builds_request(patch_session):
    patch_session.response = DummyResponse(payload={"result": "1"})

    assert upstash.get_value("flag:search_reranker", "https://eu1.upstash.example/", "tok", timeout=1.5) == "1"

    url, headers, timeout = patch_session.calls[0]
    assert url == "https://eu1.upstash.example/GET/flag%3Asearch_reranker"
    assert headers == {"Authorization": "Bearer tok"}
    assert timeout == 1.5


def test_get_value_requires_credentials():
    with pytest.raises(upstash.UpstashError):
        upstash.get_value("flag:x", "", "tok")


def test_get_value_error_payload(patch_session):
    patch_session.response = DummyResponse(payload={"error": "WRONGPASS"})
    with pytest.raises(upstash.UpstashError):
        upstash.get_value("flag:x", "https://eu1.upstash.example", "tok")


@pytest.mark.parametrize("stored,expected", [("1", True), (1, True), (" 1 ", True), ("0", False), ("true", False), (None, False)])
def test_upstash_flags_only_one_means_on(patch_session, stored, expected):
    patch_session.response = DummyResponse(payload={"result": stored})
    assert flags.upstash_flags(_upstash_settings())("search_reranker") is expected


def test_fail_open_swallows_network_errors(patch_session, caplog):
    patch_session.error = requests.ConnectionError("timeout")
    lookup = flags.fail_open(flags.upstash_flags(_upstash_settings()))

    with caplog.at_level("WARNING"):
        assert lookup("search_reranker") is False

    assert "treating as disabled" in " ".join(caplog.messages)


def test_fail_open_on_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=503)
    lookup = flags.get_flag_lookup(_upstash_settings())
    assert lookup("search_reranker") is False


def test_get_flag_lookup_upstash_without_credentials_is_disabled(patch_session):
    lookup = flags.get_flag_lookup(_upstash_settings(upstash_redis_rest_url=""))
    assert lookup("search_reranker") is False
    assert patch_session.calls == []


def test_env_flags(monkeypatch):
    monkeypatch.setenv("FLAG_SEARCH_RERANKER", "Yes")
    monkeypatch.delenv("FLAG_OTHER", raising=False)
    lookup = flags.env_flags()
    assert lookup("search_reranker") is True
    assert lookup("other") is False


def test_static_and_off_backends():
    lookup = flags.static_flags({"search_reranker": True})
    assert lookup("search_reranker") is True
    assert lookup("missing") is False
    assert flags.get_flag_lookup(Settings(flag_backend="off"))("search_reranker") is False
