from unittest.mock import MagicMock

import pytest
import redis

from app.core import rate_limit as rate_limit_module
from app.core.config import settings
from app.core.rate_limit import hit
from app.session import set_redis_client


@pytest.fixture
def counter():
    client = MagicMock()
    set_redis_client(client)
    yield client
    set_redis_client(None)


def test_within_limit(counter):
    counter.pipeline.return_value.execute.return_value = [3, True]
    assert hit("messages", "user:1", limit=3, window_seconds=60, now=120) is True
    counter.pipeline.return_value.incr.assert_called_once_with("ratelimit:messages:user:1:2")
    counter.pipeline.return_value.expire.assert_called_once_with("ratelimit:messages:user:1:2", 60)


def test_over_limit(counter):
    counter.pipeline.return_value.execute.return_value = [4, True]
    assert hit("messages", "user:1", limit=3, window_seconds=60) is False


def test_fails_open_when_redis_is_down(counter):
    counter.pipeline.return_value.execute.side_effect = redis.ConnectionError("down")
    assert hit("auth", "ip:1.2.3.4", limit=1, window_seconds=60) is True


def test_fails_open_without_redis():
    set_redis_client(None)
    assert hit("auth", "ip:1.2.3.4", limit=1, window_seconds=60) is True


def test_endpoint_returns_429(client, monkeypatch, redis_mock):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(rate_limit_module, "hit", lambda *args, **kwargs: False)
    response = client.get("/api/v1/tracking/00000000-0000-0000-0000-000000000000/shared/ABCDEFGH")
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "TOO_MANY_REQUESTS"
