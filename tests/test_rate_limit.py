"""Per-tenant fixed-window rate limiting."""
from types import SimpleNamespace

import fakeredis
import pytest
import redis
from fastapi.testclient import TestClient

from projectdesk.controllers.auth_controller import issue_token
from projectdesk.main import create_app
from projectdesk.middleware import rate_limit
from projectdesk.models.tenant import Tenant
from projectdesk.models.user import User
from tests.conftest import PASSWORD_HASH


class BrokenRedis:
    """Queues commands like a pipeline but fails on execute."""

    def pipeline(self):
        return self

    def incr(self, key):
        return self

    def expire(self, key, seconds, nx=False):
        return self

    def execute(self):
        raise redis.ConnectionError("down")


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch):
    monkeypatch.setattr(rate_limit, "time", SimpleNamespace(time=lambda: 1_000_040.0))


@pytest.fixture
def fake_redis():
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()
    yield client
    client.flushall()


def _limited_app(settings, redis_client, limit=2):
    settings = settings.model_copy(update={"RATE_LIMIT_ENABLED": True, "RATE_LIMIT_PER_MINUTE": limit})
    app = create_app(settings, redis_client=redis_client)
    app.state.db.create_all()
    return app


def test_anonymous_requests_limited_per_client(settings, fake_redis):
    app = _limited_app(settings, fake_redis)

    with TestClient(app) as client:
        assert client.get("/").status_code == 200
        assert client.get("/").status_code == 200
        blocked = client.get("/")

    assert blocked.status_code == 429
    assert int(blocked.headers["Retry-After"]) == 41
    assert blocked.json()["retry_after"] == 41
    assert blocked.json()["detail"] == "Rate limit exceeded. Please try again later."


def test_health_is_never_limited(settings, fake_redis):
    app = _limited_app(settings, fake_redis, limit=1)

    with TestClient(app) as client:
        for _ in range(3):
            assert client.get("/health").status_code == 200


def test_tenants_have_separate_buckets(settings, fake_redis):
    app = _limited_app(settings, fake_redis, limit=1)
    db = app.state.db.session()

    tokens = {}
    for slug in ("acme", "globex"):
        tenant = Tenant(name=slug, slug=slug)
        user = User(tenant=tenant, email=f"u@{slug}.io", full_name="U", password_hash=PASSWORD_HASH)
        db.add(user)
        db.commit()
        tokens[slug] = {"Authorization": f"Bearer {issue_token(user, app.state.settings)}"}
    db.close()

    with TestClient(app) as client:
        assert client.get("/api/projects", headers=tokens["acme"]).status_code == 200
        assert client.get("/api/projects", headers=tokens["acme"]).status_code == 429
        assert client.get("/api/projects", headers=tokens["globex"]).status_code == 200


def test_redis_outage_lets_requests_through(settings):
    app = _limited_app(settings, BrokenRedis(), limit=1)

    with TestClient(app) as client:
        for _ in range(3):
            assert client.get("/").status_code == 200


def test_counter_key_always_has_ttl(settings, fake_redis):
    app = _limited_app(settings, fake_redis, limit=5)

    with TestClient(app) as client:
        client.get("/")
        client.get("/")

    window = int(1_000_040.0 // rate_limit.WINDOW_SECONDS)
    key = f"rate_limit:ip:testclient:{window}"
    assert fake_redis.get(key) == "2"
    assert 0 < fake_redis.ttl(key) <= rate_limit.WINDOW_SECONDS
