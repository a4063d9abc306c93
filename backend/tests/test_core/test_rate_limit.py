"""
Unit tests for the sliding-window rate limiter
"""
from dental_supply.core.config import settings
from dental_supply.core.exceptions import InvalidCredentialsError
from dental_supply.core.rate_limit import RateLimiter, _limit_for


class FakeClock:

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestRateLimiter:

    def test_allows_up_to_limit_then_blocks(self):
        limiter = RateLimiter(clock=FakeClock())

        results = [limiter.is_allowed("ip:1", max_requests=3) for _ in range(4)]

        assert [r[0] for r in results] == [True, True, True, False]
        assert [r[1] for r in results[:3]] == [2, 1, 0]
        assert results[3][2] > 0

    def test_window_slides(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        limiter.is_allowed("ip:1", max_requests=1)

        clock.now += 61

        assert limiter.is_allowed("ip:1", max_requests=1)[0]

    def test_identifiers_are_independent(self):
        limiter = RateLimiter(clock=FakeClock())
        limiter.is_allowed("ip:1", max_requests=1)

        assert limiter.is_allowed("ip:2", max_requests=1)[0]
        assert not limiter.is_allowed("ip:1", max_requests=1)[0]

    def test_idle_identifiers_are_evicted(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        for i in range(1000):
            limiter.is_allowed(f"ip:{i}", max_requests=5)

        clock.now += 10_000
        limiter.is_allowed("ip:new", max_requests=5)

        assert list(limiter._hits) == ["ip:new"]

    def test_active_identifiers_survive_cleanup(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        limiter.is_allowed("ip:old", max_requests=5)
        clock.now += 50
        limiter.is_allowed("ip:recent", max_requests=5)

        clock.now += 20
        limiter.is_allowed("ip:new", max_requests=5)

        assert set(limiter._hits) == {"ip:recent", "ip:new"}

    def test_credential_routes_use_auth_bucket(self):
        assert _limit_for(f"{settings.API_PREFIX}/auth/login") == ("auth", settings.AUTH_RATE_LIMIT_PER_MINUTE)
        assert _limit_for(f"{settings.API_PREFIX}/products") == ("api", settings.RATE_LIMIT_PER_MINUTE)


def test_middleware_returns_429(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_RATE_LIMIT_PER_MINUTE", 1)
    body = {"email": "x@example.com", "password": "whatever"}

    monkeypatch.setattr("dental_supply.api.auth.AuthService", _RejectingAuth)

    first = client.post(f"{settings.API_PREFIX}/auth/login", json=body)
    second = client.post(f"{settings.API_PREFIX}/auth/login", json=body)

    assert first.status_code == 400
    assert second.status_code == 429
    assert second.json() == {"message": "Too many requests, please slow down"}
    assert "Retry-After" in second.headers


class _RejectingAuth:

    def login(self, data):
        raise InvalidCredentialsError("Invalid credentials")


def test_login_bucket_ignores_bearer_header(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_RATE_LIMIT_PER_MINUTE", 3)
    monkeypatch.setattr("dental_supply.api.auth.AuthService", _RejectingAuth)
    body = {"email": "x@example.com", "password": "whatever"}

    codes = [
        client.post(
            f"{settings.API_PREFIX}/auth/login", json=body,
            headers={"Authorization": f"Bearer junk{i}"}
        ).status_code
        for i in range(6)
    ]

    assert codes == [400, 400, 400, 429, 429, 429]
