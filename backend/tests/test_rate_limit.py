"""Tests for the rate limiting pure function and middleware integration."""

from biodata.core.config import settings
from biodata.middleware.request_context import check_rate_limit


class TestCheckRateLimit:
    """Unit tests for the pure function: no middleware, no HTTP."""

    def test_allows_within_limit(self):
        bucket: dict = {}
        allowed, retry = check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)
        assert allowed is True
        assert retry == 0.0

    def test_denies_after_exhaustion(self):
        bucket: dict = {}
        now = 0.0
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=now)

        allowed, retry = check_rate_limit(bucket, "client-a", max_per_minute=60, now=now)
        assert allowed is False
        assert retry > 0

    def test_refills_over_time(self):
        bucket: dict = {}
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        # Two seconds at one token per second.
        allowed, _ = check_rate_limit(bucket, "client-a", max_per_minute=60, now=2.0)
        assert allowed is True

    def test_separate_keys_independent(self):
        bucket: dict = {}
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        allowed, _ = check_rate_limit(bucket, "client-b", max_per_minute=60, now=0.0)
        assert allowed is True

    def test_zero_limit_always_allows(self):
        bucket: dict = {}
        allowed, _ = check_rate_limit(bucket, "any", max_per_minute=0, now=0.0)
        assert allowed is True


class TestRateLimitMiddleware:

    def test_exceeding_limit_returns_429(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_per_minute", 2)

        assert client.get("/materials").status_code == 200
        assert client.get("/materials").status_code == 200
        resp = client.get("/materials")

        assert resp.status_code == 429
        assert resp.json()["error"] == "RATE_LIMITED"
        assert int(resp.headers["retry-after"]) >= 1
        assert "x-request-id" in resp.headers

    def test_health_is_exempt(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_per_minute", 1)
        for _ in range(5):
            assert client.get("/health").status_code == 200
