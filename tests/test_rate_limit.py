from middleware.rate_limit import SlidingWindowRateLimiter


def test_allows_up_to_limit_then_blocks():
    limiter = SlidingWindowRateLimiter(max_requests=3, window_seconds=60)

    results = [limiter.hit("10.0.0.1", now=100 + i) for i in range(4)]

    assert [allowed for allowed, _, _ in results] == [True, True, True, False]
    assert [remaining for _, remaining, _ in results] == [2, 1, 0, 0]


def test_retry_after_counts_from_oldest_request():
    limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60)
    limiter.hit("ip", now=0)
    limiter.hit("ip", now=10)

    allowed, _, reset = limiter.hit("ip", now=30)
    assert not allowed
    assert reset == 30


def test_window_slides():
    limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60)
    limiter.hit("ip", now=0)
    limiter.hit("ip", now=10)

    assert limiter.hit("ip", now=59)[0] is False
    assert limiter.hit("ip", now=60)[0] is True
    assert limiter.hit("ip", now=61)[0] is False
    assert limiter.hit("ip", now=70)[0] is True


def test_blocked_requests_are_not_counted():
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=10)
    limiter.hit("ip", now=0)
    for t in range(1, 10):
        assert limiter.hit("ip", now=t)[0] is False

    assert limiter.hit("ip", now=10)[0] is True


def test_keys_are_independent():
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60)

    assert limiter.hit("a", now=0)[0] is True
    assert limiter.hit("b", now=0)[0] is True
    assert limiter.hit("a", now=1)[0] is False


def test_reset_clears_history():
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60)
    limiter.hit("ip", now=0)
    limiter.reset()

    assert limiter.hit("ip", now=1)[0] is True


def test_api_responses_carry_limit_headers(client, user_headers):
    response = client.get("/api/preferences", headers=user_headers)

    assert response.headers["RateLimit-Limit"] == "100"
    assert response.headers["RateLimit-Remaining"] == "99"


def test_root_is_not_rate_limited(client):
    response = client.get("/")
    assert "RateLimit-Limit" not in response.headers
