from feedprobe.common import http


class FakeSession:
    def __init__(self):
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        resp = type("Resp", (), {"status_code": 200, "url": url})()
        return resp


def test_default_session_is_built_once():
    first = http.default_session()
    assert first is http.default_session()
    assert first.trust_env is False
    assert "Firefox" in first.headers["User-Agent"]


def test_build_session_user_agent_and_pool():
    session = http.build_session(pool_size=40, user_agent="feedprobe-test")
    assert session.headers["User-Agent"] == "feedprobe-test"
    assert session.get_adapter("https://example.com")._pool_maxsize == 40


def test_get_uses_given_session_and_follows_redirects():
    session = FakeSession()
    http.get("https://example.com/feed", session=session, timeout=3)
    ((method, url, kwargs),) = session.calls
    assert (method, url) == ("GET", "https://example.com/feed")
    assert kwargs == {"timeout": 3, "allow_redirects": True}
