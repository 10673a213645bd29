import time

import requests
from flask import Flask, Response, redirect

from conftest import FEED_XML
from feedprobe.scrape import probe
from feedprobe.scrape.probe import NOT_FOUND, PathProber, ProbeResult, looks_like_feed, probe_url


class FakeResponse:
    def __init__(self, body: bytes, url: str):
        self._body = body
        self.url = url
        self.status_code = 200
        self.closed = False

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self._body), chunk_size):
            yield self._body[i : i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


def test_probe_url_trims_trailing_slashes():
    assert probe_url("https://example.com//", "feed/") == "https://example.com/feed/"
    assert probe_url("https://example.com", "") == "https://example.com/"
    assert probe_url("https://example.com/", "?feed=rss2") == "https://example.com/?feed=rss2"


def test_looks_like_feed():
    assert looks_like_feed('<?xml version="1.0"?><rss>')
    assert looks_like_feed("<feed>")
    assert not looks_like_feed('<html xmlns="http://www.w3.org/1999/xhtml"><?xml ?>')
    assert not looks_like_feed("<html><body>hello</body></html>")
    assert not looks_like_feed("")


def test_probe_reports_final_url_and_closes(monkeypatch):
    responses = []

    def fake_get(url, **kwargs):
        assert kwargs["stream"] is True
        assert kwargs["timeout"] == 10.0
        resp = FakeResponse(b'<?xml version="1.0"?><rss/>', "https://example.com/feed.xml")
        responses.append(resp)
        return resp

    monkeypatch.setattr(probe.http, "get", fake_get)
    result = PathProber()("https://example.com/", "feed")
    assert result == ProbeResult("https://example.com/feed.xml")
    assert result.found
    assert responses[0].closed


def test_probe_only_samples_leading_bytes(monkeypatch):
    body = b"a" * 600 + b"<feed>"
    monkeypatch.setattr(probe.http, "get", lambda url, **k: FakeResponse(body, url))
    assert PathProber()("https://example.com", "x") is NOT_FOUND
    assert PathProber(sample_bytes=1024)("https://example.com", "x").found


def test_probe_swallows_transport_errors(monkeypatch):
    def boom(url, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(probe.http, "get", boom)
    assert PathProber()("https://example.com", "feed") is NOT_FOUND


def test_probe_connection_refused():
    assert PathProber(timeout=2)("http://127.0.0.1:1", "feed") is NOT_FOUND


def test_probe_follows_redirects(serve):
    app = Flask(__name__)

    @app.route("/feed")
    def feed():
        return redirect("/feed.xml", code=301)

    @app.route("/feed.xml")
    def feed_xml():
        return Response(FEED_XML, mimetype="application/atom+xml")

    with serve(app) as base:
        result = PathProber(timeout=5)(base, "feed")
    assert result.url == f"{base}/feed.xml"


def test_probe_ignores_html_pages(serve):
    app = Flask(__name__)

    @app.route("/")
    def index():
        return '<!DOCTYPE html><html xmlns="http://www.w3.org/1999/xhtml"><link rel="alternate" type="application/rss+xml">'

    with serve(app) as base:
        assert PathProber(timeout=5)(base, "") is NOT_FOUND


def test_probe_times_out(serve):
    app = Flask(__name__)

    @app.route("/slow")
    def slow():
        time.sleep(1)
        return FEED_XML

    with serve(app) as base:
        assert PathProber(timeout=0.2)(base, "slow") is NOT_FOUND


def test_slow_body_is_cut_off_at_the_deadline(serve):
    app = Flask(__name__)

    @app.route("/trickle")
    def trickle():
        def generate():
            for _ in range(20):
                time.sleep(0.1)
                yield b"x"

        return Response(generate(), headers={"Content-Length": "20"})

    with serve(app) as base:
        start = time.monotonic()
        assert PathProber(timeout=0.5)(base, "trickle") is NOT_FOUND
        elapsed = time.monotonic() - start
    assert elapsed < 1.5
