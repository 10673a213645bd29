from feedprobe.schemas.models import NO_RSS_FEED, Site


def test_site_reads_rss_alias():
    site = Site.model_validate({"url": "https://a.example", "rss": "https://a.example/feed"})
    assert site.feed == "https://a.example/feed"
    assert not site.needs_probe()


def test_site_needs_probe():
    assert Site(url="https://a.example").needs_probe()
    assert Site(url="https://a.example", rss="").needs_probe()
    assert Site(url="https://a.example", rss=NO_RSS_FEED).needs_probe()


def test_to_record_omits_empty_feed_and_keeps_extras():
    site = Site.model_validate({"url": "https://a.example", "name": "A"})
    assert site.to_record() == {"url": "https://a.example", "name": "A"}
    site.feed = "https://a.example/rss"
    assert site.to_record() == {"url": "https://a.example", "rss": "https://a.example/rss", "name": "A"}


def test_feed_key_is_an_ordinary_extra():
    record = {"url": "https://a.example", "feed": "legacy"}
    site = Site.model_validate(record)
    assert site.feed is None
    assert site.needs_probe()
    assert site.to_record() == record
    site.feed = "https://a.example/rss"
    assert site.to_record() == {"url": "https://a.example", "rss": "https://a.example/rss", "feed": "legacy"}
