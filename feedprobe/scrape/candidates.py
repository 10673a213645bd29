"""Conventional feed locations, expressed as paths relative to a site root."""

from __future__ import annotations

from itertools import product

PREFIXES: tuple[str, ...] = ("", "feed/", "feeds/", "rss/", "blog/")
MIDDLES: tuple[str, ...] = (
    "",
    "all",
    "atom",
    "feed",
    "index",
    "posts",
    "posts/default",
    "rss",
    "en",
    "default",
    "rssfeed",
    "blog",
)
SUFFIXES: tuple[str, ...] = ("", ".rss", ".atom", ".rss2")
EXTENSIONS: tuple[str, ...] = ("", ".xml", "?feed=rss2", "?format=atom")


def generate_candidates() -> list[str]:
    """Return every prefix+middle+suffix+extension combination, in order.

    The first candidate is the empty path, i.e. the site root itself.
    """
    return ["".join(parts) for parts in product(PREFIXES, MIDDLES, SUFFIXES, EXTENSIONS)]
