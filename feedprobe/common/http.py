import logging
import time
from functools import lru_cache
from typing import Any

import requests
from requests import Response
from requests.adapters import HTTPAdapter

log = logging.getLogger(__name__)
logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:117.0) " "Gecko/20100101 Firefox/117.0"
    ),
    "Accept": "application/rss+xml,application/atom+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def build_session(pool_size: int = 10, user_agent: str | None = None) -> requests.Session:
    """Return a session whose connection pool can serve *pool_size* workers."""
    session = requests.Session()
    session.trust_env = False
    session.headers.update(DEFAULT_HEADERS)
    if user_agent:
        session.headers["User-Agent"] = user_agent
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


@lru_cache(maxsize=1)
def default_session() -> requests.Session:
    """Session used when a caller passes none; built on first use.

    Batch runs build their own pooled session through
    ``SiteFeedResolver.from_settings``.
    """
    return build_session()


def request(
    method: str, url: str, session: requests.Session | None = None, **kwargs: Any
) -> Response:
    """Perform a single HTTP request and log its outcome. No retries."""
    start = time.monotonic()
    resp = (session or default_session()).request(method, url, **kwargs)
    log.debug(
        "http %s %s status=%s duration=%.2f",
        method,
        url,
        resp.status_code,
        time.monotonic() - start,
        extra={"final_url": resp.url},
    )
    return resp


def get(url: str, **kwargs: Any) -> Response:
    kwargs.setdefault("allow_redirects", True)
    return request("GET", url, **kwargs)
