"""Single-candidate feed probing.

A probe issues one GET for ``<base>/<path>``, samples the start of the body and
decides whether it looks like a feed. Transport failures are never raised:
a candidate that cannot be fetched is simply not a feed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import requests
from requests import RequestException, Response

from feedprobe.common import http

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
SAMPLE_BYTES = 512


@dataclass(frozen=True)
class ProbeResult:
    url: str | None = None

    @property
    def found(self) -> bool:
        return self.url is not None


NOT_FOUND = ProbeResult()


def probe_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def looks_like_feed(sample: str) -> bool:
    """Heuristic content sniff; ``xhtml`` rules out ordinary HTML pages."""
    if "xhtml" in sample:
        return False
    return "feed" in sample or "xml" in sample


class PathProber:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        sample_bytes: int = SAMPLE_BYTES,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.sample_bytes = sample_bytes
        self.session = session

    def __call__(self, base_url: str, path: str) -> ProbeResult:
        url = probe_url(base_url, path)
        log.debug("trying path: %s", url)
        deadline = time.monotonic() + self.timeout
        try:
            with http.get(url, session=self.session, timeout=self.timeout, stream=True) as resp:
                sample = self._sample(resp, deadline)
                final_url = resp.url
        except RequestException as exc:
            log.debug("probe failed for %s: %s", url, exc)
            return NOT_FOUND

        if sample is None:
            log.debug("probe of %s exceeded %.1fs", url, self.timeout)
            return NOT_FOUND
        if looks_like_feed(sample):
            return ProbeResult(final_url)
        return NOT_FOUND

    def _sample(self, resp: Response, deadline: float) -> str | None:
        """Read up to ``sample_bytes`` of the body, or None once *deadline* passes.

        The body is read a byte at a time so a slow sender cannot hold the
        probe past its deadline by trickling data; a short body is fine.
        """
        if time.monotonic() > deadline:
            return None
        buf = bytearray()
        for chunk in resp.iter_content(chunk_size=1):
            if time.monotonic() > deadline:
                return None
            buf += chunk
            if len(buf) >= self.sample_bytes:
                break
        return bytes(buf[: self.sample_bytes]).decode("utf-8", "ignore")
