"""Concurrent feed resolution for a single site.

Every candidate path is probed in its own thread, at most ``workers`` at a
time. The first probe that finds a feed publishes it into a
:class:`ResultSlot` and the caller is released immediately; the remaining
probes are not cancelled and keep running in daemon threads until they finish
or time out. Once every probe has ended the slot is closed, so a site without
any feed always resolves to ``""``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from urllib.parse import urlparse

from feedprobe.common import Settings
from feedprobe.common.diagnostics import sensor
from feedprobe.common.http import build_session
from feedprobe.common.throttle import PermitPool
from feedprobe.scrape.candidates import generate_candidates
from feedprobe.scrape.probe import PathProber, ProbeResult

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 10

Prober = Callable[[str, str], ProbeResult]


class InvalidSiteURL(ValueError):
    """The base URL has no http(s) scheme or no host, so nothing can be probed."""


def validate_base_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidSiteURL(f"not an absolute http(s) URL: {url!r}")
    return url


class ResultSlot:
    """Single-assignment cell: the first publish wins, later ones are dropped."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._value: str | None = None
        self._closed = False

    def publish(self, value: str) -> bool:
        with self._lock:
            if self._value is not None or self._closed:
                return False
            self._value = value
        self._ready.set()
        return True

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self._ready.set()

    def wait(self, timeout: float | None = None) -> str | None:
        """Block until a value is published or the slot is closed."""
        self._ready.wait(timeout)
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed


class Resolution:
    """Handle on one in-progress site resolution."""

    def __init__(self, base_url: str, slot: ResultSlot, dispatcher: threading.Thread) -> None:
        self.base_url = base_url
        self._slot = slot
        self._dispatcher = dispatcher

    def result(self, timeout: float | None = None) -> str:
        return self._slot.wait(timeout) or ""

    def join(self, timeout: float | None = None) -> None:
        """Wait for every probe of this resolution to end."""
        self._dispatcher.join(timeout)

    @property
    def done(self) -> bool:
        return self._slot.closed and not self._dispatcher.is_alive()


class SiteFeedResolver:
    def __init__(
        self,
        prober: Prober | None = None,
        workers: int = DEFAULT_WORKERS,
        pool_factory: Callable[[int], PermitPool] = PermitPool,
        candidates: Callable[[], Sequence[str]] = generate_candidates,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.prober = prober or PathProber()
        self.workers = workers
        self.pool_factory = pool_factory
        self.candidates = candidates

    @classmethod
    def from_settings(cls, settings: Settings, pool_size: int | None = None) -> SiteFeedResolver:
        session = build_session(
            pool_size=pool_size or settings.workers.probes,
            user_agent=settings.probe.user_agent,
        )
        prober = PathProber(
            timeout=settings.probe.timeout,
            sample_bytes=settings.probe.sample_bytes,
            session=session,
        )
        return cls(prober=prober, workers=settings.workers.probes)

    def start(self, base_url: str) -> Resolution:
        """Launch probing of *base_url* in the background and return at once."""
        validate_base_url(base_url)
        slot = ResultSlot()
        permits = self.pool_factory(self.workers)
        dispatcher = threading.Thread(
            target=self._dispatch,
            args=(base_url, permits, slot),
            name=f"resolve:{base_url}",
            daemon=True,
        )
        dispatcher.start()
        return Resolution(base_url, slot, dispatcher)

    @sensor("resolve")
    def resolve(self, base_url: str) -> str:
        """Return the first feed URL found under *base_url*, or ``""``."""
        return self.start(base_url).result()

    def _dispatch(self, base_url: str, permits: PermitPool, slot: ResultSlot) -> None:
        probes: list[threading.Thread] = []
        try:
            for path in self.candidates():
                permits.acquire()
                t = threading.Thread(
                    target=self._probe, args=(base_url, path, permits, slot), daemon=True
                )
                t.start()
                probes.append(t)
        finally:
            for t in probes:
                t.join()
            slot.close()

    def _probe(self, base_url: str, path: str, permits: PermitPool, slot: ResultSlot) -> None:
        try:
            result = self.prober(base_url, path)
            if result.found and slot.publish(result.url):
                log.debug("first feed for %s published: %s", base_url, result.url)
        except Exception:  # noqa: BLE001 - one broken probe must not stall the site
            log.exception("probe of %r under %s crashed", path, base_url)
        finally:
            permits.release()
