from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from feedprobe.common import Settings, load_settings
from feedprobe.common.diagnostics import sensor
from feedprobe.common.throttle import PermitPool
from feedprobe.schemas.models import NO_RSS_FEED, Site
from feedprobe.scrape.resolver import InvalidSiteURL, SiteFeedResolver

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 10


class BatchCoordinator:
    """Resolve feeds for many sites at once, writing results into the records.

    Only sites without a feed, or marked with the ``NO_RSS_FEED`` sentinel, are
    probed. Each site record is written by the single task that owns it.
    """

    def __init__(
        self,
        resolver: SiteFeedResolver,
        workers: int = DEFAULT_WORKERS,
        pool_factory: Callable[[int], PermitPool] = PermitPool,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.resolver = resolver
        self.workers = workers
        self.pool_factory = pool_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> BatchCoordinator:
        workers = settings.workers
        resolver = SiteFeedResolver.from_settings(settings, pool_size=workers.sites * workers.probes)
        return cls(resolver, workers=workers.sites)

    def run(self, sites: Sequence[Site]) -> int:
        """Probe every eligible site and return how many were probed."""
        pending = [site for site in sites if site.needs_probe()]
        log.info("%d of %d site(s) need probing", len(pending), len(sites))

        permits = self.pool_factory(self.workers)
        futures: list[Future] = []
        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="site") as executor:
            for site in pending:
                permits.acquire()
                futures.append(executor.submit(self._resolve_site, site, permits))

        for future in futures:
            future.result()
        return len(pending)

    def _resolve_site(self, site: Site, permits: PermitPool) -> None:
        try:
            log.info("processing URL: %s", site.url)
            resolution = None
            try:
                resolution = self.resolver.start(site.url)
                feed = resolution.result()
            except InvalidSiteURL as exc:
                log.warning("skipping invalid site URL: %s", exc)
                feed = ""
            if feed:
                log.info("RSS feed found for %s: %s", site.url, feed)
                site.feed = feed
            else:
                log.info("No RSS feed found for %s", site.url)
                site.feed = NO_RSS_FEED
            if resolution is not None:
                # the site keeps its permit until its leftover probes end
                resolution.join()
        finally:
            permits.release()


@sensor("batch")
def run(sites: list[Site], settings: Settings | None = None) -> list[Site]:
    """Resolve feeds for *sites* in place using *settings* (or the loaded ones)."""
    BatchCoordinator.from_settings(settings or load_settings()).run(sites)
    return sites
