from __future__ import annotations

import logging
import sys
from pathlib import Path

from feedprobe.common import ConfigError, load_settings
from feedprobe.persist import records
from feedprobe.scrape import batch

log = logging.getLogger(__name__)

USAGE = "Usage: {prog} <input_json_file>"


def run(argv: list[str] | None = None) -> None:
    """Discover feeds for every site in a JSON file and rewrite it in place."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE.format(prog=Path(sys.argv[0]).name or "feedprobe"))
        raise SystemExit(1)

    path = Path(args[0])
    try:
        settings = load_settings()
        sites = records.load_sites(path)
    except (ConfigError, records.RecordStoreError) as exc:
        log.error("%s", exc)
        raise SystemExit(1) from exc

    batch.run(sites, settings)

    try:
        records.save_sites(path, sites)
    except records.RecordStoreError as exc:
        log.error("%s", exc)
        raise SystemExit(1) from exc
    log.info("processing complete. updated JSON file: %s", path)


if __name__ == "__main__":  # pragma: no cover
    run()
