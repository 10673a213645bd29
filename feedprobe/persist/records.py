"""Load and save the JSON site list the CLI works on."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from jsonschema import ValidationError, validate

from feedprobe.schemas.models import Site

log = logging.getLogger(__name__)

SITE_SCHEMA = {
    "type": "object",
    "required": ["url"],
    "properties": {
        "url": {"type": "string"},
        "rss": {"type": ["string", "null"]},
    },
}
SITES_SCHEMA = {"type": "array", "items": SITE_SCHEMA}


class RecordStoreError(Exception):
    """The site list could not be read, parsed, validated or written."""


def validate_sites(records: object) -> list[dict]:
    """Validate raw records against the site list schema."""
    try:
        validate(instance=records, schema=SITES_SCHEMA)
    except ValidationError as exc:
        raise RecordStoreError(f"invalid site list: {exc.message}") from exc
    return records  # type: ignore[return-value]


def load_sites(path: Path) -> list[Site]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RecordStoreError(f"error reading JSON file: {exc}") from exc
    try:
        records = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordStoreError(f"error parsing JSON file: {exc}") from exc
    sites = [Site.model_validate(r) for r in validate_sites(records)]
    log.info("loaded %d site(s) from %s", len(sites), path)
    return sites


def dump_sites(sites: Iterable[Site]) -> str:
    """Serialise *sites* as a pretty-printed JSON array (2-space indent)."""
    try:
        return json.dumps([s.to_record() for s in sites], indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise RecordStoreError(f"error marshaling JSON: {exc}") from exc


def save_sites(path: Path, sites: Iterable[Site]) -> Path:
    data = dump_sites(sites)
    try:
        path.write_text(data, encoding="utf-8")
    except OSError as exc:
        raise RecordStoreError(f"error writing JSON file: {exc}") from exc
    return path
