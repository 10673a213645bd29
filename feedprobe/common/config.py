from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

# Resolve the default configuration path relative to the project root rather
# than the current working directory.
CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "settings.yml"
CONFIG_ENV = "FEEDPROBE_CONFIG"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:117.0) " "Gecko/20100101 Firefox/117.0"
)

# environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "FEEDPROBE_SITE_WORKERS": ("workers", "sites"),
    "FEEDPROBE_PROBE_WORKERS": ("workers", "probes"),
    "FEEDPROBE_TIMEOUT": ("probe", "timeout"),
}


class ConfigError(Exception):
    """Raised when the settings file or an override cannot be used."""


class ProbeConfig(BaseModel):
    timeout: float = Field(10.0, gt=0)
    sample_bytes: int = Field(512, ge=1)
    user_agent: str = DEFAULT_USER_AGENT


class WorkerConfig(BaseModel):
    sites: int = Field(10, ge=1)
    probes: int = Field(10, ge=1)


class Settings(BaseModel):
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    workers: WorkerConfig = Field(default_factory=WorkerConfig)

    class Config:
        extra = "allow"


def _apply_env(data: dict) -> dict:
    for var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if not value:
            continue
        if data.get(section) is None:
            data[section] = {}
        elif not isinstance(data[section], dict):
            raise ConfigError(f"{section!r} must be a mapping to apply {var}")
        data[section][key] = value
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from *path*, ``$FEEDPROBE_CONFIG`` or the bundled file.

    A missing file yields the defaults; environment overrides apply either way.
    """
    if path is None:
        path = Path(os.environ.get(CONFIG_ENV) or CONFIG_PATH)
    data: dict = {}
    try:
        if path.exists():
            data = yaml.safe_load(path.read_text()) or {}
        else:
            log.debug("no settings file at %s, using defaults", path)
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
        return Settings(**_apply_env(data))
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        raise ConfigError(f"invalid settings in {path}: {exc}") from exc
