"""
Configuration loading for discovery and live tailing.

Settings are resolved from built-in defaults, an optional YAML file, and
EBTAIL_* environment variables, in increasing order of precedence. The CLI
applies its own flags on top of the result.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import boto3
import yaml
from botocore.exceptions import BotoCoreError

from .errors import ConfigError

DEFAULT_REGION = "us-east-2"
DEFAULT_BUS_NAMES = ("control-event-bus", "resource-event-bus")
DEFAULT_MAX_WORKERS = 16


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""
    region: str = DEFAULT_REGION
    bus_names: Tuple[str, ...] = field(default=DEFAULT_BUS_NAMES)
    max_workers: int = DEFAULT_MAX_WORKERS
    profile: Optional[str] = None

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-empty override applied."""
        changes = {k: v for k, v in overrides.items() if v not in (None, (), [])}
        if "bus_names" in changes:
            changes["bus_names"] = tuple(changes["bus_names"])
        if "max_workers" in changes:
            changes["max_workers"] = _parse_workers(changes["max_workers"])
        return replace(self, **changes)


def _parse_workers(value: Any) -> int:
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"max_workers must be an integer, got {value!r}")
    if workers < 1:
        raise ConfigError(f"max_workers must be at least 1, got {workers}")
    return workers


def _parse_buses(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        names = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple)):
        names = [str(part).strip() for part in value]
    else:
        raise ConfigError(f"bus_names must be a list or comma-separated string, got {value!r}")
    names = [name for name in names if name]
    if not names:
        raise ConfigError("bus_names must name at least one event bus")
    return tuple(names)


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML settings file.

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of setting names to raw values

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Resolve settings from defaults, a YAML file and the environment.

    Args:
        config_path: Optional YAML file; falls back to EBTAIL_CONFIG

    Returns:
        Resolved settings

    Raises:
        ConfigError: If any source holds an invalid value
    """
    raw: Dict[str, Any] = {}

    path = config_path or os.environ.get("EBTAIL_CONFIG")
    if path:
        raw.update(read_config_file(Path(path)))

    env_map = {
        "EBTAIL_REGION": "region",
        "EBTAIL_BUSES": "bus_names",
        "EBTAIL_MAX_WORKERS": "max_workers",
        "EBTAIL_PROFILE": "profile",
    }
    for env_name, key in env_map.items():
        value = os.environ.get(env_name)
        if value:
            raw[key] = value

    unknown = set(raw) - {"region", "bus_names", "max_workers", "profile"}
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

    settings = Settings()
    if "region" in raw:
        settings = replace(settings, region=str(raw["region"]))
    if "bus_names" in raw:
        settings = replace(settings, bus_names=_parse_buses(raw["bus_names"]))
    if "max_workers" in raw:
        settings = replace(settings, max_workers=_parse_workers(raw["max_workers"]))
    if "profile" in raw:
        settings = replace(settings, profile=str(raw["profile"]))
    return settings


def build_session(settings: Settings) -> boto3.Session:
    """Create the boto3 session every client is built from."""
    try:
        return boto3.Session(region_name=settings.region, profile_name=settings.profile)
    except BotoCoreError as e:
        raise ConfigError(f"Unable to load AWS SDK config: {e}") from e


def build_client(session: boto3.Session, service: str):
    """Create a service client, mapping SDK setup failures to ConfigError."""
    try:
        return session.client(service)
    except BotoCoreError as e:
        raise ConfigError(f"Unable to create {service} client: {e}") from e
