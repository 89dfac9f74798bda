"""
Settings for GitHub access and request pacing

Settings are resolved with priority CLI > environment > YAML config file
> defaults. Only values that are explicitly set at a level override the
level below it.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ghstream.errors import ConfigError
from ghstream.utils.log_setup import map_log_level

DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"

# GitHub rejects connection requests for more than 100 nodes per page
MAX_PAGE_SIZE = 100

# field name -> environment variable
ENV_VARS = {
    "github_token": "GITHUB_TOKEN",
    "graphql_url": "GHSTREAM_GRAPHQL_URL",
    "per_second": "GITHUB_PER_SECOND",
    "burst": "GHSTREAM_BURST",
    "page_size": "GHSTREAM_PAGE_SIZE",
    "timeout_seconds": "GHSTREAM_TIMEOUT",
    "log_level": "GHSTREAM_LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings"""

    github_token: Optional[str] = None
    graphql_url: str = DEFAULT_GRAPHQL_URL

    # Rate limit: sustained requests per second and burst size
    per_second: float = 1.0
    burst: int = 1

    page_size: int = MAX_PAGE_SIZE
    timeout_seconds: float = 30.0
    log_level: str = "WARNING"

    def validate(self) -> "Settings":
        """
        Check value ranges

        Returns:
            self, for chaining

        Raises:
            ConfigError: If any value is out of range
        """
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}"
            )
        if self.per_second <= 0:
            raise ConfigError(f"per_second must be positive, got {self.per_second}")
        if self.burst < 1:
            raise ConfigError(f"burst must be at least 1, got {self.burst}")
        if self.timeout_seconds <= 0:
            raise ConfigError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        try:
            map_log_level(self.log_level)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Settings as a dict with the token masked"""
        data = asdict(self)
        if data["github_token"]:
            data["github_token"] = "***"
        return data


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: List[str]


def _read_yaml_config(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _env_get(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


# field name -> converter for string inputs (env vars)
_CONVERTERS = {
    "per_second": float,
    "burst": int,
    "page_size": int,
    "timeout_seconds": float,
}


def _coerce(field_name: str, value: Any) -> Any:
    convert = _CONVERTERS.get(field_name)
    if convert is None or not isinstance(value, str):
        return value
    try:
        return convert(value)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {field_name}: {value!r}") from e


def load_settings(
    config_path: Optional[str] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> LoadedSettings:
    """
    Resolve settings from all sources

    Args:
        config_path: Optional path to a YAML file with Settings field names as keys
        cli_overrides: Values passed on the command line (None means "not set")

    Returns:
        LoadedSettings with the validated settings and the sources that contributed

    Raises:
        ConfigError: If a source is unreadable or a value is invalid
    """
    sources: List[str] = []
    known = set(ENV_VARS)
    merged: Dict[str, Any] = {}

    # 1) config file
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        unknown = set(cfg) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        if cfg:
            sources.append("config")
        merged.update(cfg)

    # 2) env
    env = {name: _env_get(var) for name, var in ENV_VARS.items()}
    env = {k: v for k, v in env.items() if v is not None}
    if env:
        sources.append("env")
    merged.update(env)

    # 3) CLI overrides (only those explicitly passed)
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    if overrides:
        sources.append("cli")
    merged.update(overrides)

    values = {k: _coerce(k, v) for k, v in merged.items()}
    settings = replace(Settings(), **values).validate()

    return LoadedSettings(settings=settings, sources_used=sources)
