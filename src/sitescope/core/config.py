"""Configuration loading — reads optional TOML config file and environment overrides."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from sitescope.core.errors import ConfigError

DEFAULT_CONFIG_PATHS = [
    Path.home() / ".config" / "sitescope" / "config.toml",
    Path("sitescope.toml"),
]

# Local test endpoints that must behave like real cross-site requests
DEFAULT_TEST_FIXTURE_URLS: frozenset[str] = frozenset(
    {
        "http://localhost:8099/test-request-3rd-party-cookieblock.sjs",
    }
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Settings(BaseModel):
    """Runtime settings for the suffix oracle, classifier and blocklist."""

    test_fixture_urls: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_TEST_FIXTURE_URLS)
    )
    include_psl_private_domains: bool = True
    suffix_list_urls: list[str] = Field(default_factory=list)  # empty = bundled snapshot
    cache_dir: str | None = None
    extra_tracker_domains: list[str] = Field(default_factory=list)


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Searches default paths if no explicit path is given.
    Returns an empty dict if no config file is found.
    """
    paths = [path] if path is not None else DEFAULT_CONFIG_PATHS

    for p in paths:
        if p.exists():
            try:
                with open(p, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {p}: {e}") from e

    return {}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def get_settings(path: Path | None = None) -> Settings:
    """Build settings: config.toml → SITESCOPE_* env vars override."""
    data = dict(load_config(path))

    env = os.environ.get("SITESCOPE_PSL_PRIVATE")
    if env is not None:
        data["include_psl_private_domains"] = _parse_bool("SITESCOPE_PSL_PRIVATE", env)

    env = os.environ.get("SITESCOPE_SUFFIX_LIST_URLS")
    if env is not None:
        data["suffix_list_urls"] = [u.strip() for u in env.split(",") if u.strip()]

    env = os.environ.get("SITESCOPE_CACHE_DIR")
    if env:
        data["cache_dir"] = env

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
