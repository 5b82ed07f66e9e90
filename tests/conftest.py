"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from sitescope.blocklist import trackers
from sitescope.core import classifier, config, suffix
from sitescope.core.suffix import RuleSetOracle, TldextractOracle

PSL_RULES = """
// ===BEGIN ICANN DOMAINS===
com
net
org
io
uk
co.uk
jp
*.kawasaki.jp
!city.kawasaki.jp
// ===BEGIN PRIVATE DOMAINS===
github.io
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config discovery at an empty temp dir and drop cached singletons."""
    config_path = tmp_path / "sitescope.toml"
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATHS", [config_path])
    for var in ("SITESCOPE_PSL_PRIVATE", "SITESCOPE_SUFFIX_LIST_URLS", "SITESCOPE_CACHE_DIR"):
        monkeypatch.delenv(var, raising=False)
    suffix.reset_default_oracle()
    classifier.reset_default_classifier()
    monkeypatch.setattr(trackers, "_tracker_domains", None)
    monkeypatch.setattr(trackers, "_tracker_categories", None)
    yield config_path
    suffix.reset_default_oracle()
    classifier.reset_default_classifier()


@pytest.fixture()
def rules_oracle() -> RuleSetOracle:
    """Small, fixed suffix list so results never depend on PSL updates."""
    return RuleSetOracle.from_text(PSL_RULES)


@pytest.fixture(scope="session")
def tld_oracle() -> TldextractOracle:
    """tldextract oracle on its bundled snapshot (no network)."""
    return TldextractOracle()
