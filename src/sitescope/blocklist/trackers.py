"""Known third-party tracking domains and subdomain-aware blocklist matching."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from pathlib import Path

import yaml

from sitescope.core.config import get_settings
from sitescope.core.errors import DomainResolutionError
from sitescope.core.hierarchy import check_each_parent_domain_string
from sitescope.core.paths import DATA_DIR
from sitescope.core.suffix import PublicSuffixOracle

logger = logging.getLogger(__name__)

TRACKERS_FILE = DATA_DIR / "trackers.yaml"


def load_tracker_categories(path: Path | None = None) -> dict[str, list[str]]:
    """Read the category → domains table from the blocklist YAML file."""
    with open(path or TRACKERS_FILE) as f:
        data = yaml.safe_load(f) or {}
    categories = data.get("categories") or {}
    return {
        name: [d.strip().lower().lstrip(".") for d in domains or []]
        for name, domains in categories.items()
    }


def load_tracker_domains(path: Path | None = None, extra: Iterable[str] = ()) -> frozenset[str]:
    domains = {d for entries in load_tracker_categories(path).values() for d in entries}
    domains.update(d.strip().lower().lstrip(".") for d in extra)
    return frozenset(domains)


_tracker_domains: frozenset[str] | None = None


def get_tracker_domains() -> frozenset[str]:
    """Bundled tracker domains plus extra_tracker_domains from the config file."""
    global _tracker_domains
    if _tracker_domains is None:
        _tracker_domains = load_tracker_domains(extra=get_settings().extra_tracker_domains)
    return _tracker_domains


_tracker_categories: dict[str, list[str]] | None = None


def get_tracker_categories() -> dict[str, list[str]]:
    """Bundled category table, read once per process."""
    global _tracker_categories
    if _tracker_categories is None:
        _tracker_categories = load_tracker_categories()
    return _tracker_categories


def category_for(domain: str, path: Path | None = None) -> str | None:
    categories = load_tracker_categories(path) if path is not None else get_tracker_categories()
    for name, domains in categories.items():
        if domain in domains:
            return name
    return None


def is_tracker_domain(
    host: str,
    domains: Collection[str] | None = None,
    oracle: PublicSuffixOracle | None = None,
) -> tuple[bool, str]:
    """Check if a host or any of its parent domains is a known tracker.

    Cookie hosts may have a leading dot (e.g., ".doubleclick.net").
    Returns (is_tracker, matched_domain) with the most specific match.
    """
    if domains is None:
        domains = get_tracker_domains()

    # Strip leading dot (cookie domain convention)
    clean = host.lstrip(".")
    matched = ""

    def _listed(candidate: str) -> bool:
        nonlocal matched
        if candidate in domains:
            matched = candidate
            return True
        return False

    try:
        found = check_each_parent_domain_string(clean, _listed, oracle=oracle)
    except DomainResolutionError as e:
        logger.debug("Not checking %r against blocklist: %s", host, e)
        return False, ""

    return found, matched
