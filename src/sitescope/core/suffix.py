"""Public suffix oracles that map a hostname to its public suffix and base domain."""

from __future__ import annotations

import ipaddress
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

import tldextract

from sitescope.core.config import Settings, get_settings
from sitescope.core.errors import DomainResolutionError

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"[\w-]+")


def is_ip_address(host: str) -> bool:
    """Return True for IPv4 and IPv6 literals (IPv6 may be bracketed)."""
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


def normalize_host(host: str) -> str:
    """Lower-case a host, drop one trailing FQDN dot, and validate its labels.

    Hosts with a leading dot (raw cookie hosts) or empty labels are rejected
    rather than producing a wrong suffix split.
    """
    if not isinstance(host, str):
        raise DomainResolutionError(repr(host), "host must be a string")

    clean = host.strip().lower()
    if clean.endswith("."):
        clean = clean[:-1]
    if not clean:
        raise DomainResolutionError(host, "empty host")
    if clean.startswith("."):
        raise DomainResolutionError(host, "leading dot")
    if is_ip_address(clean):
        return clean.strip("[]")

    for label in clean.split("."):
        if not label:
            raise DomainResolutionError(host, "empty label")
        if not _LABEL_RE.fullmatch(label):
            raise DomainResolutionError(host, f"invalid label {label!r}")
    return clean


class PublicSuffixOracle(ABC):
    """Contract for anything that knows the Public Suffix List.

    Subclasses only implement lookup_suffix(); normalisation and the
    base-domain special cases live here so every oracle agrees on them.
    """

    @abstractmethod
    def lookup_suffix(self, host: str) -> str:
        """Return the public suffix of an already-normalised, non-IP host."""
        ...

    def public_suffix(self, host: str) -> str:
        clean = normalize_host(host)
        if is_ip_address(clean):
            raise DomainResolutionError(host, "IP addresses have no public suffix")
        return self.lookup_suffix(clean)

    def base_domain(self, host: str) -> str:
        """Return the eTLD+1 of host.

        An IP address, a single-label alias such as "localhost", or a host that
        is itself a public suffix returns the host unchanged. Only compare the
        result for string equality; it is not always a suffix of the input.
        """
        clean = normalize_host(host)
        if is_ip_address(clean):
            return clean

        suffix = self.lookup_suffix(clean)
        labels = clean.split(".")
        suffix_length = len(suffix.split("."))
        if len(labels) <= suffix_length:
            return clean
        return ".".join(labels[-(suffix_length + 1) :])


class TldextractOracle(PublicSuffixOracle):
    """Oracle backed by tldextract's copy of the Public Suffix List."""

    def __init__(
        self,
        include_psl_private_domains: bool = True,
        suffix_list_urls: Iterable[str] = (),
        cache_dir: str | None = None,
    ) -> None:
        self.include_psl_private_domains = include_psl_private_domains
        # No URLs means the snapshot bundled with tldextract; nothing is fetched
        self._extract = tldextract.TLDExtract(
            cache_dir=cache_dir,
            suffix_list_urls=tuple(suffix_list_urls),
            fallback_to_snapshot=True,
            include_psl_private_domains=include_psl_private_domains,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> TldextractOracle:
        return cls(
            include_psl_private_domains=settings.include_psl_private_domains,
            suffix_list_urls=settings.suffix_list_urls,
            cache_dir=settings.cache_dir,
        )

    def lookup_suffix(self, host: str) -> str:
        suffix = self._extract(host).suffix
        if not suffix:
            # Implicit "*" rule: an unlisted TLD is its own public suffix
            logger.debug("No listed public suffix for %s, using last label", host)
            return host.rsplit(".", 1)[-1]
        return suffix


class RuleSetOracle(PublicSuffixOracle):
    """In-memory Public Suffix List: plain, wildcard ("*.") and exception ("!") rules."""

    def __init__(self, rules: Iterable[str]) -> None:
        self._rules: set[str] = set()
        self._wildcards: set[str] = set()
        self._exceptions: set[str] = set()

        for raw in rules:
            rule = raw.strip().lower()
            if not rule or rule.startswith("//"):
                continue
            if rule.startswith("!"):
                self._exceptions.add(rule[1:])
            elif rule.startswith("*."):
                self._wildcards.add(rule[2:])
            else:
                self._rules.add(rule)

    @classmethod
    def from_text(cls, text: str) -> RuleSetOracle:
        """Parse public_suffix_list.dat content (first token of each line)."""
        rules = []
        for line in text.splitlines():
            parts = line.split()
            if parts and not parts[0].startswith("//"):
                rules.append(parts[0])
        return cls(rules)

    def __len__(self) -> int:
        return len(self._rules) + len(self._wildcards) + len(self._exceptions)

    def lookup_suffix(self, host: str) -> str:
        labels = host.split(".")
        # Longest candidate first
        for i in range(len(labels)):
            candidate = ".".join(labels[i:])
            if candidate in self._exceptions:
                return ".".join(labels[i + 1 :])
            if candidate in self._rules:
                return candidate
            if i + 1 < len(labels) and ".".join(labels[i + 1 :]) in self._wildcards:
                return candidate
        return labels[-1]


_default_oracle: PublicSuffixOracle | None = None


def default_oracle() -> PublicSuffixOracle:
    """Return the process-wide oracle, building it from settings on first use."""
    global _default_oracle
    if _default_oracle is None:
        _default_oracle = TldextractOracle.from_settings(get_settings())
    return _default_oracle


def reset_default_oracle() -> None:
    """Forget the process-wide oracle so the next call re-reads settings."""
    global _default_oracle
    _default_oracle = None
