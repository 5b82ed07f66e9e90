"""Domain hierarchy: base domain, parent domain and the ancestor walk.

For "www.radio.bbc.co.uk" with public suffix "co.uk":

    base domain    bbc.co.uk
    parent domain  radio.bbc.co.uk
    ancestor walk  www.radio.bbc.co.uk, radio.bbc.co.uk, bbc.co.uk

The walk stops at the base domain; the public suffix is never visited.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from sitescope.core.suffix import PublicSuffixOracle, default_oracle, normalize_host


def _split(host: str, oracle: PublicSuffixOracle) -> tuple[list[str], int]:
    """Return (labels, suffix label count) for host, raising before any work is done."""
    suffix = oracle.public_suffix(host)
    return normalize_host(host).split("."), len(suffix.split("."))


def get_base_domain(host: str, oracle: PublicSuffixOracle | None = None) -> str:
    """For "www.bbc.co.uk" this is "bbc.co.uk" (the eTLD+1)."""
    if oracle is None:
        oracle = default_oracle()
    return oracle.base_domain(host)


def get_parent_domain(host: str, oracle: PublicSuffixOracle | None = None) -> str:
    """Strip one subdomain level, never going below the base domain.

    "www.radio.bbc.co.uk" -> "radio.bbc.co.uk", "bbc.co.uk" -> "bbc.co.uk".
    """
    if oracle is None:
        oracle = default_oracle()
    labels, suffix_length = _split(host, oracle)

    # Already an eTLD+1 or an eTLD+2: the parent is the eTLD+1
    if len(labels) - suffix_length < 3:
        return oracle.base_domain(host)

    return ".".join(labels[1:])


def iter_parent_domains(
    host: str,
    ignore_self: bool = False,
    oracle: PublicSuffixOracle | None = None,
) -> Iterator[str]:
    """Yield host and each ancestor down to the base domain, most specific first.

    The host is validated immediately, not on first iteration.
    """
    if oracle is None:
        oracle = default_oracle()
    labels, suffix_length = _split(host, oracle)

    if ignore_self:
        labels = labels[1:]

    def _walk() -> Iterator[str]:
        remaining = labels
        while len(remaining) - suffix_length > 0:
            yield ".".join(remaining)
            remaining = remaining[1:]

    return _walk()


def parent_domain_chain(host: str, oracle: PublicSuffixOracle | None = None) -> list[str]:
    """Ancestors of host from its immediate parent down to the base domain.

    The base domain closes the chain, so it matches what
    check_each_parent_domain_string(host, p, ignore_self=True) visits:
    "www.radio.bbc.co.uk" -> ["radio.bbc.co.uk", "bbc.co.uk"]. A host that is
    already its base domain has no ancestors and yields [].
    """
    return list(iter_parent_domains(host, ignore_self=True, oracle=oracle))


def check_each_parent_domain_string(
    host: str,
    predicate: Callable[[str], bool],
    ignore_self: bool = False,
    oracle: PublicSuffixOracle | None = None,
) -> bool:
    """Return True as soon as predicate accepts host or one of its ancestors.

    Candidates are tried from the most specific down to the base domain, and
    predicate is never called again after it returns True. With ignore_self
    the host itself is skipped and the walk starts at its parent.
    """
    for candidate in iter_parent_domains(host, ignore_self=ignore_self, oracle=oracle):
        if predicate(candidate):
            return True
    return False
