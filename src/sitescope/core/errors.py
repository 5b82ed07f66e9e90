"""Exception hierarchy shared by the domain and classification layers."""

from __future__ import annotations


class SitescopeError(Exception):
    """Base class for every error raised by sitescope."""


class DomainResolutionError(SitescopeError):
    """Raised when a host cannot be split into labels and a public suffix."""

    def __init__(self, host: str, reason: str) -> None:
        self.host = host
        self.reason = reason
        super().__init__(f"Cannot resolve domain for host {host!r}: {reason}")


class URLParseError(SitescopeError):
    """Raised when a URL string is not a usable absolute URI."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot parse URL {url!r}: {reason}")


class ContextResolutionError(SitescopeError):
    """Raised by window resolvers that cannot map a request context to a window."""


class ConfigError(SitescopeError):
    """Raised when the configuration file or environment holds an invalid value."""
