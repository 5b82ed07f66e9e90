"""URL parsing helpers on top of httpx.URL."""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

import httpx

from sitescope.core.errors import URLParseError

logger = logging.getLogger(__name__)

# Schemes that wrap another URL, e.g. "view-source:https://example.com/"
_WRAPPER_PREFIXES = ("view-source:", "feed:")
_WYCIWYG_RE = re.compile(r"^wyciwyg://\d+/")


def unwrap_url(url: str) -> str:
    """Strip wrapper schemes until the inner URL is reached."""
    while True:
        for prefix in _WRAPPER_PREFIXES:
            if url.lower().startswith(prefix):
                url = url[len(prefix) :]
                break
        else:
            match = _WYCIWYG_RE.match(url)
            if match is None:
                return url
            url = url[match.end() :]


def make_uri(url: str) -> httpx.URL:
    """Parse an absolute URL, raising URLParseError when it has no usable host."""
    if not isinstance(url, str):
        raise URLParseError(repr(url), "URL must be a string")
    try:
        uri = httpx.URL(url)
        # httpx decodes IDNA hosts lazily, so a bad A-label only fails here
        host = uri.host
    except (httpx.InvalidURL, ValueError) as e:
        raise URLParseError(url, str(e)) from e
    if not host:
        raise URLParseError(url, "no host")
    return uri


def uri_host(uri: httpx.URL) -> str:
    """Host of a parsed URL with percent-escapes decoded ("ex%41mple.com" -> "example.com")."""
    return unquote(uri.host).lower()


def get_hostname(url: str) -> str | None:
    """Extract the hostname from a URL (might return None)."""
    if not isinstance(url, str):
        return None
    try:
        return uri_host(make_uri(unwrap_url(url)))
    except URLParseError as e:
        logger.debug("No hostname: %s", e)
        return None
