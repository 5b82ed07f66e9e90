"""Request context → window resolution.

The browser runtime that owns windows and tabs is never touched here. Callers
inject a WindowResolver that knows how to turn a channel's opaque context into
a WindowHandle; everything downstream only sees Resolved or Unresolved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowHandle:
    """A document window: its URL and the window that embeds it, if any."""

    url: str
    parent: WindowHandle | None = None

    @property
    def top(self) -> WindowHandle:
        window = self
        while window.parent is not None:
            window = window.parent
        return window


@dataclass(frozen=True)
class RequestChannel:
    """A request's own URL plus whatever context the host environment attached."""

    url: str
    context: Any = None


@dataclass(frozen=True)
class Resolved:
    window: WindowHandle


@dataclass(frozen=True)
class Unresolved:
    reason: str


Resolution = Resolved | Unresolved


class WindowResolver(ABC):
    """Maps a request channel to the window that issued it."""

    @abstractmethod
    def resolve(self, channel: RequestChannel) -> Resolution:
        """Return Resolved(window) or Unresolved(reason).

        Implementations may also raise ContextResolutionError.
        """
        ...


class MappingWindowResolver(WindowResolver):
    """Resolve channel.context by looking it up in a mapping of known windows."""

    def __init__(self, windows: Mapping[Hashable, WindowHandle]) -> None:
        self._windows = dict(windows)

    def resolve(self, channel: RequestChannel) -> Resolution:
        if channel.context is None:
            return Unresolved("channel has no context")
        try:
            window = self._windows.get(channel.context)
        except TypeError:
            return Unresolved(f"unhashable context {type(channel.context).__name__}")
        if window is None:
            return Unresolved("no window for context")
        return Resolved(window)


def top_window_for_channel(
    resolver: WindowResolver, channel: RequestChannel
) -> WindowHandle | None:
    """Return the top window in the channel's window hierarchy, or None.

    Many requests (OCSP, safe-browsing updates) have no window at all, so a
    failed lookup is logged and reported as None rather than raised.
    """
    try:
        resolution = resolver.resolve(channel)
    except Exception:
        logger.warning("Window lookup failed for %s", channel.url, exc_info=True)
        return None

    if isinstance(resolution, Unresolved):
        logger.warning("No associated window for %s: %s", channel.url, resolution.reason)
        return None
    return resolution.window.top
