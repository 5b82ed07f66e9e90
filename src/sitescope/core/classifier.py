"""Third-party classification by comparing the base domains of a request and its document."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel

from sitescope.core.config import DEFAULT_TEST_FIXTURE_URLS, get_settings
from sitescope.core.context import RequestChannel, WindowResolver, top_window_for_channel
from sitescope.core.errors import SitescopeError
from sitescope.core.suffix import PublicSuffixOracle, default_oracle
from sitescope.core.uri import make_uri, uri_host

logger = logging.getLogger(__name__)


class VerdictReason(StrEnum):
    TEST_FIXTURE = "test-fixture"
    BASE_DOMAIN = "base-domain"


class Verdict(BaseModel):
    """Outcome of classifying one (request, document) URL pair."""

    request_url: str
    document_url: str
    request_base_domain: str | None = None  # None when a test fixture short-circuits
    document_base_domain: str | None = None
    third_party: bool
    reason: VerdictReason


class ThirdPartyClassifier:
    """Decides whether a request is third-party relative to the document that issued it.

    Test fixture URLs are always third-party so local test pages can exercise
    cross-site behaviour. is_third_party_uri() raises on bad input while
    is_third_party_channel() fails open and reports first-party instead.
    """

    def __init__(
        self,
        oracle: PublicSuffixOracle | None = None,
        test_fixture_urls: Iterable[str] = DEFAULT_TEST_FIXTURE_URLS,
        resolver: WindowResolver | None = None,
    ) -> None:
        self.oracle = oracle if oracle is not None else default_oracle()
        self.test_fixture_urls = frozenset(test_fixture_urls)
        self.resolver = resolver

    def classify(self, request_url: str, document_url: str) -> Verdict:
        if request_url in self.test_fixture_urls:
            return Verdict(
                request_url=request_url,
                document_url=document_url,
                third_party=True,
                reason=VerdictReason.TEST_FIXTURE,
            )

        request_uri = make_uri(request_url)
        document_uri = make_uri(document_url)
        request_base = self.oracle.base_domain(uri_host(request_uri))
        document_base = self.oracle.base_domain(uri_host(document_uri))
        return Verdict(
            request_url=request_url,
            document_url=document_url,
            request_base_domain=request_base,
            document_base_domain=document_base,
            third_party=request_base != document_base,
            reason=VerdictReason.BASE_DOMAIN,
        )

    def is_third_party_uri(self, request_url: str, document_url: str) -> bool:
        """Raises URLParseError or DomainResolutionError when either side is unusable."""
        return self.classify(request_url, document_url).third_party

    def is_third_party_channel(self, channel: RequestChannel) -> bool:
        """Classify a channel against its top window; any lookup failure means first-party."""
        if channel.url in self.test_fixture_urls:
            return True

        if self.resolver is None:
            logger.debug("No window resolver configured, treating %s as first-party", channel.url)
            return False

        window = top_window_for_channel(self.resolver, channel)
        if window is None:
            return False

        try:
            return self.is_third_party_uri(channel.url, window.url)
        except SitescopeError as e:
            logger.debug("Cannot classify %s, treating as first-party: %s", channel.url, e)
            return False


_default_classifier: ThirdPartyClassifier | None = None


def default_classifier() -> ThirdPartyClassifier:
    """Return the process-wide classifier built from settings."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ThirdPartyClassifier(
            oracle=default_oracle(),
            test_fixture_urls=get_settings().test_fixture_urls,
        )
    return _default_classifier


def reset_default_classifier() -> None:
    global _default_classifier
    _default_classifier = None


def is_third_party_uri(request_url: str, document_url: str) -> bool:
    return default_classifier().is_third_party_uri(request_url, document_url)


def is_third_party_channel(
    channel: RequestChannel, resolver: WindowResolver | None = None
) -> bool:
    classifier = default_classifier()
    if resolver is not None:
        classifier = ThirdPartyClassifier(
            oracle=classifier.oracle,
            test_fixture_urls=classifier.test_fixture_urls,
            resolver=resolver,
        )
    return classifier.is_third_party_channel(channel)
