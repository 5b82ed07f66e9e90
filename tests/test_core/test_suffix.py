"""Tests for host normalisation and the public suffix oracles."""

from __future__ import annotations

import pytest

from sitescope.core.errors import DomainResolutionError
from sitescope.core.suffix import (
    RuleSetOracle,
    TldextractOracle,
    default_oracle,
    is_ip_address,
    normalize_host,
    reset_default_oracle,
)


class TestNormalizeHost:
    def test_lowercases(self) -> None:
        assert normalize_host("WWW.Example.COM") == "www.example.com"

    def test_strips_trailing_dot(self) -> None:
        assert normalize_host("example.com.") == "example.com"

    def test_strips_ipv6_brackets(self) -> None:
        assert normalize_host("[::1]") == "::1"

    def test_allows_underscores_and_hyphens(self) -> None:
        assert normalize_host("_dmarc.my-site.example.com") == "_dmarc.my-site.example.com"

    @pytest.mark.parametrize(
        "host",
        ["", "   ", ".", ".example.com", "a..example.com", "exa mple.com", "example.com/x", "a:b.com"],
    )
    def test_rejects_malformed(self, host: str) -> None:
        with pytest.raises(DomainResolutionError):
            normalize_host(host)

    def test_rejects_non_string(self) -> None:
        with pytest.raises(DomainResolutionError):
            normalize_host(42)  # type: ignore[arg-type]

    def test_error_carries_host_and_reason(self) -> None:
        with pytest.raises(DomainResolutionError) as exc_info:
            normalize_host(".example.com")
        assert exc_info.value.host == ".example.com"
        assert exc_info.value.reason == "leading dot"


def test_is_ip_address() -> None:
    assert is_ip_address("192.168.1.1")
    assert is_ip_address("::1")
    assert is_ip_address("[2001:db8::1]")
    assert not is_ip_address("example.com")
    assert not is_ip_address("999.1.1.1")


# ---------------------------------------------------------------------------
# RuleSetOracle
# ---------------------------------------------------------------------------


class TestRuleSetOracle:
    def test_longest_match(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.public_suffix("www.bbc.co.uk") == "co.uk"
        assert rules_oracle.public_suffix("www.example.uk") == "uk"

    def test_wildcard_rule(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.public_suffix("a.shop.kawasaki.jp") == "shop.kawasaki.jp"
        assert rules_oracle.base_domain("b.a.shop.kawasaki.jp") == "a.shop.kawasaki.jp"

    def test_exception_rule(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.public_suffix("city.kawasaki.jp") == "kawasaki.jp"
        assert rules_oracle.base_domain("www.city.kawasaki.jp") == "city.kawasaki.jp"

    def test_implicit_wildcard_for_unlisted_tld(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.public_suffix("host.corp.internal") == "internal"
        assert rules_oracle.base_domain("host.corp.internal") == "corp.internal"

    def test_from_text_skips_comments_and_blanks(self) -> None:
        oracle = RuleSetOracle.from_text("// comment\n\ncom\n  org  trailing words\n")
        assert len(oracle) == 2
        assert oracle.public_suffix("example.org") == "org"

    def test_rules_are_case_insensitive(self) -> None:
        oracle = RuleSetOracle(["CO.UK", "uk"])
        assert oracle.public_suffix("bbc.co.uk") == "co.uk"


class TestBaseDomainSpecialCases:
    def test_ip_address_is_its_own_base(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.base_domain("127.0.0.1") == "127.0.0.1"
        assert rules_oracle.base_domain("[::1]") == "::1"

    def test_ip_address_has_no_suffix(self, rules_oracle: RuleSetOracle) -> None:
        with pytest.raises(DomainResolutionError):
            rules_oracle.public_suffix("127.0.0.1")

    def test_single_label_alias(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.base_domain("localhost") == "localhost"

    def test_public_suffix_is_its_own_base(self, rules_oracle: RuleSetOracle) -> None:
        assert rules_oracle.base_domain("co.uk") == "co.uk"


# ---------------------------------------------------------------------------
# TldextractOracle
# ---------------------------------------------------------------------------


class TestTldextractOracle:
    def test_multi_label_suffix(self, tld_oracle: TldextractOracle) -> None:
        assert tld_oracle.public_suffix("www.radio.bbc.co.uk") == "co.uk"
        assert tld_oracle.base_domain("www.radio.bbc.co.uk") == "bbc.co.uk"

    def test_private_domains_included_by_default(self, tld_oracle: TldextractOracle) -> None:
        assert tld_oracle.public_suffix("someone.github.io") == "github.io"
        assert tld_oracle.base_domain("pages.someone.github.io") == "someone.github.io"

    def test_private_domains_can_be_disabled(self) -> None:
        oracle = TldextractOracle(include_psl_private_domains=False)
        assert oracle.base_domain("pages.someone.github.io") == "github.io"

    def test_unlisted_tld_uses_last_label(self, tld_oracle: TldextractOracle) -> None:
        assert tld_oracle.public_suffix("box.lan.notarealtld") == "notarealtld"

    def test_localhost(self, tld_oracle: TldextractOracle) -> None:
        assert tld_oracle.base_domain("localhost") == "localhost"

    def test_leading_dot_rejected(self, tld_oracle: TldextractOracle) -> None:
        with pytest.raises(DomainResolutionError):
            tld_oracle.base_domain(".doubleclick.net")


def test_default_oracle_is_cached_until_reset() -> None:
    first = default_oracle()
    assert default_oracle() is first
    reset_default_oracle()
    assert default_oracle() is not first


def test_default_oracle_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITESCOPE_PSL_PRIVATE", "no")
    oracle = default_oracle()
    assert isinstance(oracle, TldextractOracle)
    assert oracle.include_psl_private_domains is False
