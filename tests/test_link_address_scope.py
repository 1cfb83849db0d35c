"""Tests for routing scope classification."""

import ipaddress

import pytest
from hypothesis import given

from linkscope.core.address_types import AddressScope, scope_name
from linkscope.core.scope import IPV4_SCOPE_TABLE, IPV6_SCOPE_TABLE, classify_scope
from linkscope.datastructures.link_address import (
    LinkAddress,
    ipv4_unicast_strategy,
    ipv6_unicast_strategy,
)


class TestScopeTable:
    """Literal classification cases."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("::/128", AddressScope.HOST),
            ("0.0.0.0/32", AddressScope.HOST),
            ("::1/128", AddressScope.LINK),
            ("127.0.0.5/8", AddressScope.LINK),
            ("fe80::ace:d00d/64", AddressScope.LINK),
            ("169.254.5.12/16", AddressScope.LINK),
            ("fec0::dead/64", AddressScope.SITE),
            ("10.1.2.3/21", AddressScope.UNIVERSE),
            ("192.0.2.1/25", AddressScope.UNIVERSE),
            ("2001:db8::/64", AddressScope.UNIVERSE),
            ("5000::/127", AddressScope.UNIVERSE),
        ],
    )
    def test_address_scopes(self, text, expected):
        assert LinkAddress.parse(text).scope == expected

    def test_ipv6_loopback_is_link_not_host(self):
        assert classify_scope(ipaddress.IPv6Address("::1")) is AddressScope.LINK

    def test_ula_is_universe(self):
        assert classify_scope(ipaddress.IPv6Address("fd00::1")) is AddressScope.UNIVERSE

    def test_block_boundaries(self):
        assert classify_scope(ipaddress.IPv6Address("febf:ffff::1")) is AddressScope.LINK
        assert classify_scope(ipaddress.IPv6Address("fec0::")) is AddressScope.SITE
        assert classify_scope(ipaddress.IPv6Address("feff::1")) is AddressScope.SITE
        assert classify_scope(ipaddress.IPv6Address("fe7f::1")) is AddressScope.UNIVERSE
        assert classify_scope(ipaddress.IPv4Address("169.253.255.255")) is AddressScope.UNIVERSE
        assert classify_scope(ipaddress.IPv4Address("128.0.0.1")) is AddressScope.UNIVERSE

    def test_explicit_scope_overrides_classifier(self):
        assert LinkAddress.parse("fe80::1/64", scope=AddressScope.UNIVERSE).scope == 0
        assert LinkAddress.parse("10.0.0.1/8", scope=AddressScope.SITE).scope == 200

    def test_tables_are_family_specific(self):
        assert all(network.version == 4 for network, _ in IPV4_SCOPE_TABLE)
        assert all(network.version == 6 for network, _ in IPV6_SCOPE_TABLE)

    def test_scope_names(self):
        assert scope_name(AddressScope.LINK) == "link"
        assert scope_name(0) == "universe"
        assert scope_name(456) == "456"


class TestScopeProperties:
    """Classification is total and matches the table."""

    @given(ipv4_unicast_strategy())
    def test_ipv4_never_site_scoped(self, address):
        scope = classify_scope(address)
        assert scope in (AddressScope.HOST, AddressScope.LINK, AddressScope.UNIVERSE)
        if scope is AddressScope.LINK:
            assert address.is_loopback or address.is_link_local

    @given(ipv6_unicast_strategy())
    def test_ipv6_matches_address_properties(self, address):
        scope = classify_scope(address)
        if address.is_unspecified:
            assert scope is AddressScope.HOST
        elif address.is_loopback or address.is_link_local:
            assert scope is AddressScope.LINK
        elif address.is_site_local:
            assert scope is AddressScope.SITE
        else:
            assert scope is AddressScope.UNIVERSE
