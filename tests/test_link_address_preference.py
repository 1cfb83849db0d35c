"""Tests for global source-address preference."""

import ipaddress

import pytest
from hypothesis import given
from hypothesis import strategies as st

from linkscope.core.address_types import AddressFlag, AddressScope
from linkscope.core.lifecycle import elapsed_realtime_ms
from linkscope.core.preference import is_global_preferred, is_ipv6_ula
from linkscope.datastructures.link_address import LinkAddress, link_address_strategy

V4_ADDRESS = ipaddress.ip_address("192.0.2.1")
V6_ADDRESS = ipaddress.ip_address("2001:db8::1")

TEMPORARY = AddressFlag.TEMPORARY
TENTATIVE = AddressFlag.TENTATIVE
OPTIMISTIC = AddressFlag.OPTIMISTIC


class TestIsGlobalPreferred:
    """Literal cases."""

    @pytest.mark.parametrize(
        ("link_address", "description"),
        [
            (LinkAddress.of(V4_ADDRESS, 32, 0, AddressScope.UNIVERSE), "v4,global,noflags"),
            (LinkAddress.parse("10.10.1.7/23", 0, AddressScope.UNIVERSE), "v4-rfc1918,global"),
            (LinkAddress.of(V6_ADDRESS, 64, 0, AddressScope.UNIVERSE), "v6,global,noflags"),
            (
                LinkAddress.of(V6_ADDRESS, 64, AddressFlag.PERMANENT, AddressScope.UNIVERSE),
                "v6,global,permanent",
            ),
            (LinkAddress.of(V6_ADDRESS, 64, TEMPORARY, AddressScope.UNIVERSE), "v6,tempaddr"),
            (
                LinkAddress.of(
                    V6_ADDRESS, 64, TEMPORARY | TENTATIVE | OPTIMISTIC, AddressScope.UNIVERSE
                ),
                "v6,global,tempaddr+optimistic",
            ),
        ],
    )
    def test_preferred(self, link_address, description):
        assert link_address.is_global_preferred(), description
        assert is_global_preferred(link_address), description

    @pytest.mark.parametrize(
        ("link_address", "description"),
        [
            (LinkAddress.parse("10.10.1.7/23", 0, AddressScope.SITE), "v4,site-local"),
            (LinkAddress.parse("127.0.0.7/8", 0, AddressScope.HOST), "v4-localhost"),
            (LinkAddress.parse("fc12::1/64", 0, AddressScope.UNIVERSE), "v6,ula1"),
            (LinkAddress.parse("fd34::1/64", 0, AddressScope.UNIVERSE), "v6,ula2"),
            (
                LinkAddress.of(
                    V6_ADDRESS, 64, TEMPORARY | AddressFlag.DADFAILED, AddressScope.UNIVERSE
                ),
                "v6,tempaddr+dadfailed",
            ),
            (
                LinkAddress.of(
                    V6_ADDRESS, 64, TEMPORARY | AddressFlag.DEPRECATED, AddressScope.UNIVERSE
                ),
                "v6,tempaddr+deprecated",
            ),
            (LinkAddress.of(V6_ADDRESS, 64, TEMPORARY, AddressScope.SITE), "v6,site-local"),
            (LinkAddress.of(V6_ADDRESS, 64, TEMPORARY, AddressScope.LINK), "v6,link-local"),
            (LinkAddress.of(V6_ADDRESS, 64, TEMPORARY, AddressScope.HOST), "v6,node-local"),
            (
                LinkAddress.parse("::1/128", AddressFlag.PERMANENT, AddressScope.HOST),
                "v6-localhost,permanent",
            ),
            (
                LinkAddress.of(V6_ADDRESS, 64, TEMPORARY | TENTATIVE, AddressScope.UNIVERSE),
                "v6,tempaddr+tentative",
            ),
            (
                LinkAddress.of(V6_ADDRESS, 64, AddressFlag.DEPRECATED, AddressScope.UNIVERSE),
                "v6,deprecated",
            ),
        ],
    )
    def test_not_preferred(self, link_address, description):
        assert not link_address.is_global_preferred(), description

    def test_computed_scope_is_used(self):
        assert LinkAddress.parse("2001:db8::1/64").is_global_preferred()
        assert not LinkAddress.parse("fe80::1/64").is_global_preferred()
        assert not LinkAddress.parse("169.254.1.1/16").is_global_preferred()

    def test_deprecated_in_future_is_preferred(self):
        now = elapsed_realtime_ms()
        address = LinkAddress.of(
            V6_ADDRESS,
            64,
            AddressFlag.DEPRECATED,
            AddressScope.UNIVERSE,
            now + 100000,
            now + 200000,
        )
        assert address.is_global_preferred()

    def test_explicit_clock_reading(self):
        address = LinkAddress.of(V6_ADDRESS, 64, 0, AddressScope.UNIVERSE, 1000, 2000)
        assert address.is_global_preferred(999)
        assert not address.is_global_preferred(1000)
        assert not is_global_preferred(address, 1500)


class TestIpv6Ula:
    """fc00::/7 detection."""

    def test_ula_boundaries(self):
        assert is_ipv6_ula(ipaddress.IPv6Address("fc00::"))
        assert is_ipv6_ula(ipaddress.IPv6Address("fdff:ffff::1"))
        assert not is_ipv6_ula(ipaddress.IPv6Address("fe00::1"))
        assert not is_ipv6_ula(ipaddress.IPv6Address("fbff::1"))
        assert not is_ipv6_ula(ipaddress.IPv4Address("10.0.0.1"))


class TestPreferenceProperties:
    """Preference implies every rule holds."""

    @given(link_address_strategy(), st.integers(min_value=0, max_value=2**50))
    def test_preferred_addresses_satisfy_all_rules(self, link_address, now):
        if not link_address.is_global_preferred(now):
            return
        flags = link_address.flags_at(now)
        assert link_address.scope == AddressScope.UNIVERSE
        assert not is_ipv6_ula(link_address.address)
        assert not flags & (AddressFlag.DADFAILED | AddressFlag.DEPRECATED)
        assert not flags & TENTATIVE or flags & OPTIMISTIC

    @given(link_address_strategy())
    def test_non_universe_never_preferred(self, link_address):
        if link_address.scope != AddressScope.UNIVERSE:
            assert not link_address.is_global_preferred()
