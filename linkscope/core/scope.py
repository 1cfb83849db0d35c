"""
Routing scope classification for unicast addresses.

Each family has an ordered table of (network, scope) rows; the first row
containing the address decides its scope and anything unmatched is
UNIVERSE. IPv6 loopback is LINK scoped, only the unspecified address is
HOST scoped.
"""

from __future__ import annotations

import ipaddress

from .address_types import AddressScope, IPAddress

type ScopeTable = tuple[tuple[ipaddress.IPv4Network | ipaddress.IPv6Network, AddressScope], ...]

IPV4_SCOPE_TABLE: ScopeTable = (
    (ipaddress.IPv4Network("0.0.0.0/32"), AddressScope.HOST),
    (ipaddress.IPv4Network("127.0.0.0/8"), AddressScope.LINK),
    (ipaddress.IPv4Network("169.254.0.0/16"), AddressScope.LINK),
)

IPV6_SCOPE_TABLE: ScopeTable = (
    (ipaddress.IPv6Network("::/128"), AddressScope.HOST),
    (ipaddress.IPv6Network("::1/128"), AddressScope.LINK),
    (ipaddress.IPv6Network("fe80::/10"), AddressScope.LINK),
    # Site-local addresses are deprecated (RFC 3879) but still classified.
    (ipaddress.IPv6Network("fec0::/10"), AddressScope.SITE),
)


def scope_table_for(address: IPAddress) -> ScopeTable:
    return IPV4_SCOPE_TABLE if address.version == 4 else IPV6_SCOPE_TABLE


def classify_scope(address: IPAddress) -> AddressScope:
    """Compute the routing scope of a unicast address."""
    for network, scope in scope_table_for(address):
        if address in network:
            return scope
    return AddressScope.UNIVERSE
