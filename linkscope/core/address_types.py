"""
Constants and semantic type aliases for interface addresses.

Flag and scope values match the Linux ``IFA_F_*`` and ``RT_SCOPE_*``
constants so that descriptors can be exchanged with netlink-derived data
without translation.
"""

from __future__ import annotations

import ipaddress
from enum import IntEnum, IntFlag

# Address types
type IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
type PrefixLength = int

# Flag and scope types
type FlagBits = int
type ScopeValue = int

# Lifetime types (elapsed-since-boot milliseconds)
type ElapsedMilliseconds = int
type LifetimeMilliseconds = int

LIFETIME_UNKNOWN: LifetimeMilliseconds = 0
LIFETIME_PERMANENT: LifetimeMilliseconds = 2**63 - 1

IPV4_MAX_PREFIX: PrefixLength = 32
IPV6_MAX_PREFIX: PrefixLength = 128


class AddressFlag(IntFlag):
    """Per-address state bits reported by the kernel."""

    TEMPORARY = 0x01
    NODAD = 0x02
    OPTIMISTIC = 0x04
    DADFAILED = 0x08
    HOMEADDRESS = 0x10
    DEPRECATED = 0x20
    TENTATIVE = 0x40
    PERMANENT = 0x80
    MANAGETEMPADDR = 0x100
    NOPREFIXROUTE = 0x200
    MCAUTOJOIN = 0x400
    STABLE_PRIVACY = 0x800


class AddressScope(IntEnum):
    """
    Routing scope of an address.

    Larger values are narrower scopes; UNIVERSE is the only zero value.
    """

    UNIVERSE = 0
    SITE = 200
    LINK = 253
    HOST = 254
    NOWHERE = 255


def max_prefix_length(address: IPAddress) -> PrefixLength:
    """Largest valid prefix length for the address family."""
    return IPV4_MAX_PREFIX if address.version == 4 else IPV6_MAX_PREFIX


def scope_name(scope: ScopeValue) -> str:
    """Readable name for a scope value, falling back to the raw number."""
    try:
        return AddressScope(scope).name.lower()
    except ValueError:
        return str(scope)


def flag_names(flags: FlagBits) -> tuple[str, ...]:
    """Names of the known flag bits set in ``flags``, lowest bit first."""
    return tuple(
        str(member.name).lower() for member in AddressFlag if flags & member
    )
