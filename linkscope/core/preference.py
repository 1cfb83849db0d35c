"""
Global source-address preference.

Address selection only hands out an address as a default global source
when it is universe scoped, not a unique local address, and not in a
state that makes it unusable (DAD failure, deprecation, or tentative
without optimistic DAD).
"""

from __future__ import annotations

import ipaddress
from typing import TYPE_CHECKING

from .address_types import AddressFlag, AddressScope, ElapsedMilliseconds, IPAddress

if TYPE_CHECKING:
    from ..datastructures.link_address import LinkAddress

IPV6_ULA_NETWORK = ipaddress.IPv6Network("fc00::/7")

_UNUSABLE = int(AddressFlag.DADFAILED | AddressFlag.DEPRECATED)
_TENTATIVE = int(AddressFlag.TENTATIVE)
_OPTIMISTIC = int(AddressFlag.OPTIMISTIC)


def is_ipv6_ula(address: IPAddress) -> bool:
    """True for IPv6 unique local addresses (fc00::/7)."""
    return address.version == 6 and address in IPV6_ULA_NETWORK


def flags_allow_global_preference(flags: int) -> bool:
    if flags & _UNUSABLE:
        return False
    if flags & _TENTATIVE and not flags & _OPTIMISTIC:
        return False
    return True


def is_global_preferred(
    link_address: LinkAddress, now: ElapsedMilliseconds | None = None
) -> bool:
    """
    Decide whether ``link_address`` may serve as a default global source.

    Flags are evaluated after lifetime derivation at ``now`` (the boot
    clock when omitted), so an address whose deprecation lies in the future
    is still preferred even if DEPRECATED was stored.
    """
    if link_address.scope != AddressScope.UNIVERSE:
        return False
    if is_ipv6_ula(link_address.address):
        return False
    flags = link_address.flags if now is None else link_address.flags_at(now)
    return flags_allow_global_preference(flags)
