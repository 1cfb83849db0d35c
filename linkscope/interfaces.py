"""
Platform interface addresses as LinkAddress values.

Reads the addresses the operating system reports for each interface through
psutil and converts the IPv4 and IPv6 entries. Link-layer entries (AF_PACKET,
AF_LINK) are skipped.
"""

from __future__ import annotations

import socket

import psutil
from loguru import logger

from .core.errors import InvalidAddressDescriptor
from .datastructures.link_address import LinkAddress

IP_FAMILIES = frozenset({socket.AF_INET, socket.AF_INET6})


def interface_link_addresses(
    name: str | None = None,
) -> dict[str, tuple[LinkAddress, ...]]:
    """
    Map interface names to their IP link addresses.

    Args:
        name: Only report this interface.

    Raises:
        KeyError: If ``name`` is given and no such interface exists.
    """
    reported = psutil.net_if_addrs()
    if name is not None:
        if name not in reported:
            raise KeyError(f"Unknown network interface '{name}'")
        reported = {name: reported[name]}

    result: dict[str, tuple[LinkAddress, ...]] = {}
    for interface, entries in reported.items():
        addresses: list[LinkAddress] = []
        for entry in entries:
            if entry.family not in IP_FAMILIES:
                continue
            try:
                addresses.append(LinkAddress.from_interface_address(entry))
            except InvalidAddressDescriptor as e:
                logger.debug(
                    "Skipping {} address {} on {}: {}",
                    entry.family,
                    entry.address,
                    interface,
                    e,
                )
        result[interface] = tuple(addresses)
    return result
