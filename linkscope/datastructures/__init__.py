"""
linkscope datastructures.

- LinkAddress: immutable interface address descriptor
- Wire codec: legacy (4 field) and current (6 field) layouts
"""

from __future__ import annotations

from .link_address import (
    LinkAddress,
    ipv4_link_address_strategy,
    ipv6_link_address_strategy,
    lifetime_pair_strategy,
    link_address_strategy,
)
from .link_address_codec import (
    LinkAddressFrame,
    decode_frame,
    decode_link_address,
    encode_frame,
    encode_link_address,
    link_address_from_json,
    link_address_to_json,
)

__all__ = [
    "LinkAddress",
    "LinkAddressFrame",
    "decode_frame",
    "decode_link_address",
    "encode_frame",
    "encode_link_address",
    "ipv4_link_address_strategy",
    "ipv6_link_address_strategy",
    "lifetime_pair_strategy",
    "link_address_from_json",
    "link_address_strategy",
    "link_address_to_json",
]
