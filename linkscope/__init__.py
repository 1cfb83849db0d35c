"""
linkscope - network interface address model

Immutable descriptors for addresses assigned to network interfaces, with
routing scope classification, lifetime-derived flags and global source
address preference.

## Quick Start

```python
from linkscope import AddressFlag, LinkAddress

address = LinkAddress.parse("2001:db8::1/64", flags=AddressFlag.TEMPORARY)
address.scope                  # AddressScope.UNIVERSE
address.is_global_preferred()  # True
```
"""

from .core import (
    LIFETIME_PERMANENT,
    LIFETIME_UNKNOWN,
    AddressFlag,
    AddressScope,
    InvalidAddressDescriptor,
    InvalidAddressReason,
    LinkAddressDecodeError,
    LinkAddressEncodeError,
    LinkScopeSettings,
    WireVersion,
    classify_scope,
    configure_logging,
    effective_flags,
    elapsed_realtime_ms,
    is_global_preferred,
    is_ipv6_ula,
)
from .datastructures import (
    LinkAddress,
    LinkAddressFrame,
    decode_frame,
    decode_link_address,
    encode_frame,
    encode_link_address,
    link_address_from_json,
    link_address_to_json,
)
from .interfaces import interface_link_addresses

__version__ = "0.1.0"

__all__ = [
    "LIFETIME_PERMANENT",
    "LIFETIME_UNKNOWN",
    "AddressFlag",
    "AddressScope",
    "InvalidAddressDescriptor",
    "InvalidAddressReason",
    "LinkAddress",
    "LinkAddressDecodeError",
    "LinkAddressEncodeError",
    "LinkAddressFrame",
    "LinkScopeSettings",
    "WireVersion",
    "classify_scope",
    "configure_logging",
    "decode_frame",
    "decode_link_address",
    "effective_flags",
    "elapsed_realtime_ms",
    "encode_frame",
    "encode_link_address",
    "interface_link_addresses",
    "is_global_preferred",
    "is_ipv6_ula",
    "link_address_from_json",
    "link_address_to_json",
]
