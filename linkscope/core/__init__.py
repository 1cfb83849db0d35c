"""
linkscope Core Module

Constants, errors, scope classification, lifecycle derivation and
global-preference policy shared by the link address datastructures.
"""

from .address_types import (
    LIFETIME_PERMANENT,
    LIFETIME_UNKNOWN,
    AddressFlag,
    AddressScope,
    flag_names,
    scope_name,
)
from .config import LinkScopeSettings, WireVersion
from .errors import (
    InvalidAddressDescriptor,
    InvalidAddressReason,
    LinkAddressDecodeError,
    LinkAddressEncodeError,
)
from .lifecycle import effective_flags, elapsed_realtime_ms
from .logging import configure_logging
from .preference import is_global_preferred, is_ipv6_ula
from .scope import classify_scope

__all__ = [
    "LIFETIME_PERMANENT",
    "LIFETIME_UNKNOWN",
    "AddressFlag",
    "AddressScope",
    "InvalidAddressDescriptor",
    "InvalidAddressReason",
    "LinkAddressDecodeError",
    "LinkAddressEncodeError",
    "LinkScopeSettings",
    "WireVersion",
    "classify_scope",
    "configure_logging",
    "effective_flags",
    "elapsed_realtime_ms",
    "flag_names",
    "is_global_preferred",
    "is_ipv6_ula",
    "scope_name",
]
