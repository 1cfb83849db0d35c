"""
Immutable interface address descriptor.

A LinkAddress is one address assigned to a network interface: the IP
address and prefix length, the kernel flag bits, the routing scope, and an
optional pair of lifetimes (deprecation and expiration, in milliseconds of
elapsed-since-boot time).

All construction paths (``LinkAddress(...)``, ``LinkAddress.of``,
``LinkAddress.parse`` and ``LinkAddress.from_interface_address``) end in
``__post_init__``, which is the only place the validation rules live.
"""

from __future__ import annotations

import ipaddress
import operator
import socket
from dataclasses import dataclass
from typing import Any, Protocol

from hypothesis import strategies as st

from ..core.address_types import (
    LIFETIME_PERMANENT,
    LIFETIME_UNKNOWN,
    AddressFlag,
    AddressScope,
    ElapsedMilliseconds,
    FlagBits,
    IPAddress,
    LifetimeMilliseconds,
    PrefixLength,
    ScopeValue,
    max_prefix_length,
)
from ..core.errors import InvalidAddressDescriptor, InvalidAddressReason
from ..core.lifecycle import effective_flags, elapsed_realtime_ms, has_lifetimes
from ..core.preference import is_global_preferred
from ..core.scope import classify_scope


class InterfaceAddressLike(Protocol):
    """Shape of a platform interface address (e.g. ``psutil`` snicaddr)."""

    family: Any
    address: str | None
    netmask: str | None


def coerce_address(value: object) -> IPAddress:
    """
    Turn ``value`` into an IPv4Address or IPv6Address.

    IPv4-mapped IPv6 addresses collapse to their IPv4 form and IPv6 zone
    identifiers are dropped, so equal addresses always compare equal.
    """
    if value is None:
        raise InvalidAddressDescriptor(
            InvalidAddressReason.NULL_ADDRESS, "Address cannot be None"
        )

    if isinstance(value, ipaddress.IPv4Address | ipaddress.IPv6Address):
        address: IPAddress = value
    elif isinstance(value, str | bytes):
        try:
            address = ipaddress.ip_address(
                value.strip() if isinstance(value, str) else value
            )
        except ValueError as e:
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS,
                f"Unparsable IP address {value!r}",
            ) from e
    else:
        raise InvalidAddressDescriptor(
            InvalidAddressReason.NULL_ADDRESS,
            f"Expected an IP address, got {type(value).__name__}",
        )

    if isinstance(address, ipaddress.IPv6Address):
        if address.ipv4_mapped is not None:
            return address.ipv4_mapped
        if address.scope_id is not None:
            return ipaddress.IPv6Address(address.packed)
    return address


def prefix_from_netmask(netmask: str, address: IPAddress) -> PrefixLength:
    """Prefix length of a contiguous netmask in the address family."""
    try:
        mask = ipaddress.ip_address(netmask.split("%", 1)[0])
    except ValueError as e:
        raise InvalidAddressDescriptor(
            InvalidAddressReason.PREFIX_OUT_OF_RANGE,
            f"Unparsable netmask {netmask!r}",
        ) from e

    bits = max_prefix_length(address)
    if mask.max_prefixlen != bits:
        raise InvalidAddressDescriptor(
            InvalidAddressReason.PREFIX_OUT_OF_RANGE,
            f"Netmask {netmask} does not match the family of {address}",
        )

    value = int(mask)
    prefix = bits - (((1 << bits) - 1) ^ value).bit_length()
    if value != ((1 << bits) - 1) ^ ((1 << (bits - prefix)) - 1):
        raise InvalidAddressDescriptor(
            InvalidAddressReason.PREFIX_OUT_OF_RANGE,
            f"Netmask {netmask} is not contiguous",
        )
    return prefix


def _parse_prefix(text: str) -> PrefixLength:
    if not (text.isascii() and text.isdigit()):
        raise InvalidAddressDescriptor(
            InvalidAddressReason.PREFIX_OUT_OF_RANGE,
            f"Invalid prefix length {text!r}",
        )
    return int(text)


def _as_integer(value: object, reason: InvalidAddressReason, field: str) -> int:
    try:
        return operator.index(value)
    except TypeError as e:
        raise InvalidAddressDescriptor(
            reason, f"{field} must be an integer, got {value!r}"
        ) from e


def _normalize_scope(scope: object) -> ScopeValue:
    value = _as_integer(scope, InvalidAddressReason.INVALID_FIELD, "Scope")
    try:
        return AddressScope(value)
    except ValueError:
        return value


@dataclass(frozen=True, slots=True, eq=False)
class LinkAddress:
    """
    One address assigned to a network interface.

    Equality covers address, prefix length, stored flags and scope; use
    ``is_same_address_as`` to compare address and prefix length only.
    Lifetimes never take part in either comparison.
    """

    address: IPAddress
    prefix_length: PrefixLength
    stored_flags: FlagBits = 0
    scope: ScopeValue | None = None
    deprecation_time: LifetimeMilliseconds = LIFETIME_UNKNOWN
    expiration_time: LifetimeMilliseconds = LIFETIME_UNKNOWN

    def __post_init__(self) -> None:
        address = coerce_address(self.address)

        prefix_length = self.prefix_length
        if (
            not isinstance(prefix_length, int)
            or isinstance(prefix_length, bool)
            or not 0 <= prefix_length <= max_prefix_length(address)
        ):
            raise InvalidAddressDescriptor(
                InvalidAddressReason.PREFIX_OUT_OF_RANGE,
                f"Prefix length {prefix_length!r} out of range for IPv{address.version}",
            )

        if address.is_multicast:
            raise InvalidAddressDescriptor(
                InvalidAddressReason.MULTICAST_ADDRESS,
                f"Multicast address {address} cannot be an interface address",
            )

        deprecation_time = _as_integer(
            self.deprecation_time,
            InvalidAddressReason.NEGATIVE_TIMESTAMP,
            "Deprecation time",
        )
        expiration_time = _as_integer(
            self.expiration_time,
            InvalidAddressReason.NEGATIVE_TIMESTAMP,
            "Expiration time",
        )
        if (deprecation_time == LIFETIME_UNKNOWN) != (
            expiration_time == LIFETIME_UNKNOWN
        ):
            raise InvalidAddressDescriptor(
                InvalidAddressReason.ASYMMETRIC_LIFETIME,
                "Deprecation and expiration times must both be set or both be unknown",
            )
        for lifetime in (deprecation_time, expiration_time):
            if not 0 <= lifetime <= LIFETIME_PERMANENT:
                raise InvalidAddressDescriptor(
                    InvalidAddressReason.NEGATIVE_TIMESTAMP,
                    f"Lifetime {lifetime} outside 0..LIFETIME_PERMANENT",
                )
        if deprecation_time > expiration_time:
            raise InvalidAddressDescriptor(
                InvalidAddressReason.DEPRECATION_AFTER_EXPIRATION,
                f"Deprecation time {deprecation_time} is after expiration time "
                f"{expiration_time}",
            )

        stored_flags = _as_integer(
            self.stored_flags, InvalidAddressReason.INVALID_FIELD, "Flags"
        )
        scope = (
            classify_scope(address) if self.scope is None else _normalize_scope(self.scope)
        )

        object.__setattr__(self, "address", address)
        object.__setattr__(self, "stored_flags", stored_flags)
        object.__setattr__(self, "scope", scope)
        object.__setattr__(self, "deprecation_time", deprecation_time)
        object.__setattr__(self, "expiration_time", expiration_time)

    @classmethod
    def of(
        cls,
        address: IPAddress | str | bytes,
        prefix_length: PrefixLength,
        flags: FlagBits = 0,
        scope: ScopeValue | None = None,
        deprecation_time: LifetimeMilliseconds = LIFETIME_UNKNOWN,
        expiration_time: LifetimeMilliseconds = LIFETIME_UNKNOWN,
    ) -> LinkAddress:
        """Create a link address from an address and prefix length."""
        return cls(
            address=address,
            prefix_length=prefix_length,
            stored_flags=flags,
            scope=scope,
            deprecation_time=deprecation_time,
            expiration_time=expiration_time,
        )

    @classmethod
    def parse(
        cls,
        text: str,
        flags: FlagBits = 0,
        scope: ScopeValue | None = None,
        deprecation_time: LifetimeMilliseconds = LIFETIME_UNKNOWN,
        expiration_time: LifetimeMilliseconds = LIFETIME_UNKNOWN,
    ) -> LinkAddress:
        """
        Create a link address from ``"<address>/<prefix length>"``.

        Raises:
            InvalidAddressDescriptor: NULL_ADDRESS when the address part is
                missing or unparsable, PREFIX_OUT_OF_RANGE when the prefix is
                missing or not a non-negative integer, and any reason the
                constructor raises for the parsed parts.
        """
        if not isinstance(text, str):
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS,
                f"Expected 'address/prefix' text, got {type(text).__name__}",
            )
        address_text, separator, prefix_text = text.strip().rpartition("/")
        if not separator:
            address_text, prefix_text = prefix_text, ""
        address = coerce_address(address_text)
        if not separator:
            raise InvalidAddressDescriptor(
                InvalidAddressReason.PREFIX_OUT_OF_RANGE,
                f"Missing prefix length in {text!r}",
            )
        return cls.of(
            address,
            _parse_prefix(prefix_text),
            flags,
            scope,
            deprecation_time,
            expiration_time,
        )

    @classmethod
    def from_interface_address(cls, entry: InterfaceAddressLike) -> LinkAddress:
        """
        Create a link address from a platform interface address entry.

        ``entry`` needs ``family``, ``address`` and ``netmask`` attributes,
        which ``psutil.net_if_addrs()`` entries provide. A missing netmask
        means a host route (full-length prefix).
        """
        if entry is None:
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS, "Interface address cannot be None"
            )
        family = getattr(entry, "family", None)
        if family not in (socket.AF_INET, socket.AF_INET6):
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS,
                f"Interface address family {family!r} is not IPv4 or IPv6",
            )

        text = getattr(entry, "address", None)
        if not isinstance(text, str):
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS,
                f"Interface address {text!r} is not an address string",
            )
        try:
            # Zone identifiers ("fe80::1%eth0") are dropped.
            raw_address = ipaddress.ip_address(text.split("%", 1)[0])
        except ValueError as e:
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS,
                f"Unparsable interface address {text!r}",
            ) from e
        if raw_address.version != (4 if family == socket.AF_INET else 6):
            raise InvalidAddressDescriptor(
                InvalidAddressReason.NULL_ADDRESS,
                f"Address {text} does not belong to family {family!r}",
            )

        netmask = getattr(entry, "netmask", None)
        if netmask is None:
            prefix_length = max_prefix_length(raw_address)
        else:
            prefix_length = prefix_from_netmask(netmask, raw_address)

        return cls.of(raw_address, prefix_length)

    @property
    def is_ipv4(self) -> bool:
        return self.address.version == 4

    @property
    def is_ipv6(self) -> bool:
        return self.address.version == 6

    @property
    def network(self) -> ipaddress.IPv4Interface | ipaddress.IPv6Interface:
        """The address together with its prefix as an ``ipaddress`` interface."""
        return ipaddress.ip_interface(f"{self.address}/{self.prefix_length}")

    @property
    def has_lifetimes(self) -> bool:
        return has_lifetimes(self.deprecation_time, self.expiration_time)

    @property
    def flags(self) -> FlagBits:
        """Flags as observed now, after lifetime derivation."""
        return self.flags_at(elapsed_realtime_ms())

    def flags_at(self, now: ElapsedMilliseconds) -> FlagBits:
        """Flags as observed at elapsed-since-boot time ``now``."""
        return effective_flags(
            self.stored_flags, self.deprecation_time, self.expiration_time, now
        )

    def is_deprecated_at(self, now: ElapsedMilliseconds) -> bool:
        return bool(self.flags_at(now) & AddressFlag.DEPRECATED)

    def is_permanent_at(self, now: ElapsedMilliseconds) -> bool:
        return bool(self.flags_at(now) & AddressFlag.PERMANENT)

    def is_global_preferred(self, now: ElapsedMilliseconds | None = None) -> bool:
        """Whether this address may be used as a default global source."""
        return is_global_preferred(self, now)

    def is_same_address_as(self, other: LinkAddress | None) -> bool:
        """Compare address and prefix length, ignoring flags and scope."""
        if not isinstance(other, LinkAddress):
            return False
        return (
            self.address == other.address
            and self.prefix_length == other.prefix_length
        )

    def with_lifetimes(
        self,
        deprecation_time: LifetimeMilliseconds,
        expiration_time: LifetimeMilliseconds,
    ) -> LinkAddress:
        """Return a copy of this address carrying a new lifetime pair."""
        return LinkAddress(
            address=self.address,
            prefix_length=self.prefix_length,
            stored_flags=self.stored_flags,
            scope=self.scope,
            deprecation_time=deprecation_time,
            expiration_time=expiration_time,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkAddress):
            return NotImplemented
        return (
            self.address == other.address
            and self.prefix_length == other.prefix_length
            and self.stored_flags == other.stored_flags
            and self.scope == other.scope
        )

    def __hash__(self) -> int:
        return hash((self.address, self.prefix_length, self.stored_flags, self.scope))

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix_length}"


# Hypothesis strategies for property-based testing
def ipv4_unicast_strategy() -> st.SearchStrategy[ipaddress.IPv4Address]:
    """Generate IPv4 addresses outside 224.0.0.0/4."""
    return st.ip_addresses(v=4).filter(lambda address: not address.is_multicast)


def ipv6_unicast_strategy() -> st.SearchStrategy[ipaddress.IPv6Address]:
    """Generate IPv6 addresses outside ff00::/8 that are not IPv4-mapped."""
    return st.ip_addresses(v=6).filter(
        lambda address: not address.is_multicast and address.ipv4_mapped is None
    )


def flags_strategy() -> st.SearchStrategy[int]:
    return st.one_of(
        st.just(0),
        st.sampled_from(list(AddressFlag)).map(int),
        st.integers(min_value=0, max_value=2**32 - 1),
    )


def scope_strategy() -> st.SearchStrategy[int | None]:
    return st.one_of(
        st.none(),
        st.sampled_from(list(AddressScope)),
        st.integers(min_value=-(2**31), max_value=2**31 - 1),
    )


def lifetime_pair_strategy() -> st.SearchStrategy[tuple[int, int]]:
    """Generate (deprecation, expiration) pairs that pass validation."""
    concrete = st.integers(min_value=1, max_value=2**48)
    return st.one_of(
        st.just((LIFETIME_UNKNOWN, LIFETIME_UNKNOWN)),
        st.just((LIFETIME_PERMANENT, LIFETIME_PERMANENT)),
        st.tuples(concrete, concrete).map(lambda pair: tuple(sorted(pair))),
        st.tuples(concrete, st.just(LIFETIME_PERMANENT)),
    )


def _build_link_address(
    address_strategy: st.SearchStrategy[IPAddress], with_lifetimes: bool
) -> st.SearchStrategy[LinkAddress]:
    @st.composite
    def build(draw):
        address = draw(address_strategy)
        prefix_length = draw(
            st.integers(min_value=0, max_value=max_prefix_length(address))
        )
        deprecation_time, expiration_time = (
            draw(lifetime_pair_strategy())
            if with_lifetimes
            else (LIFETIME_UNKNOWN, LIFETIME_UNKNOWN)
        )
        return LinkAddress(
            address=address,
            prefix_length=prefix_length,
            stored_flags=draw(flags_strategy()),
            scope=draw(scope_strategy()),
            deprecation_time=deprecation_time,
            expiration_time=expiration_time,
        )

    return build()


def ipv4_link_address_strategy(
    with_lifetimes: bool = True,
) -> st.SearchStrategy[LinkAddress]:
    """Generate valid IPv4 LinkAddress instances for testing."""
    return _build_link_address(ipv4_unicast_strategy(), with_lifetimes)


def ipv6_link_address_strategy(
    with_lifetimes: bool = True,
) -> st.SearchStrategy[LinkAddress]:
    """Generate valid IPv6 LinkAddress instances for testing."""
    return _build_link_address(ipv6_unicast_strategy(), with_lifetimes)


def link_address_strategy(with_lifetimes: bool = True) -> st.SearchStrategy[LinkAddress]:
    """Generate valid LinkAddress instances of either family."""
    return st.one_of(
        ipv4_link_address_strategy(with_lifetimes),
        ipv6_link_address_strategy(with_lifetimes),
    )
