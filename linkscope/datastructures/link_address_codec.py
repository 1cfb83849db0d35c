"""
Wire layouts for LinkAddress.

Two generations share one ordered field list:

    legacy  (version 1): address, prefix_length, flags, scope
    current (version 2): legacy fields + deprecation_time, expiration_time

Newer fields are only ever appended. The binary frame starts with a version
byte; the JSON form is a flat array whose field count is the version tag.
Strict decoding rejects anything it does not fully consume. Legacy
compatible decoding reads the four legacy fields and ignores the rest.
"""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from typing import Any

import orjson
from loguru import logger

from ..core.address_types import LIFETIME_UNKNOWN
from ..core.config import WireVersion
from ..core.errors import (
    InvalidAddressDescriptor,
    LinkAddressDecodeError,
    LinkAddressEncodeError,
)
from .link_address import LinkAddress

_HEADER = struct.Struct("!BB")  # version, address length
_LEGACY_FIELDS = struct.Struct("!iIi")  # prefix length, flags, scope
_LIFETIME_FIELDS = struct.Struct("!qq")  # deprecation, expiration

_ADDRESS_LENGTHS = frozenset({4, 16})

LEGACY_FIELD_COUNT = 4
CURRENT_FIELD_COUNT = 6

_FIELD_COUNTS = {
    WireVersion.LEGACY: LEGACY_FIELD_COUNT,
    WireVersion.CURRENT: CURRENT_FIELD_COUNT,
}


@dataclass(frozen=True, slots=True)
class LinkAddressFrame:
    """A decoded link address together with the layout it was read from."""

    version: WireVersion
    link_address: LinkAddress


def encode_bytes(data: bytes) -> str:
    return data.hex()


def decode_bytes(data: str) -> bytes:
    try:
        return bytes.fromhex(data.strip())
    except ValueError as e:
        raise LinkAddressDecodeError(f"Invalid hex frame: {e}") from e


def encode_link_address(
    link_address: LinkAddress, version: WireVersion = WireVersion.CURRENT
) -> bytes:
    """Encode ``link_address`` in the binary layout of ``version``."""
    version = WireVersion(version)
    packed_address = link_address.address.packed
    try:
        parts = [
            _HEADER.pack(version, len(packed_address)),
            packed_address,
            _LEGACY_FIELDS.pack(
                link_address.prefix_length,
                link_address.stored_flags,
                link_address.scope,
            ),
        ]
        if version is WireVersion.CURRENT:
            parts.append(
                _LIFETIME_FIELDS.pack(
                    link_address.deprecation_time, link_address.expiration_time
                )
            )
    except struct.error as e:
        raise LinkAddressEncodeError(
            f"{link_address!r} does not fit the version {version} layout: {e}"
        ) from e
    return b"".join(parts)


def encode_frame(frame: LinkAddressFrame) -> bytes:
    return encode_link_address(frame.link_address, frame.version)


def decode_frame(data: bytes, *, legacy_compatible: bool = False) -> LinkAddressFrame:
    """
    Decode one binary link address frame.

    Raises:
        LinkAddressDecodeError: for unknown versions, truncated or trailing
            data, non-canonical addresses, or field values that do not form
            a valid LinkAddress.
    """
    view = memoryview(data)
    try:
        raw_version, address_length = _HEADER.unpack_from(view, 0)
    except struct.error as e:
        raise _decode_error(f"Truncated header: {e}") from e

    if legacy_compatible:
        if raw_version < WireVersion.LEGACY:
            raise _decode_error(f"Unknown wire version {raw_version}")
        version = WireVersion.LEGACY
    else:
        try:
            version = WireVersion(raw_version)
        except ValueError as e:
            raise _decode_error(f"Unknown wire version {raw_version}") from e

    if address_length not in _ADDRESS_LENGTHS:
        raise _decode_error(f"Invalid address length {address_length}")

    offset = _HEADER.size
    packed_address = bytes(view[offset : offset + address_length])
    if len(packed_address) != address_length:
        raise _decode_error("Truncated address")
    offset += address_length

    address = ipaddress.ip_address(packed_address)
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        raise _decode_error(
            f"IPv4-mapped address {address} must be encoded in its 4-byte form"
        )

    try:
        prefix_length, flags, scope = _LEGACY_FIELDS.unpack_from(view, offset)
        offset += _LEGACY_FIELDS.size
        if version is WireVersion.CURRENT:
            deprecation_time, expiration_time = _LIFETIME_FIELDS.unpack_from(
                view, offset
            )
            offset += _LIFETIME_FIELDS.size
        else:
            deprecation_time = expiration_time = LIFETIME_UNKNOWN
    except struct.error as e:
        raise _decode_error(f"Truncated fields: {e}") from e

    if offset != len(view) and not legacy_compatible:
        raise _decode_error(
            f"{len(view) - offset} unexpected trailing bytes after version "
            f"{version} frame"
        )

    try:
        link_address = LinkAddress(
            address=address,
            prefix_length=prefix_length,
            stored_flags=flags,
            scope=scope,
            deprecation_time=deprecation_time,
            expiration_time=expiration_time,
        )
    except InvalidAddressDescriptor as e:
        raise _decode_error(f"Invalid link address fields: {e}") from e

    return LinkAddressFrame(version=version, link_address=link_address)


def decode_link_address(data: bytes, *, legacy_compatible: bool = False) -> LinkAddress:
    """Decode a binary frame of either layout into a LinkAddress."""
    return decode_frame(data, legacy_compatible=legacy_compatible).link_address


def link_address_fields(
    link_address: LinkAddress, version: WireVersion = WireVersion.CURRENT
) -> list[Any]:
    """Ordered field list of ``link_address`` for the given layout."""
    fields: list[Any] = [
        str(link_address.address),
        link_address.prefix_length,
        link_address.stored_flags,
        int(link_address.scope),
    ]
    if WireVersion(version) is WireVersion.CURRENT:
        fields.extend([link_address.deprecation_time, link_address.expiration_time])
    return fields


def link_address_to_json(
    link_address: LinkAddress, version: WireVersion = WireVersion.CURRENT
) -> bytes:
    return orjson.dumps(link_address_fields(link_address, version))


def link_address_from_json(
    data: bytes | str, *, legacy_compatible: bool = False
) -> LinkAddress:
    """Decode the JSON field list; 4 fields are legacy, 6 are current."""
    try:
        fields = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise _decode_error(f"Invalid JSON: {e}") from e

    if not isinstance(fields, list):
        raise _decode_error(f"Expected a JSON array, got {type(fields).__name__}")

    count = len(fields)
    if legacy_compatible:
        if count < LEGACY_FIELD_COUNT:
            raise _decode_error(f"Expected at least 4 fields, got {count}")
        fields = fields[:LEGACY_FIELD_COUNT]
    elif count not in _FIELD_COUNTS.values():
        raise _decode_error(f"Expected 4 or 6 fields, got {count}")

    address, prefix_length, flags, scope, *lifetimes = fields
    if not isinstance(address, str):
        raise _decode_error(f"Address field must be a string, got {address!r}")
    _check_canonical_address_text(address)
    for name, value in (
        ("prefix_length", prefix_length),
        ("flags", flags),
        ("scope", scope),
        *zip(("deprecation_time", "expiration_time"), lifetimes),
    ):
        if not isinstance(value, int) or isinstance(value, bool):
            raise _decode_error(f"Field {name} must be an integer, got {value!r}")

    deprecation_time, expiration_time = lifetimes or (LIFETIME_UNKNOWN, LIFETIME_UNKNOWN)
    try:
        return LinkAddress.of(
            address, prefix_length, flags, scope, deprecation_time, expiration_time
        )
    except InvalidAddressDescriptor as e:
        raise _decode_error(f"Invalid link address fields: {e}") from e


def _check_canonical_address_text(text: str) -> None:
    """Reject address text that would not survive a re-encode unchanged."""
    try:
        address = ipaddress.ip_address(text)
    except ValueError as e:
        raise _decode_error(f"Unparsable address {text!r}") from e

    if isinstance(address, ipaddress.IPv6Address):
        if address.ipv4_mapped is not None:
            raise _decode_error(
                f"IPv4-mapped address {text} must be written in its IPv4 form"
            )
        if address.scope_id is not None:
            raise _decode_error(f"Address {text} carries a zone identifier")
    if str(address) != text:
        raise _decode_error(
            f"Address {text!r} is not in canonical form ({address})"
        )


def _decode_error(message: str) -> LinkAddressDecodeError:
    logger.debug("Rejecting link address wire data: {}", message)
    return LinkAddressDecodeError(message)
