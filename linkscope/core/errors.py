"""Error types raised while building and (de)serializing link addresses."""

from __future__ import annotations

from enum import Enum


class InvalidAddressReason(Enum):
    """Which construction rule a rejected descriptor violated."""

    NULL_ADDRESS = "null_address"
    PREFIX_OUT_OF_RANGE = "prefix_out_of_range"
    MULTICAST_ADDRESS = "multicast_address"
    ASYMMETRIC_LIFETIME = "asymmetric_lifetime"
    DEPRECATION_AFTER_EXPIRATION = "deprecation_after_expiration"
    NEGATIVE_TIMESTAMP = "negative_timestamp"
    INVALID_FIELD = "invalid_field"


class InvalidAddressDescriptor(ValueError):
    """Raised when a LinkAddress cannot be built from the given parts."""

    def __init__(self, reason: InvalidAddressReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message

    def __repr__(self) -> str:
        return f"InvalidAddressDescriptor({self.reason.name}, {self.message!r})"


class LinkAddressDecodeError(ValueError):
    """Raised when wire data does not hold exactly one valid link address."""

    pass


class LinkAddressEncodeError(ValueError):
    """Raised when a link address does not fit the wire field widths."""

    pass
