"""
Lifecycle flag derivation.

Deprecation and expiration times are expressed in milliseconds of
elapsed-since-boot time. The DEPRECATED and PERMANENT bits that callers
observe are derived from those times at read time; the flags stored in a
descriptor are never rewritten.
"""

from __future__ import annotations

import time

from .address_types import (
    LIFETIME_PERMANENT,
    LIFETIME_UNKNOWN,
    AddressFlag,
    ElapsedMilliseconds,
    FlagBits,
    LifetimeMilliseconds,
)

# Plain ints so that clearing a bit keeps unknown high bits intact.
_DEPRECATED = int(AddressFlag.DEPRECATED)
_PERMANENT = int(AddressFlag.PERMANENT)


def elapsed_realtime_ms() -> ElapsedMilliseconds:
    """
    Milliseconds since boot, including time spent suspended.

    Uses CLOCK_BOOTTIME where the platform has it and the monotonic clock
    elsewhere. Never reads the wall clock, so adjustments to the system
    time do not change derived flags.
    """
    if hasattr(time, "CLOCK_BOOTTIME"):
        return time.clock_gettime_ns(time.CLOCK_BOOTTIME) // 1_000_000
    return time.monotonic_ns() // 1_000_000


def has_lifetimes(
    deprecation_time: LifetimeMilliseconds, expiration_time: LifetimeMilliseconds
) -> bool:
    """True when the lifetime pair carries information (not both unknown)."""
    return not (
        deprecation_time == LIFETIME_UNKNOWN and expiration_time == LIFETIME_UNKNOWN
    )


def effective_flags(
    stored_flags: FlagBits,
    deprecation_time: LifetimeMilliseconds,
    expiration_time: LifetimeMilliseconds,
    now: ElapsedMilliseconds,
) -> FlagBits:
    """
    Reconcile stored flags with the lifetime pair at time ``now``.

    Addresses built without lifetimes keep their stored flags. Otherwise
    DEPRECATED follows ``now >= deprecation_time`` and PERMANENT is set only
    when both times are LIFETIME_PERMANENT.
    """
    if not has_lifetimes(deprecation_time, expiration_time):
        return stored_flags

    flags = int(stored_flags)
    if now >= deprecation_time:
        flags |= _DEPRECATED
    else:
        flags &= ~_DEPRECATED

    if deprecation_time == LIFETIME_PERMANENT and expiration_time == LIFETIME_PERMANENT:
        flags |= _PERMANENT
    else:
        flags &= ~_PERMANENT

    return flags
