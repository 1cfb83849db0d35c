from dataclasses import dataclass, field
from enum import IntEnum

LOG_LEVELS = frozenset(
    {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
)


class WireVersion(IntEnum):
    """Generations of the link address wire layout."""

    LEGACY = 1  # address, prefix length, flags, scope
    CURRENT = 2  # legacy fields plus deprecation and expiration times


@dataclass(slots=True)
class LinkScopeSettings:
    """linkscope runtime settings."""

    log_level: str = "INFO"
    debug_scopes: tuple[str, ...] = field(default_factory=tuple)
    colorize: bool = False

    # Wire codec behaviour
    wire_version: WireVersion = WireVersion.CURRENT
    legacy_compatible: bool = False

    def __post_init__(self) -> None:
        level = self.log_level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{self.log_level}', expected one of "
                f"{', '.join(sorted(LOG_LEVELS))}"
            )
        self.log_level = level
        self.wire_version = WireVersion(self.wire_version)
