"""
Central logging configuration helpers for linkscope.

Library modules only emit records; the CLI installs handlers. What shows up
at DEBUG:

* ``linkscope.datastructures.link_address_codec``: every rejected binary
  frame or JSON field list, with the reason.
* ``linkscope.interfaces``: platform interface entries skipped because they
  do not form a valid LinkAddress (non-contiguous netmask, multicast).

``--debug-scope interfaces`` surfaces one of these without raising the
global level.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping

from loguru import logger

DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)


def scope_matches(record_name: str, scope: str) -> bool:
    """Match a loguru record name against a debug scope.

    Scopes may be given with or without the ``linkscope.`` package prefix.
    """
    if record_name.startswith(scope):
        return True
    return not scope.startswith("linkscope.") and record_name.startswith(
        f"linkscope.{scope}"
    )


def configure_logging(
    level: str,
    *,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
) -> tuple[int, ...]:
    """
    Replace all loguru handlers with one stderr handler at ``level``.

    When ``level`` is above DEBUG, each entry of ``debug_scopes`` (for
    example ``"interfaces"`` or ``"datastructures"``) adds a second handler
    that passes DEBUG records from the matching linkscope modules only.
    Returns the ids of the installed handlers.
    """
    logger.remove()

    handler_ids: list[int] = [
        logger.add(
            sys.stderr,
            level=level,
            format=DEFAULT_LOG_FORMAT,
            colorize=colorize,
        )
    ]

    level_upper = level.upper()
    scopes = tuple(scope.strip() for scope in debug_scopes if scope.strip())
    if scopes and level_upper != "DEBUG":

        def _debug_filter(record: object) -> bool:
            if not isinstance(record, Mapping):
                return False
            record_level = record.get("level")
            if getattr(record_level, "name", None) != "DEBUG":
                return False
            record_name = record.get("name") or ""
            return any(scope_matches(record_name, scope) for scope in scopes)

        handler_ids.append(
            logger.add(
                sys.stderr,
                level="DEBUG",
                format=DEFAULT_LOG_FORMAT,
                colorize=colorize,
                filter=_debug_filter,
            )
        )

    return tuple(handler_ids)
