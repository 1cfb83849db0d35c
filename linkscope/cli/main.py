#!/usr/bin/env python3
"""
Main CLI Entry Point for linkscope.

Provides command-line tools for working with interface addresses:
- Inspect an address/prefix: scope, effective flags, global preference
- Decode binary wire frames
- List the addresses configured on local interfaces
"""

import sys
from typing import Any

import click
import orjson
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.address_types import (
    LIFETIME_PERMANENT,
    LIFETIME_UNKNOWN,
    AddressFlag,
    AddressScope,
    flag_names,
    scope_name,
)
from ..core.config import LinkScopeSettings, WireVersion
from ..core.errors import (
    InvalidAddressDescriptor,
    LinkAddressDecodeError,
    LinkAddressEncodeError,
)
from ..core.lifecycle import elapsed_realtime_ms
from ..core.logging import configure_logging
from ..datastructures.link_address import LinkAddress
from ..datastructures.link_address_codec import (
    decode_bytes,
    decode_frame,
    encode_bytes,
    encode_link_address,
)
from ..interfaces import interface_link_addresses

console = Console()

OUTPUT_CHOICE = click.Choice(["table", "json"])
WIRE_VERSION_CHOICE = click.Choice(["legacy", "current"])


def parse_flags(value: str) -> int:
    """Parse ``0x60``, ``96`` or ``temporary|tentative`` into flag bits."""
    flags = 0
    for part in value.replace(",", "|").split("|"):
        part = part.strip()
        if not part:
            continue
        try:
            flags |= int(part, 0)
        except ValueError:
            try:
                flags |= AddressFlag[part.upper()]
            except KeyError:
                raise click.BadParameter(f"Unknown flag '{part}'") from None
    return int(flags)


def parse_scope(value: str) -> int:
    """Parse a scope name (``link``) or number (``253``)."""
    try:
        return int(value, 0)
    except ValueError:
        try:
            return AddressScope[value.strip().upper()]
        except KeyError:
            raise click.BadParameter(f"Unknown scope '{value}'") from None


def parse_lifetime(value: str) -> int:
    """Parse a lifetime in milliseconds, ``permanent`` or ``unknown``."""
    lowered = value.strip().lower()
    if lowered == "permanent":
        return LIFETIME_PERMANENT
    if lowered == "unknown":
        return LIFETIME_UNKNOWN
    try:
        return int(lowered, 0)
    except ValueError:
        raise click.BadParameter(f"Invalid lifetime '{value}'") from None


def _lifetime_text(value: int) -> str:
    if value == LIFETIME_UNKNOWN:
        return "unknown"
    if value == LIFETIME_PERMANENT:
        return "permanent"
    return str(value)


def describe_link_address(
    link_address: LinkAddress,
    now: int,
    wire_version: WireVersion = WireVersion.CURRENT,
) -> dict[str, Any]:
    """Summarize a link address for display."""
    flags = link_address.flags_at(now)
    try:
        wire = encode_bytes(encode_link_address(link_address, wire_version))
    except LinkAddressEncodeError as e:
        logger.warning("Cannot encode {}: {}", link_address, e)
        wire = None
    return {
        "address": str(link_address.address),
        "prefix_length": link_address.prefix_length,
        "family": f"ipv{link_address.address.version}",
        "scope": int(link_address.scope),
        "scope_name": scope_name(link_address.scope),
        "stored_flags": link_address.stored_flags,
        "flags": flags,
        "flag_names": list(flag_names(flags)),
        "deprecation_time": link_address.deprecation_time,
        "expiration_time": link_address.expiration_time,
        "global_preferred": link_address.is_global_preferred(now),
        "wire": wire,
    }


def _print_json(data: Any) -> None:
    click.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


def _print_description(title: str, description: dict[str, Any]) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Address", f"{description['address']}/{description['prefix_length']}")
    table.add_row("Family", description["family"])
    table.add_row("Scope", f"{description['scope_name']} ({description['scope']})")
    table.add_row(
        "Flags",
        f"{', '.join(description['flag_names']) or 'none'} (0x{description['flags']:x})",
    )
    table.add_row("Deprecation", _lifetime_text(description["deprecation_time"]))
    table.add_row("Expiration", _lifetime_text(description["expiration_time"]))
    table.add_row("Global preferred", "yes" if description["global_preferred"] else "no")
    table.add_row("Wire", description["wire"] or "-")
    console.print(table)


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--debug-scope",
    multiple=True,
    help="Emit DEBUG logs for a module scope (e.g. 'interfaces')",
)
@click.option(
    "--wire-version",
    type=WIRE_VERSION_CHOICE,
    default="current",
    help="Default wire layout for encoded frames",
)
@click.option(
    "--legacy-compatible",
    is_flag=True,
    help="Decode frames of any version by reading only the legacy fields",
)
@click.pass_context
def cli(
    ctx,
    verbose: bool,
    debug_scope: tuple[str, ...],
    wire_version: str,
    legacy_compatible: bool,
):
    """
    linkscope interface address tools.

    Inspect, encode and decode interface addresses and classify their
    routing scope and lifecycle state.
    """
    settings = LinkScopeSettings(
        log_level="DEBUG" if verbose else "INFO",
        debug_scopes=debug_scope,
        wire_version=WireVersion[wire_version.upper()],
        legacy_compatible=legacy_compatible,
    )
    configure_logging(
        settings.log_level,
        debug_scopes=settings.debug_scopes,
        colorize=settings.colorize,
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("address")
@click.option("--flags", "flags_text", default="0", help="Flag bits or names")
@click.option("--scope", "scope_text", default=None, help="Scope name or number")
@click.option("--deprecation-time", default="unknown", help="Milliseconds since boot")
@click.option("--expiration-time", default="unknown", help="Milliseconds since boot")
@click.option(
    "--wire-version",
    type=WIRE_VERSION_CHOICE,
    default=None,
    help="Wire layout for the encoded frame (defaults to the group setting)",
)
@click.option("--output", "-o", type=OUTPUT_CHOICE, default="table", help="Output format")
@click.pass_context
def inspect(
    ctx,
    address: str,
    flags_text: str,
    scope_text: str | None,
    deprecation_time: str,
    expiration_time: str,
    wire_version: str | None,
    output: str,
):
    """Inspect an ADDRESS given as address/prefix."""
    flags = parse_flags(flags_text)
    scope = None if scope_text is None else parse_scope(scope_text)
    try:
        link_address = LinkAddress.parse(
            address,
            flags,
            scope,
            parse_lifetime(deprecation_time),
            parse_lifetime(expiration_time),
        )
    except InvalidAddressDescriptor as e:
        _fail(f"Invalid link address ({e.reason.value}): {e}")
        return

    settings: LinkScopeSettings = ctx.obj["settings"]
    version = (
        settings.wire_version
        if wire_version is None
        else WireVersion[wire_version.upper()]
    )
    description = describe_link_address(link_address, elapsed_realtime_ms(), version)
    if output == "json":
        _print_json(description)
    else:
        _print_description(str(link_address), description)


@cli.command()
@click.argument("frame")
@click.option(
    "--legacy-compatible",
    is_flag=True,
    help="Read only the legacy fields and ignore trailing data",
)
@click.option("--output", "-o", type=OUTPUT_CHOICE, default="table", help="Output format")
@click.pass_context
def decode(ctx, frame: str, legacy_compatible: bool, output: str):
    """Decode a hex-encoded wire FRAME."""
    settings: LinkScopeSettings = ctx.obj["settings"]
    try:
        decoded = decode_frame(
            decode_bytes(frame),
            legacy_compatible=legacy_compatible or settings.legacy_compatible,
        )
    except LinkAddressDecodeError as e:
        _fail(f"Cannot decode frame: {e}")
        return

    description = describe_link_address(
        decoded.link_address, elapsed_realtime_ms(), decoded.version
    )
    description["wire_version"] = decoded.version.name.lower()
    if output == "json":
        _print_json(description)
    else:
        _print_description(
            f"{decoded.link_address} (wire version {int(decoded.version)})",
            description,
        )


@cli.command()
@click.argument("name", required=False)
@click.option("--output", "-o", type=OUTPUT_CHOICE, default="table", help="Output format")
@click.pass_context
def interfaces(ctx, name: str | None, output: str):
    """List IP addresses of local interfaces (or only NAME)."""
    try:
        reported = interface_link_addresses(name)
    except KeyError as e:
        _fail(str(e.args[0]))
        return

    settings: LinkScopeSettings = ctx.obj["settings"]
    now = elapsed_realtime_ms()
    if output == "json":
        _print_json(
            {
                interface: [
                    describe_link_address(address, now, settings.wire_version)
                    for address in addresses
                ]
                for interface, addresses in reported.items()
            }
        )
        return

    table = Table(title="Interface Addresses", show_header=True)
    table.add_column("Interface", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Scope", style="blue")
    table.add_column("Global preferred", style="magenta")
    for interface, addresses in sorted(reported.items()):
        for address in addresses:
            table.add_row(
                interface,
                str(address),
                scope_name(address.scope),
                "yes" if address.is_global_preferred(now) else "no",
            )
    console.print(table)


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
