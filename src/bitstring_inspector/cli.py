"""
Command-line interface for Bitstring Inspector.

Usage:
    bsl-inspect https://example.com/status/1
    bsl-inspect status-list.json --bit 42
    cat status-list.json | bsl-inspect - --range 0 63
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bitstring_inspector.bits import BitStatus, count_set_bits
from bitstring_inspector.errors import DetailedError, ErrorCode, create_error
from bitstring_inspector.models import DecodedStatusList, StatusListResult
from bitstring_inspector.service import (
    StatusListFetcher,
    decode_document,
    format_credential_info,
)


console = Console()

EXIT_OK = 0
EXIT_QUERY_ERROR = 1
EXIT_PIPELINE_ERROR = 2


def configure_logging(verbose: bool) -> None:
    """Send library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_document(source: str, fetcher: StatusListFetcher) -> StatusListResult:
    """Decode a status list from a URL, a file, or stdin ("-")."""
    if source.startswith("http://") or source.startswith("https://"):
        return fetcher.fetch_status_list(source)

    if source == "-":
        content = sys.stdin.read()
    else:
        path = Path(source)
        if not path.exists():
            raise click.ClickException(f"File not found: {source}")
        if not path.is_file():
            raise click.ClickException(f"Not a file: {source}")
        try:
            content = path.read_bytes()
        except OSError as e:
            raise click.ClickException(f"Cannot read {source}: {e.strerror or e}")

    try:
        document = json.loads(content)
    except (ValueError, RecursionError) as e:
        return StatusListResult.failed(
            create_error(
                ErrorCode.INVALID_JSON,
                "Invalid JSON document",
                str(e) or type(e).__name__,
                suggestion="Verify the input is a valid credential document.",
            )
        )
    return decode_document(document)


def format_error(error: DetailedError) -> None:
    """Print a DetailedError."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Code", f"[bold red]{error.code.value}[/]")
    table.add_row("Message", escape(error.message))
    if error.details:
        table.add_row("Details", escape(error.details))
    if error.status_code is not None:
        table.add_row("HTTP Status", str(error.status_code))
    if error.suggestion:
        table.add_row("Suggestion", f"[yellow]{escape(error.suggestion)}[/]")

    console.print(Panel(table, title="Error", border_style="red"))


def format_info(decoded: DecodedStatusList) -> None:
    """Print the credential summary."""
    info = format_credential_info(decoded)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Credential Type", info["credential_type"])
    if info["id"]:
        table.add_row("ID", escape(str(info["id"])))
    issuer = info["issuer"]
    if issuer:
        table.add_row("Issuer", escape(issuer if isinstance(issuer, str) else json.dumps(issuer)))
    purpose = info["status_purpose"]
    table.add_row("Status Purpose", escape(str(purpose)) if purpose else "[dim]unspecified[/]")
    table.add_row("Total Bits", f"{info['total_bits']:,}")
    table.add_row("Set Bits", f"{count_set_bits(decoded.decoded_bits):,}")
    if info["valid_from"]:
        table.add_row("Valid From", escape(str(info["valid_from"])))
    if info["valid_until"]:
        table.add_row("Valid Until", escape(str(info["valid_until"])))

    console.print(Panel(table, title="Bitstring Status List", border_style="green"))


def format_bits(statuses: list[BitStatus]) -> None:
    """Print bit query results."""
    table = Table(title="Bit Status")
    table.add_column("Index", justify="right")
    table.add_column("Bit", justify="center")
    table.add_column("Status")

    for bit in statuses:
        if bit.status:
            status_str = f"[red]{escape(str(bit.purpose or 'set'))}[/]"
        else:
            status_str = "[green]valid[/]"
        table.add_row(str(bit.index), "1" if bit.status else "0", status_str)

    console.print(table)


def query_bits(
    decoded: DecodedStatusList,
    bits: tuple[int, ...],
    bit_range: tuple[int, int] | None,
) -> tuple[list[BitStatus], list[DetailedError]]:
    """Run the requested single-bit and range queries."""
    statuses: list[BitStatus] = []
    errors: list[DetailedError] = []

    for index in bits:
        status = decoded.get_bit_status(index)
        if isinstance(status, DetailedError):
            errors.append(status)
        else:
            statuses.append(BitStatus(index=index, status=status, purpose=decoded.status_purpose))

    if bit_range is not None:
        start, end = bit_range
        result = decoded.get_bit_range(start, end)
        if isinstance(result, DetailedError):
            errors.append(result)
        else:
            statuses.extend(result)

    return statuses, errors


@click.command()
@click.argument("source", required=True)
@click.option(
    "--bit",
    "bits",
    type=int,
    multiple=True,
    help="Check a single bit index (repeatable)",
)
@click.option(
    "--range",
    "bit_range",
    type=(int, int),
    default=None,
    help="Check every bit from START to END inclusive",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    help="Disable SSL certificate verification",
)
@click.option(
    "--json-output",
    is_flag=True,
    help="Output result as JSON",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    envvar="BSL_TIMEOUT",
    show_default=True,
    help="HTTP request timeout in seconds",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.version_option(package_name="bitstring-inspector")
def main(
    source: str,
    bits: tuple[int, ...],
    bit_range: tuple[int, int] | None,
    no_ssl_verify: bool,
    json_output: bool,
    timeout: float,
    verbose: bool,
) -> None:
    """Decode and inspect a Bitstring Status List credential.

    SOURCE can be:
    - A URL (e.g., https://example.com/status/1)
    - A file path (e.g., status-list.json)
    - "-" to read from stdin

    Examples:

        bsl-inspect https://example.com/status/1

        bsl-inspect status-list.json --bit 42 --bit 7

        curl -s https://example.com/status/1 | bsl-inspect - --range 0 63
    """
    configure_logging(verbose)

    fetcher = StatusListFetcher(timeout=timeout, verify_ssl=not no_ssl_verify)
    result = load_document(source, fetcher)

    if not result.success:
        if json_output:
            console.print_json(data={"success": False, "error": result.error.to_dict()})
        else:
            format_error(result.error)
        sys.exit(EXIT_PIPELINE_ERROR)

    decoded = result.data
    statuses, errors = query_bits(decoded, bits, bit_range)

    if json_output:
        output: dict[str, Any] = {
            "success": True,
            "credential_info": format_credential_info(decoded),
        }
        if bits or bit_range:
            output["bits"] = [
                {"index": s.index, "status": s.status, "purpose": s.purpose}
                for s in statuses
            ]
        if errors:
            output["errors"] = [e.to_dict() for e in errors]
        console.print_json(data=output)
    else:
        format_info(decoded)
        if statuses:
            format_bits(statuses)
        for error in errors:
            format_error(error)

    sys.exit(EXIT_QUERY_ERROR if errors else EXIT_OK)


if __name__ == "__main__":
    main()
