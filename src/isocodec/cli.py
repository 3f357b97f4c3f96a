"""Command-line interface for isocodec.

Output uses rich for tables and panels; ``--plain`` prints tabulate grids
instead, which is friendlier for logs and piping.

Usage:
    isocodec decode <data> --config parse.json [options]
    isocodec encode message.json [--secondary]
    isocodec bitmap <data>

Examples:
    isocodec decode 020032000000000100006500000000000010001234567890004DATA -c parse.json
    isocodec decode @capture.bin -c parse.json --json
    isocodec encode message.json
    isocodec bitmap @capture.bin
"""

import argparse
import binascii
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from tabulate import tabulate

from .codec.bitmap import bitmap_to_hex, has_secondary, iter_fields
from .codec.decoder import IsoReader, MIN_LENGTH, MIN_LENGTH_SECONDARY, decode_message
from .codec.encoder import MTI_LENGTH, WIRE_ENCODING, encode_message
from .codec.errors import MalformedInputError
from .codec.spec_table import ParseConfig
from .models.message import Message

logger = logging.getLogger(__name__)


def read_data(source: str, is_hex: bool = False) -> bytes:
    """Load wire data from an argument.

    Args:
        source: Wire text, or "@path" to read the bytes of a file
        is_hex: Treat the data as hex-encoded bytes

    Returns:
        Raw wire bytes
    """
    if source.startswith("@"):
        raw = Path(source[1:]).read_bytes()
        logger.debug("Read %d bytes from %s", len(raw), source[1:])
    else:
        raw = source.encode(WIRE_ENCODING)

    if is_hex:
        try:
            return binascii.unhexlify(raw.strip())
        except (binascii.Error, ValueError) as e:
            raise MalformedInputError(f"Input is not valid hex: {e}") from e
    return raw


class IsoCodecCLI:
    """Terminal front end for encoding and decoding messages."""

    def __init__(self, plain: bool = False, console: Console | None = None):
        self.plain = plain
        self.console = console or Console()

    def print_info(self, text: str, style: str = ""):
        """Print informational text."""
        if self.plain:
            print(text)
        else:
            self.console.print(text, style=style)

    def print_table(self, rows: list[dict], columns: list[str], title: str = ""):
        """Print a table of data."""
        if not rows:
            self.print_info("No data to display", style="yellow")
            return

        if self.plain:
            data = [[str(row.get(col, "")) for col in columns] for row in rows]
            if title:
                print(title)
            print(tabulate(data, headers=columns, tablefmt="grid"))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for col in columns:
            table.add_column(col)
        for row in rows:
            table.add_row(*[escape(str(row.get(col, ""))) for col in columns])
        self.console.print(table)

    def show_message(self, message: Message, wire_length: int | None = None):
        """Print a decoded message."""
        summary = f"MTI: {message.mti}\nFields: {len(message)}"
        if wire_length is not None:
            summary += f"\nLength: {wire_length} bytes"
        if self.plain:
            print(summary)
        else:
            self.console.print(Panel(summary, title="Message", border_style="blue"))

        rows = []
        for number, value in message:
            rows.append({
                "Field": number,
                "Type": value.iso_type.name,
                "Width": value.width if value.width is not None else "",
                "Value": value.format_value(max_length=60),
            })
        self.print_table(rows, ["Field", "Type", "Width", "Value"])

    def decode(self, data: bytes, config: ParseConfig, mti: str | None = None,
               as_json: bool = False) -> Message:
        """Decode wire data using the table for its MTI."""
        if mti is None:
            mti = data[:MTI_LENGTH].decode(WIRE_ENCODING)
        specs = config.get_specs(mti)
        if specs is None:
            raise MalformedInputError(f"No parse table for message type {mti!r}")
        logger.debug("Decoding %d bytes with table %s (%d fields)", len(data), specs.name, len(specs))

        message = decode_message(data, specs)
        if as_json:
            print(json.dumps(message.to_dict(), indent=2))
        else:
            self.show_message(message, wire_length=len(data))
        return message

    def encode(self, message: Message, force_secondary: bool = False) -> bytes:
        """Encode a message and print the wire text."""
        wire = encode_message(message, force_secondary_bitmap=force_secondary)
        logger.debug("Encoded %d fields into %d bytes", len(message), len(wire))
        print(wire.decode(WIRE_ENCODING))
        return wire

    def show_bitmap(self, data: bytes) -> list[int]:
        """Print the fields flagged by a message's bitmap(s)."""
        if len(data) < MIN_LENGTH:
            raise MalformedInputError(f"Data too short: {len(data)} bytes, need at least {MIN_LENGTH}")
        reader = IsoReader(data)
        mti = reader.read_text(MTI_LENGTH, "MTI")
        bitmap = reader.read_bitmap()
        if has_secondary(bitmap):
            if len(data) < MIN_LENGTH_SECONDARY:
                raise MalformedInputError("Data too short for secondary bitmap")
            bitmap += reader.read_bitmap()

        fields = list(iter_fields(bitmap))
        self.print_info(f"MTI {mti}  bitmap {bitmap_to_hex(bitmap)}", style="bold")
        self.print_info(f"{len(fields)} fields: " + ", ".join(str(f) for f in fields))
        return fields


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="isocodec",
        description="isocodec - ISO 8583 message encoder/decoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  isocodec decode 0200...DATA -c parse.json   Decode wire text
  isocodec decode @capture.bin -c parse.json  Decode a captured message
  isocodec decode 30323030... --hex -c p.json Decode hex-encoded bytes
  isocodec encode message.json                Encode a JSON message
  isocodec bitmap @capture.bin                List flagged fields
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--plain", action="store_true", help="Plain text output (tabulate)")

    sub = parser.add_subparsers(dest="command", required=True)

    p_decode = sub.add_parser("decode", help="Decode a message")
    p_decode.add_argument("data", help="Wire text, or @FILE to read raw bytes")
    p_decode.add_argument("-c", "--config", required=True, help="JSON parse config file")
    p_decode.add_argument("--mti", help="Use the parse table for this MTI")
    p_decode.add_argument("--hex", action="store_true", help="Data is hex-encoded")
    p_decode.add_argument("--json", action="store_true", help="Print the message as JSON")

    p_encode = sub.add_parser("encode", help="Encode a JSON message")
    p_encode.add_argument("message", help="JSON message file")
    p_encode.add_argument("--secondary", action="store_true", help="Always emit a secondary bitmap")

    p_bitmap = sub.add_parser("bitmap", help="List fields flagged in the bitmap")
    p_bitmap.add_argument("data", help="Wire text, or @FILE to read raw bytes")
    p_bitmap.add_argument("--hex", action="store_true", help="Data is hex-encoded")

    return parser


def setup_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    err_console = Console(stderr=True)
    setup_logging(args.verbose, err_console)
    cli = IsoCodecCLI(plain=args.plain)

    try:
        if args.command == "decode":
            config = ParseConfig.from_file(args.config)
            cli.decode(read_data(args.data, args.hex), config, mti=args.mti, as_json=args.json)
        elif args.command == "encode":
            with open(args.message, "r") as f:
                message = Message.from_dict(json.load(f))
            cli.encode(message, force_secondary=args.secondary)
        elif args.command == "bitmap":
            cli.show_bitmap(read_data(args.data, args.hex))
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except (ValueError, OSError, KeyError) as e:
        logger.debug("Command failed", exc_info=True)
        err_console.print(f"Error: {e}", style="red", markup=False, highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
