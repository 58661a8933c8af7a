#!/usr/bin/env python3
"""Command-line front-end for the DLMS APDU inspector.

Examples::

    dlms-inspector parse "C0 01 4F 00 01 00 00 81 00 00 00 02 00"
    dlms-inspector parse --file captures.txt
    dlms-inspector analyze 07E80A13FF0C1E2D00800000
    dlms-inspector export --format xml "C7 01 42 0C 00"
    dlms-inspector serve --port 8080
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .config import settings
from .export import ViewFormat, export
from .hex_utils import normalize_hex
from .models import ParseSuccess, result_to_dict
from .octet_string import analyze_octet_string
from .parser import DlmsParser


def _read_hex_lines(path: Path) -> List[str]:
    """One APDU per line; blank lines and ``#`` comments are skipped."""

    lines = []
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            lines.append(stripped)
    return lines


def _collect_inputs(args: argparse.Namespace) -> List[str]:
    items = list(args.hex or [])
    if args.file is not None:
        items.extend(_read_hex_lines(args.file))
    return items


def _parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dlms-inspector",
        description="Decode hex-encoded DLMS/COSEM APDUs",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help=f"Logging level (default: {settings.LOG_LEVEL})",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Parse one or more APDUs")
    parse_cmd.add_argument("hex", nargs="*", help="APDU as hex (quote space separated octets)")
    parse_cmd.add_argument("--file", type=Path, help="Text file with one APDU per line")

    analyze_cmd = commands.add_parser("analyze", help="Classify an OctetString value")
    analyze_cmd.add_argument("hex", help="OctetString payload as hex")

    export_cmd = commands.add_parser("export", help="Parse APDUs and print an export document")
    export_cmd.add_argument("hex", nargs="*", help="APDU as hex")
    export_cmd.add_argument("--file", type=Path, help="Text file with one APDU per line")
    export_cmd.add_argument(
        "--format",
        choices=[fmt.value for fmt in ViewFormat],
        default=ViewFormat.JSON.value,
        help="Export format (default: json)",
    )

    serve_cmd = commands.add_parser("serve", help="Run the HTTP API")
    serve_cmd.add_argument("--host", default=settings.API_HOST, help=f"Bind address (default: {settings.API_HOST})")
    serve_cmd.add_argument("--port", type=int, default=settings.API_PORT, help=f"Port (default: {settings.API_PORT})")
    return parser.parse_args(argv)


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=settings.JSON_INDENT, ensure_ascii=False))


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=settings.LOG_FORMAT, stream=sys.stderr)

    if args.command == "analyze":
        clean = normalize_hex(args.hex)
        _print_json(analyze_octet_string(clean).model_dump(mode="json", by_alias=True))
        return 0

    if args.command == "serve":
        from .api import run

        run(host=args.host, port=args.port)
        return 0

    items = _collect_inputs(args)
    if not items:
        print("Error: no APDUs given", file=sys.stderr)
        return 1

    parsed = DlmsParser().parse_many(items)
    if args.command == "parse":
        _print_json(result_to_dict(parsed))
        return 0 if isinstance(parsed, ParseSuccess) else 1

    if not isinstance(parsed, ParseSuccess):
        print(f"Error: {parsed.message}", file=sys.stderr)
        return 1
    rendered = export(parsed.data, ViewFormat(args.format))
    if not isinstance(rendered, ParseSuccess):
        print(f"Error: {rendered.message}", file=sys.stderr)
        return 1
    print(rendered.data)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
