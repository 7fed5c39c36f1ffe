"""
otel2zipkin.cli - Command-line interface for otel2zipkin.

This module provides a CLI that reads an OpenTelemetry OTLP/JSON export and
writes the same spans as a Zipkin v2 JSON array.

Usage:
    otel2zipkin <input_file> [--output/-o <file>] [--local-ip <addr> | --detect-local-ip]

Examples:
    otel2zipkin trace.json
    otel2zipkin trace.json -o zipkin.json --indent 2
    otel2zipkin trace.json --local-ip 10.0.0.7
"""

from __future__ import annotations

import argparse
import ipaddress
import json
import sys
from pathlib import Path
from typing import List

from otel2zipkin import __version__
from otel2zipkin.core.model import SpanRecord, ZipkinSpan
from otel2zipkin.core.parser import OTLPParser
from otel2zipkin.core.transformer import IpAddressSupplier, ZipkinSpanTransformer
from otel2zipkin.utils.net import LocalIpAddressSupplier


def _ip_address(value: str) -> str:
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid IP address: {value}") from None


def parse_args(args: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: List of arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="otel2zipkin",
        description="Convert OpenTelemetry OTLP/JSON traces into Zipkin v2 JSON spans",
        epilog="Example: otel2zipkin trace.json -o zipkin.json --indent 2",
    )

    parser.add_argument(
        "input_file",
        type=str,
        help="Path to the input trace file (OTLP/JSON format)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file path (defaults to stdout)",
    )

    address = parser.add_mutually_exclusive_group()
    address.add_argument(
        "--local-ip",
        type=_ip_address,
        default=None,
        help="IP address to record on every span's local endpoint",
    )
    address.add_argument(
        "--detect-local-ip",
        action="store_true",
        help="Record this host's own IP address on every span's local endpoint",
    )

    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces (default: compact)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(args)


def load_spans(input_path: str) -> List[SpanRecord]:
    """Load and parse span records from an OTLP/JSON file.

    Args:
        input_path: Path to the input JSON file

    Returns:
        Parsed SpanRecord objects

    Raises:
        FileNotFoundError: If the input file doesn't exist
        json.JSONDecodeError: If the file contains invalid JSON
        ValueError: If the trace format is invalid
    """
    path = Path(input_path)

    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    with open(path, "r", encoding="utf-8") as f:
        json_str = f.read()

    parser = OTLPParser()
    return parser.parse_json(json_str)


def build_ip_supplier(parsed_args: argparse.Namespace) -> IpAddressSupplier:
    """Pick the local endpoint address supplier requested on the command line."""
    if parsed_args.detect_local_ip:
        return LocalIpAddressSupplier()
    local_ip = parsed_args.local_ip
    return lambda: local_ip


def convert_spans(
    spans: List[SpanRecord], ip_supplier: IpAddressSupplier
) -> List[ZipkinSpan]:
    """Transform span records into Zipkin spans.

    Args:
        spans: Span records to convert
        ip_supplier: Supplier of the local endpoint address

    Returns:
        Zipkin spans in input order
    """
    transformer = ZipkinSpanTransformer(ip_supplier)
    return [transformer.transform(span) for span in spans]


def generate_json_output(zipkin_spans: List[ZipkinSpan], indent: int | None = None) -> str:
    """Render Zipkin spans as a Zipkin v2 JSON array.

    Args:
        zipkin_spans: Spans to render
        indent: JSON indentation, None for compact output

    Returns:
        JSON string
    """
    separators = None if indent is not None else (",", ":")
    return json.dumps(
        [span.to_dict() for span in zipkin_spans],
        indent=indent,
        separators=separators,
    )


def write_output(content: str, output_path: str | None) -> None:
    """Write content to output file or stdout.

    Args:
        content: The content to write
        output_path: Path to output file, or None for stdout
    """
    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    else:
        print(content)


def main(args: List[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        parsed_args = parse_args(args)

        if parsed_args.verbose:
            print(f"Loading trace from: {parsed_args.input_file}", file=sys.stderr)

        spans = load_spans(parsed_args.input_file)

        if parsed_args.verbose:
            print(f"Parsed {len(spans)} spans", file=sys.stderr)

        zipkin_spans = convert_spans(spans, build_ip_supplier(parsed_args))
        output = generate_json_output(zipkin_spans, indent=parsed_args.indent)

        write_output(output, parsed_args.output)

        if parsed_args.verbose and parsed_args.output:
            print(f"Output written to: {parsed_args.output}", file=sys.stderr)

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in input file: {e}", file=sys.stderr)
        return 2

    except ValueError as e:
        print(f"Error: Invalid trace format: {e}", file=sys.stderr)
        return 3

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 4


if __name__ == "__main__":
    sys.exit(main())
