#!/usr/bin/env python3
"""
Command-line EVM bytecode disassembler.

Usage:
    evm-disasm 0x6080604052
    evm-disasm --bytecode-file contract.bin --format yaml --output contract.yaml
    cat contract.bin | evm-disasm --bytecode-file -
"""

import argparse
import json
import sys
from typing import List, Optional, TextIO

import structlog
import yaml

from .disassembler import decode_hex, disassemble_to_dicts, print_disassembled
from .errors import DisassemblerError, HexDecodeError
from .log import configure_logging

logger = structlog.get_logger()

OUTPUT_FORMATS = ("text", "json", "yaml")


def read_bytecode(args: argparse.Namespace) -> str:
    """Get the hex bytecode either from the command line or from a file."""
    if args.bytecode is not None:
        return args.bytecode
    try:
        if args.bytecode_file == "-":
            return sys.stdin.read().strip()
        with open(args.bytecode_file, "r") as f:
            return f.read().strip()
    except UnicodeDecodeError as e:
        raise HexDecodeError(f"bytecode file is not hex text: {e}") from e


def write_listing(bytecode: str, output_format: str, out: TextIO) -> None:
    """
    Disassemble hex bytecode and write it in the requested output format.

    Text output is streamed, so instructions preceding a truncated push
    are still written. JSON and YAML are all-or-nothing.

    Raises:
        DisassemblerError: On malformed hex or a truncated push instruction
    """
    if output_format == "text":
        print_disassembled(bytecode, out=out)
        return

    instructions = disassemble_to_dicts(decode_hex(bytecode))
    if output_format == "json":
        json.dump(instructions, out, indent=2)
        out.write("\n")
    else:
        yaml.safe_dump(instructions, out, default_flow_style=False, sort_keys=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evm-disasm",
        description="Disassemble EVM bytecode into a readable instruction listing",
    )
    parser.add_argument("bytecode", nargs="?", help="EVM bytecode string (hex)")
    parser.add_argument(
        "--bytecode-file",
        help="File containing EVM bytecode (hex), or - for stdin",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--output", help="Write the listing to a file instead of stdout")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit log lines as JSON",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "INFO", json_output=args.log_json)

    if (args.bytecode is None) == (args.bytecode_file is None):
        parser.error("Exactly one of bytecode or --bytecode-file must be specified")

    try:
        bytecode = read_bytecode(args)

        if args.output:
            with open(args.output, "w") as f:
                write_listing(bytecode, args.format, f)
            logger.info("Listing written", output=args.output, format=args.format)
        else:
            write_listing(bytecode, args.format, sys.stdout)
        return 0

    except KeyboardInterrupt:
        logger.info("Disassembly interrupted by user")
        return 130

    except (DisassemblerError, OSError) as e:
        logger.error("Disassembly failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
