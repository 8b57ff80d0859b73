"""
Render EVM bytecode as text.

Two modes sit on top of InstructionIterator:

- print mode (print_disassembled) writes one line per instruction as it
  is decoded, then raises the iterator's terminal error, if any.
- collect mode (disassemble and friends) gathers the whole stream and
  raises instead of returning a partial result when the scan fails.

Each line looks like ``000042: PUSH1 0x80``.
"""

import binascii
import sys
from typing import Any, Dict, List, Optional, TextIO, Union

import structlog

from .errors import HexDecodeError
from .iterator import Instruction, InstructionIterator

logger = structlog.get_logger()

BytecodeLike = Union[bytes, bytearray, memoryview]


def decode_hex(bytecode: str) -> bytes:
    """
    Decode a hex bytecode string.

    Surrounding whitespace and an optional 0x prefix are ignored.

    Args:
        bytecode: Hexadecimal string representing the bytecode

    Returns:
        The raw bytecode

    Raises:
        HexDecodeError: If the string is not valid hexadecimal
    """
    text = bytecode.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise HexDecodeError(f"invalid hex bytecode: {e}") from e


def format_instruction(instr: Instruction) -> str:
    """Format an instruction as ``<6-digit pc>: <name>[ 0x<arg>]``."""
    # An absent and an empty immediate both render without a suffix
    if instr.arg:
        return f"{instr.pc:06d}: {instr.name} 0x{instr.arg.hex()}"
    return f"{instr.pc:06d}: {instr.name}"


def print_disassembled(bytecode: str, out: Optional[TextIO] = None) -> None:
    """
    Pretty-print all disassembled instructions.

    Lines are written as they are decoded, so a truncated push still
    leaves every preceding instruction in the output.

    Args:
        bytecode: Hexadecimal string representing the bytecode
        out: Text stream to write to, stdout by default

    Raises:
        HexDecodeError: If the string is not valid hexadecimal
        IncompletePushError: If the bytecode ends inside a push immediate
    """
    code = decode_hex(bytecode)
    if out is None:
        out = sys.stdout

    it = InstructionIterator(code)
    count = 0
    for instr in it:
        out.write(format_instruction(instr) + "\n")
        count += 1

    if it.error is not None:
        logger.warning("Incomplete push instruction", pc=it.error.pc, decoded=count)
        raise it.error
    logger.debug("Disassembly complete", instructions=count, code_size=len(code))


def disassemble_instructions(code: BytecodeLike) -> List[Instruction]:
    """
    Decode every instruction in the bytecode.

    Returns:
        All instructions in program order

    Raises:
        IncompletePushError: If the bytecode ends inside a push immediate.
            No partial list is returned in that case.
    """
    it = InstructionIterator(code)
    instructions = list(it)
    if it.error is not None:
        logger.warning(
            "Incomplete push instruction",
            pc=it.error.pc,
            discarded=len(instructions),
        )
        raise it.error
    logger.debug("Disassembly complete", instructions=len(instructions), code_size=len(code))
    return instructions


def disassemble(code: BytecodeLike) -> List[str]:
    """Return all disassembled instructions as newline-terminated lines."""
    return [format_instruction(instr) + "\n" for instr in disassemble_instructions(code)]


def disassemble_to_dicts(code: BytecodeLike) -> List[Dict[str, Any]]:
    """Return all instructions as plain dicts, ready for JSON or YAML export."""
    return [instr.to_dict() for instr in disassemble_instructions(code)]
