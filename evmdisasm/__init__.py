"""
EVM bytecode disassembler.
"""

# Opcode table
from .opcodes import Opcode, OPCODE_NAMES, PUSH_BYTES, is_push, opcode_name, push_width

# Decoding
from .errors import DisassemblerError, HexDecodeError, IncompletePushError
from .iterator import Exhausted, Instruction, InstructionIterator, IteratorState

# Formatting
from .disassembler import (
    decode_hex,
    disassemble,
    disassemble_instructions,
    disassemble_to_dicts,
    format_instruction,
    print_disassembled,
)


__all__ = [
    # Opcodes
    "Opcode",
    "OPCODE_NAMES",
    "PUSH_BYTES",
    "is_push",
    "opcode_name",
    "push_width",
    # Decoding
    "DisassemblerError",
    "HexDecodeError",
    "IncompletePushError",
    "Exhausted",
    "Instruction",
    "InstructionIterator",
    "IteratorState",
    # Formatting
    "decode_hex",
    "disassemble",
    "disassemble_instructions",
    "disassemble_to_dicts",
    "format_instruction",
    "print_disassembled",
]
