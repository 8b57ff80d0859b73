"""Exceptions raised by the disassembler."""


class DisassemblerError(Exception):
    """Base class for all disassembler errors."""


class IncompletePushError(DisassemblerError):
    """A push instruction's immediate runs past the end of the bytecode."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"incomplete push instruction at {pc}")


class HexDecodeError(DisassemblerError, ValueError):
    """The bytecode string is not valid hexadecimal."""
