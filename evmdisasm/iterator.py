"""
Instruction iterator for EVM bytecode.

The iterator walks a bytecode buffer one instruction at a time. It never
copies the buffer: push immediates are read-only ``memoryview`` slices of
the caller's bytes. A push whose immediate runs past the end of the buffer
puts the iterator into a terminal FAILED state instead of raising, so every
instruction decoded before the fault can still be consumed.

Usage:
    it = InstructionIterator(bytes.fromhex("6001600201"))
    for instr in it:
        print(instr.pc, instr.name, instr.arg_hex)
    if it.error is not None:
        raise it.error
"""

import dataclasses
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

from .errors import IncompletePushError
from .opcodes import is_push, opcode_name, push_width


class IteratorState(Enum):
    """Lifecycle of an InstructionIterator."""

    NOT_STARTED = "not_started"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class Instruction:
    """
    A single decoded instruction.

    ``arg`` is a view into the iterated buffer, present only for
    PUSH1..PUSH32.
    """

    op: int
    pc: int
    arg: Optional[memoryview] = None

    @property
    def name(self) -> str:
        return opcode_name(self.op)

    @property
    def size(self) -> int:
        """Encoded size in bytes, including the opcode byte itself."""
        return 1 + (len(self.arg) if self.arg is not None else 0)

    @property
    def arg_hex(self) -> Optional[str]:
        if not self.arg:
            return None
        return "0x" + self.arg.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pc": self.pc,
            "op": self.op,
            "name": self.name,
            "arg": self.arg_hex,
        }

    def __repr__(self) -> str:
        if self.arg_hex is None:
            return f"Instruction(pc={self.pc}, op={self.name})"
        return f"Instruction(pc={self.pc}, op={self.name}, arg={self.arg_hex})"


@dataclasses.dataclass(frozen=True)
class Exhausted:
    """Returned by advance() once no instruction is left."""

    error: Optional[IncompletePushError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


Step = Union[Instruction, Exhausted]


class InstructionIterator:
    """
    Single-pass decoder over a bytecode buffer.

    Call advance() repeatedly, or iterate with a for loop. After the
    loop, check ``error`` to tell a clean end of the buffer apart from a
    truncated push instruction. The iterator is not reusable; construct a
    new one to scan the same buffer again.
    """

    def __init__(self, code: Union[bytes, bytearray, memoryview]):
        self._code = memoryview(code).toreadonly().cast("B")
        self._pc = 0
        self._op: Optional[int] = None
        self._arg: Optional[memoryview] = None
        self._error: Optional[IncompletePushError] = None
        self._state = IteratorState.NOT_STARTED

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def error(self) -> Optional[IncompletePushError]:
        """The terminal error, or None if the scan has not failed."""
        return self._error

    @property
    def pc(self) -> int:
        return self._pc

    @property
    def op(self) -> Optional[int]:
        return self._op

    @property
    def arg(self) -> Optional[memoryview]:
        return self._arg

    @property
    def done(self) -> bool:
        return self._state in (IteratorState.EXHAUSTED, IteratorState.FAILED)

    def advance(self) -> Step:
        """
        Decode the next instruction.

        Returns:
            The decoded Instruction, or Exhausted once the buffer is
            consumed. Exhausted carries the terminal error when the
            buffer ends inside a push immediate. Calling advance() again
            after exhaustion returns the same result without touching
            the buffer.
        """
        if self.done:
            return Exhausted(self._error)

        if self._state is IteratorState.NOT_STARTED:
            pc = 0
        else:
            pc = self._pc + 1
            if self._arg is not None:
                pc += len(self._arg)
        self._pc = pc

        code_len = len(self._code)
        if pc >= code_len:
            self._state = IteratorState.EXHAUSTED
            return Exhausted()

        op = self._code[pc]
        self._op = op
        if is_push(op):
            end = pc + 1 + push_width(op)
            if end > code_len:
                self._error = IncompletePushError(pc)
                self._state = IteratorState.FAILED
                return Exhausted(self._error)
            self._arg = self._code[pc + 1:end]
        else:
            self._arg = None

        self._state = IteratorState.POSITIONED
        return Instruction(op=op, pc=pc, arg=self._arg)

    def __iter__(self) -> Iterator[Instruction]:
        return self

    def __next__(self) -> Instruction:
        step = self.advance()
        if isinstance(step, Exhausted):
            raise StopIteration
        return step
