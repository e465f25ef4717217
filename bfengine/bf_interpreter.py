from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Union

from .errors import (
    ExecutionCancelled,
    InputExhausted,
    IOFailure,
    StepLimitExceeded,
    TapeBoundsExceeded,
    UnbalancedBrackets,
)
from .program import Instruction, JumpTable, Program, match_brackets, parse
from .streams import BufferByteSink, ByteSink, ByteSource, IterableByteSource

InputData = Union[bytes, str, Iterable[int], None]


@dataclass
class ExecutionState:
    step: int
    pc: int
    command: Optional[str]
    pointer: int
    tape_start: int
    tape: List[int]
    output: bytes
    code_length: int


@dataclass
class RunState:
    """Everything one run mutates. Created at run start, never shared."""

    tape: List[int]
    pointer: int = 0
    pc: int = 0
    steps: int = 0

    @classmethod
    def fresh(cls, tape_length: int) -> "RunState":
        return cls(tape=[0] * tape_length)

    @property
    def cell(self) -> int:
        return self.tape[self.pointer]


@dataclass
class BrainfuckInterpreter:
    tape_length: int = 30000
    cell_max: int = 255
    cell_min: int = 0

    _cell_span: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.tape_length < 1:
            raise ValueError("tape_length must be positive")
        if self.cell_max <= self.cell_min:
            raise ValueError("cell_max must be greater than cell_min")
        self._cell_span = self.cell_max - self.cell_min + 1

    def run(
        self,
        code: Union[str, Program],
        input_data: InputData = None,
        max_steps: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        program = _as_program(code)
        sink = BufferByteSink()
        self.execute(
            program,
            match_brackets(program),
            IterableByteSource(input_data),
            sink,
            max_steps=max_steps,
            cancel_event=cancel_event,
        )
        return sink.getvalue()

    def execute(
        self,
        program: Program,
        jumps: JumpTable,
        source: ByteSource,
        sink: ByteSink,
        *,
        max_steps: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> RunState:
        """Run ``program`` to completion and return its final state."""
        state = self._start(program, jumps)
        code_length = len(program)
        while state.pc < code_length:
            self._check_limits(state, max_steps, cancel_event)
            state.pc = self._execute_instruction(program[state.pc], state, jumps, source, sink)
            state.steps += 1
        return state

    def step(
        self,
        code: Union[str, Program],
        input_data: InputData = None,
        max_steps: Optional[int] = None,
        tape_window: int = 10,
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[ExecutionState]:
        program = _as_program(code)
        jumps = match_brackets(program)
        source = IterableByteSource(input_data)
        sink = BufferByteSink()
        state = self._start(program, jumps)
        code_length = len(program)

        while state.pc < code_length:
            self._check_limits(state, max_steps, cancel_event)
            command = program[state.pc]
            state.pc = self._execute_instruction(command, state, jumps, source, sink)
            state.steps += 1
            yield self._snapshot(state, command.value, sink.getvalue(), code_length, tape_window)

        # Emit final snapshot indicating completion
        yield self._snapshot(state, None, sink.getvalue(), code_length, tape_window)

    def _start(self, program: Program, jumps: JumpTable) -> RunState:
        for index, instruction in enumerate(program):
            if instruction in (Instruction.LOOP_START, Instruction.LOOP_END) and index not in jumps:
                raise UnbalancedBrackets(
                    "No jump target for '{}' at position {}".format(instruction.value, index),
                    position=index,
                )
        return RunState.fresh(self.tape_length)

    @staticmethod
    def _check_limits(
        state: RunState,
        max_steps: Optional[int],
        cancel_event: Optional[threading.Event],
    ) -> None:
        if max_steps is not None and state.steps >= max_steps:
            raise StepLimitExceeded(
                "Brainfuck program exceeded allowed step count", position=state.pc
            )
        if cancel_event is not None and cancel_event.is_set():
            raise ExecutionCancelled("Brainfuck program was cancelled", position=state.pc)

    def _execute_instruction(
        self,
        command: Instruction,
        state: RunState,
        jumps: JumpTable,
        source: ByteSource,
        sink: ByteSink,
    ) -> int:
        pc = state.pc
        new_pc = pc + 1
        if command is Instruction.MOVE_RIGHT:
            if state.pointer + 1 >= self.tape_length:
                raise TapeBoundsExceeded(
                    "Pointer moved beyond the tape length at position {}".format(pc),
                    position=pc,
                )
            state.pointer += 1
        elif command is Instruction.MOVE_LEFT:
            if state.pointer == 0:
                raise TapeBoundsExceeded(
                    "Pointer moved before start of tape at position {}".format(pc),
                    position=pc,
                )
            state.pointer -= 1
        elif command is Instruction.INCREMENT:
            state.tape[state.pointer] = self._wrap(state.cell + 1)
        elif command is Instruction.DECREMENT:
            state.tape[state.pointer] = self._wrap(state.cell - 1)
        elif command is Instruction.OUTPUT:
            try:
                sink.write_byte(state.cell & 0xFF)
            except IOFailure as exc:
                _locate(exc, pc)
                raise
            except OSError as exc:
                raise IOFailure("Cannot write output: {}".format(exc), position=pc) from exc
        elif command is Instruction.INPUT:
            try:
                value = source.read_byte()
            except IOFailure as exc:
                _locate(exc, pc)
                raise
            except OSError as exc:
                raise IOFailure("Cannot read input: {}".format(exc), position=pc) from exc
            if value is None:
                raise InputExhausted("Input exhausted at position {}".format(pc), position=pc)
            state.tape[state.pointer] = value
        elif command is Instruction.LOOP_START:
            if state.cell == 0:
                new_pc = jumps[pc] + 1
        elif command is Instruction.LOOP_END:
            if state.cell != 0:
                new_pc = jumps[pc] + 1
        else:
            raise TypeError("Unknown instruction: {!r}".format(command))
        return new_pc

    def _wrap(self, value: int) -> int:
        return (value - self.cell_min) % self._cell_span + self.cell_min

    def _snapshot(
        self,
        state: RunState,
        command: Optional[str],
        output: bytes,
        code_length: int,
        tape_window: int,
    ) -> ExecutionState:
        start = max(0, state.pointer - tape_window)
        end = min(self.tape_length, state.pointer + tape_window + 1)
        tape_view = state.tape[start:end].copy()
        return ExecutionState(
            step=state.steps,
            pc=state.pc,
            command=command,
            pointer=state.pointer,
            tape_start=start,
            tape=tape_view,
            output=output,
            code_length=code_length,
        )


def run(
    program: Program,
    jumps: JumpTable,
    source: ByteSource,
    sink: ByteSink,
    *,
    max_steps: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> RunState:
    """Execute ``program`` with a default 8-bit, 30000-cell interpreter."""
    return BrainfuckInterpreter().execute(
        program,
        jumps,
        source,
        sink,
        max_steps=max_steps,
        cancel_event=cancel_event,
    )


def _as_program(code: Union[str, Program]) -> Program:
    if isinstance(code, str):
        return parse(code)
    return tuple(code)


def _locate(exc: IOFailure, pc: int) -> None:
    if exc.position is None:
        exc.position = pc


__all__ = [
    "BrainfuckInterpreter",
    "ExecutionState",
    "RunState",
    "run",
]
