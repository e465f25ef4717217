from .bf_interpreter import BrainfuckInterpreter, ExecutionState, RunState, run
from .errors import (
    BrainfuckError,
    ExecutionCancelled,
    InputExhausted,
    IOFailure,
    StepLimitExceeded,
    TapeBoundsExceeded,
    UnbalancedBrackets,
)
from .program import Instruction, JumpTable, Program, match_brackets, parse
from .streams import (
    BufferByteSink,
    ByteSink,
    ByteSource,
    IterableByteSource,
    StreamByteSink,
    StreamByteSource,
)

__all__ = [
    "BrainfuckError",
    "BrainfuckInterpreter",
    "BufferByteSink",
    "ByteSink",
    "ByteSource",
    "ExecutionCancelled",
    "ExecutionState",
    "IOFailure",
    "InputExhausted",
    "Instruction",
    "IterableByteSource",
    "JumpTable",
    "Program",
    "RunState",
    "StepLimitExceeded",
    "StreamByteSink",
    "StreamByteSource",
    "TapeBoundsExceeded",
    "UnbalancedBrackets",
    "match_brackets",
    "parse",
    "run",
]
