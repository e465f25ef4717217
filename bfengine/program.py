from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from .errors import UnbalancedBrackets


class Instruction(Enum):
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_START = "["
    LOOP_END = "]"

    def __str__(self) -> str:
        return self.value


Program = Tuple[Instruction, ...]
JumpTable = Dict[int, int]

_SYMBOLS = {member.value: member for member in Instruction}


def parse(source: str) -> Program:
    """Keep the eight instruction characters of ``source``; everything else is a comment."""
    return tuple(_SYMBOLS[ch] for ch in source if ch in _SYMBOLS)


def to_source(program: Program) -> str:
    return "".join(instruction.value for instruction in program)


def match_brackets(program: Program) -> JumpTable:
    """Pair every loop start with its loop end.

    Each ``[`` is matched with the nearest following ``]`` at the same
    nesting depth. The returned table holds both directions, so
    ``jumps[jumps[p]] == p`` for every key.

    Raises :class:`UnbalancedBrackets` carrying the offending position when
    a ``]`` has no open ``[`` or a ``[`` is never closed.
    """
    jump_map: JumpTable = {}
    stack: List[int] = []
    for index, instruction in enumerate(program):
        if instruction is Instruction.LOOP_START:
            stack.append(index)
        elif instruction is Instruction.LOOP_END:
            if not stack:
                raise UnbalancedBrackets(
                    "Unmatched ']' at position {}".format(index), position=index
                )
            start = stack.pop()
            jump_map[start] = index
            jump_map[index] = start
    if stack:
        index = stack.pop()
        raise UnbalancedBrackets(
            "Unmatched '[' at position {}".format(index), position=index
        )
    return jump_map


__all__ = [
    "Instruction",
    "JumpTable",
    "Program",
    "match_brackets",
    "parse",
    "to_source",
]
