from __future__ import annotations

from typing import Optional


class BrainfuckError(Exception):
    """Base class for failures that abort a Brainfuck run."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message


class UnbalancedBrackets(BrainfuckError, ValueError):
    """Raised when a loop bracket has no matching partner."""


class TapeBoundsExceeded(BrainfuckError, IndexError):
    """Raised when the data pointer leaves the tape."""


class InputExhausted(BrainfuckError, EOFError):
    """Raised when ``,`` executes after the input source ran dry."""


class IOFailure(BrainfuckError, OSError):
    """Wraps an error raised by the input source or output sink."""


class StepLimitExceeded(BrainfuckError, RuntimeError):
    """Raised when Brainfuck execution exceeds the configured step budget."""


class ExecutionCancelled(BrainfuckError):
    """Raised when the caller's cancel event is set during a run."""


__all__ = [
    "BrainfuckError",
    "ExecutionCancelled",
    "IOFailure",
    "InputExhausted",
    "StepLimitExceeded",
    "TapeBoundsExceeded",
    "UnbalancedBrackets",
]
