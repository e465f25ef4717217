from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .bf_interpreter import BrainfuckInterpreter
from .errors import BrainfuckError
from .program import match_brackets, parse
from .streams import ByteSink, ByteSource, IterableByteSource, StreamByteSink, StreamByteSource


def _read_source(path: str) -> str:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    # Only the eight ASCII instruction characters matter; comments may hold any bytes.
    return source_path.read_bytes().decode("latin-1")


class _TextSink:
    """Fallback for a stdout replaced by a text stream.

    Each byte becomes the latin-1 character with the same code point, so a
    byte >= 0x80 is only reproduced exactly when the stream encodes latin-1.
    """

    def __init__(self, stream) -> None:
        self.stream = stream

    def write_byte(self, value: int) -> None:
        self.stream.write(bytes((value,)).decode("latin-1"))


def _stdin_source(data: Optional[str]) -> ByteSource:
    if data is not None:
        return IterableByteSource(data.encode("utf-8"))
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return IterableByteSource(sys.stdin.read().encode("utf-8"))
    return StreamByteSource(buffer)


def _stdout_sink() -> ByteSink:
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        return _TextSink(sys.stdout)
    return StreamByteSink(buffer)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a Brainfuck program")
    parser.add_argument("source", help="Path to Brainfuck source file")
    parser.add_argument(
        "--input",
        help="Input string supplied to the program (default: read from stdin)",
        default=None,
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Abort after this many instructions (default: unlimited)",
    )
    parser.add_argument(
        "--tape-length",
        type=int,
        default=30000,
        help="Number of tape cells (default: 30000)",
    )
    args = parser.parse_args(argv)
    if args.tape_length < 1:
        parser.error("--tape-length must be positive")

    try:
        source_text = _read_source(args.source)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Cannot read source file: {exc}", file=sys.stderr)
        return 1

    program = parse(source_text)
    try:
        jumps = match_brackets(program)
    except BrainfuckError as exc:
        print(f"Invalid program: {exc}", file=sys.stderr)
        return 1

    interpreter = BrainfuckInterpreter(tape_length=args.tape_length)
    try:
        interpreter.execute(
            program,
            jumps,
            _stdin_source(args.input),
            _stdout_sink(),
            max_steps=args.max_steps,
        )
    except BrainfuckError as exc:
        _flush_stdout()
        print(f"Runtime error: {exc}", file=sys.stderr)
        return 1

    _flush_stdout()
    return 0


def _flush_stdout() -> None:
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is not None:
        buffer.flush()
    sys.stdout.flush()


if __name__ == "__main__":
    raise SystemExit(main())
