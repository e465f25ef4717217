from __future__ import annotations

from typing import BinaryIO, Iterable, Iterator, Optional, Protocol, Union

from .errors import IOFailure


class ByteSource(Protocol):
    def read_byte(self) -> Optional[int]:
        """Block until one byte is available; return ``None`` once exhausted."""


class ByteSink(Protocol):
    def write_byte(self, value: int) -> None:
        ...


class IterableByteSource:
    """Feeds bytes from ``bytes``, ``str`` (one byte per char) or an iterable of ints."""

    def __init__(self, data: Union[bytes, str, Iterable[int], None] = None) -> None:
        if isinstance(data, str):
            data = data.encode("latin-1")
        self._iter: Iterator[int] = iter(data or ())

    def read_byte(self) -> Optional[int]:
        value = next(self._iter, None)
        if value is None:
            return None
        if not 0 <= value <= 0xFF:
            raise IOFailure(f"Input value out of byte range: {value}")
        return value


class StreamByteSource:
    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def read_byte(self) -> Optional[int]:
        try:
            chunk = self.stream.read(1)
        except ValueError as exc:
            raise IOFailure(f"Cannot read input: {exc}") from exc
        if not chunk:
            return None
        return chunk[0]


class BufferByteSink:
    def __init__(self) -> None:
        self.buffer = bytearray()

    def write_byte(self, value: int) -> None:
        self.buffer.append(value)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)


class StreamByteSink:
    def __init__(self, stream: BinaryIO, flush: bool = False) -> None:
        self.stream = stream
        self.flush = flush

    def write_byte(self, value: int) -> None:
        try:
            self.stream.write(bytes((value,)))
            if self.flush:
                self.stream.flush()
        except ValueError as exc:
            raise IOFailure(f"Cannot write output: {exc}") from exc


__all__ = [
    "BufferByteSink",
    "ByteSink",
    "ByteSource",
    "IterableByteSource",
    "StreamByteSink",
    "StreamByteSource",
]
