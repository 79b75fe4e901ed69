import io
from typing import Callable, TypeVar

from a2s.byteio import ByteReader
from a2s.exceptions import BufferExhaustedError

from errors import TruncatedData

T = TypeVar("T")


class ByteCursor:
    """Forward reader over one datagram. All integers are big-endian.

    Every read either returns the full value or raises TruncatedData at the
    offset the read started from; nothing is ever padded or cut short.
    """

    def __init__(self, data: bytes, origin: int = 0):
        self.data = bytes(data)
        # absolute offset of data[0], so errors raised inside a window point into the datagram
        self.origin = origin
        self._stream = io.BytesIO(self.data)
        self._reader = ByteReader(self._stream, endian=">")

    @property
    def position(self) -> int:
        return self._stream.tell()

    @property
    def remaining(self) -> int:
        return max(0, len(self.data) - self.position)

    def seek(self, offset: int) -> None:
        if offset < 0:
            raise ValueError(f"Negative offset {offset}")
        if offset > len(self.data):
            raise TruncatedData(offset - self.position, self.origin + self.position, self.remaining)
        self._stream.seek(offset, io.SEEK_SET)

    def advance_to(self, offset: int) -> None:
        # steps over declared-size blocks, going backwards is a caller bug
        if offset < self.position:
            raise ValueError(f"Cannot rewind from {self.position} to {offset}")
        self.seek(offset)

    def skip(self, count: int) -> None:
        self.advance_to(self.position + count)

    def window(self, size: int) -> "ByteCursor":
        """A cursor over the next `size` bytes only. This cursor does not move."""
        if size > self.remaining:
            raise TruncatedData(size, self.origin + self.position, self.remaining)
        start = self.position
        return ByteCursor(self.data[start:start + size], origin=self.origin + start)

    def _read(self, size: int, fn: Callable[[], T]) -> T:
        start = self.position
        available = self.remaining
        try:
            return fn()
        except BufferExhaustedError as e:
            self._stream.seek(start, io.SEEK_SET)
            raise TruncatedData(size, self.origin + start, available) from e

    def read_bytes(self, count: int) -> bytes:
        return self._read(count, lambda: self._reader.read(count))

    def read_u8(self) -> int:
        return self._read(1, self._reader.read_uint8)

    def read_u16(self) -> int:
        return self._read(2, self._reader.read_uint16)

    def read_u32(self) -> int:
        return self._read(4, self._reader.read_uint32)

    def read_i32(self) -> int:
        return self._read(4, self._reader.read_int32)

    def read_u64(self) -> int:
        return self._read(8, self._reader.read_uint64)

    def read_string(self) -> str:
        length = self.read_u8()
        return self.read_bytes(length).decode("latin-1")
