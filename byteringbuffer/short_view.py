"""
ByteRingBuffer を 16bit 整数 (ビッグエンディアン) の列として扱うビュー。
数量はすべて short 単位。端数の 1 バイトは数えない。
"""

import struct

from byteringbuffer.util import resolve_range

SHORT_FORMAT = ">h"
SHORT_SIZE = struct.calcsize(SHORT_FORMAT)


class ShortView:
    def __init__(self, buffer):
        self._buffer = buffer

    @property
    def size(self) -> int:
        return self._buffer.size // SHORT_SIZE

    @property
    def capacity(self) -> int:
        return self._buffer.capacity // SHORT_SIZE

    @property
    def free(self) -> int:
        return self._buffer.free // SHORT_SIZE

    def add(self, shorts, index: int = 0, length: int | None = None) -> None:
        """Appends with overrun. Does nothing if the buffer cannot hold a single short."""
        data = self._encode(shorts, index, resolve_range(len(shorts), index, length))
        if self.capacity == 0:
            return
        self._buffer.add(data)

    def push(self, shorts, index: int = 0, length: int | None = None) -> int:
        length = min(resolve_range(len(shorts), index, length), self.free)
        return self._buffer.push(self._encode(shorts, index, length)) // SHORT_SIZE

    def peek(self, destination, index: int = 0, length: int | None = None) -> int:
        count = min(resolve_range(len(destination), index, length), self.size)
        self._store(destination, index, self._buffer.peek_bytes(count * SHORT_SIZE))
        return count

    def pop(self, destination, index: int = 0, length: int | None = None) -> int:
        self._buffer._check_borrowed()
        count = min(resolve_range(len(destination), index, length), self.size)
        # 書き込みが失敗した場合は取り除かない
        self._store(destination, index, self._buffer.peek_bytes(count * SHORT_SIZE))
        self._buffer.drop(count * SHORT_SIZE)
        return count

    def drop(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"Invalid count: {count}")
        self._buffer.drop(min(count, self.size) * SHORT_SIZE)

    @staticmethod
    def _encode(shorts, index: int, length: int) -> bytes:
        return struct.pack(f">{length}h", *shorts[index : index + length])

    @staticmethod
    def _store(destination, index: int, data: bytes) -> None:
        for i, (value,) in enumerate(struct.iter_unpack(SHORT_FORMAT, data)):
            destination[index + i] = value
