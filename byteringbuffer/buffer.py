"""
上書き型の固定長バイト循環バッファ。

parameter
    capacity: 論理容量
    start: 最古データの位置
    size: 保持データ量
function
    add(): 追記する (溢れた分は古い順に破棄)
    push(): 空き容量の範囲で追記する
    peek(): 先頭からコピーする
    peek_into(): カーソル付きバッファへコピーする
    peek_segments(): 内部領域をコピーせずに貸し出す
    pop(): コピーして取り除く
    drop(): 先頭から取り除く
    clear(): 初期状態に戻す
"""

import logging
from typing import Callable

from byteringbuffer.short_view import ShortView
from byteringbuffer.util import byte_view, resolve_range

logger = logging.getLogger(__name__)

MAX_CAPACITY = 1 << 30
NULL_BUFFER = memoryview(b"")


class ByteRingBuffer:
    _buffer: memoryview
    _readonly: memoryview
    _capacity: int
    _start: int
    _size: int
    _borrowed: int

    def __init__(self, capacity: int):
        if not (0 < capacity <= MAX_CAPACITY):
            raise ValueError(f"Invalid capacity: {capacity}, valid: 0 < capacity <= {MAX_CAPACITY}")
        self._capacity = capacity
        self._buffer = memoryview(bytearray(capacity))
        self._readonly = self._buffer.toreadonly()
        self._start = 0
        self._size = 0
        self._borrowed = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(capacity={self._capacity}, start={self._start}, size={self._size})"

    def __len__(self):
        return self._size

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def free(self) -> int:
        return self._capacity - self._size

    def add(self, data, index: int = 0, length: int | None = None) -> None:
        """Appends bytes, discarding the oldest ones when the buffer overflows."""
        self._check_borrowed()
        with byte_view(data) as source:
            length = resolve_range(len(source), index, length)
            discarded = self._write(source[index : index + length])
        if discarded:
            logger.debug(f"{self!r} overrun: discarded {discarded} bytes")

    def push(self, data, index: int = 0, length: int | None = None) -> int:
        """Appends only as many bytes as there is free space for and returns that count."""
        self._check_borrowed()
        with byte_view(data) as source:
            length = resolve_range(len(source), index, length)
            pushed = min(length, self.free)
            self._write(source[index : index + pushed])
        return pushed

    def peek(self, destination, index: int = 0, length: int | None = None) -> int:
        """
        Copies up to length bytes, oldest first, into destination[index:].
        The buffer is left unchanged. Returns the number of bytes copied.
        """
        with byte_view(destination, writable=True) as target:
            length = resolve_range(len(target), index, length)
            return self._read(target, index, length)

    def peek_into(self, cursor, length: int | None = None) -> int:
        """
        Same as peek() but targets a cursor-bearing buffer such as ByteCursor.
        Bytes land at cursor.array_offset + cursor.position; the cursor itself is not moved.
        """
        remaining = cursor.limit - cursor.position
        if length is None:
            length = remaining
        if not (0 <= length <= remaining):
            raise ValueError(f"Invalid length: {length}, remaining in cursor: {remaining}")
        return self.peek(cursor.array, cursor.array_offset + cursor.position, length)

    def peek_segments(self, callback: Callable[[memoryview], None]) -> None:
        """
        Lends the held bytes to callback as at most two read-only views, oldest first.
        An empty buffer still produces one call with an empty view.

        Each view is released when its callback returns and the buffer refuses
        mutation while a view is lent out. Slices taken from a view are not
        tracked and must not outlive the callback either.
        """
        if self._size == 0:
            callback(NULL_BUFFER)
            return

        first_size = min(self._capacity - self._start, self._size)
        self._lend(callback, self._start, first_size)
        if first_size != self._size:
            self._lend(callback, 0, self._size - first_size)

    def peek_bytes(self, length: int | None = None) -> bytes:
        if length is None:
            length = self._size
        if length < 0:
            raise ValueError(f"Invalid length: {length}")
        data = bytearray(min(length, self._size))
        with memoryview(data) as target:
            self._read(target, 0, len(data))
        return bytes(data)

    def pop(self, destination, index: int = 0, length: int | None = None) -> int:
        self._check_borrowed()
        read = self.peek(destination, index, length)
        self.drop(read)
        return read

    def pop_bytes(self, length: int | None = None) -> bytes:
        self._check_borrowed()
        data = self.peek_bytes(length)
        self.drop(len(data))
        return data

    def drop(self, count: int) -> None:
        self._check_borrowed()
        if count < 0:
            raise ValueError(f"Invalid count: {count}")
        dropped = min(count, self._size)
        self._start = (self._start + dropped) % self._capacity
        self._size -= dropped

    def clear(self) -> None:
        self._check_borrowed()
        self._start = 0
        self._size = 0

    def short_view(self) -> ShortView:
        return ShortView(self)

    def _check_borrowed(self):
        if self._borrowed:
            raise BufferError("Buffer has lent out segments and cannot be modified.")

    def _write_offset(self) -> int:
        return (self._start + self._size) % self._capacity

    def _advance(self, nbytes: int) -> int:
        # 溢れた分だけ先頭を進める
        new_size = self._size + nbytes
        overflow = max(0, new_size - self._capacity)
        self._size = new_size - overflow
        self._start = (self._start + overflow) % self._capacity
        return overflow

    def _write(self, source: memoryview) -> int:
        length = len(source)
        offset = self._write_offset()

        if offset + length <= self._capacity:
            self._buffer[offset : offset + length] = source
            return self._advance(length)

        discarded = 0
        written = 0
        while written < length:
            offset = self._write_offset()
            chunk = min(length - written, self._capacity - offset)
            self._buffer[offset : offset + chunk] = source[written : written + chunk]
            discarded += self._advance(chunk)
            written += chunk
        return discarded

    def _read(self, target: memoryview, index: int, length: int) -> int:
        if self._size == 0:
            return 0

        to_read = min(length, self._size)
        first_size = min(self._capacity - self._start, self._size, to_read)
        target[index : index + first_size] = self._buffer[self._start : self._start + first_size]

        second_size = to_read - first_size
        if second_size:
            target[index + first_size : index + to_read] = self._buffer[:second_size]
        return to_read

    def _lend(self, callback: Callable[[memoryview], None], offset: int, length: int) -> None:
        self._borrowed += 1
        try:
            with self._readonly[offset : offset + length] as view:
                callback(view)
        finally:
            self._borrowed -= 1
