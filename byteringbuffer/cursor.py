from byteringbuffer.util import byte_view, resolve_range


class ByteCursor:
    """
    Writable byte region with a position/limit cursor, the target of ByteRingBuffer.peek_into().

    array is the whole backing object; the cursor covers array[array_offset : array_offset + capacity].
    The cursor holds a view of the backing object until release() is called, so a
    bytearray backing cannot be resized before then.
    """

    _array: memoryview
    _offset: int
    _capacity: int
    _position: int
    _limit: int

    def __init__(self, backing, offset: int = 0, length: int | None = None):
        array = byte_view(backing, writable=True)
        try:
            length = resolve_range(len(array), offset, length)
        except ValueError:
            array.release()
            raise
        self._array = array
        self._offset = offset
        self._capacity = length
        self._position = 0
        self._limit = length

    @classmethod
    def allocate(cls, capacity: int) -> "ByteCursor":
        if capacity < 0:
            raise ValueError(f"Invalid capacity: {capacity}")
        return cls(bytearray(capacity))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(position={self._position}, limit={self._limit}, capacity={self._capacity})"

    @property
    def array(self) -> memoryview:
        return self._array

    @property
    def array_offset(self) -> int:
        return self._offset

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, position: int):
        if not (0 <= position <= self._limit):
            raise ValueError(f"Invalid position: {position}, valid: 0 <= position <= {self._limit}")
        self._position = position

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, limit: int):
        if not (0 <= limit <= self._capacity):
            raise ValueError(f"Invalid limit: {limit}, valid: 0 <= limit <= {self._capacity}")
        self._limit = limit
        if self._position > limit:
            self._position = limit

    @property
    def remaining(self) -> int:
        return self._limit - self._position

    def flip(self) -> None:
        self._limit = self._position
        self._position = 0

    def rewind(self) -> None:
        self._position = 0

    def clear(self) -> None:
        self._position = 0
        self._limit = self._capacity

    def tobytes(self) -> bytes:
        return self._array[self._offset : self._offset + self._capacity].tobytes()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def release(self) -> None:
        self._array.release()
