def resolve_range(total: int, index: int, length: int | None) -> int:
    if length is None:
        length = total - index
    if not (0 <= index and 0 <= length and index + length <= total):
        raise ValueError(f"Invalid range: index={index}, length={length}, available={total}")
    return length


def byte_view(obj, writable: bool = False) -> memoryview:
    view = memoryview(obj)
    if writable and view.readonly:
        view.release()
        raise TypeError(f"Destination must be writable: {type(obj).__name__}")
    if view.format == "B" and view.ndim == 1:
        return view
    try:
        return view.cast("B")
    finally:
        view.release()
