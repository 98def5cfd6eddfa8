"""A bounded, in-memory byte stream with a writing and a reading side."""

from __future__ import annotations

from collections import deque


class ByteStream:
    """A flow-controlled byte pipe holding at most ``capacity`` unread bytes."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._chunks: deque[bytes] = deque()
        self._bytes_written = 0
        self._bytes_buffered = 0
        self._closed = False
        self._error = False

    # Writing side

    def push(self, data: bytes) -> None:
        """Append as much of ``data`` as the available capacity allows."""
        data = bytes(data)
        room = self.available_capacity()
        if room == 0 or self._closed or not data:
            return
        if len(data) > room:
            data = data[:room]
        self._chunks.append(data)
        self._bytes_written += len(data)
        self._bytes_buffered += len(data)

    def close(self) -> None:
        """Signal that nothing more will be written."""
        self._closed = True

    def is_closed(self) -> bool:
        return self._closed

    def available_capacity(self) -> int:
        """How many bytes can be pushed right now."""
        return self.capacity - self._bytes_buffered

    def bytes_pushed(self) -> int:
        """Total number of bytes ever accepted by :meth:`push`."""
        return self._bytes_written

    # Reading side

    def peek(self) -> bytes:
        """Return the next buffered chunk, or ``b""`` if nothing is buffered."""
        return self._chunks[0] if self._chunks else b""

    def pop(self, length: int) -> None:
        """Discard up to ``length`` bytes from the front of the buffer."""
        remaining = min(length, self._bytes_buffered)
        while remaining > 0 and self._chunks:
            front = self._chunks[0]
            if remaining < len(front):
                self._chunks[0] = front[remaining:]
                self._bytes_buffered -= remaining
                return
            self._chunks.popleft()
            self._bytes_buffered -= len(front)
            remaining -= len(front)

    def is_finished(self) -> bool:
        """True once the stream is closed and fully read."""
        return self._closed and self._bytes_buffered == 0

    def bytes_buffered(self) -> int:
        """Number of bytes pushed and not yet popped."""
        return self._bytes_buffered

    def bytes_popped(self) -> int:
        """Total number of bytes ever popped."""
        return self._bytes_written - self._bytes_buffered

    # Error state

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    def has_error(self) -> bool:
        return self._error


def read(stream: ByteStream, length: int) -> bytes:
    """Peek and pop up to ``length`` bytes from ``stream``."""
    out = bytearray()
    while stream.bytes_buffered() and len(out) < length:
        view = stream.peek()
        if not view:
            raise RuntimeError("peek() returned no data while bytes are buffered")
        view = view[: length - len(out)]
        out += view
        stream.pop(len(view))
    return bytes(out)