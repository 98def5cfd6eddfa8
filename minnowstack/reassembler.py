"""Reassembly of indexed, possibly overlapping substrings into a byte stream."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass

from minnowstack.byte_stream import ByteStream


@dataclass
class _Segment:
    first: int
    data: bytes

    @property
    def last(self) -> int:
        return self.first + len(self.data)


class Reassembler:
    """Collects out-of-order substrings and writes them in order to a ByteStream."""

    def __init__(self, output: ByteStream) -> None:
        self._output = output
        self._segments: list[_Segment] = []
        self._pending = 0
        self._first_unassembled = 0
        self._end_index: int | None = None

    def output(self) -> ByteStream:
        """The stream that reassembled bytes are written to."""
        return self._output

    def bytes_pending(self) -> int:
        """How many bytes are held here, waiting for earlier gaps to fill."""
        return self._pending

    def insert(self, first_index: int, data: bytes, is_last_substring: bool) -> None:
        """Insert ``data`` that starts at stream index ``first_index``."""
        segment = _Segment(first_index, bytes(data))
        capacity = self._output.available_capacity()
        first_unacceptable = self._first_unassembled + capacity

        if capacity == 0 or self._output.is_closed():
            return

        if is_last_substring:
            self._end_index = segment.last

        if segment.first > first_unacceptable or segment.last < self._first_unassembled:
            return

        self._trim(segment, first_unacceptable)
        self._store(segment)
        self._flush()

    def _trim(self, segment: _Segment, first_unacceptable: int) -> None:
        if segment.first < self._first_unassembled:
            segment.data = segment.data[self._first_unassembled - segment.first :]
            segment.first = self._first_unassembled
        if segment.last > first_unacceptable:
            segment.data = segment.data[: first_unacceptable - segment.first]

    def _store(self, segment: _Segment) -> None:
        segments = self._segments
        idx = bisect_left(segments, segment.first, key=lambda s: s.first)
        if idx > 0 and segments[idx - 1].last >= segment.first:
            idx -= 1

        while idx < len(segments) and segments[idx].first <= segment.last:
            other = segments[idx]
            if other.first < segment.first:
                segment.data = other.data[: segment.first - other.first] + segment.data
                segment.first = other.first
            if other.last > segment.last:
                segment.data += other.data[segment.last - other.first :]
            self._pending -= len(other.data)
            del segments[idx]

        segments.insert(idx, segment)
        self._pending += len(segment.data)

    def _flush(self) -> None:
        if not self._segments or self._segments[0].first != self._first_unassembled:
            return
        head = self._segments.pop(0)
        self._output.push(head.data)
        self._pending -= len(head.data)
        self._first_unassembled = head.last
        if self._first_unassembled == self._end_index:
            self._output.close()