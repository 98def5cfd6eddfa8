import random

import pytest

from minnowstack.byte_stream import ByteStream, read
from minnowstack.reassembler import Reassembler


def _feed(inserts, capacity=65000, last_at=None):
    """Build a reassembler and insert (first_index, data) pairs into it."""
    reassembler = Reassembler(ByteStream(capacity))
    for first, data in inserts:
        is_last = last_at is not None and first + len(data) == last_at
        reassembler.insert(first, data, is_last)
    return reassembler


def _drain(reassembler):
    return read(reassembler.output(), 1 << 20)


@pytest.mark.parametrize(
    "capacity, inserts, expected, pending",
    [
        (65000, [(0, b"abcd")], b"abcd", 0),
        (65000, [(1, b"bc")], b"", 2),
        (65000, [(1, b"bc"), (0, b"a")], b"abc", 0),
        (65000, [(2, b"cd"), (5, b"f")], b"", 3),
        (65000, [(2, b"cd"), (5, b"f"), (3, b"d")], b"", 3),
        (65000, [(2, b"cd"), (5, b"f"), (3, b"d"), (0, b"ab")], b"abcd", 1),
        (65000, [(2, b"cd"), (0, b"abcdef")], b"abcdef", 0),
        (65000, [(0, b"ab"), (0, b"ab")], b"ab", 0),
        (2, [(3, b"x")], b"", 0),
        (4, [(2, b"cdef")], b"", 2),
        (4, [(2, b"cdef"), (0, b"ab")], b"abcd", 0),
    ],
)
def test_reassembly(capacity, inserts, expected, pending):
    reassembler = _feed(inserts, capacity)
    assert reassembler.bytes_pending() == pending
    assert _drain(reassembler) == expected
    assert reassembler.output().bytes_pushed() == len(expected)


def test_bytes_beyond_capacity_are_discarded():
    reassembler = _feed([(0, b"abc")], capacity=2, last_at=3)
    stream = reassembler.output()
    assert _drain(reassembler) == b"ab"
    assert not stream.is_closed()
    reassembler.insert(2, b"c", True)
    assert _drain(reassembler) == b"c"
    assert stream.is_finished()


def test_empty_last_substring_closes_stream():
    stream = _feed([(0, b"")], last_at=0).output()
    assert stream.is_closed()
    assert stream.is_finished()


def test_last_substring_received_early_closes_when_complete():
    reassembler = _feed([(3, b"def")], last_at=6)
    stream = reassembler.output()
    assert not stream.is_closed()
    reassembler.insert(0, b"abc", False)
    assert stream.is_closed()
    assert _drain(reassembler) == b"abcdef"
    assert stream.is_finished()


def test_random_overlapping_chunks_reassemble():
    rng = random.Random(1234)
    data = bytes(rng.randrange(256) for _ in range(2000))
    chunks = []
    start = 0
    while start < len(data):
        end = min(len(data), start + rng.randint(1, 40))
        stop = min(len(data), end + rng.randint(0, 10))
        chunks.append((start, data[start:stop]))
        start = end
    rng.shuffle(chunks)

    reassembler = _feed(chunks, capacity=4096, last_at=len(data))
    assert _drain(reassembler) == data
    assert reassembler.output().is_finished()
    assert reassembler.bytes_pending() == 0