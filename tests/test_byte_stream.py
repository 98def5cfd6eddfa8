import pytest

from minnowstack.byte_stream import ByteStream, read


def test_push_then_peek_returns_data():
    stream = ByteStream(64)
    stream.push(b"hello")
    assert stream.peek() == b"hello"
    assert stream.bytes_buffered() == len(b"hello")
    assert stream.bytes_pushed() == len(b"hello")


def test_push_is_truncated_to_capacity():
    stream = ByteStream(3)
    stream.push(b"hello")
    assert stream.bytes_pushed() == 3
    assert stream.available_capacity() == 0
    assert read(stream, 100) == b"hello"[:3]


def test_push_when_full_is_ignored():
    stream = ByteStream(2)
    stream.push(b"ab")
    stream.push(b"cd")
    assert stream.bytes_pushed() == 2
    assert read(stream, 10) == b"ab"


def test_push_empty_is_ignored():
    stream = ByteStream(8)
    stream.push(b"")
    assert stream.peek() == b""
    assert stream.bytes_pushed() == 0


def test_push_after_close_is_ignored():
    stream = ByteStream(8)
    stream.push(b"ab")
    stream.close()
    stream.push(b"cd")
    assert stream.is_closed()
    assert read(stream, 10) == b"ab"


def test_pop_across_chunks():
    stream = ByteStream(16)
    stream.push(b"ab")
    stream.push(b"cd")
    stream.pop(3)
    assert stream.peek() == b"d"
    assert stream.bytes_popped() == 3
    assert stream.bytes_buffered() == 1


def test_pop_more_than_buffered_empties_stream():
    stream = ByteStream(16)
    stream.push(b"abc")
    stream.pop(100)
    assert stream.bytes_buffered() == 0
    assert stream.bytes_popped() == len(b"abc")
    assert stream.peek() == b""


@pytest.mark.parametrize("capacity", [1, 5, 17])
def test_capacity_invariant(capacity):
    stream = ByteStream(capacity)
    for piece in (b"abc", b"defgh", b"i", b"jklmnop"):
        stream.push(piece)
        assert stream.available_capacity() + stream.bytes_buffered() == capacity
        stream.pop(2)
        assert stream.available_capacity() + stream.bytes_buffered() == capacity
        assert stream.bytes_popped() + stream.bytes_buffered() == stream.bytes_pushed()


def test_finished_only_after_close_and_drain():
    stream = ByteStream(8)
    stream.push(b"xyz")
    assert not stream.is_finished()
    stream.close()
    assert not stream.is_finished()
    stream.pop(len(b"xyz"))
    assert stream.is_finished()


def test_read_respects_length():
    stream = ByteStream(32)
    stream.push(b"abc")
    stream.push(b"defg")
    assert read(stream, 5) == b"abcdefg"[:5]
    assert read(stream, 5) == b"abcdefg"[5:]
    assert read(stream, 5) == b""


def test_capacity_reopens_after_pop():
    stream = ByteStream(4)
    stream.push(b"abcd")
    stream.pop(2)
    stream.push(b"efgh")
    assert stream.bytes_pushed() == 6
    assert read(stream, 10) == b"cdef"


def test_error_flag():
    stream = ByteStream(4)
    assert stream.has_error() is False
    stream.set_error()
    assert stream.has_error() is True