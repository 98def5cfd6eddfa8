# minnowstack

The building blocks of a TCP endpoint, written in plain Python. The package
has no dependencies outside the standard library.

- `minnowstack.wrapping_integers.Wrap32`: 32-bit wrapping sequence numbers.
  It converts absolute stream indices to on-the-wire sequence numbers and
  back again.
- `minnowstack.byte_stream.ByteStream`: a bounded, in-order byte stream with
  a writing side and a reading side. `read(stream, length)` peeks and pops up
  to `length` bytes.
- `minnowstack.reassembler.Reassembler`: takes out-of-order substrings that
  may overlap and writes them into a `ByteStream` in order.
- `minnowstack.tcp_receiver`: `TCPSenderMessage`, `TCPReceiverMessage` and
  `TCPReceiver`. The receiver turns incoming segments into stream bytes and
  produces acknowledgements and window advertisements.
- `minnowstack.tcp_sender`: `TCPSender` and `RetransmissionTimer`. The sender
  segments an outbound stream and respects the peer's window. It retransmits
  the earliest outstanding segment with exponential back-off. A single
  payload holds at most `MAX_PAYLOAD_SIZE` (1000) bytes unless another limit
  is given.

All stream data is `bytes`.

## Installation

```
pip install .
```

## Usage

### Wrapping sequence numbers

```python
from minnowstack.wrapping_integers import Wrap32

isn = Wrap32(15)
seqno = Wrap32.wrap(3 * 2**32 + 17, isn)
assert seqno == Wrap32(32)
assert seqno.unwrap(isn, 3 * 2**32) == 3 * 2**32 + 17
```

`unwrap` returns the absolute sequence number closest to the checkpoint.

### Byte streams

```python
from minnowstack.byte_stream import ByteStream, read

stream = ByteStream(capacity=8)
stream.push(b"hello, world")   # only 8 bytes fit
stream.close()
assert read(stream, 100) == b"hello, w"
assert stream.is_finished()
```

`ByteStream` also records an error state through `set_error()` and
`has_error()`.

### Reassembly

```python
from minnowstack.byte_stream import ByteStream, read
from minnowstack.reassembler import Reassembler

reassembler = Reassembler(ByteStream(64))
reassembler.insert(3, b"def", False)
assert reassembler.bytes_pending() == 3
reassembler.insert(0, b"abc", False)
assert read(reassembler.output(), 10) == b"abcdef"
```

Bytes beyond the output stream's available capacity are discarded. The
output stream is closed once the byte that ends the last substring has been
written.

### Sending

`TCPSender.push` and `TCPSender.tick` take a callable. The sender calls it
with each `TCPSenderMessage` it transmits:

```python
from minnowstack.byte_stream import ByteStream
from minnowstack.tcp_sender import TCPSender
from minnowstack.wrapping_integers import Wrap32

sent = []
sender = TCPSender(ByteStream(4000), Wrap32(0), 1000)
sender.push(sent.append)          # sends the SYN
assert sent[0].syn
sender.stream().push(b"abc")
sender.stream().close()
sender.tick(1000, sent.append)    # retransmits the SYN after the timeout
assert sender.consecutive_retransmissions() == 1
```

A received acknowledgement goes to `TCPSender.receive` as a
`TCPReceiverMessage`. A window size of zero is probed as if it were one.

### Receiving

```python
from minnowstack.byte_stream import ByteStream
from minnowstack.reassembler import Reassembler
from minnowstack.tcp_receiver import TCPReceiver, TCPSenderMessage
from minnowstack.wrapping_integers import Wrap32

receiver = TCPReceiver(Reassembler(ByteStream(4000)))
receiver.receive(TCPSenderMessage(seqno=Wrap32(5), syn=True, payload=b"hi"))
reply = receiver.send()
assert reply.ackno == Wrap32(8)
assert receiver.stream().bytes_buffered() == 2
```

## What this package does not do

The package holds only the in-memory state machines. It has no network
interface, router, sockets, or serialization of segments to the wire. Its
messages are Python objects that the caller moves between a sender and a
receiver. It has no command-line program.

## Running the tests

```
pip install .[test]
pytest
```