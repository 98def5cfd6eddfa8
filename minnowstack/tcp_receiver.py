"""The receiving half of a TCP endpoint and the messages exchanged by both halves."""

from __future__ import annotations

from dataclasses import dataclass, field

from minnowstack.byte_stream import ByteStream
from minnowstack.reassembler import Reassembler
from minnowstack.wrapping_integers import Wrap32

_MAX_WINDOW = (1 << 16) - 1


@dataclass
class TCPSenderMessage:
    """A segment travelling from a sender to the peer's receiver."""

    seqno: Wrap32 = field(default_factory=lambda: Wrap32(0))
    syn: bool = False
    payload: bytes = b""
    fin: bool = False
    rst: bool = False

    def sequence_length(self) -> int:
        """How many sequence numbers this segment occupies."""
        return int(self.syn) + len(self.payload) + int(self.fin)


@dataclass
class TCPReceiverMessage:
    """An acknowledgment and window advertisement sent back to the sender."""

    ackno: Wrap32 | None = None
    window_size: int = 0
    rst: bool = False


class TCPReceiver:
    """Places incoming segment payloads at the right stream index and builds acknowledgments."""

    def __init__(self, reassembler: Reassembler) -> None:
        self._reassembler = reassembler
        self._isn: Wrap32 | None = None

    def stream(self) -> ByteStream:
        """The stream that received bytes are delivered into."""
        return self._reassembler.output()

    def receive(self, message: TCPSenderMessage) -> None:
        """Process one segment from the peer's sender."""
        if message.rst:
            self.stream().set_error()
            return

        # The sequence number of the SYN carries no data once the connection is known.
        if self._isn is not None and message.seqno == self._isn:
            return

        if self._isn is None:
            if not message.syn:
                return
            self._isn = message.seqno

        checkpoint = self.stream().bytes_pushed()
        absolute = message.seqno.unwrap(self._isn, checkpoint)
        stream_index = absolute - 1 if absolute > 0 else 0
        self._reassembler.insert(stream_index, message.payload, message.fin)

    def send(self) -> TCPReceiverMessage:
        """Build the acknowledgment describing what has been received so far."""
        stream = self.stream()
        ackno = None
        if self._isn is not None:
            next_absolute = 1 + stream.bytes_pushed() + int(stream.is_closed())
            ackno = Wrap32.wrap(next_absolute, self._isn)
        window = min(stream.available_capacity(), _MAX_WINDOW)
        return TCPReceiverMessage(ackno=ackno, window_size=window, rst=stream.has_error())