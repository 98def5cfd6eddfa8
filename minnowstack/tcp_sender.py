"""The sending half of a TCP endpoint: segmentation, flow control and retransmission."""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Callable

from minnowstack.byte_stream import ByteStream
from minnowstack.tcp_receiver import TCPReceiverMessage, TCPSenderMessage
from minnowstack.wrapping_integers import Wrap32

MAX_PAYLOAD_SIZE = 1000

TransmitFunction = Callable[[TCPSenderMessage], None]


class RetransmissionTimer:
    """A countdown that fires once the retransmission timeout has elapsed."""

    def __init__(self, initial_rto_ms: int) -> None:
        self._rto = initial_rto_ms
        self._elapsed = 0
        self._active = False

    def is_expired(self) -> bool:
        return self._active and self._elapsed >= self._rto

    def is_active(self) -> bool:
        return self._active

    def activate(self) -> RetransmissionTimer:
        self._active = True
        return self

    def timeout_double(self) -> RetransmissionTimer:
        """Double the retransmission timeout (exponential back-off)."""
        self._rto *= 2
        return self

    def reset(self) -> RetransmissionTimer:
        """Restart the elapsed time without changing the timeout."""
        self._elapsed = 0
        return self

    def tick(self, ms_since_last_tick: int) -> RetransmissionTimer:
        if self._active:
            self._elapsed += ms_since_last_tick
        return self


class TCPSender:
    """Reads an outbound stream and turns it into segments that fit the peer's window."""

    def __init__(
        self,
        input_stream: ByteStream,
        isn: Wrap32,
        initial_rto_ms: int,
        max_payload_size: int = MAX_PAYLOAD_SIZE,
    ) -> None:
        self._input = input_stream
        self._isn = isn
        self._initial_rto_ms = initial_rto_ms
        self._max_payload_size = max_payload_size
        self._window_size = 1
        self._next_seqno = 0
        self._acked_seqno = 0
        self._syn_sent = False
        self._fin_sent = False
        self._timer = RetransmissionTimer(initial_rto_ms)
        self._retransmissions = 0
        self._outstanding: deque[TCPSenderMessage] = deque()
        self._in_flight = 0

    def stream(self) -> ByteStream:
        """The outbound stream the application writes into."""
        return self._input

    def sequence_numbers_in_flight(self) -> int:
        """How many sequence numbers are sent but not yet acknowledged."""
        return self._in_flight

    def consecutive_retransmissions(self) -> int:
        return self._retransmissions

    def make_empty_message(self) -> TCPSenderMessage:
        """A segment that occupies no sequence numbers, at the next sequence number."""
        return TCPSenderMessage(
            seqno=Wrap32.wrap(self._next_seqno, self._isn),
            rst=self._input.has_error(),
        )

    def push(self, transmit: TransmitFunction) -> None:
        """Send as many new segments as the window allows."""
        # A zero window is probed as if it were one byte wide.
        window = self._window_size or 1
        while window > self._in_flight:
            syn = not self._syn_sent
            self._syn_sent = True
            if self._fin_sent:
                break

            remaining = window - self._in_flight
            limit = min(self._max_payload_size, remaining - int(syn))
            payload = bytearray()
            while self._input.bytes_buffered() and len(payload) < limit:
                chunk = self._input.peek()[: limit - len(payload)]
                payload += chunk
                self._input.pop(len(chunk))

            fin = self._input.is_finished() and remaining > int(syn) + len(payload)
            msg = replace(self.make_empty_message(), syn=syn, payload=bytes(payload), fin=fin)
            length = msg.sequence_length()
            if length == 0:
                return
            if fin:
                self._fin_sent = True

            self._timer.activate()
            transmit(msg)
            self._next_seqno += length
            self._in_flight += length
            self._outstanding.append(msg)

    def receive(self, msg: TCPReceiverMessage) -> None:
        """Process an acknowledgment and window update from the peer."""
        if self._input.has_error():
            return
        if msg.rst:
            self._input.set_error()

        self._window_size = msg.window_size
        if msg.ackno is None:
            return

        ack = msg.ackno.unwrap(self._isn, self._next_seqno)
        if ack > self._next_seqno:
            return

        acknowledged = False
        while self._outstanding:
            front_length = self._outstanding[0].sequence_length()
            if ack < self._acked_seqno + front_length:
                break
            acknowledged = True
            self._acked_seqno += front_length
            self._in_flight -= front_length
            self._outstanding.popleft()

        if acknowledged:
            self._retransmissions = 0
            self._timer = RetransmissionTimer(self._initial_rto_ms)
            if self._outstanding:
                self._timer.activate()

    def tick(self, ms_since_last_tick: int, transmit: TransmitFunction) -> None:
        """Advance time, retransmitting the earliest outstanding segment on timeout."""
        if not self._timer.tick(ms_since_last_tick).is_expired():
            return
        if not self._outstanding:
            return
        transmit(self._outstanding[0])
        if self._window_size != 0:
            self._timer.timeout_double()
        self._timer.reset()
        self._retransmissions += 1