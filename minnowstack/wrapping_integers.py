"""32-bit wrapping sequence numbers measured from an arbitrary zero point."""

from __future__ import annotations

_MOD32 = 1 << 32
_MASK32 = _MOD32 - 1
_MASK64 = (1 << 64) - 1
_HALF32 = 1 << 31


class Wrap32:
    """A 32-bit unsigned integer that wraps back to zero after 2**32 - 1."""

    __slots__ = ("_raw",)

    def __init__(self, raw_value: int) -> None:
        self._raw = raw_value & _MASK32

    @property
    def raw_value(self) -> int:
        """The wrapped 32-bit value."""
        return self._raw

    @staticmethod
    def wrap(n: int, zero_point: Wrap32) -> Wrap32:
        """Wrap the absolute sequence number ``n`` relative to ``zero_point``."""
        return Wrap32(n + zero_point._raw)

    def unwrap(self, zero_point: Wrap32, checkpoint: int) -> int:
        """Return the absolute sequence number closest to ``checkpoint`` that wraps to this value."""
        anchor = Wrap32.wrap(checkpoint, zero_point)
        delta = (self._raw - anchor._raw) & _MASK32
        result = (checkpoint + delta) & _MASK64
        if delta > _HALF32 and result >= _MOD32:
            result -= _MOD32
        return result

    def __add__(self, n: int) -> Wrap32:
        return Wrap32(self._raw + n)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Wrap32):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"Wrap32({self._raw})"