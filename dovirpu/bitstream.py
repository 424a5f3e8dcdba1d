"""MSB-first bit reader and writer with Exp-Golomb codes."""

from __future__ import annotations

from .utils import DoviError


class BitReader:
    """Reads bits, fixed-width integers and Exp-Golomb codes from bytes."""

    def __init__(self, data: bytes) -> None:
        data = bytes(data)
        self._value = int.from_bytes(data, "big")
        self._length = len(data) * 8
        self._position = 0

    def available(self) -> int:
        """Number of bits left to read."""
        return self._length - self._position

    def get(self) -> bool:
        """Read one bit."""
        return bool(self.get_n(1))

    def get_n(self, n: int) -> int:
        """Read an unsigned integer of n bits."""
        if n < 0:
            raise DoviError(f"cannot read a negative number of bits: {n}")
        if n > self.available():
            raise DoviError(
                f"cannot read {n} bits, only {self.available()} available"
            )
        shift = self._length - self._position - n
        self._position += n
        return (self._value >> shift) & ((1 << n) - 1)

    def get_ue(self) -> int:
        """Read an unsigned Exp-Golomb code."""
        leading_zeros = 0
        while not self.get():
            leading_zeros += 1
        return (1 << leading_zeros) - 1 + self.get_n(leading_zeros)

    def get_se(self) -> int:
        """Read a signed Exp-Golomb code."""
        code = self.get_ue()
        if code & 1:
            return (code + 1) // 2
        return -(code // 2)


class BitWriter:
    """Accumulates bits and produces zero-padded bytes."""

    def __init__(self) -> None:
        self._value = 0
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def write(self, bit: bool) -> None:
        """Write one bit."""
        self.write_n(1 if bit else 0, 1)

    def write_n(self, value: int, n: int) -> None:
        """Write the lowest n bits of value (two's complement for negatives)."""
        if n < 0:
            raise DoviError(f"cannot write a negative number of bits: {n}")
        self._value = (self._value << n) | (value & ((1 << n) - 1))
        self._length += n

    def write_ue(self, value: int) -> None:
        """Write an unsigned Exp-Golomb code."""
        if value < 0:
            raise DoviError(f"unsigned Exp-Golomb value cannot be negative: {value}")
        code = value + 1
        width = code.bit_length()
        self.write_n(0, width - 1)
        self.write_n(code, width)

    def write_se(self, value: int) -> None:
        """Write a signed Exp-Golomb code."""
        self.write_ue(2 * value - 1 if value > 0 else -2 * value)

    def as_bytes(self) -> bytes:
        """The written bits, padded with zeros to a whole byte."""
        padding = (-self._length) % 8
        total = self._length + padding
        return (self._value << padding).to_bytes(total // 8, "big")