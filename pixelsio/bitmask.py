"""A fixed-length bit mask used to mark selected rows."""

from __future__ import annotations


class PixelsBitMask:
    """Bit mask of a fixed length; every bit starts set."""

    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"mask length must not be negative: {length}")
        self._length = length
        self._mask = bytearray(b"\xff" * ((length + 7) // 8))

    def copy(self) -> "PixelsBitMask":
        other = PixelsBitMask.__new__(PixelsBitMask)
        other._length = self._length
        other._mask = bytearray(self._mask)
        return other

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        bits = "".join("1" if self.get(i) else "0" for i in range(self._length))
        return f"PixelsBitMask({bits})"

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._length:
            raise IndexError(f"bit index {index} out of range for mask of length {self._length}")

    def _check_same_length(self, other: "PixelsBitMask") -> None:
        if other._length != self._length:
            raise ValueError(f"mask lengths differ: {self._length} and {other._length}")

    def is_none(self) -> bool:
        """Return True when no bit within the mask length is set."""
        if not self._mask:
            return True
        if any(self._mask[:-1]):
            return False
        tail_bits = self._length - 8 * (len(self._mask) - 1)
        return not self._mask[-1] & ((1 << tail_bits) - 1)

    def or_(self, other: "PixelsBitMask") -> None:
        self._check_same_length(other)
        self._mask = bytearray(a | b for a, b in zip(self._mask, other._mask))

    def and_(self, other: "PixelsBitMask") -> None:
        self._check_same_length(other)
        self._mask = bytearray(a & b for a, b in zip(self._mask, other._mask))

    def set_all(self) -> None:
        self._mask[:] = b"\xff" * len(self._mask)

    def set(self, index: int, value: int = 1) -> None:
        self._check_index(index)
        byte, bit = divmod(index, 8)
        if value:
            self._mask[byte] |= 1 << bit
        else:
            self._mask[byte] &= ~(1 << bit) & 0xFF

    def get(self, index: int) -> bool:
        self._check_index(index)
        byte, bit = divmod(index, 8)
        return bool(self._mask[byte] & (1 << bit))

    def or_at(self, index: int, value: int) -> None:
        """Set the bit when ``value`` is 1; otherwise leave it unchanged."""
        if value == 1:
            self.set(index, 1)

    def and_at(self, index: int, value: int) -> None:
        """Clear the bit when ``value`` is 0; otherwise leave it unchanged."""
        if value == 0:
            self.set(index, 0)

    def set_byte_aligned(self, index: int, value: int) -> None:
        """Overwrite the whole byte that holds bit ``index``."""
        self._mask[index // 8] = value