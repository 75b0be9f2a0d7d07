"""A fixed-size byte buffer with separate read and write positions."""

from __future__ import annotations

import struct
from typing import Optional, Union

_U8 = struct.Struct("<B")
_CHAR = struct.Struct("<c")
_SHORT = struct.Struct("<h")
_INT = struct.Struct("<i")
_LONG = struct.Struct("<q")
_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")

BytesLike = Union[bytes, bytearray, memoryview]


class ByteBuffer:
    """Little-endian byte buffer; views created with :meth:`view` share its memory."""

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise ValueError(f"buffer size must not be negative: {size}")
        self._memory = memoryview(bytearray(size))
        self.name = ""
        self.reset_position()

    @classmethod
    def _from_memory(cls, memory: memoryview) -> "ByteBuffer":
        buffer = cls.__new__(cls)
        buffer._memory = memory
        buffer.name = ""
        buffer.reset_position()
        return buffer

    @classmethod
    def wrap(cls, data: BytesLike) -> "ByteBuffer":
        """Wrap existing data; a bytearray or memoryview is shared, bytes are copied."""
        if isinstance(data, bytes):
            data = bytearray(data)
        return cls._from_memory(memoryview(data).cast("B"))

    def view(self, start: int, length: int) -> "ByteBuffer":
        """Return a buffer over ``length`` bytes starting at ``start`` sharing this memory."""
        if start < 0 or length <= 0 or start + length > len(self._memory):
            raise ValueError(
                f"invalid view [{start}, {start + length}) of a buffer of {len(self._memory)} bytes")
        return self._from_memory(self._memory[start:start + length])

    @property
    def memory(self) -> memoryview:
        """The whole underlying memory."""
        return self._memory

    def flip(self) -> None:
        if len(self._memory) > 0:
            self.read_pos = 0

    def bytes_remaining(self) -> int:
        return len(self._memory) - self.read_pos

    def clear(self) -> None:
        """Reset the positions and release the memory."""
        self.reset_position()
        self._memory = memoryview(bytearray(0))

    def reset_position(self) -> None:
        self.read_pos = 0
        self.write_pos = 0
        self._mark = 0

    def __len__(self) -> int:
        return len(self._memory)

    def __repr__(self) -> str:
        return (f"ByteBuffer(name={self.name!r}, size={len(self)}, "
                f"read_pos={self.read_pos}, write_pos={self.write_pos})")

    def _check_range(self, pos: int, size: int) -> None:
        if pos < 0 or pos + size > len(self._memory):
            raise IndexError(
                f"access of {size} bytes at {pos} is out of bounds for a buffer of {len(self._memory)} bytes")

    def _read(self, fmt: struct.Struct, index: Optional[int]):
        pos = self.read_pos if index is None else index
        self._check_range(pos, fmt.size)
        (value,) = fmt.unpack_from(self._memory, pos)
        if index is None:
            self.read_pos = pos + fmt.size
        return value

    def _write(self, fmt: struct.Struct, value, index: Optional[int]) -> None:
        pos = self.write_pos if index is None else index
        self._check_range(pos, fmt.size)
        fmt.pack_into(self._memory, pos, value)
        if index is None:
            self.write_pos = pos + fmt.size

    def peek(self) -> int:
        return self._read(_U8, self.read_pos)

    def get(self, index: Optional[int] = None) -> int:
        return self._read(_U8, index)

    def get_bytes(self, length: int) -> bytes:
        if length < 0:
            raise ValueError(f"length must not be negative: {length}")
        self._check_range(self.read_pos, length)
        data = self._memory[self.read_pos:self.read_pos + length].tobytes()
        self.read_pos += length
        return data

    def get_char(self, index: Optional[int] = None) -> str:
        return self._read(_CHAR, index).decode("latin-1")

    def get_double(self, index: Optional[int] = None) -> float:
        return self._read(_DOUBLE, index)

    def get_float(self, index: Optional[int] = None) -> float:
        return self._read(_FLOAT, index)

    def get_int(self, index: Optional[int] = None) -> int:
        return self._read(_INT, index)

    def get_long(self, index: Optional[int] = None) -> int:
        return self._read(_LONG, index)

    def get_short(self, index: Optional[int] = None) -> int:
        return self._read(_SHORT, index)

    def read_into(self, target: Union[bytearray, memoryview], offset: int = 0,
                  length: Optional[int] = None) -> int:
        """Copy up to ``length`` unread bytes into ``target[offset:]``; return the count copied."""
        if length is None:
            length = len(target) - offset
        actual = max(0, min(length, self.bytes_remaining()))
        if actual == 0:
            return 0
        target[offset:offset + actual] = self._memory[self.read_pos:self.read_pos + actual]
        self.read_pos += actual
        return actual

    def put(self, value: int, index: Optional[int] = None) -> None:
        self._write(_U8, value, index)

    def put_buffer(self, src: "ByteBuffer") -> None:
        self.put_bytes(src.tobytes())

    def put_bytes(self, data: BytesLike, index: Optional[int] = None) -> None:
        if index is not None:
            self.write_pos = index
        length = len(data)
        self._check_range(self.write_pos, length)
        self._memory[self.write_pos:self.write_pos + length] = memoryview(data).cast("B")
        self.write_pos += length

    def put_char(self, value: str, index: Optional[int] = None) -> None:
        encoded = value.encode("latin-1")
        if len(encoded) != 1:
            raise ValueError(f"a char must be a single character: {value!r}")
        self._write(_CHAR, encoded, index)

    def put_double(self, value: float, index: Optional[int] = None) -> None:
        self._write(_DOUBLE, value, index)

    def put_float(self, value: float, index: Optional[int] = None) -> None:
        self._write(_FLOAT, value, index)

    def put_int(self, value: int, index: Optional[int] = None) -> None:
        self._write(_INT, value, index)

    def put_long(self, value: int, index: Optional[int] = None) -> None:
        self._write(_LONG, value, index)

    def put_short(self, value: int, index: Optional[int] = None) -> None:
        self._write(_SHORT, value, index)

    def mark_reader_index(self) -> None:
        self._mark = self.read_pos

    def reset_reader_index(self) -> None:
        """Move the read position back to the last mark."""
        self.read_pos = self._mark

    def tobytes(self) -> bytes:
        return self._memory.tobytes()

    def hex_dump(self) -> str:
        return " ".join(f"0x{byte:02x}" for byte in self._memory)

    def ascii_dump(self) -> str:
        return " ".join(chr(byte) for byte in self._memory)