"""Block-aligned buffer allocation and reads."""

from __future__ import annotations

import os

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import InvalidArgumentError


class DirectIoLib:
    """Reads whole file-system blocks and exposes the requested range as a view."""

    def __init__(self, fs_block_size: int) -> None:
        if fs_block_size <= 0 or fs_block_size & (fs_block_size - 1):
            raise ValueError(f"block size must be a positive power of two: {fs_block_size}")
        self.fs_block_size = fs_block_size
        self._not_mask = ~(fs_block_size - 1)

    def block_start(self, value: int) -> int:
        """Round ``value`` down to a block boundary."""
        return value & self._not_mask

    def block_end(self, value: int) -> int:
        """Round ``value`` up to a block boundary."""
        return (value + self.fs_block_size - 1) & self._not_mask

    def allocate_direct_buffer(self, size: int) -> ByteBuffer:
        """Allocate a buffer big enough for an aligned read of ``size`` bytes."""
        to_allocate = self.block_end(size) + (0 if size == 1 else self.fs_block_size)
        return ByteBuffer(to_allocate)

    def read(self, fd: int, file_offset: int, direct_buffer: ByteBuffer, length: int) -> ByteBuffer:
        """Read the blocks covering ``[file_offset, file_offset + length)`` into ``direct_buffer``.

        The returned view holds exactly the requested bytes.
        """
        aligned = self.block_start(file_offset)
        to_read = self.block_end(file_offset + length) - aligned
        if to_read > len(direct_buffer):
            raise InvalidArgumentError(
                f"buffer of {len(direct_buffer)} bytes cannot hold an aligned read of {to_read} bytes")
        try:
            data = os.pread(fd, to_read, aligned)
        except OSError as exc:
            raise InvalidArgumentError("pread failed") from exc
        direct_buffer.memory[:len(data)] = data
        return direct_buffer.view(file_offset - aligned, length)