"""Allocators handing out byte buffers."""

from __future__ import annotations

from pixelsio.bytebuffer import ByteBuffer

_ALIGNMENT = 4096
DEFAULT_POOL_SIZE = 100 * 1024 * 1024


class OrdinaryAllocator:
    """Allocates a fresh buffer for every request."""

    def allocate(self, size: int) -> ByteBuffer:
        return ByteBuffer(size)


class BufferPoolAllocator:
    """Carves page-aligned slices out of one large buffer until :meth:`reset`."""

    def __init__(self, max_size: int = DEFAULT_POOL_SIZE) -> None:
        self.max_size = max_size
        self.buffer = ByteBuffer(max_size)

    def allocate(self, size: int) -> ByteBuffer:
        """Return a view of ``size`` bytes; the next one starts at the following 4 KiB boundary."""
        start = self.buffer.read_pos
        view = self.buffer.view(start, size)
        remainder = size % _ALIGNMENT
        rounded = size if remainder == 0 else size + _ALIGNMENT - remainder
        self.buffer.read_pos = start + rounded
        return view

    def reset(self) -> None:
        """Make the whole pool available again."""
        self.buffer.reset_position()