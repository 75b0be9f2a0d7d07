"""Random access file readers, with block-aligned and queued asynchronous reads."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional

from pixelsio.allocator import OrdinaryAllocator
from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import ConfigFactory, InvalidArgumentError
from pixelsio.directio import DirectIoLib

_LONG_SIZE = 8
_INT_SIZE = 4
_CHAR_SIZE = 1


class DirectRandomAccessFile:
    """A read-only file with a small block cache for reading scalar values."""

    def __init__(self, path: str, fs_block_size: Optional[int] = None,
                 enable_direct: Optional[bool] = None) -> None:
        if fs_block_size is None:
            fs_block_size = int(ConfigFactory.instance().get_property("localfs.block.size"))
        if enable_direct is None:
            enable_direct = ConfigFactory.instance().bool_check_property("localfs.enable.direct.io")
        self.path = path
        self._fd = os.open(path, os.O_RDONLY)
        self._length = os.fstat(self._fd).st_size
        self._fs_block_size = fs_block_size
        self._enable_direct = enable_direct
        self._offset = 0
        self._buffer_valid = False
        self._direct_io_lib = DirectIoLib(fs_block_size)
        self._small_direct_buffer = self._direct_io_lib.allocate_direct_buffer(fs_block_size)
        self._small_buffer: Optional[ByteBuffer] = None if enable_direct else ByteBuffer(fs_block_size)
        self._allocator = OrdinaryAllocator()
        self._large_buffers: list[ByteBuffer] = []

    def close(self) -> None:
        self._large_buffers.clear()
        fd, self._fd = self._fd, -1
        self._offset = 0
        self._length = 0
        if fd != -1:
            try:
                os.close(fd)
            except OSError as exc:
                raise OSError(f"file {self.path} is not closed properly") from exc

    def __enter__(self) -> "DirectRandomAccessFile":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def offset(self) -> int:
        return self._offset

    def read_fully(self, length: int, buffer: Optional[ByteBuffer] = None) -> ByteBuffer:
        """Read ``length`` bytes at the current offset, optionally into ``buffer``."""
        if self._enable_direct:
            if buffer is None:
                direct = self._direct_io_lib.allocate_direct_buffer(length)
                result = self._direct_io_lib.read(self._fd, self._offset, direct, length)
                self._large_buffers.append(direct)
            else:
                result = self._direct_io_lib.read(self._fd, self._offset, buffer, length)
        else:
            if buffer is None:
                result = self._allocator.allocate(length)
                self._pread_into(result, length, self._offset)
                self._large_buffers.append(result)
            else:
                self._pread_into(buffer, length, self._offset)
                result = buffer.view(0, length)
        self.seek(self._offset + length)
        return result

    def _pread_into(self, buffer: ByteBuffer, length: int, offset: int) -> None:
        if length > len(buffer):
            raise ValueError(f"buffer of {len(buffer)} bytes cannot hold {length} bytes")
        data = os.pread(self._fd, length, offset)
        buffer.memory[:len(data)] = data

    def length(self) -> int:
        return self._length

    def seek(self, offset: int) -> None:
        small = self._small_buffer
        if (self._buffer_valid and small is not None
                and self._offset - small.read_pos < offset < self._offset + small.bytes_remaining()):
            small.read_pos = offset - self._offset + small.read_pos
        else:
            self._buffer_valid = False
        self._offset = offset

    def _ensure_cached(self, size: int) -> ByteBuffer:
        if not self._buffer_valid or self._small_buffer is None \
                or self._small_buffer.bytes_remaining() < size:
            self._populate_buffer()
        self._offset += size
        return self._small_buffer

    def _populate_buffer(self) -> None:
        if self._enable_direct:
            self._small_buffer = self._direct_io_lib.read(
                self._fd, self._offset, self._small_direct_buffer, self._fs_block_size)
        else:
            self._pread_into(self._small_buffer, self._fs_block_size, self._offset)
            self._small_buffer.reset_position()
        self._buffer_valid = True

    def read_long(self) -> int:
        return self._ensure_cached(_LONG_SIZE).get_long()

    def read_int(self) -> int:
        return self._ensure_cached(_INT_SIZE).get_int()

    def read_char(self) -> str:
        return self._ensure_cached(_CHAR_SIZE).get_char()


@dataclass
class _PendingRead:
    fd: int
    target: memoryview
    offset: int
    length: int


@dataclass
class _Ring:
    pending: list[_PendingRead] = field(default_factory=list)
    completed: int = 0
    registered: Optional[list[ByteBuffer]] = None


class AsyncRandomAccessFile(DirectRandomAccessFile):
    """A file whose reads can be queued, submitted together and then completed.

    The queue is per thread and shared by every file of that thread.
    """

    _state = threading.local()

    @classmethod
    def initialize(cls) -> None:
        """Create this thread's read queue if it does not exist yet."""
        if getattr(cls._state, "ring", None) is None:
            cls._state.ring = _Ring()

    @classmethod
    def reset(cls) -> None:
        """Drop this thread's read queue and registered buffers."""
        cls._state.ring = None

    @classmethod
    def _ring(cls) -> _Ring:
        ring = getattr(cls._state, "ring", None)
        if ring is None:
            raise InvalidArgumentError("the async read queue is not initialized")
        return ring

    @classmethod
    def register_buffers(cls, buffers: Iterable[ByteBuffer]) -> None:
        """Register fixed buffers, zeroing them; later calls are ignored until :meth:`reset`."""
        ring = cls._ring()
        if ring.registered is not None:
            return
        registered = list(buffers)
        for buffer in registered:
            buffer.memory[:] = bytes(len(buffer))
        ring.registered = registered

    def read_async(self, length: int, buffer: ByteBuffer, index: int) -> ByteBuffer:
        """Queue a read of ``length`` bytes at the current offset into ``buffer``.

        The returned view is filled once the read has been submitted.
        """
        ring = self._ring()
        if ring.registered is not None and not 0 <= index < len(ring.registered):
            raise InvalidArgumentError(f"no registered buffer with index {index}")
        if self._enable_direct:
            aligned = self._direct_io_lib.block_start(self._offset)
            to_read = self._direct_io_lib.block_end(self._offset + length) - aligned
            result_start = self._offset - aligned
        else:
            aligned = self._offset
            to_read = length
            result_start = 0
        if to_read > len(buffer):
            raise InvalidArgumentError("the length is larger than the buffer length")
        ring.pending.append(_PendingRead(self._fd, buffer.memory[:to_read], aligned, to_read))
        result = buffer.view(result_start, length)
        self.seek(self._offset + length)
        return result

    def read_async_submit(self, size: int) -> None:
        """Submit every queued read; ``size`` must equal the number queued."""
        ring = self._ring()
        pending, ring.pending = ring.pending, []
        for read in pending:
            data = os.pread(read.fd, read.length, read.offset)
            read.target[:len(data)] = data
        ring.completed += len(pending)
        if len(pending) != size:
            raise InvalidArgumentError(f"submit fails: {len(pending)} reads submitted, {size} expected")

    def read_async_complete(self, size: int) -> None:
        """Consume ``size`` completed reads."""
        ring = self._ring()
        for _ in range(size):
            if ring.completed == 0:
                raise InvalidArgumentError("wait for completion fails: no submitted read left")
            ring.completed -= 1