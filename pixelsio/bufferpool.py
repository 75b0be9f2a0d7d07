"""Double-buffered per-column read buffers."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import ConfigFactory, InvalidArgumentError
from pixelsio.directio import DirectIoLib


class BufferPool:
    """Two sets of column buffers: one being read, one being filled ahead."""

    def __init__(self, fs_block_size: Optional[int] = None, extra_size: int = 0) -> None:
        self._fs_block_size = fs_block_size
        self.extra_size = extra_size
        self.col_count = 0
        self.initialized = False
        self._nr_bytes: dict[int, int] = {}
        self._buffers: tuple[dict[int, ByteBuffer], dict[int, ByteBuffer]] = ({}, {})
        # The first switch makes the pool start at buffer 0.
        self.current_index = 1
        self.next_index = 0

    def _block_size(self) -> int:
        if self._fs_block_size is None:
            return int(ConfigFactory.instance().get_property("localfs.block.size"))
        return self._fs_block_size

    def initialize(self, col_ids: Sequence[int], sizes: Sequence[int],
                   column_names: Sequence[str],
                   column_sizes: Optional[Mapping[str, int]] = None) -> None:
        """Allocate buffers on first use; later calls check the sizes still fit.

        ``column_sizes`` maps a column name to a fixed buffer size that replaces
        the requested size plus the extra size.
        """
        if len(col_ids) != len(sizes):
            raise ValueError("col_ids and sizes must have the same length")
        if not self.initialized:
            self.current_index = 0
            self.next_index = 1
            lib = DirectIoLib(self._block_size())
            for col_id, size in zip(col_ids, sizes):
                if column_sizes is None:
                    wanted = size + self.extra_size
                else:
                    name = column_names[col_id]
                    if name not in column_sizes:
                        raise InvalidArgumentError(f"wrong column name: {name}")
                    wanted = column_sizes[name]
                for half in self._buffers:
                    buffer = lib.allocate_direct_buffer(wanted)
                    self._nr_bytes[col_id] = len(buffer)
                    half[col_id] = buffer
            self.col_count = len(col_ids)
            self.initialized = True
            return
        if len(col_ids) != self.col_count:
            raise ValueError(f"expected {self.col_count} columns, got {len(col_ids)}")
        for col_id, size in zip(col_ids, sizes):
            if col_id not in self._nr_bytes:
                raise InvalidArgumentError(f"no such column id: {col_id}")
            if self._nr_bytes[col_id] < size:
                raise InvalidArgumentError(
                    "the new buffer size cannot be larger than the previous buffer size")

    def get_buffer_id(self, index: int) -> int:
        return index + self.current_index * self.col_count

    def get_buffer(self, col_id: int) -> ByteBuffer:
        try:
            return self._buffers[self.current_index][col_id]
        except KeyError:
            raise KeyError(f"no buffer for column id {col_id}") from None

    def reset(self) -> None:
        self.initialized = False
        self._nr_bytes.clear()
        for half in self._buffers:
            half.clear()
        self.col_count = 0

    def switch(self) -> None:
        self.current_index = 1 - self.current_index
        self.next_index = 1 - self.next_index