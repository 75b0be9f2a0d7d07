"""Writers that append bytes to local files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import LOCAL_BUFFER_SIZE


@dataclass
class PhysicalWriterOption:
    """Options for creating a physical writer."""

    block_size: int
    add_block_padding: bool
    overwrite: bool


class PhysicalLocalWriter:
    """Appends bytes to a local file, tracking how many have been written."""

    def __init__(self, path: str, overwrite: bool) -> None:
        self.path = path
        self.position = 0
        self._file = open(path, "wb" if overwrite else "ab")

    def prepare(self, length: int) -> int:
        """Return the position the next write of ``length`` bytes will start at."""
        return self.position

    def append(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """Write ``data`` and return the position it started at."""
        start = self.position
        self._file.write(data)
        self.position += len(memoryview(data).cast("B"))
        return start

    def append_buffer(self, buffer: ByteBuffer) -> int:
        """Rewind ``buffer`` and write all of it; return the starting position."""
        buffer.flip()
        remaining = buffer.bytes_remaining()
        return self.append(buffer.memory[buffer.read_pos:buffer.read_pos + remaining])

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __enter__(self) -> "PhysicalLocalWriter":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def buffer_size(self) -> int:
        return LOCAL_BUFFER_SIZE


class LocalFSProvider:
    """Creates writers on the local file system."""

    def create_writer(self, path: str, option: PhysicalWriterOption) -> PhysicalLocalWriter:
        return PhysicalLocalWriter(path, option.overwrite)