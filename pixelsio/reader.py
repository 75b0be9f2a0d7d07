"""Reading a local file through a random access file, synchronously or in queued batches."""

from __future__ import annotations

from typing import Optional

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import ConfigFactory, InvalidArgumentError
from pixelsio.profiler import TimeProfiler
from pixelsio.randomaccess import AsyncRandomAccessFile
from pixelsio.storage import LocalFS

ASYNC_LIB_IOURING = "iouring"
ASYNC_LIB_AIO = "aio"


class PhysicalLocalReader:
    """Reads a file of the local file system and counts the requests made on it."""

    def __init__(self, storage: LocalFS, path: str, async_lib: Optional[str] = None) -> None:
        if not isinstance(storage, LocalFS):
            raise TypeError("Storage is not LocalFS.")
        if path.startswith(LocalFS.SCHEME_PREFIX):
            path = path[len(LocalFS.SCHEME_PREFIX):]
        self.path = path
        self._async_lib = async_lib
        self._raf = storage.open_raf(path)
        self.num_requests = 1
        self.async_num_requests = 0

    def _async_file(self) -> AsyncRandomAccessFile:
        lib = self._async_lib
        if lib is None:
            lib = ConfigFactory.instance().get_property("localfs.async.lib")
        if lib == ASYNC_LIB_IOURING:
            return self._raf
        if lib == ASYNC_LIB_AIO:
            raise InvalidArgumentError("We don't support aio for our async read yet.")
        raise InvalidArgumentError(f"the async read method is unknown: {lib!r}")

    def read_fully(self, length: int, buffer: Optional[ByteBuffer] = None) -> ByteBuffer:
        """Read ``length`` bytes at the current position, optionally into ``buffer``."""
        self.num_requests += 1
        return self._raf.read_fully(length, buffer)

    def close(self) -> None:
        self.num_requests += 1
        self._raf.close()

    def __enter__(self) -> "PhysicalLocalReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def file_length(self) -> int:
        self.num_requests += 1
        return self._raf.length()

    def seek(self, desired: int) -> None:
        self.num_requests += 1
        self._raf.seek(desired)

    def read_long(self) -> int:
        return self._raf.read_long()

    def read_char(self) -> str:
        return self._raf.read_char()

    def read_int(self) -> int:
        return self._raf.read_int()

    def name(self) -> str:
        """The file name without its directory, or "" for an empty path."""
        if not self.path:
            return ""
        return self.path.rpartition("/")[2]

    def read_async(self, length: int, buffer: ByteBuffer, index: int) -> ByteBuffer:
        """Queue a read of ``length`` bytes into ``buffer``; the view is filled on submit."""
        self.num_requests += 1
        return self._async_file().read_async(length, buffer, index)

    def read_async_submit(self, size: int) -> None:
        self.num_requests += 1
        self._async_file().read_async_submit(size)

    def read_async_complete(self, size: int) -> None:
        self.num_requests += 1
        self._async_file().read_async_complete(size)

    def read_async_submit_and_complete(self, size: int) -> None:
        self.num_requests += 1
        raf = self._async_file()
        raf.read_async_submit(size)
        with TimeProfiler.instance().measure("async wait"):
            raf.read_async_complete(size)