"""Assignment of files to storage devices and of devices to threads."""

from __future__ import annotations

import threading
from typing import Optional, Sequence

from pixelsio.config import ConfigFactory, InvalidArgumentError


def _device_name(path: str, depth: int) -> str:
    rest = path[1:]
    name = ""
    for _ in range(depth):
        loc = rest.find("/")
        if loc < 0:
            raise InvalidArgumentError("wrong storage depth.")
        name += rest[:loc]
        rest = rest[loc:]
    return name


class StorageArrayScheduler:
    """Groups files by the device they live on so each thread reads its own devices."""

    def __init__(self, files: Sequence[str], thread_num: int,
                 storage_depth: Optional[int] = None) -> None:
        if thread_num <= 0:
            raise ValueError(f"thread count must be positive: {thread_num}")
        if storage_depth is None:
            storage_depth = int(ConfigFactory.instance().get_property("storage.directory.depth"))
        device_ids: dict[str, int] = {}
        self._files: list[list[str]] = []
        for path in files:
            name = _device_name(path, storage_depth)
            # One thread may serve several devices.
            device_id = device_ids.setdefault(name, len(device_ids) % thread_num)
            if device_id >= len(self._files):
                self._files.append([])
            self._files[device_id].append(path)
        devices = len(self._files)
        if len(files) > thread_num and devices % thread_num != 0 and thread_num % devices != 0:
            raise InvalidArgumentError(
                "if multiple devices are used, make sure the thread count is divisible by "
                "the device num or the device num is divisible by the thread count. "
                f"Now the thread count is {thread_num}, and the storage device num is "
                f"{devices}. Otherwise the load balancing issue occurs.")
        self._lock = threading.Lock()
        self._current = 0

    def acquire_device_id(self) -> int:
        """Hand out device ids round robin."""
        with self._lock:
            device_id = self._current
            self._current = (self._current + 1) % len(self._files)
            return device_id

    def device_sum(self) -> int:
        return len(self._files)

    def file_sum(self, device_id: int) -> int:
        return len(self._files[device_id])

    def file_name(self, device_id: int, file_id: int) -> str:
        return self._files[device_id][file_id]

    def max_file_sum(self) -> int:
        return max((len(files) for files in self._files), default=0)

    def batch_id(self, device_id: int, file_id: int) -> int:
        """The position of a file when the devices' files are laid end to end."""
        return sum(len(files) for files in self._files[:device_id]) + file_id