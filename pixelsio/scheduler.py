"""Schedulers that turn a batch of read requests into buffers."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import ConfigFactory, InvalidArgumentError
from pixelsio.reader import PhysicalLocalReader
from pixelsio.request import MergedRequest, RequestBatch


class NoopScheduler:
    """Executes every request as it is, in the order of the batch."""

    def __init__(self, async_io: Optional[bool] = None) -> None:
        self.async_io = async_io

    def _async_enabled(self) -> bool:
        if self.async_io is None:
            return ConfigFactory.instance().bool_check_property("localfs.enable.async.io")
        return self.async_io

    def execute_batch(self, reader: PhysicalLocalReader, batch: RequestBatch, query_id: int = 0,
                      reuse_buffers: Optional[Sequence[ByteBuffer]] = None) -> list[ByteBuffer]:
        """Read each request; with async I/O and reuse buffers the reads are only submitted.

        In the asynchronous case the caller completes the reads.
        """
        reuse = list(reuse_buffers or [])
        results: list[ByteBuffer] = []
        if reuse and self._async_enabled():
            for request, buffer in zip(batch, reuse, strict=False):
                reader.seek(request.start)
                results.append(reader.read_async(request.length, buffer, request.buffer_id))
            if len(results) != len(batch):
                raise InvalidArgumentError("not enough reuse buffers for the batch")
            reader.read_async_submit(len(batch))
            return results
        for position, request in enumerate(batch):
            reader.seek(request.start)
            if reuse:
                if position >= len(reuse):
                    raise InvalidArgumentError("not enough reuse buffers for the batch")
                results.append(reader.read_fully(request.length, reuse[position]))
            else:
                results.append(reader.read_fully(request.length))
        return results


class SortMergeScheduler:
    """Sorts requests by start and merges those close together into single reads."""

    def __init__(self, max_gap: Optional[int] = None) -> None:
        self.max_gap = max_gap

    def sort_merge(self, batch: RequestBatch, query_id: int = 0) -> list[MergedRequest]:
        """Group the sorted requests into merged ranges."""
        requests = sorted(batch, key=lambda request: request.start)
        if not requests:
            return []
        merged: list[MergedRequest] = []
        current = MergedRequest(requests[0], self.max_gap)
        for request in requests[1:]:
            following = current.merge(request)
            if following is not current:
                merged.append(current)
                current = following
        merged.append(current)
        return merged

    def execute_batch(self, reader: PhysicalLocalReader, batch: RequestBatch, query_id: int = 0,
                      reuse_buffers: Optional[Sequence[ByteBuffer]] = None) -> list[ByteBuffer]:
        """Read every merged range and split it; results follow the sorted request order.

        Reuse buffers are not used by this scheduler.
        """
        results: list[ByteBuffer] = []
        for merged in self.sort_merge(batch, query_id):
            reader.seek(merged.start)
            buffer = reader.read_fully(merged.length)
            results.extend(merged.complete(buffer))
        return results


Scheduler = Union[NoopScheduler, SortMergeScheduler]


def get_scheduler(name: Optional[str] = None, config: Optional[ConfigFactory] = None) -> Scheduler:
    """Create the scheduler named ``name``, or the one the configuration names."""
    if name is None:
        name = (config or ConfigFactory.instance()).get_property("read.request.scheduler")
    key = name.lower()
    if key == "noop":
        async_io = None
        if config is not None and "localfs.enable.async.io" in config.properties:
            async_io = config.bool_check_property("localfs.enable.async.io")
        return NoopScheduler(async_io)
    if key == "sortmerge":
        max_gap = None
        if config is not None and "read.request.merge.gap" in config.properties:
            max_gap = int(config.get_property("read.request.merge.gap"))
        return SortMergeScheduler(max_gap)
    raise InvalidArgumentError(f"the read request scheduler is not supported: {name}")