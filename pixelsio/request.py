"""Read requests, batches of them, and merging of nearby requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import ConfigFactory, InvalidArgumentError

_INT_MAX = 2**31 - 1


@dataclass(frozen=True)
class Request:
    """A read of ``length`` bytes at ``start`` for a query, into buffer ``buffer_id``."""

    query_id: int
    start: int
    length: int
    buffer_id: int


class RequestBatch:
    """An ordered collection of read requests."""

    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError(f"Request batch capacity: {capacity}")
        self._requests: list[Request] = []

    def add(self, request: Request) -> None:
        self._requests.append(request)

    def append(self, query_id: int, start: int, length: int, buffer_id: int) -> None:
        self._requests.append(Request(query_id, start, length, buffer_id))

    @property
    def requests(self) -> list[Request]:
        return list(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __iter__(self) -> Iterator[Request]:
        return iter(self._requests)


class MergedRequest:
    """Consecutive requests of one query read together as a single range."""

    def __init__(self, first: Request, max_gap: Optional[int] = None) -> None:
        if max_gap is None:
            max_gap = int(ConfigFactory.instance().get_property("read.request.merge.gap"))
        self.max_gap = max_gap
        self.query_id = first.query_id
        self.start = first.start
        self.end = first.start + first.length
        self.offsets = [0]
        self.lengths = [first.length]
        self.length = first.length

    @property
    def size(self) -> int:
        return len(self.offsets)

    def merge(self, curr: Request) -> "MergedRequest":
        """Absorb ``curr`` and return self, or return a new merged request starting at it."""
        if curr.start < self.end:
            raise InvalidArgumentError("Can not merge backward request.")
        if curr.query_id != self.query_id:
            raise InvalidArgumentError(
                "Can not merge requests from different queries (transactions).")
        gap = curr.start - self.end
        if gap <= self.max_gap and self.length + gap + curr.length <= _INT_MAX:
            self.offsets.append(self.length + gap)
            self.lengths.append(curr.length)
            self.length += gap + curr.length
            self.end = curr.start + curr.length
            return self
        return MergedRequest(curr, self.max_gap)

    def complete(self, buffer: ByteBuffer) -> list[ByteBuffer]:
        """Split the buffer read for the whole range into one view per original request."""
        return [buffer.view(offset, length) for offset, length in zip(self.offsets, self.lengths)]