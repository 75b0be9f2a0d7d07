# pixelsio

`pixelsio` is a storage I/O layer for Pixels columnar files on a local file system:
byte buffers, row bit masks, profilers, block-aligned reads, merging of nearby read
requests and scheduling of request batches. It uses only the standard library and
relies on `os.pread`, so it needs a POSIX system.

## Modules

- `pixelsio.config` — `ConfigFactory` holds configuration properties.
  `ConfigFactory.from_environment()` requires `PIXELS_SRC` and `PIXELS_HOME` to be set
  and reads `pixels-cxx.properties` from `$PIXELS_HOME` (a missing file gives no
  properties). `ConfigFactory.instance()` loads that once per process;
  `ConfigFactory.set_instance(config)` installs your own (or clears it with `None`).
  `get_property` and `bool_check_property` raise `InvalidArgumentError` (a `ValueError`)
  for a missing key or a value other than `true`/`false`. Also `parse_properties`,
  `icompare` and the shared constants such as `MAGIC` and `LOCAL_BUFFER_SIZE`.
- `pixelsio.bytebuffer` — `ByteBuffer`, a fixed-size little-endian buffer with separate
  read and write positions, typed `get_*`/`put_*` methods (at the current position, or at
  an explicit index without moving it), `view(start, length)` for views sharing memory,
  `mark_reader_index`/`reset_reader_index`, `tobytes`, `hex_dump` and `ascii_dump`.
- `pixelsio.bitmask` — `PixelsBitMask`, a fixed-length mask whose bits all start set,
  with `get`, `set`, `set_all`, `or_`, `and_`, `or_at`, `and_at`, `is_none` and `copy`.
- `pixelsio.profiler` — `CountProfiler` (thread-safe labelled counters) and
  `TimeProfiler` (per-thread timers, `measure(label)` as a context manager, `collect()`
  to merge into shared totals in nanoseconds). Both have `report()` returning text.
- `pixelsio.directio` — `DirectIoLib`, block rounding (`block_start`, `block_end`) and
  reads of whole blocks returning a view of just the requested bytes.
- `pixelsio.allocator` — `OrdinaryAllocator` and `BufferPoolAllocator`, which hands out
  4 KiB-aligned slices of one pool buffer until `reset()`.
- `pixelsio.randomaccess` — `DirectRandomAccessFile` (random access reads with a small
  block cache for `read_long`, `read_int`, `read_char`) and `AsyncRandomAccessFile`,
  whose `read_async` calls queue reads in a per-thread queue (set up with
  `AsyncRandomAccessFile.initialize()`); `read_async_submit(n)` performs them and
  `read_async_complete(n)` consumes the completions.
- `pixelsio.bufferpool` — `BufferPool`, two sets of per-column buffers switched with
  `switch()`.
- `pixelsio.request` — `Request`, `RequestBatch` and `MergedRequest`, which absorbs a
  following request of the same query when the gap is at most `max_gap`.
- `pixelsio.storage` — `Scheme`, `Status`, `FilePath`, `LocalFS` (`list_paths`, `open`,
  `open_raf`, `ensure_scheme_prefix`) and `StorageFactory`.
- `pixelsio.writer` — `PhysicalWriterOption`, `PhysicalLocalWriter` (appends bytes or a
  `ByteBuffer`, tracks the position) and `LocalFSProvider`.
- `pixelsio.devices` — `StorageArrayScheduler`, which groups file paths by device (the
  first `storage_depth` directory components) and hands devices to threads round robin.
- `pixelsio.reader` — `PhysicalLocalReader`, reading a local file synchronously or
  through the queued reads, counting requests in `num_requests`.
- `pixelsio.scheduler` — `NoopScheduler`, `SortMergeScheduler` and `get_scheduler`.

Where a parameter such as `fs_block_size`, `enable_direct`, `max_gap`, `storage_depth`,
`async_lib` or `async_io` is left as `None`, the value is taken from the process-wide
configuration: `localfs.block.size`, `localfs.enable.direct.io`,
`read.request.merge.gap`, `storage.directory.depth`, `localfs.async.lib`,
`localfs.enable.async.io`; `get_scheduler()` without a name uses
`read.request.scheduler` (`noop` or `sortmerge`).

## Installing

```
pip install .
```

## Examples

```python
from pixelsio.bytebuffer import ByteBuffer
from pixelsio.bitmask import PixelsBitMask

buf = ByteBuffer(16)
buf.put_int(42)
buf.put_long(7)
assert buf.get_int() == 42
assert buf.get_long() == 7

mask = PixelsBitMask(10)
mask.set(3, 0)
assert not mask.get(3) and mask.get(4)
```

Merging nearby requests:

```python
from pixelsio.request import RequestBatch
from pixelsio.scheduler import SortMergeScheduler

batch = RequestBatch()
batch.append(1, 0, 10, 0)
batch.append(1, 12, 8, 1)
batch.append(1, 100, 4, 2)
merged = SortMergeScheduler(max_gap=4).sort_merge(batch)
assert [(m.start, m.length) for m in merged] == [(0, 20), (100, 4)]
```

Reading a local file:

```python
from pixelsio.config import ConfigFactory
from pixelsio.reader import PhysicalLocalReader
from pixelsio.storage import StorageFactory

ConfigFactory.set_instance(ConfigFactory({
    "localfs.block.size": "4096",
    "localfs.enable.direct.io": "false",
}))
storage = StorageFactory.instance().get_storage("file")
with PhysicalLocalReader(storage, "file:///tmp/data.bin") as reader:
    reader.seek(8)
    chunk = reader.read_fully(16)
    print(chunk.tobytes())
```

## What it does not do

- It does not read or write the Pixels file format itself: there is no footer parsing,
  no row groups, no column encodings and no schema handling. It provides the I/O
  underneath such a reader or writer.
- There is no command-line tool and no loader for text data.
- Only the local file system is available. `Scheme` knows `hdfs`, `s3`, `minio`,
  `redis`, `gcs` and `mock`, but `StorageFactory.get_storage` raises
  `InvalidArgumentError` for every scheme except `file`.
- Files are opened normally; "direct" mode only makes reads block-aligned. Queued reads
  are performed with `os.pread` when submitted; there is no kernel-level asynchronous
  I/O, and the `aio` setting of `localfs.async.lib` is rejected.

## Running the tests

```
pip install .[test]
pytest
```