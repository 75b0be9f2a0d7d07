import struct

import pytest

from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import InvalidArgumentError
from pixelsio.directio import DirectIoLib
from pixelsio.randomaccess import AsyncRandomAccessFile, DirectRandomAccessFile

BLOCK = 4096
PAYLOAD = struct.pack("<qic", 123456789, -42, b"Z") + bytes(range(256)) * 40


@pytest.fixture
def path(tmp_path):
    file_path = tmp_path / "data.pxl"
    file_path.write_bytes(PAYLOAD)
    return str(file_path)


@pytest.fixture
def ring():
    AsyncRandomAccessFile.initialize()
    yield
    AsyncRandomAccessFile.reset()


@pytest.mark.parametrize("direct", [False, True])
def test_scalar_reads(path, direct):
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        assert raf.read_long() == 123456789
        assert raf.read_int() == -42
        assert raf.read_char() == "Z"


@pytest.mark.parametrize("direct", [False, True])
def test_length(path, direct):
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        assert raf.length() == len(PAYLOAD)


@pytest.mark.parametrize("direct", [False, True])
def test_seek_then_read(path, direct):
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        raf.seek(8)
        assert raf.read_int() == -42


@pytest.mark.parametrize("direct", [False, True])
def test_read_across_block_boundary(path, direct):
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        raf.seek(BLOCK - 2)
        assert raf.read_int() == struct.unpack_from("<i", PAYLOAD, BLOCK - 2)[0]


@pytest.mark.parametrize("direct", [False, True])
def test_sequential_ints_match_payload(path, direct):
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        raf.seek(100)
        values = [raf.read_int() for _ in range(2000)]
    assert values == list(struct.unpack_from("<2000i", PAYLOAD, 100))


@pytest.mark.parametrize("direct", [False, True])
def test_read_fully_advances_offset(path, direct):
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        raf.seek(5000)
        chunk = raf.read_fully(300)
        assert chunk.tobytes() == PAYLOAD[5000:5300]
        assert raf.offset == 5300
        assert raf.read_int() == struct.unpack_from("<i", PAYLOAD, 5300)[0]


@pytest.mark.parametrize("direct", [False, True])
def test_read_fully_into_given_buffer(path, direct):
    target = DirectIoLib(BLOCK).allocate_direct_buffer(200)
    with DirectRandomAccessFile(path, BLOCK, direct) as raf:
        raf.seek(13)
        chunk = raf.read_fully(200, target)
    assert chunk.tobytes() == PAYLOAD[13:213]


def test_close_clears_length(path):
    raf = DirectRandomAccessFile(path, BLOCK, False)
    raf.close()
    raf.close()
    assert raf.length() == 0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        DirectRandomAccessFile(str(tmp_path / "missing.pxl"), BLOCK, False)


@pytest.mark.parametrize("direct", [False, True])
def test_async_read_roundtrip(path, ring, direct):
    buffer = DirectIoLib(BLOCK).allocate_direct_buffer(300)
    with AsyncRandomAccessFile(path, BLOCK, direct) as raf:
        raf.seek(5000)
        view = raf.read_async(300, buffer, 0)
        raf.read_async_submit(1)
        raf.read_async_complete(1)
        assert raf.offset == 5300
    assert view.tobytes() == PAYLOAD[5000:5300]


def test_async_submit_count_mismatch(path, ring):
    with AsyncRandomAccessFile(path, BLOCK, False) as raf:
        raf.read_async(10, ByteBuffer(10), 0)
        with pytest.raises(InvalidArgumentError):
            raf.read_async_submit(2)


def test_async_complete_without_submission(path, ring):
    with AsyncRandomAccessFile(path, BLOCK, False) as raf:
        with pytest.raises(InvalidArgumentError):
            raf.read_async_complete(1)


def test_async_requires_initialize(path):
    AsyncRandomAccessFile.reset()
    with AsyncRandomAccessFile(path, BLOCK, False) as raf:
        with pytest.raises(InvalidArgumentError):
            raf.read_async(10, ByteBuffer(10), 0)


def test_register_buffers_zeroes_them(ring):
    buffer = ByteBuffer.wrap(b"\xff" * 16)
    AsyncRandomAccessFile.register_buffers([buffer])
    assert buffer.tobytes() == bytes(16)


def test_registered_index_is_checked(path, ring):
    AsyncRandomAccessFile.register_buffers([ByteBuffer(16)])
    with AsyncRandomAccessFile(path, BLOCK, False) as raf:
        with pytest.raises(InvalidArgumentError):
            raf.read_async(10, ByteBuffer(16), 1)


def test_register_requires_initialize():
    AsyncRandomAccessFile.reset()
    with pytest.raises(InvalidArgumentError):
        AsyncRandomAccessFile.register_buffers([ByteBuffer(8)])