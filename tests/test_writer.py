from pixelsio.bytebuffer import ByteBuffer
from pixelsio.config import LOCAL_BUFFER_SIZE
from pixelsio.writer import LocalFSProvider, PhysicalLocalWriter, PhysicalWriterOption


def test_append_returns_start_positions(tmp_path):
    target = tmp_path / "out.bin"
    with PhysicalLocalWriter(str(target), True) as writer:
        assert writer.prepare(3) == 0
        assert writer.append(b"abc") == 0
        assert writer.prepare(2) == 3
        assert writer.append(bytearray(b"de")) == 3
        assert writer.position == 5
    assert writer.closed
    assert target.read_bytes() == b"abcde"


def test_overwrite_truncates(tmp_path):
    target = tmp_path / "out.bin"
    target.write_bytes(b"old content")
    with PhysicalLocalWriter(str(target), True) as writer:
        writer.append(b"new")
    assert target.read_bytes() == b"new"


def test_append_mode_keeps_content_and_counts_from_zero(tmp_path):
    target = tmp_path / "out.bin"
    target.write_bytes(b"head")
    with PhysicalLocalWriter(str(target), False) as writer:
        assert writer.append(b"tail") == 0
    assert target.read_bytes() == b"headtail"


def test_append_buffer_writes_whole_buffer(tmp_path):
    target = tmp_path / "out.bin"
    buffer = ByteBuffer.wrap(b"\x01\x02\x03\x04")
    buffer.get()
    buffer.get()
    with PhysicalLocalWriter(str(target), True) as writer:
        assert writer.append_buffer(buffer) == 0
        assert writer.position == 4
    assert target.read_bytes() == b"\x01\x02\x03\x04"


def test_flush_makes_data_visible(tmp_path):
    target = tmp_path / "out.bin"
    writer = PhysicalLocalWriter(str(target), True)
    writer.append(b"xyz")
    writer.flush()
    assert target.read_bytes() == b"xyz"
    writer.close()


def test_buffer_size_is_local_buffer_size(tmp_path):
    with PhysicalLocalWriter(str(tmp_path / "f"), True) as writer:
        assert writer.buffer_size() == LOCAL_BUFFER_SIZE
        assert writer.buffer_size() == 8 * 1024 * 1024


def test_provider_respects_overwrite_option(tmp_path):
    target = tmp_path / "out.bin"
    target.write_bytes(b"keep")
    provider = LocalFSProvider()
    option = PhysicalWriterOption(block_size=1024, add_block_padding=True, overwrite=False)
    with provider.create_writer(str(target), option) as writer:
        writer.append(b"+more")
        assert writer.path == str(target)
    assert target.read_bytes() == b"keep+more"
    option.overwrite = True
    with provider.create_writer(str(target), option) as writer:
        writer.append(b"fresh")
    assert target.read_bytes() == b"fresh"