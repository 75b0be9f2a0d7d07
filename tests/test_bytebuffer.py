import pytest

from pixelsio.bytebuffer import ByteBuffer


@pytest.mark.parametrize(
    "put, get, value",
    [
        ("put_short", "get_short", -1234),
        ("put_int", "get_int", -123456789),
        ("put_long", "get_long", -(2 ** 40)),
        ("put_float", "get_float", 1.5),
        ("put_double", "get_double", 3.141592653589793),
        ("put_char", "get_char", "z"),
        ("put", "get", 200),
    ],
)
def test_sequential_round_trip(put, get, value):
    buf = ByteBuffer(16)
    getattr(buf, put)(value)
    assert getattr(buf, get)() == value
    assert buf.read_pos == buf.write_pos


def test_indexed_access_keeps_positions():
    buf = ByteBuffer(16)
    buf.put_int(42, 4)
    buf.put_long(-7, 8)
    assert buf.get_int(4) == 42
    assert buf.get_long(8) == -7
    assert buf.read_pos == 0
    assert buf.write_pos == 0


def test_little_endian_layout():
    buf = ByteBuffer(4)
    buf.put_int(1)
    assert buf.tobytes() == b"\x01\x00\x00\x00"


def test_long_is_signed():
    assert ByteBuffer.wrap(b"\xff" * 8).get_long() == -1


def test_hex_dump():
    assert ByteBuffer.wrap(b"\x01\xab").hex_dump() == "0x01 0xab"


def test_ascii_dump():
    assert ByteBuffer.wrap(b"ab").ascii_dump().split() == ["a", "b"]


def test_view_shares_memory():
    base = ByteBuffer.wrap(bytearray(8))
    view = base.view(2, 4)
    view.put_int(7)
    assert len(view) == 4
    assert base.get_int(2) == 7


@pytest.mark.parametrize("start, length", [(0, 0), (6, 4), (-1, 2)])
def test_invalid_view_raises(start, length):
    with pytest.raises(ValueError):
        ByteBuffer(8).view(start, length)


def test_read_past_end_raises():
    buf = ByteBuffer(2)
    with pytest.raises(IndexError):
        buf.get_int()
    with pytest.raises(IndexError):
        buf.put_long(1)


def test_read_into_copies_remaining():
    buf = ByteBuffer.wrap(b"hello")
    target = bytearray(10)
    copied = buf.read_into(target, 2, 10)
    assert copied == len(b"hello")
    assert bytes(target[2:7]) == b"hello"
    assert buf.bytes_remaining() == 0
    assert buf.read_into(target, 0, 3) == 0


def test_mark_and_reset_reader_index():
    buf = ByteBuffer.wrap(b"abcdefgh")
    buf.get()
    buf.mark_reader_index()
    marked = buf.read_pos
    buf.get_int()
    buf.reset_reader_index()
    assert buf.read_pos == marked
    assert buf.peek() == ord("b")


def test_flip_rewinds_reads():
    buf = ByteBuffer.wrap(b"xyz")
    buf.get_bytes(3)
    buf.flip()
    assert buf.read_pos == 0
    assert buf.get_bytes(3) == b"xyz"


def test_peek_does_not_advance():
    buf = ByteBuffer.wrap(b"q")
    assert buf.peek() == ord("q")
    assert buf.read_pos == 0


def test_put_buffer_appends_all_bytes():
    dst = ByteBuffer(6)
    dst.put(9)
    dst.put_buffer(ByteBuffer.wrap(b"abc"))
    assert dst.tobytes()[1:4] == b"abc"
    assert dst.write_pos == 1 + len(b"abc")


def test_put_bytes_at_index_moves_write_position():
    buf = ByteBuffer(8)
    buf.put_bytes(b"xy", 3)
    assert buf.tobytes()[3:5] == b"xy"
    assert buf.write_pos == 5


def test_clear_releases_memory():
    buf = ByteBuffer(8)
    buf.put_int(5)
    buf.clear()
    assert len(buf) == 0
    assert buf.write_pos == 0


def test_bytes_remaining_tracks_reads():
    buf = ByteBuffer(10)
    buf.get_short()
    assert buf.bytes_remaining() == len(buf) - 2