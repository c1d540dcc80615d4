import copy

import pytest

from netsponge.buffer import Buffer, BufferList, BufferViewList


def test_buffer_basic_access():
    buf = Buffer(b"hello")
    assert buf.size() == 5
    assert len(buf) == 5
    assert buf.at(1) == ord("e")
    assert bytes(buf) == b"hello"
    assert buf.copy() == b"hello"
    assert buf.str() == b"hello"


def test_buffer_default_is_empty():
    buf = Buffer()
    assert buf.size() == 0
    assert bytes(buf) == b""
    buf.remove_prefix(0)
    assert buf.copy() == b""


def test_buffer_remove_prefix():
    buf = Buffer(b"hello")
    buf.remove_prefix(2)
    assert bytes(buf) == b"llo"
    assert buf.at(0) == ord("l")
    buf.remove_prefix(3)
    assert buf.size() == 0
    assert bytes(buf) == b""


def test_buffer_remove_too_much_raises_and_keeps_contents():
    buf = Buffer(b"abc")
    with pytest.raises(IndexError):
        buf.remove_prefix(4)
    assert bytes(buf) == b"abc"


@pytest.mark.parametrize("index", [3, -1, 100])
def test_buffer_at_out_of_range(index):
    with pytest.raises(IndexError):
        Buffer(b"abc").at(index)


def test_buffer_rejects_text():
    with pytest.raises(TypeError):
        Buffer("text")


def test_buffer_copies_are_independent():
    original = Buffer(b"abcdef")
    clone = copy.copy(original)
    clone.remove_prefix(4)
    assert bytes(clone) == b"ef"
    assert bytes(original) == b"abcdef"


def test_buffer_takes_ownership_of_bytearray():
    source = bytearray(b"xyz")
    buf = Buffer(source)
    source[0] = ord("q")
    assert bytes(buf) == b"xyz"


def test_bufferlist_concatenate_and_size():
    bl = BufferList(b"abc")
    bl.append(BufferList(b"def"))
    bl.append(Buffer(b"gh"))
    assert bl.concatenate() == b"abcdefgh"
    assert bl.size() == 8
    assert len(bl) == 8
    assert len(bl.buffers()) == 3


def test_bufferlist_empty():
    bl = BufferList()
    assert bl.size() == 0
    assert bl.concatenate() == b""
    assert bl.to_buffer().size() == 0
    assert bl.buffers() == ()


def test_bufferlist_to_buffer_single():
    bl = BufferList(Buffer(b"payload"))
    assert bytes(bl.to_buffer()) == b"payload"


def test_bufferlist_to_buffer_multiple_raises():
    bl = BufferList(b"a")
    bl.append(b"b")
    with pytest.raises(RuntimeError):
        bl.to_buffer()


def test_bufferlist_remove_prefix_across_buffers():
    bl = BufferList(b"abc")
    bl.append(b"def")
    bl.append(b"ghi")
    bl.remove_prefix(4)
    assert bl.concatenate() == b"efghi"
    assert len(bl.buffers()) == 2
    bl.remove_prefix(2)
    assert bl.concatenate() == b"ghi"
    assert len(bl.buffers()) == 1


def test_bufferlist_remove_too_much_raises():
    bl = BufferList(b"abc")
    with pytest.raises(IndexError):
        bl.remove_prefix(4)


def test_bufferlist_append_does_not_share_offsets():
    other = BufferList(b"xyz")
    bl = BufferList(b"ab")
    bl.append(other)
    bl.remove_prefix(3)
    assert bl.concatenate() == b"yz"
    assert other.concatenate() == b"xyz"


def test_bufferlist_from_buffer_is_copied():
    buf = Buffer(b"hello")
    bl = BufferList(buf)
    bl.remove_prefix(2)
    assert bytes(buf) == b"hello"
    assert bl.concatenate() == b"llo"


def test_bufferlist_buffers_returns_copies():
    bl = BufferList(b"abc")
    bl.buffers()[0].remove_prefix(2)
    assert bl.concatenate() == b"abc"


def test_bufferviewlist_from_bufferlist():
    bl = BufferList(b"abc")
    bl.append(b"defg")
    views = BufferViewList(bl)
    assert views.size() == bl.size()
    assert b"".join(views.as_iovecs()) == bl.concatenate()
    views.remove_prefix(5)
    assert b"".join(views.as_iovecs()) == b"fg"
    assert len(views) == 2
    assert bl.concatenate() == b"abcdefg"


def test_bufferviewlist_from_bytes_and_buffer():
    assert b"".join(BufferViewList(b"raw").as_iovecs()) == b"raw"
    buf = Buffer(b"chunk")
    buf.remove_prefix(1)
    views = BufferViewList(buf)
    assert b"".join(views.as_iovecs()) == b"hunk"


def test_bufferviewlist_remove_exact_drops_view():
    bl = BufferList(b"ab")
    bl.append(b"cd")
    views = BufferViewList(bl)
    views.remove_prefix(2)
    assert len(views.as_iovecs()) == 1
    assert views.size() == 2


def test_bufferviewlist_remove_too_much_raises():
    views = BufferViewList(b"abc")
    with pytest.raises(IndexError):
        views.remove_prefix(4)


def test_bufferviewlist_rejects_text():
    with pytest.raises(TypeError):
        BufferViewList("text")