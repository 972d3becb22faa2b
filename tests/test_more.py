from datetime import datetime
import pytest
from embedded_data_segment import (
    OffsetFile,
    SegmentIO,
    UnsupportedOperationError,
    open_segment,
    read_segment,
    write_segment,
)

def make_file(tmp_path, content: bytes = b"header\n__END__\nhi\nthere\n"):
    p = tmp_path / "more.txt"
    p.write_bytes(content)
    return p

def test_raw_primitives_rejected(tmp_path):
    p = make_file(tmp_path)
    with OffsetFile.open(p) as fh:
        for name in ("fileno", "raw", "detach", "peek", "read1", "readinto", "isatty"):
            with pytest.raises(UnsupportedOperationError):
                getattr(fh, name)
            assert not hasattr(fh, name)
        # Raw positioning never ran: still at logical 0
        assert fh.tell() == 0

def test_unknown_attribute_is_plain_attribute_error(tmp_path):
    p = make_file(tmp_path)
    with OffsetFile.open(p) as fh:
        with pytest.raises(AttributeError) as ei:
            fh.no_such_thing
        assert not isinstance(ei.value, UnsupportedOperationError)

def test_handle_not_assignable(tmp_path):
    p = make_file(tmp_path)
    with OffsetFile.open(p) as fh:
        with pytest.raises(AttributeError):
            fh.extra = 1

def test_implements_segment_interface(tmp_path):
    p = make_file(tmp_path)
    with OffsetFile.open(p) as fh:
        assert isinstance(fh, SegmentIO)

def test_line_reads(tmp_path):
    p = make_file(tmp_path)
    with OffsetFile.open(p) as fh:
        assert list(fh) == [b"hi\n", b"there\n"]
        fh.seek(0)
        assert fh.readlines() == [b"hi\n", b"there\n"]
        fh.seek(0)
        assert fh.readline() == b"hi\n"
        assert fh.gets() == b"there\n"
        assert fh.gets() is None
        assert fh.readline() == b""

def test_byte_reads(tmp_path):
    p = make_file(tmp_path, b"h\n__END__\nab")
    with OffsetFile.open(p) as fh:
        assert list(fh.iter_bytes()) == [ord("a"), ord("b")]
        fh.seek(0)
        assert fh.getc() == b"a"
        assert fh.readchar() == b"b"
        assert fh.getc() is None
        with pytest.raises(EOFError):
            fh.readchar()

def test_iter_bytes_tracks_position(tmp_path):
    p = make_file(tmp_path, b"h\n__END__\nabcdef")
    with OffsetFile.open(p) as fh:
        for b in fh.iter_bytes():
            if b == ord("c"):
                break
        assert fh.tell() == 3

def test_writes(tmp_path):
    p = make_file(tmp_path, b"h\n__END__\n")
    with OffsetFile.open(p) as fh:
        fh.puts("a", "b\n", 3)
        fh.puts()
        fh.puts(["x", b"y"])
        fh.print("p", b"q", 1)
        assert fh.putc(65) == 65
        fh.putc("xyz")
        fh.printf("%d-%s\n", 7, "z")
        fh.writelines([b"l1\n", "l2\n"])
        assert fh.write("é") == 2
        fh.seek(0)
        assert fh.read() == b"a\nb\n3\n\nx\ny\npq1Ax7-z\nl1\nl2\n" + "é".encode("utf-8")
    assert p.read_bytes().startswith(b"h\n__END__\na\n")

def test_write_encoding(tmp_path):
    p = make_file(tmp_path, b"h\n__END__\n")
    with OffsetFile.open(p, encoding="latin-1") as fh:
        assert fh.encoding == "latin-1"
        fh.write("é")
        fh.seek(0)
        assert fh.read() == b"\xe9"

def test_metadata(tmp_path):
    p = make_file(tmp_path)
    with OffsetFile.open(p) as fh:
        for ts in (fh.ctime(), fh.atime(), fh.mtime()):
            assert isinstance(ts, datetime)
        assert fh.name == str(p)

def test_close_and_closed_use(tmp_path):
    p = make_file(tmp_path)
    fh = OffsetFile.open(p)
    assert not fh.closed
    fh.close()
    assert fh.closed
    with pytest.raises(ValueError):
        fh.read()
    assert "closed" in repr(fh)

def test_scoped_work_returns_result_and_closes(tmp_path):
    p = make_file(tmp_path)
    seen = []

    def work(fh):
        seen.append(fh)
        return fh.read()

    assert OffsetFile.open(p, "r", work) == b"hi\nthere\n"
    assert seen[0].closed

def test_scoped_work_closes_on_error(tmp_path):
    p = make_file(tmp_path)
    seen = []

    def work(fh):
        seen.append(fh)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        open_segment(p, work=work)
    assert seen[0].closed

def test_context_manager_closes_on_error(tmp_path):
    p = make_file(tmp_path)
    with pytest.raises(KeyError):
        with OffsetFile.open(p) as fh:
            raise KeyError("x")
    assert fh.closed

def test_read_and_write_helpers(tmp_path):
    p = make_file(tmp_path)
    assert read_segment(p) == b"hi\nthere\n"
    assert OffsetFile.read_all(p) == b"hi\nthere\n"
    assert write_segment(p, b"new") == 3
    assert read_segment(p) == b"new"
    assert p.read_bytes() == b"header\n__END__\nnew"

def test_read_helper_on_unmarked_file(tmp_path):
    p = tmp_path / "plain.txt"
    p.write_bytes(b"plain")
    assert read_segment(p) == b""
    assert p.read_bytes() == b"plain\n__END__\n"

def test_scoped_work_in_place_of_mode(tmp_path):
    p = make_file(tmp_path)
    assert OffsetFile.open(p, lambda fh: fh.read()) == b"hi\nthere\n"
    assert open_segment(p, lambda fh: fh.tell()) == 0
    with pytest.raises(TypeError):
        OffsetFile.open(p, lambda fh: None, lambda fh: None)

def test_puts_none_writes_empty_line(tmp_path):
    p = make_file(tmp_path, b"h\n__END__\n")
    with OffsetFile.open(p) as fh:
        fh.puts(None)
        fh.puts("a", None, "b")
        fh.seek(0)
        assert fh.read() == b"\na\n\nb\n"
