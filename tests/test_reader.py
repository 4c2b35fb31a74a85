from typing import List, Tuple

import pytest

from wiscvlog.errors import CorruptionError, VlogError, VlogIOError
from wiscvlog.files import new_sequential_file, new_writable_file
from wiscvlog.reader import RecordReader, Reporter
from wiscvlog.writer import BLOCK_SIZE, HEADER_SIZE, RecordWriter


class CollectingReporter(Reporter):
    def __init__(self) -> None:
        self.drops: List[Tuple[int, VlogError]] = []

    def corruption(self, nbytes, error):
        self.drops.append((nbytes, error))


def _write(path, records):
    with RecordWriter(new_writable_file(path)) as writer:
        for record in records:
            writer.add_record(record)


def _open(path, **kwargs):
    return RecordReader(new_sequential_file(path), **kwargs)


def test_round_trip_small_records(tmp_path):
    path = tmp_path / "log"
    records = [b"alpha", b"", b"gamma" * 3]
    _write(path, records)
    with _open(path) as reader:
        assert [reader.read_record() for _ in records] == records
        assert reader.read_record() is None


def test_records_crossing_block_boundaries(tmp_path):
    path = tmp_path / "log"
    records = [bytes([i % 256]) * 1000 for i in range(100)]
    _write(path, records)
    with _open(path) as reader:
        assert list(reader) == records


def test_large_records_read_directly(tmp_path):
    path = tmp_path / "log"
    records = [b"x" * 40000, b"short", b"y" * (BLOCK_SIZE * 2 + 5), b"end"]
    _write(path, records)
    with _open(path) as reader:
        assert list(reader) == records


def test_checksum_mismatch_is_reported(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"payload"])
    raw = bytearray(path.read_bytes())
    raw[-1] ^= 0xFF
    path.write_bytes(bytes(raw))
    reporter = CollectingReporter()
    with _open(path, reporter=reporter) as reader:
        assert reader.read_record() is None
    assert len(reporter.drops) == 1
    nbytes, error = reporter.drops[0]
    assert nbytes == HEADER_SIZE + len(b"payload")
    assert isinstance(error, CorruptionError)
    assert error.message == "checksum mismatch"


def test_checksum_disabled_returns_damaged_data(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"payload"])
    raw = bytearray(path.read_bytes())
    raw[-1] = ord("D")
    path.write_bytes(bytes(raw))
    with _open(path, checksum=False) as reader:
        assert reader.read_record() == b"payloaD"


def test_truncated_last_record_is_ignored(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"first", b"second record"])
    raw = path.read_bytes()
    path.write_bytes(raw[:-3])
    reporter = CollectingReporter()
    with _open(path, reporter=reporter) as reader:
        assert reader.read_record() == b"first"
        assert reader.read_record() is None
    assert reporter.drops == []


def test_truncated_large_record_is_ignored(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"z" * 50000])
    raw = path.read_bytes()
    path.write_bytes(raw[:-10])
    with _open(path) as reader:
        assert reader.read_record() is None
        assert reader.read_record() is None


def test_initial_offset_skips_records(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"one", b"two"])
    offset = HEADER_SIZE + len(b"one")
    with _open(path, initial_offset=offset) as reader:
        assert reader.read_record() == b"two"
        assert reader.read_record() is None


def test_positioned_read(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"hello", b"world"])
    with _open(path) as reader:
        second = HEADER_SIZE + len(b"hello") + HEADER_SIZE
        assert reader.read(5, second) == b"world"
        assert reader.read(5, HEADER_SIZE) == b"hello"


def test_positioned_read_past_end(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"hello"])
    reporter = CollectingReporter()
    with _open(path, reporter=reporter) as reader:
        assert reader.read(100, 0) is None
    assert len(reporter.drops) == 1
    assert reporter.drops[0][0] == 100


def test_jump_to_negative_position_fails(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"data"])
    reporter = CollectingReporter()
    with _open(path, reporter=reporter) as reader:
        assert reader.jump_to_pos(-1) is False
    assert isinstance(reporter.drops[0][1], VlogIOError)


def test_deallocate_disk_space_not_supported(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"data"])
    with _open(path) as reader:
        assert reader.deallocate_disk_space(0, 4) is False


def test_close_makes_reads_fail(tmp_path):
    path = tmp_path / "log"
    _write(path, [b"data"])
    reporter = CollectingReporter()
    reader = _open(path, reporter=reporter)
    reader.close()
    assert reader.read(4, HEADER_SIZE) is None
    assert reporter.drops


def test_empty_file_has_no_records(tmp_path):
    path = tmp_path / "log"
    _write(path, [])
    with _open(path) as reader:
        assert list(reader) == []


@pytest.mark.parametrize("size", [1, BLOCK_SIZE - HEADER_SIZE, BLOCK_SIZE, BLOCK_SIZE // 2 + 1])
def test_boundary_sizes_round_trip(tmp_path, size):
    path = tmp_path / "log"
    records = [b"a" * size, b"b" * size, b"c"]
    _write(path, records)
    with _open(path) as reader:
        assert list(reader) == records