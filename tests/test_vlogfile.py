import pytest

from wiscvlog.errors import CorruptionError
from wiscvlog.vlogfile import VlogFile
from wiscvlog.writer import HEADER_SIZE, encode_header

RECORDS = [
    "1ww12swxsn",
    "sbshxsaxljxshhx",
    "egdywejsjncdjbccjssc",
    "jadnjandjansnjdhbdhe",
    "jajdbjdjsndaowoefgscj",
]


def test_read_and_write(tmp_path):
    with VlogFile(tmp_path / "vlogfile.test") as vlog:
        for item in RECORDS:
            vlog.write_record(item)
        read_back = []
        while True:
            try:
                read_back.append(vlog.read_record())
            except CorruptionError:
                break
    assert read_back == [item.encode() for item in RECORDS]


def test_iteration_yields_records(tmp_path):
    with VlogFile(tmp_path / "log") as vlog:
        for item in RECORDS:
            vlog.write_record(item)
        assert [r.decode() for r in vlog] == RECORDS


def test_read_record_on_empty_log_raises(tmp_path):
    with VlogFile(tmp_path / "log") as vlog:
        with pytest.raises(CorruptionError, match="Read Record failed"):
            vlog.read_record()


def test_read_raw_record_and_check_crc(tmp_path):
    with VlogFile(tmp_path / "log") as vlog:
        vlog.write_record(b"first")
        vlog.write_record(b"second")
        vlog.sync()
        offset = HEADER_SIZE + len(b"first")
        raw = vlog.read(offset, HEADER_SIZE + len(b"second"))
        assert raw == encode_header(b"second") + b"second"
        assert vlog.check_crc(raw) == b"second"


def test_read_past_end_raises(tmp_path):
    with VlogFile(tmp_path / "log") as vlog:
        vlog.write_record(b"abc")
        with pytest.raises(CorruptionError, match="Can not read from disk"):
            vlog.read(0, 1000)


def test_check_crc_short_input(tmp_path):
    with VlogFile(tmp_path / "log") as vlog:
        with pytest.raises(CorruptionError, match="string is too short"):
            vlog.check_crc(b"short")


def test_check_crc_detects_damage(tmp_path):
    raw = bytearray(encode_header(b"payload") + b"payload")
    raw[-1] ^= 0x01
    with VlogFile(tmp_path / "log") as vlog:
        with pytest.raises(CorruptionError, match="Check crc failed!"):
            vlog.check_crc(bytes(raw))


def test_check_crc_detects_truncation(tmp_path):
    raw = encode_header(b"payload") + b"pay"
    with VlogFile(tmp_path / "log") as vlog:
        with pytest.raises(CorruptionError):
            vlog.check_crc(raw)


def test_new_file_replaces_existing(tmp_path):
    path = tmp_path / "log"
    path.write_bytes(b"old contents that are not records")
    with VlogFile(path) as vlog:
        vlog.write_record(b"fresh")
        assert vlog.read_record() == b"fresh"
    assert path.read_bytes() == encode_header(b"fresh") + b"fresh"