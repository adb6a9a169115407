import os

import pytest

from corekv.codec import u64_to_bytes
from corekv.errors import ChecksumMismatchError
from corekv.fileutil import (
    calculate_checksum,
    create_synced_file,
    fid_from_name,
    file_name_sstable,
    load_id_map,
    remove_dir,
    sync_dir,
    verify_checksum,
    vlog_file_path,
)


def test_fid_from_name_parses_table_ids():
    assert fid_from_name("00012.sst") == 12
    assert fid_from_name(os.path.join("some", "dir", "00003.sst")) == 3


def test_fid_from_name_rejects_other_names():
    assert fid_from_name("notes.txt") == 0
    assert fid_from_name("abc.sst") == 0


def test_vlog_file_path_pads_id():
    assert vlog_file_path("dir", 7) == "dir" + os.sep + "00007.vlog"


def test_file_name_sstable_round_trips_through_fid(tmp_path):
    name = file_name_sstable(str(tmp_path), 42)
    assert os.path.dirname(name) == str(tmp_path)
    assert fid_from_name(name) == 42


def test_create_synced_file_refuses_existing(tmp_path):
    path = str(tmp_path / "file.bin")
    with create_synced_file(path, True) as handle:
        handle.write(b"data")
    with open(path, "rb") as handle:
        assert handle.read() == b"data"
    with pytest.raises(FileExistsError):
        create_synced_file(path, False)


def test_load_id_map_collects_table_files(tmp_path):
    for name in ("00001.sst", "00002.sst", "other.txt"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "00009.sst").mkdir()
    assert load_id_map(str(tmp_path)) == {1, 2}


def test_load_id_map_missing_dir_is_empty(tmp_path):
    assert load_id_map(str(tmp_path / "missing")) == set()


def test_calculate_checksum_check_value():
    assert calculate_checksum(b"123456789") == 0xE3069283


def test_verify_checksum_accepts_and_rejects():
    data = b"some table block"
    good = u64_to_bytes(calculate_checksum(data))
    verify_checksum(data, good)
    with pytest.raises(ChecksumMismatchError):
        verify_checksum(data + b"!", good)


def test_sync_dir_missing_raises(tmp_path):
    with pytest.raises(OSError):
        sync_dir(str(tmp_path / "missing"))


def test_remove_dir(tmp_path):
    target = tmp_path / "work"
    (target / "nested").mkdir(parents=True)
    (target / "nested" / "f").write_bytes(b"x")
    remove_dir(str(target))
    assert not target.exists()
    remove_dir(str(target))
    assert not target.exists()