import os
import copy
import pytest
from dataclasses import dataclass
from datetime import datetime, timezone
from types import SimpleNamespace
from statsip.core.stats import (
    FileStatus, statify, is_canonical, millis_to_datetime, datetime_to_millis
)

PLAIN_STATS = {
    "dev": 16777220,
    "mode": 33188,
    "nlink": 1,
    "uid": 501,
    "gid": 20,
    "rdev": 0,
    "blksize": 4096,
    "ino": 175025642,
    "size": 1104,
    "blocks": 8,
    "atime": 1481195566000,
    "mtime": 1481195249000,
    "ctime": 1481195249000,
    "birthtime": 1481192516000,
}

MODE_CHECKS = {
    "is_block_device":     0b0110000110100000,
    "is_character_device": 0b0010000110110110,
    "is_directory":        0b0100000111101101,
    "is_fifo":             0b0001000110100100,
    "is_file":             0b1000000111101101,
    "is_socket":           0b1100000111101101,
    "is_symbolic_link":    0b1010000111101101,
}

@dataclass(frozen=True)
class NativeStatus:
    """A caller-built status that satisfies the capability set."""
    mode: int
    atime: datetime
    mtime: datetime
    ctime: datetime
    birthtime: datetime

    def is_block_device(self): return False
    def is_character_device(self): return False
    def is_directory(self): return False
    def is_fifo(self): return False
    def is_file(self): return True
    def is_socket(self): return False
    def is_symbolic_link(self): return False

def test_converts_plain_records():
    status = statify(PLAIN_STATS)
    assert isinstance(status, FileStatus)
    assert status.dev == 16777220
    assert status.ino == 175025642
    assert status.size == 1104
    assert status.is_file() is True

def test_leaves_canonical_values_untouched():
    status = statify(PLAIN_STATS)
    assert statify(status) is status

    now = datetime.now(timezone.utc)
    native = NativeStatus(mode=0o100644, atime=now, mtime=now, ctime=now, birthtime=now)
    assert statify(native) is native

def test_real_stat_result_is_converted(tmp_path):
    f = tmp_path / "a.txt"
    f.write_text("hello")
    result = os.lstat(f)

    status = statify(result)
    assert isinstance(status, FileStatus)
    assert status.size == 5
    assert status.is_file() is True
    assert status.is_directory() is False
    assert datetime_to_millis(status.mtime) == result.st_mtime_ns // 1_000_000
    assert isinstance(status.birthtime, datetime)

    # Once converted it is canonical
    assert statify(status) is status

def test_retains_accurate_timestamps():
    status = statify(PLAIN_STATS)
    for name in ("atime", "mtime", "ctime", "birthtime"):
        assert isinstance(getattr(status, name), datetime)

    assert datetime_to_millis(status.atime) == 1481195566000
    assert datetime_to_millis(status.mtime) == 1481195249000
    assert datetime_to_millis(status.ctime) == 1481195249000
    assert datetime_to_millis(status.ctime) != 1481195249001
    assert datetime_to_millis(status.birthtime) == 1481192516000
    assert status.atime.tzinfo is not None

def test_one_millisecond_stays_distinguishable():
    a = statify(dict(PLAIN_STATS, mtime=1481195249000))
    b = statify(dict(PLAIN_STATS, mtime=1481195249001))
    assert a.mtime != b.mtime
    assert (b.mtime - a.mtime).total_seconds() == 0.001

def test_mode_predicates():
    for expected, mode in MODE_CHECKS.items():
        status = statify(dict(PLAIN_STATS, mode=mode))
        assert status.mode == mode
        for name in MODE_CHECKS:
            result = getattr(status, name)()
            assert isinstance(result, bool)
            assert result is (name == expected), f"{name}({mode:o})"

def test_mode_predicates_are_live():
    status = statify(PLAIN_STATS)
    assert status.is_file() is True

    status.mode = MODE_CHECKS["is_directory"]
    assert status.is_file() is False
    assert status.is_directory() is True

def test_malformed_records_do_not_raise():
    status = statify({"mode": "rw-r--r--", "atime": "yesterday"})
    assert all(getattr(status, name)() is False for name in MODE_CHECKS)
    assert status.atime == "yesterday"
    assert status.size is None

    empty = statify({})
    assert empty.is_file() is False
    assert empty.mtime is None

def test_attribute_records_are_accepted():
    record = SimpleNamespace(**PLAIN_STATS)
    status = statify(record)
    assert datetime_to_millis(status.atime) == 1481195566000
    assert status.is_file() is True

def test_input_record_is_not_mutated():
    record = copy.deepcopy(PLAIN_STATS)
    statify(record)
    assert record == PLAIN_STATS

def test_to_record_round_trip():
    status = statify(PLAIN_STATS)
    assert status.to_record() == PLAIN_STATS

def test_is_canonical_requires_zero_arg_predicates():
    now = datetime.now(timezone.utc)
    fields = {name: now for name in ("atime", "mtime", "ctime", "birthtime")}
    predicates = {name: (lambda: False) for name in MODE_CHECKS}

    assert is_canonical(SimpleNamespace(**fields, **predicates)) is True

    predicates["is_file"] = lambda mode: True
    assert is_canonical(SimpleNamespace(**fields, **predicates)) is False

    # Numeric timestamps are still raw
    predicates["is_file"] = lambda: True
    assert is_canonical(SimpleNamespace(**dict(fields, mtime=1), **predicates)) is False

def test_millisecond_helpers():
    dt = millis_to_datetime(1481195249001)
    assert dt == datetime(2016, 12, 8, 11, 7, 29, 1000, tzinfo=timezone.utc)
    assert datetime_to_millis(dt) == 1481195249001
    assert datetime_to_millis(datetime(1970, 1, 1)) == 0

def test_out_of_range_modes_are_all_false():
    for mode in (-1, 2**70, 0o170000):
        status = statify(dict(PLAIN_STATS, mode=mode))
        assert all(getattr(status, name)() is False for name in MODE_CHECKS), mode

    # High bits past mode_t don't hide the file type
    assert statify(dict(PLAIN_STATS, mode=2**70 | 0o100644)).is_file() is True

def test_unknown_record_keys_are_dropped():
    record = dict(PLAIN_STATS, _fields_set={"dev"}, values=1, color="red")
    status = statify(record)
    assert status.dev == 16777220
    assert status.is_file() is True
    assert not hasattr(status, "color")
    assert status.to_record() == PLAIN_STATS
