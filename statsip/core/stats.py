import os
import stat
import inspect
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel

from statsip.core.interfaces import (
    FileStatusProtocol, RawStatRecord,
    MODE_PREDICATES, SCALAR_FIELDS, TIMESTAMP_FIELDS
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

# File-type bit field of st_mode
_S_IFMT = 0o170000


def millis_to_datetime(ms: Union[int, float]) -> datetime:
    """Unix milliseconds -> aware UTC datetime, exact to the millisecond."""
    return EPOCH + timedelta(milliseconds=ms)


def datetime_to_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // _ONE_MS


class FileStatus(BaseModel):
    """
    Canonical file status.
    Scalar fields mirror ``os.stat_result``; timestamps are UTC datetimes.
    Mode predicates read ``mode`` on every call, so reassigning it is reflected.
    """
    dev: Optional[int] = None
    mode: Optional[int] = None
    nlink: Optional[int] = None
    uid: Optional[int] = None
    gid: Optional[int] = None
    rdev: Optional[int] = None
    blksize: Optional[int] = None
    ino: Optional[int] = None
    size: Optional[int] = None
    blocks: Optional[int] = None
    atime: Optional[datetime] = None
    mtime: Optional[datetime] = None
    ctime: Optional[datetime] = None
    birthtime: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Any) -> "FileStatus":
        """
        Builds a status from a RawStatRecord (or any object carrying the same
        attributes). No validation: unexpected values are carried through as-is,
        keys that are not stat fields are dropped.
        """
        fields = _fields_of(record)
        for name in TIMESTAMP_FIELDS:
            if name in fields:
                fields[name] = _coerce_timestamp(fields[name])
        return cls.model_construct(**fields)

    @classmethod
    def from_stat_result(cls, result: os.stat_result) -> "FileStatus":
        ctime_ns = result.st_ctime_ns
        birthtime_ns = getattr(result, "st_birthtime_ns", None)
        if birthtime_ns is None and hasattr(result, "st_birthtime"):
            birthtime_ns = int(result.st_birthtime * 1_000_000_000)
        if birthtime_ns is None:
            # Linux stat() has no creation time
            birthtime_ns = ctime_ns

        return cls(
            dev=result.st_dev,
            mode=result.st_mode,
            nlink=result.st_nlink,
            uid=result.st_uid,
            gid=result.st_gid,
            rdev=getattr(result, "st_rdev", 0),
            blksize=getattr(result, "st_blksize", 0),
            ino=result.st_ino,
            size=result.st_size,
            blocks=getattr(result, "st_blocks", 0),
            atime=millis_to_datetime(result.st_atime_ns // 1_000_000),
            mtime=millis_to_datetime(result.st_mtime_ns // 1_000_000),
            ctime=millis_to_datetime(ctime_ns // 1_000_000),
            birthtime=millis_to_datetime(birthtime_ns // 1_000_000),
        )

    def to_record(self) -> RawStatRecord:
        """Inverse of ``from_record``: timestamps back to Unix milliseconds."""
        record = {name: getattr(self, name, None) for name in SCALAR_FIELDS}
        for name in TIMESTAMP_FIELDS:
            value = getattr(self, name, None)
            record[name] = datetime_to_millis(value) if isinstance(value, datetime) else value
        return record

    def _mode_is(self, file_type: int) -> bool:
        mode = getattr(self, "mode", None)
        if isinstance(mode, bool) or not isinstance(mode, int):
            return False
        # Masked by hand: stat.S_IS* rejects ints outside mode_t
        return (mode & _S_IFMT) == file_type

    def is_block_device(self) -> bool:
        return self._mode_is(stat.S_IFBLK)

    def is_character_device(self) -> bool:
        return self._mode_is(stat.S_IFCHR)

    def is_directory(self) -> bool:
        return self._mode_is(stat.S_IFDIR)

    def is_fifo(self) -> bool:
        return self._mode_is(stat.S_IFIFO)

    def is_file(self) -> bool:
        return self._mode_is(stat.S_IFREG)

    def is_socket(self) -> bool:
        return self._mode_is(stat.S_IFSOCK)

    def is_symbolic_link(self) -> bool:
        return self._mode_is(stat.S_IFLNK)


def is_canonical(value: Any) -> bool:
    """
    True if value exposes every mode predicate as a zero-argument callable
    and carries datetime timestamps, whatever its class.
    """
    if not isinstance(value, FileStatusProtocol):
        return False
    for name in MODE_PREDICATES:
        if not _accepts_no_args(getattr(value, name)):
            return False
    return all(isinstance(getattr(value, name), datetime) for name in TIMESTAMP_FIELDS)


def statify(value: Any) -> FileStatusProtocol:
    """
    Returns a canonical file status for value.

    Canonical inputs are returned unchanged (same object). ``os.stat_result``
    and plain records are converted into a new ``FileStatus``. Never raises on
    malformed records; predicates on a bad ``mode`` are simply False.
    """
    if is_canonical(value):
        return value
    if isinstance(value, os.stat_result):
        return FileStatus.from_stat_result(value)
    return FileStatus.from_record(value)


def _accepts_no_args(fn: Any) -> bool:
    if not callable(fn):
        return False
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Some builtins don't expose a signature
        return True
    try:
        signature.bind()
    except TypeError:
        return False
    return True


def _fields_of(record: Any) -> dict:
    if isinstance(record, Mapping):
        return {
            name: record[name]
            for name in SCALAR_FIELDS + TIMESTAMP_FIELDS
            if name in record
        }
    return {
        name: getattr(record, name)
        for name in SCALAR_FIELDS + TIMESTAMP_FIELDS
        if hasattr(record, name)
    }


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    try:
        return millis_to_datetime(value)
    except (OverflowError, ValueError):
        # Out of datetime range: left for the caller to notice
        return value
