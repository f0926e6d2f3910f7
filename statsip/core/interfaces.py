import os
from abc import ABC, abstractmethod
from datetime import datetime
from typing import NamedTuple, Optional, Protocol, TypedDict, Union, runtime_checkable


# Domain Models (DTOs)
class RawStatRecord(TypedDict, total=False):
    """Plain stat data, e.g. deserialized from a cache. Timestamps are Unix milliseconds."""
    dev: int
    mode: int
    nlink: int
    uid: int
    gid: int
    rdev: int
    blksize: int
    ino: int
    size: int
    blocks: int
    atime: int
    mtime: int
    ctime: int
    birthtime: int

class SampleResult(NamedTuple):
    excerpt: str
    is_complete_content: bool  # False when bytes exist past the excerpt

MODE_PREDICATES = (
    "is_block_device",
    "is_character_device",
    "is_directory",
    "is_fifo",
    "is_file",
    "is_socket",
    "is_symbolic_link",
)

TIMESTAMP_FIELDS = ("atime", "mtime", "ctime", "birthtime")

SCALAR_FIELDS = ("dev", "mode", "nlink", "uid", "gid", "rdev", "blksize", "ino", "size", "blocks")

# Capabilities
@runtime_checkable
class FileStatusProtocol(Protocol):
    """
    Capability set of a canonical file status.

    Only checks that the names exist; arity and timestamp types are
    verified by ``statsip.core.stats.is_canonical``.
    """

    atime: datetime
    mtime: datetime
    ctime: datetime
    birthtime: datetime

    def is_block_device(self) -> bool: ...

    def is_character_device(self) -> bool: ...

    def is_directory(self) -> bool: ...

    def is_fifo(self) -> bool: ...

    def is_file(self) -> bool: ...

    def is_socket(self) -> bool: ...

    def is_symbolic_link(self) -> bool: ...

# Interfaces
class ISampler(ABC):
    @abstractmethod
    def sip(self, path: Union[str, os.PathLike], limit: Optional[int] = None, offset: int = 0) -> SampleResult:
        """Reads a bounded excerpt of a file starting at offset."""
        pass
