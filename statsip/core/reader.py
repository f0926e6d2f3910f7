import os
import logging
from pathlib import Path
from typing import Optional, Union

from statsip.config import Config
from statsip.core.interfaces import ISampler, SampleResult
from statsip.utils.observability import Observability

logger = logging.getLogger(__name__)

class FileSampler(ISampler):
    """
    Reads a bounded excerpt of a file without loading the rest of it.
    The handle is opened per call and always closed before returning.
    """

    def __init__(self, encoding: Optional[str] = None, errors: Optional[str] = None):
        self.encoding = encoding or Config.SIP_ENCODING
        self.errors = errors or Config.SIP_DECODE_ERRORS

    def sip(self, path: Union[str, os.PathLike], limit: Optional[int] = None, offset: int = 0) -> SampleResult:
        if limit is None:
            limit = Config.SIP_DEFAULT_LIMIT
        _check_count("limit", limit)
        _check_count("offset", offset)

        path = Path(path)
        data = b""
        with open(path, 'rb') as f:
            size = os.fstat(f.fileno()).st_size
            remaining = max(size - offset, 0)
            # Never ask for more than is left: read() allocates `n` up front
            if remaining and limit:
                f.seek(offset)
                data = f.read(min(limit, remaining))

        is_complete = len(data) < limit or (size - offset) <= limit
        logger.debug(f"Sipped {len(data)}/{limit} bytes from {path} at offset {offset} (complete={is_complete})")
        Observability.track_sip(path, offset, len(data), is_complete)

        return SampleResult(data.decode(self.encoding, errors=self.errors), is_complete)


def sip_file(
    path: Union[str, os.PathLike],
    limit: Optional[int] = None,
    offset: int = 0,
    encoding: Optional[str] = None
) -> SampleResult:
    """
    Reads up to `limit` bytes of `path` starting at byte `offset`.

    Returns (excerpt, is_complete_content); the flag is False only when more
    bytes exist past the excerpt.

    Raises FileNotFoundError / PermissionError if the file can't be opened,
    ValueError for a negative limit or offset.
    """
    return FileSampler(encoding=encoding).sip(path, limit, offset)


def _check_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
