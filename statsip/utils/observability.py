import logging
import os
from typing import Optional, Union
from langfuse import Langfuse
from statsip.config import Config

logger = logging.getLogger(__name__)

class Observability:
    """Event tracking for sampled reads. Langfuse is used only when keys are configured."""

    _langfuse = None

    @classmethod
    def get_client(cls) -> Optional[Langfuse]:
        if not cls._langfuse and Config.LANGFUSE_PUBLIC_KEY:
            try:
                cls._langfuse = Langfuse(
                    public_key=Config.LANGFUSE_PUBLIC_KEY,
                    secret_key=Config.LANGFUSE_SECRET_KEY,
                    host=Config.LANGFUSE_HOST
                )
            except Exception as e:
                logger.warning(f"Failed to initialize Langfuse: {e}")
        return cls._langfuse

    @staticmethod
    def track_event(name: str, metadata: dict = None):
        logger.info(f"EVENT: {name} | {metadata}")
        client = Observability.get_client()
        if client:
            try:
                client.create_event(name=name, metadata=metadata)
            except Exception as e:
                logger.warning(f"Langfuse error: {e}")

    @staticmethod
    def track_sip(path: Union[str, os.PathLike], offset: int, bytes_read: int, complete: bool):
        """Records one bounded read. No-op unless TRACK_SIPS is enabled."""
        if not Config.TRACK_SIPS:
            return
        Observability.track_event("File Sip", {
            "path": os.fspath(path),
            "offset": offset,
            "bytes": bytes_read,
            "complete": complete,
            "truncated_at": None if complete else offset + bytes_read
        })
