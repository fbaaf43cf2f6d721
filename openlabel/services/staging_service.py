import asyncio
import logging
import os
import re
import secrets
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(name: str) -> str:
    """Reduce an uploaded filename to a safe basename."""
    base = os.path.basename((name or "").replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned[:100] or "upload"


class StagingService:
    """
    Stages uploaded bytes as short-lived files for APIs that need a file stream.
    Each staged file gets a unique name and is removed when its scope exits.
    """

    def __init__(self, upload_dir: str):
        self.upload_dir = upload_dir
        self._ensure_upload_dir()

    def _ensure_upload_dir(self):
        """Ensure the staging directory exists."""
        if not os.path.isdir(self.upload_dir):
            os.makedirs(self.upload_dir, exist_ok=True)
            logger.info(f"Created upload directory: {self.upload_dir}")

    def _unique_path(self, original_name: str) -> str:
        token = f"{time.time_ns()}-{secrets.token_hex(4)}"
        return os.path.join(self.upload_dir, f"{token}-{sanitize_filename(original_name)}")

    def _write(self, data: bytes, original_name: str) -> str:
        path = self._unique_path(original_name)
        # "x" refuses to reuse a path another request already holds
        with open(path, "xb") as f:
            try:
                f.write(data)
            except OSError:
                f.close()
                self._remove(path)
                raise
        return path

    @staticmethod
    def _remove(path: str) -> None:
        try:
            os.remove(path)
            logger.debug(f"Removed staged file: {path}")
        except FileNotFoundError:
            pass

    @asynccontextmanager
    async def stage(self, data: bytes, original_name: str) -> AsyncIterator[str]:
        """
        Write `data` to a uniquely named file and yield its path.
        The file is deleted on every exit path, including cancellation.
        """
        path = await asyncio.to_thread(self._write, data, original_name)
        logger.debug(f"Staged {len(data)} bytes at {path}")
        try:
            yield path
        finally:
            self._remove(path)
