"""
Meetings Cache - one JSON file per requested day range, valid for a limited time.
"""

import asyncio
import json
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import settings, get_logger
from ..models import Meeting

logger = get_logger("cache")


def cache_key(start: datetime, end: datetime) -> str:
    """
    Day-granular key for a window, e.g. '20240110-20240113'.

    Aware bounds are converted to UTC before truncation.
    """
    return f"{_utc_day(start)}-{_utc_day(end)}"


def _utc_day(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y%m%d")


class FileMeetingsCache:
    """
    File-backed cache of aggregated meeting lists.

    An entry is a hit only for the exact key written earlier and only while the
    file's modification time is within the TTL. I/O problems never propagate:
    reads degrade to a miss and writes to a no-op.
    """

    def __init__(self, cache_dir: Optional[str] = None, ttl_seconds: Optional[int] = None):
        self.cache_dir = Path(cache_dir or settings.cache.directory)
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache.ttl_seconds
        self._locks: Dict[str, asyncio.Lock] = {}

    def path_for(self, start: datetime, end: datetime) -> Path:
        """Cache file for a window."""
        return self.cache_dir / f"meetings-{cache_key(start, end)}.json"

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def try_read(self, start: datetime, end: datetime) -> Tuple[bool, List[Meeting]]:
        """
        Read the cached list for a window.

        Returns:
            (True, meetings) on a fresh hit, (False, []) otherwise.
        """
        key = cache_key(start, end)
        async with self._lock_for(key):
            return await asyncio.to_thread(self._read, key, self.path_for(start, end))

    async def write(self, start: datetime, end: datetime, meetings: Sequence[Meeting]) -> None:
        """Store the list for a window, replacing any previous entry."""
        key = cache_key(start, end)
        async with self._lock_for(key):
            await asyncio.to_thread(self._write, key, self.path_for(start, end), list(meetings))

    def _read(self, key: str, path: Path) -> Tuple[bool, List[Meeting]]:
        try:
            age = time.time() - path.stat().st_mtime
        except FileNotFoundError:
            logger.debug(f"Cache miss: {key}")
            return False, []
        except OSError as e:
            logger.warning(f"Cache stat failed for {path}: {e}")
            return False, []

        if age > self.ttl_seconds:
            logger.debug(f"Cache stale: {key} (age {age:.0f}s)")
            return False, []

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
                raise ValueError("expected a list of meeting objects")
            meetings = [Meeting.from_dict(item) for item in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Cache entry unreadable {path}: {e}")
            return False, []

        logger.debug(f"Cache hit: {key} ({len(meetings)} meetings)")
        return True, meetings

    def _write(self, key: str, path: Path, meetings: List[Meeting]) -> None:
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([m.to_dict() for m in meetings], f, ensure_ascii=False)
            os.replace(tmp_name, path)
            tmp_name = None
            logger.debug(f"Cache write: {key} ({len(meetings)} meetings)")
        except OSError as e:
            logger.warning(f"Cache write failed for {path}: {e}")
        finally:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError as e:
                    logger.debug(f"Could not remove temp cache file {tmp_name}: {e}")
