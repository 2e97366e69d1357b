import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from utils.logging_utils import get_logger

logger = get_logger(__name__)

MeetingRecord = Dict[str, Any]


class SessionStore(ABC):
    """Maps meeting titles to the CreateMeeting response of the live meeting."""

    @abstractmethod
    async def get(self, title: str) -> Optional[MeetingRecord]:
        raise NotImplementedError

    @abstractmethod
    async def put_if_absent(self, title: str, record: MeetingRecord) -> MeetingRecord:
        """Store record unless the title is already present; return whichever record is stored."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, title: str) -> Optional[MeetingRecord]:
        raise NotImplementedError

    @abstractmethod
    async def get_or_create(
        self, title: str, factory: Callable[[], Awaitable[MeetingRecord]]
    ) -> MeetingRecord:
        """
        Return the record for title, awaiting factory() to create it when absent.

        Concurrent callers for the same absent title share a single factory call.
        """
        raise NotImplementedError


class _TitleLock:
    """A lock plus the number of get_or_create callers holding or awaiting it."""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class InMemorySessionStore(SessionStore):
    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._records: Dict[str, Tuple[MeetingRecord, float]] = {}
        # Entries live only while some caller holds or awaits the lock.
        self._locks: Dict[str, _TitleLock] = {}

    def __len__(self) -> int:
        return len(self._records)

    def _live(self, title: str) -> Optional[MeetingRecord]:
        entry = self._records.get(title)
        if entry is None:
            return None
        record, stored_at = entry
        if self.ttl_seconds is not None and self._clock() - stored_at >= self.ttl_seconds:
            logger.info("Meeting record for %r expired", title)
            del self._records[title]
            return None
        return record

    async def get(self, title: str) -> Optional[MeetingRecord]:
        return self._live(title)

    async def put_if_absent(self, title: str, record: MeetingRecord) -> MeetingRecord:
        existing = self._live(title)
        if existing is not None:
            return existing
        self._records[title] = (record, self._clock())
        return record

    async def delete(self, title: str) -> Optional[MeetingRecord]:
        record = self._live(title)
        self._records.pop(title, None)
        return record

    async def get_or_create(
        self, title: str, factory: Callable[[], Awaitable[MeetingRecord]]
    ) -> MeetingRecord:
        record = self._live(title)
        if record is not None:
            return record
        title_lock = self._locks.get(title)
        if title_lock is None:
            title_lock = self._locks[title] = _TitleLock()
        title_lock.users += 1
        try:
            async with title_lock.lock:
                record = self._live(title)
                if record is None:
                    record = await self.put_if_absent(title, await factory())
                return record
        finally:
            title_lock.users -= 1
            if title_lock.users == 0 and self._locks.get(title) is title_lock:
                del self._locks[title]
