"""Captcha session storage

Both endpoints reach shared state only through a CaptchaSessionStore. The SQL
store commits every write on its own (single-row semantics, like the hosted
table it replaces); the in-memory store serves single-instance deployments.
"""

import asyncio
import heapq
import logging
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reliefhub.app.models.captcha_session import CaptchaSession

logger = logging.getLogger(__name__)


class CaptchaStoreError(Exception):
    """The backing store failed; nothing was changed by the failed call"""


class DuplicateSessionError(CaptchaStoreError):
    """A session with the same id already exists"""


class CaptchaSessionStore(ABC):
    @abstractmethod
    async def insert(self, captcha: CaptchaSession) -> None:
        """Store a new session; raises DuplicateSessionError if the id exists."""

    @abstractmethod
    async def find_by_id(self, session_id: str) -> CaptchaSession | None:
        """Point lookup by session id."""

    @abstractmethod
    async def mark_verified(self, session_id: str) -> bool:
        """Set verified=true if it is still false.

        Returns True only for the call that performed the transition, so at
        most one concurrent verification can succeed.
        """

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions with expires_at < now, returning how many went."""


class SQLCaptchaSessionStore(CaptchaSessionStore):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, captcha: CaptchaSession) -> None:
        try:
            if await self.session.get(CaptchaSession, captcha.session_id) is not None:
                raise DuplicateSessionError(f"captcha session {captcha.session_id} already exists")
            self.session.add(captcha)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateSessionError(
                f"captcha session {captcha.session_id} already exists"
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise CaptchaStoreError("failed to insert captcha session") from e

    async def find_by_id(self, session_id: str) -> CaptchaSession | None:
        stmt = (
            select(CaptchaSession)
            .where(CaptchaSession.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise CaptchaStoreError("failed to load captcha session") from e
        return result.scalar_one_or_none()

    async def mark_verified(self, session_id: str) -> bool:
        stmt = (
            update(CaptchaSession)
            .where(
                CaptchaSession.session_id == session_id,
                CaptchaSession.verified.is_(False),
            )
            .values(verified=True)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise CaptchaStoreError("failed to mark captcha session verified") from e
        return result.rowcount == 1

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(CaptchaSession).where(CaptchaSession.expires_at < now)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise CaptchaStoreError("failed to delete expired captcha sessions") from e
        if result.rowcount:
            logger.debug("Pruned %d expired captcha sessions", result.rowcount)
        return result.rowcount or 0


def _detached_copy(captcha: CaptchaSession) -> CaptchaSession:
    return CaptchaSession(**captcha.model_dump())


class InMemoryCaptchaSessionStore(CaptchaSessionStore):
    """Process-local store: a dict keyed by id plus a heap ordered by expiry.

    Returned sessions are copies, so callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, CaptchaSession] = {}
        self._expiry_heap: list[tuple[datetime, str]] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    async def insert(self, captcha: CaptchaSession) -> None:
        async with self._lock:
            if captcha.session_id in self._sessions:
                raise DuplicateSessionError(f"captcha session {captcha.session_id} already exists")
            self._sessions[captcha.session_id] = _detached_copy(captcha)
            heapq.heappush(self._expiry_heap, (captcha.expires_at, captcha.session_id))

    async def find_by_id(self, session_id: str) -> CaptchaSession | None:
        captcha = self._sessions.get(session_id)
        return _detached_copy(captcha) if captcha is not None else None

    async def mark_verified(self, session_id: str) -> bool:
        async with self._lock:
            captcha = self._sessions.get(session_id)
            if captcha is None or captcha.verified:
                return False
            captcha.verified = True
            return True

    async def delete_expired(self, now: datetime) -> int:
        deleted = 0
        async with self._lock:
            while self._expiry_heap and self._expiry_heap[0][0] < now:
                _, session_id = heapq.heappop(self._expiry_heap)
                if self._sessions.pop(session_id, None) is not None:
                    deleted += 1
        if deleted:
            logger.debug("Pruned %d expired captcha sessions", deleted)
        return deleted
