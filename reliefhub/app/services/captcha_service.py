"""Math captcha service"""

import logging
import random
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from reliefhub.app.core.config import settings
from reliefhub.app.core.utils import parse_int, to_iso_utc, utc_now_naive
from reliefhub.app.models.captcha_session import CaptchaSession
from reliefhub.app.schemas.captcha import CaptchaChallengeResponse
from reliefhub.app.services.captcha_store import CaptchaSessionStore, CaptchaStoreError
from reliefhub.app.services.challenge import generate_challenge

logger = logging.getLogger(__name__)


class CaptchaError(ValueError):
    """A verification request the client has to fix, usually by fetching a new challenge"""


class MissingParametersError(CaptchaError):
    def __init__(self) -> None:
        super().__init__("Missing sessionId or userAnswer")


class InvalidSessionError(CaptchaError):
    def __init__(self) -> None:
        super().__init__("Invalid or expired captcha session")


class CaptchaExpiredError(CaptchaError):
    def __init__(self) -> None:
        super().__init__("Captcha has expired")


class CaptchaAlreadyUsedError(CaptchaError):
    def __init__(self) -> None:
        super().__init__("Captcha already used")


class CaptchaService:
    def __init__(
        self,
        store: CaptchaSessionStore,
        *,
        expire_minutes: int | None = None,
        clock: Callable[[], datetime] = utc_now_naive,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.expire_minutes = (
            settings.captcha_expire_minutes if expire_minutes is None else expire_minutes
        )
        self.clock = clock
        self.rng = rng

    async def generate(self) -> CaptchaChallengeResponse:
        """Issue a new challenge; store failures propagate as CaptchaStoreError"""
        now = self.clock()
        await self._prune_expired(now)

        challenge = generate_challenge(self.rng)
        session_id = str(uuid.uuid4())
        expires_at = now + timedelta(minutes=self.expire_minutes)

        await self.store.insert(
            CaptchaSession(
                session_id=session_id,
                question=challenge.question,
                answer=challenge.answer,
                expires_at=expires_at,
                verified=False,
            )
        )

        logger.info("Captcha generated: session_id=%s question=%s", session_id, challenge.question)
        return CaptchaChallengeResponse(
            session_id=session_id,
            question=challenge.question,
            expires_at=to_iso_utc(expires_at),
        )

    async def verify(self, session_id: str | None, user_answer: object, *, has_answer: bool = True) -> bool:
        """Check an answer against a stored session.

        Returns True when the answer is correct (the session is consumed) and
        False on a wrong answer (the session stays usable until it expires).
        Raises a CaptchaError subclass for missing input and for unknown,
        expired or already used sessions; the checks run in that order.
        """
        if not session_id or not has_answer:
            raise MissingParametersError()

        captcha = await self.store.find_by_id(session_id)
        if captcha is None:
            logger.info("Captcha session not found: session_id=%s", session_id)
            raise InvalidSessionError()

        if self.clock() >= captcha.expires_at:
            logger.info("Captcha session expired: session_id=%s", session_id)
            raise CaptchaExpiredError()

        if captcha.verified:
            logger.info("Captcha session already used: session_id=%s", session_id)
            raise CaptchaAlreadyUsedError()

        if parse_int(user_answer) != captcha.answer:
            logger.info("Captcha answer rejected: session_id=%s", session_id)
            return False

        # a concurrent request may have consumed the session since the lookup
        if not await self.store.mark_verified(session_id):
            logger.info("Captcha session consumed concurrently: session_id=%s", session_id)
            raise CaptchaAlreadyUsedError()

        logger.info("Captcha verified: session_id=%s", session_id)
        return True

    async def _prune_expired(self, now: datetime) -> None:
        """Best-effort cleanup; a failure never blocks generation"""
        try:
            await self.store.delete_expired(now)
        except CaptchaStoreError:
            logger.warning("Failed to prune expired captcha sessions", exc_info=True)
