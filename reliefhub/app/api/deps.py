"""API dependencies"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reliefhub.app.core.database import get_session
from reliefhub.app.services.auth_provider import AuthProviderClient, get_auth_provider
from reliefhub.app.services.captcha_service import CaptchaService
from reliefhub.app.services.captcha_store import CaptchaSessionStore, SQLCaptchaSessionStore

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_captcha_store(session: SessionDep) -> CaptchaSessionStore:
    return SQLCaptchaSessionStore(session)


async def get_captcha_service(
    store: CaptchaSessionStore = Depends(get_captcha_store),
) -> CaptchaService:
    return CaptchaService(store)


CaptchaServiceDep = Annotated[CaptchaService, Depends(get_captcha_service)]
AuthProviderDep = Annotated[AuthProviderClient | None, Depends(get_auth_provider)]
