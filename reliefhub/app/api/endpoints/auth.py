"""Captcha-gated sign-in/sign-up, delegated to the hosted auth provider"""

import logging

from fastapi import APIRouter, HTTPException, status

from reliefhub.app.api.deps import AuthProviderDep, CaptchaServiceDep
from reliefhub.app.api.endpoints.captcha import verify_captcha_or_raise
from reliefhub.app.schemas.auth import AuthResponse, SignInRequest, SignUpRequest
from reliefhub.app.schemas.captcha import CaptchaVerifyRequest
from reliefhub.app.services.auth_provider import (
    AuthProviderClient,
    AuthProviderError,
    AuthProviderUnavailableError,
    user_role,
)
from reliefhub.app.services.captcha_service import CaptchaService

router = APIRouter()
logger = logging.getLogger(__name__)


async def _check_gate(
    captcha_service: CaptchaService,
    auth_provider: AuthProviderClient | None,
    data: CaptchaVerifyRequest,
) -> AuthProviderClient:
    """Provider check first so an unconfigured gateway never consumes a solved captcha"""
    if auth_provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication provider is not configured",
        )
    if not await verify_captcha_or_raise(captcha_service, data):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect captcha answer",
        )
    return auth_provider


@router.post("/sign-in", response_model=AuthResponse)
async def sign_in(
    data: SignInRequest,
    captcha_service: CaptchaServiceDep,
    auth_provider: AuthProviderDep,
) -> AuthResponse:
    """Sign in with email and password after solving the captcha"""
    provider = await _check_gate(captcha_service, auth_provider, data)
    try:
        payload = await provider.sign_in(data.email, data.password)
    except AuthProviderError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except AuthProviderUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Authentication provider unavailable",
        )
    logger.info("User signed in: %s", data.email)
    return AuthResponse(role=user_role(data.email), provider=payload)


@router.post("/sign-up", response_model=AuthResponse)
async def sign_up(
    data: SignUpRequest,
    captcha_service: CaptchaServiceDep,
    auth_provider: AuthProviderDep,
) -> AuthResponse:
    """Create an account after solving the captcha"""
    provider = await _check_gate(captcha_service, auth_provider, data)
    try:
        payload = await provider.sign_up(
            data.email, data.password, data.full_name, redirect_to=data.redirect_to
        )
    except AuthProviderError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AuthProviderUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Authentication provider unavailable",
        )
    logger.info("User signed up: %s", data.email)
    return AuthResponse(role=user_role(data.email), provider=payload)
