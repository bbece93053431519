"""Math captcha API"""

import logging

from fastapi import APIRouter, Body, HTTPException, status

from reliefhub.app.api.deps import CaptchaServiceDep
from reliefhub.app.schemas.captcha import (
    CaptchaChallengeResponse,
    CaptchaVerifyRequest,
    CaptchaVerifyResponse,
)
from reliefhub.app.services.captcha_service import CaptchaError, CaptchaService
from reliefhub.app.services.captcha_store import CaptchaStoreError

router = APIRouter()
logger = logging.getLogger(__name__)


async def _generate(captcha_service: CaptchaService) -> CaptchaChallengeResponse:
    try:
        return await captcha_service.generate()
    except CaptchaStoreError:
        logger.error("Failed to store captcha session", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate captcha",
        )


async def verify_captcha_or_raise(
    captcha_service: CaptchaService, data: CaptchaVerifyRequest | None
) -> bool:
    """Shared by the captcha and auth endpoints: CaptchaError -> 400, store failure -> 500"""
    data = data or CaptchaVerifyRequest()
    try:
        return await captcha_service.verify(
            data.session_id, data.user_answer, has_answer=data.has_user_answer
        )
    except CaptchaError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CaptchaStoreError:
        logger.error("Captcha store failure during verification", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify captcha",
        )


@router.get("", response_model=CaptchaChallengeResponse)
async def get_captcha(captcha_service: CaptchaServiceDep) -> CaptchaChallengeResponse:
    """Issue a new math challenge"""
    return await _generate(captcha_service)


@router.post(
    "",
    response_model=CaptchaVerifyResponse | CaptchaChallengeResponse,
)
async def post_captcha(
    captcha_service: CaptchaServiceDep,
    action: str | None = None,
    data: CaptchaVerifyRequest | None = Body(default=None),
) -> CaptchaVerifyResponse | CaptchaChallengeResponse:
    """Verify an answer, or issue a challenge when called with ?action=generate"""
    if action == "generate":
        return await _generate(captcha_service)

    success = await verify_captcha_or_raise(captcha_service, data)
    return CaptchaVerifyResponse(success=success)


@router.api_route("", methods=["PUT", "PATCH", "DELETE"], include_in_schema=False)
async def unsupported_method() -> None:
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Invalid method. Use GET to generate or POST to verify",
    )
