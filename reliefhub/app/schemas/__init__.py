"""Pydantic request/response models"""

from reliefhub.app.schemas.auth import (
    AuthResponse,
    SignInRequest,
    SignUpRequest,
)
from reliefhub.app.schemas.captcha import (
    CaptchaChallengeResponse,
    CaptchaVerifyRequest,
    CaptchaVerifyResponse,
)

__all__ = [
    # Auth
    "AuthResponse",
    "SignInRequest",
    "SignUpRequest",
    # Captcha
    "CaptchaChallengeResponse",
    "CaptchaVerifyRequest",
    "CaptchaVerifyResponse",
]
