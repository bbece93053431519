"""Captcha-gated sign-in/sign-up models"""

from typing import Any, Literal

from pydantic import EmailStr, Field

from reliefhub.app.schemas.captcha import CamelModel, CaptchaVerifyRequest


class SignInRequest(CaptchaVerifyRequest):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class SignUpRequest(CaptchaVerifyRequest):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    full_name: str = Field(..., min_length=1, max_length=100)
    redirect_to: str | None = None


class AuthResponse(CamelModel):
    """Provider payload (tokens, user) plus the landing-page role hint"""

    role: Literal["admin", "user"]
    provider: dict[str, Any]
