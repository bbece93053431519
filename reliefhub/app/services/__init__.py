"""Business logic layer"""

from reliefhub.app.services.auth_provider import AuthProviderClient
from reliefhub.app.services.captcha_service import CaptchaService
from reliefhub.app.services.captcha_store import (
    CaptchaSessionStore,
    InMemoryCaptchaSessionStore,
    SQLCaptchaSessionStore,
)
from reliefhub.app.services.challenge import generate_challenge

__all__ = [
    "AuthProviderClient",
    "CaptchaService",
    "CaptchaSessionStore",
    "InMemoryCaptchaSessionStore",
    "SQLCaptchaSessionStore",
    "generate_challenge",
]
