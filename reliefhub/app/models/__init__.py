"""Data models"""

from reliefhub.app.models.captcha_session import CaptchaSession

__all__ = [
    "CaptchaSession",
]
