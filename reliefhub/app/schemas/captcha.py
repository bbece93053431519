"""Captcha request/response models (camelCase on the wire)"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CaptchaChallengeResponse(CamelModel):
    """A freshly issued challenge; the answer is deliberately absent"""

    session_id: str
    question: str
    expires_at: str = Field(..., description="ISO 8601, UTC")


class CaptchaVerifyRequest(CamelModel):
    """Verification attempt.

    Both fields are optional at the schema level so that a missing field is
    reported as "Missing sessionId or userAnswer" rather than a validation error.
    """

    session_id: str | None = None
    # bool first so JSON true/false is kept as-is instead of coerced to 1/0
    user_answer: bool | int | float | str | None = None

    @property
    def has_user_answer(self) -> bool:
        return "user_answer" in self.model_fields_set


class CaptchaVerifyResponse(BaseModel):
    success: bool
