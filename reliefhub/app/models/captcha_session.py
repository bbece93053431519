"""Captcha session model"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from reliefhub.app.core.utils import utc_now_naive


class CaptchaSession(SQLModel, table=True):
    """One issued math challenge: its hidden answer, expiry and verification state"""

    __tablename__ = "captcha_sessions"

    session_id: str = Field(primary_key=True, max_length=36, description="Session id (UUID4)")
    question: str = Field(max_length=32, description="Rendered expression, e.g. '7 + 3'")
    answer: int = Field(nullable=False, description="Correct answer, never sent to clients")
    # naive UTC, same as the migration's sa.DateTime()
    expires_at: datetime = Field(
        sa_type=DateTime(), nullable=False, index=True, description="Expiry time (UTC)"
    )
    verified: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=utc_now_naive,
        sa_type=DateTime(),
        nullable=False,
        description="Creation time (UTC)",
    )
