from reliefhub.app.core.config import settings
from reliefhub.app.core.database import get_session
from reliefhub.app.core.utils import parse_int, to_iso_utc, utc_now_naive

__all__ = [
    "settings",
    "get_session",
    "parse_int",
    "to_iso_utc",
    "utc_now_naive",
]
