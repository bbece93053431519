"""Global exception handlers"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reliefhub.app.core.cors import CORS_HEADERS

logger = logging.getLogger(__name__)

# request field -> name shown to the client
_FIELD_NAMES: dict[str, str] = {
    "sessionId": "sessionId",
    "userAnswer": "userAnswer",
    "email": "email",
    "password": "password",
    "fullName": "full name",
}

# pydantic error type -> message template ({field} is replaced)
_ERROR_MESSAGES: dict[str, str] = {
    "missing": "Missing {field}",
    "string_too_short": "{field} is too short",
    "string_too_long": "{field} is too long",
    "string_type": "{field} must be a string",
    "value_error": "{field} is invalid",
}


def _friendly_validation_message(errors: list[dict]) -> str:
    """Turn pydantic validation errors into a single short message (first error wins)"""
    for err in errors:
        err_type = err.get("type", "")
        if err_type == "json_invalid":
            return "Request body is not valid JSON"

        # loc is (source, field, ...); anything after the field is a union member or index
        loc = err.get("loc", [])
        field_key = loc[1] if len(loc) > 1 else (loc[0] if loc else "")
        field_name = _FIELD_NAMES.get(str(field_key), str(field_key))

        msg_raw = err.get("msg", "").lower()
        if "email" in msg_raw:
            return "Please provide a valid email address"

        template = _ERROR_MESSAGES.get(err_type)
        if template and field_name:
            return template.format(field=field_name)

        if field_name and field_name != "body":
            return f"Invalid value for {field_name}"

    return "Invalid request parameters"


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors"""
    friendly = _friendly_validation_message(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": friendly},
    )


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """4xx -> {"success": false, "error": ...}; 5xx -> {"error": ...}"""
    content: dict = {"error": str(exc.detail)}
    if exc.status_code < 500:
        content = {"success": False, **content}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Last resort; internal details never reach the client.

    Runs outside the middleware stack, so the CORS headers are added here.
    """
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
        headers=CORS_HEADERS,
    )
