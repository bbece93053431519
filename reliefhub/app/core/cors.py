"""Permissive CORS for the browser client"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from reliefhub.app.core.config import settings

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": settings.cors_allow_origin,
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answers every preflight with 200 and stamps CORS headers on every response"""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
