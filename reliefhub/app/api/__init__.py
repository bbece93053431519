"""API routes"""

from fastapi import APIRouter

from reliefhub.app.api.endpoints import auth, captcha

api_router = APIRouter()

api_router.include_router(captcha.router, prefix="/captcha", tags=["captcha"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
