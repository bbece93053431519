"""Client for the hosted auth provider (GoTrue-compatible REST API)

Sign-in and sign-up are delegated as-is; this module only forwards
credentials and normalises the provider's errors.
"""

import logging
from typing import Any

import httpx

from reliefhub.app.core.config import settings

logger = logging.getLogger(__name__)


class AuthProviderError(ValueError):
    """The provider rejected the request (bad credentials, duplicate account, ...)"""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthProviderUnavailableError(Exception):
    """The provider could not be reached or answered with a server error"""


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "Authentication failed"
    if isinstance(payload, dict):
        for key in ("error_description", "msg", "message", "error"):
            if payload.get(key):
                return str(payload[key])
    return "Authentication failed"


class AuthProviderClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        return await self._post(
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def sign_up(
        self, email: str, password: str, full_name: str, redirect_to: str | None = None
    ) -> dict[str, Any]:
        params = {"redirect_to": redirect_to} if redirect_to else None
        return await self._post(
            "/auth/v1/signup",
            params=params,
            json={"email": email, "password": password, "data": {"full_name": full_name}},
        )

    async def _post(
        self,
        path: str,
        *,
        json: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self.transport,
            ) as client:
                resp = await client.post(path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Auth provider request failed [%s]: %s", path, e)
            raise AuthProviderUnavailableError(str(e)) from e

        if resp.status_code >= 500:
            logger.warning("Auth provider error [%s]: HTTP %d", path, resp.status_code)
            raise AuthProviderUnavailableError(f"HTTP {resp.status_code}")
        if resp.status_code >= 400:
            raise AuthProviderError(_error_message(resp), resp.status_code)
        return resp.json()


def user_role(email: str, admin_domain: str | None = None) -> str:
    """Role hint used by the client to pick the landing page"""
    domain = (admin_domain or settings.admin_email_domain).lower()
    return "admin" if email.lower().endswith(domain) else "user"


def get_auth_provider() -> AuthProviderClient | None:
    """Dependency: the configured provider client, or None when not configured"""
    if not settings.auth_provider_configured:
        return None
    return AuthProviderClient(
        settings.auth_provider_url,
        settings.auth_provider_api_key,
        timeout=settings.auth_provider_timeout_seconds,
    )
