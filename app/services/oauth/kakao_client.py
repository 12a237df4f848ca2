"""HTTP client for the Kakao OAuth 2.0 and user APIs.

Implements the authorization code flow used by member login:
token exchange, profile fetch and unlink. Every call is a single attempt;
failures surface as ``KakaoError`` subclasses.
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from app.models.schemas import KakaoProfile, KakaoUserResponse

from .exceptions import ClientError, ParseError, UnsupportedRegionError, UpstreamError

logger = logging.getLogger(__name__)

KOREA_PHONE_PREFIX = "+82 "
DOMESTIC_PHONE_PREFIX = "0"


@dataclass(frozen=True)
class KakaoConfig:
    """Credentials and endpoints for one Kakao application."""

    api_key: str
    client_id: str
    client_secret: str
    redirect_uri: str
    auth_host: str = "https://kauth.kakao.com"
    api_host: str = "https://kapi.kakao.com"
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Any) -> KakaoConfig:
        missing = [
            name
            for name in ("KAKAO_CLIENT_ID", "KAKAO_CLIENT_SECRET", "KAKAO_REDIRECT_URI")
            if not getattr(settings, name, None)
        ]
        if missing:
            raise ValueError(f"Kakao OAuth not configured (missing {', '.join(missing)})")
        return cls(
            api_key=settings.KAKAO_API_KEY or "",
            client_id=settings.KAKAO_CLIENT_ID,
            client_secret=settings.KAKAO_CLIENT_SECRET,
            redirect_uri=settings.KAKAO_REDIRECT_URI,
            auth_host=settings.KAKAO_AUTH_HOST.rstrip("/"),
            api_host=settings.KAKAO_API_HOST.rstrip("/"),
            timeout=settings.KAKAO_HTTP_TIMEOUT,
        )


def normalize_phone_number(phone_number: str) -> str:
    """Rewrite ``+82 10-1234-5678`` to ``010-1234-5678``.

    Raises:
        UnsupportedRegionError: If the number is not a Korean one
    """
    if not phone_number.startswith(KOREA_PHONE_PREFIX):
        prefix = phone_number.split(" ", 1)[0]
        raise UnsupportedRegionError(prefix)
    return DOMESTIC_PHONE_PREFIX + phone_number[len(KOREA_PHONE_PREFIX):]


def _error_path(exc: ValidationError) -> str:
    loc = exc.errors()[0]["loc"]
    return ".".join(str(part) for part in loc) or "<body>"


def _code_hash(code: str) -> str:
    return hashlib.sha256(code.encode()).hexdigest()[:12]


class KakaoClient:
    """Kakao identity provider client.

    ``transport`` is handed to ``httpx.AsyncClient`` and lets tests swap in an
    ``httpx.MockTransport``.
    """

    def __init__(self, config: KakaoConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    @property
    def authorize_url(self) -> str:
        return f"{self.config.auth_host}/oauth/authorize"

    @property
    def token_url(self) -> str:
        return f"{self.config.auth_host}/oauth/token"

    @property
    def user_info_url(self) -> str:
        return f"{self.config.api_host}/v2/user/me"

    @property
    def unlink_url(self) -> str:
        return f"{self.config.api_host}/v1/user/unlink"

    def authorization_url(self, state: str | None = None) -> str:
        """Build the consent screen URL the browser is redirected to."""
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "response_type": "code",
        }
        if state:
            params["state"] = state
        return f"{self.authorize_url}?{urlencode(params)}"

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.config.timeout)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async with self._http() as client:
            try:
                return await client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                logger.error("Kakao request failed | method=%s url=%s error=%s", method, url, e)
                raise UpstreamError(502, "카카오 서버에 연결할 수 없습니다") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ParseError("<body>") from e

    async def exchange_code(self, code: str) -> str:
        """
        Exchange authorization code for a Kakao access token.

        Raises:
            UpstreamError: If Kakao answers with a non-success status
            ParseError: If the response carries no access token
        """
        data = {
            "grant_type": "authorization_code",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": self.config.redirect_uri,
            "code": code,
        }
        logger.info(
            "Token exchange attempt | provider=kakao code_hash=%s client_id=%s redirect_uri=%s",
            _code_hash(code),
            self.config.client_id,
            self.config.redirect_uri,
        )

        response = await self._send("POST", self.token_url, data=data)
        if not response.is_success:
            logger.error(
                "Token exchange failed | code_hash=%s status=%s response=%s",
                _code_hash(code),
                response.status_code,
                response.text,
            )
            raise UpstreamError(response.status_code)

        body = self._json(response)
        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise ParseError("access_token")
        logger.info("Token exchange SUCCESS | code_hash=%s", _code_hash(code))
        return access_token

    async def fetch_profile(self, access_token: str) -> KakaoProfile:
        """
        Fetch and decode the authenticated user's profile.

        Raises:
            UpstreamError: If Kakao answers with a non-success status
            ParseError: If a required field is missing or malformed
            UnsupportedRegionError: If the phone number is not Korean
        """
        headers = {"Authorization": f"Bearer {access_token}"}
        response = await self._send("GET", self.user_info_url, headers=headers)
        if not response.is_success:
            logger.error("User info fetch failed | status=%s response=%s", response.status_code, response.text)
            raise UpstreamError(response.status_code)

        try:
            payload = KakaoUserResponse.model_validate(self._json(response))
        except ValidationError as e:
            field = _error_path(e)
            logger.error("User info decode failed | field=%s", field)
            raise ParseError(field) from e

        account = payload.kakao_account
        return KakaoProfile(
            name=payload.properties.nickname,
            email=account.email,
            gender=account.gender,
            birth=account.birth,
            phone_number=normalize_phone_number(account.phone_number),
        )

    async def unlink(self, access_token: str) -> None:
        """
        Disconnect the app from the user's Kakao account.

        Raises:
            ClientError: If Kakao answers with a non-2xx status
        """
        headers = {"Authorization": f"Bearer {access_token}"}
        response = await self._send("POST", self.unlink_url, headers=headers)
        if not response.is_success:
            logger.error("Kakao unlink failed | status=%s response=%s", response.status_code, response.text)
            raise ClientError(response.status_code)
        logger.info("Kakao unlink SUCCESS")
