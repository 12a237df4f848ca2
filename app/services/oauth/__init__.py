"""Kakao OAuth 2.0 login module.

Single-provider implementation of the authorization code flow used for
member login, registration and withdrawal.
"""
from .exceptions import (
    ClientError,
    KakaoError,
    ParseError,
    UnsupportedRegionError,
    UpstreamError,
)
from .factory import create_kakao_client, create_kakao_member_service
from .kakao_client import KakaoClient, KakaoConfig, normalize_phone_number
from .service import KakaoMemberService, LoginResult, attach_tokens

__all__ = [
    # Exceptions
    "KakaoError",
    "UpstreamError",
    "UnsupportedRegionError",
    "ParseError",
    "ClientError",
    # Client
    "KakaoClient",
    "KakaoConfig",
    "normalize_phone_number",
    # Service
    "KakaoMemberService",
    "LoginResult",
    "attach_tokens",
    # Factory
    "create_kakao_client",
    "create_kakao_member_service",
]
