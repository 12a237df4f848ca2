"""Pydantic schemas for API responses and provider payloads.

Sub-modules:
- auth: Response envelopes
- kakao: Typed decode of the Kakao user profile payload
"""
from .auth import MessageOut
from .kakao import KakaoAccount, KakaoProfile, KakaoProperties, KakaoUserResponse

__all__ = [
    "MessageOut",
    "KakaoAccount",
    "KakaoProfile",
    "KakaoProperties",
    "KakaoUserResponse",
]
