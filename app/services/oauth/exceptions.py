"""Kakao identity provider exceptions."""
from __future__ import annotations

from app.core.exceptions import AppException


class KakaoError(AppException):
    """Base class for failures talking to or decoding Kakao."""


class UpstreamError(KakaoError):
    """Kakao answered with a non-success status (or could not be reached)."""

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(
            message=message or f"카카오 서버가 원활하지 않습니다. Status : {status_code}",
            code="KAK001",
            status_code=502,
            details={"upstream_status": status_code},
        )
        self.upstream_status = status_code


class UnsupportedRegionError(KakaoError):
    """Phone number is outside the one supported country calling code."""

    def __init__(self, prefix: str):
        super().__init__(
            message="한국 번호로만 가입할 수 있습니다",
            code="KAK002",
            status_code=400,
            details={"prefix": prefix},
        )


class ParseError(KakaoError):
    """A required field in a Kakao response is missing or malformed."""

    def __init__(self, field: str):
        super().__init__(
            message=f"카카오 응답을 해석할 수 없습니다: {field}",
            code="KAK003",
            status_code=502,
            details={"field": field},
        )
        self.field = field


class ClientError(KakaoError):
    """Kakao rejected the unlink request; the upstream status is preserved."""

    def __init__(self, status_code: int):
        super().__init__(
            message=f"카카오 연결 끊기에 실패했습니다. Status : {status_code}",
            code="KAK004",
            status_code=status_code if 400 <= status_code < 500 else 502,
            details={"upstream_status": status_code},
        )
        self.upstream_status = status_code
