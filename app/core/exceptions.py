"""Custom exception hierarchy for QuickQueue.

All application errors inherit from ``AppException`` so the API layer can map
them to responses in one place (see ``app.core.errors``).

Error codes follow pattern: [CATEGORY][NUMBER]
- KAK: Kakao identity provider errors (001-099)
- MEM: Member errors (001-099)
- AUTH: Session credential errors (001-099)
"""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base exception for all QuickQueue application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with a user-facing message and metadata.

        Args:
            message: Human-readable error message
            code: Unique error code (e.g., "KAK001")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "status": "failure",
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# ============================================================================
# MEMBER ERRORS (MEM001-099)
# ============================================================================

class MemberError(AppException):
    """Base class for member-related errors."""


class MemberNotFoundError(MemberError):
    """Member referenced by a session credential no longer exists."""

    def __init__(self, identifier: str | int | None = None):
        message = "회원을 찾을 수 없습니다" if identifier is None else f"회원을 찾을 수 없습니다: {identifier}"
        super().__init__(
            message=message,
            code="MEM001",
            status_code=404,
            details={"member": identifier} if identifier is not None else {},
        )


# ============================================================================
# AUTH ERRORS (AUTH001-099)
# ============================================================================

class AuthenticationError(AppException):
    """Access credential missing, expired or invalid."""

    def __init__(self, reason: str = "invalid"):
        super().__init__(
            message="인증 정보가 유효하지 않습니다",
            code="AUTH001",
            status_code=401,
            details={"reason": reason},
        )
