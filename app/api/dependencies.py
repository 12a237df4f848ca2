"""Common request dependencies."""
from typing import Annotated, TypeAlias

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, MemberNotFoundError
from app.core.security import TokenExpiredError, TokenValidationError, decode_token
from app.db.session import get_db
from app.models.models import Member
from app.services.member_directory import MemberDirectory

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]


def _extract_access_token(request: Request) -> str:
    raw = request.headers.get(settings.ACCESS_TOKEN_HEADER) or request.headers.get("Authorization")
    if not raw:
        raise AuthenticationError("missing_token")
    if raw.lower().startswith("bearer "):
        return raw.split(" ", 1)[1]
    return raw


def get_current_member(request: Request, db: DbDep) -> Member:
    """
    Resolve the member behind the access credential.

    The credential is read from the access token header, falling back to a
    standard ``Authorization: Bearer`` header.
    """
    token = _extract_access_token(request)
    try:
        payload = decode_token(token)
    except TokenExpiredError as exc:
        raise AuthenticationError("expired") from exc
    except TokenValidationError as exc:
        raise AuthenticationError("invalid") from exc

    email = payload.get("sub")
    member = MemberDirectory(db).find_by_email(email) if email else None
    if member is None:
        raise MemberNotFoundError(email)
    return member


CurrentMemberDep: TypeAlias = Annotated[Member, Depends(get_current_member)]
