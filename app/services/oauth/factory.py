"""Factory function for creating the configured Kakao member service."""
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.member_directory import MemberDirectory
from app.services.token_service import SessionIssuer, get_token_store

from .kakao_client import KakaoClient, KakaoConfig
from .service import KakaoMemberService

logger = logging.getLogger(__name__)


def create_kakao_client() -> KakaoClient:
    return KakaoClient(KakaoConfig.from_settings(settings))


def create_kakao_member_service(db: Session) -> KakaoMemberService:
    """
    Build a KakaoMemberService wired to settings, the database and Redis.

    Args:
        db: Database session

    Raises:
        ValueError: If Kakao credentials are not configured
    """
    return KakaoMemberService(
        client=create_kakao_client(),
        directory=MemberDirectory(db),
        issuer=SessionIssuer(get_token_store()),
    )
