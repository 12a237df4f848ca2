"""Kakao member login and withdrawal.

Responsibilities:
- Coordinate the Kakao authorization code flow
- Register or link members from the Kakao profile
- Issue session credentials for authenticated members

Each operation is a single ordered pass; nothing is retried.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from fastapi import Response
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.security import hash_password
from app.models.models import Member
from app.models.schemas import KakaoProfile, MessageOut
from app.services.member_directory import MemberDirectory
from app.services.token_service import SessionIssuer, TokenBundle

from .kakao_client import KakaoClient

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "로그인 성공"
WITHDRAWAL_SUCCESS_MESSAGE = "카카오 탈퇴 성공"


@dataclass
class LoginResult:
    member: Member
    tokens: TokenBundle
    message: MessageOut


def attach_tokens(response: Response, tokens: TokenBundle) -> None:
    response.headers[settings.ACCESS_TOKEN_HEADER] = tokens.access_token
    response.headers[settings.REFRESH_TOKEN_HEADER] = tokens.refresh_token


class KakaoMemberService:
    """
    Kakao login service.

    Composes the Kakao client, the member directory and the session issuer
    into the login and withdrawal flows.
    """

    def __init__(self, client: KakaoClient, directory: MemberDirectory, issuer: SessionIssuer):
        self.client = client
        self.directory = directory
        self.issuer = issuer

    async def _register(self, profile: KakaoProfile) -> Member | None:
        """Insert a new Kakao member, or return ``None`` if the email was taken meanwhile."""
        # Placeholder only; Kakao members never log in with a password
        password = await run_in_threadpool(hash_password, str(uuid.uuid4()))
        member = Member(
            email=profile.email,
            password=password,
            name=profile.name,
            gender=profile.gender,
            birth=profile.birth,
            phone_number=profile.phone_number,
            is_kakao_email=True,
        )
        try:
            self.directory.save(member)
        except IntegrityError:
            if self.directory.find_by_email(profile.email) is None:
                raise
            logger.info("Concurrent registration for %s; using the existing member", profile.email)
            return None
        logger.info("New member registered via kakao: %s", member.email)
        return member

    async def _register_if_needed(self, profile: KakaoProfile) -> Member:
        """
        Get the member for ``profile.email``, creating or linking it as needed.

        - No member: create one flagged as a Kakao account
        - Member not yet linked: set the flag and save
        - Member already linked: no write
        """
        member = self.directory.find_by_email(profile.email)

        if member is None:
            created = await self._register(profile)
            if created is not None:
                return created
            member = self.directory.find_by_email(profile.email)

        if not member.is_kakao_email:
            member.link_kakao()
            self.directory.save(member)
            logger.info("Existing member linked to kakao: %s", member.email)
        else:
            logger.info("Existing kakao member logged in: %s", member.email)

        return member

    async def login(self, code: str, response: Response | None = None) -> LoginResult:
        """
        Log a member in with a Kakao authorization code.

        Complete flow:
        1. Exchange code for a Kakao access token
        2. Fetch the Kakao profile
        3. Find, link or register the member
        4. Issue session credentials and store the refresh credential

        If ``response`` is given, both credentials are set on it as headers.

        Raises:
            KakaoError: If any Kakao call or the profile decode fails
        """
        access_token = await self.client.exchange_code(code)
        profile = await self.client.fetch_profile(access_token)

        member = await self._register_if_needed(profile)
        tokens = self.issuer.issue(member)
        self.issuer.store_refresh(member.email, tokens.refresh_token)

        if response is not None:
            attach_tokens(response, tokens)

        logger.info("Member authenticated via kakao: %s", member.email)
        return LoginResult(member=member, tokens=tokens, message=MessageOut(message=LOGIN_SUCCESS_MESSAGE))

    async def withdraw(self, code: str, member: Member) -> MessageOut:
        """
        Unlink ``member`` from Kakao.

        Local state changes only after both the token exchange and the unlink
        succeed. The Kakao link flag stays set; only ``updated_at`` moves.

        Raises:
            UpstreamError: If the token exchange fails
            ClientError: If Kakao rejects the unlink
        """
        access_token = await self.client.exchange_code(code)
        await self.client.unlink(access_token)

        member.touch()
        self.directory.save(member)
        logger.info("Member withdrew from kakao: %s", member.email)
        return MessageOut(message=WITHDRAWAL_SUCCESS_MESSAGE)
