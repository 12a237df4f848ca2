"""
Kakao login routes.

Endpoints:
- GET    /api/members/kakao/authorize  - Redirect to the Kakao consent screen
- GET    /api/members/kakao/login      - Log in (or register) with an authorization code
- DELETE /api/members/kakao/withdrawal - Unlink the current member from Kakao

Business logic is delegated to KakaoMemberService.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import RedirectResponse

from app.api.dependencies import CurrentMemberDep, DbDep
from app.models import schemas
from app.services.oauth import KakaoMemberService, create_kakao_client, create_kakao_member_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/members/kakao", tags=["kakao"])


def get_kakao_member_service(db: DbDep) -> KakaoMemberService:
    try:
        return create_kakao_member_service(db)
    except ValueError as e:
        logger.error("Kakao login unavailable: %s", e)
        raise HTTPException(status_code=503, detail=str(e)) from e


KakaoServiceDep = Annotated[KakaoMemberService, Depends(get_kakao_member_service)]


@router.get("/authorize")
async def kakao_authorize(
    state: str | None = Query(None, description="Opaque value echoed back to the redirect URI"),
) -> RedirectResponse:
    """Redirect the browser to Kakao's consent screen."""
    try:
        client = create_kakao_client()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return RedirectResponse(url=client.authorization_url(state))


@router.get("/login", response_model=schemas.MessageOut)
async def kakao_login(
    response: Response,
    svc: KakaoServiceDep,
    code: str = Query(..., description="Authorization code from Kakao"),
) -> schemas.MessageOut:
    """
    Log in with a Kakao authorization code.

    Registers the member on first login. Session credentials are returned in
    the access and refresh token headers.
    """
    result = await svc.login(code, response)
    return result.message


@router.delete("/withdrawal", response_model=schemas.MessageOut)
async def kakao_withdrawal(
    member: CurrentMemberDep,
    svc: KakaoServiceDep,
    code: str = Query(..., description="Authorization code from Kakao"),
) -> schemas.MessageOut:
    """Unlink the current member's Kakao account."""
    return await svc.withdraw(code, member)
