"""
Copydesk Backend — Token Verification Route Handler
=====================================================

What:  GET /api/figma/verify: confirm a stored token is still valid.
Who:   Called by the plugin on launch to decide whether to show sign-in.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from copydesk.database import get_db_session
from copydesk.schemas.auth import VerifyResponse
from copydesk.schemas.common import ErrorResponse
from copydesk.services.token_service import token_service

router = APIRouter(prefix="/api/figma", tags=["Auth"])


@router.get(
    "/verify",
    response_model=VerifyResponse,
    responses={
        401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Verify a bearer token",
    description="Returns the identity behind an `Authorization: Bearer <token>` header.",
)
async def verify(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> VerifyResponse:
    return await token_service.verify(db=db, authorization=authorization)
