"""
Copydesk Backend — Login Route Handler
========================================

What:  POST /api/figma/auth: exchange username/password for a bearer token.
Who:   Called by the plugin's sign-in screen.

Responses:
    200  {"token": "<64 hex>", "user": {"id", "username", "displayName", "role"}}
    400  {"message": "Username and password required"}
    401  {"message": "Invalid username or password"}
    405  {"message": "Method not allowed"}
    500  {"message": "Internal server error"}
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from copydesk.database import get_db_session
from copydesk.schemas.auth import LoginRequest, LoginResponse
from copydesk.schemas.common import ErrorResponse
from copydesk.services.auth_service import auth_service

router = APIRouter(prefix="/api/figma", tags=["Auth"])


@router.post(
    "/auth",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing username or password", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in and obtain a bearer token",
    description=(
        "Checks the username and password against the local user table and "
        "issues a new bearer token valid for 24 hours. Every successful call "
        "issues a new token."
    ),
)
async def login(
    body: Optional[LoginRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    body = body or LoginRequest()
    return await auth_service.login(db=db, username=body.username, password=body.password)
