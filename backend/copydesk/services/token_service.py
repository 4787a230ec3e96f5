"""
Copydesk Backend — Token Verification Service
===============================================

What:  Resolves `Authorization: Bearer <token>` headers to a user identity.
Who:   Used by the verify endpoint directly and by AnalysisService before any
       analysis work. Both go through authenticate_bearer(), so token rules
       cannot drift between endpoints.

Validity rule:
    A token is valid iff a `figma_tokens` row exists with that value and its
    expires_at is strictly after "now". Expired and unknown tokens produce the
    same 401 message.

Query plan:
    SELECT t.user_id, u.username, u.display_name, u.role
    FROM figma_tokens t JOIN local_users u ON t.user_id = u.id
    WHERE t.token = :token AND t.expires_at > :now
    → primary key lookup on figma_tokens.token
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from copydesk.exceptions import AuthError, CopydeskError, InternalError
from copydesk.models.token import AccessToken
from copydesk.models.user import LocalUser
from copydesk.schemas.auth import UserInfo, VerifyResponse

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

NO_TOKEN_MESSAGE = "No token provided"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    Raises:
        AuthError: header missing or not of the form "Bearer <token>"
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError(NO_TOKEN_MESSAGE)
    # Second space-separated field: "Bearer a b" → "a", "Bearer  a" → ""
    return authorization.split(" ")[1]


class TokenService:
    """Lookup-and-join of bearer tokens against the user table."""

    async def resolve_identity(self, db: AsyncSession, token: str) -> Optional[UserInfo]:
        """
        Return the identity behind a non-expired token, or None.

        DB errors propagate; callers wrap them in their own fault boundary.
        """
        if not token:
            return None

        now = datetime.now(timezone.utc)
        result = await db.execute(
            select(
                AccessToken.user_id,
                LocalUser.username,
                LocalUser.display_name,
                LocalUser.role,
            )
            .join(LocalUser, AccessToken.user_id == LocalUser.id)
            .where(AccessToken.token == token, AccessToken.expires_at > now)
        )
        row = result.first()
        if row is None:
            return None

        return UserInfo(
            id=row.user_id,
            username=row.username,
            display_name=row.display_name,
            role=row.role,
        )

    async def authenticate_bearer(
        self, db: AsyncSession, authorization: Optional[str]
    ) -> UserInfo:
        """
        Authenticate a request from its Authorization header.

        Raises:
            AuthError: missing/malformed header, or unknown/expired token
        """
        token = extract_bearer_token(authorization)
        identity = await self.resolve_identity(db, token)
        if identity is None:
            raise AuthError(INVALID_TOKEN_MESSAGE)
        return identity

    async def verify(self, db: AsyncSession, authorization: Optional[str]) -> VerifyResponse:
        """
        Handle GET /api/figma/verify.

        Raises:
            AuthError: token missing, malformed, unknown or expired (→ 401)
            InternalError: anything else (→ 500)
        """
        try:
            identity = await self.authenticate_bearer(db, authorization)
        except CopydeskError:
            raise
        except Exception as e:
            logger.error("Verify error: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

        return VerifyResponse(valid=True, user=identity)


token_service = TokenService()
