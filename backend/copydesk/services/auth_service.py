"""
Copydesk Backend — Auth Service
=================================

What:  Username/password login that mints a bearer token.
Who:   Called by POST /api/figma/auth.

Flow:
    1. Require both username and password (→ 400)
    2. Look up the user by exact username
    3. bcrypt-check the password (→ 401 on unknown user OR wrong password)
    4. Mint 32 random bytes as 64 hex chars, expiry now + TOKEN_TTL_HOURS
    5. Insert one figma_tokens row and commit

Password hashing:
    bcrypt used directly (no passlib wrapper). checkpw compares in constant
    time. When the username is unknown, bcrypt still runs against a dummy
    hash so response timing is the same in both failure cases. bcrypt is
    CPU-bound, so it runs in the threadpool rather than on the event loop.
    Only the first 72 bytes of a password are significant, in both hashing
    and checking.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from copydesk.config import settings
from copydesk.exceptions import AuthError, CopydeskError, InternalError, ValidationError
from copydesk.models.token import AccessToken
from copydesk.models.user import LocalUser
from copydesk.schemas.auth import LoginResponse, UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


# ══════════════════════════════════════════════════════════════════════════
# Password hashing
# ══════════════════════════════════════════════════════════════════════════


BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(plain: str) -> bytes:
    # Hashes are checked on the first 72 bytes, as the account tooling hashes them.
    return plain.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password."""
    return bcrypt.hashpw(_password_bytes(plain), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash is malformed; treating as mismatch")
        return False


# Computed once at import so the first unknown-user login is not faster
# than later ones.
_DUMMY_HASH: str = hash_password("copydesk_timing_dummy")


def generate_token() -> str:
    """32 random bytes (256 bits) as 64 hex characters."""
    return secrets.token_hex(32)


# ══════════════════════════════════════════════════════════════════════════
# Auth Service
# ══════════════════════════════════════════════════════════════════════════


class AuthService:
    """Stateless login handler; receives its DB session per call."""

    async def login(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> LoginResponse:
        """
        Authenticate a user and issue a new bearer token.

        Raises:
            ValidationError: username or password missing (→ 400)
            AuthError: unknown username or wrong password (→ 401)
            InternalError: database or other unexpected failure (→ 500)
        """
        if not username or not password:
            raise ValidationError("Username and password required")

        try:
            result = await db.execute(
                select(LocalUser).where(LocalUser.username == username)
            )
            user = result.scalar_one_or_none()

            if user is None:
                await run_in_threadpool(verify_password, password, _DUMMY_HASH)
                raise AuthError(INVALID_CREDENTIALS_MESSAGE)

            if not await run_in_threadpool(verify_password, password, user.password):
                raise AuthError(INVALID_CREDENTIALS_MESSAGE)

            token = generate_token()
            expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.token_ttl_hours)

            db.add(AccessToken(token=token, user_id=user.id, expires_at=expires_at))
            await db.commit()

        except CopydeskError:
            raise
        except Exception as e:
            logger.error("Auth error: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

        logger.info("User %s logged in; token expires at %s", user.id, expires_at.isoformat())

        return LoginResponse(
            token=token,
            user=UserInfo(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                role=user.role,
            ),
        )


auth_service = AuthService()
