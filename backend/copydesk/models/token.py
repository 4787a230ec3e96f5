"""
Copydesk Backend — Access Token SQLAlchemy Model
==================================================

What:  ORM mapping of the `figma_tokens` table (the token store).
Who:   Written by the auth service on login; read by the token service.

Lifecycle:
    1. Inserted on every successful login (no reuse, no refresh)
    2. Valid while expires_at is strictly in the future
    3. Never deleted by this service. Expiry is enforced at read time only,
       so stale rows accumulate until cleaned externally
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from copydesk.database import Base


class AccessToken(Base):
    """An opaque bearer token bound to one user until `expires_at`."""

    __tablename__ = "figma_tokens"

    # 32 random bytes, hex-encoded → 64 characters
    token: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        comment="Opaque random bearer token",
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("local_users.id"),
        nullable=False,
    )

    expires_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        comment="Token is rejected once this instant has passed (UTC)",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_figma_tokens_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        # The token value itself is a credential; keep it out of logs.
        return f"<AccessToken(user_id={self.user_id}, expires_at='{self.expires_at}')>"
