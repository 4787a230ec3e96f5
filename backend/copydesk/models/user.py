"""
Copydesk Backend — Local User SQLAlchemy Model
================================================

What:  ORM mapping of the `local_users` table (the credential store).
Who:   Read by the auth service (login) and joined by the token service.

Accounts are provisioned out-of-band; this service only reads them.
`password` holds a bcrypt hash, never plaintext.
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from copydesk.database import Base


class LocalUser(Base):
    """A plugin user who can log in with a username and password."""

    __tablename__ = "local_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login name, matched exactly",
    )

    password: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="bcrypt hash of the user's password",
    )

    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<LocalUser(id={self.id}, username='{self.username}', role='{self.role}')>"
