"""
Copydesk Backend — Screenshot Analysis SQLAlchemy Model
=========================================================

What:  ORM mapping of the `screenshot_analyses` table (the analysis log).
Who:   Appended to by the analysis service, one row per completed review.

`result` stores the JSON-serialized review exactly as returned to the client,
including the low-confidence fallback when the model's reply was unparseable.
`overall_score` and `standards_count` are stored as text ("82%", "14") to
match how the dashboard reads them.
"""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from copydesk.database import Base


class ScreenshotAnalysis(Base):
    """One persisted content standards review."""

    __tablename__ = "screenshot_analyses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("local_users.id"),
        nullable=False,
    )

    # Frame (or file) name the text came from
    image_name: Mapped[str] = mapped_column(String(255), nullable=False)

    result: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="JSON-serialized analysis object",
    )

    overall_score: Mapped[str | None] = mapped_column(String(16), nullable=True)

    standards_count: Mapped[str | None] = mapped_column(String(16), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_screenshot_analyses_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<ScreenshotAnalysis(id={self.id}, image_name='{self.image_name}', "
            f"overall_score='{self.overall_score}')>"
        )
