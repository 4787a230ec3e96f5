"""
Copydesk Backend — Content Standard SQLAlchemy Model
======================================================

What:  ORM mapping of the `content_standards` table.
Who:   Read by the analysis service; every row with status 'active' becomes
       grounding context for the review prompt.

Column names follow the glossary-style schema (term_definition / guidance /
correct_examples / incorrect_examples). The earlier definition / do_examples /
dont_examples layout is not supported.
"""

from sqlalchemy import String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from copydesk.database import Base


class ContentStandard(Base):
    """A single content rule: what a term means and how (not) to write it."""

    __tablename__ = "content_standards"

    # Human-facing identifiers such as "CS-012"; the model cites them back
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)

    term_definition: Mapped[str | None] = mapped_column(Text, nullable=True)
    guidance: Mapped[str | None] = mapped_column(Text, nullable=True)
    correct_examples: Mapped[str | None] = mapped_column(Text, nullable=True)
    incorrect_examples: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Values: 'active' | 'inactive'
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="active",
        server_default=text("'active'"),
    )

    def __repr__(self) -> str:
        return f"<ContentStandard(id='{self.id}', title='{self.title}', status='{self.status}')>"
