"""Problem report model and its upvote set."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from civichub.db.base import Base


class ProblemReport(Base):
    """A citizen-submitted civic issue.

    ``upvote_count`` mirrors the number of ``ReportUpvote`` rows and
    ``comment_count`` the number of live comments; both are only written by
    the services that change the underlying rows, inside the same transaction.
    """

    __tablename__ = "problem_reports"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="reported", index=True)
    sentiment: Mapped[str] = mapped_column(String(20), nullable=False)
    upvote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    photo_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    upvotes: Mapped[list["ReportUpvote"]] = relationship(
        back_populates="report",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ReportUpvote.id",
    )

    @property
    def upvoters(self) -> list[str]:
        return [u.voter_email for u in self.upvotes]


class ReportUpvote(Base):
    """One user's support for one report."""

    __tablename__ = "report_upvotes"
    __table_args__ = (UniqueConstraint("report_id", "voter_email", name="uq_report_upvote_voter"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    report_id: Mapped[int] = mapped_column(
        ForeignKey("problem_reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    voter_email: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    report: Mapped[ProblemReport] = relationship(back_populates="upvotes")
