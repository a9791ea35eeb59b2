"""SQLAlchemy models."""

from __future__ import annotations

from civichub.models.comment import ReportComment
from civichub.models.report import ProblemReport, ReportUpvote
from civichub.models.user import User

__all__ = [
    "User",
    "ProblemReport",
    "ReportUpvote",
    "ReportComment",
]
