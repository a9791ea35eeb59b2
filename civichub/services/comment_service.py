"""Report comments and the report's comment_count."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from civichub.core.errors import ForbiddenError, NotFoundError, StoreError, UnauthorizedError, ValidationError
from civichub.models.comment import ReportComment
from civichub.models.report import ProblemReport
from civichub.schemas.user import Actor
from civichub.services.report_service import commit_or_raise, get_report

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 2000


def _recount(db: Session, report: ProblemReport) -> None:
    report_id = report.id
    try:
        db.flush()
        report.comment_count = db.scalar(
            select(func.count())
            .select_from(ReportComment)
            .where(ReportComment.report_id == report_id, ReportComment.is_deleted.is_(False))
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure while recounting comments on report %s", report_id)
        raise StoreError() from exc


def list_comments(db: Session, report_id: int) -> list[ReportComment]:
    """Live comments on a report, oldest first."""
    get_report(db, report_id)
    stmt = (
        select(ReportComment)
        .where(ReportComment.report_id == report_id, ReportComment.is_deleted.is_(False))
        .order_by(ReportComment.created_date.asc(), ReportComment.id.asc())
    )
    return list(db.execute(stmt).scalars().all())


def add_comment(db: Session, report_id: int, body: str, actor: Actor | None) -> ReportComment:
    if actor is None:
        raise UnauthorizedError()
    text = (body or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")

    report = db.execute(
        select(ProblemReport).where(ProblemReport.id == report_id).with_for_update()
    ).scalar_one_or_none()
    if report is None:
        raise NotFoundError()

    comment = ReportComment(report_id=report.id, author_email=actor.email, body=text)
    db.add(comment)
    _recount(db, report)
    commit_or_raise(db, "adding comment")
    db.refresh(comment)
    logger.info("Comment %s added to report %s by %s", comment.id, report_id, actor.email)
    return comment


def delete_comment(db: Session, report_id: int, comment_id: int, actor: Actor | None) -> None:
    """Soft-delete a comment. Only its author or an admin may do this."""
    if actor is None:
        raise UnauthorizedError()

    report = db.execute(
        select(ProblemReport).where(ProblemReport.id == report_id).with_for_update()
    ).scalar_one_or_none()
    if report is None:
        raise NotFoundError()

    comment = db.get(ReportComment, comment_id)
    if comment is None or comment.report_id != report_id:
        raise NotFoundError("Comment not found")
    if comment.author_email != actor.email and not actor.is_admin:
        raise ForbiddenError("Only the author or an administrator can delete this comment")
    if comment.is_deleted:
        return

    comment.is_deleted = True
    _recount(db, report)
    commit_or_raise(db, "deleting comment")
    logger.info("Comment %s on report %s deleted by %s", comment_id, report_id, actor.email)
