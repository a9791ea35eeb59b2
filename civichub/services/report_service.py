"""Report lifecycle: creation, upvote toggling, status changes and store reads."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from civichub.core.errors import (
    ClassificationError,
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from civichub.models.enums import MAX_PHOTOS, Category, ReportStatus, Sentiment
from civichub.models.report import ProblemReport, ReportUpvote
from civichub.schemas.report import ReportCreate
from civichub.schemas.user import Actor
from civichub.services.sentiment_service import Classifier, classify_sentiment

logger = logging.getLogger(__name__)

SORT_KEYS = {
    "created_date": (ProblemReport.created_date.asc(), ProblemReport.id.asc()),
    "-created_date": (ProblemReport.created_date.desc(), ProblemReport.id.desc()),
    "upvote_count": (ProblemReport.upvote_count.asc(), ProblemReport.id.asc()),
    "-upvote_count": (ProblemReport.upvote_count.desc(), ProblemReport.id.desc()),
}


def commit_or_raise(db: Session, what: str) -> None:
    """Commit or roll back; store failures surface as StoreError."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure while %s", what)
        raise StoreError() from exc


def _require_actor(actor: Actor | None) -> Actor:
    if actor is None or not actor.email:
        raise UnauthorizedError()
    return actor


def _order_by(sort: str):
    try:
        return SORT_KEYS[sort]
    except KeyError:
        raise ValidationError(f"Unsupported sort key '{sort}'") from None


def validate_report_input(data: ReportCreate) -> None:
    """Reject incomplete submissions before anything else happens."""
    fields = (data.title, data.description, data.location, data.category)
    if any(not value or not value.strip() for value in fields):
        raise ValidationError("Please fill in all required fields")
    if data.category not in {c.value for c in Category}:
        raise ValidationError(f"Unknown category '{data.category}'")
    if len(data.photo_urls) > MAX_PHOTOS:
        raise ValidationError(f"Maximum {MAX_PHOTOS} photos allowed")


def create_report(
    db: Session,
    data: ReportCreate,
    actor: Actor | None,
    classify: Classifier = classify_sentiment,
) -> ProblemReport:
    """Classify, then persist a new report.

    Classification runs before any write; if it fails no report is stored.
    """
    actor = _require_actor(actor)
    validate_report_input(data)

    title = data.title.strip()
    description = data.description.strip()
    label = classify(title, description)
    try:
        sentiment = Sentiment(label)
    except ValueError as exc:
        raise ClassificationError(f"Classifier returned an unknown label: {label!r}") from exc

    report = ProblemReport(
        title=title,
        description=description,
        location=data.location.strip(),
        category=data.category,
        status=ReportStatus.reported.value,
        sentiment=sentiment.value,
        upvote_count=0,
        comment_count=0,
        photo_urls=list(data.photo_urls),
        created_by=actor.email,
    )
    db.add(report)
    commit_or_raise(db, "creating report")
    db.refresh(report)
    logger.info("Report %s created by %s (sentiment=%s)", report.id, actor.email, report.sentiment)
    return report


def get_report(db: Session, report_id: int) -> ProblemReport:
    report = db.get(ProblemReport, report_id)
    if report is None:
        raise NotFoundError()
    return report


def list_reports(db: Session, sort: str = "-created_date") -> list[ProblemReport]:
    stmt = select(ProblemReport).order_by(*_order_by(sort))
    return list(db.execute(stmt).scalars().all())


def filter_reports_by(
    db: Session,
    *,
    created_by: str | None = None,
    status: str | None = None,
    category: str | None = None,
    sort: str = "-created_date",
) -> list[ProblemReport]:
    """Equality filter over stored reports (e.g. a user's own reports)."""
    stmt = select(ProblemReport)
    if created_by is not None:
        stmt = stmt.where(ProblemReport.created_by == created_by)
    if status is not None:
        stmt = stmt.where(ProblemReport.status == status)
    if category is not None:
        stmt = stmt.where(ProblemReport.category == category)
    stmt = stmt.order_by(*_order_by(sort))
    return list(db.execute(stmt).scalars().all())


def toggle_upvote(db: Session, report_id: int, actor: Actor | None) -> ProblemReport:
    """Flip the actor's membership in the report's upvote set.

    The report row is locked for the duration of the transaction so toggles
    from different users serialize, and ``upvote_count`` is recounted from
    the upvote rows before the same commit.
    """
    actor = _require_actor(actor)

    report = db.execute(
        select(ProblemReport).where(ProblemReport.id == report_id).with_for_update()
    ).scalar_one_or_none()
    if report is None:
        raise NotFoundError()

    existing = db.execute(
        select(ReportUpvote).where(
            ReportUpvote.report_id == report.id,
            ReportUpvote.voter_email == actor.email,
        )
    ).scalar_one_or_none()

    try:
        if existing is not None:
            db.delete(existing)
        else:
            db.add(ReportUpvote(report_id=report.id, voter_email=actor.email))
        db.flush()
        report.upvote_count = db.scalar(
            select(func.count()).select_from(ReportUpvote).where(ReportUpvote.report_id == report.id)
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure while toggling upvote on report %s", report_id)
        raise StoreError() from exc

    commit_or_raise(db, "toggling upvote")
    db.refresh(report)
    logger.info(
        "Upvote %s on report %s by %s (count=%s)",
        "removed" if existing is not None else "added",
        report.id,
        actor.email,
        report.upvote_count,
    )
    return report


def advance_status(db: Session, report_id: int, new_status: str, actor: Actor | None) -> ProblemReport:
    """Set a report's triage status. Admin only; any status may follow any other."""
    actor = _require_actor(actor)
    if not actor.is_admin:
        raise ForbiddenError("Only administrators can change report status")
    if new_status not in {s.value for s in ReportStatus}:
        raise InvalidStatusError(f"Unknown report status '{new_status}'")

    report = get_report(db, report_id)
    previous = report.status
    report.status = new_status
    commit_or_raise(db, "updating report status")
    db.refresh(report)
    logger.info("Report %s status %s -> %s by %s", report.id, previous, new_status, actor.email)
    return report
