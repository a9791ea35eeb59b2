"""Citizen-facing report endpoints: submit, browse, upvote."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from civichub.core.deps import get_actor, get_classifier
from civichub.core.ws_manager import notify_report_changed
from civichub.db.session import get_db
from civichub.models.enums import WILDCARD
from civichub.schemas.report import ReportCreate, ReportResponse, StatusCounts
from civichub.schemas.user import Actor
from civichub.services.aggregation import filter_reports, status_counts, top_by_upvotes
from civichub.services.report_service import (
    create_report,
    filter_reports_by,
    get_report,
    list_reports,
    toggle_upvote,
)
from civichub.services.sentiment_service import Classifier

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def submit_report(
    data: ReportCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    classify: Classifier = Depends(get_classifier),
):
    """Submit a report. Sentiment is assigned before it is saved."""
    report = create_report(db, data, actor, classify)
    background_tasks.add_task(notify_report_changed, "report.created", report.id)
    return report


@router.get("", response_model=list[ReportResponse])
def feed(
    location: str = Query(default=""),
    category: str = Query(default=WILDCARD),
    status: str = Query(default=WILDCARD),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Community feed, newest first, with optional filters."""
    return filter_reports(list_reports(db, "-created_date"), location, category, status)


@router.get("/top", response_model=list[ReportResponse])
def top_reports(
    n: int = Query(default=3, ge=1, le=50),
    location: str = Query(default=""),
    category: str = Query(default=WILDCARD),
    status: str = Query(default=WILDCARD),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Most supported reports within the current filters."""
    reports = filter_reports(list_reports(db, "-created_date"), location, category, status)
    return top_by_upvotes(reports, n)


@router.get("/mine", response_model=list[ReportResponse])
def my_reports(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return filter_reports_by(db, created_by=actor.email, sort="-created_date")


@router.get("/mine/stats", response_model=StatusCounts)
def my_report_stats(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return status_counts(filter_reports_by(db, created_by=actor.email))


@router.get("/{report_id}", response_model=ReportResponse)
def report_details(
    report_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return get_report(db, report_id)


@router.post("/{report_id}/upvote", response_model=ReportResponse)
def upvote(
    report_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Toggle the current user's support for a report."""
    report = toggle_upvote(db, report_id, actor)
    background_tasks.add_task(notify_report_changed, "report.updated", report.id)
    return report
