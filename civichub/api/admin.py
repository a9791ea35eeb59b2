"""Administrator triage and export endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from civichub.core.deps import require_admin
from civichub.core.ws_manager import notify_report_changed
from civichub.db.session import get_db
from civichub.schemas.report import ReportResponse, StatusCounts, StatusUpdate
from civichub.schemas.user import Actor
from civichub.services.aggregation import export_rows, render_csv, status_counts
from civichub.services.report_service import advance_status, list_reports

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/reports", response_model=list[ReportResponse])
def all_reports(
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    return list_reports(db, "-created_date")


@router.get("/stats", response_model=StatusCounts)
def stats(
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    return status_counts(list_reports(db))


@router.patch("/reports/{report_id}/status", response_model=ReportResponse)
def update_status(
    report_id: int,
    data: StatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    report = advance_status(db, report_id, data.status, admin)
    background_tasks.add_task(notify_report_changed, "report.updated", report.id)
    return report


@router.get("/export")
def export_csv(
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    """CSV of reports still awaiting action. 204 when there is nothing to export."""
    rows = export_rows(list_reports(db, "-created_date"))
    if not rows:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    filename = f"civic-reports-{date.today().isoformat()}.csv"
    return Response(
        content=render_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
