"""Report comment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from civichub.core.deps import get_actor
from civichub.core.ws_manager import notify_report_changed
from civichub.db.session import get_db
from civichub.schemas.comment import CommentCreate, CommentResponse
from civichub.schemas.user import Actor
from civichub.services.comment_service import add_comment, delete_comment, list_comments

router = APIRouter(prefix="/reports/{report_id}/comments", tags=["comments"])


@router.get("", response_model=list[CommentResponse])
def get_comments(
    report_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return list_comments(db, report_id)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def post_comment(
    report_id: int,
    data: CommentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    comment = add_comment(db, report_id, data.body, actor)
    background_tasks.add_task(notify_report_changed, "report.comments_changed", report_id)
    return comment


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_comment(
    report_id: int,
    comment_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Soft-delete a comment (author or admin)."""
    delete_comment(db, report_id, comment_id, actor)
    background_tasks.add_task(notify_report_changed, "report.comments_changed", report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
