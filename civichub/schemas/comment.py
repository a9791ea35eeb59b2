"""Comment schemas."""

from datetime import datetime

from pydantic import BaseModel


class CommentCreate(BaseModel):
    body: str = ""


class CommentResponse(BaseModel):
    id: int
    report_id: int
    author_email: str
    body: str
    created_date: datetime

    model_config = {"from_attributes": True}
