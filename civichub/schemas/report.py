"""Problem report schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ReportCreate(BaseModel):
    """Submission payload.

    Required-field checks live in the lifecycle service so that missing input
    surfaces as a ``ValidationError`` rather than a framework error.
    """

    title: str = ""
    description: str = ""
    location: str = ""
    category: str = ""
    photo_urls: list[str] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    status: str


class ReportResponse(BaseModel):
    id: int
    title: str
    description: str
    location: str
    category: str
    status: str
    sentiment: str
    upvote_count: int
    comment_count: int
    upvoters: list[str]
    photo_urls: list[str]
    created_by: str
    created_date: datetime
    updated_date: datetime

    model_config = {"from_attributes": True}


class StatusCounts(BaseModel):
    reported: int = 0
    under_review: int = 0
    action_initiated: int = 0
    resolved: int = 0
    total: int = 0
