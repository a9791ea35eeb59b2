"""Closed value sets for reports and users."""

from __future__ import annotations

import enum

WILDCARD = "all"
MAX_PHOTOS = 5


class Category(str, enum.Enum):
    roads_potholes = "roads_potholes"
    water_sanitation = "water_sanitation"
    street_lights = "street_lights"
    garbage_waste = "garbage_waste"
    parks_recreation = "parks_recreation"
    public_safety = "public_safety"
    other = "other"


CATEGORY_LABELS: dict[str, str] = {
    "roads_potholes": "Roads & Potholes",
    "water_sanitation": "Water & Sanitation",
    "street_lights": "Street Lights",
    "garbage_waste": "Garbage & Waste",
    "parks_recreation": "Parks & Recreation",
    "public_safety": "Public Safety",
    "other": "Other",
}


class ReportStatus(str, enum.Enum):
    """Administrative triage state. Admins may move between any two values."""

    reported = "reported"
    under_review = "under_review"
    action_initiated = "action_initiated"
    resolved = "resolved"


# Statuses still awaiting action; these are the ones exported for authorities
EXPORTABLE_STATUSES = frozenset({ReportStatus.reported.value, ReportStatus.under_review.value})


class Sentiment(str, enum.Enum):
    urgent = "urgent"
    concerned = "concerned"
    neutral = "neutral"
    positive = "positive"


class Role(str, enum.Enum):
    citizen = "citizen"
    admin = "admin"
