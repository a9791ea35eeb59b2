"""Dashboard and feed derivations over report snapshots.

Everything here is pure: functions take any sequence of objects exposing the
report attributes (ORM rows or response models) and never touch the store.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from civichub.models.enums import CATEGORY_LABELS, EXPORTABLE_STATUSES, WILDCARD, ReportStatus, Sentiment

EXPORT_COLUMNS = (
    "Title",
    "Description",
    "Location",
    "Category",
    "Status",
    "Upvotes",
    "Comments",
    "Sentiment",
    "Reported By",
    "Date",
    "Photo URLs",
)
EXPORT_DATE_FORMAT = "%Y-%m-%d %H:%M"


def _value(item: Any) -> Any:
    """Enum members compare and print by value."""
    return getattr(item, "value", item)


def status_counts(reports: Sequence[Any]) -> dict[str, int]:
    counts = {s.value: 0 for s in ReportStatus}
    for report in reports:
        status = _value(report.status)
        counts[status] = counts.get(status, 0) + 1
    counts["total"] = len(reports)
    return counts


def top_by_upvotes(reports: Sequence[Any], n: int) -> list[Any]:
    """The ``n`` most upvoted reports, highest first; ties keep input order."""
    if n <= 0:
        return []
    return sorted(reports, key=lambda r: r.upvote_count or 0, reverse=True)[:n]


def filter_reports(
    reports: Sequence[Any],
    location: str | None = "",
    category: str | None = WILDCARD,
    status: str | None = WILDCARD,
) -> list[Any]:
    """Apply the feed's location, category and status filters (ANDed)."""
    needle = (location or "").lower()
    category = category or WILDCARD
    status = status or WILDCARD

    def matches(report: Any) -> bool:
        if needle and needle not in (report.location or "").lower():
            return False
        if category != WILDCARD and _value(report.category) != category:
            return False
        if status != WILDCARD and _value(report.status) != status:
            return False
        return True

    return [r for r in reports if matches(r)]


def _format_date(value: datetime | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.strftime(EXPORT_DATE_FORMAT)


def export_rows(reports: Sequence[Any]) -> list[dict[str, Any]]:
    """Flatten open reports (reported / under review) for authorities."""
    rows = []
    for report in reports:
        status = _value(report.status)
        if status not in EXPORTABLE_STATUSES:
            continue
        category = _value(report.category)
        rows.append(
            {
                "Title": report.title,
                "Description": report.description,
                "Location": report.location,
                "Category": CATEGORY_LABELS.get(category, category),
                "Status": status.replace("_", " "),
                "Upvotes": report.upvote_count or 0,
                "Comments": report.comment_count or 0,
                "Sentiment": _value(report.sentiment) or Sentiment.neutral.value,
                "Reported By": report.created_by,
                "Date": _format_date(report.created_date),
                "Photo URLs": ", ".join(report.photo_urls or []),
            }
        )
    return rows


def render_csv(rows: Sequence[dict[str, Any]]) -> str:
    """Serialize export rows; header comes from the first row's keys."""
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()), lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")
