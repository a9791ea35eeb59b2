"""Feed and dashboard derivations."""

from datetime import datetime, timezone
from types import SimpleNamespace

from civichub.services.aggregation import (
    EXPORT_COLUMNS,
    export_rows,
    filter_reports,
    render_csv,
    status_counts,
    top_by_upvotes,
)


def make_report(**overrides):
    fields = {
        "id": 1,
        "title": "Pothole",
        "description": "Deep pothole near the crossing",
        "location": "123 Main Street",
        "category": "roads_potholes",
        "status": "reported",
        "sentiment": "concerned",
        "upvote_count": 0,
        "comment_count": 0,
        "photo_urls": [],
        "created_by": "casey@civichub.org",
        "created_date": datetime(2026, 3, 14, 9, 26, 53, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_status_counts_sum_to_total():
    reports = [
        make_report(id=1, status="reported"),
        make_report(id=2, status="reported"),
        make_report(id=3, status="resolved"),
        make_report(id=4, status="action_initiated"),
    ]

    counts = status_counts(reports)

    assert counts == {"reported": 2, "under_review": 0, "action_initiated": 1, "resolved": 1, "total": 4}
    assert sum(v for k, v in counts.items() if k != "total") == counts["total"]


def test_status_counts_empty():
    assert status_counts([]) == {"reported": 0, "under_review": 0, "action_initiated": 0, "resolved": 0, "total": 0}


def test_top_by_upvotes_returns_highest_descending():
    reports = [make_report(id=i, upvote_count=c) for i, c in enumerate([4, 9, 1, 7, 2])]

    top = top_by_upvotes(reports, 3)

    assert [r.upvote_count for r in top] == [9, 7, 4]


def test_top_by_upvotes_ties_keep_input_order():
    reports = [make_report(id=1, upvote_count=2), make_report(id=2, upvote_count=5), make_report(id=3, upvote_count=2)]

    assert [r.id for r in top_by_upvotes(reports, 3)] == [2, 1, 3]


def test_top_by_upvotes_handles_short_and_empty_input():
    assert top_by_upvotes([], 3) == []
    assert top_by_upvotes([make_report()], 0) == []
    assert len(top_by_upvotes([make_report()], 3)) == 1


def test_filter_with_wildcards_is_identity():
    reports = [make_report(id=3), make_report(id=1, category="other"), make_report(id=2, status="resolved")]

    assert filter_reports(reports, "", "all", "all") == reports


def test_filter_location_is_case_insensitive_substring():
    main = make_report(id=1, location="123 Main Street")
    oak = make_report(id=2, location="Oak Ave")

    assert filter_reports([main, oak], location="Main St") == [main]
    assert filter_reports([main, oak], location="main st") == [main]


def test_filter_predicates_are_anded():
    a = make_report(id=1, category="street_lights", status="reported", location="Elm St")
    b = make_report(id=2, category="street_lights", status="resolved", location="Elm St")
    c = make_report(id=3, category="other", status="reported", location="Elm St")

    assert filter_reports([a, b, c], location="elm", category="street_lights", status="reported") == [a]


def test_export_rows_excludes_closed_statuses():
    open_report = make_report(id=1, status="reported")
    resolved = make_report(id=2, status="resolved")

    rows = export_rows([open_report, resolved])

    assert len(rows) == 1
    assert rows[0]["Status"] == "reported"


def test_export_row_projection():
    report = make_report(
        status="under_review",
        category="water_sanitation",
        upvote_count=3,
        comment_count=2,
        photo_urls=["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"],
    )

    row = export_rows([report])[0]

    assert tuple(row) == EXPORT_COLUMNS
    assert row["Category"] == "Water & Sanitation"
    assert row["Status"] == "under review"
    assert row["Upvotes"] == 3
    assert row["Comments"] == 2
    assert row["Date"] == "2026-03-14 09:26"
    assert row["Photo URLs"] == "https://cdn.example.com/a.jpg, https://cdn.example.com/b.jpg"


def test_render_csv_quotes_commas_and_doubles_quotes():
    report = make_report(title='Sign says "STOP"', location="5th & Elm, north corner")

    text = render_csv(export_rows([report]))
    header, line = text.split("\n")

    assert header.startswith("Title,Description,Location,Category,Status")
    assert line.startswith('"Sign says ""STOP""",Deep pothole near the crossing,"5th & Elm, north corner",Roads & Potholes,reported')


def test_render_csv_empty():
    assert render_csv([]) == ""
