"""Admin triage and export tests."""


def test_non_admin_cannot_change_status(client, citizen, submit):
    report_id = submit(citizen).json()["id"]

    r = client.patch(f"/admin/reports/{report_id}/status", headers=citizen, json={"status": "resolved"})
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"

    assert client.get(f"/reports/{report_id}", headers=citizen).json()["status"] == "reported"


def test_admin_changes_status(client, citizen, admin, submit):
    report_id = submit(citizen).json()["id"]

    r = client.patch(f"/admin/reports/{report_id}/status", headers=admin, json={"status": "under_review"})
    assert r.status_code == 200
    assert r.json()["status"] == "under_review"

    # no forward-only constraint
    r = client.patch(f"/admin/reports/{report_id}/status", headers=admin, json={"status": "reported"})
    assert r.json()["status"] == "reported"


def test_admin_unknown_status(client, citizen, admin, submit):
    report_id = submit(citizen).json()["id"]

    r = client.patch(f"/admin/reports/{report_id}/status", headers=admin, json={"status": "archived"})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_status"


def test_admin_endpoints_reject_citizens(client, citizen):
    assert client.get("/admin/reports", headers=citizen).status_code == 403
    assert client.get("/admin/stats", headers=citizen).status_code == 403
    assert client.get("/admin/export", headers=citizen).status_code == 403


def test_admin_stats(client, citizen, admin, submit):
    ids = [submit(citizen, title=f"R{i}").json()["id"] for i in range(3)]
    client.patch(f"/admin/reports/{ids[0]}/status", headers=admin, json={"status": "action_initiated"})

    stats = client.get("/admin/stats", headers=admin).json()
    assert stats == {"reported": 2, "under_review": 0, "action_initiated": 1, "resolved": 0, "total": 3}
    assert len(client.get("/admin/reports", headers=admin).json()) == 3


def test_export_only_open_reports(client, citizen, admin, submit):
    submit(citizen, title="Open issue", location="Elm St, north")
    closed = submit(citizen, title="Fixed issue").json()["id"]
    client.patch(f"/admin/reports/{closed}/status", headers=admin, json={"status": "resolved"})

    r = client.get("/admin/export", headers=admin)

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="civic-reports-' in r.headers["content-disposition"]
    lines = r.text.split("\n")
    assert len(lines) == 2
    assert lines[0].startswith("Title,Description,Location,Category,Status,Upvotes")
    assert lines[1].startswith('Open issue,Pole #4 dark for a week,"Elm St, north",Street Lights,reported,0,0,concerned,citizen@civichub.org,')


def test_export_with_nothing_open(client, admin):
    r = client.get("/admin/export", headers=admin)
    assert r.status_code == 204
