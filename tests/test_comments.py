"""Comment API tests."""


def test_comment_updates_count(client, citizen, login, submit):
    report_id = submit(citizen).json()["id"]
    dana = login("dana@civichub.org")

    r = client.post(f"/reports/{report_id}/comments", headers=dana, json={"body": "Same on my block"})
    assert r.status_code == 201
    assert r.json()["author_email"] == "dana@civichub.org"
    client.post(f"/reports/{report_id}/comments", headers=citizen, json={"body": "Still dark tonight"})

    comments = client.get(f"/reports/{report_id}/comments", headers=citizen).json()
    assert [c["body"] for c in comments] == ["Same on my block", "Still dark tonight"]
    assert client.get(f"/reports/{report_id}", headers=citizen).json()["comment_count"] == 2


def test_empty_comment_rejected(client, citizen, submit):
    report_id = submit(citizen).json()["id"]

    r = client.post(f"/reports/{report_id}/comments", headers=citizen, json={"body": "   "})
    assert r.status_code == 422


def test_comment_on_missing_report(client, citizen):
    r = client.post("/reports/77/comments", headers=citizen, json={"body": "hello"})
    assert r.status_code == 404


def test_only_author_or_admin_deletes(client, citizen, login, admin, submit):
    report_id = submit(citizen).json()["id"]
    dana = login("dana@civichub.org")
    first = client.post(f"/reports/{report_id}/comments", headers=dana, json={"body": "first"}).json()["id"]
    second = client.post(f"/reports/{report_id}/comments", headers=dana, json={"body": "second"}).json()["id"]

    r = client.delete(f"/reports/{report_id}/comments/{first}", headers=citizen)
    assert r.status_code == 403

    assert client.delete(f"/reports/{report_id}/comments/{first}", headers=dana).status_code == 204
    assert client.delete(f"/reports/{report_id}/comments/{second}", headers=admin).status_code == 204
    # deleting twice is a no-op
    assert client.delete(f"/reports/{report_id}/comments/{second}", headers=admin).status_code == 204

    assert client.get(f"/reports/{report_id}/comments", headers=citizen).json() == []
    assert client.get(f"/reports/{report_id}", headers=citizen).json()["comment_count"] == 0


def test_delete_comment_from_other_report_is_not_found(client, citizen, submit):
    a = submit(citizen, title="A").json()["id"]
    b = submit(citizen, title="B").json()["id"]
    comment_id = client.post(f"/reports/{a}/comments", headers=citizen, json={"body": "on A"}).json()["id"]

    r = client.delete(f"/reports/{b}/comments/{comment_id}", headers=citizen)
    assert r.status_code == 404
