def as_student(user_id: str = "alice") -> dict:
    return {"x-user-id": user_id, "x-role": "student"}


def as_professor(user_id: str = "p1") -> dict:
    return {"x-user-id": user_id, "x-role": "professor"}


def post_announcement(client, **body) -> dict:
    r = client.post("/api/announcements", headers=as_professor(), json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_students_only_see_pinned_announcements(client):
    pinned = post_announcement(client, title=" Exam ", message="Room B12")
    post_announcement(client, title="Draft", message="not yet", pinned=False)

    assert pinned["title"] == "Exam"
    assert pinned["pinned"] is True

    r = client.get("/api/announcements", headers=as_student())
    assert [a["title"] for a in r.json()] == ["Exam"]

    r = client.get("/api/announcements", headers=as_professor())
    assert {a["title"] for a in r.json()} == {"Exam", "Draft"}


def test_announcement_validation_and_roles(client):
    r = client.post("/api/announcements", headers=as_student(), json={"title": "x", "message": "y"})
    assert r.status_code == 403, r.text

    r = client.post("/api/announcements", headers=as_professor(), json={"title": "x", "message": "  "})
    assert r.status_code == 400, r.text


def test_update_and_delete_announcement(client):
    announcement = post_announcement(client, title="Exam", message="Room B12")
    url = f"/api/announcements/{announcement['id']}"

    r = client.patch(url, headers=as_professor("prof_sam"), json={"pinned": False, "message": "Room C3"})
    assert r.status_code == 200, r.text
    assert r.json()["pinned"] is False
    assert r.json()["message"] == "Room C3"

    # pinned must be a real boolean
    r = client.patch(url, headers=as_professor(), json={"pinned": "yes"})
    assert r.status_code == 422, r.text

    assert client.delete(url, headers=as_student()).status_code == 403
    assert client.delete(url, headers=as_professor()).json() == {"success": True}
    assert client.delete(url, headers=as_professor()).status_code == 404


def test_template_lifecycle(client):
    r = client.post(
        "/api/templates",
        headers=as_professor(),
        json={
            "title": "Lab report",
            "type": "report",
            "requirements": ["Intro", "Results"],
            "dueDate": "2026-12-01",
        },
    )
    assert r.status_code == 201, r.text
    template = r.json()
    assert template["requirements"] == ["Intro", "Results"]
    assert template["createdBy"] == "p1"

    # everyone can browse
    r = client.get("/api/templates", headers=as_student())
    assert [t["id"] for t in r.json()] == [template["id"]]
    r = client.get(f"/api/templates/{template['id']}", headers=as_student())
    assert r.json()["dueDate"] == "2026-12-01"

    url = f"/api/templates/{template['id']}"
    r = client.patch(url, headers=as_professor("prof_sam"), json={"title": "Mine now"})
    assert r.status_code == 403, r.text

    r = client.patch(url, headers=as_professor(), json={"instructions": "Use LaTeX", "requirements": None})
    assert r.status_code == 200, r.text
    assert r.json()["instructions"] == "Use LaTeX"
    assert r.json()["requirements"] == []
    assert r.json()["title"] == "Lab report"

    assert client.delete(url, headers=as_professor("prof_sam")).status_code == 403
    assert client.delete(url, headers=as_professor()).status_code == 200
    assert client.get(url, headers=as_student()).status_code == 404


def test_template_requires_title_and_type(client):
    r = client.post("/api/templates", headers=as_professor(), json={"title": "No type"})
    assert r.status_code == 400, r.text

    r = client.post("/api/templates", headers=as_student(), json={"title": "x", "type": "pdf"})
    assert r.status_code == 403, r.text


def test_notifications_read_flow(client, create_submission):
    create_submission(title="A")
    create_submission(title="B")

    r = client.get("/api/notifications/unread-count", headers=as_professor())
    assert r.json() == {"count": 2}

    notifications = client.get("/api/notifications", headers=as_professor()).json()
    target = notifications[0]["id"]

    # someone else's notification is invisible
    r = client.patch(f"/api/notifications/{target}/read", headers=as_professor("prof_sam"))
    assert r.status_code == 404, r.text

    r = client.patch(f"/api/notifications/{target}/read", headers=as_professor())
    assert r.status_code == 200, r.text
    assert r.json()["read"] is True
    assert client.get("/api/notifications/unread-count", headers=as_professor()).json() == {"count": 1}

    r = client.patch("/api/notifications/read-all", headers=as_professor())
    assert r.status_code == 200, r.text
    assert client.get("/api/notifications/unread-count", headers=as_professor()).json() == {"count": 0}
