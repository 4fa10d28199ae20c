def as_student(user_id: str = "alice") -> dict:
    return {"x-user-id": user_id, "x-role": "student"}


def as_professor(user_id: str = "p1") -> dict:
    return {"x-user-id": user_id, "x-role": "professor"}


def patch(client, submission_id: str, headers: dict, **body):
    return client.patch(f"/api/submissions/{submission_id}", headers=headers, json=body)


def test_create_submission_starts_at_version_one(create_submission):
    body = create_submission()

    assert body["status"] == "submitted"
    assert body["currentVersion"] == 1
    assert body["studentId"] == "alice"
    assert body["professorId"] == "p1"
    assert body["feedback"] == []
    assert body["grade"] is None
    assert len(body["versions"]) == 1

    first = body["versions"][0]
    assert first["version"] == 1
    assert first["contentRef"] == "/a.pdf"
    assert first["createdBy"] == "alice"
    assert first["changes"] == "Initial submission"


def test_create_requires_all_core_fields(client):
    r = client.post(
        "/api/submissions",
        headers=as_student(),
        json={"title": "HW1", "type": "pdf", "professorId": "p1"},
    )
    assert r.status_code == 400, r.text
    assert "contentRef" in r.json()["detail"]


def test_create_rejects_unknown_or_unverified_professor(client):
    for professor_id in ("nobody", "ghost", "alice"):
        r = client.post(
            "/api/submissions",
            headers=as_student(),
            json={"title": "HW1", "type": "pdf", "contentRef": "/a.pdf", "professorId": professor_id},
        )
        assert r.status_code == 400, r.text
        assert r.json()["detail"] == "Invalid professor selected"


def test_only_students_can_create(client):
    r = client.post(
        "/api/submissions",
        headers=as_professor(),
        json={"title": "HW1", "type": "pdf", "contentRef": "/a.pdf", "professorId": "p1"},
    )
    assert r.status_code == 403, r.text


def test_create_for_group_checks_membership(client, create_submission):
    body = create_submission(groupId="group_ab")
    assert body["groupId"] == "group_ab"

    payload = {
        "title": "HW1",
        "type": "pdf",
        "contentRef": "/a.pdf",
        "professorId": "p1",
        "groupId": "group_ab",
    }
    r = client.post("/api/submissions", headers=as_student("carol"), json=payload)
    assert r.status_code == 403, r.text

    payload["groupId"] = "group_missing"
    r = client.post("/api/submissions", headers=as_student("carol"), json=payload)
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "Group not found"


def test_create_notifies_professor(client, create_submission):
    create_submission()
    create_submission(student="bob", title="Group work", groupId="group_ab")

    r = client.get("/api/notifications", headers=as_professor())
    assert r.status_code == 200, r.text
    messages = {n["message"] for n in r.json()}
    assert all(n["type"] == "new_submission" for n in r.json())
    assert 'alice submitted "HW1"' in messages
    assert 'Group submission submitted "Group work"' in messages


def test_content_change_appends_version(client, create_submission):
    sub = create_submission()

    r = patch(client, sub["id"], as_student(), contentRef="/b.pdf")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["currentVersion"] == 2
    assert len(body["versions"]) == 2
    assert body["versions"][1]["changes"] == "Content updated"
    assert body["versions"][1]["contentRef"] == "/b.pdf"
    assert body["contentRef"] == "/b.pdf"
    # earlier versions are untouched
    assert body["versions"][0]["contentRef"] == "/a.pdf"


def test_same_content_ref_does_not_version(client, create_submission):
    sub = create_submission()

    r = patch(client, sub["id"], as_student(), contentRef="/a.pdf")
    assert r.status_code == 200, r.text
    assert r.json()["currentVersion"] == 1
    assert len(r.json()["versions"]) == 1


def test_title_only_update_never_versions(client, create_submission):
    sub = create_submission()

    r = patch(client, sub["id"], as_student(), title="HW1 final", type="report")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["title"] == "HW1 final"
    assert body["type"] == "report"
    assert body["currentVersion"] == 1
    assert len(body["versions"]) == 1


def test_notes_versioning_rules(client, create_submission):
    sub = create_submission(notes="draft")

    # same value: no version
    r = patch(client, sub["id"], as_student(), notes="draft")
    assert r.json()["currentVersion"] == 1

    # defined -> empty string still counts as a change
    r = patch(client, sub["id"], as_student(), notes="")
    body = r.json()
    assert body["currentVersion"] == 2
    assert body["notes"] == ""
    assert body["versions"][-1]["changes"] == "Notes updated"
    assert body["versions"][-1]["notes"] == ""
    assert body["versions"][-1]["contentRef"] == "/a.pdf"


def test_content_takes_priority_and_custom_changes_win(client, create_submission):
    sub = create_submission(notes="draft")

    r = patch(client, sub["id"], as_student(), contentRef="/b.pdf", notes="v2 notes")
    assert r.json()["versions"][-1]["changes"] == "Content updated"

    r = patch(client, sub["id"], as_student(), contentRef="/c.pdf", changes="Fixed figures")
    body = r.json()
    assert body["versions"][-1]["changes"] == "Fixed figures"
    # notes carried forward when not in the patch
    assert body["versions"][-1]["notes"] == "v2 notes"


def test_current_version_tracks_max_version(client, create_submission):
    sub = create_submission()
    edits = [
        {"contentRef": "/b.pdf"},
        {"title": "renamed"},
        {"notes": "n1"},
        {"notes": "n1"},
        {"contentRef": "/c.pdf", "notes": "n2"},
    ]
    for edit in edits:
        r = patch(client, sub["id"], as_student(), **edit)
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["currentVersion"] == max(v["version"] for v in body["versions"])

    assert body["currentVersion"] == 4
    assert [v["version"] for v in body["versions"]] == [1, 2, 3, 4]


def test_group_member_can_update_and_version(client, create_submission):
    sub = create_submission(groupId="group_ab")

    r = patch(client, sub["id"], as_student("bob"), contentRef="/bob.pdf")
    assert r.status_code == 200, r.text
    assert r.json()["versions"][-1]["createdBy"] == "bob"


def test_outsider_update_is_forbidden_and_changes_nothing(client, create_submission):
    sub = create_submission()

    r = patch(client, sub["id"], as_student("carol"), contentRef="/evil.pdf", title="mine")
    assert r.status_code == 403, r.text

    r = client.get("/api/submissions", headers=as_student())
    [stored] = r.json()
    assert stored["title"] == "HW1"
    assert stored["contentRef"] == "/a.pdf"
    assert stored["currentVersion"] == 1
    assert stored["updatedAt"] == sub["updatedAt"]


def test_update_unknown_submission_is_404(client):
    r = patch(client, "sub_missing", as_student(), title="x")
    assert r.status_code == 404, r.text


def test_student_reassigns_professor(client, create_submission):
    sub = create_submission()

    r = patch(client, sub["id"], as_student(), professorId="ghost")
    assert r.status_code == 400, r.text

    r = patch(client, sub["id"], as_student(), professorId="prof_sam")
    assert r.status_code == 200, r.text
    assert r.json()["professorId"] == "prof_sam"
    assert r.json()["currentVersion"] == 1


def test_professor_edits_never_version(client, create_submission):
    sub = create_submission(notes="draft")
    milestones = [{"label": "Outline", "date": "2026-01-10", "done": True}]

    r = patch(client, sub["id"], as_professor(), notes="see rubric", milestones=milestones, title="ignored")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["notes"] == "see rubric"
    assert body["milestones"] == milestones
    assert body["title"] == "HW1"
    assert body["currentVersion"] == 1
    assert body["versions"] == sub["versions"]


def test_unassigned_professor_cannot_update(client, create_submission):
    sub = create_submission()

    r = patch(client, sub["id"], as_professor("prof_sam"), notes="hi")
    assert r.status_code == 403, r.text


def test_student_list_includes_group_submissions(client, create_submission):
    own = create_submission()
    shared = create_submission(student="bob", title="Shared", groupId="group_ab")
    create_submission(student="carol", title="Solo")

    alice_ids = {s["id"] for s in client.get("/api/submissions", headers=as_student()).json()}
    assert alice_ids == {own["id"], shared["id"]}

    r = client.get("/api/submissions", headers=as_student("carol"))
    assert [s["title"] for s in r.json()] == ["Solo"]

    r = client.get("/api/submissions", params={"groupId": "group_ab"}, headers=as_student())
    assert [s["id"] for s in r.json()] == [shared["id"]]

    r = client.get("/api/submissions", params={"studentId": "alice"}, headers=as_student())
    assert [s["id"] for s in r.json()] == [own["id"]]


def test_professor_list_only_sees_assigned(client, create_submission):
    mine = create_submission()
    create_submission(student="bob", professorId="prof_sam")

    r = client.get("/api/submissions", headers=as_professor())
    assert r.status_code == 200, r.text
    assert [s["id"] for s in r.json()] == [mine["id"]]


def test_invalid_role_header_is_rejected(client):
    r = client.get("/api/submissions", headers={"x-user-id": "alice", "x-role": "admin"})
    assert r.status_code == 400, r.text
