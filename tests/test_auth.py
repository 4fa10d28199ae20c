from datetime import timedelta

from app.core.utils import utcnow
from app.models.user import User


def register(client, **overrides):
    body = {
        "userId": "dave",
        "password": "secret123",
        "role": "student",
        "email": "dave@esi.ac.ma",
        "name": "Dave",
        "branch": "Computer Science",
        "year": "freshman",
    }
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def login(client, user_id: str, password: str):
    return client.post("/api/auth/login", json={"userId": user_id, "password": password})


def test_register_then_verify_then_login(client):
    r = register(client)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["userId"] == "dave"
    assert body["verified"] is False
    code = body["verificationCode"]
    assert len(code) == 6 and code.isdigit()

    r = login(client, "dave", "secret123")
    assert r.status_code == 403, r.text
    assert r.json()["detail"]["requiresVerification"] is True
    assert r.json()["detail"]["email"] == "dave@esi.ac.ma"

    r = client.post("/api/auth/verify", json={"email": "dave@esi.ac.ma", "code": code})
    assert r.status_code == 200, r.text
    assert r.json()["verified"] is True

    r = login(client, "dave", "secret123")
    assert r.status_code == 200, r.text
    assert r.json() == {"userId": "dave", "role": "student", "id": body["id"], "verified": True}


def test_login_rejects_bad_credentials(client):
    assert login(client, "alice", "wrong").status_code == 401
    assert login(client, "nobody", "password123").status_code == 401
    assert login(client, "alice", "password123").status_code == 200


def test_register_validation(client):
    r = register(client, email="dave@gmail.com")
    assert r.status_code == 400, r.text

    r = register(client, branch=None)
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "Branch and year are required for students"

    r = register(client, year="fourth year")
    assert r.status_code == 400, r.text

    r = register(client, role="admin")
    assert r.status_code == 400, r.text

    r = register(client, password=None)
    assert r.status_code == 400, r.text


def test_professors_skip_branch_and_year(client, db):
    r = register(client, userId="prof_new", email="prof_new@esi.ac.ma", role="professor", branch=None, year=None)
    assert r.status_code == 201, r.text

    user = db.get(User, "prof_new")
    assert user.branch is None
    assert user.year is None
    assert user.hashed_password != "secret123"


def test_register_conflicts(client):
    r = register(client, userId="alice", email="other@esi.ac.ma")
    assert r.status_code == 409, r.text
    assert r.json()["detail"] == "User already exists"

    r = register(client, email="alice@esi.ac.ma")
    assert r.status_code == 409, r.text
    assert r.json()["detail"] == "Email already registered"


def test_verify_rejects_wrong_and_expired_codes(client, db):
    code = register(client).json()["verificationCode"]
    wrong = "000000" if code != "000000" else "111111"

    r = client.post("/api/auth/verify", json={"email": "dave@esi.ac.ma", "code": wrong})
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "Invalid verification code"

    user = db.get(User, "dave")
    user.verification_code_expiry = utcnow() - timedelta(hours=1)
    db.commit()

    r = client.post("/api/auth/verify", json={"email": "dave@esi.ac.ma", "code": code})
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "Verification code expired"

    r = client.post("/api/auth/verify", json={"email": "nobody@esi.ac.ma", "code": code})
    assert r.status_code == 404, r.text


def test_resend_and_lookup_verification_code(client):
    register(client)

    r = client.post("/api/auth/resend-verification", json={"email": "dave@esi.ac.ma"})
    assert r.status_code == 200, r.text
    resent = r.json()["verificationCode"]

    r = client.get("/api/auth/verification-code", params={"email": "dave@esi.ac.ma"})
    assert r.status_code == 200, r.text
    assert r.json()["verificationCode"] == resent

    r = client.post("/api/auth/resend-verification", json={"email": "alice@esi.ac.ma"})
    assert r.json() == {"message": "Email already verified"}


def test_professor_directory_lists_verified_only(client):
    r = client.get("/api/professors")
    assert r.status_code == 200, r.text
    assert [p["userId"] for p in r.json()] == ["p1", "prof_sam"]
    assert r.json()[1]["name"] == "Sam Rivera"


def test_all_students(client):
    r = client.get("/api/user/all-students", headers={"x-user-id": "p1", "x-role": "professor"})
    assert r.status_code == 200, r.text
    assert [s["userId"] for s in r.json()] == ["alice", "bob", "carol"]


def test_profile_read_and_update(client):
    headers = {"x-user-id": "alice", "x-role": "student"}

    r = client.get("/api/user/profile", headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["email"] == "alice@esi.ac.ma"
    assert "hashedPassword" not in r.json()
    assert "verificationCode" not in r.json()

    r = client.patch(
        "/api/user/profile",
        headers=headers,
        json={"name": "Alice M.", "year": "third year", "profilePicture": "/uploads/me.png"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Alice M."
    assert r.json()["year"] == "third year"
    assert r.json()["profilePicture"] == "/uploads/me.png"

    # unknown year is ignored
    r = client.patch("/api/user/profile", headers=headers, json={"year": "postdoc"})
    assert r.json()["year"] == "third year"


def test_user_lookup_is_professor_only(client):
    r = client.get("/api/user/bob", headers={"x-user-id": "p1", "x-role": "professor"})
    assert r.status_code == 200, r.text
    assert r.json()["userId"] == "bob"

    r = client.get("/api/user/bob", headers={"x-user-id": "alice", "x-role": "student"})
    assert r.status_code == 403, r.text

    r = client.get("/api/user/nobody", headers={"x-user-id": "p1", "x-role": "professor"})
    assert r.status_code == 404, r.text
