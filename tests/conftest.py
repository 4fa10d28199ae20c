import os
import shutil
import tempfile

# settings are read at import time, so point the app at a scratch data dir first
TEST_DATA_DIR = tempfile.mkdtemp(prefix="tracker-test-")
os.environ["TRACKER_DATA_DIR"] = TEST_DATA_DIR

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.core.deps import get_db  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.models.group import Group  # noqa: E402
from app.models.user import User  # noqa: E402

TEST_DB_URL = f"sqlite:///{TEST_DATA_DIR}/test_tracker.sqlite"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def as_student(user_id: str = "alice") -> dict:
    return {"x-user-id": user_id, "x-role": "student"}


def as_professor(user_id: str = "p1") -> dict:
    return {"x-user-id": user_id, "x-role": "professor"}


def make_user(user_id: str, role: str, verified: bool = True, name: str | None = None) -> User:
    return User(
        id=f"user_{user_id}",
        user_id=user_id,
        hashed_password=PASSWORD_HASH,
        role=role,
        email=f"{user_id}@esi.ac.ma",
        name=name,
        branch="Computer Science" if role == "student" else None,
        year="second year" if role == "student" else None,
        verified=verified,
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    shutil.rmtree(TEST_DATA_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def seed_data():
    """Seed a clean minimal dataset for each test."""
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        db.add_all(
            [
                make_user("alice", "student", name="Alice Martin"),
                make_user("bob", "student", name="Bob Chen"),
                make_user("carol", "student"),
                make_user("p1", "professor", name="Prof One"),
                make_user("prof_sam", "professor", name="Sam Rivera"),
                make_user("ghost", "professor", verified=False),
            ]
        )
        db.commit()

        # alice and bob share a group
        db.add(
            Group(
                id="group_ab",
                name="Team AB",
                created_by="alice",
                members=["alice", "bob"],
            )
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def create_submission(client):
    """POST a submission as a student and return the response body."""

    def _create(student: str = "alice", **fields) -> dict:
        body = {"title": "HW1", "type": "pdf", "contentRef": "/a.pdf", "professorId": "p1"}
        body.update(fields)
        r = client.post("/api/submissions", headers=as_student(student), json=body)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
