"""One-time import of legacy JSON data files into empty tables."""
import json
import logging
from datetime import datetime
from pathlib import Path

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import commit_or_rollback
from app.core.security import hash_password, pwd_context
from app.core.utils import new_id, to_iso, utcnow
from app.models.announcement import Announcement
from app.models.group import Group
from app.models.notification import Notification
from app.models.submission import Submission
from app.models.template import AssignmentTemplate
from app.models.user import User

logger = logging.getLogger(__name__)


def _read_json(data_dir: Path, name: str) -> list[dict]:
    path = data_dir / name
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable seed file %s", path)
        return []
    return [row for row in data if isinstance(row, dict)] if isinstance(data, list) else []


def _parse_dt(value) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _user(row: dict) -> User:
    password = row.get("password") or ""
    if pwd_context.identify(password) is None:
        password = hash_password(password)
    return User(
        id=row.get("id") or new_id("user"),
        user_id=row["userId"],
        hashed_password=password,
        role=row.get("role") or "student",
        email=row["email"],
        name=row.get("name") or row.get("Full Name"),
        profile_picture=row.get("profilePicture"),
        branch=row.get("branch"),
        year=row.get("year"),
        verified=bool(row.get("verified")),
        verification_code=row.get("verificationCode"),
        verification_code_expiry=_parse_dt(row.get("verificationCodeExpiry")),
        created_at=_parse_dt(row.get("createdAt")) or utcnow(),
    )


def _submission(row: dict) -> Submission:
    created_at = _parse_dt(row.get("createdAt")) or utcnow()
    versions = list(row.get("versions") or [])
    if not versions:
        # history predates versioning: the current content is version 1
        versions = [
            {
                "version": 1,
                "contentRef": row["contentRef"],
                "notes": row.get("notes"),
                "createdAt": to_iso(created_at),
                "createdBy": row["studentId"],
                "changes": "Initial submission",
            }
        ]
    grade = row.get("grade")
    return Submission(
        id=row.get("id") or new_id("sub"),
        student_id=row["studentId"],
        professor_id=row.get("professorId") or "",
        group_id=row.get("groupId"),
        title=row["title"],
        type=row.get("type") or "other",
        content_ref=row["contentRef"],
        notes=row.get("notes"),
        milestones=list(row.get("milestones") or []),
        feedback=list(row.get("feedback") or []),
        versions=versions,
        current_version=max(v.get("version", 1) for v in versions),
        status=row.get("status") or "submitted",
        grade=grade if isinstance(grade, (int, float)) and not isinstance(grade, bool) else None,
        created_at=created_at,
        updated_at=_parse_dt(row.get("updatedAt")) or created_at,
    )


def _announcement(row: dict) -> Announcement:
    return Announcement(
        id=row.get("id") or new_id("announcement"),
        title=row["title"],
        message=row["message"],
        pinned=row.get("pinned", True) is not False,
        created_by=row["createdBy"],
        created_at=_parse_dt(row.get("createdAt")) or utcnow(),
    )


def _group(row: dict) -> Group:
    created_at = _parse_dt(row.get("createdAt")) or utcnow()
    return Group(
        id=row.get("id") or new_id("group"),
        name=row["name"],
        description=row.get("description"),
        created_by=row["createdBy"],
        members=list(row.get("members") or [row["createdBy"]]),
        created_at=created_at,
        updated_at=_parse_dt(row.get("updatedAt")) or created_at,
    )


def _template(row: dict) -> AssignmentTemplate:
    created_at = _parse_dt(row.get("createdAt")) or utcnow()
    return AssignmentTemplate(
        id=row.get("id") or new_id("template"),
        title=row["title"],
        description=row.get("description"),
        type=row.get("type") or "other",
        instructions=row.get("instructions"),
        requirements=list(row.get("requirements") or []),
        due_date=row.get("dueDate"),
        created_by=row["createdBy"],
        created_at=created_at,
        updated_at=_parse_dt(row.get("updatedAt")) or created_at,
    )


def _notification(row: dict) -> Notification:
    return Notification(
        id=row.get("id") or new_id("notif"),
        user_id=row["userId"],
        type=row["type"],
        title=row.get("title") or "",
        message=row.get("message") or "",
        related_id=row.get("relatedId"),
        link=row.get("link"),
        read=bool(row.get("read")),
        created_at=_parse_dt(row.get("createdAt")) or utcnow(),
    )


SEEDS = (
    ("users.json", User, _user),
    ("submissions.json", Submission, _submission),
    ("announcements.json", Announcement, _announcement),
    ("groups.json", Group, _group),
    ("templates.json", AssignmentTemplate, _template),
    ("notifications.json", Notification, _notification),
)


def import_json_seeds(db: Session, data_dir: Path | None = None) -> dict[str, int]:
    """
    Fill every empty table from ``<data_dir>/<name>.json`` when that file exists.

    All tables are imported in a single transaction. Tables that already hold
    rows are left alone, so this is safe to run on every startup.
    """
    data_dir = data_dir or Path(settings.data_dir)
    imported: dict[str, int] = {}

    for filename, model, build in SEEDS:
        if db.query(model).first() is not None:
            continue
        rows = _read_json(data_dir, filename)
        if not rows:
            continue
        db.add_all(build(row) for row in rows)
        imported[model.__tablename__] = len(rows)

    if imported:
        commit_or_rollback(db)
        logger.info("Imported JSON seed data: %s", imported)
    return imported
