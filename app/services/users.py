from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.user import User


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def list_verified(db: Session, role: str) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == role, User.verified.is_(True))
        .order_by(User.user_id)
        .all()
    )


def list_all_users(db: Session) -> list[User]:
    return db.query(User).all()


def ensure_verified_professor(db: Session, professor_id: str) -> User:
    professor = get_user(db, professor_id)
    if not professor or professor.role != "professor" or not professor.verified:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid professor selected",
        )
    return professor
