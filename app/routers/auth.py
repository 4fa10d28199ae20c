import logging
import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import STUDENT_YEARS, settings
from app.core.deps import get_db
from app.core.security import (
    generate_verification_code,
    hash_password,
    verification_expiry,
    verify_password,
)
from app.core.utils import as_utc, new_id, utcnow
from app.models.user import User
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    ResendRequest,
    UserCreate,
    UserRegistered,
    VerificationStatus,
    VerifyRequest,
)
from app.services.users import get_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_institutional_email(email: str) -> bool:
    pattern = rf"[a-zA-Z0-9._-]+@{re.escape(settings.email_domain)}"
    return re.fullmatch(pattern, email) is not None


def _dev_code(code: str) -> str | None:
    return code if settings.expose_verification_codes else None


def _get_user_by_email_or_404(db: Session, email: str) -> User:
    user = get_user_by_email(db, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post(
    "/register",
    response_model=UserRegistered,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid fields"},
        409: {"description": "User or email already registered"},
    },
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    if not (payload.user_id and payload.password and payload.role and payload.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    if payload.role not in ("student", "professor"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid role")
    if not _is_institutional_email(payload.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Email must be an institutional email (@{settings.email_domain})",
        )
    if payload.role == "student":
        if not payload.branch or not payload.year:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Branch and year are required for students",
            )
        if payload.year not in STUDENT_YEARS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Year must be: freshman, second year, or third year",
            )

    if get_user(db, payload.user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    code = generate_verification_code()
    is_student = payload.role == "student"
    user = User(
        id=new_id("user"),
        user_id=payload.user_id,
        hashed_password=hash_password(payload.password),
        role=payload.role,
        email=payload.email,
        name=payload.name,
        branch=payload.branch if is_student else None,
        year=payload.year if is_student else None,
        verified=False,
        verification_code=code,
        verification_code_expiry=verification_expiry(),
    )
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

    db.refresh(user)

    # no mail delivery yet: the code goes to the log
    logger.info("Verification code for %s: %s", user.email, code)

    return UserRegistered(
        user_id=user.user_id,
        role=user.role,
        id=user.id,
        email=user.email,
        verified=False,
        message="Verification code sent to your institutional email",
        verification_code=_dev_code(code),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Email not verified"},
    },
)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    if not payload.user_id or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing credentials")

    user = get_user(db, payload.user_id)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "Email not verified",
                "requiresVerification": True,
                "email": user.email,
            },
        )

    return LoginResponse(user_id=user.user_id, role=user.role, id=user.id, verified=user.verified)


@router.post("/verify", response_model=VerificationStatus, response_model_exclude_none=True)
def verify_email(payload: VerifyRequest, db: Session = Depends(get_db)):
    if not payload.email or not payload.code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing email or verification code",
        )

    user = _get_user_by_email_or_404(db, payload.email)
    if user.verified:
        return VerificationStatus(message="Email already verified", verified=True)

    if not user.verification_code or user.verification_code != payload.code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid verification code")
    if user.verification_code_expiry and as_utc(user.verification_code_expiry) < utcnow():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Verification code expired")

    user.verified = True
    user.verification_code = None
    user.verification_code_expiry = None
    db.commit()

    return VerificationStatus(message="Email verified successfully", verified=True)


# DEV ONLY
@router.get("/verification-code", response_model=VerificationStatus, response_model_exclude_none=True)
def get_verification_code(email: str | None = None, db: Session = Depends(get_db)):
    if not settings.expose_verification_codes:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing email")

    user = _get_user_by_email_or_404(db, email)
    if user.verified:
        return VerificationStatus(message="Email already verified", verified=True)
    if not user.verification_code:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No verification code found")

    return VerificationStatus(verification_code=user.verification_code)


@router.post("/resend-verification", response_model=VerificationStatus, response_model_exclude_none=True)
def resend_verification(payload: ResendRequest, db: Session = Depends(get_db)):
    if not payload.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing email")

    user = _get_user_by_email_or_404(db, payload.email)
    if user.verified:
        return VerificationStatus(message="Email already verified")

    code = generate_verification_code()
    user.verification_code = code
    user.verification_code_expiry = verification_expiry()
    db.commit()

    logger.info("Verification code resent for %s: %s", user.email, code)

    return VerificationStatus(
        message="Verification code resent to your email",
        verification_code=_dev_code(code),
    )
