from dataclasses import dataclass
from typing import Literal

from fastapi import Header, HTTPException, Request, status

Role = Literal["student", "professor"]


@dataclass(frozen=True)
class Identity:
    """Who is making the request. Passed explicitly into every service call."""

    user_id: str
    role: Role

    @property
    def is_student(self) -> bool:
        return self.role == "student"

    @property
    def is_professor(self) -> bool:
        return self.role == "professor"


# DEV ONLY: identity comes from two trusted headers, nothing is verified.
def get_current_user(
    request: Request,
    x_user_id: str | None = Header(default=None),
    x_role: str | None = Header(default=None),
) -> Identity:
    user_id = x_user_id or "anon"
    role = x_role or "student"
    if role not in ("student", "professor"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid role: {role}",
        )

    identity = Identity(user_id=user_id, role=role)
    # picked up by LoggingMiddleware
    request.state.identity = identity
    return identity
