from fastapi import Depends, HTTPException, status

from app.core.current_user import Identity, get_current_user


def require_professor(current_user: Identity = Depends(get_current_user)) -> Identity:
    if not current_user.is_professor:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Professor role required",
        )
    return current_user


def require_student(current_user: Identity = Depends(get_current_user)) -> Identity:
    if not current_user.is_student:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student role required",
        )
    return current_user
