from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, require_role
from learnlab.schemas.student import (
    StudentInviteRequest,
    StudentInviteResponse,
    StudentProgressResponse,
    StudentResponse,
)
from learnlab.services.student import StudentService

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=List[StudentResponse])
def list_students(
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    return StudentService(db).list_students()


@router.get("/{student_id}/progress", response_model=StudentProgressResponse)
def student_progress(
    student_id: int,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    return StudentService(db).get_progress(student_id)


@router.post(
    "",
    response_model=StudentInviteResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def invite_student(
    request: StudentInviteRequest,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    """
    Create a student account with a one-time password reset token.

    The account starts with a random password and must set its own through
    `/auth/reset-password`. The token itself is stored hashed and is not
    returned outside development setups.
    """
    return StudentService(db).invite(request)
