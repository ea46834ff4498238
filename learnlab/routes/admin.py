from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, require_role
from learnlab.schemas.admin import FacultyCreate, FacultyResponse
from learnlab.schemas.common import MessageResponse
from learnlab.services.admin import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/faculty", response_model=List[FacultyResponse])
def list_faculty(
    session: AuthSession = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    return AdminService(db).list_faculty()


@router.post("/faculty", response_model=FacultyResponse, status_code=status.HTTP_201_CREATED)
def create_faculty(
    request: FacultyCreate,
    session: AuthSession = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    return AdminService(db).create_faculty(request)


@router.delete("/faculty/{faculty_id}", response_model=MessageResponse)
def delete_faculty(
    faculty_id: int,
    session: AuthSession = Depends(require_role("admin")),
    db: Session = Depends(get_db),
):
    """⚠️ Removes the account together with its experiments and quizzes"""
    AdminService(db).delete_faculty(faculty_id)
    return MessageResponse(message="Faculty deleted")
