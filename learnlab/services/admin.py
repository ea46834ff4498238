import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnlab.core.exceptions import NotFoundError, ValidationError
from learnlab.core.security import hash_password
from learnlab.repositories.user_repository import UserRepository
from learnlab.schemas.admin import FacultyCreate, FacultyResponse

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)

    def list_faculty(self) -> List[FacultyResponse]:
        return [
            FacultyResponse.model_validate(user)
            for user in self.user_repository.list_by_role("faculty")
        ]

    def create_faculty(self, request: FacultyCreate) -> FacultyResponse:
        if self.user_repository.get_by_email(request.email) is not None:
            raise ValidationError("Email already exists")
        try:
            user = self.user_repository.create(
                {
                    "email": request.email,
                    "password": hash_password(request.password),
                    "name": request.name,
                    "role": "faculty",
                }
            )
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("Email already exists")
        logger.info(f"Faculty account {user.id} created")
        return FacultyResponse.model_validate(user)

    def delete_faculty(self, faculty_id: int) -> None:
        """Remove a faculty account; its experiments and quizzes go with it"""
        user = self.user_repository.get_by_id_and_role(faculty_id, "faculty")
        if user is None:
            raise NotFoundError("Faculty not found")
        self.user_repository.delete(user)
        logger.info(f"Faculty account {faculty_id} deleted")
