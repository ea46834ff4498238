import logging
from typing import List

from sqlalchemy.orm import Session

from learnlab.core.config import settings
from learnlab.core.exceptions import NotFoundError
from learnlab.repositories.attempt_repository import AttemptRepository
from learnlab.repositories.user_repository import UserRepository
from learnlab.schemas.student import (
    ProgressAttempt,
    StudentInviteRequest,
    StudentInviteResponse,
    StudentProgressResponse,
    StudentResponse,
)
from learnlab.services.provisioning import StudentProvisioner

logger = logging.getLogger(__name__)


class StudentService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)
        self.attempt_repository = AttemptRepository(db)
        self.provisioner = StudentProvisioner(db)

    def list_students(self) -> List[StudentResponse]:
        return [
            StudentResponse.model_validate(user)
            for user in self.user_repository.list_by_role("student")
        ]

    def get_progress(self, student_id: int) -> StudentProgressResponse:
        student = self.user_repository.get_by_id_and_role(student_id, "student")
        if student is None:
            raise NotFoundError("Student not found")

        rows = self.attempt_repository.list_with_quiz_titles(student.id)
        return StudentProgressResponse(
            student=StudentResponse.model_validate(student),
            attempts=[
                ProgressAttempt(
                    id=attempt.id,
                    title=title,
                    score=attempt.score,
                    total_questions=attempt.total_questions,
                    attempted_at=attempt.attempted_at,
                )
                for attempt, title in rows
            ],
        )

    def invite(self, request: StudentInviteRequest) -> StudentInviteResponse:
        provisioned = self.provisioner.provision(request.name, request.email)

        allow_dev_token = (
            settings.ALLOW_DEV_RESET_TOKEN and settings.ENVIRONMENT != "production"
        )
        if allow_dev_token:
            logger.warning(
                "SECURITY WARNING: DEV ONLY - returning password reset token in API "
                "response. Do NOT enable in production."
            )
            return StudentInviteResponse(
                message=(
                    "Student invited successfully. A password reset link has been generated."
                ),
                user_id=provisioned.user.id,
                expires_at=provisioned.expires_at,
                debug_reset_token=provisioned.raw_token,
            )

        return StudentInviteResponse(
            message=(
                "Student invited successfully. A password reset link has been "
                "generated and will be sent via email."
            ),
            user_id=provisioned.user.id,
            expires_at=provisioned.expires_at,
        )
