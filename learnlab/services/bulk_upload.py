import logging
from typing import Any, List, Optional, Sequence

from sqlalchemy.orm import Session

from learnlab.core.exceptions import AppError, ValidationError
from learnlab.core.security import AuthSession
from learnlab.repositories.bulk_upload_repository import BulkUploadRepository
from learnlab.schemas.bulk_upload import (
    BulkUploadHistoryItem,
    BulkUploadResponse,
    Invite,
    RosterRow,
)
from learnlab.services.provisioning import StudentProvisioner

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 10
DEFAULT_FILENAME = "bulk_upload.csv"


class BulkUploadService:
    def __init__(self, db: Session):
        self.db = db
        self.bulk_upload_repository = BulkUploadRepository(db)
        self.provisioner = StudentProvisioner(db)

    def import_students(
        self,
        session: AuthSession,
        rows: Optional[Sequence[Any]],
        filename: Optional[str] = None,
    ) -> BulkUploadResponse:
        """
        Provision each roster row independently.

        A failing row is recorded and skipped; it never aborts the rows after
        it. Reset tokens are stored hashed and never returned.
        """
        if not rows:
            raise ValidationError("Students array required")

        successful = 0
        errors: List[str] = []
        invites: List[Invite] = []

        for entry in rows:
            row = _coerce_row(entry)
            name = (row.name or "").strip()
            email = (row.email or "").strip()
            if not name or not email:
                errors.append("Row skipped: Missing name or email")
                continue
            try:
                provisioned = self.provisioner.provision(name, email, row.password)
            except AppError as e:
                errors.append(e.message)
                continue
            except Exception as e:
                self.db.rollback()
                logger.error(f"Error creating student {email}: {e}")
                errors.append(f"Error creating student {email}")
                continue

            invites.append(
                Invite(
                    email=email,
                    user_id=provisioned.user.id,
                    expires_at=provisioned.expires_at,
                )
            )
            successful += 1

        failed = len(rows) - successful
        self.bulk_upload_repository.create(
            {
                "faculty_id": session.user_id,
                "filename": filename or DEFAULT_FILENAME,
                "total_students": len(rows),
                "successful_uploads": successful,
                "failed_uploads": failed,
                "status": "completed",
            }
        )
        logger.info(
            f"Bulk upload by faculty {session.user_id}: "
            f"{successful} of {len(rows)} students created"
        )

        return BulkUploadResponse(
            total=len(rows),
            successful=successful,
            failed=failed,
            errors=errors[:MAX_REPORTED_ERRORS],
            invites=invites,
        )

    def history(self, session: AuthSession) -> List[BulkUploadHistoryItem]:
        return [
            BulkUploadHistoryItem.model_validate(upload)
            for upload in self.bulk_upload_repository.list_by_faculty(session.user_id)
        ]


def _coerce_row(entry: Any) -> RosterRow:
    """Non-object entries and non-string fields become blanks for that row"""
    if not isinstance(entry, dict):
        return RosterRow()

    def text(key: str) -> Optional[str]:
        value = entry.get(key)
        return value if isinstance(value, str) else None

    return RosterRow(name=text("name"), email=text("email"), password=text("password"))
