from typing import List

from sqlalchemy.orm import Session

from learnlab.models.bulk_upload import BulkUpload


class BulkUploadRepository:
    """Repository for the bulk roster import audit log"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, upload_data: dict) -> BulkUpload:
        db_upload = BulkUpload(**upload_data)
        self.db.add(db_upload)
        self.db.commit()
        self.db.refresh(db_upload)
        return db_upload

    def list_by_faculty(self, faculty_id: int) -> List[BulkUpload]:
        """Get a faculty member's imports, newest first"""
        return (
            self.db.query(BulkUpload)
            .filter(BulkUpload.faculty_id == faculty_id)
            .order_by(BulkUpload.uploaded_at.desc(), BulkUpload.id.desc())
            .all()
        )
