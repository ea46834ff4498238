from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from learnlab.core.database import Base


class BulkUpload(Base):
    __tablename__ = "bulk_uploads"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    filename = Column(String(255), nullable=False)
    total_students = Column(Integer, nullable=False, default=0)
    successful_uploads = Column(Integer, nullable=False, default=0)
    failed_uploads = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending")
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
