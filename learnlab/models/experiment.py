from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from learnlab.core.database import Base


class Experiment(Base):
    __tablename__ = "experiments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    youtube_url = Column(String(500), nullable=False)
    explanation = Column(Text, nullable=True)
    faculty_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    faculty = relationship("User", back_populates="experiments")
    quizzes = relationship(
        "Quiz",
        back_populates="experiment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
