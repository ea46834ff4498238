from typing import List

from sqlalchemy.orm import Session

from learnlab.models.chat import ChatMessage


class ChatRepository:
    """Repository for the append-only tutor chat log"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, message_data: dict) -> ChatMessage:
        db_message = ChatMessage(**message_data)
        self.db.add(db_message)
        self.db.commit()
        self.db.refresh(db_message)
        return db_message

    def list_for_student(self, student_id: int, experiment_id: int) -> List[ChatMessage]:
        return (
            self.db.query(ChatMessage)
            .filter(
                ChatMessage.student_id == student_id,
                ChatMessage.experiment_id == experiment_id,
            )
            .order_by(ChatMessage.id)
            .all()
        )
