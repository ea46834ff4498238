import logging

from sqlalchemy.orm import Session

from learnlab.core.exceptions import ConfigurationError, NotFoundError, ValidationError
from learnlab.core.security import AuthSession
from learnlab.repositories.chat_repository import ChatRepository
from learnlab.repositories.experiment_repository import ExperimentRepository
from learnlab.schemas.chat import ChatHistoryItem, ChatHistoryResponse, ChatResponse
from learnlab.services.ai import AIService

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(self, db: Session, ai: AIService):
        self.db = db
        self.experiment_repository = ExperimentRepository(db)
        self.chat_repository = ChatRepository(db)
        self.ai = ai

    def chat(self, session: AuthSession, experiment_id: int, message: str) -> ChatResponse:
        """Answer a student's question in the context of one experiment"""
        message = (message or "").strip()
        if not message:
            raise ValidationError("experiment_id and message required")

        if not self.ai.is_configured():
            raise ConfigurationError("AI service not configured")

        experiment = self.experiment_repository.get_by_id(experiment_id)
        if experiment is None:
            raise NotFoundError("Experiment not found")

        reply = self.ai.tutor_reply(experiment.name, experiment.explanation, message)

        self.chat_repository.create(
            {
                "student_id": session.user_id,
                "experiment_id": experiment.id,
                "user_message": message,
                "ai_response": reply,
            }
        )
        return ChatResponse(message=message, response=reply)

    def history(self, session: AuthSession, experiment_id: int) -> ChatHistoryResponse:
        messages = self.chat_repository.list_for_student(session.user_id, experiment_id)
        return ChatHistoryResponse(
            messages=[ChatHistoryItem.model_validate(message) for message in messages]
        )
