from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, get_current_session
from learnlab.schemas.chat import AIStatusResponse, ChatHistoryResponse, ChatRequest, ChatResponse
from learnlab.services.ai import AIService, get_ai_service
from learnlab.services.chat import ChatService

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """
    Ask the AI tutor about an experiment.

    The experiment's explanation is given to the model as context and the
    exchange is stored in the chat log.
    """
    return ChatService(db, ai).chat(session, request.experiment_id, request.message)


@router.get("/chat/{experiment_id}/history", response_model=ChatHistoryResponse)
def chat_history(
    experiment_id: int,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    return ChatService(db, ai).history(session, experiment_id)


@router.get("/status", response_model=AIStatusResponse)
def ai_status(ai: AIService = Depends(get_ai_service)):
    """Quick check whether the AI service is configured"""
    return AIStatusResponse(hasKey=ai.is_configured())
