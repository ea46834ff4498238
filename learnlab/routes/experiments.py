from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, require_role
from learnlab.schemas.common import MessageResponse
from learnlab.schemas.experiment import ExperimentCreate, ExperimentResponse, ExperimentUpdate
from learnlab.services.ai import AIService, get_ai_service
from learnlab.services.experiment import ExperimentService

router = APIRouter(prefix="/experiments", tags=["experiments"])


@router.post("", response_model=ExperimentResponse, status_code=status.HTTP_201_CREATED)
def create_experiment(
    request: ExperimentCreate,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """
    Create an experiment.

    When no explanation is given, one is generated from the video transcript
    (or a placeholder pointing at the video when AI is unavailable).
    """
    return ExperimentService(db, ai).create(session, request)


@router.get("", response_model=List[ExperimentResponse])
def list_experiments(
    db: Session = Depends(get_db), ai: AIService = Depends(get_ai_service)
):
    return ExperimentService(db, ai).list_all()


@router.get("/{experiment_id}", response_model=ExperimentResponse)
def get_experiment(
    experiment_id: int,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    return ExperimentService(db, ai).get(experiment_id)


@router.put("/{experiment_id}", response_model=ExperimentResponse)
def update_experiment(
    experiment_id: int,
    request: ExperimentUpdate,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    return ExperimentService(db, ai).update(experiment_id, session, request)


@router.delete("/{experiment_id}", response_model=MessageResponse)
def delete_experiment(
    experiment_id: int,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    ExperimentService(db, ai).delete(experiment_id, session)
    return MessageResponse(message="Experiment deleted")
