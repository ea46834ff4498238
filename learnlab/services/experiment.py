import logging
from typing import List

from sqlalchemy.orm import Session

from learnlab.core.exceptions import AuthorizationError, NotFoundError
from learnlab.core.security import AuthSession
from learnlab.models.experiment import Experiment
from learnlab.repositories.experiment_repository import ExperimentRepository
from learnlab.schemas.experiment import ExperimentCreate, ExperimentResponse, ExperimentUpdate
from learnlab.services.ai import AIService

logger = logging.getLogger(__name__)


class ExperimentService:
    def __init__(self, db: Session, ai: AIService):
        self.db = db
        self.experiment_repository = ExperimentRepository(db)
        self.ai = ai

    def _get_owned(self, experiment_id: int, session: AuthSession) -> Experiment:
        experiment = self.experiment_repository.get_by_id(experiment_id)
        if experiment is None:
            raise NotFoundError("Experiment not found")
        if experiment.faculty_id != session.user_id:
            raise AuthorizationError("Not authorized")
        return experiment

    def create(self, session: AuthSession, request: ExperimentCreate) -> ExperimentResponse:
        explanation = (request.explanation or "").strip()
        if not explanation:
            explanation = self.ai.generate_explanation(request.youtube_url)

        experiment = self.experiment_repository.create(
            {
                "name": request.name,
                "youtube_url": request.youtube_url,
                "explanation": explanation,
                "faculty_id": session.user_id,
            }
        )
        logger.info(f"Experiment {experiment.id} created by faculty {session.user_id}")
        return ExperimentResponse.model_validate(experiment)

    def list_all(self) -> List[ExperimentResponse]:
        return [
            ExperimentResponse.model_validate(experiment)
            for experiment in self.experiment_repository.get_all()
        ]

    def get(self, experiment_id: int) -> ExperimentResponse:
        experiment = self.experiment_repository.get_by_id(experiment_id)
        if experiment is None:
            raise NotFoundError("Experiment not found")
        return ExperimentResponse.model_validate(experiment)

    def update(
        self, experiment_id: int, session: AuthSession, request: ExperimentUpdate
    ) -> ExperimentResponse:
        experiment = self._get_owned(experiment_id, session)

        new_name = request.name if request.name is not None else experiment.name
        new_youtube_url = (
            request.youtube_url if request.youtube_url is not None else experiment.youtube_url
        )

        # Regenerate only when the video changed and no text was supplied
        manual = (request.explanation or "").strip()
        if manual:
            new_explanation = manual
        elif request.youtube_url and request.youtube_url != experiment.youtube_url:
            new_explanation = self.ai.generate_explanation(new_youtube_url)
        else:
            new_explanation = experiment.explanation

        experiment = self.experiment_repository.update(
            experiment,
            {
                "name": new_name,
                "youtube_url": new_youtube_url,
                "explanation": new_explanation,
            },
        )
        return ExperimentResponse.model_validate(experiment)

    def delete(self, experiment_id: int, session: AuthSession) -> None:
        experiment = self._get_owned(experiment_id, session)
        self.experiment_repository.delete(experiment)
        logger.info(f"Experiment {experiment_id} deleted by faculty {session.user_id}")
