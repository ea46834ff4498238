import logging
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from learnlab.core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    InternalError,
    NotFoundError,
    ParseError,
    ValidationError,
)
from learnlab.core.security import AuthSession
from learnlab.domain.question_domain import QuestionDomain, QuestionSource
from learnlab.models.quiz import Quiz
from learnlab.repositories.experiment_repository import ExperimentRepository
from learnlab.repositories.quiz_repository import QuizRepository
from learnlab.schemas.quiz import (
    BatchCreatedResponse,
    CreatedOption,
    DraftOption,
    DraftQuestion,
    GeneratedQuestionsResponse,
    OptionResponse,
    QuestionCreatedResponse,
    QuestionResponse,
    QuizCreate,
    QuizDetailResponse,
    QuizResponse,
    QuizSummary,
)
from learnlab.services.ai import AIService

logger = logging.getLogger(__name__)

MIN_GENERATED_QUESTIONS = 1
MAX_GENERATED_QUESTIONS = 20


class QuizService:
    def __init__(self, db: Session, ai: Optional[AIService] = None):
        self.db = db
        self.quiz_repository = QuizRepository(db)
        self.experiment_repository = ExperimentRepository(db)
        self.ai = ai

    def _get_owned_quiz(self, quiz_id: int, session: AuthSession) -> Quiz:
        """Load a quiz and check the caller owns its experiment"""
        quiz = self.quiz_repository.get_by_id(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        if quiz.experiment is None or quiz.experiment.faculty_id != session.user_id:
            raise AuthorizationError("Not authorized to modify this quiz")
        return quiz

    def create_quiz(self, session: AuthSession, request: QuizCreate) -> QuizResponse:
        experiment = self.experiment_repository.get_by_id(request.experiment_id)
        if experiment is None:
            raise NotFoundError("Experiment not found")
        if experiment.faculty_id != session.user_id:
            raise AuthorizationError("Not authorized to add quizzes to this experiment")

        quiz = self.quiz_repository.create(
            {"experiment_id": experiment.id, "title": request.title.strip()}
        )
        logger.info(f"Quiz {quiz.id} created under experiment {experiment.id}")
        return QuizResponse.model_validate(quiz)

    def add_question(
        self, quiz_id: int, session: AuthSession, question_text: Any, options: Any
    ) -> QuestionCreatedResponse:
        """Validate and persist one question with its options as a unit"""
        quiz = self._get_owned_quiz(quiz_id, session)

        item = {"question_text": question_text, "options": options}
        errors = QuestionDomain.validate_question(item, QuestionSource.MANUAL)
        if errors:
            raise ValidationError("; ".join(errors))

        try:
            (question,) = self.quiz_repository.add_questions(
                quiz.id, [QuestionDomain.sanitize_question(item)]
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to create question for quiz {quiz.id}: {e}")
            raise InternalError("Failed to create question")

        return QuestionCreatedResponse(
            question_id=question.id,
            question_text=question.question_text,
            options=[
                CreatedOption(id=option.id, text=option.option_text, is_correct=option.is_correct)
                for option in question.options
            ],
        )

    def add_questions_batch(
        self, quiz_id: int, session: AuthSession, questions: Any
    ) -> BatchCreatedResponse:
        """
        Validate every question first, then write all of them or none.

        Invalid items are reported by index with every rule they break.
        Write failures roll back and surface as a generic error; the cause
        is only logged.
        """
        quiz = self._get_owned_quiz(quiz_id, session)

        if not isinstance(questions, list) or not questions:
            raise ValidationError("questions must be a non-empty array")

        validation = QuestionDomain.validate_question_set(questions, QuestionSource.MANUAL)
        if not validation.is_valid:
            raise ValidationError("One or more questions invalid", invalid=validation.invalid)

        try:
            created = self.quiz_repository.add_questions(quiz.id, validation.questions)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to create questions batch for quiz {quiz.id} "
                f"({len(validation.questions)} questions): {e}"
            )
            raise InternalError("Failed to create questions batch")

        logger.info(f"Created {len(created)} questions for quiz {quiz.id}")
        return BatchCreatedResponse(created=len(created))

    def generate_questions(
        self, quiz_id: int, session: AuthSession, num_questions: int
    ) -> GeneratedQuestionsResponse:
        """Draft questions with the AI service; nothing is persisted"""
        if not MIN_GENERATED_QUESTIONS <= num_questions <= MAX_GENERATED_QUESTIONS:
            raise ValidationError(
                f"num_questions must be between {MIN_GENERATED_QUESTIONS} "
                f"and {MAX_GENERATED_QUESTIONS}"
            )

        quiz = self._get_owned_quiz(quiz_id, session)

        if self.ai is None or not self.ai.is_configured():
            raise ConfigurationError("AI service not configured")

        experiment = self.experiment_repository.get_by_id(quiz.experiment_id)
        if experiment is None:
            raise NotFoundError("Experiment not found")

        reply = self.ai.draft_questions(experiment.name, experiment.explanation, num_questions)
        try:
            parsed = QuestionDomain.extract_json_array(reply)
        except ParseError:
            preview = reply[:200] if isinstance(reply, str) else str(reply)
            logger.error(f"AI parse error for generated questions, reply preview: {preview!r}")
            raise

        validation = QuestionDomain.validate_question_set(parsed, QuestionSource.AI)
        if not validation.is_valid:
            logger.warning(
                f"AI returned {len(validation.invalid)} invalid questions for quiz {quiz.id}"
            )
            raise ValidationError(
                "One or more generated questions are invalid", invalid=validation.invalid
            )

        if len(validation.questions) != num_questions:
            logger.warning(
                f"AI returned {len(validation.questions)} questions for quiz {quiz.id}, "
                f"expected {num_questions}"
            )
            raise ValidationError(
                f"AI returned {len(validation.questions)} questions, expected {num_questions}"
            )

        return GeneratedQuestionsResponse(
            questions=[
                DraftQuestion(
                    question=question.question_text,
                    options=[
                        DraftOption(text=option.text, is_correct=option.is_correct)
                        for option in question.options
                    ],
                )
                for question in validation.questions
            ]
        )

    def get_quiz(self, quiz_id: int, session: AuthSession) -> QuizDetailResponse:
        quiz = self.quiz_repository.get_with_questions(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")

        # Answer keys are only shown to the quiz owner
        show_answers = quiz.experiment is not None and quiz.experiment.faculty_id == session.user_id
        return QuizDetailResponse(
            id=quiz.id,
            experiment_id=quiz.experiment_id,
            title=quiz.title,
            created_at=quiz.created_at,
            questions=[
                QuestionResponse(
                    id=question.id,
                    question_text=question.question_text,
                    options=[
                        OptionResponse(
                            id=option.id,
                            option_text=option.option_text,
                            is_correct=option.is_correct if show_answers else None,
                        )
                        for option in question.options
                    ],
                )
                for question in quiz.questions
            ],
        )

    def list_by_experiment(self, experiment_id: int) -> List[QuizSummary]:
        return [
            QuizSummary.model_validate(quiz)
            for quiz in self.quiz_repository.list_by_experiment(experiment_id)
        ]
