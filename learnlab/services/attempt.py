import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from learnlab.core.exceptions import ConflictError, InternalError, NotFoundError
from learnlab.core.security import AuthSession
from learnlab.domain.grading_domain import GradingDomain, SubmittedAnswer
from learnlab.repositories.attempt_repository import AttemptRepository
from learnlab.repositories.quiz_repository import QuizRepository
from learnlab.schemas.quiz import (
    AnswerSubmission,
    AttemptListResponse,
    AttemptResponse,
    QuizSubmitResponse,
)

logger = logging.getLogger(__name__)


class AttemptService:
    def __init__(self, db: Session):
        self.db = db
        self.quiz_repository = QuizRepository(db)
        self.attempt_repository = AttemptRepository(db)

    def submit(
        self, quiz_id: int, session: AuthSession, submissions: List[AnswerSubmission]
    ) -> QuizSubmitResponse:
        """
        Grade a student's answers and record the attempt.

        A student gets one attempt per quiz. The check below and the insert
        run in the same session transaction, and the unique constraint on
        (student_id, quiz_id) rejects a concurrent duplicate that slips past
        the check.
        """
        quiz = self.quiz_repository.get_by_id(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")

        if self.attempt_repository.get_for_student(session.user_id, quiz.id) is not None:
            logger.info(f"Rejected second attempt by student {session.user_id} on quiz {quiz.id}")
            raise ConflictError("Quiz already attempted")

        answers = [SubmittedAnswer(s.question_id, s.option_id) for s in submissions]
        GradingDomain.check_answers(answers, self.quiz_repository.question_ids(quiz.id))

        options = self.quiz_repository.get_options_by_ids(a.option_id for a in answers)
        result = GradingDomain.grade(answers, options)

        try:
            self.attempt_repository.create_with_answers(session.user_id, quiz.id, result)
        except IntegrityError:
            logger.info(
                f"Concurrent attempt by student {session.user_id} on quiz {quiz.id} rejected"
            )
            raise ConflictError("Quiz already attempted")
        except SQLAlchemyError as e:
            logger.error(f"Failed to record attempt on quiz {quiz.id}: {e}")
            raise InternalError("Failed to record quiz attempt")

        return QuizSubmitResponse(
            score=result.score,
            correctCount=result.correct_count,
            totalQuestions=result.total_questions,
        )

    def list_attempts(self, quiz_id: int, session: AuthSession) -> AttemptListResponse:
        attempts = self.attempt_repository.list_for_student_quiz(session.user_id, quiz_id)
        return AttemptListResponse(
            attempts=[AttemptResponse.model_validate(attempt) for attempt in attempts]
        )
