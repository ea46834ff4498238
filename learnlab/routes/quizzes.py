from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, get_current_session, require_role
from learnlab.schemas.quiz import (
    AttemptListResponse,
    BatchCreatedResponse,
    GeneratedQuestionsResponse,
    GenerateQuestionsRequest,
    QuestionBatchRequest,
    QuestionCreate,
    QuestionCreatedResponse,
    QuizCreate,
    QuizDetailResponse,
    QuizResponse,
    QuizSubmitRequest,
    QuizSubmitResponse,
    QuizSummary,
)
from learnlab.services.ai import AIService, get_ai_service
from learnlab.services.attempt import AttemptService
from learnlab.services.quiz import QuizService

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz(
    request: QuizCreate,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    """Create a quiz under an experiment owned by the caller"""
    return QuizService(db).create_quiz(session, request)


@router.post(
    "/{quiz_id}/questions/batch",
    response_model=BatchCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_questions_batch(
    quiz_id: int,
    request: QuestionBatchRequest,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    """
    Add many questions at once, all or nothing.

    Every question is validated before anything is written. If any question
    is invalid the response is 400 with an `invalid` list of
    `{index, errors}` entries and no question is created.

    **Request Body Example:**
    ```json
    {
        "questions": [
            {
                "question": "What does litmus paper detect?",
                "options": [
                    {"text": "Acidity", "is_correct": true},
                    {"text": "Temperature", "is_correct": false}
                ]
            }
        ]
    }
    ```
    """
    return QuizService(db).add_questions_batch(quiz_id, session, request.questions)


@router.post(
    "/{quiz_id}/questions",
    response_model=QuestionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_question(
    quiz_id: int,
    request: QuestionCreate,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
):
    """Add one question with at least two options, exactly one of them correct"""
    return QuizService(db).add_question(
        quiz_id, session, request.question_text, request.options
    )


@router.post(
    "/{quiz_id}/generate-questions",
    response_model=GeneratedQuestionsResponse,
    status_code=status.HTTP_200_OK,
)
def generate_questions(
    quiz_id: int,
    request: GenerateQuestionsRequest,
    session: AuthSession = Depends(require_role("faculty")),
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """
    Draft multiple choice questions about the quiz's experiment with AI.

    Nothing is saved: review the drafts, then send the ones to keep to
    `/quizzes/{quiz_id}/questions/batch`.
    """
    return QuizService(db, ai).generate_questions(quiz_id, session, request.num_questions)


@router.get("/experiment/{experiment_id}", response_model=List[QuizSummary])
def list_quizzes_for_experiment(experiment_id: int, db: Session = Depends(get_db)):
    return QuizService(db).list_by_experiment(experiment_id)


@router.get(
    "/{quiz_id}",
    response_model=QuizDetailResponse,
    response_model_exclude_none=True,
)
def get_quiz(
    quiz_id: int,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get a quiz with its questions; answer keys are shown to the owner only"""
    return QuizService(db).get_quiz(quiz_id, session)


@router.post("/{quiz_id}/submit", response_model=QuizSubmitResponse)
def submit_quiz(
    quiz_id: int,
    request: QuizSubmitRequest,
    session: AuthSession = Depends(require_role("student")),
    db: Session = Depends(get_db),
):
    """Grade and record the caller's single attempt at a quiz"""
    return AttemptService(db).submit(quiz_id, session, request.answers)


@router.get("/{quiz_id}/attempts", response_model=AttemptListResponse)
def list_attempts(
    quiz_id: int,
    session: AuthSession = Depends(require_role("student")),
    db: Session = Depends(get_db),
):
    return AttemptService(db).list_attempts(quiz_id, session)
