from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

# ============================================================================
# Request Schemas
# ============================================================================


class QuizCreate(BaseModel):
    experiment_id: int = Field(..., description="Experiment the quiz belongs to", gt=0)
    title: str = Field(..., min_length=1)


class QuestionCreate(BaseModel):
    """Shape checks happen in QuestionDomain so errors come back itemized"""

    question_text: Any = None
    options: Any = None


class QuestionBatchRequest(BaseModel):
    questions: Any = Field(None, description="Array of {question, options} objects")


class GenerateQuestionsRequest(BaseModel):
    num_questions: int = Field(..., description="Number of questions to draft (1-20)")


class AnswerSubmission(BaseModel):
    question_id: int
    option_id: Optional[int] = None


class QuizSubmitRequest(BaseModel):
    answers: List[AnswerSubmission]


# ============================================================================
# Response Schemas
# ============================================================================


class QuizResponse(BaseModel):
    id: int
    experiment_id: int
    title: str

    class Config:
        from_attributes = True


class QuizSummary(BaseModel):
    id: int
    title: str

    class Config:
        from_attributes = True


class OptionResponse(BaseModel):
    id: int
    option_text: str
    # Only present for the owning faculty member
    is_correct: Optional[bool] = None


class QuestionResponse(BaseModel):
    id: int
    question_text: str
    options: List[OptionResponse]


class QuizDetailResponse(BaseModel):
    id: int
    experiment_id: int
    title: str
    created_at: Optional[datetime] = None
    questions: List[QuestionResponse]


class CreatedOption(BaseModel):
    id: int
    text: str
    is_correct: bool


class QuestionCreatedResponse(BaseModel):
    question_id: int
    question_text: str
    options: List[CreatedOption]


class BatchCreatedResponse(BaseModel):
    created: int = Field(..., description="Number of questions written")


class DraftOption(BaseModel):
    text: str
    is_correct: bool


class DraftQuestion(BaseModel):
    question: str
    options: List[DraftOption]


class GeneratedQuestionsResponse(BaseModel):
    questions: List[DraftQuestion]


class QuizSubmitResponse(BaseModel):
    score: float = Field(..., description="Percentage of correct answers (0-100)")
    correctCount: int
    totalQuestions: int


class AttemptResponse(BaseModel):
    id: int
    score: float
    total_questions: int
    attempted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AttemptListResponse(BaseModel):
    attempts: List[AttemptResponse]
