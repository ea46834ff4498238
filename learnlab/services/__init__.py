from .ai import AIService
from .attempt import AttemptService
from .quiz import QuizService

__all__ = ["AIService", "AttemptService", "QuizService"]
