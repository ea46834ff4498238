from .bulk_upload import BulkUpload
from .chat import ChatMessage
from .experiment import Experiment
from .quiz import Option, Question, Quiz, QuizAttempt, StudentAnswer
from .user import PasswordReset, User, UserProfile

__all__ = [
    "User",
    "PasswordReset",
    "UserProfile",
    "Experiment",
    "Quiz",
    "Question",
    "Option",
    "QuizAttempt",
    "StudentAnswer",
    "ChatMessage",
    "BulkUpload",
]
