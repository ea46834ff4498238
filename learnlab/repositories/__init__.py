from .attempt_repository import AttemptRepository
from .bulk_upload_repository import BulkUploadRepository
from .chat_repository import ChatRepository
from .experiment_repository import ExperimentRepository
from .profile_repository import ProfileRepository
from .quiz_repository import QuizRepository
from .user_repository import PasswordResetRepository, UserRepository

__all__ = [
    "AttemptRepository",
    "BulkUploadRepository",
    "ChatRepository",
    "ExperimentRepository",
    "PasswordResetRepository",
    "ProfileRepository",
    "QuizRepository",
    "UserRepository",
]
