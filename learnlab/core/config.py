from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./learnlab.db"
    SECRET_KEY: str = "supersecret"
    PROJECT_NAME: str = "LearnLab Backend"
    API_PREFIX: str = "/api"

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Session tokens
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Password reset tokens for invited students
    RESET_TOKEN_EXPIRE_HOURS: int = 48
    ALLOW_DEV_RESET_TOKEN: bool = False

    # Azure OpenAI Configuration
    AOAI_ENDPOINT: str = ""
    AOAI_API_KEY: str = ""
    AOAI_API_VERSION: str = "2024-02-01"
    AOAI_DEPLOY_GPT4O_MINI: str = "gpt-4o-mini"
    AI_TIMEOUT_SECONDS: float = 10.0
    AI_MAX_RETRIES: int = 1

    # Transcript source used for AI explanations
    YOUTUBE_TRANSCRIPT_URL: str = "https://www.youtube.com/api/timedtext"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
