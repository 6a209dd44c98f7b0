from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # FastAPI
    API_VERSION: str = "v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DB_URL: str = "sqlite:///./dooriq.db"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT: float = 60.0
    OPENAI_MAX_RETRIES: int = 3

    class Config:
        env_file = ".env"


settings = Settings()
