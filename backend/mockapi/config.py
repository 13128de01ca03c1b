from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite://"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # simulated network latency applied to every dispatch
    LATENCY_MS: int = 300

    RATE_LIMIT_MAX_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMITED_PATH: str = "/limited"

    WEBHOOK_HISTORY_SIZE: int = 10

    PROTECTED_PREFIX: str = "/secure"
    VALID_TOKENS: List[str] = ["valid-token-123"]
    TOKEN_EXPIRES_AT: str = "2025-12-31"
    LOGIN_USERNAME: str = "admin"
    LOGIN_PASSWORD: str = "password123"
    SANDBOX_API_KEY: str = "sandbox-key-789"
    PRO_API_KEY: str = "pro-key-456"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
