# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    DATABASE_URL: str = "sqlite:///./storefront.db"

    FRONTEND_URL: str = "http://localhost:3000"
    # Public API URL, default target of the HTTP client
    BACKEND_URL: str = "http://127.0.0.1:8000"
    LOG_LEVEL: str = "INFO"

    # Checkout pricing rules: flat shipping below the threshold, free above it
    SHIPPING_PRICE: float = 10.0
    FREE_SHIPPING_THRESHOLD: float = 100.0
    TAX_RATE: float = 0.15

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
