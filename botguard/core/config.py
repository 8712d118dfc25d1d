import os
from typing import Any, Dict, List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import validator, model_validator

DEV_SECRET_KEY = "botguard-dev-only-secret-key-change-me"
MIN_SECRET_KEY_LENGTH = 32


class Settings(BaseSettings):
    """Application settings."""

    # App config
    PROJECT_NAME: str = "BotGuard"
    PROJECT_VERSION: str = "0.1.0"
    PROJECT_DESCRIPTION: str = "Captcha-protected authentication API"
    APP_ENV: str = "development"
    DEBUG: bool = True
    API_PREFIX: str = "/api/v1"
    DOCS_URL: str = "/docs"
    OPENAPI_URL: str = "/openapi.json"
    REDOC_URL: str = "/redoc"

    # Server Config
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8000

    # Security
    SECRET_KEY: str = os.environ.get("SECRET_KEY", DEV_SECRET_KEY)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # First admin, created on startup when both are set
    FIRST_ADMIN_EMAIL: Optional[str] = None
    FIRST_ADMIN_PASSWORD: Optional[str] = None
    FIRST_ADMIN_NAME: str = "Admin"

    # CAPTCHA policy. Provider selection and credentials live in the
    # settings table, these only tune how verification behaves.
    CAPTCHA_COMPANY_ID: int = 1
    CAPTCHA_VERIFY_TIMEOUT: float = 10.0
    CAPTCHA_FAIL_OPEN: bool = True
    RECAPTCHA_MIN_SCORE: float = 0.5
    RECAPTCHA_EXPECTED_ACTION: Optional[str] = None
    TURNSTILE_VERIFY_URL: str = (
        "https://challenges.cloudflare.com/turnstile/v0/siteverify"
    )
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    TURNSTILE_SCRIPT_URL: str = (
        "https://challenges.cloudflare.com/turnstile/v0/api.js?render=explicit"
    )
    RECAPTCHA_SCRIPT_URL: str = "https://www.google.com/recaptcha/api.js"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./botguard.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" hoặc "json"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @validator("APP_ENV")
    def validate_app_env(cls, v: str) -> str:
        """Validate app environment."""
        allowed_envs = {"development", "testing", "staging", "production"}
        if v not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of: {', '.join(allowed_envs)}")
        return v

    @validator("LOG_FORMAT")
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"text", "json"}:
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    @validator("RECAPTCHA_MIN_SCORE")
    def validate_min_score(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("RECAPTCHA_MIN_SCORE must be between 0.0 and 1.0")
        return v

    @model_validator(mode="after")
    def set_debug_based_on_env(self) -> "Settings":
        """Set DEBUG based on APP_ENV."""
        if self.APP_ENV == "production":
            self.DEBUG = False
        return self

    @model_validator(mode="after")
    def check_secret_key(self) -> "Settings":
        """Không cho chạy production với secret key mặc định hoặc quá ngắn."""
        if self.APP_ENV == "production" and (
            self.SECRET_KEY == DEV_SECRET_KEY
            or len(self.SECRET_KEY) < MIN_SECRET_KEY_LENGTH
        ):
            raise ValueError(
                f"SECRET_KEY must be set to at least {MIN_SECRET_KEY_LENGTH} "
                "characters in production"
            )
        return self

    @property
    def fastapi_kwargs(self) -> Dict[str, Any]:
        """
        Get FastAPI configuration.

        Returns:
            Dictionary with FastAPI configuration
        """
        return {
            "debug": self.DEBUG,
            "docs_url": self.DOCS_URL if self.DEBUG else None,
            "openapi_url": self.OPENAPI_URL if self.DEBUG else None,
            "redoc_url": self.REDOC_URL if self.DEBUG else None,
            "title": self.PROJECT_NAME,
            "version": self.PROJECT_VERSION,
            "description": self.PROJECT_DESCRIPTION,
        }

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance
    """
    return Settings()
