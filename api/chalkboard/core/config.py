from pydantic_settings import BaseSettings
from dotenv import load_dotenv
import logging
import os
from pathlib import Path

_logger = logging.getLogger(__name__)

# Load .env explicitly before creating Settings: api directory, then env/, then the working directory
api_dir = Path(__file__).parent.parent.parent
candidates = [api_dir / ".env", api_dir.parent / "env" / ".env", Path(".env")]

for env_path in candidates:
    if env_path.exists():
        load_dotenv(env_path, override=False)
        _logger.info(f"Loaded .env file from: {env_path.absolute()}")
        break
else:
    _logger.warning(f".env file not found in any of: {', '.join(str(p) for p in candidates)}")


DEVELOPMENT_ENVIRONMENTS = ("development", "dev", "local", "test")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - Supabase provides a Postgres connection string
    database_url: str = ""

    # Runtime
    environment: str = "production"

    # CORS
    cors_origins: list[str] = ["*"]

    # Tokens
    jwt_secret: str = ""
    jwt_expires_hours: int = 12

    # Google Generative AI (Gemini) API
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_timeout_seconds: float = 45.0
    gemini_max_attempts: int = 3

    # One-time passcodes
    otp_expiry_minutes: int = 10

    # Outbound email (SMTP relay)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **kwargs):
        # Supabase and most hosts expose DATABASE_URL uppercase
        if not kwargs.get("database_url"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        if not kwargs.get("gemini_api_key"):
            kwargs["gemini_api_key"] = os.getenv("GEMINI_API_KEY", "")
        super().__init__(**kwargs)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in DEVELOPMENT_ENVIRONMENTS

    @property
    def sqlalchemy_database_url(self) -> str:
        # SQLAlchemy prefers postgresql:// over postgres://
        if self.database_url.startswith("postgres://"):
            return self.database_url.replace("postgres://", "postgresql://", 1)
        return self.database_url


# Create settings instance
settings = Settings()

# Validate required DATABASE_URL
if not settings.database_url:
    raise ValueError("DATABASE_URL environment variable is required")
