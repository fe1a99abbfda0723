"""
Application configuration from environment variables.
Loads .env from the backend directory so the signing secret is found regardless of cwd.
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"

# .env next to backend/ (parent of app/): load explicitly so keys are set even when run from repo root
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database: sqlite for local runs and tests, postgresql for production
    database_url: str = "sqlite:///./store_ratings.db"
    # Pool bounds apply to non-SQLite engines only
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_connect_timeout_seconds: int = 10

    # Environment: set ENV=production in production; used to enforce SECRET_KEY.
    env: str = ""

    # JWT. Read once at startup; never mutated afterwards.
    secret_key: str = DEFAULT_SECRET_KEY
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24

    bcrypt_rounds: int = 10

    # Self-registration may request role=admin only when this is on.
    allow_admin_self_registration: bool = False

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000"

    @field_validator("bcrypt_rounds")
    @classmethod
    def _check_rounds(cls, v: int) -> int:
        # bcrypt.gensalt accepts 4..31
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
