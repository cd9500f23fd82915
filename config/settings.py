"""Settings configuration using pydantic-settings for environment variable management."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from dotenv import load_dotenv

load_dotenv(override=True)


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "quotes"
    DATABASE_BACKEND: str = "mongodb"
    MONGODB_TRANSACTIONS: bool = False

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: str = "*"

    APP_NAME: str = "Motivation Quotes API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("DATABASE_BACKEND", "ENVIRONMENT", mode="before")
    @classmethod
    def normalize_choice(cls, v):
        """Lowercase and trim enumerated string options."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def is_development(self) -> bool:
        """Whether error details may be exposed to API callers."""
        return self.ENVIRONMENT == "development"

    @property
    def uses_default_secret(self) -> bool:
        """Whether tokens are signed with the built-in fallback secret."""
        return self.JWT_SECRET == DEFAULT_JWT_SECRET

    def get_cors_origins(self) -> list[str]:
        """
        Parse comma-separated CORS origins into a list.

        Returns:
            List of allowed origins (e.g., ['*'] or ['https://a.example', 'https://b.example'])
        """
        if not self.CORS_ORIGINS:
            return []
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
