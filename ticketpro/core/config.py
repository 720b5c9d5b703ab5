from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "BD TicketPro API"
    API_PREFIX: str = "/api"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    DATABASE_URL: str = "sqlite:///./bd-ticketpro.db"

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Accept bare file paths (bd-ticketpro.db) as SQLite URLs."""
        if v and "://" not in v:
            return "sqlite:///" + v
        return v
    REDIS_URL: str = "redis://localhost:6379/0"

    LOCK_HOURS: int = 24
    BOOKING_HOLD_HOURS: int = 24

    LOG_LEVEL: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() in ("prod", "production")


settings = Settings()
